"""
Provisioning errors raised by this package.

Errors coming from the Google Cloud or Kubernetes clients are not wrapped;
they propagate as-is so the operator sees the provider's own message.
"""


class ProvisioningError(Exception):
    """Base class for errors raised by the provisioning workflow."""


class VersionResolutionError(ProvisioningError):
    """The GKE version catalog returned no usable control-plane version."""


class ClusterOperationError(ProvisioningError):
    """A long-running GKE cluster operation finished with an error."""

    def __init__(self, operation_name: str, message: str):
        super().__init__(message)
        self.operation_name = operation_name
