"""Utility modules for the provisioning workflow."""

from .resource_naming import (
    get_kubeconfig_context_name,
    get_cluster_path,
    get_operation_path,
    get_resource_urn,
)

__all__ = [
    'get_kubeconfig_context_name',
    'get_cluster_path',
    'get_operation_path',
    'get_resource_urn',
]
