"""
pickard-infra - GKE cluster provisioning and demo workload deployment.

Usage:
    from pickard_infra.config import get_settings
    from pickard_infra.workflow import ProvisioningWorkflow

    result = await ProvisioningWorkflow(get_settings()).run()
"""

__version__ = "0.1.0"
