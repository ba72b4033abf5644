"""
Kubernetes Module

- KubernetesClient: Applies namespaces, deployments and services to one cluster
- create_cluster_client: Builds a KubernetesClient once a PendingCluster resolves
- Manifest helpers: Namespace, Deployment and Service manifests from specs
"""

from .client import KubernetesClient, create_cluster_client
from .helpers import (
    create_namespace_manifest,
    create_deployment_manifest,
    create_service_manifest,
)

__all__ = [
    # Client
    "KubernetesClient",
    "create_cluster_client",
    # Manifest Helpers
    "create_namespace_manifest",
    "create_deployment_manifest",
    "create_service_manifest",
]
