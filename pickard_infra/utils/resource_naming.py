"""
Resource naming utilities for clusters and Kubernetes objects.

Centralized functions for generating consistent identifiers across:
- ClusterManager API resource paths
- kubeconfig context names
- Resource URNs printed for operators
"""


def get_kubeconfig_context_name(cluster_name: str) -> str:
    """
    Get the kubeconfig context (and cluster/user entry) name for a cluster.

    Examples:
        >>> get_kubeconfig_context_name("demo-cluster")
        "demo_demo-cluster"
    """
    return f"demo_{cluster_name}"


def get_cluster_path(project: str, location: str, cluster_name: str) -> str:
    """
    Get the ClusterManager resource path of a cluster.

    Examples:
        >>> get_cluster_path("my-project", "us-central1-a", "demo-cluster")
        "projects/my-project/locations/us-central1-a/clusters/demo-cluster"
    """
    return f"projects/{project}/locations/{location}/clusters/{cluster_name}"


def get_operation_path(project: str, location: str, operation_name: str) -> str:
    """
    Get the ClusterManager resource path of a long-running operation.

    Operation objects only carry their short name (operation-123...), but
    get_operation expects the full path.
    """
    if operation_name.startswith("projects/"):
        return operation_name
    return f"projects/{project}/locations/{location}/operations/{operation_name}"


def get_resource_urn(stack: str, project: str, resource_type: str, name: str) -> str:
    """
    Get the URN identifying an applied resource.

    Args:
        stack: Stack name (dev, prod, ...)
        project: Project name
        resource_type: Type token, e.g. "kubernetes:apps/v1:Deployment"
        name: Resource name

    Returns:
        URN string: "urn:pickard:{stack}::{project}::{resource_type}::{name}"

    Examples:
        >>> get_resource_urn("dev", "pickard-infra", "kubernetes:core/v1:Service", "pickard-service")
        "urn:pickard:dev::pickard-infra::kubernetes:core/v1:Service::pickard-service"
    """
    return f"urn:pickard:{stack}::{project}::{resource_type}::{name}"
