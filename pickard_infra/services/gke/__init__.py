"""
GKE Module

- find_latest_gke_version: Resolve the newest control-plane version for a location
- ClusterProvisioner: Create (or adopt) a cluster and wait until it is running
- PendingCluster: Awaitable handle to a cluster whose creation is in flight
"""

from .versions import find_latest_gke_version, get_engine_versions
from .cluster import (
    ClusterProvisioner,
    PendingCluster,
    get_cluster_manager_client,
)

__all__ = [
    "find_latest_gke_version",
    "get_engine_versions",
    "ClusterProvisioner",
    "PendingCluster",
    "get_cluster_manager_client",
]
