"""
GKE engine version lookup.
"""

import asyncio
import logging

from google.cloud import container_v1

from ...exceptions import VersionResolutionError
from ...models import EngineVersionInfo

logger = logging.getLogger(__name__)


async def get_engine_versions(
    cluster_manager: container_v1.ClusterManagerClient,
    project: str,
    location: str
) -> EngineVersionInfo:
    """
    Fetch the control-plane versions GKE offers in a location.

    Args:
        cluster_manager: ClusterManager API client
        project: GCP project id
        location: Zone or region

    Returns:
        EngineVersionInfo with the newest valid master version first

    Raises:
        VersionResolutionError: If the catalog lists no master versions
        google.api_core.exceptions.GoogleAPICallError: If the query fails
    """
    server_config = await asyncio.to_thread(
        cluster_manager.get_server_config,
        name=f"projects/{project}/locations/{location}"
    )
    versions = list(server_config.valid_master_versions)

    # valid_master_versions is ordered newest first
    if not versions or not versions[0]:
        raise VersionResolutionError(
            f"No GKE master versions available in projects/{project}/locations/{location}"
        )

    return EngineVersionInfo(latest_version=versions[0], valid_master_versions=versions)


async def find_latest_gke_version(
    cluster_manager: container_v1.ClusterManagerClient,
    project: str,
    location: str
) -> str:
    """Return the latest GKE control-plane version available in a location."""
    info = await get_engine_versions(cluster_manager, project, location)
    logger.info(f"[GKE] Latest master version in {location}: {info.latest_version}")
    return info.latest_version
