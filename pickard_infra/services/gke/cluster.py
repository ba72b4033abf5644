"""
GKE Cluster Provisioning

Creates a GKE cluster through the ClusterManager API and tracks the
long-running operation until the cluster is usable.

Cluster creation takes minutes, so create_cluster() returns a PendingCluster
immediately. Anything that needs the cluster's endpoint or CA certificate
awaits the PendingCluster; nothing downstream can run before it resolves.
"""

import asyncio
import logging
from typing import Optional

from google.api_core.exceptions import AlreadyExists
from google.cloud import container_v1

from ...exceptions import ClusterOperationError
from ...models import ClusterHandle, ClusterSpec, MasterAuth
from ...utils.resource_naming import get_cluster_path, get_operation_path

logger = logging.getLogger(__name__)

DEFAULT_NODE_POOL = "default-pool"

# Cluster states that resolve on their own
_TRANSITIONAL_STATES = (
    container_v1.Cluster.Status.PROVISIONING,
    container_v1.Cluster.Status.RECONCILING,
)

# Cluster states that never become usable
_FAILED_STATES = (
    container_v1.Cluster.Status.ERROR,
    container_v1.Cluster.Status.STOPPING,
)


class PendingCluster:
    """
    A cluster whose creation has been requested but may not have finished.

    Await it (or call result()) to get the ClusterHandle. The underlying task
    runs once; any number of callers can await it and all of them get the same
    handle or the same exception.
    """

    def __init__(self, name: str, task: "asyncio.Task[ClusterHandle]"):
        self.name = name
        self._task = task

    def done(self) -> bool:
        return self._task.done()

    def cancelled(self) -> bool:
        return self._task.cancelled()

    async def result(self) -> ClusterHandle:
        return await self._task

    async def cancel(self) -> None:
        """
        Stop waiting on the cluster and settle the task.

        The outcome of the task (handle, exception or cancellation) is consumed
        so it is never reported as unretrieved. An operation already accepted by
        the ClusterManager API keeps running server side.
        """
        if not self._task.done():
            logger.warning(f"[GKE] Abandoning provisioning of {self.name}")
            self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)

    def __await__(self):
        return self._task.__await__()


class ClusterProvisioner:
    """
    Creates GKE clusters and waits for them to become usable.

    All ClusterManager calls are blocking, so they run in a worker thread.
    """

    def __init__(
        self,
        cluster_manager: container_v1.ClusterManagerClient,
        project: str,
        location: str,
        poll_interval: float = 10.0,
        operation_timeout: float = 1800.0
    ):
        self.cluster_manager = cluster_manager
        self.project = project
        self.location = location
        self.poll_interval = poll_interval
        self.operation_timeout = operation_timeout

    @property
    def parent(self) -> str:
        return f"projects/{self.project}/locations/{self.location}"

    # =========================================================================
    # CLUSTER CREATION
    # =========================================================================

    def create_cluster(self, spec: ClusterSpec) -> PendingCluster:
        """
        Request a cluster and return a handle that resolves once it is running.

        Must be called from a running event loop.
        """
        logger.info(
            f"[GKE] Requesting cluster {spec.name} "
            f"(version {spec.min_master_version}, {spec.initial_node_count} x {spec.node_config.machine_type})"
        )
        task = asyncio.create_task(self._provision(spec), name=f"provision-{spec.name}")
        return PendingCluster(spec.name, task)

    def build_cluster(self, spec: ClusterSpec) -> container_v1.Cluster:
        """Translate a ClusterSpec into the ClusterManager API message."""
        return container_v1.Cluster(
            name=spec.name,
            initial_node_count=spec.initial_node_count,
            initial_cluster_version=spec.min_master_version,
            node_config=container_v1.NodeConfig(
                machine_type=spec.node_config.machine_type,
                oauth_scopes=list(spec.node_config.oauth_scopes),
            ),
        )

    async def _provision(self, spec: ClusterSpec) -> ClusterHandle:
        cluster_path = get_cluster_path(self.project, self.location, spec.name)

        try:
            operation = await asyncio.to_thread(
                self.cluster_manager.create_cluster,
                parent=self.parent,
                cluster=self.build_cluster(spec)
            )
            logger.info(f"[GKE] Cluster {spec.name} creation started (operation {operation.name})")
            await self.wait_for_operation(operation)
            logger.info(f"[GKE] ✅ Created cluster: {spec.name}")
        except AlreadyExists:
            logger.info(f"[GKE] Cluster {spec.name} already exists, adopting it")

        cluster = await self.wait_for_cluster_running(cluster_path)

        # Node version may not exceed the master version; upgrade the master first
        if spec.min_master_version and cluster.current_master_version != spec.min_master_version:
            logger.info(
                f"[GKE] Master version {cluster.current_master_version} differs from "
                f"{spec.min_master_version}, upgrading control plane"
            )
            cluster = await self._update_cluster(
                cluster_path,
                container_v1.ClusterUpdate(desired_master_version=spec.min_master_version)
            )
            logger.info(f"[GKE] ✅ Updated master version: {spec.min_master_version}")

        if spec.node_version and cluster.current_node_version != spec.node_version:
            logger.info(
                f"[GKE] Node version {cluster.current_node_version} differs from "
                f"{spec.node_version}, updating {DEFAULT_NODE_POOL}"
            )
            cluster = await self._update_cluster(
                cluster_path,
                container_v1.ClusterUpdate(
                    desired_node_version=spec.node_version,
                    desired_node_pool_id=DEFAULT_NODE_POOL,
                )
            )
            logger.info(f"[GKE] ✅ Updated node version: {spec.node_version}")

        return self.to_handle(cluster)

    async def _update_cluster(
        self,
        cluster_path: str,
        update: container_v1.ClusterUpdate
    ) -> container_v1.Cluster:
        operation = await asyncio.to_thread(
            self.cluster_manager.update_cluster,
            name=cluster_path,
            update=update
        )
        await self.wait_for_operation(operation)
        return await self.wait_for_cluster_running(cluster_path)

    # =========================================================================
    # OPERATION TRACKING
    # =========================================================================

    async def wait_for_operation(self, operation: container_v1.Operation) -> container_v1.Operation:
        """
        Poll a long-running operation until it is DONE.

        Raises:
            ClusterOperationError: If the operation finished with an error or
                did not finish within operation_timeout seconds
        """
        operation_path = get_operation_path(self.project, self.location, operation.name)

        async def _poll() -> container_v1.Operation:
            current = operation
            while current.status != container_v1.Operation.Status.DONE:
                logger.debug(f"[GKE] Operation {operation.name} is {current.status.name}")
                await asyncio.sleep(self.poll_interval)
                current = await asyncio.to_thread(
                    self.cluster_manager.get_operation,
                    name=operation_path
                )
            return current

        try:
            finished = await asyncio.wait_for(_poll(), timeout=self.operation_timeout)
        except asyncio.TimeoutError as e:
            raise ClusterOperationError(
                operation.name,
                f"Operation {operation.name} did not finish within {self.operation_timeout:g}s"
            ) from e

        error_message = _operation_error_message(finished)
        if error_message:
            logger.error(f"[GKE] Operation {finished.name} failed: {error_message}")
            raise ClusterOperationError(finished.name, error_message)

        return finished

    async def wait_for_cluster_running(self, cluster_path: str) -> container_v1.Cluster:
        """
        Describe a cluster, polling while it is still provisioning or reconciling.

        Raises:
            ClusterOperationError: If the cluster is in ERROR or STOPPING state, or
                does not settle within operation_timeout seconds
        """

        async def _poll() -> container_v1.Cluster:
            while True:
                cluster = await asyncio.to_thread(
                    self.cluster_manager.get_cluster,
                    name=cluster_path
                )
                if cluster.status not in _TRANSITIONAL_STATES:
                    return cluster
                logger.debug(f"[GKE] Cluster {cluster.name} is {cluster.status.name}, waiting")
                await asyncio.sleep(self.poll_interval)

        try:
            cluster = await asyncio.wait_for(_poll(), timeout=self.operation_timeout)
        except asyncio.TimeoutError as e:
            raise ClusterOperationError(
                cluster_path,
                f"Cluster {cluster_path} did not become ready within {self.operation_timeout:g}s"
            ) from e

        if cluster.status in _FAILED_STATES:
            raise ClusterOperationError(
                cluster_path,
                cluster.status_message or f"Cluster {cluster.name} is in {cluster.status.name} state"
            )
        return cluster

    @staticmethod
    def to_handle(cluster: container_v1.Cluster) -> ClusterHandle:
        return ClusterHandle(
            name=cluster.name,
            endpoint=cluster.endpoint,
            master_auth=MasterAuth(
                cluster_ca_certificate=cluster.master_auth.cluster_ca_certificate
            ),
            location=cluster.location or None,
            current_master_version=cluster.current_master_version or None,
            current_node_version=cluster.current_node_version or None,
            self_link=cluster.self_link or None,
        )


def _operation_error_message(operation: container_v1.Operation) -> Optional[str]:
    error = operation.error
    if error is not None and (error.code or error.message):
        return error.message or f"Operation {operation.name} failed with code {error.code}"
    return None


def get_cluster_manager_client() -> container_v1.ClusterManagerClient:
    """Create a ClusterManager client using Application Default Credentials."""
    return container_v1.ClusterManagerClient()
