"""
Kubernetes Client for the Provisioned Cluster

This module provides the interface to the Kubernetes API of the cluster the
workflow just created. The client is built from the synthesized kubeconfig
document rather than from ~/.kube/config or in-cluster configuration, so it is
always bound to exactly that cluster.

Objects are applied: created, or patched when they already exist.
"""

from kubernetes import client, config
from kubernetes.client.rest import ApiException
import logging
import asyncio
from typing import Optional

from ..gke.cluster import PendingCluster
from ..kubeconfig import kubeconfig_for_cluster, parse_kubeconfig

logger = logging.getLogger(__name__)


class KubernetesClient:
    """
    Applies Kubernetes resources to one cluster.

    The kubernetes client is synchronous; every API call runs in a worker
    thread through asyncio.to_thread.
    """

    def __init__(self, api_client: client.ApiClient, kubeconfig: Optional[str] = None):
        self.api_client = api_client
        self.kubeconfig = kubeconfig

        # Initialize API clients bound to this cluster
        self.core_v1 = client.CoreV1Api(api_client)
        self.apps_v1 = client.AppsV1Api(api_client)

    @classmethod
    def from_kubeconfig(cls, kubeconfig: str) -> "KubernetesClient":
        """
        Build a client from a kubeconfig document.

        Raises:
            kubernetes.config.ConfigException: If the document cannot be loaded
        """
        try:
            api_client = config.new_client_from_config_dict(parse_kubeconfig(kubeconfig))
        except config.ConfigException as e:
            logger.error(f"[K8S] Failed to load cluster kubeconfig: {e}")
            raise

        host = api_client.configuration.host
        logger.info(f"[K8S] Kubernetes client initialized for {host}")
        return cls(api_client, kubeconfig=kubeconfig)

    def close(self) -> None:
        self.api_client.close()

    # =========================================================================
    # NAMESPACE MANAGEMENT
    # =========================================================================

    async def create_namespace(self, namespace: client.V1Namespace) -> str:
        """
        Create a Namespace.

        Returns:
            "created", or "unchanged" if it already existed
        """
        namespace_name = namespace.metadata.name
        try:
            await asyncio.to_thread(
                self.core_v1.create_namespace,
                body=namespace
            )
            logger.info(f"[K8S] ✅ Created namespace: {namespace_name}")
            return "created"
        except ApiException as e:
            if e.status == 409:
                await asyncio.to_thread(
                    self.core_v1.read_namespace,
                    name=namespace_name
                )
                logger.info(f"[K8S] Namespace {namespace_name} already exists")
                return "unchanged"
            raise

    # =========================================================================
    # DEPLOYMENT MANAGEMENT
    # =========================================================================

    async def create_deployment(
        self,
        deployment: client.V1Deployment,
        namespace: str
    ) -> str:
        """
        Create or update a Deployment.

        Returns:
            "created" or "updated"
        """
        deployment_name = deployment.metadata.name
        try:
            await asyncio.to_thread(
                self.apps_v1.create_namespaced_deployment,
                namespace=namespace,
                body=deployment
            )
            logger.info(f"[K8S] ✅ Created deployment: {deployment_name}")
            return "created"
        except ApiException as e:
            if e.status == 409:
                logger.info(f"[K8S] Deployment {deployment_name} exists, updating...")
                await asyncio.to_thread(
                    self.apps_v1.patch_namespaced_deployment,
                    name=deployment_name,
                    namespace=namespace,
                    body=deployment
                )
                logger.info(f"[K8S] ✅ Updated deployment: {deployment_name}")
                return "updated"
            raise

    # =========================================================================
    # SERVICE MANAGEMENT
    # =========================================================================

    async def create_service(
        self,
        service: client.V1Service,
        namespace: str
    ) -> str:
        """
        Create or update a Service.

        Returns:
            "created" or "updated"
        """
        service_name = service.metadata.name
        try:
            await asyncio.to_thread(
                self.core_v1.create_namespaced_service,
                namespace=namespace,
                body=service
            )
            logger.info(f"[K8S] ✅ Created service: {service_name}")
            return "created"
        except ApiException as e:
            if e.status == 409:
                logger.info(f"[K8S] Service {service_name} exists, updating...")
                await asyncio.to_thread(
                    self.core_v1.patch_namespaced_service,
                    name=service_name,
                    namespace=namespace,
                    body=service
                )
                logger.info(f"[K8S] ✅ Updated service: {service_name}")
                return "updated"
            raise


async def create_cluster_client(pending_cluster: PendingCluster) -> KubernetesClient:
    """
    Build a client for a cluster once its provisioning has finished.

    Awaits the pending cluster first: the client (and therefore every
    namespace, deployment and service request) cannot exist before the
    cluster is up.
    """
    cluster = await pending_cluster
    logger.info(f"[K8S] Cluster {cluster.name} is ready at {cluster.endpoint}")
    # Loading resolves the gcp auth-provider token, which can shell out to gcloud
    return await asyncio.to_thread(
        KubernetesClient.from_kubeconfig,
        kubeconfig_for_cluster(cluster)
    )
