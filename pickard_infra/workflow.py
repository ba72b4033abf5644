"""
Provisioning Workflow

Wires the components together in dependency order:

1. Resolve the latest GKE control-plane version
2. Request a cluster pinned to that version (control plane and nodes)
3. Wait for the cluster, synthesize its kubeconfig and build a client
4. Apply the namespace
5. Apply the deployment and the service (concurrently, both need the namespace)

The first error aborts the run. Nothing is rolled back and nothing is retried;
re-running the workflow adopts the existing cluster and re-applies the
Kubernetes objects.

Usage:
    from pickard_infra.workflow import ProvisioningWorkflow

    result = await ProvisioningWorkflow(get_settings()).run()
    kubeconfig = result.outputs["kubeconfig"]
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from google.cloud import container_v1

from .config import Settings
from .models import (
    AppliedResource,
    ClusterPolicy,
    ClusterSpec,
    ContainerSpec,
    DeploymentSpec,
    NamespaceSpec,
    ProvisionResult,
    ServicePortSpec,
    ServiceSpec,
    WorkloadPolicy,
)
from .services.gke import (
    ClusterProvisioner,
    PendingCluster,
    find_latest_gke_version,
    get_cluster_manager_client,
)
from .services.kubeconfig import kubeconfig_for_cluster
from .services.kubernetes import (
    KubernetesClient,
    create_cluster_client,
    create_deployment_manifest,
    create_namespace_manifest,
    create_service_manifest,
)
from .utils.resource_naming import get_resource_urn

logger = logging.getLogger(__name__)

NAMESPACE_TYPE = "kubernetes:core/v1:Namespace"
DEPLOYMENT_TYPE = "kubernetes:apps/v1:Deployment"
SERVICE_TYPE = "kubernetes:core/v1:Service"

ClientFactory = Callable[[PendingCluster], Awaitable[KubernetesClient]]


def build_deployment_spec(policy: WorkloadPolicy, namespace: str) -> DeploymentSpec:
    return DeploymentSpec(
        name=policy.deployment_name,
        namespace=namespace,
        replicas=policy.replicas,
        labels=policy.app_labels,
        container=ContainerSpec(name=policy.deployment_name, image=policy.image),
    )


def build_service_spec(policy: WorkloadPolicy, namespace: str) -> ServiceSpec:
    return ServiceSpec(
        name=policy.service_name,
        namespace=namespace,
        labels=policy.app_labels,
        ports=[ServicePortSpec(port=policy.service_port, target_port=policy.target_port)],
        type=policy.service_type,
    )


class ProvisioningWorkflow:
    """
    Provisions a GKE cluster and deploys the demo workload onto it.

    Args:
        settings: Project, location, cluster name and operation timing
        cluster_manager: ClusterManager API client (default: built from
            Application Default Credentials)
        cluster_policy: Node pool policy (default: ClusterPolicy())
        workload_policy: Namespace/deployment/service policy (default: WorkloadPolicy())
        client_factory: Builds the Kubernetes client from the pending cluster
        output: Receives the human-readable result lines
    """

    def __init__(
        self,
        settings: Settings,
        cluster_manager: Optional[container_v1.ClusterManagerClient] = None,
        cluster_policy: Optional[ClusterPolicy] = None,
        workload_policy: Optional[WorkloadPolicy] = None,
        client_factory: ClientFactory = create_cluster_client,
        output: Callable[[str], None] = print
    ):
        self.settings = settings
        self.cluster_manager = cluster_manager or get_cluster_manager_client()
        self.cluster_policy = cluster_policy or ClusterPolicy()
        self.workload_policy = workload_policy or WorkloadPolicy()
        self.client_factory = client_factory
        self.output = output

        self.provisioner = ClusterProvisioner(
            self.cluster_manager,
            project=settings.gcp_project,
            location=settings.gcp_location,
            poll_interval=settings.operation_poll_interval_seconds,
            operation_timeout=settings.cluster_operation_timeout_seconds,
        )

    def _urn(self, resource_type: str, name: str) -> str:
        return get_resource_urn(
            self.settings.stack_name,
            self.settings.project_name,
            resource_type,
            name,
        )

    async def run(self) -> ProvisionResult:
        """
        Run the whole workflow.

        Returns:
            ProvisionResult; outputs["kubeconfig"] holds the cluster's kubeconfig

        Raises:
            The first error hit by any step, unchanged
        """
        logger.info(
            f"[WORKFLOW] Provisioning {self.settings.cluster_name} in "
            f"{self.settings.gcp_project}/{self.settings.gcp_location}"
        )

        version = await find_latest_gke_version(
            self.cluster_manager,
            self.settings.gcp_project,
            self.settings.gcp_location,
        )

        spec = ClusterSpec.for_version(self.settings.cluster_name, version, self.cluster_policy)
        pending_cluster = self.provisioner.create_cluster(spec)

        try:
            k8s = await self.client_factory(pending_cluster)
        except Exception:
            await pending_cluster.cancel()
            raise
        cluster = await pending_cluster
        kubeconfig = k8s.kubeconfig or kubeconfig_for_cluster(cluster)

        try:
            namespace = await self.apply_namespace(k8s)
            deployment, service = await asyncio.gather(
                self.apply_deployment(k8s, namespace.name),
                self.apply_service(k8s, namespace.name),
            )
        finally:
            k8s.close()

        self.output(f"deployment URN => {deployment.urn}")
        self.output(f"service URN => {service.urn}")

        logger.info(f"[WORKFLOW] ✅ Provisioning of {cluster.name} complete")
        return ProvisionResult(
            cluster=cluster,
            namespace=namespace,
            deployment=deployment,
            service=service,
            outputs={"kubeconfig": kubeconfig},
        )

    async def apply_namespace(self, k8s: KubernetesClient) -> AppliedResource:
        spec = NamespaceSpec(name=self.workload_policy.namespace)
        action = await k8s.create_namespace(create_namespace_manifest(spec))
        return AppliedResource(
            kind="Namespace",
            name=spec.name,
            urn=self._urn(NAMESPACE_TYPE, spec.name),
            action=action,
        )

    async def apply_deployment(self, k8s: KubernetesClient, namespace: str) -> AppliedResource:
        spec = build_deployment_spec(self.workload_policy, namespace)
        action = await k8s.create_deployment(create_deployment_manifest(spec), namespace)
        return AppliedResource(
            kind="Deployment",
            name=spec.name,
            namespace=namespace,
            urn=self._urn(DEPLOYMENT_TYPE, spec.name),
            action=action,
        )

    async def apply_service(self, k8s: KubernetesClient, namespace: str) -> AppliedResource:
        spec = build_service_spec(self.workload_policy, namespace)
        action = await k8s.create_service(create_service_manifest(spec), namespace)
        return AppliedResource(
            kind="Service",
            name=spec.name,
            namespace=namespace,
            urn=self._urn(SERVICE_TYPE, spec.name),
            action=action,
        )
