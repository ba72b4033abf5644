"""
Data models for the provisioning workflow.

Policy models (ClusterPolicy, WorkloadPolicy) hold the values that are baked
into the workflow: node pool shape, replica count, image and ports. They are
frozen so that a single instance can be shared by every component that reads
it. Spec models (ClusterSpec, DeploymentSpec, ServiceSpec) describe one
resource request each, and handle models describe what the provider returned.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


DEFAULT_OAUTH_SCOPES = [
    "https://www.googleapis.com/auth/compute",
    "https://www.googleapis.com/auth/devstorage.read_only",
    "https://www.googleapis.com/auth/logging.write",
    "https://www.googleapis.com/auth/monitoring",
]


# =============================================================================
# Policies
# =============================================================================

class AppLabels(BaseModel):
    """
    Label set shared by the workload and the service that exposes it.

    The Deployment selector, the pod template labels, the Service labels and
    the Service selector are all rendered from one instance of this model,
    so they cannot drift apart.
    """
    values: Dict[str, str] = Field(
        default_factory=lambda: {"app": "pickard-app"},
        description="Label key/value pairs"
    )

    class Config:
        frozen = True

    def as_dict(self) -> Dict[str, str]:
        """Return a fresh copy suitable for a Kubernetes manifest."""
        return dict(self.values)


class ClusterPolicy(BaseModel):
    """Node pool policy applied to every cluster this workflow creates."""
    initial_node_count: int = Field(default=2, description="Nodes in the default pool")
    machine_type: str = Field(default="n1-standard-1", description="Compute Engine machine type")
    oauth_scopes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_OAUTH_SCOPES),
        description="OAuth scopes granted to the node service account"
    )

    class Config:
        frozen = True


class WorkloadPolicy(BaseModel):
    """Namespace, deployment and service settings for the demo workload."""
    namespace: str = Field(default="demo-ns", description="Namespace holding the workload")
    deployment_name: str = Field(default="pickard-demo", description="Deployment (and container) name")
    service_name: str = Field(default="pickard-service", description="Service name")
    image: str = Field(default="ronaldcrb/node-pickard", description="Container image")
    replicas: int = Field(default=3, description="Deployment replica count")
    service_port: int = Field(default=80, description="Port exposed by the load balancer")
    target_port: int = Field(default=3000, description="Container port traffic is forwarded to")
    service_type: str = Field(default="LoadBalancer", description="Kubernetes service type")
    app_labels: AppLabels = Field(default_factory=AppLabels, description="Shared selector labels")

    class Config:
        frozen = True


# =============================================================================
# GKE
# =============================================================================

class EngineVersionInfo(BaseModel):
    """Control-plane versions offered for a location."""
    latest_version: str = Field(..., description="Newest valid control-plane version")
    valid_master_versions: List[str] = Field(default_factory=list)


class NodeConfig(BaseModel):
    machine_type: str
    oauth_scopes: List[str]


class ClusterSpec(BaseModel):
    """Desired state of a GKE cluster."""
    name: str = Field(..., description="Cluster name")
    initial_node_count: int = Field(..., description="Nodes in the default pool")
    min_master_version: str = Field(..., description="Control-plane version")
    node_version: str = Field(..., description="Node pool version")
    node_config: NodeConfig

    @classmethod
    def for_version(cls, name: str, version: str, policy: ClusterPolicy) -> "ClusterSpec":
        """
        Build a cluster spec pinned to one resolved version.

        Control plane and nodes always run the same version: the one the
        version resolver just returned.
        """
        return cls(
            name=name,
            initial_node_count=policy.initial_node_count,
            min_master_version=version,
            node_version=version,
            node_config=NodeConfig(
                machine_type=policy.machine_type,
                oauth_scopes=list(policy.oauth_scopes),
            ),
        )


class MasterAuth(BaseModel):
    cluster_ca_certificate: str = Field(..., description="Base64 encoded cluster CA certificate")


class ClusterHandle(BaseModel):
    """A provisioned cluster, as described by the ClusterManager API."""
    name: str
    endpoint: str = Field(..., description="IP address of the Kubernetes master")
    master_auth: MasterAuth
    location: Optional[str] = None
    current_master_version: Optional[str] = None
    current_node_version: Optional[str] = None
    self_link: Optional[str] = None


# =============================================================================
# Kubernetes
# =============================================================================

class ContainerSpec(BaseModel):
    name: str
    image: str


class NamespaceSpec(BaseModel):
    name: str = Field(..., description="Namespace name")


class DeploymentSpec(BaseModel):
    """Desired state of the replicated workload."""
    name: str
    namespace: str
    replicas: int = 3
    labels: AppLabels = Field(..., description="Selector and pod template labels")
    container: ContainerSpec

    @property
    def selector_labels(self) -> Dict[str, str]:
        return self.labels.as_dict()

    @property
    def pod_labels(self) -> Dict[str, str]:
        return self.labels.as_dict()


class ServicePortSpec(BaseModel):
    port: int
    target_port: int


class ServiceSpec(BaseModel):
    """Desired state of the service exposing the workload."""
    name: str
    namespace: str
    labels: AppLabels = Field(..., description="Service labels and pod selector")
    ports: List[ServicePortSpec]
    type: str = "LoadBalancer"

    @property
    def selector_labels(self) -> Dict[str, str]:
        return self.labels.as_dict()


class AppliedResource(BaseModel):
    """A Kubernetes object after it was applied to the cluster."""
    kind: str
    name: str
    namespace: Optional[str] = None
    urn: str = Field(..., description="Resource identifier printed for operators")
    action: str = Field(..., description="'created', 'updated' or 'unchanged'")


class ProvisionResult(BaseModel):
    """Everything a workflow run produced."""
    cluster: ClusterHandle
    namespace: AppliedResource
    deployment: AppliedResource
    service: AppliedResource
    outputs: Dict[str, str] = Field(default_factory=dict, description="Exported values, e.g. 'kubeconfig'")
