"""
Kubernetes Manifest Helpers

Builds the manifests the workflow applies to a freshly provisioned cluster:
- Namespace: isolates the demo workload
- Deployment: replicated pods running the application image
- Service: LoadBalancer in front of the deployment's pods

The Deployment selector and the Service selector are both rendered from the
same AppLabels value carried by DeploymentSpec and ServiceSpec.
"""

from kubernetes import client

from ...models import DeploymentSpec, NamespaceSpec, ServiceSpec


# =============================================================================
# Namespace
# =============================================================================

def create_namespace_manifest(spec: NamespaceSpec) -> client.V1Namespace:
    """Create Namespace manifest."""
    return client.V1Namespace(
        metadata=client.V1ObjectMeta(name=spec.name)
    )


# =============================================================================
# Deployment
# =============================================================================

def create_deployment_manifest(spec: DeploymentSpec) -> client.V1Deployment:
    """
    Create Deployment manifest for the application workload.

    The pod template carries the same labels the selector matches on, and the
    single container is named after the deployment.

    Args:
        spec: Deployment spec (name, namespace, replicas, labels, container)

    Returns:
        V1Deployment manifest
    """
    container = client.V1Container(
        name=spec.container.name,
        image=spec.container.image,
    )

    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(
            name=spec.name,
            namespace=spec.namespace,
        ),
        spec=client.V1DeploymentSpec(
            replicas=spec.replicas,
            selector=client.V1LabelSelector(
                match_labels=spec.selector_labels
            ),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(
                    labels=spec.pod_labels
                ),
                spec=client.V1PodSpec(
                    containers=[container]
                )
            )
        )
    )


# =============================================================================
# Service
# =============================================================================

def create_service_manifest(spec: ServiceSpec) -> client.V1Service:
    """
    Create Service manifest exposing the workload.

    Args:
        spec: Service spec (name, namespace, labels, ports, type)

    Returns:
        V1Service manifest
    """
    return client.V1Service(
        api_version="v1",
        kind="Service",
        metadata=client.V1ObjectMeta(
            name=spec.name,
            namespace=spec.namespace,
            labels=spec.labels.as_dict()
        ),
        spec=client.V1ServiceSpec(
            selector=spec.selector_labels,
            ports=[
                client.V1ServicePort(
                    port=port.port,
                    target_port=port.target_port
                )
                for port in spec.ports
            ],
            type=spec.type
        )
    )
