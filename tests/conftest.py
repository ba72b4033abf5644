"""
Test configuration and fixtures for pytest.

Fixtures provide a fake ClusterManager API (returning real container_v1
messages), settings with zero poll interval, and a mocked Kubernetes client.
No test talks to Google Cloud or a real cluster.
"""

import os
import pytest
from unittest.mock import Mock

from google.cloud import container_v1


def pytest_configure(config):
    """
    Pytest hook called before test collection.
    Sets up test environment variables and registers custom markers.
    """
    # Set test environment variables BEFORE any settings are loaded
    os.environ["GCP_PROJECT"] = "test-project"
    os.environ["GCP_LOCATION"] = "us-central1-a"
    os.environ["CLUSTER_NAME"] = "demo-cluster"
    os.environ["OPERATION_POLL_INTERVAL_SECONDS"] = "0"

    # Clear settings cache after env vars are set
    from pickard_infra.config import get_settings
    get_settings.cache_clear()

    # Register custom markers
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "kubernetes: mark test as exercising Kubernetes manifests or clients")
    config.addinivalue_line("markers", "gke: mark test as exercising the GKE ClusterManager layer")


LATEST_VERSION = "1.14.10-gke.27"
ENDPOINT = "34.1.2.3"
CA_CERT = "QkFTRTY0Q0VSVA=="


@pytest.fixture
def settings():
    """Settings with a zero poll interval so operation waits do not sleep."""
    from pickard_infra.config import Settings

    return Settings(
        gcp_project="test-project",
        gcp_location="us-central1-a",
        cluster_name="demo-cluster",
        operation_poll_interval_seconds=0,
        cluster_operation_timeout_seconds=5,
    )


def make_cluster(
    name: str = "demo-cluster",
    version: str = LATEST_VERSION,
    status=container_v1.Cluster.Status.RUNNING,
) -> container_v1.Cluster:
    return container_v1.Cluster(
        name=name,
        endpoint=ENDPOINT,
        master_auth=container_v1.MasterAuth(cluster_ca_certificate=CA_CERT),
        location="us-central1-a",
        current_master_version=version,
        current_node_version=version,
        status=status,
        self_link=f"https://container.googleapis.com/v1/projects/test-project/zones/us-central1-a/clusters/{name}",
    )


def make_operation(name: str = "operation-1", done: bool = True) -> container_v1.Operation:
    status = container_v1.Operation.Status.DONE if done else container_v1.Operation.Status.RUNNING
    return container_v1.Operation(name=name, status=status)


@pytest.fixture
def cluster_factory():
    """Factory for container_v1.Cluster messages as returned by get_cluster."""
    return make_cluster


@pytest.fixture
def operation_factory():
    """Factory for container_v1.Operation messages."""
    return make_operation


@pytest.fixture
def cluster_manager():
    """Fake ClusterManager client whose calls succeed immediately."""
    manager = Mock()
    manager.get_server_config.return_value = container_v1.ServerConfig(
        default_cluster_version="1.14.8-gke.12",
        valid_master_versions=[LATEST_VERSION, "1.14.8-gke.12", "1.13.12-gke.25"],
    )
    manager.create_cluster.return_value = make_operation("operation-create", done=False)
    manager.get_operation.return_value = make_operation("operation-create", done=True)
    manager.get_cluster.return_value = make_cluster()
    return manager


@pytest.fixture
def mock_k8s_client():
    """Mocked KubernetesClient with plain Mock API objects."""
    from pickard_infra.services.kubernetes import KubernetesClient

    k8s = KubernetesClient(api_client=Mock())
    k8s.core_v1 = Mock()
    k8s.apps_v1 = Mock()
    return k8s
