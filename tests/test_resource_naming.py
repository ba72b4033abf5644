"""
Unit tests for resource naming utilities.
"""

import pytest

from pickard_infra.utils.resource_naming import (
    get_cluster_path,
    get_kubeconfig_context_name,
    get_operation_path,
    get_resource_urn,
)


@pytest.mark.unit
class TestResourceNaming:

    def test_context_name(self):
        assert get_kubeconfig_context_name("demo-cluster") == "demo_demo-cluster"

    def test_cluster_path(self):
        assert (
            get_cluster_path("test-project", "us-central1-a", "demo-cluster")
            == "projects/test-project/locations/us-central1-a/clusters/demo-cluster"
        )

    def test_operation_path_from_short_name(self):
        assert (
            get_operation_path("test-project", "us-central1-a", "operation-123")
            == "projects/test-project/locations/us-central1-a/operations/operation-123"
        )

    def test_operation_path_already_qualified(self):
        path = "projects/test-project/locations/us-central1-a/operations/operation-123"

        assert get_operation_path("other", "europe-west1-b", path) == path

    def test_resource_urn(self):
        assert (
            get_resource_urn("dev", "pickard-infra", "kubernetes:apps/v1:Deployment", "pickard-demo")
            == "urn:pickard:dev::pickard-infra::kubernetes:apps/v1:Deployment::pickard-demo"
        )
