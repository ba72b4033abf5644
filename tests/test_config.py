"""
Unit tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from pickard_infra.config import Settings, get_settings


@pytest.mark.unit
class TestSettings:

    def test_loaded_from_environment(self):
        """Test values set by pytest_configure are picked up."""
        get_settings.cache_clear()
        settings = get_settings()

        assert settings.gcp_project == "test-project"
        assert settings.gcp_location == "us-central1-a"
        assert settings.cluster_name == "demo-cluster"
        assert settings.operation_poll_interval_seconds == 0

    def test_defaults(self, monkeypatch):
        for name in ("GCP_LOCATION", "CLUSTER_NAME", "OPERATION_POLL_INTERVAL_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(gcp_project="p")

        assert settings.gcp_location == "us-central1-a"
        assert settings.cluster_name == "demo-cluster"
        assert settings.stack_name == "dev"
        assert settings.project_name == "pickard-infra"
        assert settings.operation_poll_interval_seconds == 10.0
        assert settings.cluster_operation_timeout_seconds == 1800.0
        assert settings.log_level == "INFO"

    def test_project_is_required(self, monkeypatch):
        monkeypatch.delenv("GCP_PROJECT", raising=False)

        with pytest.raises(ValidationError):
            Settings()

    def test_environment_overrides_default(self, monkeypatch):
        monkeypatch.setenv("GCP_LOCATION", "europe-west1-b")

        assert Settings(gcp_project="p").gcp_location == "europe-west1-b"

    def test_location_path(self):
        settings = Settings(gcp_project="my-project", gcp_location="us-east1")

        assert settings.location_path == "projects/my-project/locations/us-east1"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()
