from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Google Cloud - project MUST be set via environment
    gcp_project: str

    # Zone (e.g. us-central1-a) or region (e.g. us-central1) for the cluster
    gcp_location: str = "us-central1-a"

    # Name of the GKE cluster to create (or adopt if it already exists)
    cluster_name: str = "demo-cluster"

    # Resource URN segments: urn:pickard:<stack_name>::<project_name>::<type>::<name>
    stack_name: str = "dev"
    project_name: str = "pickard-infra"

    # ==========================================================================
    # Cluster Operation Settings
    # ==========================================================================
    # GKE cluster creation is a long-running operation (several minutes)
    operation_poll_interval_seconds: float = 10.0  # How often to poll the operation
    cluster_operation_timeout_seconds: float = 1800.0  # Give up waiting after 30 minutes

    # Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = "INFO"

    @property
    def location_path(self) -> str:
        """Resource path of the configured location, as used by the ClusterManager API."""
        return f"projects/{self.gcp_project}/locations/{self.gcp_location}"

    class Config:
        # Environment variables win; .env in the working directory is optional
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields from .env file
        case_sensitive = False  # Allow lowercase env vars to match uppercase field names


@lru_cache()
def get_settings():
    return Settings()
