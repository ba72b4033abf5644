"""
Tests for the pickard-infra command line interface.
"""

import os
import pytest
from unittest.mock import AsyncMock, Mock, patch

from click.testing import CliRunner

from pickard_infra.cli import main
from pickard_infra.exceptions import VersionResolutionError
from pickard_infra.models import (
    AppliedResource,
    ClusterHandle,
    MasterAuth,
    ProvisionResult,
)
from pickard_infra.services.kubeconfig import generate_kubeconfig


KUBECONFIG = generate_kubeconfig("34.1.2.3", "demo-cluster", "QkFTRTY0Q0VSVA==")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def provision_result():
    return ProvisionResult(
        cluster=ClusterHandle(
            name="demo-cluster",
            endpoint="34.1.2.3",
            master_auth=MasterAuth(cluster_ca_certificate="QkFTRTY0Q0VSVA=="),
        ),
        namespace=AppliedResource(
            kind="Namespace", name="demo-ns", urn="urn:ns", action="created"
        ),
        deployment=AppliedResource(
            kind="Deployment", name="pickard-demo", namespace="demo-ns", urn="urn:deployment", action="created"
        ),
        service=AppliedResource(
            kind="Service", name="pickard-service", namespace="demo-ns", urn="urn:service", action="created"
        ),
        outputs={"kubeconfig": KUBECONFIG},
    )


@pytest.fixture
def mock_workflow(provision_result):
    with patch("pickard_infra.cli.ProvisioningWorkflow") as workflow_cls:
        workflow_cls.return_value.run = AsyncMock(return_value=provision_result)
        yield workflow_cls


@pytest.mark.unit
class TestKubeconfigCommand:

    def test_prints_document(self, runner):
        result = runner.invoke(main, [
            "kubeconfig",
            "--endpoint", "34.1.2.3",
            "--name", "demo-cluster",
            "--ca-cert", "QkFTRTY0Q0VSVA==",
        ])

        assert result.exit_code == 0
        assert result.output == KUBECONFIG + "\n"

    def test_requires_endpoint(self, runner):
        result = runner.invoke(main, ["kubeconfig", "--name", "demo-cluster", "--ca-cert", "x"])

        assert result.exit_code != 0
        assert "--endpoint" in result.output


@pytest.mark.unit
class TestUpCommand:

    def test_runs_workflow(self, runner, mock_workflow):
        result = runner.invoke(main, ["up"])

        assert result.exit_code == 0
        mock_workflow.return_value.run.assert_awaited_once()
        settings = mock_workflow.call_args.args[0]
        assert settings.gcp_project == "test-project"

    def test_writes_kubeconfig(self, runner, mock_workflow, tmp_path):
        target = tmp_path / "kubeconfig"

        result = runner.invoke(main, ["up", "--kubeconfig-out", str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == KUBECONFIG + "\n"
        assert oct(target.stat().st_mode & 0o777) == oct(0o600)
        assert f"kubeconfig written to {target}" in result.output

    def test_kubeconfig_created_owner_only(self, runner, mock_workflow, tmp_path):
        """Test the file is never created with wider permissions than 0600."""
        target = tmp_path / "kubeconfig"

        with patch("pickard_infra.cli.os.open", wraps=os.open) as os_open:
            result = runner.invoke(main, ["up", "--kubeconfig-out", str(target)])

        assert result.exit_code == 0
        modes = [c.args[2] for c in os_open.call_args_list if str(c.args[0]) == str(target)]
        assert modes == [0o600]

    def test_existing_kubeconfig_is_restricted(self, runner, mock_workflow, tmp_path):
        target = tmp_path / "kubeconfig"
        target.write_text("stale", encoding="utf-8")
        target.chmod(0o644)

        result = runner.invoke(main, ["up", "--kubeconfig-out", str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == KUBECONFIG + "\n"
        assert oct(target.stat().st_mode & 0o777) == oct(0o600)

    def test_shows_kubeconfig(self, runner, mock_workflow):
        result = runner.invoke(main, ["up", "--show-kubeconfig"])

        assert result.exit_code == 0
        assert KUBECONFIG in result.output

    def test_failure_reports_message_and_exits_nonzero(self, runner):
        with patch("pickard_infra.cli.ProvisioningWorkflow") as workflow_cls:
            workflow_cls.return_value.run = AsyncMock(
                side_effect=VersionResolutionError("No GKE master versions available")
            )
            result = runner.invoke(main, ["up"])

        assert result.exit_code == 1
        assert "No GKE master versions available" in result.output


@pytest.mark.unit
class TestVersionsCommand:

    def test_prints_latest_version(self, runner):
        with patch("pickard_infra.cli.get_cluster_manager_client") as factory, \
                patch("pickard_infra.cli.find_latest_gke_version", new=AsyncMock(return_value="1.14.10-gke.27")) as find:
            result = runner.invoke(main, ["versions"])

        assert result.exit_code == 0
        assert result.output.strip() == "1.14.10-gke.27"
        find.assert_awaited_once_with(factory.return_value, "test-project", "us-central1-a")

    def test_api_failure(self, runner):
        with patch("pickard_infra.cli.get_cluster_manager_client", return_value=Mock()), \
                patch("pickard_infra.cli.find_latest_gke_version", new=AsyncMock(side_effect=RuntimeError("403 Forbidden"))):
            result = runner.invoke(main, ["versions"])

        assert result.exit_code == 1
        assert "403 Forbidden" in result.output


@pytest.mark.unit
def test_version_option(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
