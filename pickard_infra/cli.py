"""Command line entry point for pickard-infra."""

import asyncio
import logging
import os
from pathlib import Path

import click

from . import __version__
from .config import get_settings
from .services.gke import find_latest_gke_version, get_cluster_manager_client
from .services.kubeconfig import generate_kubeconfig
from .workflow import ProvisioningWorkflow

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _fail(exc: Exception) -> None:
    """Report an error verbatim and exit non-zero."""
    logger.error(f"Provisioning failed: {exc}")
    click.echo(str(exc), err=True)
    raise click.exceptions.Exit(1)


def write_private_file(path: Path, content: str) -> None:
    """Write content to path, readable and writable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # The mode passed to os.open only applies when the file is created
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)


@click.group()
@click.version_option(version=__version__)
def main():
    """Provision a GKE cluster and deploy the pickard demo workload onto it."""
    pass


@main.command()
@click.option(
    "--kubeconfig-out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the exported kubeconfig to this file."
)
@click.option("--show-kubeconfig", is_flag=True, help="Print the exported kubeconfig.")
def up(kubeconfig_out, show_kubeconfig):
    """Create the cluster, namespace, deployment and service."""
    try:
        settings = get_settings()
        configure_logging(settings.log_level)
        result = asyncio.run(ProvisioningWorkflow(settings, output=click.echo).run())
    except Exception as e:
        _fail(e)

    kubeconfig = result.outputs["kubeconfig"]
    if kubeconfig_out is not None:
        write_private_file(kubeconfig_out, kubeconfig + "\n")
        click.echo(f"kubeconfig written to {kubeconfig_out}")
    if show_kubeconfig:
        click.echo(kubeconfig)


@main.command()
def versions():
    """Print the latest GKE control-plane version for the configured location."""
    try:
        settings = get_settings()
        configure_logging(settings.log_level)
        version = asyncio.run(
            find_latest_gke_version(
                get_cluster_manager_client(),
                settings.gcp_project,
                settings.gcp_location,
            )
        )
    except Exception as e:
        _fail(e)

    click.echo(version)


@main.command()
@click.option("--endpoint", required=True, help="Cluster master endpoint (no scheme).")
@click.option("--name", "cluster_name", required=True, help="Cluster name.")
@click.option("--ca-cert", required=True, help="Base64 encoded cluster CA certificate.")
def kubeconfig(endpoint, cluster_name, ca_cert):
    """Print the kubeconfig for a cluster without calling any API."""
    click.echo(generate_kubeconfig(endpoint, cluster_name, ca_cert))


if __name__ == "__main__":
    main()
