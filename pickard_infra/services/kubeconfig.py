"""
Kubeconfig generation for provisioned GKE clusters.

The document follows the standard kubeconfig schema so that kubectl and any
other kubeconfig-aware client can consume it. Authentication is delegated to
the gcloud CLI through the `gcp` auth provider: the token is refreshed by
running `gcloud config config-helper --format=json` and reading the access
token and expiry from its JSON output.
"""

from typing import Any, Dict

import yaml

from ..models import ClusterHandle
from ..utils.resource_naming import get_kubeconfig_context_name


KUBECONFIG_TEMPLATE = """apiVersion: v1
clusters:
- cluster:
    certificate-authority-data: {ca_certificate}
    server: https://{endpoint}
  name: {context}
contexts:
- context:
    cluster: {context}
    user: {context}
  name: {context}
current-context: {context}
kind: Config
preferences: {{}}
users:
- name: {context}
  user:
    auth-provider:
      config:
        cmd-args: config config-helper --format=json
        cmd-path: gcloud
        expiry-key: '{{.credential.token_expiry}}'
        token-key: '{{.credential.access_token}}'
      name: gcp"""


def generate_kubeconfig(endpoint: str, cluster_name: str, ca_certificate: str) -> str:
    """
    Render a kubeconfig document for a cluster.

    Args:
        endpoint: Cluster master endpoint (IP address or hostname, no scheme)
        cluster_name: Cluster name; the context is named "demo_<cluster_name>"
        ca_certificate: Base64 encoded cluster CA certificate

    Returns:
        kubeconfig document as text
    """
    context = get_kubeconfig_context_name(cluster_name)
    return KUBECONFIG_TEMPLATE.format(
        ca_certificate=ca_certificate,
        endpoint=endpoint,
        context=context,
    )


def kubeconfig_for_cluster(cluster: ClusterHandle) -> str:
    """Render the kubeconfig document for a resolved cluster handle."""
    return generate_kubeconfig(
        cluster.endpoint,
        cluster.name,
        cluster.master_auth.cluster_ca_certificate,
    )


def parse_kubeconfig(document: str) -> Dict[str, Any]:
    """Parse a kubeconfig document into the dict form the kubernetes client loads."""
    return yaml.safe_load(document) or {}
