"""Cluster API client construction."""

import logfire
from kubernetes_asyncio import config as k8s_config
from kubernetes_asyncio.client import ApiClient, Configuration
from kubernetes_asyncio.config import ConfigException

from kdeploy.config import ClusterConfig
from kdeploy.domain.shared.error import ConfigurationError


async def create_api_client(config: ClusterConfig) -> ApiClient:
    """Build an API client from the pod's service account or a kubeconfig.

    Raises:
        ConfigurationError: If no usable cluster credentials are found.
    """
    configuration = Configuration()
    try:
        if config.in_cluster:
            k8s_config.load_incluster_config(client_configuration=configuration)
        else:
            await k8s_config.load_kube_config(
                config_file=config.kubeconfig,
                context=config.context,
                client_configuration=configuration,
            )
    except ConfigException as e:
        raise ConfigurationError(f"Cannot load cluster credentials: {e}") from e

    logfire.info(
        "Cluster client configured",
        host=configuration.host,
        in_cluster=config.in_cluster,
        namespace=config.namespace,
    )
    return ApiClient(configuration=configuration)
