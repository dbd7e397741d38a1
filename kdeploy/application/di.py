from dishka import AsyncContainer, make_async_container

from kdeploy.config import Config
from kdeploy.domain.auth.util.di import AuthProvider
from kdeploy.domain.deployment.util.di import DeploymentProvider
from kdeploy.infrastructure.kubernetes.di import KubernetesProvider
from kdeploy.infrastructure.memory.di import MemoryClusterProvider
from kdeploy.infrastructure.persistence.di import PersistenceProvider
from kdeploy.util.di.base import Provider, Scope


def cluster_provider(config: Config) -> Provider:
    if config.cluster.backend == "memory":
        return MemoryClusterProvider()
    return KubernetesProvider()


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        cluster_provider(config),
        DeploymentProvider(),
        AuthProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
