from typing import AsyncIterable

from dishka import provide
from kubernetes_asyncio.client import ApiClient

from kdeploy.config import Config
from kdeploy.domain.deployment.port.cluster import NodeApi, PodApi, ServiceApi, WorkloadApi
from kdeploy.infrastructure.kubernetes.client import create_api_client
from kdeploy.infrastructure.kubernetes.node import KubernetesNodeApi
from kdeploy.infrastructure.kubernetes.pod import KubernetesPodApi
from kdeploy.infrastructure.kubernetes.service import KubernetesServiceApi
from kdeploy.infrastructure.kubernetes.workload import KubernetesWorkloadApi
from kdeploy.util.di.base import Provider, Scope


class KubernetesProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_api_client(self, config: Config) -> AsyncIterable[ApiClient]:
        api_client = await create_api_client(config.cluster)
        yield api_client
        await api_client.close()

    @provide(scope=Scope.APP)
    def get_workload_api(self, api_client: ApiClient) -> WorkloadApi:
        return KubernetesWorkloadApi(api_client)

    @provide(scope=Scope.APP)
    def get_service_api(self, api_client: ApiClient) -> ServiceApi:
        return KubernetesServiceApi(api_client)

    @provide(scope=Scope.APP)
    def get_pod_api(self, api_client: ApiClient) -> PodApi:
        return KubernetesPodApi(api_client)

    @provide(scope=Scope.APP)
    def get_node_api(self, api_client: ApiClient) -> NodeApi:
        return KubernetesNodeApi(api_client)
