from dishka import provide

from kdeploy.domain.deployment.port.cluster import NodeApi, PodApi, ServiceApi, WorkloadApi
from kdeploy.infrastructure.memory.cluster import (
    InMemoryCluster,
    InMemoryNodeApi,
    InMemoryPodApi,
    InMemoryServiceApi,
    InMemoryWorkloadApi,
)
from kdeploy.util.di.base import Provider, Scope


class MemoryClusterProvider(Provider):
    """Cluster ports backed by one process-wide ``InMemoryCluster``."""

    @provide(scope=Scope.APP)
    def get_cluster(self) -> InMemoryCluster:
        return InMemoryCluster()

    @provide(scope=Scope.APP)
    def get_workload_api(self, cluster: InMemoryCluster) -> WorkloadApi:
        return InMemoryWorkloadApi(cluster)

    @provide(scope=Scope.APP)
    def get_service_api(self, cluster: InMemoryCluster) -> ServiceApi:
        return InMemoryServiceApi(cluster)

    @provide(scope=Scope.APP)
    def get_pod_api(self, cluster: InMemoryCluster) -> PodApi:
        return InMemoryPodApi(cluster)

    @provide(scope=Scope.APP)
    def get_node_api(self, cluster: InMemoryCluster) -> NodeApi:
        return InMemoryNodeApi(cluster)
