from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.status import NodeCapacity
from kdeploy.domain.deployment.service.cluster import ClusterService
from kdeploy.domain.shared.query import Query, QueryHandler, Result


class GetCapacity(Query):
    pass


class Capacity(Result):
    cpu: str
    memory: str
    nodes: list[NodeCapacity]


class GetCapacityHandler(QueryHandler[GetCapacity, Capacity]):
    principal: Principal
    cluster_service: ClusterService

    async def run(self, cmd: GetCapacity) -> Capacity:
        capacity = await self.cluster_service.capacity()
        return Capacity(cpu=capacity.cpu, memory=capacity.memory, nodes=list(capacity.nodes))
