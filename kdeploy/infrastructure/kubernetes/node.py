from kubernetes_asyncio.client import ApiClient, CoreV1Api

from kdeploy.domain.deployment.model.status import NodeCapacity
from kdeploy.domain.deployment.port.cluster import NodeApi
from kdeploy.infrastructure.kubernetes.errors import cluster_call


class KubernetesNodeApi(NodeApi):
    def __init__(self, api_client: ApiClient):
        self._core = CoreV1Api(api_client)

    async def list_nodes(self) -> list[NodeCapacity]:
        with cluster_call("list_nodes"):
            result = await self._core.list_node()

        nodes = []
        for node in result.items:
            if node.spec and node.spec.unschedulable:
                continue
            allocatable = (node.status.allocatable if node.status else None) or {}
            pods = allocatable.get("pods")
            nodes.append(
                NodeCapacity(
                    name=node.metadata.name,
                    cpu=allocatable.get("cpu", "0"),
                    memory=allocatable.get("memory", "0"),
                    pods=int(pods) if pods is not None and pods.isdigit() else None,
                )
            )
        return sorted(nodes, key=lambda n: n.name)
