from kdeploy.domain.deployment.descriptor.quantity import format_quantity, parse_quantity
from kdeploy.domain.deployment.model.status import ClusterCapacity
from kdeploy.domain.deployment.port.cluster import NodeApi
from kdeploy.domain.shared.service import Service


class ClusterService(Service):
    nodes: NodeApi

    async def capacity(self) -> ClusterCapacity:
        """Sum allocatable CPU (cores) and memory (bytes) over the schedulable nodes."""
        nodes = await self.nodes.list_nodes()
        cpu = sum((parse_quantity(n.cpu) for n in nodes), start=parse_quantity(0))
        memory = sum((parse_quantity(n.memory) for n in nodes), start=parse_quantity(0))
        return ClusterCapacity(
            cpu=format_quantity(cpu),
            memory=format_quantity(memory),
            nodes=tuple(nodes),
        )
