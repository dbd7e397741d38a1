from datetime import UTC, datetime
from uuid import uuid4

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.descriptor.parser import parse_descriptor
from kdeploy.domain.deployment.descriptor.validator import load_descriptor
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name
from kdeploy.domain.deployment.model.descriptor import Descriptor
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.status import LogOptions, PodEvent
from kdeploy.domain.deployment.model.value import DeploymentId, WorkloadName
from kdeploy.domain.deployment.port.repository import DeploymentRepository
from kdeploy.domain.deployment.service.lifecycle import (
    ApplyReport,
    DeploymentInfo,
    LifecycleOrchestrator,
)
from kdeploy.domain.shared.error import NotFoundError
from kdeploy.domain.shared.service import Service


class DeploymentService(Service):
    """Record lookup and the parse -> validate -> name pipeline in front of the orchestrator.

    Records are only visible to their owner; anyone else gets ``NotFoundError``
    so ids of other users' deployments are not disclosed.
    """

    deployment_repo: DeploymentRepository
    orchestrator: LifecycleOrchestrator

    async def register(self, owner_id: UserId, data: str) -> DeploymentRecord:
        """Store a new descriptor. It must parse and validate first."""
        load_descriptor(parse_descriptor(data))

        now = datetime.now(UTC)
        record = DeploymentRecord(
            id=DeploymentId(uuid4().hex),
            owner_id=owner_id,
            data=data,
            created_at=now,
            updated_at=now,
        )
        await self.deployment_repo.save(record)
        return record

    async def get(self, deployment_id: DeploymentId, requester: UserId) -> DeploymentRecord:
        record = await self.deployment_repo.get(deployment_id)
        if record is None or record.owner_id != requester:
            raise NotFoundError(f"Deployment not found: {deployment_id}")
        return record

    async def list_owned(self, requester: UserId) -> list[DeploymentRecord]:
        return await self.deployment_repo.list_by_owner(requester)

    async def apply(
        self,
        deployment_id: DeploymentId,
        requester: UserId,
        replicas: int | None = None,
    ) -> ApplyReport:
        record = await self.get(deployment_id, requester)
        name, descriptor = self._compile_inputs(record)
        return await self.orchestrator.upsert(name, descriptor, replicas)

    async def scale(self, deployment_id: DeploymentId, requester: UserId, replicas: int) -> None:
        # Scaling never re-reads the descriptor
        record = await self.get(deployment_id, requester)
        await self.orchestrator.scale(self._workload_name(record), replicas)

    async def restart(
        self,
        deployment_id: DeploymentId,
        requester: UserId,
        replicas: int | None = None,
    ) -> ApplyReport:
        record = await self.get(deployment_id, requester)
        name, descriptor = self._compile_inputs(record)
        return await self.orchestrator.restart(name, descriptor, replicas)

    async def delete(self, deployment_id: DeploymentId, requester: UserId) -> None:
        record = await self.get(deployment_id, requester)
        await self.orchestrator.delete(self._workload_name(record))

    async def delete_pod(
        self, deployment_id: DeploymentId, requester: UserId, pod_name: str
    ) -> None:
        record = await self.get(deployment_id, requester)
        if pod_name:
            self._check_pod(record, pod_name)
        await self.orchestrator.delete_pod(pod_name)

    async def describe(self, deployment_id: DeploymentId, requester: UserId) -> DeploymentInfo:
        record = await self.get(deployment_id, requester)
        return await self.orchestrator.describe(self._workload_name(record))

    async def read_pod_log(
        self,
        deployment_id: DeploymentId,
        requester: UserId,
        pod_name: str,
        options: LogOptions,
    ) -> str:
        record = await self.get(deployment_id, requester)
        self._check_pod(record, pod_name)
        return await self.orchestrator.read_pod_log(pod_name, options)

    async def list_pod_events(
        self, deployment_id: DeploymentId, requester: UserId, pod_name: str
    ) -> list[PodEvent]:
        record = await self.get(deployment_id, requester)
        self._check_pod(record, pod_name)
        return await self.orchestrator.list_pod_events(pod_name)

    def _workload_name(self, record: DeploymentRecord) -> WorkloadName:
        return resolve_workload_name(record.owner_id, record.id)

    def _compile_inputs(self, record: DeploymentRecord) -> tuple[WorkloadName, Descriptor]:
        # Parse and validate before anything reaches the cluster
        descriptor = load_descriptor(parse_descriptor(record.data))
        return self._workload_name(record), descriptor

    def _check_pod(self, record: DeploymentRecord, pod_name: str) -> None:
        # StatefulSet pods are named "<workload>-<ordinal>"
        prefix = f"{self._workload_name(record)}-"
        suffix = pod_name.removeprefix(prefix)
        if suffix == pod_name or not suffix.isdigit():
            raise NotFoundError(f"Pod not found: {pod_name}")
