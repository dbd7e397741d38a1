"""Unit tests for DeploymentService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.status import LogOptions
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.port.repository import DeploymentRepository
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.deployment.service.lifecycle import LifecycleOrchestrator
from kdeploy.domain.shared.error import (
    DescriptorParseError,
    DescriptorValidationError,
    NotFoundError,
)

OWNER = UserId("alice")
DEPLOYMENT_ID = DeploymentId("d-1")


def _make_record(data: str, owner: UserId = OWNER) -> DeploymentRecord:
    now = datetime.now(UTC)
    return DeploymentRecord(
        id=DEPLOYMENT_ID,
        owner_id=owner,
        data=data,
        created_at=now,
        updated_at=now,
    )


def _make_service(record: DeploymentRecord | None = None) -> DeploymentService:
    repo = AsyncMock(spec=DeploymentRepository)
    repo.get.return_value = record
    orchestrator = AsyncMock(spec=LifecycleOrchestrator)
    return DeploymentService(deployment_repo=repo, orchestrator=orchestrator)


def _workload() -> str:
    return str(resolve_workload_name(OWNER, DEPLOYMENT_ID))


class TestRegister:
    @pytest.mark.asyncio
    async def test_saves_valid_descriptor(self, single_component: str):
        service = _make_service()

        record = await service.register(OWNER, single_component)

        service.deployment_repo.save.assert_awaited_once_with(record)
        assert record.owner_id == OWNER
        assert record.data == single_component
        assert record.created_at == record.updated_at

    @pytest.mark.asyncio
    async def test_each_registration_gets_a_new_id(self, single_component: str):
        service = _make_service()

        first = await service.register(OWNER, single_component)
        second = await service.register(OWNER, single_component)

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_rejects_unparsable_descriptor(self):
        service = _make_service()

        with pytest.raises(DescriptorParseError):
            await service.register(OWNER, "components: [")

        service.deployment_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_invalid_descriptor(self):
        service = _make_service()

        with pytest.raises(DescriptorValidationError):
            await service.register(OWNER, "components: []")

        service.deployment_repo.save.assert_not_awaited()


class TestOwnership:
    @pytest.mark.asyncio
    async def test_missing_record(self):
        service = _make_service(record=None)

        with pytest.raises(NotFoundError):
            await service.get(DEPLOYMENT_ID, OWNER)

    @pytest.mark.asyncio
    async def test_other_owner_sees_not_found(self, single_component: str):
        service = _make_service(_make_record(single_component))

        with pytest.raises(NotFoundError):
            await service.apply(DEPLOYMENT_ID, UserId("mallory"))

        service.orchestrator.upsert.assert_not_awaited()


class TestApply:
    @pytest.mark.asyncio
    async def test_upserts_under_derived_name(self, single_component: str):
        service = _make_service(_make_record(single_component))

        await service.apply(DEPLOYMENT_ID, OWNER, replicas=2)

        name, descriptor, replicas = service.orchestrator.upsert.await_args.args
        assert str(name) == _workload()
        assert [c.name for c in descriptor.components] == ["app"]
        assert replicas == 2

    @pytest.mark.asyncio
    async def test_restart_with_unparsable_descriptor_makes_no_cluster_call(self):
        service = _make_service(_make_record("components: ["))

        with pytest.raises(DescriptorParseError):
            await service.restart(DEPLOYMENT_ID, OWNER)

        service.orchestrator.restart.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_apply_with_invalid_descriptor_makes_no_cluster_call(self):
        service = _make_service(_make_record("components:\n  - name: app\n"))

        with pytest.raises(DescriptorValidationError):
            await service.apply(DEPLOYMENT_ID, OWNER)

        service.orchestrator.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_scale_does_not_read_descriptor(self):
        # A stored descriptor that no longer validates can still be scaled
        service = _make_service(_make_record("components: ["))

        await service.scale(DEPLOYMENT_ID, OWNER, 3)

        name, replicas = service.orchestrator.scale.await_args.args
        assert str(name) == _workload()
        assert replicas == 3

    @pytest.mark.asyncio
    async def test_delete(self, single_component: str):
        service = _make_service(_make_record(single_component))

        await service.delete(DEPLOYMENT_ID, OWNER)

        assert str(service.orchestrator.delete.await_args.args[0]) == _workload()


class TestPods:
    @pytest.mark.asyncio
    async def test_delete_own_pod(self, single_component: str):
        service = _make_service(_make_record(single_component))

        await service.delete_pod(DEPLOYMENT_ID, OWNER, f"{_workload()}-0")

        service.orchestrator.delete_pod.assert_awaited_once_with(f"{_workload()}-0")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("suffix", ["", "-x", "-0-extra", "x-0"])
    async def test_foreign_pod_not_found(self, single_component: str, suffix: str):
        service = _make_service(_make_record(single_component))

        with pytest.raises(NotFoundError):
            await service.delete_pod(DEPLOYMENT_ID, OWNER, f"{_workload()}{suffix}")

        service.orchestrator.delete_pod.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_pod_name_reaches_orchestrator_check(self, single_component: str):
        service = _make_service(_make_record(single_component))

        await service.delete_pod(DEPLOYMENT_ID, OWNER, "")

        service.orchestrator.delete_pod.assert_awaited_once_with("")

    @pytest.mark.asyncio
    async def test_read_pod_log(self, single_component: str):
        service = _make_service(_make_record(single_component))
        service.orchestrator.read_pod_log.return_value = "hello\n"
        options = LogOptions(tail_lines=5)

        log = await service.read_pod_log(DEPLOYMENT_ID, OWNER, f"{_workload()}-1", options)

        assert log == "hello\n"
        service.orchestrator.read_pod_log.assert_awaited_once_with(f"{_workload()}-1", options)

    @pytest.mark.asyncio
    async def test_events_of_other_pod_not_found(self, single_component: str):
        service = _make_service(_make_record(single_component))

        with pytest.raises(NotFoundError):
            await service.list_pod_events(DEPLOYMENT_ID, OWNER, "some-other-pod-0")
