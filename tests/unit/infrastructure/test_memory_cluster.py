"""Unit tests for the in-memory cluster backend."""

import copy

import pytest

from kdeploy.domain.deployment.descriptor.parser import parse_descriptor
from kdeploy.domain.deployment.descriptor.validator import load_descriptor
from kdeploy.domain.deployment.manifest.workload import RESTARTED_AT_ANNOTATION
from kdeploy.domain.deployment.model.status import LogOptions
from kdeploy.domain.deployment.service.lifecycle import LifecycleOrchestrator
from kdeploy.domain.shared.error import ClusterRejectedError, PartialApplyError
from kdeploy.infrastructure.memory.cluster import (
    InMemoryCluster,
    InMemoryPodApi,
    InMemoryServiceApi,
    InMemoryWorkloadApi,
)

NAMESPACE = "apps"
NAME = "kd-app-0123456789"

DESCRIPTOR = """
components:
  - name: web
    image: nginx:1.25
    ports:
      - name: http
        port: 80
  - name: worker
    image: worker:2
    ports:
      - name: grpc
        port: 9000
"""


def _make_orchestrator(cluster: InMemoryCluster) -> LifecycleOrchestrator:
    return LifecycleOrchestrator(
        namespace=NAMESPACE,
        workloads=InMemoryWorkloadApi(cluster),
        services=InMemoryServiceApi(cluster),
        pods=InMemoryPodApi(cluster),
    )


@pytest.fixture
def cluster() -> InMemoryCluster:
    return InMemoryCluster()


@pytest.fixture
def descriptor():
    return load_descriptor(parse_descriptor(DESCRIPTOR))


class TestInMemoryCluster:
    @pytest.mark.asyncio
    async def test_upsert_twice_is_idempotent(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)

        await orchestrator.upsert(NAME, descriptor)
        first = dict(cluster.stateful_sets), dict(cluster.services)
        cluster.calls.clear()
        await orchestrator.upsert(NAME, descriptor)

        assert (dict(cluster.stateful_sets), dict(cluster.services)) == first
        assert cluster.operations() == [
            "list_stateful_sets",
            "replace_stateful_set",
            "create_service",
            "replace_service",
            "create_service",
            "replace_service",
        ]

    @pytest.mark.asyncio
    async def test_upsert_after_restart_keeps_pod_template(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        await orchestrator.upsert(NAME, descriptor)
        await orchestrator.restart(NAME, descriptor)
        restarted = copy.deepcopy(cluster.stateful_sets[(NAMESPACE, NAME)])

        await orchestrator.upsert(NAME, descriptor)

        template = cluster.stateful_sets[(NAMESPACE, NAME)]["spec"]["template"]
        assert template == restarted["spec"]["template"]
        assert RESTARTED_AT_ANNOTATION in template["metadata"]["annotations"]

    @pytest.mark.asyncio
    async def test_failure_stops_apply(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        cluster.fail("create_service", ClusterRejectedError(500, "etcd unavailable"))

        with pytest.raises(PartialApplyError) as exc_info:
            await orchestrator.upsert(NAME, descriptor)

        assert exc_info.value.applied == [f"statefulset/{NAME}"]
        assert (NAMESPACE, NAME) in cluster.stateful_sets
        assert cluster.services == {}

    @pytest.mark.asyncio
    async def test_scale_and_pods(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        await orchestrator.upsert(NAME, descriptor)

        await orchestrator.scale(NAME, 3)
        info = await orchestrator.describe(NAME)

        assert [p.name for p in info.pods] == [f"{NAME}-0", f"{NAME}-1", f"{NAME}-2"]
        assert info.services == (f"{NAME}-web", f"{NAME}-worker")

    @pytest.mark.asyncio
    async def test_delete_removes_services(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        await orchestrator.upsert(NAME, descriptor)

        await orchestrator.delete(NAME)

        assert cluster.stateful_sets == {}
        assert cluster.services == {}

    @pytest.mark.asyncio
    async def test_delete_pod(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        await orchestrator.upsert(NAME, descriptor)

        await orchestrator.delete_pod(f"{NAME}-0")

        assert cluster.deleted_pods == [f"{NAME}-0"]
        with pytest.raises(ClusterRejectedError) as exc_info:
            await orchestrator.delete_pod(f"{NAME}-5")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_pod_log_tail(self, cluster, descriptor):
        orchestrator = _make_orchestrator(cluster)
        await orchestrator.upsert(NAME, descriptor)
        cluster.pod_logs[f"{NAME}-0"] = "one\ntwo\nthree\n"

        log = await orchestrator.read_pod_log(f"{NAME}-0", LogOptions(tail_lines=2))

        assert log == "two\nthree\n"
