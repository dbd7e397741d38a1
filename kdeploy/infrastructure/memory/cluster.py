"""In-process stand-in for the cluster API.

Keeps manifests in dicts and answers like the API server does for the cases
kdeploy cares about: 409 ``AlreadyExists`` on a duplicate create, 404
``NotFound`` on a missing object. Pods are synthesized from each StatefulSet's
replica count as ``<name>-<ordinal>``. Every call is recorded in ``calls``;
``fail`` arms a one-shot error for the next call of an operation.
"""

import copy
from typing import Any

from kdeploy.domain.deployment.manifest.workload import INSTANCE_LABEL, RESTARTED_AT_ANNOTATION
from kdeploy.domain.deployment.model.status import (
    LogOptions,
    NodeCapacity,
    PodEvent,
    PodStatus,
    WorkloadStatus,
)
from kdeploy.domain.deployment.port.cluster import NodeApi, PodApi, ServiceApi, WorkloadApi
from kdeploy.domain.shared.error import ClusterRejectedError, KDeployError

DEFAULT_NODES = (NodeCapacity(name="memory-0", cpu="4", memory="8Gi", pods=110),)


def _already_exists(kind: str, name: str) -> ClusterRejectedError:
    return ClusterRejectedError(409, f'{kind} "{name}" already exists', reason="AlreadyExists")


def _not_found(kind: str, name: str) -> ClusterRejectedError:
    return ClusterRejectedError(404, f'{kind} "{name}" not found', reason="NotFound")


class InMemoryCluster:
    def __init__(self, nodes: tuple[NodeCapacity, ...] = DEFAULT_NODES) -> None:
        self.stateful_sets: dict[tuple[str, str], dict[str, Any]] = {}
        self.services: dict[tuple[str, str], dict[str, Any]] = {}
        self.pod_logs: dict[str, str] = {}
        self.pod_events: dict[str, list[PodEvent]] = {}
        self.deleted_pods: list[str] = []
        self.nodes = list(nodes)
        self.calls: list[tuple[str, ...]] = []
        self._failures: dict[str, KDeployError] = {}

    def fail(self, operation: str, error: KDeployError) -> None:
        """Make the next ``operation`` call raise ``error``."""
        self._failures[operation] = error

    def record(self, operation: str, *args: str) -> None:
        self.calls.append((operation, *args))
        if operation in self._failures:
            raise self._failures.pop(operation)

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def pod_names(self, namespace: str, workload_name: str) -> list[str]:
        manifest = self.stateful_sets.get((namespace, workload_name))
        if manifest is None:
            return []
        replicas = manifest["spec"].get("replicas", 1)
        return [
            f"{workload_name}-{i}"
            for i in range(replicas)
            if f"{workload_name}-{i}" not in self.deleted_pods
        ]


class InMemoryWorkloadApi(WorkloadApi):
    def __init__(self, cluster: InMemoryCluster):
        self._cluster = cluster

    async def list_by_exact_name(self, namespace: str, name: str) -> list[WorkloadStatus]:
        self._cluster.record("list_stateful_sets", namespace, name)
        manifest = self._cluster.stateful_sets.get((namespace, name))
        if manifest is None:
            return []
        replicas = manifest["spec"].get("replicas", 1)
        annotations = manifest["spec"]["template"]["metadata"].get("annotations", {})
        return [
            WorkloadStatus(
                name=name,
                replicas=replicas,
                ready_replicas=replicas,
                current_replicas=replicas,
                updated_replicas=replicas,
                restarted_at=annotations.get(RESTARTED_AT_ANNOTATION),
            )
        ]

    async def create(self, namespace: str, manifest: dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        self._cluster.record("create_stateful_set", namespace, name)
        if (namespace, name) in self._cluster.stateful_sets:
            raise _already_exists("statefulsets.apps", name)
        self._cluster.stateful_sets[(namespace, name)] = copy.deepcopy(manifest)

    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None:
        self._cluster.record("replace_stateful_set", namespace, name)
        if (namespace, name) not in self._cluster.stateful_sets:
            raise _not_found("statefulsets.apps", name)
        self._cluster.stateful_sets[(namespace, name)] = copy.deepcopy(manifest)

    async def patch_scale(self, namespace: str, name: str, replicas: int) -> None:
        self._cluster.record("scale_stateful_set", namespace, name)
        manifest = self._cluster.stateful_sets.get((namespace, name))
        if manifest is None:
            raise _not_found("statefulsets.apps", name)
        manifest["spec"]["replicas"] = replicas

    async def delete(self, namespace: str, name: str) -> None:
        self._cluster.record("delete_stateful_set", namespace, name)
        if self._cluster.stateful_sets.pop((namespace, name), None) is None:
            raise _not_found("statefulsets.apps", name)
        for key, service in list(self._cluster.services.items()):
            if key[0] == namespace and service["spec"]["selector"].get(INSTANCE_LABEL) == name:
                del self._cluster.services[key]


class InMemoryServiceApi(ServiceApi):
    def __init__(self, cluster: InMemoryCluster):
        self._cluster = cluster

    async def create(self, namespace: str, manifest: dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        self._cluster.record("create_service", namespace, name)
        if (namespace, name) in self._cluster.services:
            raise _already_exists("services", name)
        self._cluster.services[(namespace, name)] = copy.deepcopy(manifest)

    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None:
        self._cluster.record("replace_service", namespace, name)
        if (namespace, name) not in self._cluster.services:
            raise _not_found("services", name)
        self._cluster.services[(namespace, name)] = copy.deepcopy(manifest)

    async def list_for_workload(self, namespace: str, workload_name: str) -> list[str]:
        self._cluster.record("list_services", namespace, workload_name)
        return sorted(
            name
            for (ns, name), service in self._cluster.services.items()
            if ns == namespace and service["spec"]["selector"].get(INSTANCE_LABEL) == workload_name
        )


class InMemoryPodApi(PodApi):
    def __init__(self, cluster: InMemoryCluster):
        self._cluster = cluster

    async def delete_pod(self, namespace: str, pod_name: str) -> None:
        self._cluster.record("delete_pod", namespace, pod_name)
        if not self._exists(namespace, pod_name):
            raise _not_found("pods", pod_name)
        self._cluster.deleted_pods.append(pod_name)

    async def read_pod_log(self, namespace: str, pod_name: str, options: LogOptions) -> str:
        self._cluster.record("read_pod_log", namespace, pod_name)
        if not self._exists(namespace, pod_name):
            raise _not_found("pods", pod_name)
        lines = self._cluster.pod_logs.get(pod_name, "").splitlines(keepends=True)
        if options.tail_lines is not None:
            lines = lines[-options.tail_lines :] if options.tail_lines else []
        return "".join(lines)

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[PodEvent]:
        self._cluster.record("list_pod_events", namespace, pod_name)
        return list(self._cluster.pod_events.get(pod_name, []))

    async def list_pods(self, namespace: str, workload_name: str) -> list[PodStatus]:
        self._cluster.record("list_pods", namespace, workload_name)
        return [
            PodStatus(name=name, phase="Running", ready=True, node=self._cluster.nodes[0].name)
            for name in self._cluster.pod_names(namespace, workload_name)
        ]

    def _exists(self, namespace: str, pod_name: str) -> bool:
        workload_name, _, ordinal = pod_name.rpartition("-")
        return ordinal.isdigit() and pod_name in self._cluster.pod_names(namespace, workload_name)


class InMemoryNodeApi(NodeApi):
    def __init__(self, cluster: InMemoryCluster):
        self._cluster = cluster

    async def list_nodes(self) -> list[NodeCapacity]:
        self._cluster.record("list_nodes")
        return list(self._cluster.nodes)
