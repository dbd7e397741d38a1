"""StatefulSet adapter on kubernetes_asyncio's AppsV1Api."""

from collections.abc import Sequence
from typing import Any

import logfire
from kubernetes_asyncio.client import ApiClient, AppsV1Api, CoreV1Api, V1StatefulSet

from kdeploy.domain.deployment.manifest.workload import RESTARTED_AT_ANNOTATION, pod_selector
from kdeploy.domain.deployment.model.status import WorkloadStatus
from kdeploy.domain.deployment.port.cluster import WorkloadApi
from kdeploy.infrastructure.kubernetes.errors import cluster_call
from kdeploy.infrastructure.kubernetes.selectors import label_selector


class KubernetesWorkloadApi(WorkloadApi):
    def __init__(self, api_client: ApiClient):
        self._apps = AppsV1Api(api_client)
        self._core = CoreV1Api(api_client)

    async def list_by_exact_name(self, namespace: str, name: str) -> Sequence[WorkloadStatus]:
        with cluster_call("list_stateful_sets", namespace=namespace, name=name):
            result = await self._apps.list_namespaced_stateful_set(
                namespace, field_selector=f"metadata.name={name}"
            )
        return [_to_status(s) for s in result.items]

    async def create(self, namespace: str, manifest: dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        with cluster_call("create_stateful_set", namespace=namespace, name=name):
            await self._apps.create_namespaced_stateful_set(namespace, manifest)

    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None:
        with cluster_call("replace_stateful_set", namespace=namespace, name=name):
            await self._apps.replace_namespaced_stateful_set(name, namespace, manifest)

    async def patch_scale(self, namespace: str, name: str, replicas: int) -> None:
        # A list body is sent as application/json-patch+json
        patch = [{"op": "replace", "path": "/spec/replicas", "value": replicas}]
        with cluster_call("scale_stateful_set", namespace=namespace, name=name):
            await self._apps.patch_namespaced_stateful_set_scale(name, namespace, patch)

    async def delete(self, namespace: str, name: str) -> None:
        # Pods are garbage collected with the StatefulSet; Services are not owned by it
        with cluster_call("delete_stateful_set", namespace=namespace, name=name):
            await self._apps.delete_namespaced_stateful_set(
                name, namespace, propagation_policy="Background"
            )
            services = await self._core.list_namespaced_service(
                namespace, label_selector=label_selector(pod_selector(name))
            )
            for service in services.items:
                await self._core.delete_namespaced_service(service.metadata.name, namespace)
        logfire.info(
            "Deleted StatefulSet and services",
            name=name,
            services=[s.metadata.name for s in services.items],
        )


def _to_status(stateful_set: V1StatefulSet) -> WorkloadStatus:
    status = stateful_set.status
    template = stateful_set.spec.template if stateful_set.spec else None
    metadata = template.metadata if template else None
    annotations = (metadata.annotations if metadata else None) or {}
    return WorkloadStatus(
        name=stateful_set.metadata.name,
        replicas=stateful_set.spec.replicas if stateful_set.spec else None,
        ready_replicas=(status.ready_replicas or 0) if status else 0,
        current_replicas=(status.current_replicas or 0) if status else 0,
        updated_replicas=(status.updated_replicas or 0) if status else 0,
        restarted_at=annotations.get(RESTARTED_AT_ANNOTATION),
    )
