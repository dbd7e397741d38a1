"""Service adapter on kubernetes_asyncio's CoreV1Api."""

import copy
from typing import Any

from kubernetes_asyncio.client import ApiClient, CoreV1Api

from kdeploy.domain.deployment.manifest.workload import pod_selector
from kdeploy.domain.deployment.port.cluster import ServiceApi
from kdeploy.infrastructure.kubernetes.errors import cluster_call
from kdeploy.infrastructure.kubernetes.selectors import label_selector


class KubernetesServiceApi(ServiceApi):
    def __init__(self, api_client: ApiClient):
        self._core = CoreV1Api(api_client)

    async def create(self, namespace: str, manifest: dict[str, Any]) -> None:
        name = manifest["metadata"]["name"]
        with cluster_call("create_service", namespace=namespace, name=name):
            await self._core.create_namespaced_service(namespace, manifest)

    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None:
        # An update must name the version it replaces, and clusterIP is immutable
        with cluster_call("replace_service", namespace=namespace, name=name):
            current = await self._core.read_namespaced_service(name, namespace)
            body = copy.deepcopy(manifest)
            body["metadata"]["resourceVersion"] = current.metadata.resource_version
            if current.spec and current.spec.cluster_ip:
                body["spec"]["clusterIP"] = current.spec.cluster_ip
            await self._core.replace_namespaced_service(name, namespace, body)

    async def list_for_workload(self, namespace: str, workload_name: str) -> list[str]:
        with cluster_call("list_services", namespace=namespace, name=workload_name):
            result = await self._core.list_namespaced_service(
                namespace, label_selector=label_selector(pod_selector(workload_name))
            )
        return sorted(s.metadata.name for s in result.items)
