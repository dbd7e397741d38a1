"""Pod adapter: delete, log and event passthroughs, pod listing."""

from kubernetes_asyncio.client import ApiClient, CoreV1Api, CoreV1Event, V1Pod

from kdeploy.domain.deployment.manifest.workload import pod_selector
from kdeploy.domain.deployment.model.status import LogOptions, PodEvent, PodStatus
from kdeploy.domain.deployment.port.cluster import PodApi
from kdeploy.infrastructure.kubernetes.errors import cluster_call
from kdeploy.infrastructure.kubernetes.selectors import label_selector


class KubernetesPodApi(PodApi):
    def __init__(self, api_client: ApiClient):
        self._core = CoreV1Api(api_client)

    async def delete_pod(self, namespace: str, pod_name: str) -> None:
        with cluster_call("delete_pod", namespace=namespace, pod=pod_name):
            await self._core.delete_namespaced_pod(pod_name, namespace)

    async def read_pod_log(self, namespace: str, pod_name: str, options: LogOptions) -> str:
        kwargs = options.model_dump(exclude_none=True)
        with cluster_call("read_pod_log", namespace=namespace, pod=pod_name):
            return await self._core.read_namespaced_pod_log(pod_name, namespace, **kwargs)

    async def list_pod_events(self, namespace: str, pod_name: str) -> list[PodEvent]:
        with cluster_call("list_pod_events", namespace=namespace, pod=pod_name):
            result = await self._core.list_namespaced_event(
                namespace,
                field_selector=f"involvedObject.kind=Pod,involvedObject.name={pod_name}",
            )
        return [_to_event(e) for e in result.items]

    async def list_pods(self, namespace: str, workload_name: str) -> list[PodStatus]:
        with cluster_call("list_pods", namespace=namespace, name=workload_name):
            result = await self._core.list_namespaced_pod(
                namespace, label_selector=label_selector(pod_selector(workload_name))
            )
        return sorted((_to_pod(p) for p in result.items), key=lambda p: p.name)


def _to_pod(pod: V1Pod) -> PodStatus:
    statuses = (pod.status.container_statuses if pod.status else None) or []
    return PodStatus(
        name=pod.metadata.name,
        phase=pod.status.phase if pod.status else None,
        ready=bool(statuses) and all(s.ready for s in statuses),
        restarts=sum(s.restart_count or 0 for s in statuses),
        node=pod.spec.node_name if pod.spec else None,
    )


def _to_event(event: CoreV1Event) -> PodEvent:
    return PodEvent(
        type=event.type,
        reason=event.reason,
        message=event.message,
        count=event.count,
        first_seen=event.first_timestamp,
        last_seen=event.last_timestamp or event.event_time,
    )
