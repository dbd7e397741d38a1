"""Ports for the cluster API.

Namespaced methods take the namespace explicitly. Implementations
translate their client's failures into ``ClusterRejectedError`` (the cluster
answered with a structured error) or ``InternalError`` (anything else).
"""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from kdeploy.domain.deployment.model.status import (
    LogOptions,
    NodeCapacity,
    PodEvent,
    PodStatus,
    WorkloadStatus,
)
from kdeploy.domain.shared.port import Port


@runtime_checkable
class WorkloadApi(Port, Protocol):
    """StatefulSet operations."""

    @abstractmethod
    async def list_by_exact_name(self, namespace: str, name: str) -> Sequence[WorkloadStatus]:
        """List workloads whose name is exactly ``name`` (zero or one)."""
        ...

    @abstractmethod
    async def create(self, namespace: str, manifest: dict[str, Any]) -> None: ...

    @abstractmethod
    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None: ...

    @abstractmethod
    async def patch_scale(self, namespace: str, name: str, replicas: int) -> None:
        """Set the replica count through the scale sub-resource."""
        ...

    @abstractmethod
    async def delete(self, namespace: str, name: str) -> None:
        """Delete the workload and the resources that depend on it."""
        ...


@runtime_checkable
class ServiceApi(Port, Protocol):
    """Service operations."""

    @abstractmethod
    async def create(self, namespace: str, manifest: dict[str, Any]) -> None: ...

    @abstractmethod
    async def replace(self, namespace: str, name: str, manifest: dict[str, Any]) -> None: ...

    @abstractmethod
    async def list_for_workload(self, namespace: str, workload_name: str) -> list[str]:
        """Names of the services selecting ``workload_name``'s pods."""
        ...


@runtime_checkable
class PodApi(Port, Protocol):
    """Pod operations and passthroughs."""

    @abstractmethod
    async def delete_pod(self, namespace: str, pod_name: str) -> None: ...

    @abstractmethod
    async def read_pod_log(self, namespace: str, pod_name: str, options: LogOptions) -> str: ...

    @abstractmethod
    async def list_pod_events(self, namespace: str, pod_name: str) -> list[PodEvent]: ...

    @abstractmethod
    async def list_pods(self, namespace: str, workload_name: str) -> list[PodStatus]: ...


@runtime_checkable
class NodeApi(Port, Protocol):
    @abstractmethod
    async def list_nodes(self) -> list[NodeCapacity]:
        """Allocatable resources of each schedulable node."""
        ...
