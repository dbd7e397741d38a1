"""Read-side views of cluster objects, as returned by the cluster ports."""

from datetime import datetime

from kdeploy.domain.shared.model.value import ValueObject


class WorkloadStatus(ValueObject):
    name: str
    replicas: int | None = None  # desired, as stored in the StatefulSet spec
    ready_replicas: int = 0
    current_replicas: int = 0
    updated_replicas: int = 0
    restarted_at: str | None = None  # pod template restart stamp, if any


class PodStatus(ValueObject):
    name: str
    phase: str | None = None
    ready: bool = False
    restarts: int = 0
    node: str | None = None


class PodEvent(ValueObject):
    type: str | None = None
    reason: str | None = None
    message: str | None = None
    count: int | None = None
    first_seen: datetime | None = None
    last_seen: datetime | None = None


class LogOptions(ValueObject):
    container: str | None = None
    previous: bool = False
    since_seconds: int | None = None
    timestamps: bool = False
    tail_lines: int | None = None


class NodeCapacity(ValueObject):
    name: str
    cpu: str
    memory: str
    pods: int | None = None


class ClusterCapacity(ValueObject):
    """Allocatable resources summed over schedulable nodes."""

    cpu: str
    memory: str
    nodes: tuple[NodeCapacity, ...] = ()
