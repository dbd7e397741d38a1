from enum import StrEnum

from kdeploy.domain.shared.model.value import RootValueObject, ValueObject


class DeploymentId(RootValueObject[str]):
    """Opaque identifier of a stored deployment record."""


class WorkloadName(RootValueObject[str]):
    """Cluster resource name shared by a deployment's StatefulSet and Services."""


class Namespace(RootValueObject[str]):
    """The single cluster namespace all workloads are placed in."""


class PortProtocol(StrEnum):
    TCP = "TCP"
    UDP = "UDP"
    SCTP = "SCTP"


class AccessMode(StrEnum):
    READ_WRITE_ONCE = "ReadWriteOnce"
    READ_ONLY_MANY = "ReadOnlyMany"
    READ_WRITE_MANY = "ReadWriteMany"
    READ_WRITE_ONCE_POD = "ReadWriteOncePod"


class FieldError(ValueObject):
    """One descriptor problem, tagged with a dotted field path like ``components[0].image``."""

    path: str
    message: str
