"""Typed deployment descriptor.

Field-level rules (required fields, name syntax, image references, quantities)
live here so pydantic can report all of them in one pass. Rules that compare
fields across components live in ``descriptor.validator``.
"""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, ConfigDict, Field

from kdeploy.domain.deployment.descriptor.quantity import normalize_quantity
from kdeploy.domain.deployment.model.value import AccessMode, PortProtocol
from kdeploy.domain.shared.model.value import ValueObject

_DNS_LABEL_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_PORT_NAME_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_ENV_NAME_RE = re.compile(r"^[-._a-zA-Z][-._a-zA-Z0-9]*$")

# [registry[:port]/]path[:tag][@digest]
_IMAGE_RE = re.compile(
    r"^(?:(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)*"
    r"(?::[0-9]+)?/)?"
    r"[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*"
    r"(?:/[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*)*"
    r"(?::[\w][\w.-]{0,127})?"
    r"(?:@[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,})?$"
)


def _check_dns_label(value: str) -> str:
    if len(value) > 63 or not _DNS_LABEL_RE.match(value):
        raise ValueError(
            "must be a DNS-1123 label: lowercase alphanumerics or '-', "
            "starting and ending with an alphanumeric, at most 63 characters"
        )
    return value


def _check_port_name(value: str) -> str:
    if len(value) > 15 or not _PORT_NAME_RE.match(value) or "--" in value:
        raise ValueError(
            "must be an IANA service name: at most 15 lowercase alphanumerics or '-'"
        )
    if not any(ch.isalpha() for ch in value):
        raise ValueError("must contain at least one letter")
    return value


def _check_image(value: str) -> str:
    if not value.strip():
        raise ValueError("image reference must not be empty")
    if not _IMAGE_RE.match(value):
        raise ValueError(f"'{value}' is not a valid image reference")
    return value


def _check_env_name(value: str) -> str:
    if not _ENV_NAME_RE.match(value):
        raise ValueError(f"'{value}' is not a valid environment variable name")
    return value


def _check_mount_path(value: str) -> str:
    if not value.startswith("/"):
        raise ValueError("mount path must be absolute")
    return value.rstrip("/") or "/"


def _stringify_env_value(value: Any) -> Any:
    # YAML turns `true`, `8080` into bool/int; the cluster only takes strings
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _check_not_empty(value: tuple) -> tuple:
    if not value:
        raise ValueError("must list at least one entry")
    return value


def _quantity(value: Any) -> Any:
    if isinstance(value, (str, int, float)):
        return normalize_quantity(value)
    return value


DnsLabel = Annotated[str, AfterValidator(_check_dns_label)]
PortName = Annotated[str, AfterValidator(_check_port_name)]
ImageRef = Annotated[str, AfterValidator(_check_image)]
EnvName = Annotated[str, AfterValidator(_check_env_name)]
EnvValue = Annotated[str, BeforeValidator(_stringify_env_value)]
MountPath = Annotated[str, AfterValidator(_check_mount_path)]
Quantity = Annotated[str, BeforeValidator(_quantity)]


class DescriptorPart(ValueObject):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class PortSpec(DescriptorPart):
    name: PortName
    port: int = Field(ge=1, le=65535)
    protocol: PortProtocol = PortProtocol.TCP
    service: DnsLabel | None = None  # grouping; defaults to the component name


class VolumeSpec(DescriptorPart):
    name: DnsLabel
    mount_path: MountPath = Field(alias="mountPath")
    size: Quantity
    storage_class: str | None = Field(default=None, alias="storageClass")
    access_modes: Annotated[tuple[AccessMode, ...], AfterValidator(_check_not_empty)] = Field(
        default=(AccessMode.READ_WRITE_ONCE,), alias="accessModes"
    )

    def claim_shape(self) -> tuple[str, str | None, tuple[AccessMode, ...]]:
        """What must agree when several components share this volume."""
        return (self.size, self.storage_class, self.access_modes)


class ResourceSpec(DescriptorPart):
    limits: dict[str, Quantity] = Field(default_factory=dict)
    requests: dict[str, Quantity] = Field(default_factory=dict)


class Component(DescriptorPart):
    name: DnsLabel
    image: ImageRef
    command: tuple[str, ...] | None = None
    args: tuple[str, ...] | None = None
    env: dict[EnvName, EnvValue] = Field(default_factory=dict)
    resources: ResourceSpec = Field(default_factory=ResourceSpec)
    ports: tuple[PortSpec, ...] = ()
    volumes: tuple[VolumeSpec, ...] = ()

    def grouping_of(self, port: PortSpec) -> str:
        return port.service or self.name


class Descriptor(DescriptorPart):
    components: Annotated[tuple[Component, ...], AfterValidator(_check_not_empty)]
