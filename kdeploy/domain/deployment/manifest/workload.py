"""Descriptor -> StatefulSet manifest.

Pure: equal inputs give equal manifests, which is what makes replace-based
updates idempotent. Containers keep declaration order so successive manifests
diff cleanly.
"""

from typing import Any

from kdeploy.domain.deployment.model.descriptor import Component, Descriptor, PortSpec, VolumeSpec
from kdeploy.domain.deployment.model.value import WorkloadName
from kdeploy.domain.shared.model.value import ValueObject

DEFAULT_REPLICAS = 1

INSTANCE_LABEL = "app.kubernetes.io/instance"
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY = "kdeploy"
RESTARTED_AT_ANNOTATION = "kubectl.kubernetes.io/restartedAt"


class ServiceGrouping(ValueObject):
    """Ports exposed together through one Service, in declaration order."""

    name: str
    ports: tuple[PortSpec, ...]


class CompiledWorkload(ValueObject):
    manifest: dict[str, Any]
    groupings: tuple[ServiceGrouping, ...]


def pod_selector(name: WorkloadName | str) -> dict[str, str]:
    return {INSTANCE_LABEL: str(name)}


def workload_labels(name: WorkloadName | str) -> dict[str, str]:
    return {INSTANCE_LABEL: str(name), MANAGED_BY_LABEL: MANAGED_BY}


def compile_workload(
    name: WorkloadName | str,
    descriptor: Descriptor,
    replicas: int = DEFAULT_REPLICAS,
) -> CompiledWorkload:
    """Compile a validated descriptor into a StatefulSet plus its service groupings.

    The replica count is an input: the compiler never looks at the cluster.
    """
    name = str(name)
    spec: dict[str, Any] = {
        "replicas": replicas,
        "serviceName": name,
        "selector": {"matchLabels": pod_selector(name)},
        "template": {
            "metadata": {"labels": workload_labels(name)},
            "spec": {"containers": [_container(c) for c in descriptor.components]},
        },
    }

    claims = _volume_claim_templates(descriptor)
    if claims:
        spec["volumeClaimTemplates"] = claims

    manifest = {
        "apiVersion": "apps/v1",
        "kind": "StatefulSet",
        "metadata": {"name": name, "labels": workload_labels(name)},
        "spec": spec,
    }
    return CompiledWorkload(manifest=manifest, groupings=_groupings(descriptor))


def _container(component: Component) -> dict[str, Any]:
    container: dict[str, Any] = {"name": component.name, "image": component.image}

    if component.command is not None:
        container["command"] = list(component.command)
    if component.args is not None:
        container["args"] = list(component.args)
    if component.env:
        container["env"] = [{"name": k, "value": v} for k, v in component.env.items()]
    if component.ports:
        container["ports"] = [
            {"name": p.name, "containerPort": p.port, "protocol": p.protocol.value}
            for p in component.ports
        ]

    resources = {}
    if component.resources.limits:
        resources["limits"] = dict(component.resources.limits)
    if component.resources.requests:
        resources["requests"] = dict(component.resources.requests)
    if resources:
        container["resources"] = resources

    if component.volumes:
        container["volumeMounts"] = [
            {"name": v.name, "mountPath": v.mount_path} for v in component.volumes
        ]
    return container


def _volume_claim_templates(descriptor: Descriptor) -> list[dict[str, Any]]:
    # A volume shared by several components becomes one claim, first declaration wins
    volumes: dict[str, VolumeSpec] = {}
    for component in descriptor.components:
        for volume in component.volumes:
            volumes.setdefault(volume.name, volume)

    templates = []
    for volume in volumes.values():
        claim_spec: dict[str, Any] = {
            "accessModes": [mode.value for mode in volume.access_modes],
            "resources": {"requests": {"storage": volume.size}},
        }
        if volume.storage_class is not None:
            claim_spec["storageClassName"] = volume.storage_class
        templates.append({"metadata": {"name": volume.name}, "spec": claim_spec})
    return templates


def _groupings(descriptor: Descriptor) -> tuple[ServiceGrouping, ...]:
    grouped: dict[str, list[PortSpec]] = {}
    for component in descriptor.components:
        for port in component.ports:
            grouped.setdefault(component.grouping_of(port), []).append(port)
    return tuple(ServiceGrouping(name=name, ports=tuple(ports)) for name, ports in grouped.items())
