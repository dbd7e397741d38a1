"""Service grouping -> Service manifest."""

from collections.abc import Sequence
from typing import Any

from kdeploy.domain.deployment.manifest.workload import pod_selector, workload_labels
from kdeploy.domain.deployment.model.descriptor import PortSpec
from kdeploy.domain.deployment.model.value import WorkloadName
from kdeploy.domain.shared.error import ServiceCompileError


def compile_service(
    workload_name: WorkloadName | str,
    service_name: str,
    ports: Sequence[PortSpec],
) -> dict[str, Any]:
    """Build the Service exposing ``ports`` of the workload's pods.

    Raises:
        ServiceCompileError: If ``ports`` is empty.
    """
    if not ports:
        raise ServiceCompileError(f"Service '{service_name}' has no ports to expose")

    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": service_name, "labels": workload_labels(workload_name)},
        "spec": {
            "selector": pod_selector(workload_name),
            "ports": [
                {
                    "name": p.name,
                    "port": p.port,
                    "targetPort": p.port,
                    "protocol": p.protocol.value,
                }
                for p in ports
            ],
        },
    }
