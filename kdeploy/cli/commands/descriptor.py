"""Offline descriptor commands: validate and render."""

import sys
from pathlib import Path

import yaml

from kdeploy.cli.console import get_console
from kdeploy.domain.deployment.descriptor.parser import parse_descriptor
from kdeploy.domain.deployment.descriptor.validator import load_descriptor
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name, service_name
from kdeploy.domain.deployment.manifest.service import compile_service
from kdeploy.domain.deployment.manifest.workload import DEFAULT_REPLICAS, compile_workload
from kdeploy.domain.deployment.model.descriptor import Descriptor
from kdeploy.domain.deployment.model.value import FieldError
from kdeploy.domain.shared.error import DescriptorParseError, DescriptorValidationError


def _read(file: Path) -> str:
    console = get_console()
    try:
        return file.read_text()
    except OSError as e:
        console.error(f"Cannot read {file}: {e.strerror}")
        sys.exit(1)


def _report(file: Path, errors: list[FieldError]) -> None:
    console = get_console()
    console.error(f"{file}: {len(errors)} problem(s)")
    console.table(
        [error.model_dump() for error in errors],
        [("path", "Field"), ("message", "Problem")],
    )


def _load(file: Path) -> Descriptor:
    console = get_console()
    try:
        return load_descriptor(parse_descriptor(_read(file)))
    except DescriptorParseError as e:
        console.error(f"{file}: {e.detail}")
        sys.exit(1)
    except DescriptorValidationError as e:
        _report(file, e.errors)
        sys.exit(1)


def validate(file: Path) -> None:
    """Check a deployment descriptor without contacting the cluster.

    Args:
        file: Descriptor YAML file.
    """
    console = get_console()
    descriptor = _load(file)
    groupings = compile_workload("validate", descriptor).groupings
    console.success(
        f"{file}: {len(descriptor.components)} component(s), {len(groupings)} service(s)"
    )


def render(
    file: Path,
    *,
    owner: str,
    id: str,
    replicas: int = DEFAULT_REPLICAS,
) -> None:
    """Print the StatefulSet and Services compiled from a descriptor, as YAML.

    Args:
        file: Descriptor YAML file.
        owner: Owning user id; part of the resource names.
        id: Deployment id; part of the resource names.
        replicas: Replica count to compile in.
    """
    console = get_console()
    if replicas < 0:
        console.error("Replica count must not be negative")
        sys.exit(1)

    descriptor = _load(file)
    name = resolve_workload_name(owner, id)
    compiled = compile_workload(name, descriptor, replicas)

    documents = [compiled.manifest]
    for grouping in compiled.groupings:
        documents.append(
            compile_service(name, service_name(name, grouping.name), grouping.ports)
        )
    console.yaml(yaml.safe_dump_all(documents, sort_keys=False))
