"""Descriptor validation.

Runs before anything touches the cluster. Once ``load_descriptor`` returns,
the compilers can rely on every invariant below without re-checking.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from kdeploy.domain.deployment.descriptor.quantity import parse_quantity
from kdeploy.domain.deployment.manifest.naming import MAX_GROUPING_LENGTH
from kdeploy.domain.deployment.model.descriptor import Descriptor
from kdeploy.domain.deployment.model.value import FieldError
from kdeploy.domain.shared.error import DescriptorValidationError


def validate_descriptor(tree: Any) -> list[FieldError]:
    """Return every problem found in ``tree``; an empty list means it is valid."""
    try:
        load_descriptor(tree)
    except DescriptorValidationError as e:
        return e.errors
    return []


def load_descriptor(tree: Any) -> Descriptor:
    """Validate ``tree`` and return the typed descriptor.

    Structural errors are reported together. Cross-field checks need a
    structurally sound descriptor, so they run (and are reported together)
    only once the structure is valid.

    Raises:
        DescriptorValidationError: With all field errors found.
    """
    try:
        descriptor = Descriptor.model_validate(tree)
    except PydanticValidationError as e:
        raise DescriptorValidationError([_from_pydantic(err) for err in e.errors()]) from e

    errors = check_descriptor(descriptor)
    if errors:
        raise DescriptorValidationError(errors)
    return descriptor


def check_descriptor(descriptor: Descriptor) -> list[FieldError]:
    """Cross-field rules on a structurally valid descriptor."""
    return [
        *_check_component_names(descriptor),
        *_check_port_names(descriptor),
        *_check_port_numbers(descriptor),
        *_check_groupings(descriptor),
        *_check_resources(descriptor),
        *_check_volumes(descriptor),
    ]


def format_path(loc: tuple[int | str, ...]) -> str:
    """``("components", 0, "image")`` -> ``components[0].image``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif part == "[key]":
            continue
        else:
            path += f".{part}" if path else str(part)
    return path or "descriptor"


def _from_pydantic(err: Any) -> FieldError:
    message = err["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    return FieldError(path=format_path(tuple(err["loc"])), message=message)


def _check_component_names(descriptor: Descriptor) -> list[FieldError]:
    errors = []
    seen: dict[str, int] = {}
    for ci, component in enumerate(descriptor.components):
        if component.name in seen:
            errors.append(
                FieldError(
                    path=f"components[{ci}].name",
                    message=f"duplicate component name '{component.name}' "
                    f"(also used by components[{seen[component.name]}])",
                )
            )
        else:
            seen[component.name] = ci
    return errors


def _check_port_names(descriptor: Descriptor) -> list[FieldError]:
    errors = []
    by_grouping: dict[str, dict[str, int]] = {}
    for ci, component in enumerate(descriptor.components):
        in_component: set[str] = set()
        for pi, port in enumerate(component.ports):
            path = f"components[{ci}].ports[{pi}].name"
            if port.name in in_component:
                errors.append(
                    FieldError(
                        path=path,
                        message=f"duplicate port name '{port.name}' in component '{component.name}'",
                    )
                )
                continue
            in_component.add(port.name)

            grouping = component.grouping_of(port)
            names = by_grouping.setdefault(grouping, {})
            if port.name in names:
                errors.append(
                    FieldError(
                        path=path,
                        message=f"duplicate port name '{port.name}' in service '{grouping}' "
                        f"(also declared by components[{names[port.name]}])",
                    )
                )
            else:
                names[port.name] = ci
    return errors


def _check_port_numbers(descriptor: Descriptor) -> list[FieldError]:
    # All containers share the pod's network namespace
    errors = []
    seen: dict[tuple[int, str], str] = {}
    for ci, component in enumerate(descriptor.components):
        for pi, port in enumerate(component.ports):
            key = (port.port, port.protocol.value)
            where = f"components[{ci}].ports[{pi}]"
            if key in seen:
                errors.append(
                    FieldError(
                        path=f"{where}.port",
                        message=f"port {port.port}/{port.protocol} is already declared by {seen[key]}",
                    )
                )
            else:
                seen[key] = where
    return errors


def _check_groupings(descriptor: Descriptor) -> list[FieldError]:
    errors = []
    reported: set[str] = set()
    for ci, component in enumerate(descriptor.components):
        for pi, port in enumerate(component.ports):
            grouping = component.grouping_of(port)
            if grouping in reported or len(grouping) <= MAX_GROUPING_LENGTH:
                continue
            reported.add(grouping)
            path = (
                f"components[{ci}].ports[{pi}].service"
                if port.service
                else f"components[{ci}].name"
            )
            errors.append(
                FieldError(
                    path=path,
                    message=f"service name '{grouping}' is longer than "
                    f"{MAX_GROUPING_LENGTH} characters",
                )
            )
    return errors


def _check_resources(descriptor: Descriptor) -> list[FieldError]:
    errors = []
    for ci, component in enumerate(descriptor.components):
        limits = component.resources.limits
        for resource, request in component.resources.requests.items():
            if resource in limits and parse_quantity(request) > parse_quantity(limits[resource]):
                errors.append(
                    FieldError(
                        path=f"components[{ci}].resources.requests.{resource}",
                        message=f"request {request} exceeds limit {limits[resource]}",
                    )
                )
    return errors


def _check_volumes(descriptor: Descriptor) -> list[FieldError]:
    errors = []
    # volume name -> (declaring path, shape)
    claims: dict[str, tuple[str, tuple]] = {}
    # mount path -> (declaring path, volume name, component index)
    mounts: dict[str, tuple[str, str, int]] = {}

    for ci, component in enumerate(descriptor.components):
        names_here: set[str] = set()
        for vi, volume in enumerate(component.volumes):
            where = f"components[{ci}].volumes[{vi}]"

            if volume.name in names_here:
                errors.append(
                    FieldError(
                        path=f"{where}.name",
                        message=f"volume '{volume.name}' is declared twice in component "
                        f"'{component.name}'",
                    )
                )
                continue
            names_here.add(volume.name)

            if volume.name in claims:
                first, shape = claims[volume.name]
                if shape != volume.claim_shape():
                    errors.append(
                        FieldError(
                            path=where,
                            message=f"volume '{volume.name}' conflicts with the declaration "
                            f"at {first}",
                        )
                    )
            else:
                claims[volume.name] = (where, volume.claim_shape())

            if volume.mount_path in mounts:
                first, other_volume, other_ci = mounts[volume.mount_path]
                if other_ci == ci:
                    message = (
                        f"mount path '{volume.mount_path}' is already used by volume "
                        f"'{other_volume}' in this component"
                    )
                elif other_volume != volume.name:
                    message = (
                        f"mount path '{volume.mount_path}' conflicts with {first} "
                        f"(volume '{other_volume}')"
                    )
                else:
                    continue
                errors.append(FieldError(path=f"{where}.mountPath", message=message))
            else:
                mounts[volume.mount_path] = (where, volume.name, ci)
    return errors
