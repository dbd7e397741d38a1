"""Descriptor text -> mapping tree."""

from typing import Any

import yaml

from kdeploy.domain.shared.error import DescriptorParseError


def parse_descriptor(raw_text: str) -> dict[str, Any]:
    """Parse raw descriptor YAML into a mapping tree.

    Only YAML's safe subset is accepted. The whole document either parses or
    the call raises; nothing partial is returned.

    Raises:
        DescriptorParseError: On malformed YAML, an empty document, or a
            document whose root is not a mapping.
    """
    try:
        tree = yaml.safe_load(raw_text)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark
        where = f" (line {mark.line + 1}, column {mark.column + 1})" if mark else ""
        raise DescriptorParseError(f"{e.problem or e}{where}") from e
    except yaml.YAMLError as e:
        raise DescriptorParseError(str(e)) from e

    if tree is None:
        raise DescriptorParseError("Descriptor is empty")
    if not isinstance(tree, dict):
        raise DescriptorParseError(
            f"Descriptor must be a mapping at the top level, got {type(tree).__name__}"
        )
    return tree
