"""Cluster resource names for a deployment.

The workload name is the join key between the StatefulSet and its Services and
the lookup key for scale/restart/delete, so it depends only on the stable
(owner, deployment id) pair, never on descriptor content.
"""

import hashlib
import re

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.value import DeploymentId, WorkloadName

WORKLOAD_NAME_PREFIX = "kd"
_SLUG_LENGTH = 16
_DIGEST_LENGTH = 10

MAX_WORKLOAD_NAME_LENGTH = len(WORKLOAD_NAME_PREFIX) + 1 + _SLUG_LENGTH + 1 + _DIGEST_LENGTH
# Services are "<workload>-<grouping>" and must stay a 63 character DNS label
MAX_GROUPING_LENGTH = 63 - MAX_WORKLOAD_NAME_LENGTH - 1

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def _slugify(value: str) -> str:
    return _NON_ALNUM_RE.sub("-", value.lower()).strip("-")


def resolve_workload_name(owner_id: UserId | str, deployment_id: DeploymentId | str) -> WorkloadName:
    """Derive the workload name for ``deployment_id`` owned by ``owner_id``.

    Format: ``kd-<slug of id>-<sha256(owner, id) prefix>``. The slug keeps names
    readable; the digest keeps them distinct across owners and across ids that
    slugify alike.
    """
    owner, deployment = str(owner_id), str(deployment_id)
    digest = hashlib.sha256(f"{owner}\x00{deployment}".encode()).hexdigest()[:_DIGEST_LENGTH]
    slug = _slugify(deployment)[:_SLUG_LENGTH].strip("-")

    parts = [WORKLOAD_NAME_PREFIX, slug, digest] if slug else [WORKLOAD_NAME_PREFIX, digest]
    return WorkloadName("-".join(parts))


def service_name(workload_name: WorkloadName | str, grouping: str) -> str:
    return f"{workload_name}-{grouping}"
