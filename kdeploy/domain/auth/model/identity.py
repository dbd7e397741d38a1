"""Who is making a request.

Every request resolves to exactly one identity: ``Anonymous`` when no valid
bearer token came with it, otherwise a ``Principal`` naming the user.
"""

from dataclasses import dataclass

from kdeploy.domain.auth.model.value import UserId


@dataclass(frozen=True)
class Identity: ...


@dataclass(frozen=True)
class Anonymous(Identity): ...


@dataclass(frozen=True)
class Principal(Identity):
    """An authenticated requester, taken from the ``sub`` claim of its token."""

    user_id: UserId
