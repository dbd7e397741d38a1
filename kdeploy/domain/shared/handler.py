"""Handler machinery shared by commands and queries.

Handlers are dataclasses whose fields the DI container fills in. kdeploy has
no anonymous operations, so every ``run`` is gated on an authenticated
``principal`` field.
"""

from abc import ABCMeta
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import Any, dataclass_transform

from pydantic import BaseModel

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.shared.error import AuthorizationError

_Run = Callable[..., Coroutine[Any, Any, Any]]


class Result(BaseModel): ...


def _require_principal(run: _Run) -> _Run:
    @wraps(run)
    async def gated(self: Any, request: Any) -> Any:
        if not isinstance(getattr(self, "principal", None), Principal):
            raise AuthorizationError("Authentication required", code="missing_token")
        return await run(self, request)

    return gated


@dataclass_transform()
class HandlerMeta(ABCMeta):
    """Makes each concrete handler a dataclass with a principal-gated ``run``."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        if not any(isinstance(b, mcs) for b in bases):
            return cls

        cls = dataclass(cls)
        if "run" in namespace:
            cls.run = _require_principal(namespace["run"])
        return cls
