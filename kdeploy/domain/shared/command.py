"""Commands: requests that change stored deployments or the cluster."""

from abc import abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from kdeploy.domain.shared.handler import HandlerMeta, Result

__all__ = ["Command", "CommandHandler", "Result"]


class Command(BaseModel): ...


C = TypeVar("C", bound=Command)
R = TypeVar("R", bound=Result)


class CommandHandler(Generic[C, R], metaclass=HandlerMeta):
    """Base class for command handlers.

    Subclasses declare their collaborators as fields, ``principal: Principal``
    among them, and implement ``run``.
    """

    @abstractmethod
    async def run(self, cmd: C) -> R: ...
