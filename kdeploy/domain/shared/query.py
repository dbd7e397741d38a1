"""Queries: read-only requests."""

from abc import abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from kdeploy.domain.shared.handler import HandlerMeta, Result

__all__ = ["Query", "QueryHandler", "Result"]


class Query(BaseModel): ...


Q = TypeVar("Q", bound=Query)
R = TypeVar("R", bound=Result)


class QueryHandler(Generic[Q, R], metaclass=HandlerMeta):
    """Base class for query handlers; same field and principal rules as commands."""

    @abstractmethod
    async def run(self, cmd: Q) -> R: ...
