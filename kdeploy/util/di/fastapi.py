"""Per-request dishka container for FastAPI, opened at ``Scope.UOW``.

dishka's own starlette middleware opens ``Scope.REQUEST``, which kdeploy's
scope hierarchy does not have.
"""

from dishka import AsyncContainer
from fastapi import FastAPI
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Send
from starlette.types import Scope as ASGIScope

from kdeploy.util.di.base import Scope


class UnitOfWorkMiddleware:
    """Wraps each HTTP request in a UOW container bound to that request.

    ``DishkaRoute`` endpoints resolve their ``FromDishka`` parameters from
    ``request.state.dishka_container``. Everything the UOW container created
    (the database session above all) is finalized once the response is done.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: ASGIScope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive, send=send)
        root: AsyncContainer = request.app.state.dishka_container
        async with root({Request: request}, scope=Scope.UOW) as container:
            request.state.dishka_container = container
            await self.app(scope, receive, send)


def setup_dishka(container: AsyncContainer, app: FastAPI) -> None:
    app.state.dishka_container = container
    app.add_middleware(UnitOfWorkMiddleware)
