import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from kdeploy.application.api.v1.errors import map_kdeploy_error
from kdeploy.application.api.v1.routes import capacity, deployments, health
from kdeploy.application.di import create_container
from kdeploy.config import Config, configure_logging
from kdeploy.domain.shared.error import InternalError, KDeployError, PartialApplyError
from kdeploy.infrastructure.persistence.database import ensure_schema
from kdeploy.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    config = await container.get(Config)

    if config.database.auto_create:
        await ensure_schema(await container.get(AsyncEngine))

    logger.info(
        "Managing workloads in namespace %s (%s backend)",
        config.cluster.namespace,
        config.cluster.backend,
    )
    try:
        yield
    finally:
        await container.close()


async def _kdeploy_error_handler(request: Request, exc: KDeployError) -> JSONResponse:
    # Callers get a generic message for internal failures, the log gets the detail
    cause = exc.cause if isinstance(exc, PartialApplyError) else exc
    if isinstance(cause, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, cause.detail)

    http_exc = map_kdeploy_error(exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=http_exc.detail,
        headers=http_exc.headers,
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "message": "Internal server error"},
    )


def create_app(config: Config | None = None) -> FastAPI:
    """Build the REST application.

    Without an explicit ``config`` the settings are read from the environment
    and the config file.
    """
    config = config or Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    logger.info("Starting kdeploy server: %s v%s", config.server.name, config.server.version)

    app = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )
    logfire.instrument_fastapi(app)
    setup_dishka(create_container(config), app)

    for module in (health, capacity, deployments):
        app.include_router(module.router, prefix=API_PREFIX)

    app.add_exception_handler(KDeployError, _kdeploy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
    return app
