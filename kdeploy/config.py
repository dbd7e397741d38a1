"""kdeploy configuration.

Values come from, highest priority first: constructor arguments, ``KDEPLOY_*``
environment variables (``__`` separates nested keys, as in
``KDEPLOY_CLUSTER__NAMESPACE``), a ``.env`` file, and the YAML file named by
``KDEPLOY_CONFIG_FILE``.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CONFIG_FILE_ENV = "KDEPLOY_CONFIG_FILE"
LOG_FILE_ENV = "KDEPLOY_LOG_FILE"

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("asyncio", "aiosqlite", "aiohttp", "kubernetes_asyncio")


class ServerConfig(BaseModel):
    name: str = "kdeploy"
    version: str = "0.1.0"
    description: str = "Declarative multi-container deployments on Kubernetes"
    host: str = "127.0.0.1"
    port: int = 8000


class DatabaseConfig(BaseModel):
    """Database holding the raw deployment descriptors."""

    url: str = "sqlite+aiosqlite:///~/.kdeploy/kdeploy.db"
    echo: bool = False
    auto_create: bool = True  # create missing tables on startup


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file: str | None = None  # log to this file instead of stderr


class ClusterConfig(BaseModel):
    """Kubernetes cluster access.

    All workloads live in one namespace, fixed for the process lifetime.
    """

    namespace: str = "kdeploy-services"
    backend: Literal["kubernetes", "memory"] = "kubernetes"
    in_cluster: bool = False  # use the pod's service account instead of a kubeconfig
    kubeconfig: str | None = None  # None = default kubeconfig lookup
    context: str | None = None


class JwtConfig(BaseModel):
    secret: str = ""  # must be set; tokens cannot be issued or checked without it
    algorithm: str = "HS256"
    audience: str = "authenticated"
    access_token_expire_minutes: int = 60


class AuthConfig(BaseModel):
    jwt: JwtConfig = JwtConfig()


class Config(BaseSettings):
    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    cluster: ClusterConfig = ClusterConfig()
    auth: AuthConfig = AuthConfig()

    model_config = SettingsConfigDict(
        env_prefix="KDEPLOY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_settings = YamlConfigSettingsSource(
            settings_cls, yaml_file=os.environ.get(CONFIG_FILE_ENV)
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


def _log_handler(config: LoggingConfig) -> logging.Handler:
    log_file = config.file or os.environ.get(LOG_FILE_ENV)
    if not log_file:
        return logging.StreamHandler(sys.stderr)

    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path)


def configure_logging(config: LoggingConfig) -> None:
    """Route all stdlib logging to one handler (stderr or the log file).

    Call once, early: it replaces whatever handlers the root logger had.
    """
    handler = _log_handler(config)
    handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, handler=%s", config.level, handler)
