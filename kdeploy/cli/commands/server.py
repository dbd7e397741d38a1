"""Server commands."""

import cyclopts
import logfire
import uvicorn

from kdeploy.cli.console import get_console
from kdeploy.config import Config

app = cyclopts.App(name="server", help="Server commands")


@app.command
def start(
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the kdeploy API server in the foreground.

    Args:
        host: Host to bind to. Defaults to ``server.host`` from the config.
        port: Port to listen on. Defaults to ``server.port`` from the config.
    """
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    # Spans and logs are only exported when a logfire token is configured
    logfire.configure(service_name=config.server.name, send_to_logfire="if-token-present")

    host = host or config.server.host
    port = port or config.server.port
    console.success(f"Serving on http://{host}:{port}")
    console.info(f"Namespace: {config.cluster.namespace} ({config.cluster.backend} backend)")

    uvicorn.run(
        "kdeploy.application.api.rest.app:create_app",
        factory=True,
        host=host,
        port=port,
        log_config=None,  # keep the logging set up by configure_logging
    )
