"""Access token commands."""

import sys

import cyclopts

from kdeploy.cli.console import get_console
from kdeploy.config import Config
from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.auth.service.token import TokenService

app = cyclopts.App(name="token", help="Access token commands")


@app.command
def issue(user_id: str) -> None:
    """Print a bearer token for USER_ID, signed with the configured secret.

    Args:
        user_id: Subject of the token; deployments registered with it belong to this user.
    """
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    if not config.auth.jwt.secret:
        console.error(
            "No JWT secret configured",
            hint="Set KDEPLOY_AUTH__JWT__SECRET or auth.jwt.secret in the config file",
        )
        sys.exit(1)

    token = TokenService(_config=config.auth.jwt).create_access_token(UserId(user_id))
    console.print(token, highlight=False, soft_wrap=True)
