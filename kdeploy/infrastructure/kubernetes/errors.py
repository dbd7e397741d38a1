"""Translation of kubernetes_asyncio failures into kdeploy errors.

The cluster reports a rejection as an ``ApiException`` whose body is a JSON
``Status`` object. Those become ``ClusterRejectedError`` carrying the cluster's
code and message; every other failure (transport errors, timeouts, bodies that
are not a ``Status``) becomes an ``InternalError``.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import logfire
from kubernetes_asyncio.client import ApiException

from kdeploy.domain.shared.error import ClusterRejectedError, InternalError, KDeployError


def translate_api_exception(e: ApiException) -> KDeployError:
    status = _status_body(e.body)
    if status is None:
        return InternalError(f"Cluster API error {e.status} ({e.reason}): {e.body!r}")

    code = status.get("code")
    return ClusterRejectedError(
        status_code=code if isinstance(code, int) else e.status,
        message=status["message"],
        reason=status.get("reason"),
    )


@contextmanager
def cluster_call(operation: str, **attrs: Any) -> Iterator[None]:
    """Run cluster client calls, translating whatever they raise.

    ``asyncio.CancelledError`` is not an ``Exception`` and passes through.
    """
    try:
        yield
    except KDeployError:
        raise
    except ApiException as e:
        error = translate_api_exception(e)
        if isinstance(error, InternalError):
            logfire.error(
                "Unexpected cluster API response",
                operation=operation,
                status=e.status,
                detail=error.detail,
                **attrs,
            )
        else:
            logfire.info(
                "Cluster rejected request",
                operation=operation,
                status=error.status_code,
                reason=error.reason,
                **attrs,
            )
        raise error from e
    except Exception as e:
        logfire.error("Cluster call failed", operation=operation, error=repr(e), **attrs)
        raise InternalError(f"{operation} failed: {e!r}") from e


def _status_body(body: Any) -> dict[str, Any] | None:
    if isinstance(body, bytes):
        body = body.decode(errors="replace")
    if not isinstance(body, str):
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return None
    if not isinstance(parsed, dict) or not isinstance(parsed.get("message"), str):
        return None
    return parsed
