"""HTTP status and JSON body for every kdeploy error.

Bodies always carry `code` and `message`; descriptor errors add `errors`,
field validation adds `field`, partial applies add `applied` and `failed`.
"""

from typing import Any

from fastapi import HTTPException

from kdeploy.domain.shared.error import (
    AuthorizationError,
    ClusterRejectedError,
    ConfigurationError,
    DescriptorValidationError,
    DomainError,
    InfrastructureError,
    KDeployError,
    NotFoundError,
    PartialApplyError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthorizationError: 401,
}


def map_kdeploy_error(error: KDeployError) -> HTTPException:
    """Translate ``error`` into the HTTPException the API answers with."""
    if isinstance(error, PartialApplyError):
        cause = map_kdeploy_error(error.cause)
        detail = {**cause.detail, "applied": error.applied, "failed": error.failed}
        return HTTPException(status_code=cause.status_code, detail=detail)

    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, ClusterRejectedError):
        # The cluster's own status, as long as it is an error status
        status_code = error.status_code if 400 <= error.status_code <= 599 else 502
        return HTTPException(status_code=status_code, detail=detail)

    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=500, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        if isinstance(error, DescriptorValidationError):
            detail["errors"] = [e.model_dump() for e in error.errors]
        if isinstance(error, AuthorizationError):
            return HTTPException(
                status_code=status_code,
                detail=detail,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return HTTPException(status_code=status_code, detail=detail)

    # Fallback for unknown KDeployError subclasses
    return HTTPException(status_code=500, detail=detail)
