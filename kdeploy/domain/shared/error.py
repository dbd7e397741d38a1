"""Error hierarchy for kdeploy.

Error layers:
- KDeployError: Base class for all kdeploy errors
- DomainError: Bad descriptors, missing resources, bad requests (4xx responses)
- ClusterRejectedError: Structured rejection from the cluster, status propagated verbatim
- PartialApplyError: A multi-resource apply stopped part way through
- InfrastructureError: Unexpected internal failures (5xx responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""

from collections.abc import Sequence

from kdeploy.domain.deployment.model.value import FieldError


class KDeployError(Exception):
    """Base class for all kdeploy errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (bad input, missing resources - typically 4xx)
# =============================================================================


class DomainError(KDeployError):
    """Base class for domain errors."""


class NotFoundError(DomainError):
    """Deployment record, workload or pod not found."""


class ValidationError(DomainError):
    """Request input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class AuthorizationError(DomainError):
    """Requester is not authenticated."""


class DescriptorParseError(DomainError):
    """Descriptor text is not well-formed YAML (or not a mapping)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, code="DESCRIPTOR_PARSE_ERROR")
        self.detail = detail


class DescriptorValidationError(DomainError):
    """Descriptor parsed but is structurally or semantically invalid.

    Carries every field error found, not just the first.
    """

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{e.path}: {e.message}" for e in self.errors[:3])
        if len(self.errors) > 3:
            summary += f" (+{len(self.errors) - 3} more)"
        super().__init__(f"Invalid descriptor: {summary}", code="DESCRIPTOR_INVALID")


class ServiceCompileError(DomainError):
    """A service grouping could not be compiled into a Service manifest."""


# =============================================================================
# Cluster Errors
# =============================================================================


class ClusterRejectedError(KDeployError):
    """The cluster answered with a structured error response."""

    def __init__(self, status_code: int, message: str, reason: str | None = None) -> None:
        super().__init__(message, code=reason or "CLUSTER_REJECTED")
        self.status_code = status_code
        self.reason = reason


class PartialApplyError(KDeployError):
    """A sequential apply failed after some resources were already applied.

    Nothing is rolled back; ``applied`` lists what is in place, ``failed`` names
    the resource whose call raised ``cause``.
    """

    def __init__(
        self,
        cause: KDeployError,
        applied: Sequence[str],
        failed: str,
    ) -> None:
        super().__init__(cause.message, code=cause.code)
        self.cause = cause
        self.applied = list(applied)
        self.failed = failed


# =============================================================================
# Infrastructure Errors (system-level failures - typically 5xx)
# =============================================================================


class InfrastructureError(KDeployError):
    """Base class for infrastructure/system errors."""


class InternalError(InfrastructureError):
    """Unexpected failure. The detail is logged, never shown to callers."""

    def __init__(self, detail: str) -> None:
        super().__init__("Internal server error", code="INTERNAL_ERROR")
        self.detail = detail


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
