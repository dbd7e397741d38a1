from datetime import UTC, datetime
from typing import Any

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.value import DeploymentId


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def row_to_record(row: dict[str, Any]) -> DeploymentRecord:
    """Convert database row to DeploymentRecord."""
    return DeploymentRecord(
        id=DeploymentId(row["id"]),
        owner_id=UserId(row["owner_id"]),
        data=row["data"],
        created_at=_aware(row["created_at"]),
        updated_at=_aware(row["updated_at"]),
    )


def record_to_dict(record: DeploymentRecord) -> dict[str, Any]:
    """Convert DeploymentRecord to database dict."""
    return {
        "id": str(record.id),
        "owner_id": str(record.owner_id),
        "data": record.data,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
