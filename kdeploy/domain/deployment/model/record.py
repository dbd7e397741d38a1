from datetime import datetime

from pydantic import BaseModel

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.value import DeploymentId


class DeploymentRecord(BaseModel):
    """Stored deployment: who owns it and the raw descriptor text."""

    id: DeploymentId
    owner_id: UserId
    data: str
    created_at: datetime
    updated_at: datetime
