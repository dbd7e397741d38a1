from datetime import datetime

from pydantic import BaseModel

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.query import Query, QueryHandler, Result


class ListDeployments(Query):
    pass


class DeploymentSummary(BaseModel):
    id: DeploymentId
    workload: str
    created_at: datetime
    updated_at: datetime


class DeploymentList(Result):
    items: list[DeploymentSummary]


class ListDeploymentsHandler(QueryHandler[ListDeployments, DeploymentList]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: ListDeployments) -> DeploymentList:
        records = await self.deployment_service.list_owned(self.principal.user_id)
        return DeploymentList(
            items=[
                DeploymentSummary(
                    id=r.id,
                    workload=str(resolve_workload_name(r.owner_id, r.id)),
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                )
                for r in records
            ]
        )
