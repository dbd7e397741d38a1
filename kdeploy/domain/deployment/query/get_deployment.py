from datetime import datetime

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.status import PodStatus, WorkloadStatus
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.query import Query, QueryHandler, Result


class GetDeployment(Query):
    id: DeploymentId


class DeploymentDetail(Result):
    id: DeploymentId
    workload: WorkloadStatus
    pods: list[PodStatus]
    services: list[str]
    created_at: datetime
    updated_at: datetime


class GetDeploymentHandler(QueryHandler[GetDeployment, DeploymentDetail]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: GetDeployment) -> DeploymentDetail:
        record = await self.deployment_service.get(cmd.id, self.principal.user_id)
        info = await self.deployment_service.describe(cmd.id, self.principal.user_id)
        return DeploymentDetail(
            id=record.id,
            workload=info.workload,
            pods=list(info.pods),
            services=list(info.services),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
