from datetime import datetime

import logfire

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.command import Command, CommandHandler, Result


class RegisterDeployment(Command):
    data: str


class DeploymentRegistered(Result):
    id: DeploymentId
    created_at: datetime


class RegisterDeploymentHandler(CommandHandler[RegisterDeployment, DeploymentRegistered]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: RegisterDeployment) -> DeploymentRegistered:
        record = await self.deployment_service.register(self.principal.user_id, cmd.data)
        logfire.info("Deployment registered", deployment_id=str(record.id))
        return DeploymentRegistered(id=record.id, created_at=record.created_at)
