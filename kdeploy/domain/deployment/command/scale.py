from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.command import Command, CommandHandler, Result


class ScaleDeployment(Command):
    id: DeploymentId
    replicas: int


class DeploymentScaled(Result):
    replicas: int


class ScaleDeploymentHandler(CommandHandler[ScaleDeployment, DeploymentScaled]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: ScaleDeployment) -> DeploymentScaled:
        await self.deployment_service.scale(cmd.id, self.principal.user_id, cmd.replicas)
        return DeploymentScaled(replicas=cmd.replicas)
