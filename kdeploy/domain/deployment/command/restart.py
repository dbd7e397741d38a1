import logfire

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.command import Command, CommandHandler, Result


class RestartDeployment(Command):
    id: DeploymentId
    replicas: int | None = None


class DeploymentRestarted(Result):
    workload: str
    replicas: int


class RestartDeploymentHandler(CommandHandler[RestartDeployment, DeploymentRestarted]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: RestartDeployment) -> DeploymentRestarted:
        with logfire.span("RestartDeployment", deployment_id=str(cmd.id)):
            report = await self.deployment_service.restart(
                cmd.id, self.principal.user_id, cmd.replicas
            )
            return DeploymentRestarted(workload=report.workload, replicas=report.replicas)
