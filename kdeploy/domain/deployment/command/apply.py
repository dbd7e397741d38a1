import logfire

from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.command import Command, CommandHandler, Result


class ApplyDeployment(Command):
    id: DeploymentId
    replicas: int | None = None


class DeploymentApplied(Result):
    workload: str
    created: bool
    replicas: int
    services: list[str]


class ApplyDeploymentHandler(CommandHandler[ApplyDeployment, DeploymentApplied]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: ApplyDeployment) -> DeploymentApplied:
        with logfire.span("ApplyDeployment", deployment_id=str(cmd.id)):
            report = await self.deployment_service.apply(
                cmd.id, self.principal.user_id, cmd.replicas
            )
            return DeploymentApplied(
                workload=report.workload,
                created=report.created,
                replicas=report.replicas,
                services=list(report.services),
            )
