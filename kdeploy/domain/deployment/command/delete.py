from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.command import Command, CommandHandler, Result


class DeleteDeployment(Command):
    id: DeploymentId


class DeploymentDeleted(Result):
    pass


class DeleteDeploymentHandler(CommandHandler[DeleteDeployment, DeploymentDeleted]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: DeleteDeployment) -> DeploymentDeleted:
        await self.deployment_service.delete(cmd.id, self.principal.user_id)
        return DeploymentDeleted()


class DeletePod(Command):
    id: DeploymentId
    pod_name: str


class PodDeleted(Result):
    pod_name: str


class DeletePodHandler(CommandHandler[DeletePod, PodDeleted]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: DeletePod) -> PodDeleted:
        await self.deployment_service.delete_pod(cmd.id, self.principal.user_id, cmd.pod_name)
        return PodDeleted(pod_name=cmd.pod_name)
