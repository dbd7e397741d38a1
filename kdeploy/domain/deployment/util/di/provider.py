from dishka import from_context, provide

from kdeploy.config import Config
from kdeploy.domain.deployment.command.apply import ApplyDeploymentHandler
from kdeploy.domain.deployment.command.delete import DeleteDeploymentHandler, DeletePodHandler
from kdeploy.domain.deployment.command.register import RegisterDeploymentHandler
from kdeploy.domain.deployment.command.restart import RestartDeploymentHandler
from kdeploy.domain.deployment.command.scale import ScaleDeploymentHandler
from kdeploy.domain.deployment.port.cluster import NodeApi, PodApi, ServiceApi, WorkloadApi
from kdeploy.domain.deployment.port.repository import DeploymentRepository
from kdeploy.domain.deployment.query.capacity import GetCapacityHandler
from kdeploy.domain.deployment.query.get_deployment import GetDeploymentHandler
from kdeploy.domain.deployment.query.list_deployments import ListDeploymentsHandler
from kdeploy.domain.deployment.query.pod_logs import ListPodEventsHandler, ReadPodLogHandler
from kdeploy.domain.deployment.service.cluster import ClusterService
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.deployment.service.lifecycle import LifecycleOrchestrator
from kdeploy.util.di.base import Provider, Scope


class DeploymentProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_orchestrator(
        self,
        workloads: WorkloadApi,
        services: ServiceApi,
        pods: PodApi,
        config: Config,
    ) -> LifecycleOrchestrator:
        return LifecycleOrchestrator(
            namespace=config.cluster.namespace,
            workloads=workloads,
            services=services,
            pods=pods,
        )

    @provide(scope=Scope.UOW)
    def get_deployment_service(
        self,
        deployment_repo: DeploymentRepository,
        orchestrator: LifecycleOrchestrator,
    ) -> DeploymentService:
        return DeploymentService(deployment_repo=deployment_repo, orchestrator=orchestrator)

    @provide(scope=Scope.APP)
    def get_cluster_service(self, nodes: NodeApi) -> ClusterService:
        return ClusterService(nodes=nodes)

    # Command Handlers
    register_handler = provide(RegisterDeploymentHandler, scope=Scope.UOW)
    apply_handler = provide(ApplyDeploymentHandler, scope=Scope.UOW)
    scale_handler = provide(ScaleDeploymentHandler, scope=Scope.UOW)
    restart_handler = provide(RestartDeploymentHandler, scope=Scope.UOW)
    delete_handler = provide(DeleteDeploymentHandler, scope=Scope.UOW)
    delete_pod_handler = provide(DeletePodHandler, scope=Scope.UOW)

    # Query Handlers
    get_deployment_handler = provide(GetDeploymentHandler, scope=Scope.UOW)
    list_deployments_handler = provide(ListDeploymentsHandler, scope=Scope.UOW)
    read_pod_log_handler = provide(ReadPodLogHandler, scope=Scope.UOW)
    list_pod_events_handler = provide(ListPodEventsHandler, scope=Scope.UOW)
    capacity_handler = provide(GetCapacityHandler, scope=Scope.UOW)
