from kdeploy.domain.auth.model.identity import Principal
from kdeploy.domain.deployment.model.status import LogOptions, PodEvent
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.service.deployment import DeploymentService
from kdeploy.domain.shared.query import Query, QueryHandler, Result


class ReadPodLog(Query):
    id: DeploymentId
    pod_name: str
    options: LogOptions = LogOptions()


class PodLog(Result):
    pod_name: str
    log: str


class ReadPodLogHandler(QueryHandler[ReadPodLog, PodLog]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: ReadPodLog) -> PodLog:
        log = await self.deployment_service.read_pod_log(
            cmd.id, self.principal.user_id, cmd.pod_name, cmd.options
        )
        return PodLog(pod_name=cmd.pod_name, log=log)


class ListPodEvents(Query):
    id: DeploymentId
    pod_name: str


class PodEventList(Result):
    pod_name: str
    events: list[PodEvent]


class ListPodEventsHandler(QueryHandler[ListPodEvents, PodEventList]):
    principal: Principal
    deployment_service: DeploymentService

    async def run(self, cmd: ListPodEvents) -> PodEventList:
        events = await self.deployment_service.list_pod_events(
            cmd.id, self.principal.user_id, cmd.pod_name
        )
        return PodEventList(pod_name=cmd.pod_name, events=events)
