"""Deployment REST routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query

from kdeploy.domain.deployment.command.apply import (
    ApplyDeployment,
    ApplyDeploymentHandler,
    DeploymentApplied,
)
from kdeploy.domain.deployment.command.delete import (
    DeleteDeployment,
    DeleteDeploymentHandler,
    DeletePod,
    DeletePodHandler,
    DeploymentDeleted,
    PodDeleted,
)
from kdeploy.domain.deployment.command.register import (
    DeploymentRegistered,
    RegisterDeployment,
    RegisterDeploymentHandler,
)
from kdeploy.domain.deployment.command.restart import (
    DeploymentRestarted,
    RestartDeployment,
    RestartDeploymentHandler,
)
from kdeploy.domain.deployment.command.scale import (
    DeploymentScaled,
    ScaleDeployment,
    ScaleDeploymentHandler,
)
from kdeploy.domain.deployment.model.status import LogOptions
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.query.get_deployment import (
    DeploymentDetail,
    GetDeployment,
    GetDeploymentHandler,
)
from kdeploy.domain.deployment.query.list_deployments import (
    DeploymentList,
    ListDeployments,
    ListDeploymentsHandler,
)
from kdeploy.domain.deployment.query.pod_logs import (
    ListPodEvents,
    ListPodEventsHandler,
    PodEventList,
    PodLog,
    ReadPodLog,
    ReadPodLogHandler,
)

router = APIRouter(prefix="/deployments", tags=["Deployments"], route_class=DishkaRoute)


@router.post("", response_model=DeploymentRegistered, status_code=201)
async def register_deployment(
    body: RegisterDeployment,
    handler: FromDishka[RegisterDeploymentHandler],
) -> DeploymentRegistered:
    return await handler.run(body)


@router.get("", response_model=DeploymentList)
async def list_deployments(
    handler: FromDishka[ListDeploymentsHandler],
) -> DeploymentList:
    return await handler.run(ListDeployments())


@router.get("/{id}", response_model=DeploymentDetail)
async def get_deployment(
    id: str,
    handler: FromDishka[GetDeploymentHandler],
) -> DeploymentDetail:
    return await handler.run(GetDeployment(id=DeploymentId(id)))


@router.put("/{id}", response_model=DeploymentApplied)
async def apply_deployment(
    id: str,
    handler: FromDishka[ApplyDeploymentHandler],
    replicas: int | None = None,
) -> DeploymentApplied:
    return await handler.run(ApplyDeployment(id=DeploymentId(id), replicas=replicas))


@router.patch("/{id}", response_model=DeploymentScaled)
async def scale_deployment(
    id: str,
    handler: FromDishka[ScaleDeploymentHandler],
    scale: int = Query(description="Desired replica count"),
) -> DeploymentScaled:
    return await handler.run(ScaleDeployment(id=DeploymentId(id), replicas=scale))


@router.post("/{id}/hooks/restart", response_model=DeploymentRestarted)
async def restart_deployment(
    id: str,
    handler: FromDishka[RestartDeploymentHandler],
    replicas: int | None = None,
) -> DeploymentRestarted:
    return await handler.run(RestartDeployment(id=DeploymentId(id), replicas=replicas))


@router.delete("/{id}", response_model=DeploymentDeleted)
async def delete_deployment(
    id: str,
    handler: FromDishka[DeleteDeploymentHandler],
) -> DeploymentDeleted:
    return await handler.run(DeleteDeployment(id=DeploymentId(id)))


@router.delete("/{id}/pods/{pod_name}", response_model=PodDeleted)
async def delete_pod(
    id: str,
    pod_name: str,
    handler: FromDishka[DeletePodHandler],
) -> PodDeleted:
    return await handler.run(DeletePod(id=DeploymentId(id), pod_name=pod_name))


@router.get("/{id}/logs/{pod_name}", response_model=PodLog)
async def read_pod_log(
    id: str,
    pod_name: str,
    handler: FromDishka[ReadPodLogHandler],
    container: str | None = None,
    previous: bool = False,
    since_seconds: int | None = Query(default=None, ge=1),
    timestamps: bool = False,
    tail_lines: int | None = Query(default=None, ge=0),
) -> PodLog:
    options = LogOptions(
        container=container,
        previous=previous,
        since_seconds=since_seconds,
        timestamps=timestamps,
        tail_lines=tail_lines,
    )
    return await handler.run(
        ReadPodLog(id=DeploymentId(id), pod_name=pod_name, options=options)
    )


@router.get("/{id}/events/{pod_name}", response_model=PodEventList)
async def list_pod_events(
    id: str,
    pod_name: str,
    handler: FromDishka[ListPodEventsHandler],
) -> PodEventList:
    return await handler.run(ListPodEvents(id=DeploymentId(id), pod_name=pod_name))
