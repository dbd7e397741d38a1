"""Cluster capacity route."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from kdeploy.domain.deployment.query.capacity import Capacity, GetCapacity, GetCapacityHandler

router = APIRouter(prefix="/capacity", tags=["Cluster"], route_class=DishkaRoute)


@router.get("", response_model=Capacity)
async def get_capacity(handler: FromDishka[GetCapacityHandler]) -> Capacity:
    return await handler.run(GetCapacity())
