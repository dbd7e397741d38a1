from abc import abstractmethod
from typing import Protocol

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.shared.port import Port


class DeploymentRepository(Port, Protocol):
    @abstractmethod
    async def get(self, id: DeploymentId) -> DeploymentRecord | None: ...

    @abstractmethod
    async def save(self, record: DeploymentRecord) -> None: ...

    @abstractmethod
    async def list_by_owner(self, owner_id: UserId) -> list[DeploymentRecord]: ...
