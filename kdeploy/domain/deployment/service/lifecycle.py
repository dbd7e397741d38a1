"""Lifecycle orchestration against the cluster ports.

Cluster calls are strictly sequential: the workload first, then each service in
grouping order. A failing call aborts the rest of the operation; nothing already
applied is rolled back, the caller gets a ``PartialApplyError`` telling how far
the apply got instead.
"""

import copy
import logging
from datetime import UTC, datetime
from typing import Any

from kdeploy.domain.deployment.manifest.naming import service_name
from kdeploy.domain.deployment.manifest.service import compile_service
from kdeploy.domain.deployment.manifest.workload import (
    DEFAULT_REPLICAS,
    RESTARTED_AT_ANNOTATION,
    compile_workload,
)
from kdeploy.domain.deployment.model.descriptor import Descriptor
from kdeploy.domain.deployment.model.status import LogOptions, PodEvent, PodStatus, WorkloadStatus
from kdeploy.domain.deployment.model.value import WorkloadName
from kdeploy.domain.deployment.port.cluster import PodApi, ServiceApi, WorkloadApi
from kdeploy.domain.shared.error import (
    ClusterRejectedError,
    KDeployError,
    NotFoundError,
    PartialApplyError,
    ValidationError,
)
from kdeploy.domain.shared.model.value import ValueObject
from kdeploy.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ApplyReport(ValueObject):
    """What an upsert or restart put in place."""

    workload: str
    created: bool
    replicas: int
    services: tuple[str, ...] = ()


class DeploymentInfo(ValueObject):
    workload: WorkloadStatus
    pods: tuple[PodStatus, ...] = ()
    services: tuple[str, ...] = ()


class LifecycleOrchestrator(Service):
    namespace: str
    workloads: WorkloadApi
    services: ServiceApi
    pods: PodApi

    async def upsert(
        self,
        name: WorkloadName | str,
        descriptor: Descriptor,
        replicas: int | None = None,
    ) -> ApplyReport:
        """Create the workload and its services, or replace them if present.

        Without an explicit ``replicas`` an existing workload keeps its live
        replica count; a new one starts at one replica. The live restart stamp
        is kept too, so an unchanged descriptor does not roll the pods.

        Raises:
            ValidationError: If ``replicas`` is negative.
            PartialApplyError: If a create/replace call fails.
        """
        name = str(name)
        _check_replicas(replicas)

        services = self._compile_services(name, descriptor)
        existing = await self._find(name)
        replicas = _carry_replicas(replicas, existing)
        manifest = compile_workload(name, descriptor, replicas).manifest
        if existing is not None and existing.restarted_at:
            manifest = _stamp_restart(manifest, existing.restarted_at)

        applied: list[str] = []
        step = f"statefulset/{name}"
        try:
            if existing is None:
                await self.workloads.create(self.namespace, manifest)
            else:
                await self.workloads.replace(self.namespace, name, manifest)
            applied.append(step)

            for svc_name, svc_manifest in services:
                step = f"service/{svc_name}"
                await self._apply_service(svc_name, svc_manifest)
                applied.append(step)
        except KDeployError as e:
            logger.warning(
                "Apply of %s stopped at %s after %d resource(s): %s",
                name,
                step,
                len(applied),
                e.message,
            )
            raise PartialApplyError(e, applied=applied, failed=step) from e

        logger.info(
            "Applied %s: %s, %d service(s), replicas=%d",
            name,
            "created" if existing is None else "replaced",
            len(services),
            replicas,
        )
        return ApplyReport(
            workload=name,
            created=existing is None,
            replicas=replicas,
            services=tuple(svc for svc, _ in services),
        )

    async def scale(self, name: WorkloadName | str, replicas: int) -> None:
        """Patch the replica count of an existing workload.

        Raises:
            ValidationError: If ``replicas`` is negative.
            NotFoundError: If the workload does not exist. No patch is issued.
        """
        name = str(name)
        _check_replicas(replicas)
        if await self._find(name) is None:
            raise NotFoundError(f"Workload not found: {name}")
        await self.workloads.patch_scale(self.namespace, name, replicas)
        logger.info("Scaled %s to %d replica(s)", name, replicas)

    async def restart(
        self,
        name: WorkloadName | str,
        descriptor: Descriptor,
        replicas: int | None = None,
    ) -> ApplyReport:
        """Recompile the workload and replace it wholesale, rolling its pods.

        Services are left as they are.

        Raises:
            ValidationError: If ``replicas`` is negative.
            NotFoundError: If the workload does not exist.
        """
        name = str(name)
        _check_replicas(replicas)

        existing = await self._find(name)
        if existing is None:
            raise NotFoundError(f"Workload not found: {name}")

        replicas = _carry_replicas(replicas, existing)
        manifest = _stamp_restart(
            compile_workload(name, descriptor, replicas).manifest,
            datetime.now(UTC).isoformat(),
        )
        await self.workloads.replace(self.namespace, name, manifest)

        logger.info("Restarted %s with %d replica(s)", name, replicas)
        return ApplyReport(workload=name, created=False, replicas=replicas)

    async def delete(self, name: WorkloadName | str) -> None:
        await self.workloads.delete(self.namespace, str(name))
        logger.info("Deleted %s", name)

    async def delete_pod(self, pod_name: str) -> None:
        if not pod_name or not pod_name.strip():
            raise ValidationError("Pod name must not be empty", field="pod_name")
        await self.pods.delete_pod(self.namespace, pod_name)

    async def describe(self, name: WorkloadName | str) -> DeploymentInfo:
        name = str(name)
        workload = await self._find(name)
        if workload is None:
            raise NotFoundError(f"Workload not found: {name}")
        pods = await self.pods.list_pods(self.namespace, name)
        services = await self.services.list_for_workload(self.namespace, name)
        return DeploymentInfo(workload=workload, pods=tuple(pods), services=tuple(services))

    async def read_pod_log(self, pod_name: str, options: LogOptions) -> str:
        return await self.pods.read_pod_log(self.namespace, pod_name, options)

    async def list_pod_events(self, pod_name: str) -> list[PodEvent]:
        return await self.pods.list_pod_events(self.namespace, pod_name)

    async def _find(self, name: str) -> WorkloadStatus | None:
        matches = await self.workloads.list_by_exact_name(self.namespace, name)
        for workload in matches:
            if workload.name == name:
                return workload
        return None

    def _compile_services(
        self, name: str, descriptor: Descriptor
    ) -> list[tuple[str, dict[str, Any]]]:
        groupings = compile_workload(name, descriptor).groupings
        return [
            (
                service_name(name, grouping.name),
                compile_service(name, service_name(name, grouping.name), grouping.ports),
            )
            for grouping in groupings
        ]

    async def _apply_service(self, name: str, manifest: dict[str, Any]) -> None:
        try:
            await self.services.create(self.namespace, manifest)
        except ClusterRejectedError as e:
            if e.status_code != 409:
                raise
            await self.services.replace(self.namespace, name, manifest)


def _check_replicas(replicas: int | None) -> None:
    if replicas is not None and replicas < 0:
        raise ValidationError("Replica count must not be negative", field="replicas")


def _carry_replicas(replicas: int | None, existing: WorkloadStatus | None) -> int:
    if replicas is not None:
        return replicas
    if existing is not None and existing.replicas is not None:
        return existing.replicas
    return DEFAULT_REPLICAS


def _stamp_restart(manifest: dict[str, Any], restarted_at: str) -> dict[str, Any]:
    # A changed pod template annotation is what makes the cluster roll the pods
    stamped = copy.deepcopy(manifest)
    metadata = stamped["spec"]["template"]["metadata"]
    metadata.setdefault("annotations", {})[RESTARTED_AT_ANNOTATION] = restarted_at
    return stamped
