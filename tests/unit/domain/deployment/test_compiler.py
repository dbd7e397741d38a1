"""Unit tests for the workload and service compilers."""

import pytest

from kdeploy.domain.deployment.descriptor.parser import parse_descriptor
from kdeploy.domain.deployment.descriptor.validator import load_descriptor
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name, service_name
from kdeploy.domain.deployment.manifest.service import compile_service
from kdeploy.domain.deployment.manifest.workload import (
    INSTANCE_LABEL,
    MANAGED_BY_LABEL,
    compile_workload,
)
from kdeploy.domain.deployment.model.descriptor import Descriptor
from kdeploy.domain.shared.error import ServiceCompileError


def _load(text: str) -> Descriptor:
    return load_descriptor(parse_descriptor(text))


class TestCompileWorkload:
    def test_deterministic(self, multi_component: str):
        name = resolve_workload_name("alice", "d-1")
        first = compile_workload(name, _load(multi_component))
        second = compile_workload(name, _load(multi_component))

        assert first.manifest == second.manifest
        assert first.groupings == second.groupings

    def test_single_component_example(self, single_component: str):
        compiled = compile_workload("kd-app-0123456789", _load(single_component))
        manifest = compiled.manifest

        assert manifest["apiVersion"] == "apps/v1"
        assert manifest["kind"] == "StatefulSet"
        assert manifest["metadata"]["name"] == "kd-app-0123456789"
        assert manifest["spec"]["replicas"] == 1
        assert manifest["spec"]["serviceName"] == "kd-app-0123456789"
        assert manifest["spec"]["selector"] == {
            "matchLabels": {INSTANCE_LABEL: "kd-app-0123456789"}
        }

        template = manifest["spec"]["template"]
        assert template["metadata"]["labels"][INSTANCE_LABEL] == "kd-app-0123456789"
        assert template["spec"]["containers"] == [
            {
                "name": "app",
                "image": "app:1",
                "ports": [{"name": "http", "containerPort": 8080, "protocol": "TCP"}],
            }
        ]
        assert "volumeClaimTemplates" not in manifest["spec"]

        assert [g.name for g in compiled.groupings] == ["app"]
        assert [p.name for p in compiled.groupings[0].ports] == ["http"]

    def test_replicas_is_an_input(self, single_component: str):
        compiled = compile_workload("kd-x", _load(single_component), replicas=3)
        assert compiled.manifest["spec"]["replicas"] == 3

    def test_containers_keep_declaration_order(self, multi_component: str):
        containers = compile_workload("kd-x", _load(multi_component)).manifest["spec"][
            "template"
        ]["spec"]["containers"]
        assert [c["name"] for c in containers] == ["web", "worker"]

    def test_container_spec(self, multi_component: str):
        web = compile_workload("kd-x", _load(multi_component)).manifest["spec"]["template"][
            "spec"
        ]["containers"][0]

        assert web["command"] == ["nginx"]
        assert web["args"] == ["-g", "daemon off;"]
        assert web["env"] == [
            {"name": "LOG_LEVEL", "value": "info"},
            {"name": "WORKERS", "value": "4"},
        ]
        assert web["resources"] == {
            "limits": {"cpu": "500m", "memory": "256Mi"},
            "requests": {"cpu": "100m", "memory": "128Mi"},
        }
        assert web["volumeMounts"] == [{"name": "data", "mountPath": "/var/lib/data"}]

    def test_volume_claims_deduplicated_in_first_declaration_order(self, multi_component: str):
        claims = compile_workload("kd-x", _load(multi_component)).manifest["spec"][
            "volumeClaimTemplates"
        ]

        assert claims == [
            {
                "metadata": {"name": "data"},
                "spec": {
                    "accessModes": ["ReadWriteOnce"],
                    "resources": {"requests": {"storage": "1Gi"}},
                },
            },
            {
                "metadata": {"name": "cache"},
                "spec": {
                    "accessModes": ["ReadWriteOnce"],
                    "resources": {"requests": {"storage": "512Mi"}},
                    "storageClassName": "fast",
                },
            },
        ]

    def test_groupings_in_first_appearance_order(self, multi_component: str):
        groupings = compile_workload("kd-x", _load(multi_component)).groupings

        assert [g.name for g in groupings] == ["web", "monitoring", "worker"]
        assert [p.name for p in groupings[1].ports] == ["metrics", "worker-metrics"]

    def test_labels(self, single_component: str):
        manifest = compile_workload("kd-x", _load(single_component)).manifest
        assert manifest["metadata"]["labels"] == {
            INSTANCE_LABEL: "kd-x",
            MANAGED_BY_LABEL: "kdeploy",
        }


class TestCompileService:
    def test_single_component_example(self, single_component: str):
        compiled = compile_workload("kd-x", _load(single_component))
        grouping = compiled.groupings[0]

        manifest = compile_service("kd-x", service_name("kd-x", grouping.name), grouping.ports)

        assert manifest["apiVersion"] == "v1"
        assert manifest["kind"] == "Service"
        assert manifest["metadata"]["name"] == "kd-x-app"
        assert manifest["spec"]["selector"] == {INSTANCE_LABEL: "kd-x"}
        assert manifest["spec"]["ports"] == [
            {"name": "http", "port": 8080, "targetPort": 8080, "protocol": "TCP"}
        ]

    def test_selector_matches_workload_pods(self, multi_component: str):
        compiled = compile_workload("kd-x", _load(multi_component))
        pod_labels = compiled.manifest["spec"]["template"]["metadata"]["labels"]

        for grouping in compiled.groupings:
            manifest = compile_service("kd-x", f"kd-x-{grouping.name}", grouping.ports)
            assert manifest["spec"]["selector"].items() <= pod_labels.items()

    def test_empty_ports_rejected(self):
        with pytest.raises(ServiceCompileError, match="no ports"):
            compile_service("kd-x", "kd-x-web", [])
