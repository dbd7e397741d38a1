"""End-to-end tests of the REST API against the in-memory cluster backend."""

import pytest
from fastapi.testclient import TestClient

from kdeploy.application.api.rest.app import create_app
from kdeploy.config import AuthConfig, ClusterConfig, Config, DatabaseConfig, JwtConfig
from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.auth.service.token import TokenService

DESCRIPTOR = """
components:
  - name: web
    image: nginx:1.25
    ports:
      - name: http
        port: 80
"""


@pytest.fixture
def config() -> Config:
    return Config(
        database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:"),
        cluster=ClusterConfig(backend="memory", namespace="test"),
        auth=AuthConfig(jwt=JwtConfig(secret="test-secret-for-unit-tests-min-32")),
    )


@pytest.fixture
def client(config: Config):
    with TestClient(create_app(config)) as client:
        yield client


def _auth(config: Config, user: str = "alice") -> dict[str, str]:
    token = TokenService(_config=config.auth.jwt).create_access_token(UserId(user))
    return {"Authorization": f"Bearer {token}"}


def _register(client: TestClient, config: Config, data: str = DESCRIPTOR) -> str:
    response = client.post("/api/v1/deployments", json={"data": data}, headers=_auth(config))
    assert response.status_code == 201
    return response.json()["id"]


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthentication:
    def test_missing_token(self, client: TestClient):
        response = client.get("/api/v1/deployments")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_bad_token(self, client: TestClient):
        response = client.get(
            "/api/v1/deployments", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401


class TestDeploymentLifecycle:
    def test_register_rejects_invalid_descriptor(self, client: TestClient, config: Config):
        response = client.post(
            "/api/v1/deployments",
            json={"data": "components:\n  - name: web\n"},
            headers=_auth(config),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "DESCRIPTOR_INVALID"
        assert body["errors"][0]["path"] == "components[0].image"

    def test_full_lifecycle(self, client: TestClient, config: Config):
        headers = _auth(config)
        deployment_id = _register(client, config)

        applied = client.put(f"/api/v1/deployments/{deployment_id}", headers=headers)
        assert applied.status_code == 200
        workload = applied.json()["workload"]
        assert applied.json()["created"] is True
        assert applied.json()["services"] == [f"{workload}-web"]

        scaled = client.patch(
            f"/api/v1/deployments/{deployment_id}", params={"scale": 2}, headers=headers
        )
        assert scaled.status_code == 200

        detail = client.get(f"/api/v1/deployments/{deployment_id}", headers=headers).json()
        assert [p["name"] for p in detail["pods"]] == [f"{workload}-0", f"{workload}-1"]
        assert detail["services"] == [f"{workload}-web"]

        restarted = client.post(
            f"/api/v1/deployments/{deployment_id}/hooks/restart", headers=headers
        )
        assert restarted.status_code == 200
        assert restarted.json()["replicas"] == 2

        pod_deleted = client.delete(
            f"/api/v1/deployments/{deployment_id}/pods/{workload}-1", headers=headers
        )
        assert pod_deleted.status_code == 200

        deleted = client.delete(f"/api/v1/deployments/{deployment_id}", headers=headers)
        assert deleted.status_code == 200

        gone = client.get(f"/api/v1/deployments/{deployment_id}", headers=headers)
        assert gone.status_code == 404

    def test_list_only_own_deployments(self, client: TestClient, config: Config):
        deployment_id = _register(client, config)

        mine = client.get("/api/v1/deployments", headers=_auth(config)).json()
        theirs = client.get("/api/v1/deployments", headers=_auth(config, "bob")).json()

        assert [d["id"] for d in mine["items"]] == [deployment_id]
        assert theirs["items"] == []

    def test_other_owner_gets_not_found(self, client: TestClient, config: Config):
        deployment_id = _register(client, config)

        response = client.put(
            f"/api/v1/deployments/{deployment_id}", headers=_auth(config, "bob")
        )

        assert response.status_code == 404

    def test_scale_before_apply(self, client: TestClient, config: Config):
        deployment_id = _register(client, config)

        response = client.patch(
            f"/api/v1/deployments/{deployment_id}", params={"scale": 2}, headers=_auth(config)
        )

        assert response.status_code == 404

    def test_negative_replicas(self, client: TestClient, config: Config):
        deployment_id = _register(client, config)

        response = client.put(
            f"/api/v1/deployments/{deployment_id}",
            params={"replicas": -1},
            headers=_auth(config),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "replicas"

    def test_pod_of_other_workload(self, client: TestClient, config: Config):
        deployment_id = _register(client, config)

        response = client.delete(
            f"/api/v1/deployments/{deployment_id}/pods/kd-other-0123456789-0",
            headers=_auth(config),
        )

        assert response.status_code == 404

    def test_pod_logs(self, client: TestClient, config: Config):
        headers = _auth(config)
        deployment_id = _register(client, config)
        workload = client.put(f"/api/v1/deployments/{deployment_id}", headers=headers).json()[
            "workload"
        ]

        response = client.get(
            f"/api/v1/deployments/{deployment_id}/logs/{workload}-0",
            params={"tail_lines": 10},
            headers=headers,
        )

        assert response.status_code == 200


class TestCapacity:
    def test_capacity(self, client: TestClient, config: Config):
        response = client.get("/api/v1/capacity", headers=_auth(config))

        assert response.status_code == 200
        body = response.json()
        assert body["cpu"] == "4"
        assert body["memory"] == str(8 * 2**30)
        assert [n["name"] for n in body["nodes"]] == ["memory-0"]
