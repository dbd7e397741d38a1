"""Tests for the offline validate and render commands."""

from pathlib import Path

import pytest
import yaml

from kdeploy.cli.commands.descriptor import render, validate
from kdeploy.domain.deployment.manifest.naming import resolve_workload_name

DESCRIPTOR = """
components:
  - name: web
    image: nginx:1.25
    ports:
      - name: http
        port: 80
      - name: metrics
        port: 9100
        service: monitoring
"""


@pytest.fixture
def descriptor_file(tmp_path: Path) -> Path:
    path = tmp_path / "kdeploy.yaml"
    path.write_text(DESCRIPTOR)
    return path


class TestValidate:
    def test_valid_descriptor(self, descriptor_file: Path, capsys: pytest.CaptureFixture[str]):
        validate(descriptor_file)

        err = capsys.readouterr().err
        assert "component(s)" in err
        assert "service(s)" in err

    def test_invalid_descriptor_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        path = tmp_path / "bad.yaml"
        path.write_text("components:\n  - name: web\n")

        with pytest.raises(SystemExit) as exc_info:
            validate(path)

        assert exc_info.value.code == 1
        assert "problem(s)" in capsys.readouterr().err

    def test_unparsable_descriptor_exits(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("components: [")

        with pytest.raises(SystemExit):
            validate(path)

    def test_missing_file_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit):
            validate(tmp_path / "nope.yaml")

        assert "Cannot" in capsys.readouterr().err


class TestRender:
    def test_prints_workload_and_services(
        self, descriptor_file: Path, capsys: pytest.CaptureFixture[str]
    ):
        render(descriptor_file, owner="alice", id="d-1", replicas=2)

        documents = list(yaml.safe_load_all(capsys.readouterr().out))
        name = str(resolve_workload_name("alice", "d-1"))

        assert [d["kind"] for d in documents] == ["StatefulSet", "Service", "Service"]
        assert documents[0]["metadata"]["name"] == name
        assert documents[0]["spec"]["replicas"] == 2
        assert [d["metadata"]["name"] for d in documents[1:]] == [
            f"{name}-web",
            f"{name}-monitoring",
        ]

    def test_negative_replicas_exits(self, descriptor_file: Path):
        with pytest.raises(SystemExit):
            render(descriptor_file, owner="alice", id="d-1", replicas=-1)
