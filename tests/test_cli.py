"""Tests for CLI commands — registries and LLM are never contacted."""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import pytest
import structlog
import structlog.testing
from click.testing import CliRunner

from stackscan.cli import main
from stackscan.engines.outdated_checker.registry_client import RegistryClient


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("stackscan.cli.setup_logging"), structlog.testing.capture_logs():
        yield


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "shop"
    (root / "web").mkdir(parents=True)
    (root / "web" / "package.json").write_text(
        '{"dependencies":{"react":"18.2.0"},"devDependencies":{"vite":"6.0.0"}}'
    )
    (root / "Dockerfile").write_text("FROM node:20-alpine\n")
    return root


def _fake_registry(version: str):
    def factory(timeout: float) -> RegistryClient:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"version": version}))
        return RegistryClient(httpx.AsyncClient(transport=transport), timeout=timeout)

    return factory


# ── scan ──


class TestScanCommand:
    def test_grouped_output(self, runner, project):
        result = runner.invoke(main, ["scan", str(project)])
        assert result.exit_code == 0, result.output
        assert "Found 3 dependencies in 2 manifest(s)" in result.stdout
        assert "web/package.json  (npm)" in result.stdout
        assert "react 18.2.0" in result.stdout
        assert "Dockerfile  (dockerfile)" in result.stdout

    def test_json_output(self, runner, project):
        result = runner.invoke(main, ["scan", str(project), "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert {r["name"] for r in rows} == {"react", "vite", "node"}
        assert set(rows[0]) == {
            "name",
            "version",
            "source_file",
            "detector",
            "is_outdated",
            "latest_version",
        }

    def test_max_depth(self, runner, project):
        result = runner.invoke(main, ["scan", str(project), "--max-depth", "0", "--json"])
        assert result.exit_code == 0, result.output
        assert [r["name"] for r in json.loads(result.stdout)] == ["node"]

    def test_empty_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path)])
        assert result.exit_code == 0
        assert "No dependencies found." in result.stdout

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_outside_allowed_root(self, runner, project, tmp_path):
        jail = tmp_path / "jail"
        jail.mkdir()
        result = runner.invoke(
            main, ["scan", str(project)], env={"STACKSCAN_ALLOWED_ROOT": str(jail)}
        )
        assert result.exit_code == 1
        assert "outside the allowed root" in result.output

    def test_bad_config(self, runner, project):
        result = runner.invoke(
            main, ["scan", str(project)], env={"STACKSCAN_MAX_DEPTH": "deep"}
        )
        assert result.exit_code == 1
        assert "STACKSCAN_MAX_DEPTH" in result.output

    def test_check_outdated(self, runner, project):
        with patch("stackscan.cli.RegistryClient", side_effect=_fake_registry("19.0.0")):
            result = runner.invoke(main, ["scan", str(project), "--check-outdated", "--json"])

        assert result.exit_code == 0, result.output
        rows = {r["name"]: r for r in json.loads(result.stdout)}
        assert rows["react"]["latest_version"] == "19.0.0"
        assert rows["react"]["is_outdated"] is True
        # dockerfile images are not looked up
        assert rows["node"]["latest_version"] is None


# ── run ──


class TestRunCommand:
    def test_runs_pipeline_for_each_path(self, runner, project, tmp_path):
        other = tmp_path / "api"
        other.mkdir()
        (other / "Dockerfile").write_text("FROM python:3.12-slim\n")

        with patch("stackscan.cli.RegistryClient", side_effect=_fake_registry("6.0.0")):
            result = runner.invoke(
                main, ["run", str(project), str(other), "--no-insights", "--concurrency", "1"]
            )

        assert result.exit_code == 0, result.output
        assert f"== shop [completed] {project}" in result.stdout
        assert f"== api [completed] {other}" in result.stdout
        assert "vite 6.0.0  -> 6.0.0 (latest)" in result.stdout
        assert "python 3.12-slim" in result.stdout

    def test_invalid_path_reported_as_failed(self, runner, tmp_path):
        missing = tmp_path / "gone"
        result = runner.invoke(main, ["run", str(missing), "--no-insights"])

        assert result.exit_code == 1
        assert "[failed]" in result.stdout
        assert "directory not found" in result.stdout

    def test_requires_a_path(self, runner):
        result = runner.invoke(main, ["run"])
        assert result.exit_code == 2


class TestVerbose:
    def test_verbose_enables_debug_logging(self, runner, tmp_path):
        with patch("stackscan.cli.setup_logging") as mock_setup:
            result = runner.invoke(main, ["-v", "scan", str(tmp_path)])

        assert result.exit_code == 0, result.output
        mock_setup.assert_called_once_with("DEBUG")

    def test_default_level_from_environment(self, runner, tmp_path):
        with patch("stackscan.cli.setup_logging") as mock_setup:
            runner.invoke(main, ["scan", str(tmp_path)])

        mock_setup.assert_called_once_with(None)
