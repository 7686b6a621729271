"""Shared fixtures for stackscan tests."""

from __future__ import annotations

import uuid

import pytest
import pytest_asyncio

from stackscan.core import database
from stackscan.core.config import Settings
from stackscan.engines.dependency_scanner.models import DependencyFinding, ScanResult


@pytest.fixture
def make_finding():
    """Factory for DependencyFinding with sensible defaults."""

    def _make(name: str = "react", **overrides) -> DependencyFinding:
        values = {
            "name": name,
            "version": "18.2.0",
            "source_file": "package.json",
            "detector": "npm",
        }
        values.update(overrides)
        return DependencyFinding(**values)

    return _make


@pytest.fixture
def make_result():
    """Factory for pending ScanResult records."""

    def _make(path: str = "/srv/app", **overrides) -> ScanResult:
        values = {
            "scan_id": uuid.uuid4(),
            "project_id": uuid.uuid4(),
            "project_name": "app",
            "project_path": path,
        }
        values.update(overrides)
        return ScanResult(**values)

    return _make


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        max_depth=5,
        insight_host="http://ollama.test",
        insight_model="llama3.2",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'stackscan.db'}",
    )


@pytest_asyncio.fixture
async def session_factory(settings):
    """Session factory on a throwaway SQLite file with all tables created."""
    factory = database.init_session_factory(settings.database_url)
    await database.create_all()
    yield factory
    await database.dispose_engine()
