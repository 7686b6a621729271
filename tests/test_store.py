"""Tests for the in-memory and SQL scan stores."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from stackscan.dao.project_dao import ProjectDAO
from stackscan.engines.dependency_scanner.models import ScanStatus
from stackscan.jobs.models import ScanJob
from stackscan.jobs.queue import JobQueue
from stackscan.models.scan import Scan
from stackscan.scheduler import WorkerPool
from stackscan.store.base import ScanStore
from stackscan.store.memory import InMemoryScanStore
from stackscan.store.sql import SqlScanStore


@pytest.fixture
def sql_store(session_factory) -> SqlScanStore:
    return SqlScanStore(session_factory)


class TestInMemoryScanStore:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryScanStore(), ScanStore)

    @pytest.mark.asyncio
    async def test_round_trip_is_a_copy(self, make_result, make_finding):
        store = InMemoryScanStore()
        result = make_result()
        await store.save_result(result)
        await store.save_findings(result.scan_id, [make_finding("react")])

        loaded = await store.load_result(result.scan_id)
        loaded.findings[0].name = "mutated"
        loaded.findings.append(make_finding("extra"))

        again = await store.load_result(result.scan_id)
        assert [f.name for f in again.findings] == ["react"]

    @pytest.mark.asyncio
    async def test_save_result_keeps_stored_findings(self, make_result, make_finding):
        store = InMemoryScanStore()
        result = make_result()
        await store.save_result(result)
        await store.save_findings(result.scan_id, [make_finding("react")])

        # result still carries the empty findings list it was created with
        await store.save_result(result.mark_running())

        loaded = await store.load_result(result.scan_id)
        assert loaded.status is ScanStatus.RUNNING
        assert [f.name for f in loaded.findings] == ["react"]

    @pytest.mark.asyncio
    async def test_clear_and_replace(self, make_result, make_finding):
        store = InMemoryScanStore()
        result = make_result()
        await store.save_result(result)
        await store.save_findings(result.scan_id, [make_finding("a"), make_finding("b")])
        await store.save_findings(result.scan_id, [make_finding("c")])
        assert [f.name for f in (await store.load_result(result.scan_id)).findings] == ["c"]

        await store.clear_findings(result.scan_id)
        assert (await store.load_result(result.scan_id)).findings == []

    @pytest.mark.asyncio
    async def test_unknown_scan(self, make_finding):
        store = InMemoryScanStore()
        assert await store.load_result(uuid.uuid4()) is None
        with pytest.raises(KeyError):
            await store.save_findings(uuid.uuid4(), [make_finding()])


class TestSqlScanStore:
    @pytest.mark.asyncio
    async def test_pending_round_trip(self, sql_store, make_result):
        result = make_result("/srv/shop", project_name="shop")
        await sql_store.save_result(result)

        loaded = await sql_store.load_result(result.scan_id)

        assert loaded.scan_id == result.scan_id
        assert loaded.project_id == result.project_id
        assert loaded.project_name == "shop"
        assert loaded.project_path == "/srv/shop"
        assert loaded.status is ScanStatus.PENDING
        assert loaded.findings == []
        assert loaded.started_at is None

    @pytest.mark.asyncio
    async def test_unknown_scan(self, sql_store):
        assert await sql_store.load_result(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_findings_keep_order_and_replace(self, sql_store, make_result, make_finding):
        result = make_result()
        await sql_store.save_result(result)

        await sql_store.save_findings(
            result.scan_id,
            [
                make_finding("zod", version="3.22.0"),
                make_finding("axios", version=None),
                make_finding(
                    "requests",
                    version="==2.31.0",
                    detector="pip",
                    source_file="api/requirements.txt",
                    is_outdated=True,
                    latest_version="2.32.3",
                ),
            ],
        )
        loaded = await sql_store.load_result(result.scan_id)
        assert [(f.name, f.version) for f in loaded.findings] == [
            ("zod", "3.22.0"),
            ("axios", None),
            ("requests", "==2.31.0"),
        ]
        requests = loaded.findings[2]
        assert requests.detector == "pip"
        assert requests.source_file == "api/requirements.txt"
        assert requests.is_outdated is True
        assert requests.latest_version == "2.32.3"

        await sql_store.save_findings(result.scan_id, [make_finding("only")])
        loaded = await sql_store.load_result(result.scan_id)
        assert [f.name for f in loaded.findings] == ["only"]

        await sql_store.clear_findings(result.scan_id)
        assert (await sql_store.load_result(result.scan_id)).findings == []

    @pytest.mark.asyncio
    async def test_status_updates(self, sql_store, make_result):
        result = make_result()
        await sql_store.save_result(result)
        running = result.mark_running()
        await sql_store.save_result(running)
        failed = running.mark_failed("boom")
        await sql_store.save_result(failed)

        loaded = await sql_store.load_result(result.scan_id)
        assert loaded.status is ScanStatus.FAILED
        assert loaded.error == "boom"
        assert loaded.started_at is not None
        assert loaded.finished_at is not None

    @pytest.mark.asyncio
    async def test_completion_updates_project(self, sql_store, session_factory, make_result):
        result = make_result(project_name="shop")
        await sql_store.save_result(result)
        await sql_store.save_result(result.mark_running().mark_completed("## Report"))

        async with session_factory() as session:
            project = await ProjectDAO().get_by_id(session, result.project_id)
            scans = (
                await session.execute(select(Scan).where(Scan.project_id == result.project_id))
            ).scalars().all()

        assert project.ai_insights == "## Report"
        assert project.last_scanned_at is not None
        assert [s.status for s in scans] == ["completed"]

    @pytest.mark.asyncio
    async def test_project_shared_between_scans(self, sql_store, session_factory, make_result):
        first = make_result(project_name="shop")
        second = make_result(project_id=first.project_id, project_name="shop-renamed")
        await sql_store.save_result(first)
        await sql_store.save_result(second)

        async with session_factory() as session:
            project = await ProjectDAO().get_by_id(session, first.project_id)
            scans = (
                await session.execute(select(Scan).where(Scan.project_id == first.project_id))
            ).scalars().all()

        assert project.name == "shop-renamed"
        assert {s.id for s in scans} == {first.scan_id, second.scan_id}

    @pytest.mark.asyncio
    async def test_worker_pool_on_sql_store(self, sql_store, make_result, make_finding):
        executor = AsyncMock()
        executor.scan.return_value = [make_finding("react"), make_finding("vite")]
        insights = AsyncMock()
        insights.analyze.return_value = "stack looks healthy"
        queue = JobQueue()
        pool = WorkerPool(queue, sql_store, executor, AsyncMock(), insights, concurrency=1)

        result = make_result()
        await sql_store.save_result(result)
        await queue.enqueue(ScanJob(result.scan_id, result.project_id, result.project_path))
        await pool.start()
        await pool.stop(timeout=5.0)

        loaded = await sql_store.load_result(result.scan_id)
        assert loaded.status is ScanStatus.COMPLETED
        assert loaded.insights == "stack looks healthy"
        assert [f.name for f in loaded.findings] == ["react", "vite"]
