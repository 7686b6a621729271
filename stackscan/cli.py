"""CLI entry point: stackscan.

Subcommands:
    stackscan scan /path/to/repo                  # standalone scan, no queue or DB
    stackscan scan . --json --check-outdated      # annotate with registry versions
    stackscan run ./svc-a ./svc-b                 # full pipeline through the worker pool
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
import uuid
from pathlib import Path

import click

from stackscan.core.config import Settings
from stackscan.core.logging import setup_logging
from stackscan.engines.dependency_scanner.models import DependencyFinding, ScanResult
from stackscan.engines.dependency_scanner.scanner import ScanExecutor, scan as scan_tree
from stackscan.engines.insight_generator.generator import InsightGenerator
from stackscan.engines.outdated_checker.checker import OutdatedChecker
from stackscan.engines.outdated_checker.registry_client import RegistryClient
from stackscan.exceptions import ConfigError, InvalidPathError
from stackscan.jobs.queue import JobQueue
from stackscan.scheduler import WorkerPool
from stackscan.services.scan_service import ScanService
from stackscan.store.memory import InMemoryScanStore

_POLL_INTERVAL = 0.1


def _finding_row(f: DependencyFinding) -> dict:
    return dataclasses.asdict(f)


def _print_findings(findings: list[DependencyFinding], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([_finding_row(f) for f in findings], indent=2))
        return

    if not findings:
        click.echo("No dependencies found.")
        return

    # Group by source file
    by_file: dict[str, list[DependencyFinding]] = {}
    for f in findings:
        by_file.setdefault(f.source_file, []).append(f)

    click.echo(f"Found {len(findings)} dependencies in {len(by_file)} manifest(s)\n")

    for source_file, file_findings in sorted(by_file.items()):
        click.echo(f"  {source_file}  ({file_findings[0].detector})")
        for f in file_findings:
            version = f.version or ""
            latest = ""
            if f.latest_version:
                marker = "outdated" if f.is_outdated else "latest"
                latest = f"  -> {f.latest_version} ({marker})"
            click.echo(f"    {f.name} {version}{latest}")
        click.echo()


def _print_result(result: ScanResult) -> None:
    click.echo(f"== {result.project_name} [{result.status.value}] {result.project_path}")
    if result.error:
        click.echo(f"Error: {result.error}")
    _print_findings(result.findings, as_json=False)
    if result.insights:
        click.echo(result.insights)
        click.echo()


async def _check_outdated(findings: list[DependencyFinding], settings: Settings) -> None:
    async with RegistryClient(timeout=settings.registry_timeout) as registry:
        checker = OutdatedChecker(registry, timeout=settings.registry_timeout)
        await checker.check_all(findings)


async def _wait_until_finished(
    service: ScanService, scan_ids: list[uuid.UUID]
) -> list[ScanResult]:
    while True:
        results = [await service.get_status(scan_id) for scan_id in scan_ids]
        if all(r.status.is_terminal for r in results):
            return results
        await asyncio.sleep(_POLL_INTERVAL)


async def _run_scans(
    settings: Settings, paths: tuple[str, ...], with_insights: bool
) -> list[ScanResult]:
    store = InMemoryScanStore()
    queue = JobQueue(settings.queue_capacity)
    service = ScanService(store, queue)

    async with (
        RegistryClient(timeout=settings.registry_timeout) as registry,
        InsightGenerator(settings) as generator,
    ):
        pool = WorkerPool(
            queue,
            store,
            ScanExecutor(settings),
            OutdatedChecker(registry, timeout=settings.registry_timeout),
            generator if with_insights else None,
            concurrency=settings.worker_concurrency,
            max_retries=settings.max_retries,
        )
        await pool.start()
        try:
            scan_ids = []
            for path in paths:
                name = Path(path).resolve().name or path
                requested = await service.request_scan(uuid.uuid4(), name, path)
                scan_ids.append(requested.scan_id)
            return await _wait_until_finished(service, scan_ids)
        finally:
            await pool.stop()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """stackscan: detect the technology stack of local projects."""
    setup_logging("DEBUG" if verbose else None)
    try:
        ctx.obj = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("scan")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Directory depth limit")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--check-outdated", is_flag=True, help="Look up latest versions in public registries")
@click.pass_obj
def scan(
    settings: Settings, path: str, max_depth: int | None, as_json: bool, check_outdated: bool
) -> None:
    """Scan PATH for manifests and print the detected dependencies."""
    depth = settings.max_depth if max_depth is None else max_depth
    try:
        findings = scan_tree(path, depth, settings.allowed_root)
    except InvalidPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if check_outdated:
        asyncio.run(_check_outdated(findings, settings))

    _print_findings(findings, as_json)


@main.command("run")
@click.argument("paths", nargs=-1, required=True)
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Worker permits")
@click.option("--insights/--no-insights", default=True, help="Ask the LLM for a stack summary")
@click.pass_obj
def run(
    settings: Settings, paths: tuple[str, ...], concurrency: int | None, insights: bool
) -> None:
    """Queue one scan job per PATH and wait for all of them."""
    if concurrency is not None:
        settings = dataclasses.replace(settings, worker_concurrency=concurrency)

    results = asyncio.run(_run_scans(settings, paths, insights))
    for result in results:
        _print_result(result)

    if any(r.error for r in results):
        sys.exit(1)
