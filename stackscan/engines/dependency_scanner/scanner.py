"""Dependency scanner — walk a project tree and parse every manifest found."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

# Ensure parsers are registered before any scan runs.
import stackscan.engines.dependency_scanner.parsers  # noqa: F401
from stackscan.core.config import Settings
from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import parse_manifest, parser_for_file
from stackscan.engines.dependency_scanner.walker import walk_manifests
from stackscan.exceptions import InvalidPathError

log = structlog.get_logger("stackscan.engine")

DEFAULT_MAX_DEPTH = 5


def resolve_root(path: str | Path, allowed_root: str | Path | None = None) -> Path:
    """Normalise and validate a scan root.

    Raises :class:`InvalidPathError` if *path* is blank, does not exist, is
    not a directory, or lies outside *allowed_root*.
    """
    if not str(path).strip():
        raise InvalidPathError("path must be provided")

    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise InvalidPathError(f"directory not found: {root}")

    if allowed_root is not None:
        allowed = Path(allowed_root).expanduser().resolve()
        if not root.is_relative_to(allowed):
            raise InvalidPathError(f"{root} is outside the allowed root {allowed}")

    return root


def scan(
    root_path: str | Path,
    max_depth: int = DEFAULT_MAX_DEPTH,
    allowed_root: str | Path | None = None,
) -> list[DependencyFinding]:
    """Scan a local directory for dependencies (no DB required).

    Source paths on the returned findings are relative to the scan root.
    """
    root = resolve_root(root_path, allowed_root)
    results: list[DependencyFinding] = []

    for file_path in walk_manifests(root, max_depth):
        parser = parser_for_file(file_path.name)
        if parser is None:
            continue

        rel = file_path.relative_to(root).as_posix()
        try:
            content = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            log.warning("scanner.file_unreadable", source_file=rel, error=str(exc))
            continue

        results.extend(parse_manifest(parser.format_name, content, rel))

    log.info("scanner.scan_done", root=str(root), findings=len(results))
    return results


class ScanExecutor:
    """Runs :func:`scan` with configured limits, off the event loop."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        self._max_depth = settings.max_depth
        self._allowed_root = settings.allowed_root

    def scan_sync(self, path: str | Path) -> list[DependencyFinding]:
        return scan(path, self._max_depth, self._allowed_root)

    async def scan(self, path: str | Path) -> list[DependencyFinding]:
        """Walk and parse in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.scan_sync, path)
