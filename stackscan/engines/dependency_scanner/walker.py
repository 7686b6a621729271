"""Depth-limited directory walk that yields recognised manifest files."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import structlog

from stackscan.engines.dependency_scanner.registry import is_manifest

log = structlog.get_logger("stackscan.engine")


def walk_manifests(root: Path, max_depth: int) -> Iterator[Path]:
    """Yield manifest files under *root*, sorted per directory.

    Entries of *root* are at depth 0; entries of a directory at depth ``d``
    are visited only while ``d <= max_depth``. Directories that cannot be
    listed are logged and skipped. Symlinked directories are not followed.
    """
    yield from _walk(root, 0, max_depth)


def _walk(directory: Path, depth: int, max_depth: int) -> Iterator[Path]:
    if depth > max_depth:
        return

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        log.warning("walker.dir_skipped", directory=str(directory), error=str(exc))
        return

    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if is_dir:
            yield from _walk(Path(entry.path), depth + 1, max_depth)
        elif is_manifest(entry.name):
            yield Path(entry.path)
