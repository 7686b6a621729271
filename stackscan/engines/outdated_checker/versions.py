"""Loose version comparison used to flag outdated dependencies."""

from __future__ import annotations

import re

# Operators and prefixes found in front of declared versions: ^1.2, ~> 7.0, >=3, v1.0
_PREFIX_RE = re.compile(r"^[\s^~<>=v]+")
_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


def clean_version(version: str) -> str:
    """Strip leading range operators and a ``v`` prefix."""
    return _PREFIX_RE.sub("", version or "").strip()


def version_tuple(version: str) -> tuple[int, int, int] | None:
    """Return the first ``(major, minor, patch)`` found in *version*.

    Patch defaults to 0 when absent; None if no ``major.minor`` is present.
    """
    m = _VERSION_RE.search(clean_version(version))
    if m is None:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)


def is_outdated(current: str, latest: str) -> bool:
    """True if *latest* is newer than *current*.

    Versions without a numeric ``major.minor`` (git refs, ``latest``, ``*``)
    fall back to case-insensitive inequality of the cleaned strings.
    """
    current_tuple = version_tuple(current)
    latest_tuple = version_tuple(latest)
    if current_tuple is None or latest_tuple is None:
        return clean_version(current).lower() != clean_version(latest).lower()
    return latest_tuple > current_tuple
