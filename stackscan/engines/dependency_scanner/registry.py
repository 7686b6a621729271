"""Parser registry — match manifest files to parsers and dispatch parsing."""

from __future__ import annotations

from pathlib import PurePath
from typing import Protocol, runtime_checkable

import structlog

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.exceptions import ParseWarning

log = structlog.get_logger("stackscan.engine")


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    format_name: str
    detector: str
    file_names: tuple[str, ...]
    extensions: tuple[str, ...]

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}

# lower-cased file name / extension -> format name
_BY_FILE_NAME: dict[str, str] = {}
_BY_EXTENSION: dict[str, str] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its format_name."""
    key = parser.format_name.lower()
    PARSER_REGISTRY[key] = parser
    for name in parser.file_names:
        _BY_FILE_NAME[name.lower()] = key
    for ext in parser.extensions:
        _BY_EXTENSION[ext.lower()] = key


def get_parser(fmt: str) -> ManifestParser | None:
    return PARSER_REGISTRY.get(fmt.lower())


def parser_for_file(file_name: str) -> ManifestParser | None:
    """Return the parser for *file_name*, or None if it is not a manifest.

    Named manifests match on the exact file name, case-insensitively;
    extension-based formats (``.csproj``) match on the suffix.
    """
    name = PurePath(file_name).name.lower()
    key = _BY_FILE_NAME.get(name)
    if key is None:
        key = _BY_EXTENSION.get(PurePath(name).suffix)
    return PARSER_REGISTRY.get(key) if key else None


def is_manifest(file_name: str) -> bool:
    return parser_for_file(file_name) is not None


def parse_manifest(fmt: str, content: str, source_file: str) -> list[DependencyFinding]:
    """Parse *content* as manifest format *fmt*.

    Never raises on malformed input: a :class:`ParseWarning` (or any
    unexpected parser error) is logged and an empty list is returned.
    """
    parser = get_parser(fmt)
    if parser is None:
        log.warning("parser.unknown_format", format=fmt, source_file=source_file)
        return []
    if not content or not content.strip():
        return []

    try:
        return parser.parse(content, source_file)
    except ParseWarning as exc:
        log.warning(
            "parser.parse_warning",
            format=parser.format_name,
            source_file=source_file,
            reason=str(exc),
        )
    except Exception:
        log.warning(
            "parser.unexpected_error",
            format=parser.format_name,
            source_file=source_file,
            exc_info=True,
        )
    return []
