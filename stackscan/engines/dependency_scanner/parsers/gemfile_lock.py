"""Parser for Bundler Gemfile.lock files.

Only top-level entries of each ``specs:`` block are resolved gems; the
more deeply indented lines below them are that gem's own constraints::

    GEM
      remote: https://rubygems.org/
      specs:
        actionpack (7.0.4)         <- finding
          rack (~> 2.0, >= 2.2.4)  <- skipped
"""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

_ENTRY_RE = re.compile(r"^(?P<name>[A-Za-z0-9._-]+)\s\((?P<version>[^)]+)\)$")


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


class GemfileLockParser:
    format_name = "Gemfile.lock"
    detector = "gemfile.lock"
    file_names = ("Gemfile.lock",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        specs_indent: int | None = None
        entry_indent: int | None = None

        for line in content.splitlines():
            stripped = line.strip()

            if stripped == "specs:":
                specs_indent = _indent(line)
                entry_indent = None
                continue

            if specs_indent is None:
                continue

            # Block ends at a blank line or on dedent back to the section level.
            if not stripped or _indent(line) <= specs_indent:
                specs_indent = None
                continue

            if entry_indent is None:
                entry_indent = _indent(line)
            if _indent(line) != entry_indent:
                continue

            m = _ENTRY_RE.match(stripped)
            if m:
                deps.append(
                    DependencyFinding(
                        name=m.group("name"),
                        version=m.group("version"),
                        source_file=source_file,
                        detector=self.detector,
                    )
                )

        return deps


register_parser(GemfileLockParser())
