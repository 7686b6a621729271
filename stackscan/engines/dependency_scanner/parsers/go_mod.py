"""Parser for Go go.mod files."""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

_BLOCK_START_RE = re.compile(r"^require\s*\($")
_SINGLE_RE = re.compile(r"^require\s+(\S+)\s+(\S+)")


class GoModParser:
    format_name = "go.mod"
    detector = "go.mod"
    file_names = ("go.mod",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        in_require_block = False

        for raw_line in content.splitlines():
            # Drop trailing comments such as "// indirect"
            line = raw_line.split("//", 1)[0].strip()
            if not line:
                continue

            if in_require_block:
                if line.startswith(")"):
                    in_require_block = False
                    continue
                parts = line.split()
                if len(parts) >= 2:
                    deps.append(self._finding(parts[0], parts[1], source_file))
                continue

            if _BLOCK_START_RE.match(line):
                in_require_block = True
                continue

            m = _SINGLE_RE.match(line)
            if m:
                deps.append(self._finding(m.group(1), m.group(2), source_file))

        return deps

    def _finding(self, module: str, version: str, source_file: str) -> DependencyFinding:
        return DependencyFinding(
            name=module,
            version=version,
            source_file=source_file,
            detector=self.detector,
        )


register_parser(GoModParser())
