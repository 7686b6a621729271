"""Parser for Go go.sum checksum files."""

from __future__ import annotations

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser


class GoSumParser:
    format_name = "go.sum"
    detector = "go.sum"
    file_names = ("go.sum",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        # <module> <version>[/go.mod] h1:<hash>
        deps: list[DependencyFinding] = []
        for line in content.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            deps.append(
                DependencyFinding(
                    name=parts[0],
                    version=parts[1],
                    source_file=source_file,
                    detector=self.detector,
                )
            )
        return deps


register_parser(GoSumParser())
