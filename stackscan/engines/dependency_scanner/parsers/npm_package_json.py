"""Parser for npm package.json files."""

from __future__ import annotations

import json

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning

_SECTIONS = ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies")


class PackageJsonParser:
    format_name = "package.json"
    detector = "npm"
    file_names = ("package.json",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseWarning(f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseWarning("top-level value is not an object")

        deps: list[DependencyFinding] = []
        for section in _SECTIONS:
            entries = data.get(section)
            if not isinstance(entries, dict):
                continue
            for name, value in entries.items():
                deps.append(
                    DependencyFinding(
                        name=name,
                        # workspace/git specs may be objects; keep strings only
                        version=value if isinstance(value, str) else None,
                        source_file=source_file,
                        detector=self.detector,
                    )
                )
        return deps


register_parser(PackageJsonParser())
