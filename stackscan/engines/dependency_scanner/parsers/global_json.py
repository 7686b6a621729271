"""Parser for .NET global.json (pinned SDK version)."""

from __future__ import annotations

import json

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning


class GlobalJsonParser:
    format_name = "global.json"
    detector = "dotnet-sdk"
    file_names = ("global.json",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseWarning(f"invalid JSON: {exc}") from exc

        sdk = data.get("sdk") if isinstance(data, dict) else None
        if not isinstance(sdk, dict) or "version" not in sdk:
            return []

        version = sdk["version"]
        return [
            DependencyFinding(
                name=".NET SDK",
                version=version if isinstance(version, str) else None,
                source_file=source_file,
                detector=self.detector,
            )
        ]


register_parser(GlobalJsonParser())
