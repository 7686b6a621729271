"""Parser for Gradle build files (build.gradle / build.gradle.kts).

Two declaration styles are recognised:
  - coordinate literal:  implementation "org.slf4j:slf4j-api:2.0.9"
  - named arguments:     implementation group: 'org.slf4j', name: 'slf4j-api', version: '2.0.9'

Coordinates without a version (BOM-managed) are not reported.
"""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

_COORDINATE_RE = re.compile(
    r"(?P<group>[A-Za-z0-9_.-]+)"
    r":(?P<artifact>[A-Za-z0-9_.-]+)"
    r":(?P<version>[A-Za-z0-9_.-]+)"
)

_NAMED_RE = re.compile(
    r"""group\s*:\s*['"](?P<group>[^'"]+)['"]\s*,\s*"""
    r"""name\s*:\s*['"](?P<artifact>[^'"]+)['"]\s*,\s*"""
    r"""version\s*:\s*['"](?P<version>[^'"]+)['"]""",
    re.IGNORECASE,
)


class GradleBuildParser:
    format_name = "build.gradle"
    detector = "gradle"
    file_names = ("build.gradle", "build.gradle.kts")
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        for pattern in (_COORDINATE_RE, _NAMED_RE):
            for m in pattern.finditer(content):
                deps.append(
                    DependencyFinding(
                        name=f"{m.group('group')}:{m.group('artifact')}",
                        version=m.group("version"),
                        source_file=source_file,
                        detector=self.detector,
                    )
                )
        return deps


register_parser(GradleBuildParser())
