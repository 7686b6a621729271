"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

# name, optional [extras], optional operator, optional version.
# The operator is kept as a prefix of the version string.
_REQ_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)"
    r"(?:\[[^\]]*\])?"
    r"\s*(?P<op>==|>=|<=|~=|>|<)?"
    r"\s*(?P<version>[A-Za-z0-9.*+_-]+)?"
)


def parse_requirement(line: str, source_file: str, detector: str) -> DependencyFinding | None:
    """Parse one requirement specifier, or return None for comments/blanks."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    m = _REQ_RE.match(line)
    if not m:
        return None

    spec = (m.group("op") or "") + (m.group("version") or "")
    return DependencyFinding(
        name=m.group("name"),
        version=spec or None,
        source_file=source_file,
        detector=detector,
    )


class PipRequirementsParser:
    format_name = "requirements.txt"
    detector = "pip"
    file_names = ("requirements.txt",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        for raw_line in content.splitlines():
            line = raw_line.strip()
            # pip options: -r other.txt, -e ., --index-url ...
            if line.startswith("-"):
                continue
            dep = parse_requirement(line, source_file, self.detector)
            if dep is not None:
                deps.append(dep)
        return deps


register_parser(PipRequirementsParser())
