"""Parser for Ruby Gemfile declarations."""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

# gem "name", "version" — quotes optional or mixed
_GEM_RE = re.compile(
    r"""^\s*gem\s+['"]?(?P<name>[^'",\s]+)['"]?"""
    r"""\s*(?:,\s*['"]?(?P<version>[^'",\n]+)['"]?)?""",
    re.IGNORECASE | re.MULTILINE,
)


def _is_option(arg: str) -> bool:
    """``require: false`` / ``:platforms => [:mri]`` are options, not versions."""
    return ":" in arg or "=>" in arg


class GemfileParser:
    format_name = "Gemfile"
    detector = "gemfile"
    file_names = ("Gemfile",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        for m in _GEM_RE.finditer(content):
            version = m.group("version")
            if version is not None:
                version = version.strip()
                if _is_option(version):
                    version = None
            deps.append(
                DependencyFinding(
                    name=m.group("name"),
                    version=version,
                    source_file=source_file,
                    detector=self.detector,
                )
            )
        return deps


register_parser(GemfileParser())
