"""Parser for MSBuild project files (*.csproj) — NuGet PackageReference items."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning


def local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


class CsprojParser:
    format_name = "csproj"
    detector = "nuget"
    file_names = ()
    extensions = (".csproj",)

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ParseWarning(f"invalid XML: {exc}") from exc

        deps: list[DependencyFinding] = []
        for el in root.iter():
            if local_name(el.tag) != "PackageReference":
                continue
            name = el.get("Include") or el.get("Update")
            if not name or not name.strip():
                continue

            version = el.get("Version")
            if version is None:
                for child in el:
                    if local_name(child.tag) == "Version":
                        version = child.text
                        break

            deps.append(
                DependencyFinding(
                    name=name.strip(),
                    version=version,
                    source_file=source_file,
                    detector=self.detector,
                )
            )
        return deps


register_parser(CsprojParser())
