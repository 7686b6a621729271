"""Parser for Maven pom.xml files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.parsers.csproj import local_name
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning

_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders with values from <properties>."""

    def _replace(m: re.Match) -> str:
        return props.get(m.group(1), m.group(0))  # keep original if not found

    return _PROP_RE.sub(_replace, value)


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if local_name(child.tag) == name:
            return child.text.strip() if child.text else None
    return None


class MavenPomParser:
    format_name = "pom.xml"
    detector = "maven"
    file_names = ("pom.xml",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ParseWarning(f"invalid XML: {exc}") from exc

        props = self._extract_properties(root)
        deps: list[DependencyFinding] = []

        for dep_el in root.iter():
            if local_name(dep_el.tag) != "dependency":
                continue
            group_id = _child_text(dep_el, "groupId")
            artifact_id = _child_text(dep_el, "artifactId")
            if not group_id or not artifact_id:
                continue

            version = _child_text(dep_el, "version")
            if version:
                version = _resolve_props(version, props)

            deps.append(
                DependencyFinding(
                    name=f"{group_id}:{artifact_id}",
                    version=version,
                    source_file=source_file,
                    detector=self.detector,
                )
            )

        return deps

    @staticmethod
    def _extract_properties(root: ET.Element) -> dict[str, str]:
        """Extract <properties> key-value pairs from the POM root."""
        props: dict[str, str] = {}
        for child in root:
            if local_name(child.tag) != "properties":
                continue
            for prop in child:
                if prop.text:
                    props[local_name(prop.tag)] = prop.text.strip()
        return props


register_parser(MavenPomParser())
