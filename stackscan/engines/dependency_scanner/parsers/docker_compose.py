"""Parser for docker-compose service images."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import yaml

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.parsers.dockerfile import split_image_ref
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning


def _iter_images(node: Any) -> Iterator[str]:
    """Yield every ``image:`` string in document order.

    Covers both the ``services:`` layout and v1 files where services sit at
    the top level, plus images nested under extension fields.
    """
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "image" and isinstance(value, str):
                if value.strip():
                    yield value.strip()
            else:
                yield from _iter_images(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_images(item)


class DockerComposeParser:
    format_name = "docker-compose.yml"
    detector = "docker-compose"
    file_names = ("docker-compose.yml", "docker-compose.yaml")
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ParseWarning(f"invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseWarning("top-level value is not a mapping")

        deps: list[DependencyFinding] = []
        for image in _iter_images(data):
            name, version = split_image_ref(image)
            deps.append(
                DependencyFinding(
                    name=name,
                    version=version,
                    source_file=source_file,
                    detector=self.detector,
                )
            )
        return deps


register_parser(DockerComposeParser())
