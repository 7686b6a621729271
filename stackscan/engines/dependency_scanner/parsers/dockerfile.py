"""Parser for Dockerfile base images."""

from __future__ import annotations

import re

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.registry import register_parser

# FROM [--platform=...] image[:tag][@digest] [AS stage]
_FROM_RE = re.compile(
    r"^\s*FROM\s+(?:--\S+\s+)*(?P<image>\S+)(?:\s+AS\s+(?P<alias>\S+))?",
    re.IGNORECASE | re.MULTILINE,
)


def split_image_ref(ref: str) -> tuple[str, str]:
    """Split ``registry:5000/app:1.2@sha256:…`` into ``(name, tag)``.

    The tag defaults to ``latest``; a digest stands in when no tag is given.
    """
    name, _, digest = ref.partition("@")
    tag: str | None = None
    colon = name.rfind(":")
    if colon > name.rfind("/"):
        name, tag = name[:colon], name[colon + 1 :]
    return name, tag or digest or "latest"


class DockerfileParser:
    format_name = "Dockerfile"
    detector = "dockerfile"
    file_names = ("Dockerfile",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        deps: list[DependencyFinding] = []
        stages: set[str] = set()

        for m in _FROM_RE.finditer(content):
            image = m.group("image")
            alias = m.group("alias")

            # FROM builder — reuses an earlier build stage, not an image
            if image.lower() not in stages:
                name, version = split_image_ref(image)
                deps.append(
                    DependencyFinding(
                        name=name,
                        version=version,
                        source_file=source_file,
                        detector=self.detector,
                    )
                )
            if alias:
                stages.add(alias.lower())

        return deps


register_parser(DockerfileParser())
