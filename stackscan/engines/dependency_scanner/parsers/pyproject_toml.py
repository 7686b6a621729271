"""Parser for pyproject.toml — PEP 621 and Poetry dependency declarations."""

from __future__ import annotations

import tomllib

from stackscan.engines.dependency_scanner.models import DependencyFinding
from stackscan.engines.dependency_scanner.parsers.pip_requirements import parse_requirement
from stackscan.engines.dependency_scanner.registry import register_parser
from stackscan.exceptions import ParseWarning


class PyprojectTomlParser:
    format_name = "pyproject.toml"
    detector = "pyproject"
    file_names = ("pyproject.toml",)
    extensions = ()

    def parse(self, content: str, source_file: str) -> list[DependencyFinding]:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ParseWarning(f"invalid TOML: {exc}") from exc

        deps: list[DependencyFinding] = []

        # [project] dependencies = ["requests>=2.31", ...]
        project = data.get("project")
        if isinstance(project, dict):
            for raw in project.get("dependencies") or []:
                if not isinstance(raw, str):
                    continue
                dep = parse_requirement(raw, source_file, self.detector)
                if dep is not None:
                    deps.append(dep)

        # [tool.poetry.dependencies] requests = "^2.31"
        tool = data.get("tool")
        poetry = tool.get("poetry") if isinstance(tool, dict) else None
        poetry_deps = poetry.get("dependencies") if isinstance(poetry, dict) else None
        if isinstance(poetry_deps, dict):
            for name, value in poetry_deps.items():
                deps.append(
                    DependencyFinding(
                        name=name,
                        version=_poetry_version(value),
                        source_file=source_file,
                        detector=self.detector,
                    )
                )

        return deps


def _poetry_version(value: object) -> str | None:
    """``"^1.0"`` or ``{version = "^1.0", extras = [...]}``; git/path deps have none."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        version = value.get("version")
        return version if isinstance(version, str) else None
    return None


register_parser(PyprojectTomlParser())
