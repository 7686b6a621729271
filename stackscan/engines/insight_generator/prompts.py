"""Prompt for the tech-stack insight report."""

from __future__ import annotations

import json
from collections.abc import Sequence

from stackscan.engines.dependency_scanner.models import DependencyFinding

INSIGHT_INSTRUCTIONS = """\
You are an experienced software architect analyzing a project's technology stack.
Provide markdown with the following sections:
1) Outdated dependencies (name, version, recommendation)
2) Security concerns (brief reason)
3) Compatibility issues between technologies
4) Recommended upgrade paths (prioritized)
5) Overall health score from 1-10 with rationale
"""


def _finding_line(finding: DependencyFinding) -> str:
    record = {
        "name": finding.name,
        "version": finding.version or "unknown",
        "detector": finding.detector or "unknown",
        "source": finding.source_file or "unknown",
    }
    if finding.latest_version:
        record["latest"] = finding.latest_version
    return "- " + json.dumps(record)


def build_insight_prompt(
    project_name: str,
    project_path: str,
    findings: Sequence[DependencyFinding],
) -> str:
    """Render the full prompt: instructions, project identity, one line per finding."""
    lines = [
        INSIGHT_INSTRUCTIONS,
        f"Project: {project_name}",
        f"Path: {project_path}",
        "Detected technologies (JSON lines):",
    ]
    lines.extend(_finding_line(f) for f in findings)
    lines.append("")
    lines.append("Emphasize concise, actionable insights.")
    return "\n".join(lines) + "\n"
