"""Insight generator engine — LLM summary of a scanned tech stack."""

from stackscan.engines.insight_generator.generator import (
    DEGRADED_INSIGHT_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    NO_FINDINGS_MESSAGE,
    UNAVAILABLE_MESSAGE,
    InsightGenerator,
)
from stackscan.engines.insight_generator.prompts import build_insight_prompt

__all__ = [
    "DEGRADED_INSIGHT_MESSAGE",
    "EMPTY_RESPONSE_MESSAGE",
    "InsightGenerator",
    "NO_FINDINGS_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "build_insight_prompt",
]
