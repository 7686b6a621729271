"""stackscan — project tech-stack scanner with outdated checks and AI insights."""

__version__ = "0.1.0"
