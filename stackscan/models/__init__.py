"""SQLAlchemy ORM models — one file per table."""

from stackscan.models.project import Project
from stackscan.models.scan import Scan
from stackscan.models.technology_finding import TechnologyFinding

__all__ = ["Project", "Scan", "TechnologyFinding"]
