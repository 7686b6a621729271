"""Data-access layer — one DAO per table."""

from stackscan.dao.project_dao import ProjectDAO
from stackscan.dao.scan_dao import ScanDAO
from stackscan.dao.technology_finding_dao import TechnologyFindingDAO

__all__ = ["ProjectDAO", "ScanDAO", "TechnologyFindingDAO"]
