"""Service layer — business logic orchestration."""

from stackscan.services.scan_service import ScanService

__all__ = ["ScanService"]
