"""Dependency scanner engine — detect project dependencies from manifests."""

from stackscan.engines.dependency_scanner.models import (
    DependencyFinding,
    ScanResult,
    ScanStatus,
)
from stackscan.engines.dependency_scanner.registry import parse_manifest
from stackscan.engines.dependency_scanner.scanner import ScanExecutor, scan

__all__ = [
    "DependencyFinding",
    "ScanExecutor",
    "ScanResult",
    "ScanStatus",
    "parse_manifest",
    "scan",
]
