"""Scan record persistence."""

from stackscan.store.base import ScanStore
from stackscan.store.memory import InMemoryScanStore
from stackscan.store.sql import SqlScanStore

__all__ = ["InMemoryScanStore", "ScanStore", "SqlScanStore"]
