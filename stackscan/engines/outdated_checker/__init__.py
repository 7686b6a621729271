"""Outdated checker engine — compare declared versions with registry latest."""

from stackscan.engines.outdated_checker.checker import OutdatedChecker
from stackscan.engines.outdated_checker.registry_client import (
    SUPPORTED_ECOSYSTEMS,
    RegistryClient,
    RegistryQuery,
)
from stackscan.engines.outdated_checker.versions import is_outdated

__all__ = [
    "OutdatedChecker",
    "RegistryClient",
    "RegistryQuery",
    "SUPPORTED_ECOSYSTEMS",
    "is_outdated",
]
