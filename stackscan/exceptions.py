"""Custom exceptions for stackscan."""


class StackScanError(Exception):
    """Base exception for all stackscan errors."""


class InvalidPathError(StackScanError):
    """Raised when a scan root is missing, not a directory, or outside the allowed root."""


class ParseWarning(StackScanError):
    """Raised by a manifest parser on malformed content.

    Never escapes :func:`parse_manifest`; it is logged and the file yields
    zero findings.
    """


class QueueClosedError(StackScanError):
    """Raised when enqueueing into a closed job queue."""


class InvalidTransitionError(StackScanError):
    """Raised on an illegal scan status change."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"illegal scan status transition: {current} -> {target}")


class ConfigError(StackScanError, ValueError):
    """Raised when an environment setting cannot be parsed."""


class ScanNotFoundError(StackScanError):
    """Raised when a referenced scan does not exist."""
