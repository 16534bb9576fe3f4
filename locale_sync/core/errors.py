"""Error types raised by locale-sync."""

from pathlib import Path
from typing import Optional


class LocaleSyncError(Exception):
    """Base class for all locale-sync errors."""


class LoadError(LocaleSyncError):
    """Raised when a locale document cannot be read or is not a JSON object."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error loading JSON from {self.path}: {reason}")


class HistoryError(LocaleSyncError):
    """Raised when the previous revision of a file cannot be retrieved."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error retrieving previous version of {self.path}: {reason}")


class BackendError(LocaleSyncError):
    """Raised when a translation backend call fails or returns unusable content."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        if provider:
            message = f"[{provider}] {message}"
        super().__init__(message)
