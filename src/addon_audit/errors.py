"""Exception hierarchy for the add-on audit."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional


class AddonAuditError(Exception):
    """Base exception for all add-on audit errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class LauncherDirNotFoundError(AddonAuditError):
    def __init__(self, reason: str = "no local data directory for this platform"):
        super().__init__("Could not locate launcher dir", {"reason": reason})


class FileAccessError(AddonAuditError):
    """Raised when reading or writing a file fails.

    ``context`` is a human readable description of the failed operation.
    """

    def __init__(self, context: str, cause: OSError):
        super().__init__(f"{context}: {cause}")
        self.context = context
        self.cause = cause

    @classmethod
    def for_path(cls, path: Path, cause: OSError) -> "FileAccessError":
        return cls(f"Failed to access {path}", cause)


class CatalogParseError(AddonAuditError):
    def __init__(self, reason: str, details: Optional[Dict[str, str]] = None):
        super().__init__(f"Failed to parse Steam.json: {reason}", details)
        self.reason = reason


class PresetParseError(AddonAuditError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to parse preset '{name}': {reason}")
        self.name = name
        self.reason = reason


class InvalidPresetPathError(AddonAuditError):
    def __init__(self, path: Path):
        super().__init__(f"Invalid preset path {path}")
        self.path = path


class ReportGenerationError(AddonAuditError):
    def __init__(self, reason: str):
        super().__init__(f"Failed to generate report document: {reason}")


__all__ = [
    "AddonAuditError",
    "CatalogParseError",
    "FileAccessError",
    "InvalidPresetPathError",
    "LauncherDirNotFoundError",
    "PresetParseError",
    "ReportGenerationError",
]
