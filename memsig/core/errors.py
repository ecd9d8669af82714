"""
Error types for signature generation.

All library code raises these; only the command line entry point decides
to abort the process.
"""

from pathlib import Path
from typing import Optional, Any, Dict, Union


class MemSigError(Exception):
    """
    Base exception for all memsig errors.

    Provides common functionality for error tracking and reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MemSigError):
    """Raised for invalid settings such as a bad page size or a missing path."""

    def __init__(self, message: str,
                 key: Optional[str] = None,
                 value: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.key = key
        self.value = value

        self.details.update({
            'key': key,
            'value': value
        })


class MissingBinaryError(MemSigError):
    """
    Raised when a version directory lacks the expected binary.

    The whole run is aborted: every comparison assumes a complete version set.
    """

    def __init__(self, path: Union[str, Path],
                 version: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        message = f"Could not find binary {path}"
        if version:
            message += f" for version {version}"
        super().__init__(message, details)
        self.path = Path(path)
        self.version = version

        self.details.update({
            'path': str(path),
            'version': version
        })


class EmptyInputError(MemSigError):
    """
    Raised when there is nothing to work on.

    Typical causes are a versions directory without subdirectories or an
    empty version group passed to signature generation.
    """


class PartReadError(MemSigError):
    """Raised when a part file cannot be read or a report cannot be written."""

    def __init__(self, path: Union[str, Path],
                 reason: str = '',
                 details: Optional[Dict[str, Any]] = None):
        message = f"I/O error on {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.path = Path(path)

        self.details.update({
            'path': str(path),
            'reason': reason
        })


class ExtractionError(MemSigError):
    """Raised when a binary cannot be split into parts."""

    def __init__(self, path: Union[str, Path],
                 reason: str,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Cannot extract parts from {path}: {reason}", details)
        self.path = Path(path)

        self.details.update({
            'path': str(path),
            'reason': reason
        })


def is_fatal_io_error(error: Exception) -> bool:
    """Check if error came from the filesystem rather than from bad input."""
    return isinstance(error, (PartReadError, MissingBinaryError))
