"""Custom exceptions for the liftover tool."""

import time
from typing import Optional, Dict, Any
from pathlib import Path

from chromlift.core.types import CoordinateInterval


def _label(interval: CoordinateInterval) -> str:
    return f"{interval.name}:{interval.start}-{interval.end}"


class LiftoverError(Exception):
    """Base exception for liftover errors."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        self.stage = stage
        self.timestamp = time.time()
        super().__init__(message)


class InputError(LiftoverError):
    """Malformed interval triple."""

    def __init__(self, message: str, line_number: Optional[int] = None,
                 source: Optional[str] = None) -> None:
        self.line_number = line_number
        self.source = source
        if line_number is not None:
            location = f"{source}:{line_number}" if source else f"line {line_number}"
            message = f"{location}: {message}"
        super().__init__(message, stage="input")


class ProviderError(LiftoverError):
    """Mapping provider failed: session, lookup or connectivity."""

    def __init__(self, message: str, interval: Optional[CoordinateInterval] = None,
                 status_code: Optional[int] = None) -> None:
        self.message = message
        self.interval = interval
        self.status_code = status_code
        super().__init__(message, stage="provider")

    def __str__(self) -> str:
        if self.interval is None:
            return self.message
        return f"{self.message} (interval {_label(self.interval)})"

    def get_error_details(self) -> Dict[str, Any]:
        """Get structured error details for logging."""
        return {
            "interval": _label(self.interval) if self.interval else None,
            "status_code": self.status_code,
            "timestamp": self.timestamp,
            "stage": self.stage
        }


class FormatError(LiftoverError):
    """Unrecognized output format."""

    def __init__(self, message: str, output_format: Optional[str] = None) -> None:
        self.output_format = output_format
        super().__init__(message, stage="output")


class ConfigurationError(LiftoverError):
    """Configuration error."""

    def __init__(self, message: str, config_path: Optional[Path] = None,
                 stage: Optional[str] = None) -> None:
        self.config_path = config_path
        super().__init__(message, stage)
