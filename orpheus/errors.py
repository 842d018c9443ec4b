"""Exceptions raised by the synthesis package."""
from __future__ import annotations

__all__ = ["OrpheusError", "ConfigurationError", "OutputDeviceError"]


class OrpheusError(RuntimeError):
    """Base class for package errors."""


class ConfigurationError(OrpheusError):
    """Raised when synthesis settings cannot be loaded or are invalid."""


class OutputDeviceError(OrpheusError):
    """Raised when the audio output device cannot be opened or written."""
