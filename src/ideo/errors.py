"""Error types raised by the ideo pipeline.

Every failure is terminal; ideo.main() turns these into a message on stderr
and exit code 1.
"""

from __future__ import annotations


class IdeoError(Exception):
    """Base class for all errors reported by the CLI."""


class ConfigurationError(IdeoError):
    """Missing or invalid environment configuration."""


class ValidationError(IdeoError):
    """Local input rejected before any network call."""


class TransportError(IdeoError):
    """Network failure on the generation call or an image download."""


class ApiError(IdeoError):
    """The generation endpoint answered with a non-2xx status."""

    def __init__(self, status: str, detail: str = "") -> None:
        super().__init__(f"API returned HTTP {status}")
        self.status = status
        self.detail = detail


class DecodeError(IdeoError):
    """The success body did not match the expected schema."""


class OutputError(IdeoError):
    """A destination directory or file could not be written."""
