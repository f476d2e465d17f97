# tgrelay/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base class for every error raised by the relay."""


class ConfigError(RelayError):
    pass


class TelegramError(RelayError):
    """
    The Bot API could not be reached, or it answered with ok=false or
    without the field we needed.

    `response` holds the decoded Bot API reply when there was one, so
    handlers can hand it back to the caller for diagnostics.
    """

    def __init__(self, message: str, response: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.response = response


class ExtractionError(RelayError):
    """A successful Bot API reply did not carry a usable file object."""
