"""Exception hierarchy for the pinger."""

from __future__ import annotations


class PingerError(Exception):
    """Base error for pinger failures."""


class ConfigError(PingerError):
    """Raised when a configuration value is out of range."""


class PublishError(PingerError):
    """Raised by a publisher when a collaborator rejects or cannot receive data."""
