from __future__ import annotations


class ShootingEDAError(Exception):
    """Base class for failures that abort a report run."""


class RetrievalError(ShootingEDAError):
    """The incident CSV could not be fetched or opened."""


class ParseError(ShootingEDAError):
    """The fetched content is not a CSV with the expected header."""


class ValidationError(ShootingEDAError):
    """A record failed strict validation (only raised when strict_dates is set)."""
