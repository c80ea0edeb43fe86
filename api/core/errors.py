"""
Domain errors raised by the services.

`main.py` maps them to HTTP responses; nothing below the routers knows about
status codes.
"""

from __future__ import annotations


class TrackerError(RuntimeError):
    pass


class ValidationError(TrackerError):
    """A required field is missing or malformed."""


class NotFoundError(TrackerError):
    """The referenced device or location does not exist in the tenant."""


class StorageError(TrackerError):
    """The durable file could not be written."""


class StorageCorruptionError(TrackerError):
    """The durable file could not be parsed. Recovered inside `load()`."""
