"""Error types raised by the tracker engine."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised for a malformed or missing date, ISO string or option value."""
