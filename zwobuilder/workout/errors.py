"""Errors raised by the workout model and codecs."""

from __future__ import annotations


class InvariantViolation(ValueError):
    """Raised when a segment or text event breaks a field constraint."""


class MalformedInput(ValueError):
    """Raised when a workout file, token or text cannot be decoded."""


class EmptyDecode(MalformedInput):
    """Raised when a legacy workout file decodes to zero segments."""
