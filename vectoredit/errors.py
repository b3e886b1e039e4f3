"""Error taxonomy for the path geometry engine. No engine imports."""

from __future__ import annotations


class VectorEditError(Exception):
    """Base class for all engine errors."""


class MalformedDocument(VectorEditError):
    """Input text has no <svg> root container."""


class InvalidCommand(VectorEditError):
    """Unknown or truncated path command."""

    def __init__(self, command: str, message: str = "") -> None:
        self.command = command
        super().__init__(message or f"Invalid path command: {command!r}")


class DegenerateGeometry(VectorEditError):
    """Zero-length tangent, chord or handle."""


class CurveFitFailure(VectorEditError):
    """Cubic fitting could not produce finite control points."""


class InsufficientInput(VectorEditError):
    """An operation received fewer inputs than it needs."""
