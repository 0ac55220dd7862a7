"""Errors raised while building stairs.

Every failure is raised eagerly while a flight, landing or stair is being
constructed. Nothing is recovered inside the builders, so a caller either
gets a complete object or an exception.
"""


class StairError(Exception):
    """Base class for all stair construction errors."""


class ParameterOutOfRange(StairError, ValueError):
    """A dimension is non-positive, non-finite or otherwise out of range."""

    def __init__(self, field, value, message=None):
        self.field = field
        self.value = value
        if message is None:
            message = f"{field} is out of range: {value!r}"
        super().__init__(message)


class InvalidArgument(StairError, ValueError):
    """Arguments are inconsistent, e.g. walking line count vs typology."""


class UnsupportedTypology(StairError, NotImplementedError):
    """The typology is a known identifier but has no construction algorithm."""


class UnsupportedLandingGeometry(StairError, NotImplementedError):
    """The two flights cannot be joined by a landing (e.g. collinear flights)."""
