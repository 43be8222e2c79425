"""
convnet.errors

Exceptions raised by the engine. All derive from ValueError so callers that
already guard numeric input with ``except ValueError`` keep working.
"""
from __future__ import annotations


class ConvNetError(ValueError):
    """Base class for engine errors."""


class InvalidParameterError(ConvNetError):
    """Non-positive size/stride/count, negative padding, unknown name."""


class ShapeMismatchError(ConvNetError):
    """Jagged grid, wrong rank, or channel count that does not match the filters."""


class DimensionUnderflowError(ConvNetError):
    """A kernel or pooling window does not fit even once in the (padded) input."""
