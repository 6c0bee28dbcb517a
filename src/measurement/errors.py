"""Exceptions raised when a measurement cannot be built from the supplied inputs."""

from __future__ import annotations


class MeasurementError(ValueError):
    """Base class for rejected measurement inputs."""


class ShapeMismatchError(MeasurementError):
    """Index list, parameter vector and covariance disagree on the dimension."""


class InvalidSubspaceError(MeasurementError):
    """Subspace indices are empty, out of range, duplicated or unordered."""
