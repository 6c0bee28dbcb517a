"""Convenience construction of measurements from a variadic list of parameter indices."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from numpy.typing import ArrayLike

from measurement.measurement import VariableSizeMeasurement


def make_variable_size_measurement(
    source_link: Any,
    parameters: ArrayLike,
    covariance: ArrayLike,
    index0: IntEnum,
    *tail_indices: IntEnum,
) -> VariableSizeMeasurement:
    """
    Construct a variable-size measurement for the given indices.

    The parameter space is taken from the enumeration of `index0`; the
    measurement is at least 1-dimensional and every further index must belong
    to the same enumeration. The indices must be ordered and consistent with
    the content of `parameters` and `covariance`.

    Example:
        >>> m = make_variable_size_measurement(
        ...     link, [1.5, -0.3], np.diag([0.1, 0.2]), BoundIndices.LOC0, BoundIndices.PHI
        ... )
    """
    if not isinstance(index0, IntEnum):
        raise TypeError(f"index0 must be a parameter-index enumeration member, got {index0!r}")
    indices_type = type(index0)
    for index in tail_indices:
        if not isinstance(index, indices_type):
            raise TypeError(
                f"All indices must be {indices_type.__name__} members, got {index!r}"
            )
    measurement_type = VariableSizeMeasurement.for_indices(indices_type)
    return measurement_type(source_link, (index0, *tail_indices), parameters, covariance)
