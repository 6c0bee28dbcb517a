"""Parameter-index enumerations that fix the full parameter spaces (bound and free)."""

from __future__ import annotations

from enum import IntEnum
from typing import Tuple, Type


class BoundIndices(IntEnum):
    """Track parameters bound to a reference surface."""

    LOC0 = 0
    LOC1 = 1
    PHI = 2
    THETA = 3
    QOVERP = 4
    TIME = 5


class FreeIndices(IntEnum):
    """Global (free) track parameters."""

    POS0 = 0
    POS1 = 1
    POS2 = 2
    TIME = 3
    DIR0 = 4
    DIR1 = 5
    DIR2 = 6
    QOVERP = 7


BOUND_SIZE = len(BoundIndices)
FREE_SIZE = len(FreeIndices)

# Dense bound index arrays use BOUND_SIZE for unused slots; it is never a valid index.
BOUND_SUBSPACE_INDICES_INVALID: Tuple[int, ...] = (BOUND_SIZE,) * BOUND_SIZE


def parameters_size(indices_type: Type[IntEnum]) -> int:
    """
    Return the full dimension D of a parameter-index enumeration.

    The enumeration values must be exactly 0..D-1 so that they can be used
    directly as positions in the full parameter vector.
    """
    if not (isinstance(indices_type, type) and issubclass(indices_type, IntEnum)):
        raise TypeError(f"Parameter indices must be an IntEnum class, got {indices_type!r}")
    values = sorted(int(member) for member in indices_type)
    if values != list(range(len(values))) or not values:
        raise TypeError(f"{indices_type.__name__} values must be contiguous from 0, got {values}")
    return len(values)
