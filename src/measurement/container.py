"""
Container of measurements.

In contrast to the source links, the measurements themselves are not
orderable. The stored source links are treated as opaque and the container
keeps plain insertion (readout) order.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, overload

from measurement.measurement import VariableSizeMeasurement

logger = logging.getLogger(__name__)


class MeasurementContainer:
    """Append-only, insertion-ordered list of measurements."""

    __slots__ = ("_items",)

    def __init__(self, measurements: Iterable[VariableSizeMeasurement] = ()) -> None:
        self._items: List[VariableSizeMeasurement] = []
        self.extend(measurements)

    def append(self, measurement: VariableSizeMeasurement) -> int:
        """Append a measurement and return its position."""
        if not isinstance(measurement, VariableSizeMeasurement):
            raise TypeError(f"Expected a measurement, got {type(measurement).__name__}")
        self._items.append(measurement)
        return len(self._items) - 1

    def extend(self, measurements: Iterable[VariableSizeMeasurement]) -> None:
        before = len(self._items)
        for measurement in measurements:
            self.append(measurement)
        if len(self._items) > before:
            logger.debug("Added %d measurements (total %d)", len(self._items) - before, len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[VariableSizeMeasurement]:
        return iter(self._items)

    @overload
    def __getitem__(self, position: int) -> VariableSizeMeasurement: ...

    @overload
    def __getitem__(self, position: slice) -> List[VariableSizeMeasurement]: ...

    def __getitem__(self, position):
        return self._items[position]

    def __repr__(self) -> str:
        return f"MeasurementContainer({len(self._items)} measurements)"
