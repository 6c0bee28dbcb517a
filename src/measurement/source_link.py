"""Simple orderable source link identifying a measurement by detector element and hit index."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class IndexSourceLink:
    """
    Source link that stores the detector element identifier and a hit index.

    Ordering is by (geometry_id, index), i.e. grouped by detector element.
    Measurements treat it as an opaque token.
    """

    geometry_id: int
    index: int
