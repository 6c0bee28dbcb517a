"""Ordered subspace index sets and the projection/expansion between local and full spaces."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from measurement.errors import InvalidSubspaceError

logger = logging.getLogger(__name__)

SUBSPACE_INDEX_DTYPE = np.uint8
MAX_FULL_SIZE = int(np.iinfo(SUBSPACE_INDEX_DTYPE).max)


def subspace_index_values(indices: Iterable[int]) -> List[int]:
    """Return the indices as plain ints; non-integer values are rejected, never truncated."""
    values = []
    for index in indices:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise InvalidSubspaceError(f"Subspace indices must be integers, got {index!r}")
        values.append(int(index))
    return values


def _validate_indices(indices: Sequence[int], full_size: int) -> None:
    """Reject index lists that do not describe a valid subspace of a D-dim space."""
    if len(indices) == 0:
        raise InvalidSubspaceError("Subspace must contain at least one index")
    if len(indices) > full_size:
        raise InvalidSubspaceError(
            f"Subspace has {len(indices)} indices but the full space has only {full_size}"
        )
    previous = -1
    for index in indices:
        if index < 0 or index >= full_size:
            raise InvalidSubspaceError(f"Subspace index {index} outside [0, {full_size})")
        if index == previous:
            raise InvalidSubspaceError(f"Duplicate subspace index {index}")
        if index < previous:
            raise InvalidSubspaceError(
                f"Subspace indices must be strictly increasing, got {list(indices)}"
            )
        previous = index


class SubspaceIndices:
    """
    Fixed-capacity ordered set of full-space indices measured by one measurement.

    Position i in the local representation corresponds to full index self[i].
    Indices are stored as uint8 in a buffer of capacity D; only the first n
    entries are meaningful. Lookups are linear scans since D is single digit.
    """

    __slots__ = ("_full_size", "_size", "_buffer")

    def __init__(self, indices: Iterable[int], full_size: int) -> None:
        if not 0 < full_size <= MAX_FULL_SIZE:
            raise ValueError(f"Full size must be in [1, {MAX_FULL_SIZE}], got {full_size}")
        values = subspace_index_values(indices)
        try:
            _validate_indices(values, full_size)
        except InvalidSubspaceError:
            logger.debug("Rejected subspace indices %s for full size %d", values, full_size)
            raise
        self._full_size = int(full_size)
        self._size = len(values)
        self._buffer = np.zeros(full_size, dtype=SUBSPACE_INDEX_DTYPE)
        self._buffer[: self._size] = values

    @property
    def full_size(self) -> int:
        return self._full_size

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:
        return iter(self.as_tuple())

    def __getitem__(self, position):
        return self.as_tuple()[position]

    def __contains__(self, index: object) -> bool:
        if isinstance(index, (int, np.integer)):
            return self.contains(int(index))
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SubspaceIndices):
            return self._full_size == other._full_size and self.as_tuple() == other.as_tuple()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._full_size, self.as_tuple()))

    def __repr__(self) -> str:
        return f"SubspaceIndices({list(self.as_tuple())}, full_size={self._full_size})"

    def contains(self, index: int) -> bool:
        """Return True if the full-space index is measured."""
        for value in self._buffer[: self._size].tolist():
            if value == index:
                return True
        return False

    def index_of(self, index: int) -> int:
        """Return the local position of a measured full-space index (must be a member)."""
        values = self._buffer[: self._size].tolist()
        position = 0
        while position < len(values) and values[position] != index:
            position += 1
        assert position < len(values), f"Index {index} is not part of the subspace {values}"
        return position

    def as_tuple(self) -> Tuple[int, ...]:
        """Return the ordered indices as plain ints."""
        return tuple(self._buffer[: self._size].tolist())

    def as_array(self, dim: int) -> NDArray[np.uint8]:
        """Return a read-only uint8 array of exactly `dim` indices (dim must equal n)."""
        assert dim == self._size, f"Requested {dim} subspace indices but size is {self._size}"
        view = self._buffer[:dim]
        view.flags.writeable = False
        return view

    def projector(self) -> NDArray[np.float64]:
        """
        Return the n x D projection matrix H with H[i, indices[i]] = 1.

        Multiplying a full vector by H selects the measured components.
        """
        result = np.zeros((self._size, self._full_size), dtype=np.float64)
        for position, index in enumerate(self.as_tuple()):
            result[position, index] = 1.0
        return result

    def expander(self) -> NDArray[np.float64]:
        """Return the D x n expansion matrix (transpose of the projector)."""
        return self.projector().T.copy()

    def project_vector(self, full: NDArray[np.float64]) -> NDArray[np.float64]:
        """Select the measured components of a D-vector."""
        full = np.asarray(full, dtype=np.float64)
        assert full.shape == (self._full_size,), f"Expected shape ({self._full_size},), got {full.shape}"
        result = np.zeros(self._size, dtype=np.float64)
        for position, index in enumerate(self.as_tuple()):
            result[position] = full[index]
        return result

    def expand_vector(self, local: NDArray[np.float64]) -> NDArray[np.float64]:
        """Scatter an n-vector into a zero D-vector: result[indices[i]] = local[i]."""
        assert len(local) == self._size, f"Expected {self._size} values, got {len(local)}"
        result = np.zeros(self._full_size, dtype=np.float64)
        for position, index in enumerate(self.as_tuple()):
            result[index] = local[position]
        return result

    def expand_matrix(self, local: NDArray[np.float64]) -> NDArray[np.float64]:
        """Scatter an n x n matrix into a zero D x D matrix."""
        assert np.shape(local) == (self._size, self._size), (
            f"Expected shape ({self._size}, {self._size}), got {np.shape(local)}"
        )
        indices = self.as_tuple()
        result = np.zeros((self._full_size, self._full_size), dtype=np.float64)
        for i, row in enumerate(indices):
            for j, col in enumerate(indices):
                result[row, col] = local[i, j]
        return result
