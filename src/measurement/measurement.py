"""
Variable-size measurement of a subspace of a fixed-size parameter space.

A measurement stores its local parameters and covariance in fixed-capacity
buffers sized by the full dimension D (D and D*D values); only the leading n
(n*n) entries are meaningful. Accessors return numpy views over these buffers,
so mutating a returned view mutates the measurement.

The measurement does not reference its detector surface; the source link is
the only connection to the readout and is never interpreted here.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, ClassVar, Dict, Iterable, Optional, Type

import numpy as np
from numpy.typing import ArrayLike, NDArray

from measurement.definitions import BOUND_SUBSPACE_INDICES_INVALID, BoundIndices, parameters_size
from measurement.errors import ShapeMismatchError
from measurement.subspace import SUBSPACE_INDEX_DTYPE, SubspaceIndices, subspace_index_values

logger = logging.getLogger(__name__)

_SPECIALIZATIONS: Dict[Type[IntEnum], Type["VariableSizeMeasurement"]] = {}


def _as_float_array(values: ArrayLike, name: str) -> NDArray[np.float64]:
    """Convert to a float64 array; ragged nested sequences are a shape mismatch."""
    try:
        return np.asarray(values, dtype=np.float64)
    except ValueError as exc:
        raise ShapeMismatchError(f"{name} do not form a regular array: {exc}") from exc


def _check_shapes(num_indices: int, params: NDArray[np.float64], cov: NDArray[np.float64]) -> None:
    """Require index count, vector length and both covariance dimensions to agree."""
    if params.ndim != 1:
        raise ShapeMismatchError(f"Parameters must be a vector, got shape {params.shape}")
    if cov.ndim != 2:
        raise ShapeMismatchError(f"Covariance must be a matrix, got shape {cov.shape}")
    if params.shape[0] != num_indices:
        raise ShapeMismatchError(
            f"Parameter size mismatch: {num_indices} indices but {params.shape[0]} values"
        )
    if cov.shape[0] != num_indices:
        raise ShapeMismatchError(f"Covariance rows mismatch: {num_indices} indices but {cov.shape[0]} rows")
    if cov.shape[1] != num_indices:
        raise ShapeMismatchError(f"Covariance cols mismatch: {num_indices} indices but {cov.shape[1]} cols")


class VariableSizeMeasurement:
    """
    Measurement of a variable-size subspace of the full parameters.

    Specialise per parameter-index enumeration with `for_indices`; the
    specialisation fixes `indices_type` and `full_size` (D). Measurements are
    values: `copy()` duplicates the buffers, and no ordering is defined.
    """

    indices_type: ClassVar[Optional[Type[IntEnum]]] = None
    full_size: ClassVar[int] = 0

    __slots__ = ("_source_link", "_subspace", "_params", "_cov")

    def __init__(
        self,
        source_link: Any,
        subspace_indices: Iterable[int],
        parameters: ArrayLike,
        covariance: ArrayLike,
    ) -> None:
        """
        Construct from source link, subspace indices, and measured data.

        Args:
            source_link: Opaque token connecting to the detector readout.
            subspace_indices: Measured full-space indices, strictly increasing
                and matching the order of parameters/covariance.
            parameters: Measured values, shape (n,).
            covariance: Measured covariance, shape (n, n).

        Raises:
            ShapeMismatchError: the index count, vector length and covariance
                dimensions disagree.
            InvalidSubspaceError: the indices are not a valid subspace.
        """
        if self.indices_type is None:
            raise TypeError(
                "VariableSizeMeasurement must be specialised with for_indices() before construction"
            )
        indices = subspace_index_values(subspace_indices)
        try:
            params = _as_float_array(parameters, "Parameters")
            cov = _as_float_array(covariance, "Covariance")
            _check_shapes(len(indices), params, cov)
        except ShapeMismatchError as exc:
            logger.debug("Rejected measurement for %r with indices %s: %s", source_link, indices, exc)
            raise
        n = len(indices)
        self._subspace = SubspaceIndices(indices, self.full_size)
        self._source_link = source_link
        self._params = np.zeros(self.full_size, dtype=np.float64)
        self._cov = np.zeros(self.full_size * self.full_size, dtype=np.float64)
        self._params[:n] = params
        self._cov[: n * n] = cov.reshape(-1)

    @classmethod
    def for_indices(cls, indices_type: Type[IntEnum]) -> Type["VariableSizeMeasurement"]:
        """Return the (cached) measurement type for a parameter-index enumeration."""
        specialization = _SPECIALIZATIONS.get(indices_type)
        if specialization is not None:
            return specialization
        full_size = parameters_size(indices_type)
        created = type(
            f"{indices_type.__name__}VariableSizeMeasurement",
            (VariableSizeMeasurement,),
            {
                "__slots__": (),
                "__module__": __name__,
                "indices_type": indices_type,
                "full_size": full_size,
            },
        )
        # setdefault keeps one class per enumeration when threads race here
        specialization = _SPECIALIZATIONS.setdefault(indices_type, created)
        if specialization is created:
            logger.debug("Created measurement type for %s (D=%d)", indices_type.__name__, full_size)
        return specialization

    @property
    def source_link(self) -> Any:
        """Source link that connects to the underlying detector readout."""
        return self._source_link

    def size(self) -> int:
        return self._subspace.size

    def __len__(self) -> int:
        return self._subspace.size

    def contains(self, index: int) -> bool:
        """Check if a specific parameter is part of this measurement."""
        return self._subspace.contains(int(index))

    def index_of(self, index: int) -> int:
        return self._subspace.index_of(int(index))

    def subspace_indices(self, dim: Optional[int] = None):
        """
        Return the measured indices.

        Without `dim` the `SubspaceIndices` set is returned. With `dim` a
        read-only uint8 array of exactly `dim` entries is returned; `dim` must
        equal the measurement size.
        """
        if dim is None:
            return self._subspace
        return self._subspace.as_array(dim)

    def parameters(self, dim: Optional[int] = None, *, readonly: bool = False) -> NDArray[np.float64]:
        """
        Return a view of the local parameter vector.

        With `dim` the caller asserts the measurement size (dim must equal n);
        without it the effective size is used. Both alias the same storage.
        """
        n = self._subspace.size
        if dim is not None:
            assert dim == n, f"Requested {dim}-dim parameters but measurement size is {n}"
        view = self._params[:n]
        if readonly:
            view.flags.writeable = False
        return view

    def covariance(self, dim: Optional[int] = None, *, readonly: bool = False) -> NDArray[np.float64]:
        """Return an (n, n) view of the local covariance (see `parameters`)."""
        n = self._subspace.size
        if dim is not None:
            assert dim == n, f"Requested {dim}x{dim} covariance but measurement size is {n}"
        view = self._cov[: n * n].reshape(n, n)
        if readonly:
            view.flags.writeable = False
        return view

    def full_parameters(self) -> NDArray[np.float64]:
        """Return the D-vector that is zero outside the measured subspace."""
        return self._subspace.expand_vector(self.parameters())

    def full_covariance(self) -> NDArray[np.float64]:
        """Return the D x D covariance that is zero outside the measured subspace."""
        return self._subspace.expand_matrix(self.covariance())

    def projector(self) -> NDArray[np.float64]:
        """Return the n x D projection matrix of the measured subspace."""
        return self._subspace.projector()

    def expander(self) -> NDArray[np.float64]:
        """Return the D x n expansion matrix of the measured subspace."""
        return self._subspace.expander()

    def copy(self) -> "VariableSizeMeasurement":
        """Return an independent measurement; the source link is shared as a value."""
        other = type(self).__new__(type(self))
        other._source_link = self._source_link
        other._subspace = self._subspace
        other._params = self._params.copy()
        other._cov = self._cov.copy()
        return other

    def __copy__(self) -> "VariableSizeMeasurement":
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "VariableSizeMeasurement":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(source_link={self._source_link!r}, "
            f"indices={list(self._subspace.as_tuple())}, "
            f"parameters={self.parameters().tolist()})"
        )


class BoundVariableMeasurement(VariableSizeMeasurement):
    """Measurement type that can hold all possible bound measurements."""

    indices_type = BoundIndices
    full_size = parameters_size(BoundIndices)

    __slots__ = ()

    def bound_subspace_indices(self) -> NDArray[np.uint8]:
        """Return a dense length-D index array padded with the invalid sentinel."""
        result = np.array(BOUND_SUBSPACE_INDICES_INVALID, dtype=SUBSPACE_INDEX_DTYPE)
        result[: self.size()] = self._subspace.as_tuple()
        return result


_SPECIALIZATIONS[BoundIndices] = BoundVariableMeasurement

# Variable measurement type that can contain all possible combinations.
Measurement = BoundVariableMeasurement
