from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np

from .config import StorageConfig
from .exceptions import IndexOutOfRangeError, StaleViewError
from .index import TensorIndex
from .shape import TensorShape
from .tensor import Key, Tensor, TensorLike, as_index, check_unit_stride

logger = logging.getLogger(__name__)

SliceBase = Union[Tensor, "TensorSlice"]


class TensorSlice(TensorLike):
    """Non-owning view into a ``Tensor``'s buffer.

    A view is a path of fixed leading coordinates (``base_indices``) plus an
    optional contiguous range on the next free axis (``bounds``, absolute in
    the base's index space). Its unit range is recomputed from the base's
    current shape on every read, so no storage is ever duplicated.

    Views must not be used after a size-changing mutation of the base (append,
    insert, remove, size-changing replace, buffer relocation). Such use is
    detected through the base's layout generation and handled according to
    ``StorageConfig.stale_views``.
    """

    def __init__(
        self,
        base: Tensor,
        base_indices: Tuple[int, ...] = (),
        bounds: Optional[range] = None,
    ):
        self._base = base
        self._base_indices = tuple(base_indices)
        self._bounds = bounds
        self._generation = base.generation
        self._warned = False

    # ----------------------------------------------------------- construction
    @staticmethod
    def _split(base: SliceBase) -> Tuple[Tensor, Tuple[int, ...], Optional[range]]:
        if isinstance(base, TensorSlice):
            base.check_fresh()
            return base._base, base._base_indices, base._bounds
        return base, (), None

    @classmethod
    def bounded(cls, base: SliceBase, bounds: Optional[range]) -> "TensorSlice":
        """View of ``base`` restricted to the element range ``bounds`` (relative)."""
        if base.is_scalar:
            raise IndexOutOfRangeError("A scalar has no elements")
        tensor, indices, parent_bounds = cls._split(base)
        if bounds is None:
            return cls(tensor, indices, parent_bounds)
        if bounds.step != 1 or not 0 <= bounds.start <= bounds.stop <= base.count:
            raise IndexOutOfRangeError(
                f"Slice {bounds.start}..{bounds.stop} is out of bounds 0..{base.count}"
            )
        offset = parent_bounds.start if parent_bounds is not None else 0
        return cls(tensor, indices, range(offset + bounds.start, offset + bounds.stop))

    @classmethod
    def at(cls, base: SliceBase, index: int) -> "TensorSlice":
        """View of element ``index`` of ``base``."""
        if base.is_scalar:
            raise IndexOutOfRangeError("A scalar has no elements")
        if not 0 <= index < base.count:
            raise IndexOutOfRangeError(f"Element index {index} is out of bounds 0..{base.count}")
        tensor, indices, parent_bounds = cls._split(base)
        offset = parent_bounds.start if parent_bounds is not None else 0
        return cls(tensor, indices + (offset + index,))

    @classmethod
    def at_indices(cls, base: SliceBase, indices: Sequence[int]) -> "TensorSlice":
        """View of the sub-tensor at the coordinate path ``indices``."""
        if base.is_scalar:
            raise IndexOutOfRangeError("A scalar has no elements")
        coords = TensorIndex(indices)
        if not coords:
            return cls.bounded(base, None)
        coords.check_within(base.shape)
        tensor, base_indices, parent_bounds = cls._split(base)
        offset = parent_bounds.start if parent_bounds is not None else 0
        path = (offset + coords[0],) + tuple(coords[1:])
        return cls(tensor, base_indices + path)

    # -------------------------------------------------------------- freshness
    @property
    def is_stale(self) -> bool:
        return self._generation != self._base.generation

    def check_fresh(self) -> None:
        if not self.is_stale:
            return
        policy = self._base.config.stale_views
        message = (
            f"View created at layout generation {self._generation} used after the base "
            f"tensor moved to generation {self._base.generation}"
        )
        if policy == "raise":
            raise StaleViewError(message)
        if policy == "warn" and not self._warned:
            self._warned = True
            logger.warning(message)

    # -------------------------------------------------------------- properties
    @property
    def base(self) -> Tensor:
        return self._base

    @property
    def base_indices(self) -> Tuple[int, ...]:
        return self._base_indices

    @property
    def bounds(self) -> Optional[range]:
        return self._bounds

    @property
    def indexing_depth(self) -> int:
        return len(self._base_indices)

    @property
    def config(self) -> StorageConfig:
        return self._base.config

    def _remaining_shape(self) -> TensorShape:
        self.check_fresh()
        return self._base.shape.drop_first(self.indexing_depth)

    @property
    def element_shape(self) -> Optional[TensorShape]:
        remaining = self._remaining_shape()
        if remaining.is_scalar:
            return None
        return remaining.drop_first()

    @property
    def is_scalar(self) -> bool:
        return self._remaining_shape().is_scalar

    @property
    def count(self) -> int:
        remaining = self._remaining_shape()
        if remaining.is_scalar:
            return 1
        if self._bounds is not None:
            return len(self._bounds)
        return remaining[0]

    @property
    def indices(self) -> range:
        return range(self.count)

    def unit_range(self) -> Tuple[int, int]:
        """Contiguous unit range of this view within the base buffer."""
        self.check_fresh()
        shape = self._base.shape
        dims = shape.dims
        strides = shape.strides
        depth = self.indexing_depth
        start = 0
        for axis, coord in enumerate(self._base_indices):
            start += coord * strides[axis]
        if depth == len(dims):
            return start, start + 1
        if self._bounds is None:
            return start, start + strides[depth] * dims[depth]
        element_size = strides[depth]
        return start + self._bounds.start * element_size, start + self._bounds.stop * element_size

    @property
    def units(self) -> np.ndarray:
        start, stop = self.unit_range()
        return self._base.units[start:stop]

    def __repr__(self) -> str:
        return (
            f"TensorSlice(base_indices={list(self._base_indices)}, bounds={self._bounds}, "
            f"shape={self.shape})"
        )

    # ----------------------------------------------------------------- access
    def __getitem__(self, key: Key) -> "TensorSlice":
        if isinstance(key, slice):
            check_unit_stride(key)
            if self.is_scalar:
                raise IndexOutOfRangeError("A scalar has no elements")
            start = 0 if key.start is None else int(key.start)
            stop = self.count if key.stop is None else int(key.stop)
            if start > stop:
                raise IndexOutOfRangeError(f"Slice {start}:{stop} has a negative length")
            return TensorSlice.bounded(self, range(start, stop))
        index = as_index(key)
        if not index:
            self.check_fresh()
            return self
        if len(index) == 1:
            return TensorSlice.at(self, index[0])
        return TensorSlice.at_indices(self, index.coords)

    def __setitem__(self, key: Key, value: Any) -> None:
        target = self[key]
        units = self._base.coerce_units(value, target.shape, "Assigned value")
        start, _ = target.unit_range()
        self._base.write_units(start, units)
