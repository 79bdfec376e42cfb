from __future__ import annotations

from typing import Any, ClassVar

from ..core.slice import TensorSlice
from .base import _SLICE_TYPES, RankedTensorLike, slice_type, tensor_type
from .rank import R1, R2, R3, R4, Rank


class RankedSlice(RankedTensorLike):
    """Ranked, non-owning view; reads and writes go straight to the base buffer."""

    _registry = _SLICE_TYPES
    _store: TensorSlice

    @staticmethod
    def for_rank(rank: Rank):
        return slice_type(rank)

    @property
    def base(self) -> TensorSlice:
        return self._store

    @property
    def is_stale(self) -> bool:
        return self._store.is_stale

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, slice):
            return type(self)._wrap(self._store[key])
        if isinstance(key, tuple):
            result: Any = self
            for coord in key:
                result = result[coord]
            return result
        return self._element(self._store[key])

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, slice):
            self._store[key] = self._unwrap_same_rank(value)
            return
        depth = len(key) if isinstance(key, tuple) else 1
        self._store[key] = self._unwrap_element(value, depth)

    def copy(self):
        """Materialize this view as an owning ranked tensor."""
        return tensor_type(self.rank)._wrap(self._store.copy())


class Slice1D(RankedSlice):
    rank: ClassVar[Rank] = R1


class Slice2D(RankedSlice):
    rank: ClassVar[Rank] = R2


class Slice3D(RankedSlice):
    rank: ClassVar[Rank] = R3


class Slice4D(RankedSlice):
    rank: ClassVar[Rank] = R4
