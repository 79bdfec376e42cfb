from __future__ import annotations

from typing import Any, Callable, ClassVar, Iterable, Optional, Sequence

from ..core.config import StorageConfig
from ..core.exceptions import InvalidElementTypeError
from ..core.tensor import Tensor
from .base import _TENSOR_TYPES, RankedTensorLike, slice_type, tensor_type
from .rank import R1, R2, R3, R4, Rank


class RankedTensor(RankedTensorLike):
    """Owning tensor whose rank is fixed by its class.

    Shapes are plain tuples of exactly ``rank`` ints. Indexing one axis of a
    rank-n tensor yields a rank-(n-1) tensor, or a scalar value at rank 1.
    """

    _registry = _TENSOR_TYPES
    _store: Tensor

    def __init__(
        self,
        shape: Sequence[int],
        units: Iterable[Any],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ):
        dims = self.rank.shape_from(shape)
        self._store = Tensor.from_shape(dims, units, dtype=dtype, config=config)

    @classmethod
    def repeating(
        cls,
        shape: Sequence[int],
        value: Any,
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ):
        dims = cls.rank.shape_from(shape)
        return cls._wrap(Tensor.repeating(dims, value, dtype=dtype, config=config))

    @classmethod
    def from_supplier(
        cls,
        shape: Sequence[int],
        supplier: Callable[[], Any],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ):
        dims = cls.rank.shape_from(shape)
        return cls._wrap(Tensor.from_supplier(dims, supplier, dtype=dtype, config=config))

    @classmethod
    def increasing_from(
        cls,
        shape: Sequence[int],
        start: Any = 0,
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ):
        dims = cls.rank.shape_from(shape)
        return cls._wrap(Tensor.increasing_from(dims, start, dtype=dtype, config=config))

    @classmethod
    def from_dynamic(cls, tensor: Any):
        """Copy a dynamic tensor or view of matching rank into this ranked type."""
        if tensor.is_scalar or tensor.rank != cls.rank.value:
            raise InvalidElementTypeError(
                f"{cls.__name__} needs a rank-{cls.rank.value} tensor, got rank {tensor.rank}"
            )
        return cls._wrap(tensor.copy())

    @staticmethod
    def for_rank(rank: Rank):
        return tensor_type(rank)

    @property
    def storage(self) -> Tensor:
        return self._store

    @property
    def capacity(self) -> int:
        return self._store.capacity

    # ----------------------------------------------------------------- access
    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, slice):
            return slice_type(self.rank)._wrap(self._store[key])
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
        return type(self)._wrap(self._store.copy())

    # --------------------------------------------------------------- mutation
    def update_unit(self, offset: int, value: Any) -> None:
        self._store.update_unit(offset, value)

    def append(self, element: Any) -> None:
        self._store.append(self._unwrap_element(element))

    def extend(self, elements: Any) -> None:
        if isinstance(elements, RankedTensorLike):
            self._store.extend(self._unwrap_same_rank(elements))
            return
        self._store.extend([self._unwrap_element(e) for e in elements])

    def insert(self, index: int, element: Any) -> None:
        self._store.insert(index, self._unwrap_element(element))

    def remove_at(self, index: int) -> Any:
        return self._element(self._store.remove_at(index))

    def reserve_capacity(self, minimum_elements: int) -> None:
        self._store.reserve_capacity(minimum_elements)


class Tensor1D(RankedTensor):
    rank: ClassVar[Rank] = R1

    @classmethod
    def scalar_elements(
        cls,
        values: Iterable[Any],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor1D":
        return cls._wrap(Tensor.scalar_elements(values, dtype=dtype, config=config))


class Tensor2D(RankedTensor):
    rank: ClassVar[Rank] = R2


class Tensor3D(RankedTensor):
    rank: ClassVar[Rank] = R3


class Tensor4D(RankedTensor):
    rank: ClassVar[Rank] = R4


Vector = Tensor1D
Matrix = Tensor2D
