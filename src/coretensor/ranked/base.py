from __future__ import annotations

from typing import Any, ClassVar, Dict, Iterator, Tuple, Type, Union

import numpy as np

from ..core.exceptions import InvalidElementTypeError
from ..core.shape import TensorShape
from ..core.tensor import TensorLike
from .rank import RANKS, Rank

_TENSOR_TYPES: Dict[int, Type["RankedTensorLike"]] = {}
_SLICE_TYPES: Dict[int, Type["RankedTensorLike"]] = {}


def tensor_type(rank: Rank) -> Type[Any]:
    try:
        return _TENSOR_TYPES[rank.value]
    except KeyError:
        raise InvalidElementTypeError(f"No ranked tensor type is registered for {rank!r}") from None


def slice_type(rank: Rank) -> Type[Any]:
    try:
        return _SLICE_TYPES[rank.value]
    except KeyError:
        raise InvalidElementTypeError(f"No ranked slice type is registered for {rank!r}") from None


def dynamic_of(value: Union["RankedTensorLike", TensorLike]) -> TensorLike:
    if isinstance(value, RankedTensorLike):
        return value._store
    if isinstance(value, TensorLike):
        return value
    raise InvalidElementTypeError(f"Expected a tensor, got {type(value).__name__}")


class RankedTensorLike:
    """Shared read-side behaviour of ranked tensors and ranked slices.

    Every operation converts the fixed-arity shape tuple to a dynamic
    ``TensorShape`` and delegates to the wrapped dynamic tensor or view.
    """

    rank: ClassVar[Rank]
    _store: TensorLike
    _registry: ClassVar[Dict[int, Type["RankedTensorLike"]]]

    __hash__ = None  # type: ignore[assignment]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "rank" in cls.__dict__:
            cls._registry[cls.rank.value] = cls

    @classmethod
    def _wrap(cls, store: TensorLike):
        obj = cls.__new__(cls)
        obj._store = store
        return obj

    # -------------------------------------------------------------- properties
    @property
    def shape(self) -> Tuple[int, ...]:
        return self._store.shape.dims

    @property
    def dynamic_shape(self) -> TensorShape:
        return self._store.shape

    @property
    def units(self) -> np.ndarray:
        return self._store.units

    @property
    def unit_count(self) -> int:
        return self._store.unit_count

    @property
    def unit_count_per_element(self) -> int:
        return self._store.unit_count_per_element

    @property
    def count(self) -> int:
        return self._store.count

    @property
    def dtype(self) -> np.dtype:
        return self._store.dtype

    def __len__(self) -> int:
        return self._store.count

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._store.count):
            yield self[i]  # type: ignore[index]

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self._store.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    def unit(self, at: Any) -> Any:
        return self._store.unit(at)

    def to_numpy(self) -> np.ndarray:
        return self._store.to_numpy()

    def tolist(self) -> Any:
        return self._store.tolist()

    def __str__(self) -> str:
        return str(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype})"

    # ---------------------------------------------------------------- elements
    def _element(self, store: TensorLike) -> Any:
        element_rank = self.rank.element
        if element_rank.is_scalar:
            return store.item()
        try:
            element_type = self._registry[element_rank.value]
        except KeyError:
            raise InvalidElementTypeError(
                f"No ranked type is registered for {element_rank!r}"
            ) from None
        return element_type._wrap(store)

    def _unwrap_element(self, value: Any, depth: int = 1) -> Any:
        # ``depth`` is the number of leading axes fixed by the key being assigned.
        element_rank = RANKS[max(self.rank.value - depth, 0)]
        if element_rank.is_scalar:
            if isinstance(value, (RankedTensorLike, TensorLike)):
                raise InvalidElementTypeError(
                    f"{type(self).__name__} elements are scalars, got {type(value).__name__}"
                )
            return value
        if isinstance(value, RankedTensorLike) and value.rank == element_rank:
            return value._store
        raise InvalidElementTypeError(
            f"{type(self).__name__} elements are rank-{element_rank.value} tensors, "
            f"got {type(value).__name__}"
        )

    def _unwrap_same_rank(self, value: Any) -> TensorLike:
        if isinstance(value, RankedTensorLike) and value.rank == self.rank:
            return value._store
        raise InvalidElementTypeError(
            f"Expected a rank-{self.rank.value} tensor, got {type(value).__name__}"
        )

    # ---------------------------------------------------------------- equality
    def units_equal(self, other: Any) -> bool:
        return self._store.units_equal(dynamic_of(other))

    def elements_equal(self, other: Any) -> bool:
        return self._store.elements_equal(dynamic_of(other))

    def is_isomorphic(self, other: Any) -> bool:
        return self._store.is_isomorphic(dynamic_of(other))

    def is_similar(self, other: Any) -> bool:
        return self._store.is_similar(dynamic_of(other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (RankedTensorLike, TensorLike)):
            return NotImplemented
        return self.elements_equal(other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result
