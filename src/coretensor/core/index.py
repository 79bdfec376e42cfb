from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Tuple, Union

from .exceptions import IndexOutOfRangeError, ShapeMismatchError
from .shape import ShapeLike, TensorShape

IndexLike = Union["TensorIndex", Sequence[int]]


class TensorIndex:
    """Coordinates for every axis of a shape, or for a leading prefix of them."""

    __slots__ = ("_coords",)

    def __init__(self, coords: Iterable[int] = ()):
        self._coords: Tuple[int, ...] = tuple(int(c) for c in coords)

    @classmethod
    def of(cls, index: IndexLike) -> "TensorIndex":
        if isinstance(index, TensorIndex):
            return index
        if isinstance(index, int):
            return cls((index,))
        return cls(index)

    @classmethod
    def repeating(cls, value: int, count: int) -> "TensorIndex":
        return cls((value,) * count)

    @property
    def coords(self) -> Tuple[int, ...]:
        return self._coords

    def __len__(self) -> int:
        return len(self._coords)

    def __iter__(self) -> Iterator[int]:
        return iter(self._coords)

    def __getitem__(self, key):
        if isinstance(key, slice):
            return TensorIndex(self._coords[key])
        return self._coords[key]

    def __hash__(self) -> int:
        return hash(self._coords)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TensorIndex):
            return self._coords == other._coords
        if isinstance(other, tuple):
            return self._coords == other
        return NotImplemented

    def __lt__(self, other: "TensorIndex") -> bool:
        if not isinstance(other, TensorIndex):
            return NotImplemented
        for lhs, rhs in zip(self._coords, other._coords):
            if lhs < rhs:
                return True
            if lhs > rhs:
                return False
        return False

    # A prefix is neither less than nor greater than the longer index.
    def __gt__(self, other: "TensorIndex") -> bool:
        if not isinstance(other, TensorIndex):
            return NotImplemented
        return other.__lt__(self)

    def __le__(self, other: "TensorIndex") -> bool:
        if not isinstance(other, TensorIndex):
            return NotImplemented
        return not other.__lt__(self)

    def __ge__(self, other: "TensorIndex") -> bool:
        if not isinstance(other, TensorIndex):
            return NotImplemented
        return not self.__lt__(other)

    def __repr__(self) -> str:
        return f"TensorIndex({list(self._coords)})"

    # ------------------------------------------------------------- addressing
    def contiguous_index(self, shape: ShapeLike) -> int:
        """Row-major unit offset of this index (or index prefix) within ``shape``."""
        dims = TensorShape.of(shape).dims
        if len(self._coords) > len(dims):
            raise IndexOutOfRangeError(
                f"Index {list(self._coords)} has more coordinates than shape {dims} has axes"
            )
        offset = 0
        for axis, coord in enumerate(self._coords):
            stride = 1
            for dim in dims[axis + 1 :]:
                stride *= dim
            offset += coord * stride
        return offset

    def is_within(self, shape: ShapeLike) -> bool:
        dims = TensorShape.of(shape).dims
        if len(self._coords) > len(dims):
            return False
        return all(0 <= coord < dim for coord, dim in zip(self._coords, dims))

    def check_within(self, shape: ShapeLike) -> None:
        if not self.is_within(shape):
            raise IndexOutOfRangeError(
                f"Index {list(self._coords)} out of range for shape {TensorShape.of(shape)}"
            )

    # ---------------------------------------------------------------- stride
    def advanced(self, by: int) -> "TensorIndex":
        # Only the innermost coordinate moves.
        if not self._coords:
            return self
        return TensorIndex(self._coords[:-1] + (self._coords[-1] + by,))

    def distance_to(self, other: IndexLike) -> int:
        other = TensorIndex.of(other)
        if len(self._coords) != len(other._coords):
            raise ShapeMismatchError(
                "Indices are not in the same dimension",
                expected=len(self._coords),
                actual=len(other._coords),
            )
        if not self._coords:
            return 0
        return other._coords[-1] - self._coords[-1]
