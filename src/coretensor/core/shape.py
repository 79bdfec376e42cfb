from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Sequence, Tuple, Union, overload

from .exceptions import IndexOutOfRangeError, ShapeViolationError

if TYPE_CHECKING:
    from .index import TensorIndex

ShapeLike = Union["TensorShape", Sequence[int]]


def _prod(values: Iterable[int]) -> int:
    result = 1
    for value in values:
        result *= int(value)
    return int(result)


class TensorShape:
    """Ordered, immutable sequence of non-negative dimension sizes.

    The empty shape is the scalar shape and has a contiguous size of 1.
    """

    __slots__ = ("_dims",)

    SCALAR: "TensorShape"

    def __init__(self, dims: Iterable[int] = ()):
        normalized = tuple(int(d) for d in dims)
        for axis, dim in enumerate(normalized):
            if dim < 0:
                raise ShapeViolationError(
                    f"Dimension {axis} of shape {normalized} is negative"
                )
        self._dims: Tuple[int, ...] = normalized

    @classmethod
    def of(cls, shape: ShapeLike) -> "TensorShape":
        if isinstance(shape, TensorShape):
            return shape
        if isinstance(shape, int):
            return cls((shape,))
        return cls(shape)

    # ------------------------------------------------------------------ basics
    @property
    def dims(self) -> Tuple[int, ...]:
        return self._dims

    @property
    def rank(self) -> int:
        return len(self._dims)

    @property
    def is_scalar(self) -> bool:
        return not self._dims

    @property
    def contiguous_size(self) -> int:
        return _prod(self._dims)

    @property
    def strides(self) -> Tuple[int, ...]:
        """Row-major unit strides, one per axis."""
        strides = [1] * len(self._dims)
        acc = 1
        for axis in range(len(self._dims) - 1, -1, -1):
            strides[axis] = acc
            acc *= self._dims[axis]
        return tuple(strides)

    def __len__(self) -> int:
        return len(self._dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    @overload
    def __getitem__(self, key: int) -> int: ...

    @overload
    def __getitem__(self, key: slice) -> "TensorShape": ...

    def __getitem__(self, key):
        if isinstance(key, slice):
            return TensorShape(self._dims[key])
        axis = int(key)
        if not 0 <= axis < len(self._dims):
            raise IndexOutOfRangeError(f"Axis {axis} out of range for shape {self}")
        return self._dims[axis]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TensorShape):
            return self._dims == other._dims
        if isinstance(other, tuple):
            return self._dims == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"TensorShape({list(self._dims)})"

    def __str__(self) -> str:
        return "(" + ", ".join(str(d) for d in self._dims) + ")"

    # -------------------------------------------------------------- derivation
    def drop_first(self, n: int = 1) -> "TensorShape":
        if n < 0 or n > len(self._dims):
            raise IndexOutOfRangeError(
                f"Cannot drop {n} leading dimensions from rank-{self.rank} shape {self}"
            )
        return TensorShape(self._dims[n:])

    def prepending(self, dim: int) -> "TensorShape":
        return TensorShape((dim,) + self._dims)

    def transpose(self) -> "TensorShape":
        return TensorShape(reversed(self._dims))

    def subshape(self, index: "TensorIndex") -> Optional["TensorShape"]:
        """Shape left after indexing with ``index``; ``None`` if nothing remains."""
        if len(index) >= len(self._dims):
            return None
        return self.drop_first(len(index))

    def contiguous_index(self, index: "TensorIndex") -> int:
        return index.contiguous_index(self)

    # ------------------------------------------------------------- comparison
    def is_isomorphic(self, other: ShapeLike) -> bool:
        return self._dims == TensorShape.of(other)._dims

    def is_similar(self, other: ShapeLike) -> bool:
        # Leading singleton dims are stripped from the longer side only.
        lhs = list(self._dims)
        rhs = list(TensorShape.of(other)._dims)
        longer, shorter = (lhs, rhs) if len(lhs) >= len(rhs) else (rhs, lhs)
        while len(longer) > len(shorter) and longer[0] == 1:
            longer.pop(0)
        return longer == shorter


TensorShape.SCALAR = TensorShape(())
