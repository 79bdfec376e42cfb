from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..core.exceptions import ShapeMismatchError
from ..core.shape import TensorShape

MAX_RANK = 4


@dataclass(frozen=True)
class Rank:
    """Static rank tag; ``element`` is the rank one indexing level down."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_RANK:
            raise ValueError(f"Rank must be between 0 and {MAX_RANK}, got {self.value}")

    @property
    def element(self) -> "Rank":
        return RANKS[max(self.value - 1, 0)]

    @property
    def is_scalar(self) -> bool:
        return self.value == 0

    def shape_from(self, dims: Sequence[int]) -> Tuple[int, ...]:
        if isinstance(dims, int):
            dims = (dims,)
        shape = tuple(int(d) for d in dims)
        if len(shape) != self.value:
            raise ShapeMismatchError(
                f"A rank-{self.value} tensor needs a {self.value}-tuple shape",
                expected=self.value,
                actual=len(shape),
            )
        return shape

    def dynamic_shape(self, dims: Sequence[int]) -> TensorShape:
        return TensorShape(self.shape_from(dims))

    def __repr__(self) -> str:
        return f"R{self.value}"


RANKS = tuple(Rank(value) for value in range(MAX_RANK + 1))

R0, R1, R2, R3, R4 = RANKS
