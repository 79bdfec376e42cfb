"""Statically ranked wrappers over the dynamic tensor engine."""

from .base import RankedTensorLike
from .rank import MAX_RANK, R0, R1, R2, R3, R4, RANKS, Rank
from .slice import RankedSlice, Slice1D, Slice2D, Slice3D, Slice4D
from .tensor import Matrix, RankedTensor, Tensor1D, Tensor2D, Tensor3D, Tensor4D, Vector

__all__ = [
    "MAX_RANK",
    "Matrix",
    "R0",
    "R1",
    "R2",
    "R3",
    "R4",
    "RANKS",
    "Rank",
    "RankedSlice",
    "RankedTensor",
    "RankedTensorLike",
    "Slice1D",
    "Slice2D",
    "Slice3D",
    "Slice4D",
    "Tensor1D",
    "Tensor2D",
    "Tensor3D",
    "Tensor4D",
    "Vector",
]
