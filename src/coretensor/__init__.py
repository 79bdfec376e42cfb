from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.config import StorageConfig, config_override, get_default_config, set_default_config
from .core.exceptions import (
    DTypeMismatchError,
    IndexOutOfRangeError,
    InvalidElementTypeError,
    LiteralParseError,
    ShapeMismatchError,
    ShapeViolationError,
    StaleViewError,
    TensorError,
)
from .core.index import TensorIndex
from .core.shape import TensorShape
from .core.slice import TensorSlice
from .core.tensor import Tensor, TensorLike
from .interop import from_nested, from_numpy, from_torch, to_numpy, to_torch
from .ranked import (
    R0,
    R1,
    R2,
    R3,
    R4,
    Matrix,
    Rank,
    RankedSlice,
    RankedTensor,
    Slice1D,
    Slice2D,
    Slice3D,
    Slice4D,
    Tensor1D,
    Tensor2D,
    Tensor3D,
    Tensor4D,
    Vector,
)
from .text import format_tensor, parse_tensor
from .unit_ops import decrement_unit, divide_unit, increment_unit, multiply_unit

try:
    __version__ = _load_version("coretensor")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Tensor",
    "TensorLike",
    "TensorSlice",
    "TensorShape",
    "TensorIndex",
    "StorageConfig",
    "config_override",
    "get_default_config",
    "set_default_config",
    "TensorError",
    "ShapeViolationError",
    "ShapeMismatchError",
    "IndexOutOfRangeError",
    "InvalidElementTypeError",
    "StaleViewError",
    "DTypeMismatchError",
    "LiteralParseError",
    "Rank",
    "R0",
    "R1",
    "R2",
    "R3",
    "R4",
    "RankedTensor",
    "RankedSlice",
    "Tensor1D",
    "Tensor2D",
    "Tensor3D",
    "Tensor4D",
    "Slice1D",
    "Slice2D",
    "Slice3D",
    "Slice4D",
    "Vector",
    "Matrix",
    "format_tensor",
    "parse_tensor",
    "increment_unit",
    "decrement_unit",
    "multiply_unit",
    "divide_unit",
    "to_numpy",
    "from_numpy",
    "from_nested",
    "to_torch",
    "from_torch",
    "__version__",
]
