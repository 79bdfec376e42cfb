"""In-place arithmetic on a single unit of a tensor.

Each helper reads the unit at ``offset`` (a flat unit offset or a full
index), combines it with ``operand`` and writes the result back through
``update_unit``. The tensor's dtype is kept: integer tensors divide
truncating toward zero, floating tensors with true division.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Tuple, Union

import numpy as np

from .core.index import TensorIndex
from .core.tensor import as_index

UnitAddress = Union[int, Tuple[int, ...], TensorIndex]


def _flat_offset(tensor: Any, at: UnitAddress) -> int:
    if isinstance(at, (int, np.integer)) and not isinstance(at, bool):
        return int(at)
    index = as_index(at)
    shape = tensor.dynamic_shape if hasattr(tensor, "dynamic_shape") else tensor.shape
    # ``unit`` validates the full index before we compute its offset.
    tensor.unit(index)
    return index.contiguous_index(shape)


def _truncating_div(lhs: Any, rhs: Any) -> Any:
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def _apply(tensor: Any, at: UnitAddress, operand: Any, op: Callable[[Any, Any], Any]) -> Any:
    offset = _flat_offset(tensor, at)
    result = op(tensor.unit(offset), operand)
    tensor.update_unit(offset, result)
    return tensor.unit(offset)


def increment_unit(tensor: Any, at: UnitAddress, amount: Any = 1) -> Any:
    return _apply(tensor, at, amount, operator.add)


def decrement_unit(tensor: Any, at: UnitAddress, amount: Any = 1) -> Any:
    return _apply(tensor, at, amount, operator.sub)


def multiply_unit(tensor: Any, at: UnitAddress, factor: Any) -> Any:
    return _apply(tensor, at, factor, operator.mul)


def divide_unit(tensor: Any, at: UnitAddress, divisor: Any) -> Any:
    """Divide one unit in place; raises ``ZeroDivisionError`` for a zero divisor."""
    if divisor == 0:
        raise ZeroDivisionError("division of a tensor unit by zero")
    op = _truncating_div if np.issubdtype(tensor.dtype, np.integer) else operator.truediv
    return _apply(tensor, at, divisor, op)
