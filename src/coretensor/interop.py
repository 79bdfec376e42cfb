from __future__ import annotations

from typing import Any, Optional

import numpy as np

from .core.config import StorageConfig
from .core.exceptions import ShapeViolationError
from .core.tensor import Tensor, TensorLike
from .ranked.base import RankedTensorLike, dynamic_of

try:  # pragma: no cover - optional dependency
    import torch
except Exception:  # pragma: no cover - torch optional
    torch = None


def _require_torch() -> None:
    if torch is None:
        raise RuntimeError("PyTorch is not installed; install coretensor[torch] to use torch interop")


def to_numpy(tensor: Any) -> np.ndarray:
    """Shaped copy of ``tensor``'s units; a scalar becomes a 0-d array."""
    return dynamic_of(tensor).to_numpy()


def from_numpy(
    array: Any,
    *,
    dtype: Optional[Any] = None,
    config: Optional[StorageConfig] = None,
) -> Tensor:
    # 0-d arrays stay 0-d and become scalar tensors.
    arr = np.asarray(array, order="C")
    if arr.dtype == object:
        raise ShapeViolationError("Ragged or object arrays cannot be stored in a tensor")
    return Tensor.from_shape(arr.shape, arr.reshape(-1), dtype=dtype, config=config)


def from_nested(
    obj: Any,
    *,
    dtype: Optional[Any] = None,
    config: Optional[StorageConfig] = None,
) -> Tensor:
    """Build a tensor from nested Python sequences (or anything numpy accepts)."""
    if isinstance(obj, (TensorLike, RankedTensorLike)):
        return dynamic_of(obj).copy()
    try:
        arr = np.array(obj)
    except ValueError as exc:
        raise ShapeViolationError(f"Nested sequence is ragged: {exc}") from exc
    return from_numpy(arr, dtype=dtype, config=config)


def to_torch(tensor: Any, *, device: Optional[str] = None):
    _require_torch()
    out = torch.from_numpy(to_numpy(tensor))
    if device is not None:
        out = out.to(device)
    return out


def from_torch(
    value: Any,
    *,
    dtype: Optional[Any] = None,
    config: Optional[StorageConfig] = None,
) -> Tensor:
    _require_torch()
    if not isinstance(value, torch.Tensor):
        raise TypeError(f"Expected a torch.Tensor, got {type(value).__name__}")
    detached = value.detach().cpu()
    try:
        arr = detached.numpy()
    except (RuntimeError, TypeError):
        arr = np.asarray(detached.tolist())
    return from_numpy(arr, dtype=dtype, config=config)
