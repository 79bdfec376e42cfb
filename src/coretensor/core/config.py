from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional

import numpy as np

STALE_VIEW_POLICIES = {"raise", "warn", "ignore"}


@dataclass
class StorageConfig:
    """
    Storage switches shared by every tensor created under this config.

    Key behaviors:
    * ``dtype`` is only consulted when a tensor is created without units
      (``Tensor()``, ``Tensor.from_element_shape``); otherwise the dtype is
      inferred from the supplied units. ``None`` means ``float64``.
    * ``growth_factor`` controls geometric capacity growth when appending
      past the reserved capacity.
    * ``stale_views`` decides what happens when a view is read or written
      after a size-changing mutation of its base: ``"raise"`` raises
      ``StaleViewError``, ``"warn"`` logs a warning and carries on,
      ``"ignore"`` carries on silently.
    """

    dtype: Optional[str] = None
    growth_factor: float = 2.0
    min_capacity: int = 0
    stale_views: str = "raise"  # "raise" | "warn" | "ignore"

    def normalized(self) -> "StorageConfig":
        dtype = self.dtype
        if dtype is not None:
            try:
                dtype = np.dtype(dtype).name
            except TypeError as exc:
                raise ValueError(f"Unsupported dtype setting: {self.dtype}") from exc
        growth = float(self.growth_factor)
        if growth <= 1.0:
            raise ValueError("growth_factor must be greater than 1")
        min_capacity = int(self.min_capacity)
        if min_capacity < 0:
            raise ValueError("min_capacity must be non-negative")
        policy = (self.stale_views or "raise").lower()
        if policy not in STALE_VIEW_POLICIES:
            raise ValueError(f"Unsupported stale view policy: {self.stale_views}")
        return replace(
            self,
            dtype=dtype,
            growth_factor=growth,
            min_capacity=min_capacity,
            stale_views=policy,
        )

    def resolved_dtype(self) -> np.dtype:
        return np.dtype(self.dtype or "float64")


_default_config = StorageConfig().normalized()


def get_default_config() -> StorageConfig:
    return _default_config


def set_default_config(config: StorageConfig) -> StorageConfig:
    """Install ``config`` as the process default and return the previous one."""
    global _default_config
    previous = _default_config
    _default_config = config.normalized()
    return previous


@contextmanager
def config_override(**changes: Any) -> Iterator[StorageConfig]:
    previous = set_default_config(replace(_default_config, **changes))
    try:
        yield _default_config
    finally:
        set_default_config(previous)


def resolve_config(config: Optional[StorageConfig]) -> StorageConfig:
    if config is None:
        return _default_config
    return config.normalized()
