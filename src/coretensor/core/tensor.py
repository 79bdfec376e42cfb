from __future__ import annotations

import itertools
import logging
import numbers
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .config import StorageConfig, resolve_config
from .exceptions import (
    DTypeMismatchError,
    IndexOutOfRangeError,
    ShapeMismatchError,
    ShapeViolationError,
)
from .index import TensorIndex
from .shape import ShapeLike, TensorShape

if TYPE_CHECKING:
    from .slice import TensorSlice

logger = logging.getLogger(__name__)

Key = Union[int, slice, Tuple[int, ...], TensorIndex]


def _to_python(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_int(key: Any) -> bool:
    return isinstance(key, (int, np.integer)) and not isinstance(key, bool)


def as_index(key: Any) -> TensorIndex:
    if isinstance(key, TensorIndex):
        return key
    if _is_int(key):
        return TensorIndex((int(key),))
    if isinstance(key, tuple) and all(_is_int(k) for k in key):
        return TensorIndex(key)
    raise TypeError(f"Unsupported tensor key: {key!r}")


def check_unit_stride(key: slice) -> None:
    if key.step not in (None, 1):
        raise ValueError(f"Only unit-stride slices are supported, got step {key.step}")


def _flat_units(units: Any, dtype: Optional[Any], config: StorageConfig) -> np.ndarray:
    if isinstance(units, np.ndarray):
        arr = units
    else:
        arr = np.asarray(list(units))
    if arr.size == 0 and dtype is None and not isinstance(units, np.ndarray):
        arr = np.empty(0, dtype=config.resolved_dtype())
    if arr.ndim != 1:
        raise ShapeViolationError(f"Units must be a flat sequence, got an array of shape {arr.shape}")
    return np.array(arr, dtype=dtype, copy=True)


class TensorLike:
    """Read-side contract shared by owning tensors and views.

    Subclasses provide ``element_shape``, ``count``, ``units`` and ``config``;
    everything shape-derived is computed here.
    """

    __hash__ = None  # type: ignore[assignment]

    @property
    def element_shape(self) -> Optional[TensorShape]:
        raise NotImplementedError

    @property
    def count(self) -> int:
        raise NotImplementedError

    @property
    def units(self) -> np.ndarray:
        raise NotImplementedError

    @property
    def config(self) -> StorageConfig:
        raise NotImplementedError

    @property
    def is_scalar(self) -> bool:
        return self.element_shape is None

    @property
    def unit_count_per_element(self) -> int:
        element_shape = self.element_shape
        return 0 if element_shape is None else element_shape.contiguous_size

    @property
    def shape(self) -> TensorShape:
        element_shape = self.element_shape
        if element_shape is None:
            return TensorShape.SCALAR
        return element_shape.prepending(self.count)

    @property
    def rank(self) -> int:
        return self.shape.rank

    @property
    def unit_count(self) -> int:
        return int(self.units.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.units.dtype

    def __len__(self) -> int:
        if self.is_scalar:
            raise TypeError("len() of a scalar tensor")
        return self.count

    def __iter__(self) -> Iterator[Any]:
        if self.is_scalar:
            raise TypeError("iteration over a scalar tensor")
        for i in range(self.count):
            yield self[i]  # type: ignore[index]

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self.to_numpy()
        return arr if dtype is None else arr.astype(dtype)

    # ------------------------------------------------------------- unit access
    def unit(self, at: Union[int, TensorIndex, Tuple[int, ...]]) -> Any:
        units = self.units
        if _is_int(at):
            offset = int(at)
            if not 0 <= offset < units.shape[0]:
                raise IndexOutOfRangeError(
                    f"Unit offset {offset} out of range 0..{units.shape[0]}"
                )
            return _to_python(units[offset])
        index = as_index(at)
        shape = self.shape
        index.check_within(shape)
        if len(index) != shape.rank:
            raise ShapeMismatchError(
                "A unit is addressed by one coordinate per axis",
                expected=shape.rank,
                actual=len(index),
            )
        return _to_python(units[index.contiguous_index(shape)])

    def item(self) -> Any:
        if not self.is_scalar:
            raise ShapeMismatchError(
                "item() is only defined for scalar tensors",
                expected=TensorShape.SCALAR,
                actual=self.shape,
            )
        return _to_python(self.units[0])

    def to_numpy(self) -> np.ndarray:
        return np.array(self.units, copy=True).reshape(self.shape.dims)

    def tolist(self) -> Any:
        return self.to_numpy().tolist()

    # --------------------------------------------------------------- equality
    def units_equal(self, other: "TensorLike") -> bool:
        return bool(np.array_equal(self.units, other.units))

    def elements_equal(self, other: "TensorLike") -> bool:
        if self.shape != other.shape:
            return False
        return self.units_equal(other)

    def is_isomorphic(self, other: "TensorLike") -> bool:
        return self.shape.is_isomorphic(other.shape)

    def is_similar(self, other: "TensorLike") -> bool:
        return self.shape.is_similar(other.shape)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TensorLike):
            return self.elements_equal(other)
        # A scalar tensor also compares equal to its unit value.
        if isinstance(other, (numbers.Number, np.generic)) and self.is_scalar:
            return bool(self.item() == other)
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    # ---------------------------------------------------------------- copying
    def copy(self) -> "Tensor":
        return Tensor._from_shape_units(self.shape, self.units, self.config)

    def reshaped(self, shape: ShapeLike) -> "Tensor":
        new_shape = TensorShape.of(shape)
        if new_shape.contiguous_size != self.shape.contiguous_size:
            raise ShapeMismatchError(
                "Cannot reshape to a shape with a different contiguous size",
                expected=self.shape.contiguous_size,
                actual=new_shape.contiguous_size,
            )
        return Tensor._from_shape_units(new_shape, self.units, self.config)

    def __str__(self) -> str:
        from ..text import format_tensor

        return format_tensor(self)


class Tensor(TensorLike):
    """Owning, growable, row-major tensor of dynamic rank.

    ``element_shape`` is the shape of one element along the leading axis;
    ``None`` makes this a scalar tensor holding exactly one unit.
    """

    def __init__(
        self,
        element_shape: Optional[ShapeLike] = (),
        units: Iterable[Any] = (),
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ):
        self._config = resolve_config(config)
        self._element_shape = None if element_shape is None else TensorShape.of(element_shape)
        arr = _flat_units(units, dtype, self._config)
        if self._element_shape is None:
            if arr.shape[0] != 1:
                raise ShapeViolationError(
                    f"A scalar tensor holds exactly one unit, got {arr.shape[0]}"
                )
            self._count = 1
        else:
            per_element = self._element_shape.contiguous_size
            if per_element == 0:
                if arr.shape[0] != 0:
                    raise ShapeViolationError("Elements of size 0 cannot hold units")
                self._count = 0
            elif arr.shape[0] % per_element != 0:
                raise ShapeViolationError(
                    f"Unit count {arr.shape[0]} is not a multiple of element size {per_element}"
                )
            else:
                self._count = arr.shape[0] // per_element
        capacity = max(arr.shape[0], self._config.min_capacity)
        if capacity > arr.shape[0]:
            buffer = np.empty(capacity, dtype=arr.dtype)
            buffer[: arr.shape[0]] = arr
            arr = buffer
        self._buffer = arr
        self._generation = 0

    # ----------------------------------------------------------- construction
    @classmethod
    def _from_shape_units(
        cls, shape: TensorShape, units: np.ndarray, config: StorageConfig
    ) -> "Tensor":
        size = shape.contiguous_size
        if units.shape[0] < size:
            raise ShapeViolationError(
                f"{units.shape[0]} units are fewer than the {size} required by shape {shape}"
            )
        if shape.is_scalar:
            return cls(None, units[:size], config=config)
        tensor = cls(shape.drop_first(), units[:size], config=config)
        if tensor.unit_count_per_element == 0:
            # Zero-size elements hold no units; the count comes from the shape.
            tensor._count = shape[0]
        return tensor

    @classmethod
    def from_element_shape(
        cls,
        element_shape: ShapeLike,
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        return cls(element_shape, (), dtype=dtype, config=config)

    @classmethod
    def from_shape(
        cls,
        shape: ShapeLike,
        units: Iterable[Any],
        *,
        vacancy_supplier: Optional[Callable[[], Any]] = None,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        shape = TensorShape.of(shape)
        resolved = resolve_config(config)
        size = shape.contiguous_size
        if isinstance(units, np.ndarray):
            if dtype is None:
                dtype = units.dtype
            prefix: List[Any] = list(units.reshape(-1)[:size])
        else:
            prefix = list(itertools.islice(units, size))
        if len(prefix) < size and vacancy_supplier is not None:
            prefix.extend(vacancy_supplier() for _ in range(size - len(prefix)))
        if len(prefix) < size:
            raise ShapeViolationError(
                f"{len(prefix)} units are fewer than the {size} required by shape {shape}"
            )
        arr = _flat_units(prefix, dtype, resolved)
        return cls._from_shape_units(shape, arr, resolved)

    @classmethod
    def from_scalar(
        cls, value: Any, *, dtype: Optional[Any] = None, config: Optional[StorageConfig] = None
    ) -> "Tensor":
        return cls(None, [value], dtype=dtype, config=config)

    @classmethod
    def from_elements(
        cls,
        element_shape: ShapeLike,
        elements: Iterable[TensorLike],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        elements = list(elements)
        if dtype is None and elements:
            dtype = np.result_type(*(e.units.dtype for e in elements))
        tensor = cls.from_element_shape(element_shape, dtype=dtype, config=config)
        tensor.extend(elements)
        return tensor

    @classmethod
    def repeating(
        cls,
        shape: ShapeLike,
        value: Any,
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        shape = TensorShape.of(shape)
        units = np.full(shape.contiguous_size, value, dtype=dtype)
        return cls._from_shape_units(shape, units, resolve_config(config))

    @classmethod
    def from_supplier(
        cls,
        shape: ShapeLike,
        supplier: Callable[[], Any],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        shape = TensorShape.of(shape)
        units = [supplier() for _ in range(shape.contiguous_size)]
        return cls.from_shape(shape, units, dtype=dtype, config=config)

    @classmethod
    def increasing_from(
        cls,
        shape: ShapeLike,
        start: Any = 0,
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        shape = TensorShape.of(shape)
        units = np.arange(start, start + shape.contiguous_size, dtype=dtype)
        return cls._from_shape_units(shape, units, resolve_config(config))

    @classmethod
    def scalar_elements(
        cls,
        values: Iterable[Any],
        *,
        dtype: Optional[Any] = None,
        config: Optional[StorageConfig] = None,
    ) -> "Tensor":
        return cls((), values, dtype=dtype, config=config)

    # -------------------------------------------------------------- properties
    @property
    def element_shape(self) -> Optional[TensorShape]:
        return self._element_shape

    @property
    def count(self) -> int:
        return self._count

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def _unit_size(self) -> int:
        if self._element_shape is None:
            return 1
        return self._count * self._element_shape.contiguous_size

    @property
    def units(self) -> np.ndarray:
        view = self._buffer[: self._unit_size]
        view.flags.writeable = False
        return view

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def capacity(self) -> int:
        per_element = self.unit_count_per_element
        if per_element == 0:
            return self._count
        return self._buffer.shape[0] // per_element

    def __repr__(self) -> str:
        if self.is_scalar:
            return f"Tensor(scalar={self.item()!r}, dtype={self.dtype})"
        return f"Tensor(shape={self.shape}, dtype={self.dtype})"

    # ---------------------------------------------------------------- helpers
    def _element_range(self, bounds: range) -> Tuple[int, int]:
        per_element = self.unit_count_per_element
        return bounds.start * per_element, bounds.stop * per_element

    def _require_elements(self, action: str) -> TensorShape:
        if self._element_shape is None:
            raise ShapeMismatchError(f"Cannot {action} a scalar tensor")
        return self._element_shape

    def _check_bounds(self, bounds: range) -> range:
        if bounds.step != 1:
            raise ValueError(f"Only unit-stride ranges are supported, got step {bounds.step}")
        if not 0 <= bounds.start <= bounds.stop <= self._count:
            raise IndexOutOfRangeError(
                f"Range {bounds.start}..{bounds.stop} out of bounds 0..{self._count}"
            )
        return bounds

    def _resolve_slice(self, key: slice) -> range:
        check_unit_stride(key)
        if self.is_scalar:
            raise IndexOutOfRangeError("A scalar tensor has no elements")
        start = 0 if key.start is None else int(key.start)
        stop = self._count if key.stop is None else int(key.stop)
        if start > stop:
            raise IndexOutOfRangeError(f"Slice {start}:{stop} has a negative length")
        return self._check_bounds(range(start, stop))

    def _locate(self, index: TensorIndex) -> Tuple[int, TensorShape]:
        """Unit offset and remaining shape addressed by ``index``."""
        if self.is_scalar:
            if len(index):
                raise IndexOutOfRangeError("A scalar tensor has no dimensions")
            return 0, TensorShape.SCALAR
        shape = self.shape
        index.check_within(shape)
        return index.contiguous_index(shape), shape.drop_first(len(index))

    def coerce_units(self, value: Any, expected: TensorShape, what: str) -> np.ndarray:
        """Units of ``value`` after checking it has exactly ``expected`` shape."""
        if isinstance(value, TensorLike):
            if value.shape != expected:
                raise ShapeMismatchError(f"{what} shape mismatch", expected=expected, actual=value.shape)
            units = value.units
        else:
            if np.ndim(value) != 0 or not expected.is_scalar:
                raise ShapeMismatchError(
                    f"{what} shape mismatch", expected=expected, actual=TensorShape(np.shape(value))
                )
            return self._coerce_scalar(value, what)
        if not np.can_cast(units.dtype, self._buffer.dtype, casting="same_kind"):
            raise DTypeMismatchError(
                f"{what} of dtype {units.dtype} cannot be stored in a {self._buffer.dtype} tensor"
            )
        return np.array(units, dtype=self._buffer.dtype, copy=True)

    def _coerce_scalar(self, value: Any, what: str) -> np.ndarray:
        # Plain Python numbers are checked by value, so 3 fits a uint8 tensor.
        dtype = self._buffer.dtype
        try:
            sample = value if isinstance(value, (numbers.Number, np.generic)) else np.asarray(value)
            result = np.result_type(sample, dtype)
        except TypeError as exc:
            raise DTypeMismatchError(f"{what} {value!r} cannot be stored in a {dtype} tensor") from exc
        if not np.can_cast(result, dtype, casting="same_kind"):
            raise DTypeMismatchError(f"{what} of dtype {result} cannot be stored in a {dtype} tensor")
        if np.issubdtype(dtype, np.integer) and isinstance(value, (int, np.integer)):
            info = np.iinfo(dtype)
            if not info.min <= int(value) <= info.max:
                raise DTypeMismatchError(f"{what} {value!r} is out of range for a {dtype} tensor")
        return np.asarray([value], dtype=dtype)

    def _reserve_units(self, minimum: int) -> None:
        current = self._buffer.shape[0]
        if minimum <= current:
            return
        grown = int(current * self._config.growth_factor)
        capacity = max(minimum, grown, self._config.min_capacity)
        buffer = np.empty(capacity, dtype=self._buffer.dtype)
        size = self._unit_size
        buffer[:size] = self._buffer[:size]
        self._buffer = buffer
        self._generation += 1
        logger.debug("Relocated tensor buffer from %d to %d units", current, capacity)

    def _splice(self, bounds: range, units: np.ndarray, new_count: int) -> None:
        # Replace the elements in ``bounds`` with ``new_count`` elements held by ``units``.
        start, stop = self._element_range(bounds)
        old_size = self._unit_size
        delta = units.shape[0] - (stop - start)
        new_size = old_size + delta
        self._reserve_units(new_size)
        buffer = self._buffer
        if delta != 0:
            buffer[start + units.shape[0] : new_size] = buffer[stop:old_size]
        buffer[start : start + units.shape[0]] = units
        self._count += new_count - len(bounds)
        if delta != 0 or new_count != len(bounds):
            self._generation += 1
            logger.debug(
                "Spliced elements %d..%d with %d new elements (count now %d)",
                bounds.start,
                bounds.stop,
                new_count,
                self._count,
            )

    def write_units(self, start: int, units: np.ndarray) -> None:
        """Size-preserving in-place write; the layout generation is unchanged."""
        stop = start + units.shape[0]
        if not 0 <= start <= stop <= self._unit_size:
            raise IndexOutOfRangeError(f"Unit range {start}..{stop} out of bounds 0..{self._unit_size}")
        self._buffer[start:stop] = units

    # ----------------------------------------------------------------- access
    def __getitem__(self, key: Key) -> Union["Tensor", "TensorSlice"]:
        if isinstance(key, slice):
            from .slice import TensorSlice

            return TensorSlice.bounded(self, self._resolve_slice(key))
        offset, subshape = self._locate(as_index(key))
        return Tensor._from_shape_units(
            subshape, self._buffer[offset : offset + subshape.contiguous_size], self._config
        )

    def __setitem__(self, key: Key, value: Any) -> None:
        if isinstance(key, slice):
            bounds = self._resolve_slice(key)
            element_shape = self._require_elements("assign a range of")
            expected = element_shape.prepending(len(bounds))
            offset = self._element_range(bounds)[0]
        else:
            offset, expected = self._locate(as_index(key))
        self.write_units(offset, self.coerce_units(value, expected, "Assigned value"))

    def view(self, *indices: int) -> "TensorSlice":
        """Zero-copy view of the sub-tensor at the coordinate path ``indices``."""
        from .slice import TensorSlice

        if not indices:
            return TensorSlice.bounded(self, None)
        return TensorSlice.at_indices(self, indices)

    def update_unit(self, offset: int, value: Any) -> None:
        offset = int(offset)
        if not 0 <= offset < self._unit_size:
            raise IndexOutOfRangeError(f"Unit offset {offset} out of range 0..{self._unit_size}")
        self.write_units(offset, self.coerce_units(value, TensorShape.SCALAR, "Unit"))

    # --------------------------------------------------------------- mutation
    def reserve_capacity(self, minimum_elements: int) -> None:
        self._reserve_units(self.unit_count_per_element * int(minimum_elements))

    def append(self, element: Any) -> None:
        element_shape = self._require_elements("append to")
        units = self.coerce_units(element, element_shape, "Appended element")
        self._splice(range(self._count, self._count), units, 1)

    def extend(self, elements: Union[TensorLike, Iterable[Any]]) -> None:
        element_shape = self._require_elements("extend")
        if isinstance(elements, TensorLike):
            if elements.element_shape != element_shape:
                raise ShapeMismatchError(
                    "Element shape mismatch", expected=element_shape, actual=elements.element_shape
                )
            units = self.coerce_units(elements, elements.shape, "Appended tensor")
            self._splice(range(self._count, self._count), units, elements.count)
            return
        units, count = self._gather(elements, element_shape)
        self._splice(range(self._count, self._count), units, count)

    def _gather(self, elements: Iterable[Any], element_shape: TensorShape) -> Tuple[np.ndarray, int]:
        # Every element is validated before the buffer is touched.
        chunks = [self.coerce_units(e, element_shape, "Element") for e in elements]
        if not chunks:
            return np.empty(0, dtype=self._buffer.dtype), 0
        return np.concatenate(chunks), len(chunks)

    def insert(self, index: int, element: Any) -> None:
        element_shape = self._require_elements("insert into")
        index = int(index)
        if not 0 <= index <= self._count:
            raise IndexOutOfRangeError(f"Insertion index {index} out of range 0..{self._count}")
        units = self.coerce_units(element, element_shape, "Inserted element")
        self._splice(range(index, index), units, 1)

    def remove_at(self, index: int) -> "Tensor":
        self._require_elements("remove from")
        index = int(index)
        if not 0 <= index < self._count:
            raise IndexOutOfRangeError(f"Index {index} out of range 0..{self._count}")
        removed = self[index]
        self._splice(range(index, index + 1), np.empty(0, dtype=self._buffer.dtype), 0)
        return removed  # type: ignore[return-value]

    def remove_subrange(self, bounds: range) -> None:
        self._require_elements("remove from")
        bounds = self._check_bounds(bounds)
        self._splice(bounds, np.empty(0, dtype=self._buffer.dtype), 0)

    def replace_subrange(self, bounds: range, elements: Iterable[Any]) -> None:
        element_shape = self._require_elements("replace elements of")
        bounds = self._check_bounds(bounds)
        units, count = self._gather(elements, element_shape)
        self._splice(bounds, units, count)

    def clear(self) -> None:
        self._require_elements("clear")
        self._splice(range(0, self._count), np.empty(0, dtype=self._buffer.dtype), 0)
