import logging

import numpy as np
import pytest

from coretensor import (
    IndexOutOfRangeError,
    ShapeMismatchError,
    StaleViewError,
    Tensor,
    TensorSlice,
    config_override,
)


def _base():
    return Tensor.increasing_from((3, 4, 5))


def test_view_addresses_without_copying():
    t = _base()
    row = t.view(1, 3)
    assert isinstance(row, TensorSlice)
    assert row.shape == (5,)
    assert list(row.units) == list(range(35, 40))
    assert row.base is t
    assert row.base_indices == (1, 3)
    assert t.view(2, 0, 3).is_scalar
    assert t.view(2, 0, 3).item() == 43


def test_range_slice_then_index():
    t = _base()
    s = t[0:2]
    assert isinstance(s, TensorSlice)
    assert s.shape == (2, 4, 5)
    assert s.count == 2
    assert list(s[1][3].units) == list(range(35, 40))
    assert s[1, 3, 4].item() == 39


def test_nested_ranges_are_relative():
    t = _base()
    inner = t[1:3][1:2]
    assert inner.bounds == range(2, 3)
    assert inner.count == 1
    assert list(inner[0].units) == list(range(40, 60))
    with pytest.raises(IndexOutOfRangeError):
        t[1:3][0:3]


def test_empty_range_slice():
    s = _base()[1:1]
    assert s.shape == (0, 4, 5)
    assert s.unit_count == 0


def test_slice_bounds_and_stride_are_checked():
    t = _base()
    with pytest.raises(IndexOutOfRangeError):
        t[0:5]
    with pytest.raises(IndexOutOfRangeError):
        t[2:1]
    with pytest.raises(ValueError):
        t[0:3:2]
    with pytest.raises(IndexOutOfRangeError):
        t.view(3)
    with pytest.raises(IndexOutOfRangeError):
        t.view(0, 0)[5]


def test_writes_are_visible_through_overlapping_views():
    t = _base()
    first = t[0:2]
    second = t[1:3]
    first[1] = Tensor.repeating((4, 5), -1)
    assert list(second[0].units) == [-1] * 20
    assert list(t.units[20:40]) == [-1] * 20
    second[0:1] = Tensor.repeating((1, 4, 5), 9)
    assert list(first[1].units) == [9] * 20


def test_scalar_write_through_view():
    t = _base()
    t.view(0, 0)[2] = 99
    assert t.unit((0, 0, 2)) == 99
    assert t.view(0)[0, 2].item() == 99


def test_write_through_view_is_shape_checked():
    t = _base()
    before = t.units.copy()
    with pytest.raises(ShapeMismatchError):
        t[0:2][0] = Tensor.repeating((5,), 0)
    assert np.array_equal(t.units, before)


def test_view_equality_and_copy():
    t = _base()
    assert t.view(1) == t[1]
    snapshot = t.view(1).copy()
    t[1] = Tensor.repeating((4, 5), 0)
    assert isinstance(snapshot, Tensor)
    assert list(snapshot.units) == list(range(20, 40))


def test_iterating_a_view():
    t = _base()
    assert [unit.item() for unit in t.view(0, 0)] == [0, 1, 2, 3, 4]


def test_in_place_write_keeps_views_fresh():
    t = _base()
    view = t.view(2)
    t[0] = Tensor.repeating((4, 5), 1)
    assert not view.is_stale
    assert view.unit((0, 0)) == 40


def test_stale_view_raises_by_default():
    t = _base()
    view = t.view(0)
    t.append(Tensor.repeating((4, 5), 0))
    assert view.is_stale
    with pytest.raises(StaleViewError):
        view.units
    with pytest.raises(StaleViewError):
        view[0]


def test_stale_view_warns_once(caplog):
    caplog.set_level(logging.WARNING, logger="coretensor.core.slice")
    with config_override(stale_views="warn"):
        t = _base()
        view = t.view(0)
        t.remove_at(2)
        assert list(view.units) == list(range(20))
        assert view.count == 4
    stale_records = [r for r in caplog.records if "generation" in r.getMessage()]
    assert len(stale_records) == 1


def test_stale_view_ignored(caplog):
    caplog.set_level(logging.WARNING, logger="coretensor.core.slice")
    with config_override(stale_views="ignore"):
        t = _base()
        view = t[0:1]
        t.insert(0, Tensor.repeating((4, 5), 7))
        assert list(view[0].units) == [7] * 20
    assert not caplog.records
