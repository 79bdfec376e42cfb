import numpy as np
import pytest

from coretensor import (
    DTypeMismatchError,
    IndexOutOfRangeError,
    ShapeMismatchError,
    ShapeViolationError,
    StorageConfig,
    Tensor,
    TensorIndex,
)


def _increasing(*dims):
    return Tensor.increasing_from(dims)


def test_increasing_units_are_row_major():
    t = _increasing(3, 4, 5)
    assert t.shape == (3, 4, 5)
    assert t.element_shape == (4, 5)
    assert t.count == 3
    assert t.unit_count == 60
    assert t.unit_count_per_element == 20
    assert list(t.units) == list(range(60))


def test_nested_element_access():
    t = _increasing(3, 4, 5)
    assert list(t[1].units) == list(range(20, 40))
    assert list(t[1][3].units) == list(range(35, 40))
    assert t[2][0][3].item() == 43
    assert t[2, 0, 3].item() == 43
    assert t[TensorIndex([1, 3])].shape == (5,)
    assert t.unit((2, 0, 3)) == 43
    assert t.unit(43) == 43


def test_element_access_returns_copy():
    t = _increasing(2, 3)
    row = t[0]
    assert isinstance(row, Tensor)
    assert row.units_equal(Tensor.from_shape((3,), [0, 1, 2]))
    with pytest.raises(ValueError):
        t.units[0] = 100


def test_out_of_range_access_never_wraps():
    t = _increasing(3, 4)
    with pytest.raises(IndexOutOfRangeError):
        t[5]
    with pytest.raises(IndexOutOfRangeError):
        t[-1]
    with pytest.raises(IndexOutOfRangeError):
        t[0, 4]
    with pytest.raises(IndexOutOfRangeError):
        t.unit(12)


def test_partial_index_is_not_a_unit():
    with pytest.raises(ShapeMismatchError):
        _increasing(3, 4).unit((1,))


def test_from_shape_requires_enough_units():
    with pytest.raises(ShapeViolationError):
        Tensor.from_shape((2, 3), [1, 2, 3])
    t = Tensor.from_shape((2, 2), range(10))
    assert list(t.units) == [0, 1, 2, 3]


def test_from_shape_fills_vacancies():
    calls = []

    def supplier():
        calls.append(1)
        return 0

    t = Tensor.from_shape((2, 3), [1, 2], vacancy_supplier=supplier)
    assert list(t.units) == [1, 2, 0, 0, 0, 0]
    assert len(calls) == 4


def test_units_must_divide_into_elements():
    with pytest.raises(ShapeViolationError):
        Tensor((3,), [1, 2, 3, 4])


def test_supplier_called_once_per_unit():
    calls = []

    def supplier():
        calls.append(len(calls))
        return len(calls)

    t = Tensor.from_supplier((2, 3), supplier)
    assert len(calls) == 6
    assert list(t.units) == [1, 2, 3, 4, 5, 6]


def test_repeating_and_from_elements():
    t = Tensor.repeating((2, 2), 7)
    assert list(t.units) == [7, 7, 7, 7]
    rows = [Tensor.from_shape((2,), [1, 2]), Tensor.from_shape((2,), [3, 4])]
    stacked = Tensor.from_elements((2,), rows)
    assert stacked.shape == (2, 2)
    assert list(stacked.units) == [1, 2, 3, 4]


def test_scalar_tensor():
    s = Tensor.from_scalar(5)
    assert s.is_scalar
    assert s.shape == ()
    assert s.count == 1
    assert s.item() == 5
    assert s.unit(0) == 5
    with pytest.raises(TypeError):
        len(s)
    with pytest.raises(ShapeViolationError):
        Tensor(None, [1, 2])
    with pytest.raises(ShapeMismatchError):
        _increasing(2).item()


def test_empty_tensor_uses_config_dtype():
    t = Tensor()
    assert t.shape == (0,)
    assert t.dtype == np.float64
    assert Tensor.from_element_shape((3,), dtype="int32").shape == (0, 3)


def test_zero_size_elements_keep_their_count():
    t = Tensor.from_shape((2, 0), [])
    assert t.shape == (2, 0)
    assert t.count == 2
    assert t.unit_count == 0


def test_units_equal_without_elements_equal():
    a = Tensor.from_shape((1, 4, 3), range(12))
    b = Tensor.from_shape((4, 3), range(12))
    assert a.units_equal(b)
    assert not a.elements_equal(b)
    assert not a.is_isomorphic(b)
    assert a.is_similar(b)
    assert a != b
    assert a == a.copy()


def test_assign_element_and_unit():
    t = _increasing(3, 4)
    t[1] = Tensor.repeating((4,), 7)
    assert list(t[1].units) == [7, 7, 7, 7]
    t[0, 0] = 42
    assert t.unit(0) == 42
    t[0:2] = Tensor.repeating((2, 4), 1)
    assert list(t.units[:8]) == [1] * 8
    assert list(t.units[8:]) == [8, 9, 10, 11]


def test_assignment_is_shape_checked():
    t = _increasing(3, 4)
    before = t.units.copy()
    with pytest.raises(ShapeMismatchError):
        t[0] = Tensor.repeating((3,), 1)
    with pytest.raises(ShapeMismatchError):
        t[0] = 5
    with pytest.raises(DTypeMismatchError):
        t[0] = Tensor.repeating((4,), 0.5)
    assert np.array_equal(t.units, before)


def test_update_unit():
    t = _increasing(2, 2)
    t.update_unit(3, 9)
    assert t.unit((1, 1)) == 9
    with pytest.raises(IndexOutOfRangeError):
        t.update_unit(4, 1)


def test_append_then_remove_restores_units():
    t = _increasing(3, 4)
    before = t.units.copy()
    t.append(Tensor.from_shape((4,), [100, 101, 102, 103]))
    assert t.shape == (4, 4)
    removed = t.remove_at(3)
    assert list(removed.units) == [100, 101, 102, 103]
    assert np.array_equal(t.units, before)


def test_append_rejects_wrong_shape_and_dtype():
    t = _increasing(3, 4)
    with pytest.raises(ShapeMismatchError):
        t.append(Tensor.from_shape((3,), [1, 2, 3]))
    with pytest.raises(DTypeMismatchError):
        t.append(Tensor.repeating((4,), 1.5))
    assert t.count == 3


def test_scalar_tensor_cannot_grow():
    with pytest.raises(ShapeMismatchError):
        Tensor.from_scalar(1).append(2)


def test_insert_and_extend():
    t = Tensor.scalar_elements([1, 2, 3])
    t.insert(0, 0)
    t.extend([4, 5])
    t.extend(Tensor.scalar_elements([6]))
    assert list(t.units) == [0, 1, 2, 3, 4, 5, 6]
    with pytest.raises(IndexOutOfRangeError):
        t.insert(9, 1)


def test_remove_and_replace_subrange():
    t = _increasing(4, 2)
    t.remove_subrange(range(1, 3))
    assert list(t.units) == [0, 1, 6, 7]
    t.replace_subrange(range(0, 1), [Tensor.repeating((2,), 9), Tensor.repeating((2,), 8)])
    assert t.shape == (3, 2)
    assert list(t.units) == [9, 9, 8, 8, 6, 7]
    with pytest.raises(IndexOutOfRangeError):
        t.remove_subrange(range(2, 5))


def test_replace_subrange_is_atomic():
    t = _increasing(3, 2)
    before = t.units.copy()
    with pytest.raises(ShapeMismatchError):
        t.replace_subrange(range(0, 1), [Tensor.repeating((2,), 1), Tensor.repeating((3,), 1)])
    assert np.array_equal(t.units, before)
    assert t.count == 3


def test_clear():
    t = _increasing(3, 2)
    t.clear()
    assert t.shape == (0, 2)
    assert t.unit_count == 0


def test_capacity_and_generation():
    t = Tensor.from_element_shape((2,), dtype="int64")
    assert t.capacity == 0
    start = t.generation
    t.reserve_capacity(10)
    assert t.capacity == 10
    assert t.generation == start + 1
    t.append(Tensor.from_shape((2,), [1, 2]))
    after_append = t.generation
    assert after_append > start + 1
    t[0] = Tensor.from_shape((2,), [3, 4])
    assert t.generation == after_append


def test_min_capacity_from_config():
    t = Tensor.from_element_shape((3,), config=StorageConfig(min_capacity=12))
    assert t.capacity == 4


def test_reshaped():
    t = _increasing(3, 4)
    r = t.reshaped((4, 3))
    assert r.shape == (4, 3)
    assert r.units_equal(t)
    with pytest.raises(ShapeMismatchError):
        t.reshaped((5, 3))


def test_str_renders_nested_brackets():
    assert str(Tensor.from_shape((2, 3), range(1, 7))) == "[[1, 2, 3], [4, 5, 6]]"
    assert str(Tensor.from_scalar(5)) == "5"


def test_iteration_yields_elements():
    t = _increasing(2, 2)
    assert [row.tolist() for row in t] == [[0, 1], [2, 3]]
    assert np.asarray(t).shape == (2, 2)


def test_plain_scalars_are_checked_by_value():
    t = Tensor.from_shape((3,), [1, 2, 3], dtype="uint8")
    t.update_unit(0, 3)
    t[1] = 255
    t.append(7)
    assert t.tolist() == [3, 255, 3, 7]
    assert t.dtype == np.uint8
    with pytest.raises(DTypeMismatchError):
        t.update_unit(0, -1)
    with pytest.raises(DTypeMismatchError):
        t.update_unit(0, 256)
    with pytest.raises(DTypeMismatchError):
        t.update_unit(0, 1.5)
    assert t.tolist() == [3, 255, 3, 7]


def test_scalar_tensor_compares_with_its_value():
    t = Tensor.increasing_from((3, 4, 5))
    assert t[2][0][3] == 43
    assert t.view(2, 0, 3) == 43
    assert t[2][0][3] != 44
    assert t[2][0] != 43
