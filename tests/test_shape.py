import pytest

from coretensor import IndexOutOfRangeError, ShapeViolationError, TensorIndex, TensorShape


def test_shape_basics():
    shape = TensorShape([3, 4, 5])
    assert shape.rank == 3
    assert len(shape) == 3
    assert shape.contiguous_size == 60
    assert shape.strides == (20, 5, 1)
    assert shape[1] == 4
    assert list(shape) == [3, 4, 5]
    assert shape == (3, 4, 5)
    assert str(shape) == "(3, 4, 5)"


def test_scalar_shape_has_unit_size():
    assert TensorShape.SCALAR.is_scalar
    assert TensorShape.SCALAR.contiguous_size == 1
    assert TensorShape([]) == TensorShape.SCALAR


def test_zero_dimension_gives_empty_size():
    assert TensorShape([2, 0, 3]).contiguous_size == 0


def test_negative_dimension_rejected():
    with pytest.raises(ShapeViolationError):
        TensorShape([2, -1])


def test_axis_access_out_of_range():
    with pytest.raises(IndexOutOfRangeError):
        TensorShape([3, 4])[2]


def test_drop_first_and_prepending():
    shape = TensorShape([3, 4, 5])
    assert shape.drop_first(0) == shape
    assert shape.drop_first() == (4, 5)
    assert shape.drop_first(3) == TensorShape.SCALAR
    assert shape.drop_first().prepending(7) == (7, 4, 5)
    with pytest.raises(IndexOutOfRangeError):
        shape.drop_first(4)


def test_transpose_reverses_dims():
    assert TensorShape([2, 3, 4]).transpose() == (4, 3, 2)
    assert TensorShape.SCALAR.transpose() == TensorShape.SCALAR


def test_subshape():
    shape = TensorShape([3, 4, 5])
    assert shape.subshape(TensorIndex([1])) == (4, 5)
    assert shape.subshape(TensorIndex()) == shape
    assert shape.subshape(TensorIndex([0, 0, 0])) is None


def test_isomorphic_and_similar():
    assert TensorShape([1, 4, 3]).is_similar((4, 3))
    assert not TensorShape([1, 4, 3]).is_isomorphic((4, 3))
    assert TensorShape([1, 1, 1]).is_similar(TensorShape.SCALAR)
    assert TensorShape.SCALAR.is_similar((1, 1, 1))
    assert not TensorShape([1, 1, 1]).is_isomorphic(TensorShape.SCALAR)
    assert not TensorShape([2, 4, 3]).is_similar((4, 3))
    assert TensorShape([4, 3]).is_isomorphic([4, 3])


def test_shapes_hash_by_dims():
    assert len({TensorShape([2, 3]), TensorShape((2, 3)), TensorShape([3, 2])}) == 2
