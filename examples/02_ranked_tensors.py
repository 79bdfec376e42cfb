"""Rank-typed tensors: elements of a Matrix are Vectors, elements of a Vector are scalars."""

from coretensor import (
    InvalidElementTypeError,
    Matrix,
    Tensor,
    Tensor3D,
    Vector,
    increment_unit,
    parse_tensor,
    to_numpy,
)

m = Matrix.from_dynamic(parse_tensor("[[1, 2, 3], [4, 5, 6]]"))
print(repr(m), m)

row = m[1]
print("m[1] is a", type(row).__name__, row)
print("m[1][2] =", m[1][2])

m.append(Vector((3,), [7, 8, 9]))
print("after append:", m)
try:
    m.append(10)
except InvalidElementTypeError as exc:
    print("rejected:", exc)

window = m[0:2]
window[0][0] = 0
increment_unit(m, (2, 2), 100)
print("after writes:", m)

cube = Tensor3D.increasing_from((2, 2, 3))
print("cube as numpy:\n", to_numpy(cube))
print("similar to a (1, 2, 2, 3) tensor:", cube.is_similar(Tensor.increasing_from((1, 2, 2, 3))))
print("isomorphic to it:", cube.is_isomorphic(Tensor.increasing_from((1, 2, 2, 3))))
