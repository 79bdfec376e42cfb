"""Build a (3, 4, 5) tensor, then read and write it through views."""

import logging

from coretensor import StaleViewError, Tensor, config_override

logging.basicConfig(level=logging.INFO)

t = Tensor.increasing_from((3, 4, 5))
print("shape:", t.shape, "element shape:", t.element_shape)
print("t[1][3]:", t[1][3])
print("t[2][0][3]:", t[2][0][3].item())

# Two overlapping windows over the same buffer.
front = t[0:2]
back = t[1:3]
front[1] = Tensor.repeating((4, 5), -1)
print("back[0] after writing through front[1]:", back[0][0])

row = t.view(2, 1)
row[0:2] = Tensor.from_shape((2,), [100, 200])
print("t[2][1] after writing through a row view:", t[2][1])

# Growing the base invalidates existing views.
stale = t.view(0)
t.append(Tensor.repeating((4, 5), 0))
try:
    stale.units
except StaleViewError as exc:
    print("stale view rejected:", exc)

with config_override(stale_views="warn"):
    grown = Tensor.increasing_from((2, 3))
    view = grown.view(0)
    grown.remove_at(1)
    print("stale view read under 'warn':", view)
