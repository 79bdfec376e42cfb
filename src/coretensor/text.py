"""Text rendering and literal parsing for tensors."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import LarkError, UnexpectedInput

from .core.config import StorageConfig
from .core.exceptions import LiteralParseError, ShapeViolationError
from .core.tensor import Tensor, _to_python

GRAMMAR_FILE = Path(__file__).with_name("tensor_literal.lark")


@lru_cache(maxsize=1)
def _build_parser() -> Lark:
    return Lark(
        GRAMMAR_FILE.read_text(),
        parser="earley",
        start="start",
        propagate_positions=True,
        maybe_placeholders=False,
    )


# ------------------------------------------------------------------ formatting
def _format_unit(value: Any) -> str:
    return str(_to_python(value))


def _format_block(units: List[Any], dims: tuple) -> str:
    if not dims:
        return _format_unit(units[0])
    if len(dims) == 1:
        return "[" + ", ".join(_format_unit(u) for u in units) + "]"
    step = len(units) // dims[0] if dims[0] else 0
    parts = [_format_block(units[i * step : (i + 1) * step], dims[1:]) for i in range(dims[0])]
    return "[" + ", ".join(parts) + "]"


def format_tensor(tensor: Any) -> str:
    """Render ``tensor`` as nested brackets, e.g. ``[[1, 2, 3], [4, 5, 6]]``.

    A scalar renders as its bare value. Ranked tensors and views are accepted
    as well since they expose the same ``units``/``shape`` surface.
    """
    shape = tensor.shape
    dims = tuple(shape.dims if hasattr(shape, "dims") else shape)
    return _format_block(list(tensor.units), dims)


# --------------------------------------------------------------------- parsing
class _Nested:
    __slots__ = ("items", "line", "column")

    def __init__(self, items: List[Any], line: Optional[int], column: Optional[int]):
        self.items = items
        self.line = line
        self.column = column


class _LiteralXform(Transformer):
    def start(self, items):
        return items[0]

    @v_args(meta=True)
    def array(self, meta, items):
        return _Nested(list(items), getattr(meta, "line", None), getattr(meta, "column", None))

    def number(self, items):
        text = str(items[0])
        try:
            return int(text)
        except ValueError:
            return float(text)

    def boolean(self, items):
        return str(items[0]).lower() == "true"


def _shape_of(node: Any) -> tuple:
    if not isinstance(node, _Nested):
        return ()
    if not node.items:
        return (0,)
    inner = _shape_of(node.items[0])
    for child in node.items[1:]:
        other = _shape_of(child)
        if other != inner:
            raise ShapeViolationError(
                f"Ragged tensor literal at line {node.line}, col {node.column}: "
                f"elements of shape {inner} and {other}"
            )
    return (len(node.items),) + inner


def _flatten(node: Any, out: List[Any]) -> None:
    if isinstance(node, _Nested):
        for child in node.items:
            _flatten(child, out)
    else:
        out.append(node)


def parse_tensor(
    text: str,
    *,
    dtype: Optional[Any] = None,
    config: Optional[StorageConfig] = None,
) -> Tensor:
    """Parse a bracket literal into a ``Tensor``.

    ``"[[1, 2], [3, 4]]"`` gives shape ``(2, 2)``, ``"7"`` a scalar and
    ``"[]"`` an empty tensor of shape ``(0,)``. Rows of different shapes
    raise ``ShapeViolationError``; malformed text raises ``LiteralParseError``.
    """
    parser = _build_parser()
    lines = text.splitlines()
    try:
        tree = parser.parse(text)
    except UnexpectedInput as exc:
        line = exc.line if exc.line and exc.line > 0 else 1
        column = exc.column if exc.column and exc.column > 0 else 1
        line_text = lines[line - 1] if 1 <= line <= len(lines) else ""
        raise LiteralParseError(
            "Syntax error while parsing tensor literal",
            line=line,
            column=column,
            line_text=line_text,
        ) from exc
    except LarkError as exc:  # pragma: no cover - defensive
        raise LiteralParseError(str(exc)) from exc

    root = _LiteralXform().transform(tree)
    shape = _shape_of(root)
    units: List[Any] = []
    _flatten(root, units)
    return Tensor.from_shape(shape, units, dtype=dtype, config=config)
