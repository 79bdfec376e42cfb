"""Core storage, addressing and view modules for coretensor."""

__all__ = [
    "config",
    "exceptions",
    "index",
    "shape",
    "slice",
    "tensor",
]
