"""Evaluator helper modules for the Rill runtime."""

__all__ = [
    "bind",
    "blocks",
    "common",
    "expr",
    "fn",
    "loops",
]
