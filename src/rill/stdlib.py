"""Built-in output: the `print` statement."""

from __future__ import annotations

from .types import RlValue
from .utils import stringify

def std_print(value: RlValue) -> None:
    print(stringify(value))
