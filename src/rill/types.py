from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional
from typing_extensions import TypeAlias
from .tree import Node

# ---------- Value Model ----------

@dataclass(frozen=True)
class RlNull:
    def __repr__(self) -> str:
        return "null"

@dataclass(frozen=True)
class RlInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class RlFloat:
    value: float
    def __repr__(self) -> str:
        v = self.value
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "inf" if v > 0 else "-inf"
        # Shortest round-trip digits, positional, no trailing ".0".
        text = format(Decimal(repr(v)), "f")
        return text[:-2] if text.endswith(".0") else text

@dataclass(frozen=True)
class RlStr:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class RlBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class RlRange:
    """Iteration bound produced by `range(n)`; only meaningful as a for-loop driver."""
    count: int
    def __repr__(self) -> str:
        return f"range({self.count})"

RlValue: TypeAlias = (
    RlNull
    | RlInt
    | RlFloat
    | RlStr
    | RlBool
    | RlRange
)

@dataclass
class RlFn:
    name: str
    params: List[str]
    body: Node            # block tree
    frame: 'Frame'        # Closure frame, shared with every call and nested definition
    def __repr__(self) -> str:
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<fn {self.name} params={param_desc}>"

# ---------- Statement results ----------

@dataclass(frozen=True)
class Completed:
    """Normal completion, optionally carrying the statement's produced value."""
    value: Optional[RlValue] = None

@dataclass(frozen=True)
class Returned:
    """A `return` in flight toward the nearest call boundary."""
    value: RlValue

ExecResult: TypeAlias = Completed | Returned

# ---------- Scopes ----------

class Frame:
    """One lexical scope: local variables, local functions and a parent link."""

    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, RlValue] = {}
        self.functions: Dict[str, RlFn] = {}

    def child(self) -> 'Frame':
        return Frame(parent=self)

    def define(self, name: str, val: RlValue) -> None:
        self.vars[name] = val

    def _owner(self, name: str) -> Optional['Frame']:
        cur: Optional[Frame] = self

        while cur is not None:
            if name in cur.vars:
                return cur
            cur = cur.parent

        return None

    def get(self, name: str) -> RlValue:
        owner = self._owner(name)
        if owner is None:
            raise RillUndefinedVariable(name)

        return owner.vars[name]

    def is_defined(self, name: str) -> bool:
        return self._owner(name) is not None

    def update(self, name: str, val: RlValue) -> None:
        owner = self._owner(name)
        if owner is None:
            raise RillUndefinedVariable(name)

        owner.vars[name] = val

    def define_function(self, name: str, fn: RlFn) -> None:
        self.functions[name] = fn

    def get_function(self, name: str) -> RlFn:
        cur: Optional[Frame] = self

        while cur is not None:
            if name in cur.functions:
                return cur.functions[name]
            cur = cur.parent

        raise RillUndefinedFunction(name)

# ---------- Exceptions ----------

class RillRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.line = None
        self.column = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class RillUndefinedVariable(RillRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable '{name}'")
        self.name = name

class RillUndefinedFunction(RillRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined function '{name}'")
        self.name = name

class RillArityError(RillRuntimeError):
    pass

class RillTypeError(RillRuntimeError):
    pass

class RillDivisionByZero(RillRuntimeError):
    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)

class RillIntegerOverflow(RillRuntimeError):
    def __init__(self, op: str):
        super().__init__(f"Integer overflow in {op}")
        self.op = op
