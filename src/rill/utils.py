"""Operators over runtime values.

Numeric promotion: Int op Int stays Int, any Float operand makes the result a
Float; Int results outside the signed 64-bit range raise RillIntegerOverflow.
Ordering on two strings compares their UTF-8 byte lengths, not their contents.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

from .types import (
    RlValue,
    RlNull,
    RlInt,
    RlFloat,
    RlStr,
    RlBool,
    RlRange,
    RillDivisionByZero,
    RillIntegerOverflow,
    RillTypeError,
)

Number = int | float

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def _numeric_pair(lhs: RlValue, rhs: RlValue) -> Optional[Tuple[Number, Number, bool]]:
    """Unwrap two numeric operands, reporting whether the result promotes to Float."""
    match (lhs, rhs):
        case (RlInt(value=a), RlInt(value=b)):
            return a, b, False
        case (RlInt(value=a) | RlFloat(value=a), RlInt(value=b) | RlFloat(value=b)):
            return float(a), float(b), True
        case _:
            return None

def _type_name(value: RlValue) -> str:
    return type(value).__name__[2:]

def _mismatch(op: str, lhs: RlValue, rhs: RlValue) -> RillTypeError:
    return RillTypeError(f"Invalid operand types for {op}: {_type_name(lhs)} and {_type_name(rhs)}")

def _checked_int(op: str, value: int) -> RlInt:
    if not INT64_MIN <= value <= INT64_MAX:
        raise RillIntegerOverflow(op)

    return RlInt(value)

def _wrap(op: str, value: Number, is_float: bool) -> RlValue:
    return RlFloat(float(value)) if is_float else _checked_int(op, int(value))

def _arith(op: str, lhs: RlValue, rhs: RlValue, fn: Callable[[Number, Number], Number]) -> RlValue:
    pair = _numeric_pair(lhs, rhs)
    if pair is None:
        raise _mismatch(op, lhs, rhs)

    a, b, is_float = pair
    return _wrap(op, fn(a, b), is_float)

def add(lhs: RlValue, rhs: RlValue) -> RlValue:
    if isinstance(lhs, RlStr) and isinstance(rhs, RlStr):
        return RlStr(lhs.value + rhs.value)

    return _arith('+', lhs, rhs, lambda a, b: a + b)

def subtract(lhs: RlValue, rhs: RlValue) -> RlValue:
    return _arith('-', lhs, rhs, lambda a, b: a - b)

def multiply(lhs: RlValue, rhs: RlValue) -> RlValue:
    return _arith('*', lhs, rhs, lambda a, b: a * b)

def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def divide(lhs: RlValue, rhs: RlValue) -> RlValue:
    if rhs in (RlInt(0), RlFloat(0.0)):
        raise RillDivisionByZero()

    pair = _numeric_pair(lhs, rhs)
    if pair is None:
        raise _mismatch('/', lhs, rhs)

    a, b, is_float = pair
    if is_float:
        return RlFloat(a / b)

    return _checked_int('/', _trunc_div(int(a), int(b)))

def negate(operand: RlValue) -> RlValue:
    match operand:
        case RlInt(value=v):
            return _checked_int('unary -', -v)
        case RlFloat(value=v):
            return RlFloat(-v)
        case _:
            raise RillTypeError(f"Invalid operand type for unary -: {_type_name(operand)}")

def rl_equals(lhs: RlValue, rhs: RlValue) -> bool:
    # Different variants never compare equal, so Int(1) != Float(1.0).
    return type(lhs) is type(rhs) and lhs == rhs

def equal(lhs: RlValue, rhs: RlValue) -> RlBool:
    return RlBool(rl_equals(lhs, rhs))

def not_equal(lhs: RlValue, rhs: RlValue) -> RlBool:
    return RlBool(not rl_equals(lhs, rhs))

def _byte_len(s: RlStr) -> int:
    return len(s.value.encode("utf-8"))

def _ordered(op: str, lhs: RlValue, rhs: RlValue, fn: Callable[[Number, Number], bool]) -> RlBool:
    if isinstance(lhs, RlStr) and isinstance(rhs, RlStr):
        return RlBool(fn(_byte_len(lhs), _byte_len(rhs)))

    pair = _numeric_pair(lhs, rhs)
    if pair is None:
        raise _mismatch(op, lhs, rhs)

    a, b, _ = pair
    return RlBool(fn(a, b))

def less_than(lhs: RlValue, rhs: RlValue) -> RlBool:
    return _ordered('<', lhs, rhs, lambda a, b: a < b)

def greater_than(lhs: RlValue, rhs: RlValue) -> RlBool:
    return _ordered('>', lhs, rhs, lambda a, b: a > b)

def less_than_equal(lhs: RlValue, rhs: RlValue) -> RlBool:
    return _ordered('<=', lhs, rhs, lambda a, b: a <= b)

def greater_than_equal(lhs: RlValue, rhs: RlValue) -> RlBool:
    return _ordered('>=', lhs, rhs, lambda a, b: a >= b)

def stringify(value: RlValue) -> str:
    """Text written by `print`: strings raw, everything else in literal form."""
    match value:
        case RlStr(value=s):
            return s
        case RlNull() | RlInt() | RlFloat() | RlBool() | RlRange():
            return repr(value)
        case _:
            raise RillTypeError(f"Cannot render {type(value).__name__}")
