from __future__ import annotations

from typing import Callable, Dict

from lark import Tree

from ..types import Frame, RlInt, RlRange, RlValue, RillRuntimeError, RillTypeError
from ..tree import Node
from .. import utils

EvalFunc = Callable[[Node, Frame], RlValue]

BinaryOp = Callable[[RlValue, RlValue], RlValue]

BINARY_OPERATORS: Dict[str, BinaryOp] = {
    '+': utils.add,
    '-': utils.subtract,
    '*': utils.multiply,
    '/': utils.divide,
    '==': utils.equal,
    '!=': utils.not_equal,
    '<': utils.less_than,
    '>': utils.greater_than,
    '<=': utils.less_than_equal,
    '>=': utils.greater_than_equal,
}

def apply_binary_operator(op: str, lhs: RlValue, rhs: RlValue) -> RlValue:
    handler = BINARY_OPERATORS.get(op)
    if handler is None:
        raise RillRuntimeError(f"Unknown operator {op}")

    return handler(lhs, rhs)

def eval_binary(n: Tree, frame: Frame, eval_func: EvalFunc) -> RlValue:
    left, op, right = n.children
    lhs = eval_func(left, frame)
    rhs = eval_func(right, frame)

    return apply_binary_operator(str(op.value), lhs, rhs)

def eval_neg(n: Tree, frame: Frame, eval_func: EvalFunc) -> RlValue:
    return utils.negate(eval_func(n.children[0], frame))

def eval_range(n: Tree, frame: Frame, eval_func: EvalFunc) -> RlRange:
    bound = eval_func(n.children[0], frame)

    match bound:
        case RlInt(value=count) if count >= 0:
            return RlRange(count)
        case RlInt(value=count):
            raise RillTypeError(f"range bound must be non-negative, got {count}")
        case _:
            raise RillTypeError(f"range bound must be an Int, got {type(bound).__name__[2:]}")
