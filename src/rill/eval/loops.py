from __future__ import annotations

from typing import Callable, Optional

from lark import Tree

from ..types import Completed, ExecResult, Frame, Returned, RlBool, RlInt, RlRange, RlValue, RillTypeError
from ..tree import Node, tree_label
from .blocks import exec_block_in
from .common import expect_ident_token

EvalFunc = Callable[[Node, Frame], RlValue]
ExecFunc = Callable[[Node, Frame], ExecResult]

def eval_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> ExecResult:
    cond_node, then_node, *rest = n.children
    cond = eval_func(cond_node, frame)

    if not isinstance(cond, RlBool):
        raise RillTypeError(f"if condition must be a Bool, got {type(cond).__name__[2:]}")

    if cond.value:
        branch: Optional[Node] = then_node
    else:
        branch = rest[0] if rest else None

    if branch is None:
        return Completed()

    # elif: the else slot holds another ifstmt, which scopes its own branches.
    if tree_label(branch) == 'ifstmt':
        return exec_func(branch, frame)

    return exec_block_in(branch, frame.child(), exec_func)

def eval_for_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> ExecResult:
    var_node, iter_node, body = n.children
    var_name = expect_ident_token(var_node, "Loop variable")
    bound = eval_func(iter_node, frame)

    if not isinstance(bound, RlRange):
        raise RillTypeError(f"for loop requires a range, got {type(bound).__name__[2:]}")

    last: Optional[RlValue] = None

    for i in range(bound.count):
        iteration = frame.child()
        iteration.define(var_name, RlInt(i))
        result = exec_block_in(body, iteration, exec_func)

        if isinstance(result, Returned):
            return result

        if result.value is not None:
            last = result.value

    return Completed(last)
