from __future__ import annotations

from typing import Callable, List

from .tree import Node
from .types import (
    Frame,
    RlFn,
    RlNull,
    RlValue,
    Returned,
    RillArityError,
)

EvalFunc = Callable[[Node, Frame], RlValue]

def call_rlfn(fn: RlFn, arg_nodes: List[Node], caller_frame: Frame, eval_func: EvalFunc) -> RlValue:
    """
    Call semantics:
    - arity must match len(fn.params) exactly, checked before any argument runs
    - arguments are evaluated in the caller's frame
    - parameters are bound in a fresh frame whose parent is the closure frame
    - a Returned ends the call; otherwise the body's last produced value, or null
    """
    from .evaluator import eval_stmt  # local import to avoid cycle
    from .eval.blocks import exec_block_in

    if len(arg_nodes) != len(fn.params):
        raise RillArityError(f"Function '{fn.name}' expects {len(fn.params)} args; got {len(arg_nodes)}")

    args = [eval_func(node, caller_frame) for node in arg_nodes]

    callee_frame = fn.frame.child()

    for name, val in zip(fn.params, args):
        callee_frame.define(name, val)

    result = exec_block_in(fn.body, callee_frame, eval_stmt)

    if isinstance(result, Returned):
        return result.value

    return result.value if result.value is not None else RlNull()
