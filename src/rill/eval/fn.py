from __future__ import annotations

from typing import Any, Callable, List

from lark import Tree

from ..types import Completed, ExecResult, Frame, RlFn, RlValue, RillRuntimeError
from ..tree import Node, ident_name, tree_children
from .common import expect_ident_token as _expect_ident_token

EvalFunc = Callable[[Node, Frame], RlValue]

def extract_param_names(params_node: Any) -> List[str]:
    names: List[str] = []

    for p in tree_children(params_node):
        name = ident_name(p)

        if name is None:
            raise RillRuntimeError(f"Unsupported parameter node: {p}")
        names.append(name)

    return names

def eval_fn_def(n: Tree, frame: Frame) -> ExecResult:
    name_node, params_node, body_node = n.children
    name = _expect_ident_token(name_node, "Function name")
    params = extract_param_names(params_node)

    # The closure is the defining frame itself, not a copy.
    frame.define_function(name, RlFn(name=name, params=params, body=body_node, frame=frame))

    return Completed()

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> RlValue:
    from ..runtime import call_rlfn  # local import to avoid cycle

    name_node, args_node = n.children
    fn = frame.get_function(_expect_ident_token(name_node, "Callee"))

    return call_rlfn(fn, tree_children(args_node), frame, eval_func)
