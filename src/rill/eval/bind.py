from __future__ import annotations

from typing import Callable

from lark import Tree

from ..types import Completed, ExecResult, Frame, RlValue
from ..tree import Node
from .common import expect_ident_token

EvalFunc = Callable[[Node, Frame], RlValue]

def assign_ident(name: str, value: RlValue, frame: Frame) -> None:
    # `var` never shadows: a name visible anywhere in the chain is rebound
    # where it lives, and only an unknown name gets a fresh local binding.
    if frame.is_defined(name):
        frame.update(name, value)
    else:
        frame.define(name, value)

def eval_var_decl(n: Tree, frame: Frame, eval_func: EvalFunc) -> ExecResult:
    name_node, value_node = n.children
    name = expect_ident_token(name_node, "Variable name")
    value = eval_func(value_node, frame)
    assign_ident(name, value, frame)

    return Completed()
