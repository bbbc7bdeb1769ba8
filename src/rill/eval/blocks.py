from __future__ import annotations

from typing import Callable, Iterable, Optional

from lark import Tree

from ..types import Completed, ExecResult, Frame, Returned, RlValue
from ..tree import Node

ExecFunc = Callable[[Node, Frame], ExecResult]

def run_statements(stmts: Iterable[Node], frame: Frame, exec_func: ExecFunc) -> ExecResult:
    """Run statements in `frame`, stopping at the first Returned.

    Completes with the value of the last statement that produced one.
    """
    last: Optional[RlValue] = None

    for stmt in stmts:
        result = exec_func(stmt, frame)

        if isinstance(result, Returned):
            return result

        if result.value is not None:
            last = result.value

    return Completed(last)

def exec_block_in(block: Tree, frame: Frame, exec_func: ExecFunc) -> ExecResult:
    """Run a block's statements directly in an already-prepared scope."""
    return run_statements(block.children, frame, exec_func)

def eval_block(n: Tree, frame: Frame, exec_func: ExecFunc) -> ExecResult:
    return exec_block_in(n, frame.child(), exec_func)
