from __future__ import annotations

from typing import Callable, Optional

from lark import Token, Tree

from .types import (
    Completed,
    ExecResult,
    Frame,
    Returned,
    RlBool,
    RlNull,
    RlValue,
    RillRuntimeError,
)
from .tree import Node, is_token, node_position

from .eval.common import token_float, token_number, token_string
from .eval.expr import eval_binary, eval_neg, eval_range
from .eval.blocks import eval_block, run_statements
from .eval.bind import eval_var_decl
from .eval.loops import eval_for_stmt, eval_if_stmt
from .eval.fn import eval_call, eval_fn_def
from .stdlib import std_print


def _maybe_attach_location(exc: RillRuntimeError, node: Node) -> None:
    if exc.line is not None:
        return

    line, column = node_position(node)
    if line is None:
        return

    exc.line = line
    exc.column = column

# ---------------- Public API ----------------

def eval_program(ast: Tree, frame: Optional[Frame]=None) -> RlValue:
    """Run a `program` tree in the root frame and return its final value.

    The result is the last value produced by a top-level statement, or the
    value of a top-level `return`, or null.
    """
    if frame is None:
        frame = Frame()

    result = run_statements(ast.children, frame, eval_stmt)

    if result.value is None:
        return RlNull()

    return result.value

def eval_expr(n: Node, frame: Frame) -> RlValue:
    try:
        return _eval_expr_inner(n, frame)
    except RillRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def eval_stmt(n: Node, frame: Frame) -> ExecResult:
    try:
        return _eval_stmt_inner(n, frame)
    except RillRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

# ---------------- Expressions ----------------

def _eval_expr_inner(n: Node, frame: Frame) -> RlValue:
    if is_token(n):
        return _eval_token(n, frame)

    handler = _EXPR_DISPATCH.get(n.data)
    if handler is None:
        raise RillRuntimeError(f"Unknown expression node: {n.data}")

    return handler(n, frame)

def _eval_token(t: Token, frame: Frame) -> RlValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, frame)

    if t.type == 'IDENT':
        return frame.get(t.value)

    raise RillRuntimeError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Statements ----------------

def _eval_stmt_inner(n: Node, frame: Frame) -> ExecResult:
    if is_token(n):
        raise RillRuntimeError(f"Expected a statement, got token {n.type}")

    match n.data:
        case 'vardecl':
            return eval_var_decl(n, frame, eval_expr)
        case 'exprstmt':
            return Completed(eval_expr(n.children[0], frame))
        case 'printstmt':
            std_print(eval_expr(n.children[0], frame))
            return Completed()
        case 'block':
            return eval_block(n, frame, eval_stmt)
        case 'ifstmt':
            return eval_if_stmt(n, frame, eval_expr, eval_stmt)
        case 'forstmt':
            return eval_for_stmt(n, frame, eval_expr, eval_stmt)
        case 'fndef':
            return eval_fn_def(n, frame)
        case 'returnstmt':
            value = eval_expr(n.children[0], frame) if n.children else RlNull()
            return Returned(value)
        case _:
            raise RillRuntimeError(f"Unknown statement node: {n.data}")

# ---------------- Dispatch ----------------

_EXPR_DISPATCH: dict[str, Callable[[Tree, Frame], RlValue]] = {
    'binary': lambda n, frame: eval_binary(n, frame, eval_expr),
    'neg': lambda n, frame: eval_neg(n, frame, eval_expr),
    'range': lambda n, frame: eval_range(n, frame, eval_expr),
    'call': lambda n, frame: eval_call(n, frame, eval_expr),
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Frame], RlValue]] = {
    'NUMBER': token_number,
    'FLOAT': token_float,
    'STRING': token_string,
    'TRUE': lambda _, __: RlBool(True),
    'FALSE': lambda _, __: RlBool(False),
    'NULL': lambda _, __: RlNull(),
}
