"""Shared helpers for working with the lark Tree/Token nodes that make up the AST."""
from __future__ import annotations
from typing import List, Optional, Tuple, TypeGuard
from typing_extensions import TypeAlias

from lark import Token, Tree

Node: TypeAlias = Tree | Token


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def ident_name(node: Node) -> Optional[str]:
    if is_token(node) and node.type == 'IDENT':
        return str(node.value)

    return None

def node_position(node: Node) -> Tuple[Optional[int], Optional[int]]:
    """Line/column of the first token under `node` that carries a position."""
    if is_token(node):
        return getattr(node, 'line', None), getattr(node, 'column', None)

    for child in tree_children(node):
        line, column = node_position(child)
        if line is not None:
            return line, column

    return None, None
