from __future__ import annotations

from typing import Any

from lark import Token

from ..types import Frame, RlFloat, RlInt, RlStr, RillRuntimeError
from ..tree import ident_name

_ESCAPES = {
    'n': '\n',
    't': '\t',
    '"': '"',
    '\\': '\\',
}

def expect_ident_token(node: Any, context: str) -> str:
    name = ident_name(node)
    if name is not None:
        return name

    raise RillRuntimeError(f"{context} must be an identifier")

def token_number(token: Token, _: Frame) -> RlInt:
    return RlInt(int(token.value))

def token_float(token: Token, _: Frame) -> RlFloat:
    return RlFloat(float(token.value))

def token_string(token: Token, _: Frame) -> RlStr:
    raw = token.value

    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        raw = raw[1:-1]

    if '\\' not in raw:
        return RlStr(raw)

    out = []
    chars = iter(raw)

    for ch in chars:
        if ch != '\\':
            out.append(ch)
            continue

        nxt = next(chars, '')
        # Unknown escapes are kept verbatim.
        out.append(_ESCAPES.get(nxt, '\\' + nxt))

    return RlStr(''.join(out))
