"""prompt_toolkit lexer for live Rill syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import LexError, tokenize
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

_TT_GROUP = {
    TT.VAR: "keyword",
    TT.PRINT: "keyword",
    TT.FN: "keyword",
    TT.RETURN: "keyword",
    TT.IF: "keyword",
    TT.ELIF: "keyword",
    TT.ELSE: "keyword",
    TT.FOR: "keyword",
    TT.IN: "keyword",
    TT.RANGE: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NULL: "constant",
    TT.NUMBER: "number",
    TT.FLOAT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.LT: "operator",
    TT.LTE: "operator",
    TT.GT: "operator",
    TT.GTE: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
}


def _gap_fragments(gap: str) -> StyleAndTextTuples:
    """Whitespace between tokens, with a trailing `#` comment styled."""
    hash_idx = gap.find("#")
    if hash_idx < 0:
        return [("", gap)]

    out: StyleAndTextTuples = []
    if hash_idx > 0:
        out.append(("", gap[:hash_idx]))
    out.append((GROUP_STYLE["comment"], gap[hash_idx:]))
    return out


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = tokenize(text)
    except LexError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF:
            continue

        tok_text = str(tok.value)
        idx = text.find(tok_text, pos)
        if idx < 0:
            continue

        if idx > pos:
            result.extend(_gap_fragments(text[pos:idx]))

        group = _TT_GROUP.get(tok.type, "")
        # A name directly followed by '(' is a call or a definition.
        if tok.type == TT.IDENT and tokens[i + 1].type == TT.LPAR:
            group = "function"
        result.append((GROUP_STYLE.get(group, ""), tok_text))
        pos = idx + len(tok_text)

    if pos < len(text):
        result.extend(_gap_fragments(text[pos:]))

    return result if result else [("", text)]


class RillLexer(Lexer):
    """prompt_toolkit Lexer that highlights Rill source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
