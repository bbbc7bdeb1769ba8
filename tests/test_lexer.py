from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pytest

from rill.lexer_rd import LexError, Lexer, tokenize
from rill.token_types import TT


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    expected_lines: Optional[Tuple[Tuple[str, int], ...]] = None
    exc: Optional[type[Exception]] = None
    msg: Optional[str] = None
    err_line: Optional[int] = None
    err_col: Optional[int] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, "123"),)),
    Case("number-zero", "0", expected=((TT.NUMBER, "0"),)),
    Case("number-float", "3.14", expected=((TT.FLOAT, "3.14"),)),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-snake", "foo_bar", expected=((TT.IDENT, "foo_bar"),)),
    Case("ident-leading-underscore", "_tmp1", expected=((TT.IDENT, "_tmp1"),)),
    Case("string-double", '"hello"', expected=((TT.STRING, '"hello"'),)),
    Case("string-empty", '""', expected=((TT.STRING, '""'),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true"),)),
    Case("bool-false", "false", expected=((TT.FALSE, "false"),)),
    Case("null-literal", "null", expected=((TT.NULL, "null"),)),
]

OPERATOR_CASES: List[Case] = [
    Case(f"op-{op_type.name.lower()}", op_str, expected_types=(op_type,))
    for op_str, op_type in Lexer.OPERATORS
] + [
    Case("assign-then-eq", "= ==", expected_types=(TT.ASSIGN, TT.EQ)),
    Case("lt-space-assign", "< =", expected_types=(TT.LT, TT.ASSIGN)),
]

KEYWORD_CASES: List[Case] = [
    Case(f"kw-{word}", word, expected=((kw_type, word),))
    for word, kw_type in Lexer.KEYWORDS.items()
] + [
    Case("keyword-prefix-ident", "variable", expected_types=(TT.IDENT,)),
    Case("keyword-suffix-ident", "my_if", expected_types=(TT.IDENT,)),
    Case("keyword-case-sensitive", "True", expected_types=(TT.IDENT,)),
]

CONSTRUCT_CASES: List[Case] = [
    Case(
        "var-decl",
        "var x = 5;",
        expected_types=(TT.VAR, TT.IDENT, TT.ASSIGN, TT.NUMBER, TT.SEMI),
    ),
    Case(
        "call",
        "f(a, 2)",
        expected_types=(TT.IDENT, TT.LPAR, TT.IDENT, TT.COMMA, TT.NUMBER, TT.RPAR),
    ),
    Case(
        "for-range",
        "for i in range(3) {}",
        expected_types=(TT.FOR, TT.IDENT, TT.IN, TT.RANGE, TT.LPAR, TT.NUMBER, TT.RPAR, TT.LBRACE, TT.RBRACE),
    ),
    Case("no-space-compare", "a<=b", expected_types=(TT.IDENT, TT.LTE, TT.IDENT)),
    Case("int-then-dot", "1.", expected=None, exc=LexError, msg="Unexpected character '.'"),
]

STRING_ESCAPE_CASES: List[Case] = [
    Case("newline", r'"hello\nworld"', expected=((TT.STRING, r'"hello\nworld"'),)),
    Case("tab", r'"tab\there"', expected=((TT.STRING, r'"tab\there"'),)),
    Case("quote", r'"quote\"here"', expected=((TT.STRING, r'"quote\"here"'),)),
    Case("backslash", r'"backslash\\"', expected=((TT.STRING, r'"backslash\\"'),)),
]

POSITION_CASES: List[Case] = [
    Case("simple-lines", "x\ny\n  z", expected_lines=(("x", 1), ("y", 2), ("z", 3))),
    Case("after-comment", "# header\nvalue", expected_lines=(("value", 2),)),
    Case("after-multiline-string", '"a\nb" after', expected_lines=(("after", 2),)),
]

LEX_ERROR_CASES: List[Case] = [
    Case(
        "unterminated-string",
        '"abc',
        exc=LexError,
        msg="Unterminated string",
        err_line=1,
        err_col=1,
    ),
    Case(
        "unterminated-string-later-line",
        'var x = 1;\nprint "oops;',
        exc=LexError,
        msg="Unterminated string",
        err_line=2,
        err_col=7,
    ),
    Case(
        "bang-alone",
        "!x",
        exc=LexError,
        msg="Unexpected character '!'",
        err_line=1,
        err_col=1,
    ),
    Case(
        "unknown-char",
        "x = 1 @ 2;",
        exc=LexError,
        msg="Unexpected character '@'",
        err_line=1,
        err_col=7,
    ),
    Case(
        "int-overflow",
        "9223372036854775808",
        exc=LexError,
        msg="out of range",
        err_line=1,
        err_col=1,
    ),
]


def _check_expected(case: Case) -> None:
    tokens = tokenize(case.source)
    assert tokens[-1].type == TT.EOF
    body = tokens[:-1]

    if case.expected is not None:
        assert [(tok.type, tok.value) for tok in body] == list(case.expected)

    if case.expected_types is not None:
        assert [tok.type for tok in body] == list(case.expected_types)


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda case: case.name)
def test_basic_tokens(case: Case) -> None:
    _check_expected(case)


@pytest.mark.parametrize("case", OPERATOR_CASES, ids=lambda case: case.name)
def test_operators(case: Case) -> None:
    _check_expected(case)


@pytest.mark.parametrize("case", KEYWORD_CASES, ids=lambda case: case.name)
def test_keywords(case: Case) -> None:
    _check_expected(case)


@pytest.mark.parametrize("case", CONSTRUCT_CASES, ids=lambda case: case.name)
def test_constructs(case: Case) -> None:
    if case.exc is not None:
        with pytest.raises(case.exc) as exc_info:
            tokenize(case.source)
        assert case.msg is not None
        assert case.msg in str(exc_info.value)
        return

    _check_expected(case)


@pytest.mark.parametrize("case", STRING_ESCAPE_CASES, ids=lambda case: case.name)
def test_string_escapes_are_kept_raw(case: Case) -> None:
    _check_expected(case)


def test_comments() -> None:
    source = "x = 5;  # This is a comment\ny = 10;"
    tokens = tokenize(source)
    filtered = [token for token in tokens if token.type != TT.EOF]

    expected_types = [TT.IDENT, TT.ASSIGN, TT.NUMBER, TT.SEMI, TT.IDENT, TT.ASSIGN, TT.NUMBER, TT.SEMI]
    assert [token.type for token in filtered] == expected_types


def test_empty_source_is_just_eof() -> None:
    tokens = tokenize("   \n\t# nothing here\n")
    assert [token.type for token in tokens] == [TT.EOF]


def test_column_tracking() -> None:
    tokens = tokenize("var total = 10;")
    columns = {str(token.value): token.column for token in tokens if token.type != TT.EOF}
    assert columns == {"var": 1, "total": 5, "=": 11, "10": 13, ";": 15}


@pytest.mark.parametrize("case", POSITION_CASES, ids=lambda case: case.name)
def test_position_tracking(case: Case) -> None:
    assert case.expected_lines is not None
    tokens = tokenize(case.source)
    actual_lines: Dict[str, int] = {}
    for token in tokens:
        if token.value in dict(case.expected_lines):
            actual_lines[str(token.value)] = token.line

    for value, expected_line in case.expected_lines:
        assert value in actual_lines
        assert actual_lines[value] == expected_line


@pytest.mark.parametrize("case", LEX_ERROR_CASES, ids=lambda case: case.name)
def test_lex_errors(case: Case) -> None:
    assert case.exc is not None
    assert case.msg is not None
    with pytest.raises(case.exc) as exc_info:
        tokenize(case.source)

    err = exc_info.value
    assert case.msg in str(err)

    if case.err_line is not None:
        assert (
            err.line == case.err_line
        ), f"expected line {case.err_line}, got {err.line}"
    if case.err_col is not None:
        assert (
            err.column == case.err_col
        ), f"expected col {case.err_col}, got {err.column}"
