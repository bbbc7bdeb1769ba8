from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    LexError,
    RillTypeError,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param('"hello";', ("string", "hello"), None, id="string-literal"),
    pytest.param('"";', ("string", ""), None, id="empty-string"),
    pytest.param('"foo" + "bar";', ("string", "foobar"), None, id="concat"),
    pytest.param('"a" + "b" + "c";', ("string", "abc"), None, id="concat-chain"),
    pytest.param('"" + "x";', ("string", "x"), None, id="concat-empty"),
    pytest.param(r'"line\nbreak";', ("string", "line\nbreak"), None, id="escape-newline"),
    pytest.param(r'"tab\there";', ("string", "tab\there"), None, id="escape-tab"),
    pytest.param(r'"say \"hi\"";', ("string", 'say "hi"'), None, id="escape-quote"),
    pytest.param(r'"back\\slash";', ("string", "back\\slash"), None, id="escape-backslash"),
    pytest.param(r'"keep\qthis";', ("string", "keep\\qthis"), None, id="escape-unknown-verbatim"),
    pytest.param('"two\nlines";', ("string", "two\nlines"), None, id="literal-newline"),
    pytest.param('"zz" < "aaa";', ("bool", True), None, id="ordering-by-length-lt"),
    pytest.param('"aaa" > "zz";', ("bool", True), None, id="ordering-by-length-gt"),
    pytest.param('"abc" < "xyz";', ("bool", False), None, id="ordering-same-length"),
    pytest.param('"abc" <= "xyz";', ("bool", True), None, id="ordering-lte-same-length"),
    pytest.param('"abcd" >= "xyz";', ("bool", True), None, id="ordering-gte-longer"),
    pytest.param('"ab" >= "xyz";', ("bool", False), None, id="ordering-gte-shorter"),
    pytest.param('"éé" < "abc";', ("bool", False), None, id="ordering-counts-utf8-bytes"),
    pytest.param('"é" > "a";', ("bool", True), None, id="ordering-multibyte-longer"),
    pytest.param('"éé" >= "abcd";', ("bool", True), None, id="ordering-multibyte-equal-bytes"),
    pytest.param('"abc" == "abd";', ("bool", False), None, id="equality-by-content"),
    pytest.param('"a" < 1;', None, RillTypeError, id="ordering-mixed-error"),
    pytest.param('"unterminated;', None, LexError, id="unterminated-string"),
    pytest.param(
        dedent(
            """\
            var greeting = "hello";
            var name = "world";
            greeting + ", " + name;
        """
        ),
        ("string", "hello, world"),
        None,
        id="concat-variables",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_strings(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_print_writes_strings_raw(capsys: pytest.CaptureFixture[str]) -> None:
    run_runtime_case(r'print "a\tb"; print "q\"q";', None, None)

    assert capsys.readouterr().out == 'a\tb\nq"q\n'
