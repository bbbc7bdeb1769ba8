from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from .evaluator import eval_program
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse_source
from .types import Frame, RlNull, RlValue, RillRuntimeError

DEFAULT_RECURSION_LIMIT = 20000

def configure_recursion_limit() -> int:
    """Raise the interpreter recursion limit from RILL_RECURSION_LIMIT (never lowers it)."""
    raw = os.getenv("RILL_RECURSION_LIMIT")
    limit = DEFAULT_RECURSION_LIMIT

    if raw is not None:
        try:
            limit = int(raw)
        except ValueError:
            raise SystemExit(f"RILL_RECURSION_LIMIT must be an integer, got {raw!r}") from None

    if limit > sys.getrecursionlimit():
        sys.setrecursionlimit(limit)

    return sys.getrecursionlimit()

def run(src: str, frame: Optional[Frame]=None) -> RlValue:
    """Lex, parse and evaluate `src`; the first error propagates to the caller."""
    return eval_program(parse_source(src), frame)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main() -> None:
    mode = "run"
    arg = None

    for token in sys.argv[1:]:
        if token == "--tokens":
            mode = "tokens"
            continue

        if token == "--ast":
            mode = "ast"
            continue

        if token == "--repl":
            mode = "repl"
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if mode == "repl":
        if arg is not None:
            raise SystemExit(f"Unexpected argument: {arg}")

        from .repl import repl  # local import to avoid cycle

        configure_recursion_limit()
        repl()
        return

    source = _load_source(arg or "-")

    try:
        if mode == "tokens":
            for tok in tokenize(source):
                print(tok)
            return

        if mode == "ast":
            print(parse_source(source).pretty())
            return

        configure_recursion_limit()
        result = run(source)
    except (LexError, ParseError) as e:
        print(f"syntax error: {e}", file=sys.stderr)
        sys.exit(2)
    except RillRuntimeError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except RecursionError:
        print("error: maximum recursion depth exceeded", file=sys.stderr)
        sys.exit(1)

    if not isinstance(result, RlNull):
        print(repr(result))

if __name__ == "__main__":
    main()
