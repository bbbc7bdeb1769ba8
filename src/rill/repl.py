"""Interactive REPL for Rill, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError
from .repl_highlight import RillLexer
from .runner import run
from .token_types import TT
from .types import Frame, RlNull, RillRuntimeError

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => description.
_SLASH_CMDS = {
    "/clear": "Clear the terminal screen",
    "/reset": "Reset the REPL environment",
    "/vars": "List variables and functions bound at top level",
}

INDENT = "    "


def brace_depth(text: str) -> int | None:
    """Return the count of unclosed `{` in *text*, or None while a string is still open.

    Any other lex error counts as complete so the submission surfaces it.
    """
    try:
        tokens = tokenize(text)
    except LexError as exc:
        if exc.message.startswith("Unterminated string"):
            return None
        return 0

    depth = 0
    for tok in tokens:
        if tok.type == TT.LBRACE:
            depth += 1
        elif tok.type == TT.RBRACE:
            depth = max(depth - 1, 0)

    return depth


def is_complete(text: str) -> bool:
    return brace_depth(text) == 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, desc in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, frame_box: list[Frame]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    cmd = stripped.split(None, 1)[0]

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/reset":
        frame_box[0] = Frame()
        print("Environment reset.")
        return True

    if cmd == "/vars":
        frame = frame_box[0]
        for name, value in sorted(frame.vars.items()):
            print(f"{name} = {value!r}")
        for _, fn in sorted(frame.functions.items()):
            print(repr(fn))
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def submit(text: str, frame_box: list[Frame]) -> None:
    """Run one submission, printing a non-null result or the error."""
    text = _normalize(text)
    if not text.strip():
        return

    if handle_slash(text, frame_box):
        return

    try:
        result = run(text, frame_box[0])
    except (ParseError, LexError) as exc:
        print(f"syntax error: {exc}", file=sys.stderr)
        return
    except RillRuntimeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return
    except RecursionError:
        print("error: maximum recursion depth exceeded", file=sys.stderr)
        return

    if not isinstance(result, RlNull):
        print(repr(result))


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the frame.
    frame_box: list[Frame] = [Frame()]

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.lstrip().startswith("/") or is_complete(text):
            buf.validate_and_handle()
            return

        # Open braces or an open string: keep reading lines.
        depth = brace_depth(text) or 0
        buf.insert_text("\n" + INDENT * depth)

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=RillLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("rill repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        submit(text, frame_box)
