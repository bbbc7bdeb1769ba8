"""
Lexer for Rill

Tokenizes Rill source code into a flat token list terminated by EOF.

Features:
- Single-pass tokenization
- Whitespace and newlines are separators only
- Position tracking (line, column)
- '#' line comments
"""

from typing import List

from .token_types import TT, Tok

INT64_MAX = 2 ** 63 - 1

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """Rill lexer."""

    # Keyword mapping
    KEYWORDS = {
        'var': TT.VAR,
        'print': TT.PRINT,
        'fn': TT.FN,
        'return': TT.RETURN,
        'if': TT.IF,
        'elif': TT.ELIF,
        'else': TT.ELSE,
        'for': TT.FOR,
        'in': TT.IN,
        'range': TT.RANGE,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'null': TT.NULL,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.emit(TT.EOF, None, self.line, self.column)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        if ch in (' ', '\t', '\r'):
            self.advance()
            return

        if ch == '\n':
            self.scan_newline()
            return

        # Comments
        if ch == '#':
            self.skip_comment()
            return

        # String literals
        if ch == '"':
            self.scan_string()
            return

        # Numbers
        if _is_digit(ch):
            self.scan_number()
            return

        # Identifiers and keywords
        if _is_ident_start(ch):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_newline(self):
        """Consume a newline and move the position to the next line"""
        self.pos += 1
        self.line += 1
        self.column = 1

    def scan_string(self):
        """Scan string literal: "..." """
        start_line, start_col = self.line, self.column
        value = self.advance()  # Keep opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            if self.peek() == '\\':
                # Keep escape sequence as-is
                value += self.advance()
                if self.peek() == '\n':
                    value += '\n'
                    self.scan_newline()
                elif self.pos < len(self.source):
                    value += self.advance()
            elif self.peek() == '\n':
                value += '\n'
                self.scan_newline()
            else:
                value += self.advance()

        if self.pos >= len(self.source):
            raise LexError("Unterminated string", start_line, start_col)

        value += self.advance()  # Closing quote
        self.emit(TT.STRING, value, start_line, start_col)

    def scan_number(self):
        """Scan integer or float literal"""
        start_col = self.column
        value = ''

        # Integer part
        while _is_digit(self.peek()):
            value += self.advance()

        # Decimal part
        if self.peek() == '.' and _is_digit(self.peek(1)):
            value += self.advance()  # .
            while _is_digit(self.peek()):
                value += self.advance()
            self.emit(TT.FLOAT, value, self.line, start_col)
            return

        if int(value) > INT64_MAX:
            raise LexError(f"Integer literal {value} out of range", self.line, start_col)

        self.emit(TT.NUMBER, value, self.line, start_col)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        start_col = self.column
        value = ''

        while _is_ident_start(self.peek()) or _is_digit(self.peek()):
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value, self.line, start_col)

    def scan_operator(self):
        """Scan operators and punctuation"""
        start_col = self.column

        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str, self.line, start_col)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}'", self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters on the current line and return them"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        self.column += n
        return result

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

    def emit(self, token_type: TT, value, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(type=token_type, value=value, line=line, column=column))

def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'

def _is_ident_start(ch: str) -> bool:
    return ch == '_' or 'a' <= ch <= 'z' or 'A' <= ch <= 'Z'

class LexError(Exception):
    """Lexical analysis error"""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")

def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
