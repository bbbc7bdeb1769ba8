"""
Recursive Descent Parser for Rill

Structure:
- Lexer: Token list from source (lexer_rd)
- Parser: Recursive descent for statements, precedence climbing for expressions
- AST: lark Tree/Token nodes

Statement labels: program, vardecl, exprstmt, printstmt, block, ifstmt,
forstmt, fndef, returnstmt.
Expression labels: binary, call, range, neg; literals and names are Tokens
(NUMBER, FLOAT, STRING, TRUE, FALSE, NULL, IDENT).
"""

from enum import IntEnum
from typing import Iterable, List, Optional
from lark import Tree, Token

from .token_types import TT, Tok

# ============================================================================
# Parser
# ============================================================================

class ParseError(SyntaxError):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

class Precedence(IntEnum):
    LOWEST = 0
    COMPARE = 1   # == != < > <= >=
    SUM = 2       # + -
    PRODUCT = 3   # * /

BINARY_PRECEDENCE = {
    TT.EQ: Precedence.COMPARE,
    TT.NEQ: Precedence.COMPARE,
    TT.LT: Precedence.COMPARE,
    TT.GT: Precedence.COMPARE,
    TT.LTE: Precedence.COMPARE,
    TT.GTE: Precedence.COMPARE,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.STAR: Precedence.PRODUCT,
    TT.SLASH: Precedence.PRODUCT,
}

def precedence(tok: Tok) -> Precedence:
    return BINARY_PRECEDENCE.get(tok.type, Precedence.LOWEST)

class Parser:
    """
    Recursive descent parser for Rill.

    Expression precedence (lowest to highest):
    1. compare (==, !=, <, >, <=, >=)
    2. sum (+, -)
    3. product (*, /)
    4. unary minus
    5. primary (literals, identifiers, calls, range(...), parens)

    Any unexpected token raises ParseError immediately; there is no recovery.
    """

    def __init__(self, tokens: Iterable[Tok]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TT.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Tok(TT.EOF, None, line, 0))
        self.pos = 0
        self.current = self.tokens[0]

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    def _ident(self, tok: Tok) -> Token:
        return Token('IDENT', tok.value, line=tok.line, column=tok.column)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        stmts = []

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())

        return Tree('program', stmts)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """Parse a single statement, dispatching on its leading token."""
        if self.check(TT.VAR):
            return self.parse_var_decl()
        if self.check(TT.PRINT):
            return self.parse_print_stmt()
        if self.check(TT.FN):
            return self.parse_fn_stmt()
        if self.check(TT.RETURN):
            return self.parse_return_stmt()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.FOR):
            return self.parse_for_stmt()
        if self.check(TT.LBRACE):
            return self.parse_block()

        # Assignment: identifier directly followed by '='
        if self.check(TT.IDENT) and self.peek(1).type == TT.ASSIGN:
            name = self.advance()
            self.advance()  # =
            value = self.parse_expr()
            self.expect(TT.SEMI, "Expected ';' after assignment")
            return Tree('vardecl', [self._ident(name), value])

        expr = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after expression")
        return Tree('exprstmt', [expr])

    def parse_var_decl(self) -> Tree:
        """Parse declaration: var name = expr;"""
        self.expect(TT.VAR)
        name = self.expect(TT.IDENT, "Expected variable name after 'var'")
        self.expect(TT.ASSIGN, "Expected '=' after variable name")
        value = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after variable declaration")
        return Tree('vardecl', [self._ident(name), value])

    def parse_print_stmt(self) -> Tree:
        """Parse print statement: print expr;"""
        self.expect(TT.PRINT)
        value = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after print")
        return Tree('printstmt', [value])

    def parse_fn_stmt(self) -> Tree:
        """Parse function declaration: fn name(params) { body }"""
        self.expect(TT.FN)
        name = self.expect(TT.IDENT, "Expected function name after 'fn'")

        self.expect(TT.LPAR, "Expected '(' after function name")
        params = self.parse_param_list()
        self.expect(TT.RPAR, "Expected ')' after parameters")

        body = self.parse_block()
        return Tree('fndef', [self._ident(name), params, body])

    def parse_return_stmt(self) -> Tree:
        """Parse return statement: return [expr];"""
        self.expect(TT.RETURN)

        if self.match(TT.SEMI):
            return Tree('returnstmt', [])

        value = self.parse_expr()
        self.expect(TT.SEMI, "Expected ';' after return value")
        return Tree('returnstmt', [value])

    def parse_if_stmt(self) -> Tree:
        """
        Parse if statement:
        if expr { body } [elif expr { body }]* [else { body }]

        Each elif becomes a nested ifstmt in the else position.
        """
        self.advance()  # if / elif
        cond = self.parse_expr()
        then_body = self.parse_block()

        if self.check(TT.ELIF):
            return Tree('ifstmt', [cond, then_body, self.parse_if_stmt()])

        if self.match(TT.ELSE):
            else_body = self.parse_block()
            return Tree('ifstmt', [cond, then_body, else_body])

        return Tree('ifstmt', [cond, then_body])

    def parse_for_stmt(self) -> Tree:
        """Parse for loop: for x in expr { body }"""
        self.expect(TT.FOR)
        var = self.expect(TT.IDENT, "Expected loop variable after 'for'")
        self.expect(TT.IN, "Expected 'in' after loop variable")
        iterable = self.parse_expr()
        body = self.parse_block()
        return Tree('forstmt', [self._ident(var), iterable, body])

    def parse_block(self) -> Tree:
        """Parse brace block: { stmts }"""
        self.expect(TT.LBRACE, "Expected '{'")

        stmts = []
        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                raise ParseError("Expected '}' before end of input", self.current)
            stmts.append(self.parse_statement())

        self.expect(TT.RBRACE)
        return Tree('block', stmts)

    def parse_param_list(self) -> Tree:
        """Parse function parameter list"""
        params = []

        if self.check(TT.RPAR):
            return Tree('paramlist', params)

        while True:
            param = self.expect(TT.IDENT, "Expected parameter name")
            params.append(self._ident(param))

            if not self.match(TT.COMMA):
                break

        return Tree('paramlist', params)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self, prec: Precedence = Precedence.LOWEST) -> Tree:
        """
        Precedence climbing: parse a primary, then keep folding operators that
        bind tighter than `prec`. Equal-precedence chains come out
        left-associative because the right operand is parsed at the
        operator's own precedence.
        """
        left = self.parse_unary_expr()

        while precedence(self.current) > prec:
            op = self.advance()
            right = self.parse_expr(precedence(op))
            left = Tree('binary', [left, Token(op.type.name, op.value, line=op.line, column=op.column), right])

        return left

    def parse_unary_expr(self) -> Tree:
        """Parse unary minus: -expr"""
        if self.check(TT.MINUS):
            self.advance()
            operand = self.parse_unary_expr()
            return Tree('neg', [operand])

        return self.parse_primary_expr()

    def parse_primary_expr(self) -> Tree:
        """
        Parse primary expressions:
        - Literals (numbers, floats, strings, true, false, null)
        - Identifiers and calls
        - range(expr)
        - Parenthesized expressions
        """
        tok = self.current

        if self.check(TT.NUMBER, TT.FLOAT, TT.STRING, TT.TRUE, TT.FALSE, TT.NULL):
            self.advance()
            return Token(tok.type.name, tok.value, line=tok.line, column=tok.column)

        if self.check(TT.IDENT):
            self.advance()
            name = self._ident(tok)

            if self.match(TT.LPAR):
                args = self.parse_arg_list()
                self.expect(TT.RPAR, "Expected ')' after arguments")
                return Tree('call', [name, Tree('arglist', args)])

            return name

        if self.match(TT.RANGE):
            self.expect(TT.LPAR, "Expected '(' after 'range'")
            bound = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')' after range bound")
            return Tree('range', [bound])

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')'")
            return expr

        raise ParseError(f"Unexpected token {tok.type.name}", tok)

    def parse_arg_list(self) -> List[Tree]:
        """Parse comma-separated call arguments"""
        args: List[Tree] = []

        if self.check(TT.RPAR):
            return args

        while True:
            args.append(self.parse_expr())

            if not self.match(TT.COMMA):
                break

        return args

def parse_source(source: str) -> Tree:
    """Parse Rill source code to a `program` tree."""
    from .lexer_rd import tokenize

    parser = Parser(tokenize(source))
    return parser.parse()


def parse_expr_fragment(source: str) -> Tree:
    """Parse a standalone expression, requiring it to consume the whole input."""
    from .lexer_rd import tokenize

    parser = Parser(tokenize(source))
    expr = parser.parse_expr()

    if not parser.check(TT.EOF):
        raise ParseError("Unexpected tokens after expression fragment", parser.current)
    return expr
