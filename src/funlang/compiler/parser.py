"""
funlang Recursive Descent Parser
================================

This module turns the scanner's token stream into an Abstract Syntax
Tree. Statements are parsed by recursive descent; expressions by
precedence climbing (a Pratt parser).

Grammar (Simplified EBNF)
-------------------------
program      ::= (decl_header IDENTIFIER '(' ')' '{' statement* '}')*
statement    ::= return_stmt | let_stmt | if_stmt
return_stmt  ::= 'return' expr? ';'
let_stmt     ::= 'let' IDENTIFIER '=' expr ';'
if_stmt      ::= 'if' '(' expr ')' expr ('else' expr)? ';'
expr         ::= unary | binary | call | symbol | constant | '(' expr ')'

decl_header is any single token; it is consumed and ignored. Source
normally spells it ``fun``.

Binding Powers (higher binds tighter)
-------------------------------------
| Operator | Position | Left | Right |
|----------|----------|------|-------|
| + -      | infix    | 1    | 2     |
| * /      | infix    | 3    | 4     |
| -        | prefix   |      | 5     |

A right power one above the left power makes every infix operator
left-associative: ``1 - 2 - 3`` parses as ``(1 - 2) - 3``.

Statement Terminators
---------------------
Every statement must end with ';'. A missing semicolon is reported as an
unexpected token rather than silently accepted.

Example Usage
-------------
>>> from funlang.compiler.parser import parse_source
>>> program = parse_source("fun main() { return 1 + 2 * 3; }")
>>> program.functions[0].name
'main'
"""

import logging
from typing import Iterable, Iterator, Optional

from funlang.compiler.scanner import Scanner, Token, TokenType
from funlang.compiler.ast import (
    Program,
    FuncDecl,
    Stmt,
    Assignment,
    Return,
    Conditional,
    Expr,
    Constant,
    Binary,
    Unary,
    Call,
    Symbol,
    Op,
)
from funlang.compiler.errors import (
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Binding Power Tables
# =============================================================================

INFIX_BINDING_POWER: dict[TokenType, tuple[int, int]] = {
    TokenType.PLUS: (1, 2),
    TokenType.MINUS: (1, 2),
    TokenType.STAR: (3, 4),
    TokenType.SLASH: (3, 4),
}

PREFIX_BINDING_POWER: dict[TokenType, int] = {
    TokenType.MINUS: 5,
}

INFIX_OPERATORS: dict[TokenType, Op] = {
    TokenType.PLUS: Op.ADD,
    TokenType.MINUS: Op.SUB,
    TokenType.STAR: Op.MUL,
    TokenType.SLASH: Op.DIV,
}

PREFIX_OPERATORS: dict[TokenType, Op] = {
    TokenType.MINUS: Op.SUB,
}

# Tokens that may begin an expression
EXPRESSION_START = frozenset({
    TokenType.NUMBER,
    TokenType.IDENTIFIER,
    TokenType.LPAREN,
    *PREFIX_BINDING_POWER,
})


def infix_binding_power(token_type: TokenType) -> Optional[tuple[int, int]]:
    """Return (left, right) binding power, or None if not an infix operator."""
    return INFIX_BINDING_POWER.get(token_type)


def prefix_binding_power(token_type: TokenType) -> Optional[int]:
    """Return the right binding power, or None if not a prefix operator."""
    return PREFIX_BINDING_POWER.get(token_type)


# =============================================================================
# Token Cursor
# =============================================================================

class TokenStream:
    """
    Cursor over a token source with one token of lookahead.

    The source can be a list or a lazy iterator such as a Scanner; it is
    consumed as the parser advances.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._peeked: Optional[Token] = None
        self._has_peeked = False

    def peek(self) -> Optional[Token]:
        """Look at the next token without consuming it (None at end)."""
        if not self._has_peeked:
            self._peeked = next(self._tokens, None)
            self._has_peeked = True
        return self._peeked

    def next(self) -> Optional[Token]:
        """Consume and return the next token (None at end)."""
        token = self.peek()
        self._has_peeked = False
        self._peeked = None
        return token

    def at_end(self) -> bool:
        return self.peek() is None

    def check(self, *types: TokenType) -> bool:
        """Check if the next token is one of the given types."""
        token = self.peek()
        return token is not None and token.type in types

    def match(self, *types: TokenType) -> Optional[Token]:
        """Consume the next token if it is one of the given types."""
        if self.check(*types):
            return self.next()
        return None

    def expect_next(self, expected: Optional[str] = None) -> Token:
        """
        Consume the next token, whatever it is.

        Raises:
            UnexpectedEndOfInputError: If no token remains
        """
        token = self.next()
        if token is None:
            raise UnexpectedEndOfInputError(expected)
        return token

    def expect(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """
        Consume a token of a specific type.

        Raises:
            UnexpectedTokenError: If the next token has another type
            UnexpectedEndOfInputError: If no token remains
        """
        expected = expected or token_type.name.lower()
        token = self.expect_next(expected)
        if token.type is not token_type:
            raise UnexpectedTokenError(token, expected)
        return token

    def expect_identifier(self, expected: str = "identifier") -> str:
        """Consume an identifier and return its name."""
        return self.expect(TokenType.IDENTIFIER, expected).value


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Recursive descent parser for funlang.

    There is no error recovery: the first error aborts the whole parse.

    Usage:
        parser = Parser(tokens)
        program = parser.parse()
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Args:
            tokens: Tokens from the scanner (list or lazy iterator)
        """
        self.tokens = TokenStream(tokens)

    def parse(self) -> Program:
        """
        Parse the whole token stream.

        Returns:
            Program with the functions in source order

        Raises:
            ParseError: On the first token that does not fit the grammar
        """
        program = Program()

        while not self.tokens.at_end():
            program.functions.append(self._parse_function())

        logger.debug("Parsed %d function(s)", len(program.functions))
        return program

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_function(self) -> FuncDecl:
        """Parse one function declaration."""
        header = self.tokens.next()  # declaration keyword slot, ignored

        name = self.tokens.expect_identifier("function name")

        # Parameters are not supported: the list must be empty
        self.tokens.expect(TokenType.LPAREN, "'('")
        self.tokens.expect(TokenType.RPAREN, "')' (functions take no parameters)")

        self.tokens.expect(TokenType.LBRACE, "'{'")
        body = self._parse_statements()

        return FuncDecl(name=name, body=body, location=header.location)

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statements(self) -> list[Stmt]:
        """
        Parse statements up to the closing brace (consumed) or the end of
        input.
        """
        statements = []

        while True:
            token = self.tokens.next()
            if token is None or token.type is TokenType.RBRACE:
                return statements

            if token.type is TokenType.RETURN:
                stmt = self._parse_return(token)
            elif token.type is TokenType.LET:
                stmt = self._parse_let(token)
            elif token.type is TokenType.IF:
                stmt = self._parse_if(token)
            else:
                raise UnexpectedTokenError(token, "'return', 'let', 'if' or '}'")

            statements.append(stmt)
            self.tokens.expect(TokenType.SEMICOLON, "';' after statement")

    def _parse_return(self, keyword: Token) -> Return:
        """Parse a return statement; the value is optional."""
        value = None
        if self.tokens.check(*EXPRESSION_START):
            value = self.parse_expression()
        return Return(value=value, location=keyword.location)

    def _parse_let(self, keyword: Token) -> Assignment:
        """Parse 'let' IDENTIFIER '=' expr."""
        name = self.tokens.expect_identifier("variable name")
        self.tokens.expect(TokenType.EQUALS, "'='")
        expression = self.parse_expression()
        return Assignment(name=name, expression=expression, location=keyword.location)

    def _parse_if(self, keyword: Token) -> Conditional:
        """Parse 'if' '(' expr ')' expr ('else' expr)?."""
        self.tokens.expect(TokenType.LPAREN, "'(' after 'if'")
        condition = self.parse_expression()
        self.tokens.expect(TokenType.RPAREN, "')'")

        then_expr = self.parse_expression()

        else_expr = None
        if self.tokens.match(TokenType.ELSE):
            else_expr = self.parse_expression()

        return Conditional(
            condition=condition,
            then_expr=then_expr,
            else_expr=else_expr,
            location=keyword.location,
        )

    # =========================================================================
    # Expressions (Precedence Climbing)
    # =========================================================================

    def parse_expression(self, min_bp: int = 0) -> Expr:
        """
        Parse an expression whose operators bind at least as tightly as
        min_bp.
        """
        lhs = self._parse_atom()

        while True:
            token = self.tokens.peek()
            if token is None:
                break
            powers = infix_binding_power(token.type)
            if powers is None:
                break
            left_bp, right_bp = powers
            if left_bp < min_bp:
                break

            self.tokens.next()
            rhs = self.parse_expression(right_bp)
            lhs = Binary(lhs, INFIX_OPERATORS[token.type], rhs, location=lhs.location)

        return lhs

    def _parse_atom(self) -> Expr:
        """Parse a literal, name, call, parenthesized or prefix expression."""
        token = self.tokens.expect_next("expression")

        if token.type is TokenType.NUMBER:
            return Constant(token.value, location=token.location)

        if token.type is TokenType.IDENTIFIER:
            if self.tokens.match(TokenType.LPAREN):
                return self._parse_call(token)
            return Symbol(token.value, location=token.location)

        if token.type is TokenType.LPAREN:
            # Parentheses group; they don't produce a node
            inner = self.parse_expression()
            self.tokens.expect(TokenType.RPAREN, "')'")
            return inner

        right_bp = prefix_binding_power(token.type)
        if right_bp is not None:
            operand = self.parse_expression(right_bp)
            return Unary(PREFIX_OPERATORS[token.type], operand, location=token.location)

        raise UnexpectedTokenError(token, "expression")

    def _parse_call(self, name: Token) -> Call:
        """Parse the argument list after 'name('."""
        arguments = []

        if self.tokens.match(TokenType.RPAREN):
            return Call(name.value, arguments, location=name.location)

        while True:
            arguments.append(self.parse_expression())
            token = self.tokens.expect_next("',' or ')'")
            if token.type is TokenType.RPAREN:
                break
            if token.type is not TokenType.COMMA:
                raise UnexpectedTokenError(token, "',' or ')'")

        return Call(name.value, arguments, location=name.location)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_program(tokens: Iterable[Token]) -> Program:
    """Parse a token sequence into a Program."""
    return Parser(tokens).parse()


def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Scan and parse source text in one step.

    The source is scanned completely first, so a scan error anywhere in
    the text wins over a parse error.
    """
    return Parser(Scanner(source, filename).scan_all()).parse()
