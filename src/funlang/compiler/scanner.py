"""
funlang Scanner (Tokenizer)
===========================

This module converts source characters into a stream of tokens for the
parser.

Token Categories
----------------
- Keywords: fun, let, return, if, else (case-insensitive)
- Identifiers: variable and function names
- Numbers: 42, 3.25 (always carried as a float)
- Operators: + - * / =
- Delimiters: ( ) { } , ;

Comments
--------
- Single-line: // comment

A comment must be terminated by a newline; input that ends inside a
comment is an error.

The scanner reads its input through a one-character lookahead buffer, so
any iterable of characters works as a source, not only a ``str``.

Example Usage
-------------
>>> from funlang.compiler.scanner import scan_all
>>> for token in scan_all("fun main() { return 42; }"):
...     print(token)
Token(FUN, 1:1)
Token(IDENTIFIER, 'main', 1:5)
Token(LPAREN, 1:9)
Token(RPAREN, 1:10)
Token(LBRACE, 1:12)
Token(RETURN, 1:14)
Token(NUMBER, 42.0, 1:21)
Token(SEMICOLON, 1:23)
Token(RBRACE, 1:25)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, Optional

from funlang.errors import SourceLocation
from funlang.compiler.errors import (
    UnexpectedCharacterError,
    InvalidLiteralError,
    UnexpectedEndOfFileError,
)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types of the funlang language."""

    # === Literals ===
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Numeric literals (float)

    # === Keywords ===
    FUN = auto()            # fun
    LET = auto()            # let
    RETURN = auto()         # return
    IF = auto()             # if
    ELSE = auto()           # else

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    EQUALS = auto()         # =

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;


# Keywords are matched case-insensitively: the lookup key is lowercased.
KEYWORDS: dict[str, TokenType] = {
    "return": TokenType.RETURN,
    "fun": TokenType.FUN,
    "let": TokenType.LET,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "=": TokenType.EQUALS,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token.

    Tokens compare by type and value only, so a token built by hand in a
    test equals the one the scanner produced at any position.

    Attributes:
        type: The TokenType classification
        value: Name for identifiers, float for numbers, None for
               keywords and punctuation
        location: Where the token starts (not part of equality)
    """
    type: TokenType
    value: str | float | None = None
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        where = ""
        if self.location is not None:
            where = f", {self.location.line}:{self.location.column}"
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}{where})"
        return f"Token({self.type.name}{where})"

    def describe(self) -> str:
        """Short human-readable form for error messages."""
        if self.type is TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type is TokenType.NUMBER:
            return f"number {self.value:g}"
        if self.type in KEYWORDS.values():
            return f"keyword '{self.type.name.lower()}'"
        for text, token_type in SINGLE_CHAR_TOKENS.items():
            if token_type is self.type:
                return f"'{text}'"
        return self.type.name


# Convenience constructors, mostly for building expected streams in tests.

def identifier(name: str) -> Token:
    return Token(TokenType.IDENTIFIER, name)


def number(value: float) -> Token:
    return Token(TokenType.NUMBER, float(value))


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Tokenizes funlang source.

    Iterating a Scanner yields tokens lazily. The underlying character
    source is consumed as scanning proceeds, so a Scanner can be iterated
    only once.

    Usage:
        scanner = Scanner(source_text, filename)
        tokens = scanner.scan_all()

    Attributes:
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: Iterable[str], filename: str = "<input>"):
        """
        Args:
            source: The source characters (a string or any character iterable)
            filename: Name of the source file (for error messages)
        """
        self.filename = filename
        self._chars: Iterator[str] = iter(source)
        self._peeked: Optional[str] = None
        self._exhausted = False

        # Position of the next character to be consumed
        self._line = 1
        self._column = 1

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        """
        Generate tokens from the source.

        Raises:
            ScanError: On the first character sequence that cannot be scanned
        """
        while True:
            self._skip_whitespace()
            if self._peek() is None:
                return
            token = self._scan_token()
            if token is not None:
                yield token

    def scan_all(self) -> list[Token]:
        """
        Drain the scanner into a list.

        Any error aborts the whole scan; no partial list is returned.
        """
        return list(self.tokens())

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _peek(self) -> Optional[str]:
        """Look at the next character without consuming it (None at end)."""
        if self._peeked is None and not self._exhausted:
            self._peeked = next(self._chars, None)
            if self._peeked is None:
                self._exhausted = True
        return self._peeked

    def _advance(self) -> Optional[str]:
        """Consume and return the next character, tracking line/column."""
        char = self._peek()
        self._peeked = None
        if char == "\n":
            self._line += 1
            self._column = 1
        elif char is not None:
            self._column += 1
        return char

    def _location(self, line: Optional[int] = None, column: Optional[int] = None) -> SourceLocation:
        return SourceLocation(
            self.filename,
            line if line is not None else self._line,
            column if column is not None else self._column,
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> None:
        """
        Skip whitespace.

        Comments are handled by _scan_token: telling '//' from '/' needs
        the first slash consumed, since the buffer holds one character.
        """
        while True:
            char = self._peek()
            if char is None or not char.isspace():
                return
            self._advance()

    def _skip_line_comment(self, start: SourceLocation) -> None:
        """Skip the rest of a // comment, including the newline."""
        while True:
            char = self._advance()
            if char is None:
                raise UnexpectedEndOfFileError(start)
            if char == "\n":
                return

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token; the next character is known to be non-blank.

        Returns:
            The next Token, or None if a comment was skipped instead
        """
        start_line, start_column = self._line, self._column
        char = self._peek()

        if char.isnumeric():
            return self._scan_number(start_line, start_column)

        if char.isalpha() or char == "_":
            return self._scan_identifier(start_line, start_column)

        self._advance()

        if char == "/" and self._peek() == "/":
            self._advance()
            self._skip_line_comment(self._location(start_line, start_column))
            return None

        if char in SINGLE_CHAR_TOKENS:
            return Token(
                SINGLE_CHAR_TOKENS[char],
                None,
                self._location(start_line, start_column),
            )

        raise UnexpectedCharacterError(char, self._location(start_line, start_column))

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or keyword.

        Identifiers start with a letter or underscore and continue with
        letters, digits and underscores.
        """
        chars = []
        while True:
            char = self._peek()
            if char is None or not (char.isalnum() or char == "_"):
                break
            chars.append(self._advance())

        name = "".join(chars)
        location = self._location(start_line, start_column)

        keyword = KEYWORDS.get(name.lower())
        if keyword is not None:
            return Token(keyword, None, location)

        return Token(TokenType.IDENTIFIER, name, location)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        Digits, then optionally '.' and more digits. Integers are widened
        to float: the language has a single numeric type.
        """
        chars = self._scan_digits()
        is_float = False

        if self._peek() == ".":
            is_float = True
            chars.append(self._advance())
            chars.extend(self._scan_digits())

        text = "".join(chars)
        location = self._location(start_line, start_column)

        try:
            value = float(text) if is_float else float(int(text))
        except (ValueError, OverflowError):
            raise InvalidLiteralError(text, location) from None

        return Token(TokenType.NUMBER, value, location)

    def _scan_digits(self) -> list[str]:
        chars = []
        while True:
            char = self._peek()
            if char is None or not char.isnumeric():
                return chars
            chars.append(self._advance())


# =============================================================================
# Convenience Functions
# =============================================================================

def scan_all(source: Iterable[str], filename: str = "<input>") -> list[Token]:
    """
    Scan source text into a list of tokens.

    Raises:
        ScanError: On the first character sequence that cannot be scanned
    """
    return Scanner(source, filename).scan_all()
