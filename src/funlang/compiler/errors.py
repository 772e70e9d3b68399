"""
Compiler Error Hierarchy
========================

Exceptions raised by the four pipeline stages. Every stage aborts on its
first error; nothing here is collected or recovered from.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── ScanError - scanner errors
│   ├── UnexpectedCharacterError - character outside every token class
│   ├── InvalidLiteralError - numeric text that does not parse
│   └── UnexpectedEndOfFileError - input ends inside a line comment
├── ParseError - parser errors
│   ├── UnexpectedTokenError - token does not fit the grammar
│   └── UnexpectedEndOfInputError - tokens ran out mid-construct
└── CodeGenError - code generation errors
    ├── UnsupportedConstructError - AST node the generator cannot lower
    ├── UnresolvedLabelError - label referenced but never bound
    └── DuplicateLabelError - label bound twice
"""

from typing import Optional, TYPE_CHECKING

from funlang.errors import LocatedError, SourceLocation

if TYPE_CHECKING:
    from funlang.compiler.scanner import Token


class CompilerError(LocatedError):
    """Base exception for all compiler errors."""
    pass


# =============================================================================
# Scanner Errors
# =============================================================================

class ScanError(CompilerError):
    """Error while turning characters into tokens."""
    pass


class UnexpectedCharacterError(ScanError):
    """
    Character not matched by any token class.

    Example:
        let x = 1 # 2;    // '#' is not part of the language
    """

    def __init__(self, char: str, location: Optional[SourceLocation] = None):
        self.char = char
        super().__init__(
            f"unexpected character {char!r} (U+{ord(char):04X})",
            location=location,
        )


class InvalidLiteralError(ScanError):
    """Accumulated numeric text that does not parse as a number."""

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(
            f"invalid numeric literal '{text}'",
            location=location,
            hint="numeric literals use the digits 0-9 with an optional '.'",
        )


class UnexpectedEndOfFileError(ScanError):
    """Input ended inside a line comment before its terminating newline."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "unexpected end of file inside comment",
            location=location,
            hint="terminate the '//' comment with a newline",
        )


# =============================================================================
# Parser Errors
# =============================================================================

class ParseError(CompilerError):
    """Error while building the AST from tokens."""
    pass


class UnexpectedTokenError(ParseError):
    """
    Token that does not match the expected grammar rule.

    Attributes:
        token: The offending token
        expected: Description of what was expected (optional)
    """

    def __init__(self, token: "Token", expected: Optional[str] = None):
        self.token = token
        self.expected = expected
        super().__init__(
            f"unexpected token {token.describe()}",
            location=token.location,
            hint=f"expected {expected}" if expected else None,
        )


class UnexpectedEndOfInputError(ParseError):
    """Token stream ended while a construct was still open."""

    def __init__(self, expected: Optional[str] = None):
        self.expected = expected
        super().__init__(
            "unexpected end of input",
            hint=f"expected {expected}" if expected else None,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(CompilerError):
    """Error while lowering the AST to instructions."""
    pass


class UnsupportedConstructError(CodeGenError):
    """
    AST construct the code generator cannot lower.

    Attributes:
        construct: Short description of the construct
    """

    def __init__(
        self,
        construct: str,
        location: Optional[SourceLocation] = None,
        alternative: Optional[str] = None,
    ):
        self.construct = construct
        super().__init__(
            f"unsupported construct: {construct}",
            location=location,
            hint=alternative,
        )


class UnresolvedLabelError(CodeGenError):
    """
    Label referenced by an instruction but never bound.

    Most often a call to a function that is not declared in the program.
    """

    def __init__(self, label: str, similar_labels: Optional[list[str]] = None):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"unresolved label '{label}'", hint=hint)


class DuplicateLabelError(CodeGenError):
    """Label bound more than once (e.g. two functions with the same name)."""

    def __init__(self, label: str, first_index: int):
        self.label = label
        self.first_index = first_index
        super().__init__(
            f"duplicate label '{label}'",
            hint=f"'{label}' is already bound to instruction {first_index}",
        )
