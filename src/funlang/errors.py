"""
funlang Error Hierarchy
=======================

This module defines the root of the exception hierarchy for funlang.
All exceptions inherit from FunlangError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
FunlangError (base)
└── CompilerError (see funlang.compiler.errors)
    ├── ScanError - character-level errors
    ├── ParseError - token-level errors
    └── CodeGenError - lowering and label errors

Error messages follow this format:
    filename:line:column: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class FunlangError(Exception):
    """
    Base exception for all funlang errors.

        try:
            compile_source(text)
        except FunlangError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text, used for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class LocatedError(FunlangError):
    """
    Error carrying an optional source location and hint.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            main.fn:3:12: error: unexpected token ')'
            hint: expected an expression
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)
