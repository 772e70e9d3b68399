"""
funlang - A Small Expression Language Compiler
==============================================

funlang compiles a minimal language of parameterless functions, ``let``
bindings, arithmetic, calls and conditionals into an assembly-like
listing for an abstract register machine.

Main Components
---------------
- **compiler**: scanner, parser, code generator and assembly printer
- **cli**: the ``funcc`` command-line tool

Quick Start
-----------
    >>> from funlang import compile_source
    >>> print(compile_source("fun main() { return 2 * 3; }"))

Or from the terminal:
    $ funcc main.fn -o main.s
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from funlang.errors import FunlangError, SourceLocation
from funlang.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
    CompilerError,
)

__all__ = [
    "__version__",
    "FunlangError",
    "SourceLocation",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    "CompilerError",
]
