"""
funlang Compiler
================

Translates funlang source into an assembly-like listing for an abstract
register machine.

Pipeline
--------
    Source → Scanner → Parser → AST → Code Generator → Blob → Printer → Text

Usage
-----
>>> from funlang.compiler import compile_source
>>> source = '''
... fun main() {
...     let x = 1;
...     return x + 2;
... }
... '''
>>> print(compile_source(source))

Language Subset
---------------
- One numeric type (64-bit float, truncated to integer when loaded)
- Operators: + - * / and unary -
- Statements: let, return, if/else with single-expression branches
- Functions without parameters; calls may pass positional arguments

Not supported:
- Parameter declarations, nested functions, statement blocks in branches
- Scoping: all variables share one table per compilation
"""

from funlang.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
)
from funlang.compiler.errors import (
    CompilerError,
    ScanError,
    UnexpectedCharacterError,
    InvalidLiteralError,
    UnexpectedEndOfFileError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    CodeGenError,
    UnsupportedConstructError,
    UnresolvedLabelError,
    DuplicateLabelError,
)
from funlang.compiler.scanner import Scanner, Token, TokenType, scan_all
from funlang.compiler.parser import Parser, TokenStream, parse_program, parse_source
from funlang.compiler.codegen import CodeGenerator, generate
from funlang.compiler.printer import AssemblyPrinter, render
from funlang.compiler.instructions import Blob, BlobBuilder

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Errors
    "CompilerError",
    "ScanError",
    "UnexpectedCharacterError",
    "InvalidLiteralError",
    "UnexpectedEndOfFileError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "CodeGenError",
    "UnsupportedConstructError",
    "UnresolvedLabelError",
    "DuplicateLabelError",
    # Scanner
    "Scanner",
    "Token",
    "TokenType",
    "scan_all",
    # Parser
    "Parser",
    "TokenStream",
    "parse_program",
    "parse_source",
    # Code generator
    "CodeGenerator",
    "generate",
    "Blob",
    "BlobBuilder",
    # Printer
    "AssemblyPrinter",
    "render",
]
