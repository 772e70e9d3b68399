"""
funlang Compiler Main Module
============================

This module provides the main compiler interface. It runs the complete
pipeline:

    Source → Scan → Parse → Generate → Print → Assembly listing

Usage
-----
Command line:
    $ funcc main.fn -o main.s

Programmatic:
    >>> from funlang.compiler import compile_source
    >>> print(compile_source('fun main() { return 1 + 2; }'))

Compilation Pipeline
--------------------
1. **Scanning**: Convert source characters to tokens
2. **Parsing**: Build the Abstract Syntax Tree (AST)
3. **Code Generation**: Lower the AST to an instruction Blob
4. **Printing**: Render the Blob as mnemonic text

Error Handling
--------------
Each stage runs on the complete output of the previous one. The first
error stops the pipeline and is re-raised unchanged, so callers see the
originating stage's exception type.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from funlang.compiler.scanner import Scanner, Token
from funlang.compiler.parser import Parser
from funlang.compiler.codegen import CodeGenerator
from funlang.compiler.printer import AssemblyPrinter
from funlang.compiler.ast import Program
from funlang.compiler.instructions import Blob

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        slot_size: Bytes per stack slot in the printed listing
        frame_register: Register that stack slots are addressed from
        indent: Prefix for instruction lines in the listing
    """
    slot_size: int = 8
    frame_register: str = "bp"
    indent: str = "\t"

    def __post_init__(self):
        if self.slot_size <= 0:
            raise ValueError(f"slot_size must be positive, got {self.slot_size}")
        if not self.frame_register:
            raise ValueError("frame_register must not be empty")


@dataclass
class CompilerResult:
    """
    Result of a compilation, with every intermediate stage kept for
    inspection.

    Attributes:
        filename: Source filename
        tokens: Scanner output
        program: Parser output
        blob: Code generator output
        lines: Printer output
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    program: Optional[Program] = None
    blob: Optional[Blob] = None
    lines: list[str] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def assembly(self) -> str:
        """The listing as one string, newline-terminated."""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


class Compiler:
    """
    funlang compiler.

    Example:
        compiler = Compiler()
        result = compiler.compile_file("main.fn")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to an assembly listing.

        Raises:
            CompilerError: From the first stage that fails
        """
        result = CompilerResult(filename=filename)

        result.tokens = Scanner(source, filename).scan_all()
        logger.debug("%s: scanned %d token(s)", filename, result.token_count)

        result.program = Parser(result.tokens).parse()

        result.blob = CodeGenerator().generate(result.program)

        printer = AssemblyPrinter(
            slot_size=self.options.slot_size,
            frame_register=self.options.frame_register,
            indent=self.options.indent,
        )
        result.lines = printer.render(result.blob)
        logger.debug("%s: rendered %d line(s)", filename, len(result.lines))

        return result

    def compile_file(self, filepath) -> CompilerResult:
        """
        Compile a source file (read as UTF-8).

        Raises:
            CompilerError: From the first stage that fails
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile source text and return the assembly listing.

    Example:
        >>> print(compile_source('fun main() { return 7; }'), end="")
        main:
        	movq $7, %0
        	ret
    """
    return Compiler(options).compile_source(source, filename).assembly


def compile_file(
    filepath,
    output_path=None,
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile a source file, optionally writing the listing to output_path.
    """
    result = Compiler(options).compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.assembly, encoding="utf-8")

    return result.assembly
