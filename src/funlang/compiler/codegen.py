"""
Code Generator for funlang
==========================

This module lowers the AST into the abstract register machine instructions
defined in ``funlang.compiler.instructions``. The output is a Blob: the
instruction stream plus its symbolic label table.

Code Generation Strategy
------------------------
A simple accumulator model:

1. Every expression leaves its value in register 0 (the accumulator)
2. For binary operations the left operand is parked in register 1 while
   the right operand is evaluated into register 0
3. Local variables live in stack slots, one slot per name
4. Functions are labels; calls jump to the callee's name

Register Usage
--------------
| Register | Usage                                            |
|----------|--------------------------------------------------|
| %0       | Accumulator, expression results, return value    |
| %1       | Scratch: left operand of a binary operation      |
| %2, %3.. | Call arguments, argument i in register 2 + i     |

Registers are used positionally; nothing is saved across calls. A call or
a nested binary operation on the right-hand side of a binary operation
overwrites the parked left operand in %1, and a call inside an argument
list overwrites the argument registers already loaded.

Variables
---------
All variables of a compilation unit share one flat table, regardless of
the function that mentions them. A name gets the next free slot on its
first read or write and keeps it until compilation ends.

Constants
---------
Literals are narrowed to integers when loaded (``int(value)``, truncating
toward zero). ``2.75`` loads as ``$2``.

Conditionals
------------
    <condition>          ; value in %0
    cmp  $0, %0
    jez  _N
    <then expression>
_N:
    <else expression>    ; when present

Example output:
    main:
        movq $1, %0
        movq %0, -8(%bp)
        movq -8(%bp), %0
        ret
"""

import logging

from funlang.compiler.ast import (
    Program,
    FuncDecl,
    Stmt,
    ExprStmt,
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
from funlang.compiler import instructions as ins
from funlang.compiler.instructions import Blob, BlobBuilder, Imm, Reg, Stack, Label
from funlang.compiler.errors import UnsupportedConstructError

logger = logging.getLogger(__name__)


ACCUMULATOR = 0
SCRATCH = 1
ARGUMENT_BASE = 2


class CodeGenerator:
    """
    Lowers a Program into a Blob.

    One instance compiles one program at a time; generate() resets all
    state before starting.

    Usage:
        blob = CodeGenerator().generate(program)
    """

    def __init__(self):
        self._builder = BlobBuilder()

    def generate(self, program: Program) -> Blob:
        """
        Generate the instruction stream for a whole program.

        Returns:
            Finalized Blob

        Raises:
            UnsupportedConstructError: For AST nodes that cannot be lowered
            DuplicateLabelError: If two functions share a name
            UnresolvedLabelError: If a call targets an undeclared function
        """
        # Function labels may be bound after a conditional mints a temp label
        self._builder = BlobBuilder(reserved_labels=[f.name for f in program.functions])

        for func in program.functions:
            self._generate_function(func)

        blob = self._builder.finalize()
        logger.debug(
            "Generated %d instruction(s), %d label(s), %d variable(s)",
            len(blob.instructions), len(blob.labels), len(blob.variables),
        )
        return blob

    # =========================================================================
    # Emission Helpers
    # =========================================================================

    def _emit(self, instr: ins.Instr) -> None:
        self._builder.append(instr)

    def _accumulator(self) -> Reg:
        return Reg(ACCUMULATOR)

    # =========================================================================
    # Functions and Statements
    # =========================================================================

    def _generate_function(self, func: FuncDecl) -> None:
        """Bind the function's label at the start of its body, then lower it."""
        self._builder.bind_label(func.name)
        for stmt in func.body:
            self._generate_statement(stmt)

    def _generate_statement(self, stmt: Stmt) -> None:
        """Generate code for any statement."""
        if isinstance(stmt, ExprStmt):
            # Result stays in the accumulator, unused
            self._generate_expression(stmt.expression)
        elif isinstance(stmt, Assignment):
            self._generate_assignment(stmt)
        elif isinstance(stmt, Return):
            self._generate_return(stmt)
        elif isinstance(stmt, Conditional):
            self._generate_conditional(stmt)
        else:
            raise UnsupportedConstructError(
                f"statement {type(stmt).__name__}", stmt.location
            )

    def _generate_assignment(self, stmt: Assignment) -> None:
        self._generate_expression(stmt.expression)
        slot = self._builder.slot_for(stmt.name)
        self._emit(ins.Mov(self._accumulator(), Stack(slot)))

    def _generate_return(self, stmt: Return) -> None:
        # The accumulator is the return-value location
        if stmt.value is not None:
            self._generate_expression(stmt.value)
        self._emit(ins.Ret())

    def _generate_conditional(self, stmt: Conditional) -> None:
        """
        Generate code for a conditional.

        A zero condition jumps past the then branch, landing on the first
        instruction of the else branch (or whatever follows).
        """
        self._generate_expression(stmt.condition)
        self._emit(ins.Cmp(Imm(0), self._accumulator()))

        false_label = self._builder.new_label()
        self._emit(ins.Jez(Label(false_label)))

        self._generate_expression(stmt.then_expr)
        self._builder.bind_label(false_label)

        if stmt.else_expr is not None:
            self._generate_expression(stmt.else_expr)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _generate_expression(self, expr: Expr) -> None:
        """
        Generate code for an expression.

        The result is left in the accumulator.
        """
        if isinstance(expr, Constant):
            self._emit(ins.Mov(Imm(int(expr.value)), self._accumulator()))
        elif isinstance(expr, Binary):
            self._generate_binary(expr)
        elif isinstance(expr, Unary):
            self._generate_unary(expr)
        elif isinstance(expr, Call):
            self._generate_call(expr)
        elif isinstance(expr, Symbol):
            slot = self._builder.slot_for(expr.name)
            self._emit(ins.Mov(Stack(slot), self._accumulator()))
        else:
            raise UnsupportedConstructError(
                f"expression {type(expr).__name__}", getattr(expr, "location", None)
            )

    def _generate_binary(self, expr: Binary) -> None:
        self._generate_expression(expr.left)
        self._emit(ins.Mov(self._accumulator(), Reg(SCRATCH)))
        self._generate_expression(expr.right)
        self._emit(ins.BinOp(Reg(SCRATCH), expr.op, self._accumulator()))

    def _generate_unary(self, expr: Unary) -> None:
        """Generate code for a unary expression. Only negation exists."""
        if expr.op is not Op.SUB:
            raise UnsupportedConstructError(
                f"unary operator '{expr.op.symbol}'",
                expr.location,
                alternative="only unary '-' (negation) is supported",
            )
        self._generate_expression(expr.operand)
        self._emit(ins.UnOp(Op.SUB, self._accumulator()))

    def _generate_call(self, expr: Call) -> None:
        """
        Generate code for a function call.

        Arguments are evaluated left to right, each moved into its
        positional register right after evaluation. The callee leaves its
        result in the accumulator.
        """
        for position, argument in enumerate(expr.arguments):
            self._generate_expression(argument)
            self._emit(ins.Mov(self._accumulator(), Reg(ARGUMENT_BASE + position)))

        self._emit(ins.Call(Label(expr.name)))


def generate(program: Program) -> Blob:
    """Lower a Program into a finalized Blob."""
    return CodeGenerator().generate(program)
