"""
funlang Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types produced by the parser and
consumed by the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node, ordered function declarations
├── FuncDecl - function name and statement list
├── Statements
│   ├── ExprStmt - expression evaluated for effect
│   ├── Assignment - let name = expr
│   ├── Return - return with optional value
│   └── Conditional - if (cond) expr else expr
└── Expressions
    ├── Constant - numeric literal
    ├── Binary - left op right
    ├── Unary - op operand
    ├── Call - function call
    └── Symbol - variable reference

Design Notes
------------
- All nodes are dataclasses; each parent exclusively owns its children
- Each node stores its source location, which is excluded from equality
  so trees can be compared structurally in tests
- The AST is built bottom-up once and never mutated afterwards
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from funlang.errors import SourceLocation


# =============================================================================
# Operators
# =============================================================================

class Op(Enum):
    """Arithmetic operators shared by expressions and instructions."""
    ADD = auto()    # +
    SUB = auto()    # -
    MUL = auto()    # *
    DIV = auto()    # /

    @property
    def symbol(self) -> str:
        return _OP_SYMBOLS[self]


_OP_SYMBOLS = {Op.ADD: "+", Op.SUB: "-", Op.MUL: "*", Op.DIV: "/"}


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (keyword-only,
                  optional, ignored by equality)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass
class Expr(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass
class Stmt(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Constant(Expr):
    """
    Numeric literal.

    Attributes:
        value: The literal value (the language has a single float type)
    """
    value: float = 0.0


@dataclass
class Binary(Expr):
    """
    Binary operation (left op right).

    Attributes:
        left: Left operand
        op: The operator
        right: Right operand
    """
    left: Expr = None
    op: Op = None
    right: Expr = None


@dataclass
class Unary(Expr):
    """
    Prefix unary operation. The parser only produces Op.SUB (negation).

    Attributes:
        op: The operator
        operand: The operand expression
    """
    op: Op = None
    operand: Expr = None


@dataclass
class Call(Expr):
    """
    Function call expression.

    Attributes:
        name: Name of the callee
        arguments: Argument expressions, in order
    """
    name: str = ""
    arguments: list[Expr] = field(default_factory=list)


@dataclass
class Symbol(Expr):
    """Variable reference."""
    name: str = ""


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class ExprStmt(Stmt):
    """Expression evaluated for its effect; the value is discarded."""
    expression: Expr = None


@dataclass
class Assignment(Stmt):
    """
    Variable binding (let name = expression).

    Attributes:
        name: Variable name
        expression: Value to store
    """
    name: str = ""
    expression: Expr = None


@dataclass
class Return(Stmt):
    """
    Return statement.

    Attributes:
        value: Optional return value expression
    """
    value: Optional[Expr] = None


@dataclass
class Conditional(Stmt):
    """
    Conditional with single-expression branches.

    Attributes:
        condition: Evaluated first; zero selects the else branch
        then_expr: Evaluated when the condition is non-zero
        else_expr: Optional expression evaluated when the condition is zero
    """
    condition: Expr = None
    then_expr: Expr = None
    else_expr: Optional[Expr] = None


# =============================================================================
# Declarations
# =============================================================================

@dataclass
class FuncDecl(ASTNode):
    """
    Function declaration.

    Attributes:
        name: Function name (also its label in the generated code)
        body: Statements of the body, in order
    """
    name: str = ""
    body: list[Stmt] = field(default_factory=list)


@dataclass
class Program(ASTNode):
    """
    Root node: function declarations in source order, which is also the
    order their code is emitted in.
    """
    functions: list[FuncDecl] = field(default_factory=list)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care about.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_Call(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode):
        """Dispatch to visit_<ClassName>, falling back to generic_visit."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_Program(self, node: Program):
        self._emit("Program")
        self.indent_level += 1
        for func in node.functions:
            self.visit(func)
        self.indent_level -= 1

    def visit_FuncDecl(self, node: FuncDecl):
        self._emit(f"Function: {node.name}()")
        self.indent_level += 1
        for stmt in node.body:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_ExprStmt(self, node: ExprStmt):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_Assignment(self, node: Assignment):
        self._emit(f"Let {node.name} = {self._expr_str(node.expression)}")

    def visit_Return(self, node: Return):
        if node.value is not None:
            self._emit(f"Return {self._expr_str(node.value)}")
        else:
            self._emit("Return")

    def visit_Conditional(self, node: Conditional):
        self._emit(f"If ({self._expr_str(node.condition)})")
        self.indent_level += 1
        self._emit(f"Then: {self._expr_str(node.then_expr)}")
        if node.else_expr is not None:
            self._emit(f"Else: {self._expr_str(node.else_expr)}")
        self.indent_level -= 1

    def _expr_str(self, expr: Expr) -> str:
        """Convert an expression to a fully parenthesized string."""
        if isinstance(expr, Constant):
            return f"{expr.value:g}"
        if isinstance(expr, Symbol):
            return expr.name
        if isinstance(expr, Binary):
            return f"({self._expr_str(expr.left)} {expr.op.symbol} {self._expr_str(expr.right)})"
        if isinstance(expr, Unary):
            return f"({expr.op.symbol}{self._expr_str(expr.operand)})"
        if isinstance(expr, Call):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{expr.name}({args})"
        return f"<{type(expr).__name__}>"
