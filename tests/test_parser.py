# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the funlang parser.
#
# Test coverage includes:
#   - Operator precedence and associativity
#   - let, return and if statements
#   - Function calls and declarations
#   - Mandatory statement terminators
#   - Error conditions and stage ordering
# =============================================================================

import pytest

from funlang.compiler.parser import Parser, parse_source, parse_program
from funlang.compiler.scanner import Scanner, TokenType, scan_all
from funlang.compiler.ast import (
    Program,
    FuncDecl,
    Assignment,
    Return,
    Conditional,
    Constant,
    Binary,
    Unary,
    Call,
    Symbol,
    Op,
    ASTPrinter,
    ASTVisitor,
)
from funlang.compiler.errors import (
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    UnexpectedCharacterError,
)


def parse_return(expression: str):
    """Helper: parse 'return <expression>;' inside main and return the value."""
    program = parse_source(f"fun main() {{ return {expression}; }}")
    return program.functions[0].body[0].value


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Test precedence climbing."""

    def test_precedence(self):
        program = parse_source("fun main(){ return 1+2*3; }")
        assert program == Program([
            FuncDecl("main", [
                Return(Binary(
                    Constant(1.0),
                    Op.ADD,
                    Binary(Constant(2.0), Op.MUL, Constant(3.0)),
                )),
            ]),
        ])

    def test_multiplication_binds_left(self):
        assert parse_return("2*3+4") == Binary(
            Binary(Constant(2.0), Op.MUL, Constant(3.0)), Op.ADD, Constant(4.0)
        )

    def test_subtraction_is_left_associative(self):
        assert parse_return("1-2-3") == Binary(
            Binary(Constant(1.0), Op.SUB, Constant(2.0)), Op.SUB, Constant(3.0)
        )

    def test_division_is_left_associative(self):
        assert parse_return("8/4/2") == Binary(
            Binary(Constant(8.0), Op.DIV, Constant(4.0)), Op.DIV, Constant(2.0)
        )

    def test_parentheses_group(self):
        assert parse_return("(1+2)*3") == Binary(
            Binary(Constant(1.0), Op.ADD, Constant(2.0)), Op.MUL, Constant(3.0)
        )

    def test_unary_minus_binds_tightest(self):
        assert parse_return("-1+2") == Binary(
            Unary(Op.SUB, Constant(1.0)), Op.ADD, Constant(2.0)
        )

    def test_unary_minus_on_product_operand(self):
        assert parse_return("-x*2") == Binary(
            Unary(Op.SUB, Symbol("x")), Op.MUL, Constant(2.0)
        )

    def test_double_negation(self):
        assert parse_return("--1") == Unary(Op.SUB, Unary(Op.SUB, Constant(1.0)))

    def test_symbol(self):
        assert parse_return("x") == Symbol("x")

    def test_call_without_arguments(self):
        assert parse_return("f()") == Call("f", [])

    def test_call_with_arguments(self):
        assert parse_return("f(1, x + 2)") == Call("f", [
            Constant(1.0),
            Binary(Symbol("x"), Op.ADD, Constant(2.0)),
        ])

    def test_nested_call(self):
        assert parse_return("f(g(1))") == Call("f", [Call("g", [Constant(1.0)])])


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Test statement parsing."""

    def test_let_and_return(self):
        program = parse_source("fun main() { let x = 1; return x; }")
        assert program.functions[0].body == [
            Assignment("x", Constant(1.0)),
            Return(Symbol("x")),
        ]

    def test_return_without_value(self):
        program = parse_source("fun main() { return; }")
        assert program.functions[0].body == [Return()]

    def test_if_else(self):
        program = parse_source("fun main() { if (x) 1 else 2; }")
        assert program.functions[0].body == [
            Conditional(Symbol("x"), Constant(1.0), Constant(2.0)),
        ]

    def test_if_without_else(self):
        program = parse_source("fun main() { if (x - 1) f(); }")
        assert program.functions[0].body == [
            Conditional(Binary(Symbol("x"), Op.SUB, Constant(1.0)), Call("f", [])),
        ]

    def test_keywords_any_case(self):
        program = parse_source("FUN main() { LET x = 1; If (x) 2 ELSE 3; Return x; }")
        assert len(program.functions[0].body) == 3

    def test_missing_semicolon_before_brace(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("fun main() { return 1 }")
        assert exc_info.value.token.type is TokenType.RBRACE

    def test_missing_semicolon_at_end(self):
        with pytest.raises(UnexpectedEndOfInputError):
            parse_source("fun main() { return 1")

    def test_missing_semicolon_between_statements(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("fun main() { let x = 1 return x; }")
        assert exc_info.value.token.type is TokenType.RETURN

    def test_statement_must_start_with_keyword(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("fun main() { 1; }")
        assert exc_info.value.token.type is TokenType.NUMBER

    def test_let_needs_equals(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("fun main() { let x 1; }")

    def test_if_needs_parentheses(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("fun main() { if x 1; }")


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Test function declarations."""

    def test_empty_program(self):
        assert parse_source("") == Program([])

    def test_empty_body(self):
        assert parse_source("fun main() { }") == Program([FuncDecl("main", [])])

    def test_functions_in_source_order(self):
        program = parse_source("fun b() { } fun a() { } fun c() { }")
        assert [f.name for f in program.functions] == ["b", "a", "c"]

    def test_declaration_keyword_is_ignored(self):
        program = parse_source("let main() { return 1; }")
        assert program.functions[0].name == "main"

    def test_body_may_end_at_end_of_input(self):
        program = parse_source("fun main() { return 1;")
        assert program.functions[0].body == [Return(Constant(1.0))]

    def test_parameters_are_rejected(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("fun f(x) { return x; }")
        assert exc_info.value.token.type is TokenType.IDENTIFIER

    def test_missing_name(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("fun () { }")

    def test_header_only(self):
        with pytest.raises(UnexpectedEndOfInputError):
            parse_source("fun")

    def test_function_location(self):
        program = parse_source("\n  fun main() { }", filename="prog.fn")
        location = program.functions[0].location
        assert (location.filename, location.line, location.column) == ("prog.fn", 2, 3)


# =============================================================================
# Parser Interface Tests
# =============================================================================

class TestParserInterface:
    """Test the entry points."""

    def test_parse_token_list(self):
        tokens = scan_all("fun main() { return 1; }")
        assert parse_program(tokens) == parse_source("fun main() { return 1; }")

    def test_parse_lazy_scanner(self):
        program = Parser(Scanner("fun main() { return 2; }")).parse()
        assert program.functions[0].body == [Return(Constant(2.0))]

    def test_scan_errors_win(self):
        """The whole source is scanned before any parse error can surface."""
        with pytest.raises(UnexpectedCharacterError):
            parse_source("fun main() { return 1 } #")

    def test_parse_error_is_parse_error(self):
        with pytest.raises(ParseError):
            parse_source("fun main() { return ; ; }")

    def test_error_message_has_hint(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("fun main() { return 1 }")
        message = str(exc_info.value)
        assert "<input>:1:23: error: unexpected token '}'" in message
        assert "hint: expected ';' after statement" in message


# =============================================================================
# AST Utility Tests
# =============================================================================

class TestASTPrinter:
    """Test the AST debug printer and visitor."""

    def test_print(self):
        program = parse_source(
            "fun main() { let x = 1 + 2; if (x) -x else f(x, 2); return x; }"
        )
        assert ASTPrinter().print(program) == "\n".join([
            "Program",
            "  Function: main()",
            "    Let x = (1 + 2)",
            "    If (x)",
            "      Then: (-x)",
            "      Else: f(x, 2)",
            "    Return x",
        ])

    def test_visitor_reaches_nested_nodes(self):
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Call(self, node):
                self.names.append(node.name)
                self.generic_visit(node)

        counter = CallCounter()
        counter.visit(parse_source("fun main() { let x = f(g(1)); if (h()) 1; }"))
        assert counter.names == ["f", "g", "h"]
