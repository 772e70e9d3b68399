# =============================================================================
# test_scanner.py - Scanner Unit Tests
# =============================================================================
# Tests for the funlang scanner.
#
# Test coverage includes:
#   - Numbers, identifiers, keywords, operators and delimiters
#   - Case-insensitive keywords
#   - Line comments, terminated and unterminated
#   - Source location tracking
#   - Error conditions
# =============================================================================

import pytest

from funlang.compiler.scanner import (
    Scanner,
    Token,
    TokenType,
    scan_all,
    identifier,
    number,
)
from funlang.compiler.errors import (
    ScanError,
    UnexpectedCharacterError,
    InvalidLiteralError,
    UnexpectedEndOfFileError,
)
from funlang.errors import SourceLocation


def types(source: str) -> list[TokenType]:
    """Helper: scan source and return only the token types."""
    return [t.type for t in scan_all(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        assert scan_all("") == []

    def test_whitespace_only(self):
        assert scan_all("  \t\n\n  ") == []

    def test_simple_sum(self):
        assert scan_all("1+2") == [number(1), Token(TokenType.PLUS), number(2)]

    def test_all_single_char_tokens(self):
        assert types("( ) { } = , ; + - * /") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.EQUALS,
            TokenType.COMMA,
            TokenType.SEMICOLON,
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
        ]

    def test_function_declaration(self):
        assert types("fun main() { return 42; }") == [
            TokenType.FUN,
            TokenType.IDENTIFIER,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RETURN,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
            TokenType.RBRACE,
        ]

    def test_no_whitespace_needed_between_tokens(self):
        assert scan_all("x=y*2;") == [
            identifier("x"),
            Token(TokenType.EQUALS),
            identifier("y"),
            Token(TokenType.STAR),
            number(2),
            Token(TokenType.SEMICOLON),
        ]


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Numeric literals are always carried as floats."""

    def test_integer_is_float(self):
        token = scan_all("42")[0]
        assert token.value == 42.0
        assert isinstance(token.value, float)

    def test_decimal(self):
        assert scan_all("3.25") == [number(3.25)]

    def test_trailing_dot(self):
        assert scan_all("7.") == [number(7)]

    def test_number_then_identifier(self):
        assert scan_all("12abc") == [number(12), identifier("abc")]

    def test_non_ascii_numeric_is_invalid(self):
        """'½' counts as numeric but does not parse as a number."""
        with pytest.raises(InvalidLiteralError) as exc_info:
            scan_all("let x = ½;")
        assert exc_info.value.text == "½"
        assert exc_info.value.location == SourceLocation("<input>", 1, 9)


# =============================================================================
# Identifier and Keyword Tests
# =============================================================================

class TestIdentifiers:
    """Test identifiers and keywords."""

    def test_identifier(self):
        assert scan_all("main") == [identifier("main")]

    def test_underscores_and_digits(self):
        assert scan_all("_tmp foo_bar2") == [identifier("_tmp"), identifier("foo_bar2")]

    @pytest.mark.parametrize("text,token_type", [
        ("fun", TokenType.FUN),
        ("let", TokenType.LET),
        ("return", TokenType.RETURN),
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
    ])
    def test_keywords(self, text, token_type):
        assert types(text) == [token_type]

    def test_keywords_are_case_insensitive(self):
        tokens = scan_all("FUN Let ReTuRn")
        assert [t.type for t in tokens] == [TokenType.FUN, TokenType.LET, TokenType.RETURN]
        # Keywords carry no payload
        assert [t.value for t in tokens] == [None, None, None]

    def test_keyword_spellings_are_equal(self):
        assert scan_all("RETURN") == scan_all("return") == [Token(TokenType.RETURN)]

    def test_keyword_description(self):
        assert scan_all("Else")[0].describe() == "keyword 'else'"

    def test_keyword_prefix_is_identifier(self):
        assert scan_all("letter funny") == [identifier("letter"), identifier("funny")]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test // line comments."""

    def test_comment_is_skipped(self):
        assert scan_all("1 // one\n2") == [number(1), number(2)]

    def test_comment_on_own_line(self):
        assert types("// header\nfun") == [TokenType.FUN]

    def test_comment_ending_with_newline_at_end(self):
        assert scan_all("1 // done\n") == [number(1)]

    def test_single_slash_is_division(self):
        assert types("4 / 2") == [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER]

    def test_unterminated_comment(self):
        with pytest.raises(UnexpectedEndOfFileError) as exc_info:
            scan_all("1 // no newline")
        assert exc_info.value.location == SourceLocation("<input>", 1, 3)

    def test_unterminated_comment_aborts_whole_scan(self):
        with pytest.raises(ScanError):
            Scanner("fun main() { return 1; } //").scan_all()


# =============================================================================
# Location Tests
# =============================================================================

class TestLocations:
    """Test source position tracking."""

    def test_first_token(self):
        token = scan_all("fun")[0]
        assert token.location == SourceLocation("<input>", 1, 1)

    def test_line_and_column(self):
        tokens = scan_all("let\n  x")
        assert tokens[1].location == SourceLocation("<input>", 2, 3)

    def test_filename_is_recorded(self):
        token = scan_all("x", filename="prog.fn")[0]
        assert token.location.filename == "prog.fn"

    def test_location_not_part_of_equality(self):
        assert scan_all("   x")[0] == identifier("x")

    def test_repr(self):
        tokens = scan_all("fun main() { return 42; }")
        assert repr(tokens[0]) == "Token(FUN, 1:1)"
        assert repr(tokens[2]) == "Token(LPAREN, 1:9)"
        assert repr(tokens[6]) == "Token(NUMBER, 42.0, 1:21)"


# =============================================================================
# Scanner Interface Tests
# =============================================================================

class TestScannerInterface:
    """Test the lazy and iterable-source behaviour."""

    def test_rescan_is_deterministic(self):
        source = (
            "FUN main() { Let x = 3.25 * f(1, -2); // note\n"
            "  IF (x) g() ELSE 0.5; return x / 4; }"
        )
        first = scan_all(source)
        second = scan_all(source)
        assert [(t.type, t.value) for t in first] == [(t.type, t.value) for t in second]
        assert [t.location for t in first] == [t.location for t in second]
        assert first == second

    def test_accepts_character_iterator(self):
        assert Scanner(iter("1+2")).scan_all() == [number(1), Token(TokenType.PLUS), number(2)]

    def test_lazy_iteration(self):
        """Tokens before a bad character are produced before the error."""
        tokens = iter(Scanner("1 #"))
        assert next(tokens) == number(1)
        with pytest.raises(UnexpectedCharacterError):
            next(tokens)


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test scanner error reporting."""

    @pytest.mark.parametrize("char", ["#", "$", "!", "<", "."])
    def test_unexpected_character(self, char):
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            scan_all(f"x {char}")
        assert exc_info.value.char == char
        assert exc_info.value.location.column == 3

    def test_error_message_format(self):
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            scan_all("fun main() { return $; }", filename="prog.fn")
        assert str(exc_info.value).startswith("prog.fn:1:21: error: unexpected character '$'")
