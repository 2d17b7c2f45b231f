"""Tests for the R-style lexer."""

from __future__ import annotations

import pytest

from friendlyeval._types import TokenType
from friendlyeval.exceptions import ErrorCode
from friendlyeval.lexer import Lexer, LexerError, tokenize


def types(source: str) -> list[TokenType]:
    return [token.type for token in tokenize(source)]


class TestInjectionMarkers:
    """Runs of '!' resolve to negation, injection and splicing."""

    def test_bang_bang(self):
        assert types("!!x * 2") == [
            TokenType.BANG_BANG,
            TokenType.NAME,
            TokenType.STAR,
            TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_bang_bang_bang(self):
        assert types("!!!xs") == [TokenType.BANG_BANG_BANG, TokenType.NAME, TokenType.EOF]

    def test_single_bang_is_not(self):
        assert types("!x") == [TokenType.NOT, TokenType.NAME, TokenType.EOF]

    def test_extra_bangs_are_leading_negations(self):
        assert types("!!!!x") == [
            TokenType.NOT,
            TokenType.BANG_BANG_BANG,
            TokenType.NAME,
            TokenType.EOF,
        ]

    def test_not_equal_keeps_its_bang(self):
        assert types("a != b") == [TokenType.NAME, TokenType.NE, TokenType.NAME, TokenType.EOF]

    def test_marker_spans(self):
        tokens = tokenize("f(!!!xs)")
        marker = tokens[2]
        assert marker.type == TokenType.BANG_BANG_BANG
        assert (marker.start, marker.end) == (2, 5)


class TestOperators:
    """Longest-match operator scanning."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("a <- b", TokenType.LEFT_ASSIGN),
            ("a <<- b", TokenType.SUPER_ASSIGN),
            ("a -> b", TokenType.RIGHT_ASSIGN),
            ("a ->> b", TokenType.RIGHT_SUPER_ASSIGN),
            ("a := b", TokenType.WALRUS),
            ("a = b", TokenType.EQ_ASSIGN),
            ("a == b", TokenType.EQ),
            ("a |> b", TokenType.PIPE),
            ("a && b", TokenType.AND2),
            ("a || b", TokenType.OR2),
            ("a ~ b", TokenType.TILDE),
            ("a$b", TokenType.DOLLAR),
            ("a@b", TokenType.AT),
        ],
    )
    def test_binary_operator(self, source: str, expected: TokenType):
        assert types(source)[1] == expected

    def test_namespace_access(self):
        assert types("rlang::sym")[:3] == [TokenType.NAME, TokenType.NS_GET, TokenType.NAME]
        assert types("pkg:::f")[1] == TokenType.NS_GET_INT

    def test_special_operator(self):
        tokens = tokenize("x %in% y")
        assert tokens[1].type == TokenType.SPECIAL
        assert tokens[1].value == "%in%"

    def test_double_bracket(self):
        assert types("x[[1]]") == [
            TokenType.NAME,
            TokenType.DLBRACKET,
            TokenType.NUMBER,
            TokenType.RBRACKET,
            TokenType.RBRACKET,
            TokenType.EOF,
        ]

    def test_lambda_backslash(self):
        assert types("\\(x) x")[0] == TokenType.BACKSLASH


class TestLiterals:
    """Numbers, strings and names."""

    @pytest.mark.parametrize("source", ["1", "1L", "0x1F", "1.5", ".5", "1e-3", "2i"])
    def test_numbers(self, source: str):
        tokens = tokenize(source)
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == source

    def test_string_with_escaped_quote(self):
        tokens = tokenize('"a\\"b" x')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == '"a\\"b"'
        assert tokens[1].type == TokenType.NAME

    def test_single_quoted_string(self):
        assert types("'cyl'")[0] == TokenType.STRING

    def test_raw_string(self):
        tokens = tokenize('r"(C:\\path)" + 1')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == 'r"(C:\\path)"'

    def test_name_starting_with_r_is_not_raw_string(self):
        assert types("rev(x)")[:2] == [TokenType.NAME, TokenType.LPAREN]

    def test_dotted_names(self):
        tokens = tokenize(".data$x ...")
        assert tokens[0].value == ".data"
        assert tokens[3].value == "..."

    def test_backtick_name_holds_inner_text(self):
        tokens = tokenize("`my col` + 1")
        assert tokens[0].type == TokenType.NAME
        assert tokens[0].value == "my col"
        assert (tokens[0].start, tokens[0].end) == (0, 8)

    def test_keywords(self):
        assert types("function(x) if (x) y else z")[0] == TokenType.FUNCTION
        assert TokenType.IF in types("if (x) y")
        assert TokenType.ELSE in types("if (x) y else z")
        assert types("for (i in x) next")[:5] == [
            TokenType.FOR,
            TokenType.LPAREN,
            TokenType.NAME,
            TokenType.IN,
            TokenType.NAME,
        ]


class TestLayout:
    """Comments, newlines and positions."""

    def test_comment_at_end_of_input(self):
        assert types("x # note") == [TokenType.NAME, TokenType.EOF]
        assert types("#") == [TokenType.EOF]

    def test_comments_produce_no_tokens(self):
        assert types("x # !!typed_as_name(col)\ny") == [
            TokenType.NAME,
            TokenType.NEWLINE,
            TokenType.NAME,
            TokenType.EOF,
        ]

    def test_empty_source(self):
        assert types("") == [TokenType.EOF]

    def test_line_and_column(self):
        tokens = tokenize("a\n  b")
        b = tokens[2]
        assert (b.lineno, b.col_offset) == (2, 2)

    def test_multiline_string_advances_line(self):
        tokens = tokenize('"a\nb" c')
        c = tokens[1]
        assert (c.lineno, c.col_offset) == (2, 3)

    def test_spans_slice_source(self):
        source = "mutate(dat, y = !!typed_as_name(x) * 2)"
        for token in tokenize(source)[:-1]:
            assert source[token.start : token.end] == token.value

    def test_lexer_class_matches_function(self):
        source = "x <- c(1, 2)"
        assert Lexer(source).tokenize() == tokenize(source)


class TestErrors:
    """Malformed input raises LexerError with a location."""

    def test_unterminated_string(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize('x <- "abc')
        assert exc_info.value.code == ErrorCode.UNTERMINATED_STRING
        assert exc_info.value.col_offset == 5

    def test_unterminated_backtick(self):
        with pytest.raises(LexerError):
            tokenize("`abc")

    def test_unterminated_raw_string(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize('r"(abc"')
        assert exc_info.value.code == ErrorCode.UNTERMINATED_STRING

    def test_unexpected_character(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("x <- 1 £", filename="a.R")
        error = exc_info.value
        assert error.code == ErrorCode.UNEXPECTED_CHARACTER
        assert (error.lineno, error.col_offset) == (1, 7)
        assert error.location == "a.R:1:7"
