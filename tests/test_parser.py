"""Tests for the R-style parser: tree shape, precedence, spans and errors."""

from __future__ import annotations

import math

import pytest

from friendlyeval.exceptions import ErrorCode, ParseError
from friendlyeval.lexer import tokenize
from friendlyeval.nodes import (
    Assign,
    BinOp,
    Block,
    Break,
    Call,
    Const,
    Dollar,
    For,
    FunctionDef,
    If,
    Index,
    Inject,
    Name,
    Namespaced,
    Next,
    NodeKind,
    Paren,
    Repeat,
    UnaryOp,
    While,
)
from friendlyeval.parser import Parser, parse, parse_call


def expr(source: str):
    program = parse(source)
    assert len(program.body) == 1
    return program.body[0]


class TestInjection:
    """Injection markers bind like unary minus."""

    def test_marker_applies_to_operand_only(self):
        node = expr("!!x * 2")
        assert isinstance(node, BinOp)
        assert node.op == "*"
        assert isinstance(node.left, Inject)
        assert node.left.marker == "!!"
        assert node.left.operand == Name(lineno=1, col_offset=2, start=2, end=3, name="x")

    def test_marker_over_call(self):
        node = expr("!!typed_as_name(arg)*2")
        assert isinstance(node.left, Inject)
        call = node.left.operand
        assert isinstance(call, Call)
        assert call.resolved_callee == "typed_as_name"

    def test_splice_marker(self):
        node = expr("!!!syms(cols)")
        assert isinstance(node, Inject)
        assert node.marker == "!!!"

    def test_power_binds_tighter_than_marker(self):
        node = expr("!!x^2")
        assert isinstance(node, Inject)
        assert isinstance(node.operand, BinOp)

    def test_walrus_target_in_call(self):
        call = expr("mutate(dat, !!lhs(x) := !!rhs(y) * 2)")
        assign = call.args[1].value
        assert isinstance(assign, Assign)
        assert assign.op == ":="
        assert isinstance(assign.left, Inject)
        assert isinstance(assign.right, BinOp)
        assert isinstance(assign.right.left, Inject)

    def test_equals_target_in_call(self):
        source = "mutate(dat, !!lhs(x) = v)"
        arg = expr(source).args[1]
        assert isinstance(arg.name, Inject)
        assert arg.op == "="
        assert source[arg.op_start : arg.op_end] == "="


class TestPrecedence:
    """Operator precedence and associativity."""

    def test_product_before_sum(self):
        node = expr("a + b * c")
        assert node.op == "+"
        assert node.right.op == "*"

    def test_power_is_right_associative(self):
        node = expr("2^3^2")
        assert isinstance(node.right, BinOp)
        assert node.right.op == "^"

    def test_unary_minus_below_power(self):
        node = expr("-2^2")
        assert isinstance(node, UnaryOp)
        assert isinstance(node.operand, BinOp)

    def test_left_assignment_is_right_associative(self):
        node = expr("a <- b <- 1")
        assert isinstance(node, Assign)
        assert isinstance(node.right, Assign)

    def test_rightward_assignment_target(self):
        node = expr("1 -> x")
        assert node.rightward
        assert node.target.name == "x"
        assert node.value.value == 1

    def test_comparison_below_arithmetic(self):
        node = expr("a + 1 == b")
        assert node.op == "=="

    def test_special_and_pipe(self):
        node = expr("x %in% y |> f()")
        assert node.op == "|>"
        assert node.left.op == "%in%"

    def test_formula(self):
        assert expr("y ~ x + z").op == "~"
        assert isinstance(expr("~ x"), UnaryOp)

    def test_negation_below_comparison(self):
        node = expr("!a == b")
        assert isinstance(node, UnaryOp)
        assert node.operand.op == "=="


class TestAtoms:
    """Names, constants and literals."""

    def test_assignment(self):
        node = expr("x <- 1")
        assert isinstance(node, Assign)
        assert node.kind == NodeKind.ASSIGNMENT
        assert node.target.name == "x"
        assert node.value == Const(lineno=1, col_offset=5, start=5, end=6, value=1, raw="1")

    @pytest.mark.parametrize(
        ("source", "value"),
        [("1L", 1), ("0x10", 16), ("1.5", 1.5), ("2i", 2j), ("1e3", 1000.0)],
    )
    def test_numbers(self, source, value):
        assert expr(source).value == value

    def test_constants(self):
        assert expr("TRUE").value is True
        assert expr("NULL").value is None
        assert math.isinf(expr("Inf").value)

    def test_backticked_constant_is_a_name(self):
        node = expr("`TRUE`")
        assert isinstance(node, Name)
        assert node.backticked

    def test_backtick_name(self):
        node = expr("`my col`")
        assert node.name == "my col"
        assert node.kind == NodeKind.SYMBOL

    def test_string_escapes(self):
        assert expr('"a\\tb"').value == "a\tb"
        assert expr("'it\\'s'").value == "it's"
        assert expr('"\\x41\\u00e9"').value == "Aé"

    def test_raw_string(self):
        assert expr('r"(C:\\path)"').value == "C:\\path"

    def test_namespaced_call(self):
        call = expr('rlang::sym("cyl")')
        assert isinstance(call.func, Namespaced)
        assert call.func.package == "rlang"
        assert call.resolved_callee == "rlang::sym"
        assert expr("pkg:::f()").resolved_callee == "pkg:::f"

    def test_unresolvable_callee(self):
        assert expr("x$f()").resolved_callee is None
        assert expr("f()()").resolved_callee is None


class TestPostfix:
    """Calls, indexing and component access."""

    def test_call_arguments(self):
        call = expr("mutate(dat, y = x * 2)")
        assert call.kind == NodeKind.CALL
        assert len(call.args) == 2
        named = call.args[1]
        assert named.name.name == "y"
        assert named.op == "="
        assert (named.op_start, named.op_end) == (14, 15)
        assert isinstance(named.value, BinOp)

    def test_empty_argument_slot(self):
        node = expr("x[, 1]")
        assert isinstance(node, Index)
        assert node.args[0].name is None
        assert node.args[0].value is None
        assert node.args[1].value.value == 1

    def test_named_argument_without_value(self):
        arg = expr("f(x = )").args[0]
        assert arg.name.name == "x"
        assert arg.value is None

    def test_double_bracket(self):
        node = expr("x[[1]]")
        assert isinstance(node, Index)
        assert node.double
        assert node.end == 6

    def test_nested_brackets(self):
        node = expr("x[[a[1]]]")
        assert node.double
        assert isinstance(node.args[0].value, Index)

    def test_dollar_and_at(self):
        node = expr("df$col")
        assert isinstance(node, Dollar)
        assert node.attr.name == "col"
        assert expr("obj@slot").op == "@"

    def test_empty_call(self):
        assert expr("f()").args == ()


class TestStatements:
    """Newline rules and compound expressions."""

    def test_newlines_ignored_inside_parentheses(self):
        call = expr("f(a,\n  b\n)")
        assert len(call.args) == 2

    def test_trailing_operator_continues_line(self):
        node = expr("x <-\n  1")
        assert isinstance(node, Assign)

    def test_leading_operator_starts_new_statement(self):
        program = parse("x\n+ 1")
        assert len(program.body) == 2
        assert isinstance(program.body[1], UnaryOp)

    def test_semicolons(self):
        assert len(parse("a <- 1; b <- 2").body) == 2

    def test_block(self):
        node = expr("{\n  a\n  b\n}")
        assert isinstance(node, Block)
        assert node.kind == NodeKind.BLOCK
        assert len(node.body) == 2

    def test_if_else(self):
        node = expr("if (a) b else c")
        assert isinstance(node, If)
        assert node.else_.name == "c"

    def test_else_on_new_line_inside_braces(self):
        block = expr("{\n  if (a) b\n  else c\n}")
        assert block.body[0].else_ is not None

    def test_else_on_new_line_at_top_level_is_an_error(self):
        with pytest.raises(ParseError):
            parse("if (a) b\nelse c")

    def test_function(self):
        node = expr("function(dat, col = 2, ...) {\n  dat\n}")
        assert isinstance(node, FunctionDef)
        assert node.formals == ("dat", "col", "...")
        assert node.params[1].default.value == 2
        assert not node.lambda_

    def test_lambda(self):
        node = expr("\\(x) x + 1")
        assert node.lambda_
        assert node.formals == ("x",)

    def test_loops(self):
        assert isinstance(expr("for (i in xs) print(i)"), For)
        assert isinstance(expr("while (TRUE) break"), While)
        node = expr("repeat { next }")
        assert isinstance(node, Repeat)
        assert isinstance(node.body.body[0], Next)
        assert isinstance(expr("while (x) break").body, Break)

    def test_paren(self):
        node = expr("(a + b) * c")
        assert isinstance(node.left, Paren)


class TestSpans:
    """Every node slices its own text back out of the source."""

    def test_argument_text(self):
        source = "mutate(dat, y = !!typed_as_name(x) * 2)"
        call = expr(source)
        assert call.args[1].value.text(source) == "!!typed_as_name(x) * 2"
        assert call.args[1].text(source) == "y = !!typed_as_name(x) * 2"
        assert call.text(source) == source

    def test_second_line_position(self):
        source = "a <- 1\n  f(x)"
        call = parse(source).body[1]
        assert (call.lineno, call.col_offset) == (2, 2)
        assert call.text(source) == "f(x)"

    def test_program_spans_whole_source(self):
        source = "# header\nx <- 1\n"
        program = parse(source)
        assert (program.start, program.end) == (0, len(source))


class TestErrors:
    """Syntax errors are fatal and located."""

    def test_unclosed_call(self):
        with pytest.raises(ParseError) as exc_info:
            parse("f(a")
        assert exc_info.value.code == ErrorCode.UNCLOSED_BRACKET

    def test_two_expressions_on_one_line(self):
        with pytest.raises(ParseError) as exc_info:
            parse("a b")
        assert "after expression" in exc_info.value.message
        assert exc_info.value.col_offset == 2

    def test_stray_closer(self):
        with pytest.raises(ParseError):
            parse(")")

    def test_missing_name_after_namespace(self):
        with pytest.raises(ParseError):
            parse("rlang::(x)")

    @pytest.mark.parametrize("escape", ["\\U{FFFFFFFF}", "\\U{110000}"])
    def test_escape_beyond_unicode_range(self, escape):
        with pytest.raises(ParseError) as exc_info:
            parse(f'f("{escape}")')
        assert exc_info.value.col_offset == 2
        assert "beyond U+10FFFF" in exc_info.value.message

    def test_highest_code_point_is_accepted(self):
        assert parse('"\\U{10FFFF}"').body[0].value == "\U0010ffff"

    def test_deep_nesting(self):
        with pytest.raises(ParseError) as exc_info:
            parse("if (a) 1 else " * 2000 + "2")
        assert "nested too deeply" in exc_info.value.message

    def test_deep_nesting_in_call(self):
        with pytest.raises(ParseError):
            parse_call("f(" * 2000 + ")" * 2000)

    def test_error_carries_snippet(self):
        with pytest.raises(ParseError) as exc_info:
            parse("x <- 1\ny <- )", filename="a.R")
        error = exc_info.value
        assert error.lineno == 2
        assert error.source_snippet is not None
        assert "a.R:2:" in error.format_compact()


class TestParseCall:
    """Parsing a single call expression."""

    def test_call(self):
        call = parse_call("f(x, y = 2)")
        assert isinstance(call, Call)
        assert len(call.args) == 2

    def test_not_a_call(self):
        with pytest.raises(ParseError):
            parse_call("x")

    def test_more_than_one_expression(self):
        with pytest.raises(ParseError):
            parse_call("f(x); g()")

    def test_parser_class(self):
        source = "f(x)"
        assert Parser(tokenize(source), source=source).parse_call() == parse_call(source)
