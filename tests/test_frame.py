"""Tests for environments, promises, call frames and the active frame."""

from __future__ import annotations

import pytest

from friendlyeval.capture import (
    CallFrame,
    Environment,
    Promise,
    call_frame,
    evaluate_literal,
    get_call_frame,
)
from friendlyeval.exceptions import NotAnArgumentError, ParseError, PromiseError
from friendlyeval.parser import parse


def literal(source: str, env: Environment | None = None):
    return evaluate_literal(parse(source).body[0], env or Environment(), param="p", text=source)


class TestEnvironment:
    """Chained variable lookup."""

    def test_lookup_falls_through_to_parent(self):
        outer = Environment(bindings={"a": 1, "b": 2})
        inner = outer.child({"a": 10})
        assert inner.lookup("a") == 10
        assert inner.lookup("b") == 2
        assert inner.parent is outer

    def test_missing_name(self):
        with pytest.raises(KeyError):
            Environment().lookup("nope")

    def test_contains(self):
        env = Environment(bindings={"a": 1}).child({})
        assert "a" in env
        assert "b" not in env


class TestEvaluateLiteral:
    """The small subset of R a promise can be forced through."""

    def test_constants(self):
        assert literal('"cyl"') == "cyl"
        assert literal("2L") == 2
        assert literal("TRUE") is True

    def test_negative_number(self):
        assert literal("-1.5") == -1.5

    def test_parentheses(self):
        assert literal('("cyl")') == "cyl"

    def test_bound_symbol(self):
        env = Environment(bindings={"cols": ["mpg", "hp"]})
        assert literal("cols", env) == ["mpg", "hp"]

    def test_unbound_symbol(self):
        with pytest.raises(PromiseError) as exc_info:
            literal("cols")
        assert "object 'cols' not found" in str(exc_info.value)

    def test_c_flattens(self):
        assert literal('c("a", c("b", "c"))') == ["a", "b", "c"]

    def test_list_nests(self):
        assert literal('list("a", c("b"))') == ["a", ["b"]]

    def test_qualified_collector(self):
        assert literal('base::c("a")') == ["a"]

    def test_arbitrary_call_is_rejected(self):
        with pytest.raises(PromiseError):
            literal("paste0('a', 'b')")


class TestPromise:
    """Lazily forced arguments."""

    def test_force_from_expression(self):
        expr = parse('"cyl"').body[0]
        assert Promise(expr=expr, text='"cyl"', env=Environment()).force("col") == "cyl"

    def test_explicit_value_wins(self):
        expr = parse("x").body[0]
        promise = Promise(expr=expr, text="x", env=Environment(), value="mpg")
        assert promise.force("col") == "mpg"


class TestCallFrameFromCall:
    """Matching a call's arguments to formal parameters."""

    def test_positional(self, frame):
        assert frame.function == "plot_col"
        assert frame.promise("dat").text == "mtcars"
        assert frame.promise("col").text == "cyl"

    def test_exact_names_before_positions(self):
        frame = CallFrame.from_call("f(col = cyl, mtcars)", ("dat", "col"))
        assert frame.promise("dat").text == "mtcars"
        assert frame.promise("col").text == "cyl"

    def test_leftovers_go_to_dots(self, dots_frame):
        assert [p.text for p in dots_frame.dots] == ["cyl", "gear"]
        assert dots_frame.dots_promises() == dots_frame.dots

    def test_unknown_name_goes_to_dots(self):
        frame = CallFrame.from_call("f(mtcars, n = 3)", ("dat", "..."))
        assert [p.text for p in frame.dots] == ["3"]

    def test_formals_after_dots_are_name_only(self):
        frame = CallFrame.from_call("f(a, b, sep = x)", ("...", "sep"))
        assert [p.text for p in frame.dots] == ["a", "b"]
        assert frame.promise("sep").text == "x"

    def test_unknown_name_without_dots(self):
        with pytest.raises(NotAnArgumentError) as exc_info:
            CallFrame.from_call("f(mtcars, colum = cyl)", ("dat", "column"))
        assert "Did you mean 'column'?" in str(exc_info.value)

    def test_too_many_arguments(self):
        with pytest.raises(NotAnArgumentError):
            CallFrame.from_call("f(a, b, c)", ("x", "y"))

    def test_string_argument_names(self):
        frame = CallFrame.from_call('f("col" = cyl)', ("col",))
        assert frame.promise("col").text == "cyl"

    def test_explicit_values(self):
        frame = CallFrame.from_call("f(dat, arg)", ("dat", "arg"), values={"arg": "cyl"})
        assert frame.value("arg") == "cyl"
        assert frame.promise("arg").text == "arg"

    def test_value_for_unknown_parameter(self):
        with pytest.raises(NotAnArgumentError):
            CallFrame.from_call("f(dat, arg)", ("dat", "arg"), values={"nope": "cyl"})

    def test_value_for_unsupplied_parameter(self):
        with pytest.raises(PromiseError) as exc_info:
            CallFrame.from_call("f(dat)", ("dat", "arg"), values={"arg": "cyl"})
        assert "does not supply" in str(exc_info.value)

    def test_values_forced_from_environment(self):
        env = Environment(bindings={"wanted": "cyl"})
        frame = CallFrame.from_call("f(dat, wanted)", ("dat", "arg"), env=env)
        assert frame.value("arg") == "cyl"

    def test_dots_is_not_a_single_parameter(self, dots_frame):
        with pytest.raises(NotAnArgumentError):
            dots_frame.promise("...")

    def test_source_must_be_a_call(self):
        with pytest.raises(ParseError):
            CallFrame.from_call("mtcars", ("dat",))


class TestActiveFrame:
    """call_frame() activates a frame for a dynamic extent."""

    def test_no_frame_by_default(self):
        assert get_call_frame() is None

    def test_nesting_restores_outer(self, frame, dots_frame):
        with call_frame(frame):
            assert get_call_frame() is frame
            with call_frame(dots_frame) as active:
                assert active is dots_frame
                assert get_call_frame() is dots_frame
            assert get_call_frame() is frame
        assert get_call_frame() is None

    def test_restored_after_error(self, frame):
        with pytest.raises(RuntimeError), call_frame(frame):
            raise RuntimeError("boom")
        assert get_call_frame() is None
