"""Call frames: the explicit argument-passing record capture operations read.

A typed capture needs "what the caller of the enclosing function typed for
this parameter". Instead of reflecting over the interpreter stack, the
enclosing call is modelled as a CallFrame pairing each formal parameter with
a Promise (the raw expression, its source text and the environment it was
written in). Frames are passed explicitly, or activated for a dynamic extent
with ``call_frame()``:

    >>> frame = CallFrame.from_call("double_col(mtcars, cyl)", ("dat", "arg"))
    >>> with call_frame(frame):
    ...     typed_as_name("arg").as_symbol()
    Symbol('cyl')

The active frame lives in a ContextVar, so each thread and asyncio task sees
its own and a frame never leaks past the ``with`` block that set it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from friendlyeval.exceptions import NotAnArgumentError, PromiseError
from friendlyeval.nodes import Call, Const, Expr, Name, Paren, UnaryOp
from friendlyeval.parser import parse_call

DOTS = "..."

# Calls a promise may be forced through: c("a", "b"), list(x, y)
_COLLECTORS = frozenset({"c", "list", "base::c", "base::list"})


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class Environment:
    """Variable bindings visible where an expression was written.

    Lookups fall through to ``parent`` when a name is not bound locally.
    """

    bindings: Mapping[str, Any] = field(default_factory=dict)
    parent: Environment | None = None
    name: str = "global"

    def lookup(self, name: str) -> Any:
        env: Environment | None = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        env: Environment | None = self
        while env is not None:
            if name in env.bindings:
                return True
            env = env.parent
        return False

    def child(self, bindings: Mapping[str, Any], name: str = "local") -> Environment:
        return Environment(bindings=bindings, parent=self, name=name)


@dataclass(frozen=True, slots=True)
class Promise:
    """An argument as supplied at the call site, not yet evaluated.

    ``value`` may be given up front; otherwise ``force()`` derives it from
    the expression.
    """

    expr: Expr
    text: str
    env: Environment
    value: Any = MISSING

    def force(self, param: str) -> Any:
        """Return the argument's value.

        Raises:
            PromiseError: The expression is not something a value can be
                derived from without an interpreter.
        """
        if self.value is not MISSING:
            return self.value
        return evaluate_literal(self.expr, self.env, param=param, text=self.text)


def evaluate_literal(expr: Expr, env: Environment, *, param: str = "", text: str = "") -> Any:
    """Evaluate the small, side-effect free subset a promise can be forced through.

    Supported: constants, symbols bound in ``env``, negated numbers,
    parentheses, and ``c(...)``/``list(...)`` of those (``c`` flattens).
    """
    if isinstance(expr, Const):
        return expr.value
    if isinstance(expr, Paren):
        return evaluate_literal(expr.expr, env, param=param, text=text)
    if isinstance(expr, Name):
        try:
            return env.lookup(expr.name)
        except KeyError:
            raise PromiseError(param, text, f"object '{expr.name}' not found") from None
    if (
        isinstance(expr, UnaryOp)
        and expr.op == "-"
        and isinstance(expr.operand, Const)
        and isinstance(expr.operand.value, (int, float))
    ):
        return -expr.operand.value
    if isinstance(expr, Call) and expr.resolved_callee in _COLLECTORS:
        flatten = expr.resolved_callee in ("c", "base::c")
        items: list[Any] = []
        for arg in expr.args:
            if arg.value is None:
                continue
            item = evaluate_literal(arg.value, env, param=param, text=text)
            if flatten and isinstance(item, list):
                items.extend(item)
            else:
                items.append(item)
        return items
    raise PromiseError(param, text, "only literals, bound symbols and c()/list() can be evaluated")


@dataclass(frozen=True, slots=True)
class CallFrame:
    """The argument-passing record of one call to the enclosing function.

    Attributes:
        formals: Formal parameter names, in declaration order (may include
            ``"..."``).
        promises: Promise per supplied formal parameter.
        dots: Promises collected by ``...``, in call order.
        env: Caller environment.
        function: Name of the enclosing function, for diagnostics.
    """

    formals: tuple[str, ...]
    promises: Mapping[str, Promise] = field(default_factory=dict)
    dots: tuple[Promise, ...] = ()
    env: Environment = field(default_factory=Environment)
    function: str | None = None

    def promise(self, param: str) -> Promise:
        """Return the promise bound to formal parameter ``param``.

        Raises:
            NotAnArgumentError: ``param`` is not a formal parameter.
            PromiseError: ``param`` is a formal that was not supplied.
        """
        if param == DOTS or param not in self.formals:
            raise NotAnArgumentError(param, self.function, self.formals)
        try:
            return self.promises[param]
        except KeyError:
            raise PromiseError(param, "", "argument is missing, with no default") from None

    def value(self, param: str) -> Any:
        """Force and return the value bound to ``param``."""
        return self.promise(param).force(param)

    def dots_promises(self) -> tuple[Promise, ...]:
        if DOTS not in self.formals:
            raise NotAnArgumentError(DOTS, self.function, self.formals)
        return self.dots

    @classmethod
    def from_call(
        cls,
        source: str,
        formals: Sequence[str],
        env: Environment | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> CallFrame:
        """Build a frame by parsing a call and matching it to ``formals``.

        Arguments are matched the way R matches them: exact names first,
        then unnamed arguments fill the remaining formals before ``...`` in
        order, and everything left over goes to ``...``.

        Args:
            source: Call text, e.g. ``"summarise_col(mtcars, cyl)"``.
            formals: Formal parameter names of the called function.
            env: Caller environment, used to force promises.
            values: Explicit values for parameters, bypassing forcing. Each key
                must name a formal the call supplies.

        Raises:
            ParseError: ``source`` is not a single call.
            NotAnArgumentError: A named argument matches no formal and there
                is no ``...``, or there are too many unnamed arguments,
                or a ``values`` key is not a formal.
            PromiseError: A ``values`` key names a formal the call does not
                supply.
        """
        env = env or Environment()
        values = values or {}
        call = parse_call(source)
        formals = tuple(formals)
        function = call.resolved_callee

        promises: dict[str, Promise] = {}
        unnamed: list[Promise] = []
        dots: list[Promise] = []

        for arg in call.args:
            if arg.value is None:
                continue
            promise = Promise(expr=arg.value, text=arg.value.text(source), env=env)
            if arg.name is None:
                unnamed.append(promise)
                continue
            name = _arg_name(arg.name)
            if name is not None and name in formals and name != DOTS and name not in promises:
                promises[name] = promise
            elif DOTS in formals:
                dots.append(promise)
            else:
                raise NotAnArgumentError(name or arg.name.text(source), function, formals)

        positional = [f for f in formals[: _dots_index(formals)] if f not in promises]
        for param, promise in zip(positional, unnamed, strict=False):
            promises[param] = promise
        leftover = unnamed[len(positional) :]
        if leftover:
            if DOTS not in formals:
                raise NotAnArgumentError(leftover[0].text, function, formals)
            dots.extend(leftover)

        for param, value in values.items():
            if param == DOTS or param not in formals:
                raise NotAnArgumentError(param, function, formals)
            if param not in promises:
                raise PromiseError(
                    param, "", "a value was given for an argument the call does not supply"
                )
            promises[param] = Promise(
                expr=promises[param].expr,
                text=promises[param].text,
                env=env,
                value=value,
            )

        return cls(
            formals=formals,
            promises=promises,
            dots=tuple(dots),
            env=env,
            function=function,
        )


def _arg_name(expr: Expr) -> str | None:
    if isinstance(expr, Name):
        return expr.name
    if isinstance(expr, Const) and isinstance(expr.value, str):
        return expr.value
    return None


def _dots_index(formals: tuple[str, ...]) -> int:
    return formals.index(DOTS) if DOTS in formals else len(formals)


# ---------------------------------------------------------------------------
# Active frame
# ---------------------------------------------------------------------------

_frame_var: ContextVar[CallFrame | None] = ContextVar("friendlyeval_call_frame", default=None)


def get_call_frame() -> CallFrame | None:
    """Return the frame activated by the innermost ``call_frame()``, if any."""
    return _frame_var.get()


@contextmanager
def call_frame(frame: CallFrame) -> Iterator[CallFrame]:
    """Make ``frame`` the active frame for the duration of the block.

    Nested blocks shadow outer ones; the previous frame is restored on exit.
    """
    token = _frame_var.set(frame)
    try:
        yield frame
    finally:
        _frame_var.reset(token)
