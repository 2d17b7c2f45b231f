"""Expression nodes for the friendlyeval syntax tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Literal

from friendlyeval.nodes.base import Node, NodeKind


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Constant value: string, number, TRUE/FALSE, NULL, NA, Inf, NaN.

    ``raw`` keeps the literal exactly as written (quotes, suffixes).
    """

    kind: ClassVar[NodeKind] = NodeKind.LITERAL

    value: str | int | float | complex | bool | None
    raw: str


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Symbol reference: cyl, `my col`"""

    kind: ClassVar[NodeKind] = NodeKind.SYMBOL

    name: str
    backticked: bool = False


@dataclass(frozen=True, slots=True)
class Namespaced(Expr):
    """Namespace access: rlang::sym, pkg:::internal"""

    package: str
    name: str
    internal: bool = False

    @property
    def qualified(self) -> str:
        sep = ":::" if self.internal else "::"
        return f"{self.package}{sep}{self.name}"


@dataclass(frozen=True, slots=True)
class Arg(Node):
    """One call or index argument.

    ``f(x)`` has no name; ``f(a = x)`` has one. The name may be any
    expression so an injected target written as ``f(!!lhs = x)`` can be
    located and rewritten to ``:=`` (which parses as an Assign value).
    ``op_start``/``op_end`` span the ``=`` token (both -1 when unnamed). An empty slot
    (``x[, 1]``) has neither name nor value.
    """

    name: Expr | None
    value: Expr | None
    op: Literal["="] | None = None
    op_start: int = -1
    op_end: int = -1


@dataclass(frozen=True, slots=True)
class Call(Expr):
    """Function call: mutate(dat, y = x * 2)"""

    kind: ClassVar[NodeKind] = NodeKind.CALL

    func: Expr
    args: Sequence[Arg] = ()

    @property
    def resolved_callee(self) -> str | None:
        """Callee identifier when statically determinable.

        ``f(...)`` gives ``"f"``, ``pkg::f(...)`` gives ``"pkg::f"``, anything
        else (``x$f()``, ``(g)()``, ``f()()``) gives None.
        """
        if isinstance(self.func, Name):
            return self.func.name
        if isinstance(self.func, Namespaced):
            return self.func.qualified
        return None


@dataclass(frozen=True, slots=True)
class Index(Expr):
    """Subscript: x[i, j] or x[[i]]"""

    obj: Expr
    args: Sequence[Arg] = ()
    double: bool = False


@dataclass(frozen=True, slots=True)
class Dollar(Expr):
    """Component access: df$col, obj@slot"""

    obj: Expr
    attr: Expr
    op: Literal["$", "@"] = "$"


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Prefix operator: -x, +x, !x, ~x, ?x"""

    op: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class Inject(Expr):
    """Injection marker applied to an operand: !!x or !!!xs"""

    marker: Literal["!!", "!!!"]
    operand: Expr


@dataclass(frozen=True, slots=True)
class BinOp(Expr):
    """Binary operator: a + b, a %in% b, a |> f(), y ~ x"""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Assign(Expr):
    """Assignment: x <- v, x <<- v, x = v, !!lhs := v, v -> x

    ``left`` and ``right`` keep source order; ``target``/``value`` give the
    semantic sides, which are swapped for the rightward operators.
    """

    kind: ClassVar[NodeKind] = NodeKind.ASSIGNMENT

    op: str
    left: Expr
    right: Expr
    op_start: int
    op_end: int

    @property
    def rightward(self) -> bool:
        return self.op in ("->", "->>")

    @property
    def target(self) -> Expr:
        return self.right if self.rightward else self.left

    @property
    def value(self) -> Expr:
        return self.left if self.rightward else self.right


@dataclass(frozen=True, slots=True)
class Paren(Expr):
    """Parenthesized expression: (a + b)"""

    expr: Expr
