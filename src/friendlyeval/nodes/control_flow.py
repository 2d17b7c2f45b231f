"""Control flow nodes."""

from __future__ import annotations

from dataclasses import dataclass

from friendlyeval.nodes.expressions import Expr, Name


@dataclass(frozen=True, slots=True)
class If(Expr):
    """Conditional: if (test) body else else_"""

    test: Expr
    body: Expr
    else_: Expr | None = None


@dataclass(frozen=True, slots=True)
class For(Expr):
    """For loop: for (target in iter) body"""

    target: Name
    iter: Expr
    body: Expr


@dataclass(frozen=True, slots=True)
class While(Expr):
    """While loop: while (test) body"""

    test: Expr
    body: Expr


@dataclass(frozen=True, slots=True)
class Repeat(Expr):
    """Infinite loop: repeat body"""

    body: Expr


@dataclass(frozen=True, slots=True)
class Break(Expr):
    """Loop exit: break"""


@dataclass(frozen=True, slots=True)
class Next(Expr):
    """Loop continue: next"""
