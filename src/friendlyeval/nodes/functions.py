"""Function definition nodes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from friendlyeval.nodes.base import Node
from friendlyeval.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Param(Node):
    """Formal parameter: x, n = 2L, ..."""

    name: str
    default: Expr | None = None


@dataclass(frozen=True, slots=True)
class FunctionDef(Expr):
    """Function literal: function(x, ...) body, or the \\(x) shorthand"""

    params: Sequence[Param]
    body: Expr
    lambda_: bool = False

    @property
    def formals(self) -> tuple[str, ...]:
        return tuple(param.name for param in self.params)
