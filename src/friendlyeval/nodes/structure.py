"""Statement sequence nodes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from friendlyeval.nodes.base import NodeKind
from friendlyeval.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Block(Expr):
    """Braced statement sequence: { a; b }"""

    kind: ClassVar[NodeKind] = NodeKind.BLOCK

    body: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Program(Expr):
    """Root node: the statements of a whole buffer or selection."""

    kind: ClassVar[NodeKind] = NodeKind.BLOCK

    body: Sequence[Expr]
