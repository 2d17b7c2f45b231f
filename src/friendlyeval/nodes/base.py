"""Base node class for the friendlyeval syntax tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class NodeKind(Enum):
    """Coarse node classification used by tree walkers."""

    CALL = "call"
    SYMBOL = "symbol"
    LITERAL = "literal"
    ASSIGNMENT = "assignment"
    BLOCK = "block"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all syntax-tree nodes.

    All nodes track their source location for error reporting, plus the
    character span ``source[start:end]`` they were parsed from so untouched
    regions can be copied back verbatim. Nodes are immutable.

    """

    kind: ClassVar[NodeKind] = NodeKind.OTHER

    lineno: int
    col_offset: int
    start: int
    end: int

    def text(self, source: str) -> str:
        """Return the exact source text this node was parsed from."""
        return source[self.start : self.end]
