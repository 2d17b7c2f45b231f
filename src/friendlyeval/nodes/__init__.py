"""Syntax-tree nodes for R-style source.

Every node is a frozen, slotted dataclass carrying its line, column and
character span, so the tree can be walked and the original text sliced
back out of it without a pretty-printer.
"""

from friendlyeval.nodes.base import Node, NodeKind
from friendlyeval.nodes.control_flow import Break, For, If, Next, Repeat, While
from friendlyeval.nodes.expressions import (
    Arg,
    Assign,
    BinOp,
    Call,
    Const,
    Dollar,
    Expr,
    Index,
    Inject,
    Name,
    Namespaced,
    Paren,
    UnaryOp,
)
from friendlyeval.nodes.functions import FunctionDef, Param
from friendlyeval.nodes.structure import Block, Program

__all__ = [
    "Arg",
    "Assign",
    "BinOp",
    "Block",
    "Break",
    "Call",
    "Const",
    "Dollar",
    "Expr",
    "For",
    "FunctionDef",
    "If",
    "Index",
    "Inject",
    "Name",
    "Namespaced",
    "Next",
    "Node",
    "NodeKind",
    "Param",
    "Paren",
    "Program",
    "Repeat",
    "UnaryOp",
    "While",
]
