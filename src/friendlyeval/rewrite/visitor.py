"""Tree traversal for the rewrite engine.

Children are found by walking a node's dataclass fields in declaration
order. Every node class declares its child fields in the order they appear
in the source, so a pre-order walk visits nodes left to right.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields

from friendlyeval.nodes import Arg, Assign, Inject, Node
from friendlyeval.symbols import InjectionMarker

# Assignment operators whose left side is an injection target.
TARGET_OPERATORS = frozenset({":=", "="})

# Span fields on every node; never children.
_SPAN_FIELDS = frozenset({"lineno", "col_offset", "start", "end", "op_start", "op_end"})


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in source order."""
    for f in fields(node):
        if f.name in _SPAN_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, (list, tuple)):
            for item in value:
                if isinstance(item, Node):
                    yield item


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants, depth first, parent first."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


@dataclass(frozen=True, slots=True)
class InjectionSite:
    """One ``!!``/``!!!`` occurrence and the position it is used in.

    Attributes:
        node: The Inject node.
        marker: Effective marker. ``!!`` on the left of ``:=`` or ``=`` is
            ASSIGN_TARGET; otherwise the marker as written.
        in_target: True when the marker sits on the left of ``:=``/``=``
            (also for ``!!!``, which is then rejected by the engine).
        op: The assignment operator (``":="`` or ``"="``) when in_target.
        op_start: Start offset of that operator, -1 when not in_target.
        op_end: End offset of that operator, -1 when not in_target.
    """

    node: Inject
    marker: InjectionMarker
    in_target: bool = False
    op: str | None = None
    op_start: int = -1
    op_end: int = -1


def walk_sites(tree: Node) -> Iterator[InjectionSite]:
    """Yield every injection site in ``tree`` in source order.

    Example:
        >>> [s.marker.value for s in walk_sites(parse("f(!!a := g(!!!b))"))]
        [':=', '!!!']

    """
    targets: dict[int, tuple[str, int, int]] = {}
    for node in iter_nodes(tree):
        if isinstance(node, Assign) and node.op in TARGET_OPERATORS:
            if isinstance(node.left, Inject):
                targets[id(node.left)] = (node.op, node.op_start, node.op_end)
        elif isinstance(node, Arg) and node.op == "=":
            if isinstance(node.name, Inject):
                targets[id(node.name)] = (node.op, node.op_start, node.op_end)
        elif isinstance(node, Inject):
            target = targets.pop(id(node), None)
            if target is None:
                yield InjectionSite(node=node, marker=InjectionMarker(node.marker))
                continue
            op, op_start, op_end = target
            marker = (
                InjectionMarker.ASSIGN_TARGET
                if node.marker == InjectionMarker.SINGLE.value
                else InjectionMarker.SPLICE
            )
            yield InjectionSite(
                node=node,
                marker=marker,
                in_target=True,
                op=op,
                op_start=op_start,
                op_end=op_end,
            )
