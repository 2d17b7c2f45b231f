"""Recognise capture calls directly beneath injection markers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from friendlyeval.capture.artifacts import CaptureVariant
from friendlyeval.nodes import Call, Node
from friendlyeval.rewrite.visitor import InjectionSite
from friendlyeval.symbols import InjectionMarker


@dataclass(frozen=True, slots=True)
class RewriteMatch:
    """A capture call under a marker, found during one rewrite.

    Attributes:
        site: Where the marker was found.
        call: The capture call that is the marker's direct operand.
        variant: Which capture the call performs.
    """

    site: InjectionSite
    call: Call
    variant: CaptureVariant

    @property
    def marker(self) -> InjectionMarker:
        return self.site.marker

    @property
    def callee(self) -> Node:
        return self.call.func

    @property
    def lineno(self) -> int:
        return self.call.lineno

    @property
    def col_offset(self) -> int:
        return self.call.col_offset


def capture_variant(node: Node, names: Mapping[str, CaptureVariant]) -> CaptureVariant | None:
    """Variant performed by ``node`` if it is a capture call, else None."""
    if not isinstance(node, Call):
        return None
    callee = node.resolved_callee
    if callee is None:
        return None
    return names.get(callee)


def match_site(site: InjectionSite, names: Mapping[str, CaptureVariant]) -> RewriteMatch | None:
    """Match ``site`` when its operand is itself a capture call.

    Only the direct operand is considered: ``!!(typed_as_name(x))`` and
    ``!!rev(typed_list_as_name_list(x))`` do not match.
    """
    operand = site.node.operand
    if not isinstance(operand, Call):
        return None
    variant = capture_variant(operand, names)
    if variant is None:
        return None
    return RewriteMatch(site=site, call=operand, variant=variant)
