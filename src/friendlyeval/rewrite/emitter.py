"""Turn matches into text edits and splice them into the source.

Edits only ever replace a callee name or an ``=`` token. Argument text,
markers, whitespace and comments are copied from the input unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from friendlyeval.rewrite.config import RewriteConfig
from friendlyeval.rewrite.matcher import RewriteMatch


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace ``source[start:end]`` with ``text``."""

    start: int
    end: int
    text: str


def emit(match: RewriteMatch, config: RewriteConfig) -> list[Edit]:
    """Edits that replace one matched capture call with its native form.

    The callee is swapped for the native form. For the assignment-tagged
    capture written as ``!!name = value`` the ``=`` becomes ``:=``.
    """
    callee = match.callee
    edits = [Edit(callee.start, callee.end, config.native_callee(match.variant))]
    site = match.site
    if match.variant.for_assignment and site.in_target and site.op == "=":
        edits.append(Edit(site.op_start, site.op_end, ":="))
    return edits


def apply_edits(source: str, edits: Iterable[Edit]) -> str:
    """Splice non-overlapping ``edits`` into ``source``.

    Raises:
        ValueError: Two edits overlap.
    """
    parts: list[str] = []
    pos = 0
    for edit in sorted(edits, key=lambda e: (e.start, e.end)):
        if edit.start < pos:
            raise ValueError(f"Overlapping edit at offset {edit.start}")
        parts.append(source[pos : edit.start])
        parts.append(edit.text)
        pos = edit.end
    parts.append(source[pos:])
    return "".join(parts)
