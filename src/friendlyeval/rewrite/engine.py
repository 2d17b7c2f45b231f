"""Rewrite engine: replace marked capture calls with native quoting forms.

Pipeline:
    source → parse() → walk_sites() → match_site() → check → emit() → apply_edits()

Text with no marked capture call comes back byte for byte. Any parse error
or rejected match aborts the whole rewrite; no partial output is produced.

Example:
    >>> rewrite("mutate(dat, y = !!typed_as_name(arg) * 2)")
    'mutate(dat, y = !!rlang::ensym(arg) * 2)'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from friendlyeval.capture.artifacts import Arity
from friendlyeval.exceptions import (
    ArityMismatchError,
    AssignTargetError,
    NestedCaptureError,
    RewriteError,
)
from friendlyeval.nodes import Call, Inject, Node
from friendlyeval.parser import parse
from friendlyeval.rewrite.config import DEFAULT_CONFIG, RewriteConfig
from friendlyeval.rewrite.emitter import Edit, apply_edits, emit
from friendlyeval.rewrite.matcher import RewriteMatch, capture_variant, match_site
from friendlyeval.rewrite.visitor import iter_nodes, walk_sites
from friendlyeval.symbols import InjectionMarker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RewriteResult:
    """Outcome of one rewrite.

    Attributes:
        text: The rewritten source.
        matches: Every rewritten capture call, in source order.
        unrewritten: Capture calls left alone because no marker sits
            directly over them (e.g. stored in a variable, spliced later).
    """

    text: str
    matches: tuple[RewriteMatch, ...] = ()
    unrewritten: tuple[Call, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.matches)


class Rewriter:
    """Rewrites capture calls under injection markers into native forms.

    One Rewriter may be reused across inputs; it holds no per-input state.

    Example:
        >>> rewriter = Rewriter(RewriteConfig(qualify=False))
        >>> rewriter.rewrite("select(dat, !!!value_list_as_name_list(cols))").text
        'select(dat, !!!syms(cols))'

    """

    __slots__ = ("_config", "_names")

    def __init__(self, config: RewriteConfig | None = None):
        self._config = config or DEFAULT_CONFIG
        self._names = self._config.capture_names()

    @property
    def config(self) -> RewriteConfig:
        return self._config

    def rewrite(self, source: str, filename: str | None = None) -> RewriteResult:
        """Rewrite ``source``.

        Raises:
            ParseError: ``source`` is not syntactically well-formed.
            RewriteError: A marked capture call is used in a way that has no
                native equivalent.
        """
        tree = parse(source, filename)

        matches: list[RewriteMatch] = []
        for site in walk_sites(tree):
            match = match_site(site, self._names)
            if match is None:
                continue
            self._check(match, source, filename)
            logger.debug(
                "%s:%d:%d: %s under '%s' -> %s",
                filename or "<buffer>",
                match.lineno,
                match.col_offset,
                match.variant.function_name,
                match.marker.value,
                self._config.native_callee(match.variant),
            )
            matches.append(match)

        matched_calls = {id(match.call) for match in matches}
        unrewritten = tuple(
            node
            for node in iter_nodes(tree)
            if isinstance(node, Call)
            and id(node) not in matched_calls
            and capture_variant(node, self._names) is not None
        )
        for call in unrewritten:
            logger.warning(
                "%s:%d:%d: '%s' is not directly under an injection marker; left unrewritten",
                filename or "<buffer>",
                call.lineno,
                call.col_offset,
                call.resolved_callee,
            )

        if not matches:
            return RewriteResult(text=source, unrewritten=unrewritten)

        edits: list[Edit] = []
        for match in matches:
            edits.extend(emit(match, self._config))
        return RewriteResult(
            text=apply_edits(source, edits),
            matches=tuple(matches),
            unrewritten=unrewritten,
        )

    def _check(self, match: RewriteMatch, source: str, filename: str | None) -> None:
        site = match.site
        name = match.variant.function_name
        callee = match.call.resolved_callee or name

        def fail(
            error: type[RewriteError], message: str, suggestion: str, node: Node | None = None
        ) -> RewriteError:
            node = node or site.node
            return error(
                message,
                lineno=node.lineno,
                col_offset=node.col_offset,
                source=source,
                filename=filename,
                suggestion=suggestion,
                width=len(node.marker) if isinstance(node, Inject) else 1,
            )

        inner = self._nested_capture(match.call)
        if inner is not None:
            inner_call = inner.operand if isinstance(inner, Inject) else inner
            raise fail(
                NestedCaptureError,
                f"'{inner_call.resolved_callee}' is used inside the arguments of '{callee}'",
                "capture into a variable first, then inject the variable",
                inner,
            )

        if site.in_target and site.marker is InjectionMarker.SPLICE:
            raise fail(
                ArityMismatchError,
                "'!!!' cannot be used as an assignment target",
                "use '!!' with a single-name capture on the left of ':='",
            )

        arity = match.variant.arity
        if arity is Arity.LIST and site.marker is not InjectionMarker.SPLICE:
            where = "an assignment target" if site.in_target else "'!!'"
            raise fail(
                ArityMismatchError,
                f"'{callee}' captures a list of names but is used as {where}",
                "use '!!!' to splice a list of names",
            )
        if arity is Arity.SINGLE and site.marker is InjectionMarker.SPLICE:
            raise fail(
                ArityMismatchError,
                f"'!!!' splices a list but '{callee}' captures a single name",
                "use '!!' to inject a single name",
            )

        if match.variant.for_assignment and not site.in_target:
            raise fail(
                AssignTargetError,
                f"'{callee}' is only valid as an assignment target",
                f"write '!!{callee}(...) := value'",
            )

    def _nested_capture(self, call: Call) -> Node | None:
        """First capture call in ``call``'s arguments (or the marker over it)."""
        for arg in call.args:
            for node in iter_nodes(arg):
                target = node.operand if isinstance(node, Inject) else node
                if capture_variant(target, self._names) is not None:
                    return node
        return None


def rewrite(text: str, config: RewriteConfig | None = None) -> str:
    """Rewrite ``text`` and return the new source.

    Raises:
        ParseError: ``text`` is not syntactically well-formed.
        RewriteError: A marked capture call cannot be rewritten.
    """
    return Rewriter(config).rewrite(text).text


def rewrite_selection(
    text: str,
    start: int,
    end: int,
    config: RewriteConfig | None = None,
) -> str:
    """Rewrite only ``text[start:end]`` and return the whole buffer.

    The selection must parse on its own. Positions in errors are relative
    to the selection.

    Raises:
        ValueError: The range is not within ``text``.
        ParseError: The selection is not syntactically well-formed.
        RewriteError: A marked capture call cannot be rewritten.
    """
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"Selection {start}:{end} is outside a buffer of length {len(text)}")
    selected = Rewriter(config).rewrite(text[start:end], filename="<selection>").text
    return text[:start] + selected + text[end:]


class Buffer(Protocol):
    """An editor buffer: anything that can hand over and take back its text."""

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...


def rewrite_buffer(buffer: Buffer, config: RewriteConfig | None = None) -> RewriteResult:
    """Rewrite an editor buffer in place.

    ``buffer.set_text()`` is called only when the rewrite succeeds and
    changes something; on error the buffer is left untouched.
    """
    result = Rewriter(config).rewrite(buffer.get_text())
    if result.changed:
        buffer.set_text(result.text)
    return result
