"""Source-to-source rewrite of capture calls into native quoting forms.

    >>> from friendlyeval.rewrite import rewrite
    >>> rewrite("group_by(dat, !!!typed_list_as_name_list(...))")
    'group_by(dat, !!!rlang::ensyms(...))'

"""

from friendlyeval.rewrite.config import DEFAULT_CONFIG, NATIVE_FORMS, TREAT_ALIASES, RewriteConfig
from friendlyeval.rewrite.emitter import Edit, apply_edits, emit
from friendlyeval.rewrite.engine import (
    Buffer,
    Rewriter,
    RewriteResult,
    rewrite,
    rewrite_buffer,
    rewrite_selection,
)
from friendlyeval.rewrite.matcher import RewriteMatch, capture_variant, match_site
from friendlyeval.rewrite.visitor import InjectionSite, iter_child_nodes, iter_nodes, walk_sites

__all__ = [
    "DEFAULT_CONFIG",
    "NATIVE_FORMS",
    "TREAT_ALIASES",
    "Buffer",
    "Edit",
    "InjectionSite",
    "RewriteConfig",
    "RewriteMatch",
    "RewriteResult",
    "Rewriter",
    "apply_edits",
    "capture_variant",
    "emit",
    "iter_child_nodes",
    "iter_nodes",
    "match_site",
    "rewrite",
    "rewrite_buffer",
    "rewrite_selection",
    "walk_sites",
]
