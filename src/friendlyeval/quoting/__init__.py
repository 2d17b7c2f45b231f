"""Model of the host quoting framework's interface.

Symbols, the three injection markers and the native ``sym``/``syms``/
``ensym``/``ensyms`` forms. Capture artifacts are consumed here; the
rewrite engine emits calls to the native forms.
"""

from friendlyeval.quoting.injection import inject, inject_as, inject_target, splice
from friendlyeval.quoting.native import ensym, ensyms, sym, syms
from friendlyeval.symbols import InjectionMarker, Symbol, name_of

__all__ = [
    "InjectionMarker",
    "Symbol",
    "ensym",
    "ensyms",
    "inject",
    "inject_as",
    "inject_target",
    "name_of",
    "splice",
    "sym",
    "syms",
]
