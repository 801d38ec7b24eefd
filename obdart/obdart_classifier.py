"""
Decides how a snippet is turned into a program.

A snippet that declares its own `main` is run as written, behind the
standard imports. Anything else becomes the body of the wrapper program.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from obdart.obdart_config import DartConfig
from obdart.obdart_wrapper import IDENTITY_TEMPLATE

# Textual scan, not a parse: a `main` declaration inside a string literal or
# a block comment is still detected.
MAIN_SIGNATURE = re.compile(
    r"""
    ^[ \t]*
    (?:(?:void|Future(?:Or)?(?:\s*<[^>\n]*>)?)\s+)?   # optional return type
    main\s*
    \([^)]*\)                                         # parameter list
    \s*(?:async\*?\s*)?
    (?:\{|=>)                                         # start of the body
    """,
    re.MULTILINE | re.VERBOSE,
)


class SplitResult(NamedTuple):
    wrapper: str
    top: str
    main: str

    @property
    def is_wrapped(self) -> bool:
        return self.wrapper != IDENTITY_TEMPLATE


def has_entry_point(snippet: str) -> bool:
    """True when the snippet appears to declare a top-level `main`."""
    return MAIN_SIGNATURE.search(snippet) is not None


def classify(snippet: str, config: Optional[DartConfig] = None) -> SplitResult:
    cfg = config or DartConfig()
    if has_entry_point(snippet):
        return SplitResult(IDENTITY_TEMPLATE, cfg.prelude_imports, snippet)
    return SplitResult(cfg.wrapper_template, cfg.wrapper_imports, snippet)


__all__ = ["MAIN_SIGNATURE", "SplitResult", "classify", "has_entry_point"]
