"""
Placeholder substitution for wrapper templates.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from obdart.obdart_config import DartConfig
from obdart.obdart_errors import ConfigurationError
from obdart.obdart_wrapper import IDENTITY_TEMPLATE

BODY_PLACEHOLDER = "%s"

# One alternation, one pass: replacement text is never scanned again.
_PLACEHOLDER = re.compile(r"%([%asw])")


def placeholder_table(main: str, config: Optional[DartConfig] = None) -> Dict[str, str]:
    cfg = config or DartConfig()
    return {
        '%': '%',
        'a': cfg.async_marker,
        'w': cfg.await_marker,
        's': main,
    }


def _has_body_placeholder(wrapper: str) -> bool:
    return any(m.group(1) == 's' for m in _PLACEHOLDER.finditer(wrapper))


def validate_template(wrapper: str) -> None:
    """Raises ConfigurationError if a non-identity wrapper cannot hold a snippet."""
    if wrapper == IDENTITY_TEMPLATE:
        return
    if not _has_body_placeholder(wrapper):
        raise ConfigurationError(
            f"Wrapper template has no '{BODY_PLACEHOLDER}' placeholder for the snippet body"
        )


def substitute(wrapper: str, table: Dict[str, str]) -> str:
    # Unknown %x sequences are not in the alternation and pass through as-is
    return _PLACEHOLDER.sub(lambda m: table[m.group(1)], wrapper)


def render(top: str, wrapper: str, main: str, config: Optional[DartConfig] = None) -> str:
    validate_template(wrapper)
    return top + substitute(wrapper, placeholder_table(main, config))


__all__ = ["BODY_PLACEHOLDER", "placeholder_table", "render", "substitute", "validate_template"]
