"""
Configuration and directive handling.

`DartConfig` replaces process-wide settings: every pipeline call receives one
explicitly, and `DartConfig()` is the default. `Directives` is the per-block
view of the host's header arguments.
"""

from __future__ import annotations

import dataclasses
import enum
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

import yaml

from obdart.obdart_errors import ConfigurationError
from obdart.obdart_wrapper import WRAPPER_TEMPLATE, WRAPPER_IMPORTS, PRELUDE_IMPORTS


def dbg(*parts):
    """Writes a [DBG] line to stderr when OBDART_DEBUG is set."""
    if os.environ.get("OBDART_DEBUG"):
        try:
            print("[DBG]", *parts, file=sys.stderr)
        except Exception:
            pass


@dataclass(frozen=True)
class DartConfig:
    """Settings for one or more block executions."""
    command: str = "dart"
    wrapper_template: str = WRAPPER_TEMPLATE
    wrapper_imports: str = WRAPPER_IMPORTS
    prelude_imports: str = PRELUDE_IMPORTS
    async_marker: str = "async"
    await_marker: str = "await"
    scratch_dir: Optional[str] = None
    keep_scratch: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "DartConfig":
        data = dict(data or {})
        known = {f.name for f in dataclasses.fields(cls)}
        # Accept kebab-case keys as written in YAML files
        normalized = {str(k).replace('-', '_'): v for k, v in data.items()}
        unknown = sorted(k for k in normalized if k not in known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        if 'keep_scratch' in normalized:
            normalized['keep_scratch'] = bool(normalized['keep_scratch'])
        for name in ('command', 'wrapper_template', 'wrapper_imports', 'prelude_imports',
                     'async_marker', 'await_marker'):
            if name in normalized and not isinstance(normalized[name], str):
                raise ConfigurationError(f"Configuration key '{name}' must be a string")
        return cls(**normalized)

    @classmethod
    def from_file(cls, filepath: str) -> "DartConfig":
        """Loads a configuration from a YAML file."""
        path = Path(filepath)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return cls.from_mapping(raw)

    def with_overrides(self, directives: "Directives") -> "DartConfig":
        if directives.command:
            return dataclasses.replace(self, command=directives.command)
        return self


# ===================================================================
# Directives
# ===================================================================

class ResultType(str, enum.Enum):
    OUTPUT = "output"
    VALUE = "value"

    @property
    def mode(self) -> str:
        """The argument the synthesized program is started with."""
        return self.value


def _words(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable):
        out = []
        for v in value:
            out.extend(str(v).split())
        return out
    return [str(value)]


def _coerce_result_type(value: Any) -> ResultType:
    if isinstance(value, ResultType):
        return value
    text = str(value).strip().lower()
    try:
        return ResultType(text)
    except ValueError:
        raise ConfigurationError(
            f"Invalid result-type directive {value!r}: expected 'output' or 'value'"
        ) from None


_RESULTS_KEYS = ('results',)
_TYPE_KEYS = ('result-type', 'result_type')
_FORMAT_KEYS = ('result-format', 'result_format')
_COMMAND_KEYS = ('cmd', 'command', 'external-command-override', 'external_command_override')
_SESSION_KEYS = ('session',)


@dataclass(frozen=True)
class Directives:
    """Execution directives for a single block."""
    result_type: ResultType = ResultType.VALUE
    result_format: FrozenSet[str] = frozenset()
    command: Optional[str] = None
    session: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def wants_session(self) -> bool:
        if self.session is None:
            return False
        return str(self.session).strip().lower() not in ('', 'none')

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "Directives":
        """
        Builds directives from Org-Babel-style header arguments.

        `results` holds space separated words: `output`/`value` pick the
        result type, everything else is a result-format flag. Explicit
        `result-type`/`result-format` keys win over words found in `results`.
        """
        result_type: Optional[ResultType] = None
        flags: list[str] = []
        command = None
        session = None
        extra: Dict[str, Any] = {}

        for raw_key, value in (mapping or {}).items():
            key = str(raw_key).lstrip(':').lower()
            if key in _RESULTS_KEYS:
                for word in _words(value):
                    w = word.lower()
                    if w in ('output', 'value'):
                        if result_type is None:
                            result_type = ResultType(w)
                    else:
                        flags.append(w)
            elif key in _TYPE_KEYS:
                result_type = _coerce_result_type(value)
            elif key in _FORMAT_KEYS:
                flags.extend(w.lower() for w in _words(value))
            elif key in _COMMAND_KEYS:
                command = str(value).strip() if value is not None else None
            elif key in _SESSION_KEYS:
                session = None if value is None else str(value)
            else:
                extra[key] = value

        return cls(
            result_type=result_type or ResultType.VALUE,
            result_format=frozenset(flags),
            command=command or None,
            session=session,
            extra=extra,
        )

    @classmethod
    def coerce(cls, directives: Any) -> "Directives":
        if directives is None:
            return cls()
        if isinstance(directives, cls):
            return directives
        if isinstance(directives, Mapping):
            return cls.from_mapping(directives)
        raise ConfigurationError(
            f"Directives must be a Directives instance or a mapping, got {type(directives).__name__}"
        )


__all__ = ["DartConfig", "Directives", "ResultType", "dbg"]
