"""
Runs Dart source blocks end to end.

    snippet + directives
      -> classify        (wrapper or verbatim)
      -> render          (complete Dart program)
      -> invoke          (dart <scratch> output|value)
      -> trim + shape    (string or table)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from obdart.obdart_classifier import classify
from obdart.obdart_config import DartConfig, Directives, ResultType, dbg as _dbg
from obdart.obdart_errors import ExecutionError, ObDartError, SessionUnsupportedError
from obdart.obdart_invoker import Invocation, invoke
from obdart.obdart_shaper import Shaped, TableShaper
from obdart.obdart_template import render

DirectivesLike = Union[Directives, Mapping[str, Any], None]


def trim_trailing_newlines(text: str) -> str:
    """Drops trailing line breaks and nothing else."""
    return text.rstrip("\r\n")


@dataclass
class BlockResult:
    """The structured result of one block execution."""
    status: Literal['success', 'error']
    value: Optional[Shaped] = None
    error_message: Optional[str] = None
    error_kind: Optional[str] = None
    program: Optional[str] = None
    stderr: str = ""

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        msg = str(self.error_message or "Unknown error")
        if self.error_kind and not msg.startswith(self.error_kind):
            return f"{self.error_kind}: {msg}"
        return msg


class BlockRunner:
    """Synthesizes, executes and shapes Dart blocks."""

    def __init__(self, config: Optional[DartConfig] = None):
        self.config = config or DartConfig()
        self.shaper = TableShaper()
        self.last_program: Optional[str] = None
        self.last_invocation: Optional[Invocation] = None

    def _synthesize(self, snippet: str, d: Directives, cfg: DartConfig) -> str:
        split = classify(snippet, cfg)
        _dbg("CLASSIFY", "wrapped" if split.is_wrapped else "verbatim (own main)")
        if not split.is_wrapped and d.result_type is ResultType.VALUE:
            # Own `main` runs unwrapped: its printed output comes back, not a value.
            _dbg("CLASSIFY value requested for a block with its own main; running unwrapped")
        program = render(split.top, split.wrapper, split.main, cfg)
        self.last_program = program
        return program

    def expand(self, snippet: str, directives: DirectivesLike = None) -> str:
        """Returns the program that would be run for `snippet`."""
        d = Directives.coerce(directives)
        return self._synthesize(snippet, d, self.config.with_overrides(d))

    def execute(self, snippet: str, directives: DirectivesLike = None) -> Shaped:
        self.last_program = None
        self.last_invocation = None
        d = Directives.coerce(directives)
        if d.wants_session:
            raise SessionUnsupportedError(str(d.session))
        cfg = self.config.with_overrides(d)

        program = self._synthesize(snippet, d, cfg)
        invocation = invoke(program, d.result_type.mode, cfg)
        self.last_invocation = invocation

        text = trim_trailing_newlines(invocation.stdout)
        return self.shaper.shape(text, d.result_format)

    def run(self, snippet: str, directives: DirectivesLike = None) -> BlockResult:
        """Like execute(), but reports failures in the result instead of raising."""
        try:
            value = self.execute(snippet, directives)
        except ObDartError as e:
            stderr = e.stderr if isinstance(e, ExecutionError) else ""
            return BlockResult(
                status='error',
                error_message=str(e),
                error_kind=type(e).__name__,
                program=self.last_program,
                stderr=stderr,
            )
        stderr = self.last_invocation.stderr if self.last_invocation else ""
        return BlockResult(status='success', value=value, program=self.last_program, stderr=stderr)


def execute(snippet: str, directives: DirectivesLike = None,
            config: Optional[DartConfig] = None) -> Shaped:
    """Runs one Dart block and returns its shaped result."""
    return BlockRunner(config).execute(snippet, directives)


def expand(snippet: str, directives: DirectivesLike = None,
           config: Optional[DartConfig] = None) -> str:
    return BlockRunner(config).expand(snippet, directives)


__all__ = ["BlockResult", "BlockRunner", "execute", "expand", "trim_trailing_newlines"]
