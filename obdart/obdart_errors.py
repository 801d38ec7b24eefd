"""
Error taxonomy for the obdart pipeline.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ObDartError(Exception):
    """Base class for all obdart failures."""


class ConfigurationError(ObDartError):
    """Raised for a bad wrapper template, command, mode or directive."""


class SessionUnsupportedError(ObDartError):
    """Raised when a persistent Dart session is requested."""

    def __init__(self, session: str):
        super().__init__(f"Dart blocks do not support sessions (requested session: {session!r})")
        self.session = session


class ExecutionError(ObDartError):
    """Raised when the external toolchain cannot be run or exits non-zero."""

    def __init__(self, message: str, *, returncode: Optional[int] = None,
                 stderr: str = "", command: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr or ""
        self.command = list(command) if command else []

    def __str__(self) -> str:
        msg = super().__str__()
        if self.returncode is not None:
            msg = f"{msg} (exit code {self.returncode})"
        detail = self.stderr.strip()
        if detail:
            # Long compiler output is cut; the full text stays on .stderr
            if len(detail) > 2000:
                detail = detail[:2000] + "\n..."
            msg = f"{msg}\n{detail}"
        return msg


class GuestDispatchError(ExecutionError):
    """Raised when the synthesized program rejected its result mode."""


__all__ = [
    "ObDartError",
    "ConfigurationError",
    "SessionUnsupportedError",
    "ExecutionError",
    "GuestDispatchError",
]
