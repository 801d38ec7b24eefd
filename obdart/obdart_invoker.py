"""
Runs a synthesized program through the external Dart toolchain.

One call writes one scratch file, spawns one process and waits for it:

    <command...> <scratch-file> <mode>
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from obdart.obdart_config import DartConfig, dbg as _dbg
from obdart.obdart_errors import (
    ConfigurationError,
    ExecutionError,
    GuestDispatchError,
    SessionUnsupportedError,
)
from obdart.obdart_wrapper import DISPATCH_ERROR_MARKER, RESULT_MODES


@dataclass
class Invocation:
    """What one external process produced."""
    mode: str
    command: List[str]
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    scratch_path: Optional[str] = None


def resolve_command(command: str) -> List[str]:
    """Splits the command line and resolves its executable on PATH."""
    try:
        argv = shlex.split(command or "")
    except ValueError as e:
        raise ConfigurationError(f"Cannot parse external command {command!r}: {e}") from e
    if not argv:
        raise ConfigurationError("External command is empty")
    exe = shutil.which(argv[0])
    if exe is None:
        raise ConfigurationError(f"External command not found: {argv[0]!r}")
    return [exe] + argv[1:]


def _check_session(session: Optional[str]) -> None:
    if session is None:
        return
    if str(session).strip().lower() in ('', 'none'):
        return
    raise SessionUnsupportedError(str(session))


def _write_scratch(program_text: str, config: DartConfig) -> str:
    try:
        fd, path = tempfile.mkstemp(prefix="obdart-", suffix=".dart", dir=config.scratch_dir)
    except OSError as e:
        raise ExecutionError(f"Cannot create scratch file: {e}") from e
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(program_text)
    except OSError as e:
        _remove_scratch(path)
        raise ExecutionError(f"Cannot write scratch file {path}: {e}") from e
    return path


def _remove_scratch(path: str) -> None:
    try:
        os.unlink(path)
    except OSError as e:
        _dbg("scratch cleanup failed", path, e)


def invoke(program_text: str, mode: str, config: Optional[DartConfig] = None,
           session: Optional[str] = None) -> Invocation:
    """
    Executes `program_text` with `mode` ('output' or 'value') as its argument.

    Raises SessionUnsupportedError before touching the filesystem when a
    session is requested, ConfigurationError for a bad mode or an unknown
    command, and ExecutionError when the process cannot run or exits
    non-zero.
    """
    _check_session(session)
    if mode not in RESULT_MODES:
        raise ConfigurationError(f"Invalid result mode {mode!r}: expected one of {', '.join(RESULT_MODES)}")

    cfg = config or DartConfig()
    base_argv = resolve_command(cfg.command)

    path = _write_scratch(program_text, cfg)
    argv = base_argv + [path, mode]
    _dbg("INVOKE", " ".join(shlex.quote(a) for a in argv))
    try:
        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
            )
        except OSError as e:
            raise ExecutionError(f"Cannot run {argv[0]}: {e}", command=argv) from e
    finally:
        if cfg.keep_scratch:
            _dbg("keeping scratch file", path)
        else:
            _remove_scratch(path)

    _dbg("EXIT", proc.returncode, "stdout bytes", len(proc.stdout or ""), "stderr bytes", len(proc.stderr or ""))
    if proc.returncode != 0:
        stderr = proc.stderr or ""
        if DISPATCH_ERROR_MARKER in stderr:
            raise GuestDispatchError(
                f"Dart program rejected result mode {mode!r}",
                returncode=proc.returncode, stderr=stderr, command=argv,
            )
        raise ExecutionError(
            f"Dart execution failed: {' '.join(argv[:-2]) or argv[0]}",
            returncode=proc.returncode, stderr=stderr, command=argv,
        )

    return Invocation(
        mode=mode,
        command=argv,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        returncode=proc.returncode,
        scratch_path=path if cfg.keep_scratch else None,
    )


__all__ = ["Invocation", "invoke", "resolve_command"]
