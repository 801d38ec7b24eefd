from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml

from obdart.obdart_config import DartConfig, Directives
from obdart.obdart_errors import ObDartError
from obdart.obdart_runtime import BlockRunner


def format_table(rows) -> str:
    """Renders a table as Org-style pipe rows."""
    if not rows:
        return ""
    width = max(len(r) for r in rows)
    sizes = [0] * width
    for row in rows:
        for i, cell in enumerate(row):
            sizes[i] = max(sizes[i], len(cell))
    lines = []
    for row in rows:
        cells = [(row[i] if i < len(row) else "").ljust(sizes[i]) for i in range(width)]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def format_value(value, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(value, ensure_ascii=False, indent=2)
    if fmt == 'yaml':
        return yaml.safe_dump(value, sort_keys=False, allow_unicode=True).rstrip("\n")
    if isinstance(value, list):
        return format_table(value)
    return str(value)


def _read_source(file_arg: str) -> str:
    if file_arg == "-":
        return sys.stdin.read()
    return Path(file_arg).read_text(encoding="utf-8")


def _directives_from_args(args: argparse.Namespace) -> Directives:
    header = {}
    if args.results:
        header["results"] = args.results
    if args.cmd:
        header["cmd"] = args.cmd
    if args.session:
        header["session"] = args.session
    return Directives.from_mapping(header)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="obdart",
        description="Run a Dart source block and print its result.",
    )
    p.add_argument("file", help="Dart snippet file, or '-' for stdin")
    p.add_argument("--results", help="Result directives, e.g. 'output' or 'value raw'")
    p.add_argument("--cmd", help="External command used to run the program (default: dart)")
    p.add_argument("--session", help="Session name (sessions are not supported)")
    p.add_argument("--config", help="YAML configuration file")
    p.add_argument("--expand", action="store_true", help="Print the synthesized program instead of running it")
    p.add_argument("--format", choices=("text", "json", "yaml"), default="text", help="Result output format")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        source = _read_source(args.file)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    try:
        config = DartConfig.from_file(args.config) if args.config else DartConfig()
        directives = _directives_from_args(args)
    except ObDartError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    runner = BlockRunner(config)
    if args.expand:
        try:
            print(runner.expand(source, directives), end="")
        except ObDartError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    result = runner.run(source, directives)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        return 1
    if result.stderr:
        sys.stderr.write(result.stderr)
    print(format_value(result.value, args.format))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
