"""
Turns captured program text into a table when it looks like one.

The check is structural only: the text must be a single bracketed group of
comma separated cells, or a group of such groups of equal width. It knows
nothing about Dart literals, so `['a, b']` is read as two cells.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

from koine import Parser

from obdart.obdart_config import dbg as _dbg

Table = List[List[str]]
Shaped = Union[str, Table]

# Result-format flags that keep the captured text as a string, mirroring
# Org Babel's result conditions. `table`/`vector` override the word-like ones.
SCALAR_FLAGS = frozenset({'scalar', 'verbatim', 'html', 'code', 'pp', 'file'})
TEXT_FLAGS = frozenset({'raw', 'org', 'drawer'})
TABLE_FLAGS = frozenset({'table', 'vector'})

_GROUP_TAGS = ('paren_group', 'bracket_group', 'brace_group')


def wants_scalar(result_format: Iterable[str]) -> bool:
    flags = {str(f).lower() for f in (result_format or ())}
    if flags & SCALAR_FLAGS:
        return True
    return bool(flags & TEXT_FLAGS) and not (flags & TABLE_FLAGS)


class TableShaper:
    """Parses bracketed text with the table grammar."""

    _parser: Optional[Parser] = None

    def __init__(self):
        if TableShaper._parser is None:
            grammar_path = Path(__file__).parent / "grammar" / "table_grammar.yaml"
            TableShaper._parser = Parser.from_file(str(grammar_path))
        self.parser = TableShaper._parser

    def _collect(self, node) -> list:
        """Reduces the parse tree to cells (str) and groups (list)."""
        if isinstance(node, list):
            out = []
            for child in node:
                out.extend(self._collect(child))
            return out
        if not isinstance(node, dict):
            return []
        match node.get('tag'):
            case 'cell':
                return [str(node.get('text') or '').strip()]
            case tag if tag in _GROUP_TAGS:
                return [self._collect(node.get('children', []))]
            case 'literal' | 'regex':
                return []
            case _:
                return self._collect(node.get('children', []))

    def _grid(self, items: list) -> Optional[Table]:
        if len(items) != 1 or not isinstance(items[0], list):
            return None
        outer = items[0]
        if not outer:
            return None
        if all(isinstance(c, str) for c in outer):
            return [list(outer)]
        if not all(isinstance(row, list) and row for row in outer):
            return None
        if not all(isinstance(c, str) for row in outer for c in row):
            return None
        width = len(outer[0])
        if any(len(row) != width for row in outer):
            return None
        return [list(row) for row in outer]

    def to_table(self, text: str) -> Optional[Table]:
        """Returns the table for `text`, or None when it is not one."""
        stripped = text.strip()
        if not stripped or stripped[0] not in '([{':
            return None
        try:
            parse_out = self.parser.parse(stripped)
        except Exception as e:
            _dbg("SHAPE parser raised", type(e).__name__, e)
            return None
        if not isinstance(parse_out, dict) or parse_out.get('status') != 'success':
            _dbg("SHAPE not a table:", (parse_out or {}).get('message'))
            return None
        return self._grid(self._collect(parse_out.get('ast')))

    def shape(self, raw_text: str, result_format: Iterable[str] = ()) -> Shaped:
        if wants_scalar(result_format):
            return raw_text
        table = self.to_table(raw_text)
        if table is None:
            return raw_text
        _dbg("SHAPE table", len(table), "x", len(table[0]))
        return table


def shape(raw_text: str, result_format: Iterable[str] = ()) -> Shaped:
    return TableShaper().shape(raw_text, result_format)


__all__ = ["Shaped", "Table", "TableShaper", "shape", "wants_scalar"]
