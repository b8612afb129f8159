"""Payload rendering for list rows, detail views and query hints.

Pure functions: no I/O, no session state. Detail rendering returns
rich.text.Text so the terminal UI can color keys and scalar types.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rich.text import Text

__all__ = [
    'DEFAULT_PREVIEW_LENGTH',
    'ELLIPSIS',
    'EMPTY_SOURCE',
    'MAX_FIELDS_DISPLAY',
    'FIELD_SEPARATOR',
    'QUERY_EXAMPLES',
    'QUERY_HELP',
    'collect_fields',
    'extract_fields',
    'format_payload',
    'merge_fields',
    'preview_payload',
    'query_label',
    'render_field_hints',
    'render_payload',
    'truncate',
]

DEFAULT_PREVIEW_LENGTH = 160
ELLIPSIS = '...'
EMPTY_SOURCE = '(no _source)'
FIELD_SEPARATOR = '.'
MAX_FIELDS_DISPLAY = 25
INDENT = '  '

QUERY_HELP = 'Use Elasticsearch query_string syntax (blank => match_all)'
QUERY_EXAMPLES = 'Examples: status:200, host:api* AND duration:[0 TO 50], (error OR warning) AND service:web'

KEY_STYLE = 'color(75)'
STRING_STYLE = 'color(214)'
NUMBER_STYLE = 'color(81)'
BOOL_STYLE = 'color(205)'
NULL_STYLE = 'color(244)'


def render_payload(payload: Mapping[str, Any]) -> Text:
    """Pretty-print a payload with sorted keys and per-type styles."""
    if not payload:
        return Text(EMPTY_SOURCE)
    text = Text()
    _render_value(text, payload, 0)
    return text


def format_payload(payload: Mapping[str, Any]) -> str:
    """Unstyled multi-line rendering, identical in layout to render_payload."""
    return render_payload(payload).plain


def _render_value(text: Text, value: Any, depth: int) -> None:
    match value:
        case Mapping():
            if not value:
                text.append('{}')
                return
            text.append('{\n')
            keys = sorted(value, key=str)
            for i, key in enumerate(keys):
                text.append(INDENT * (depth + 1))
                text.append(_quote(str(key)), style=KEY_STYLE)
                text.append(': ')
                _render_value(text, value[key], depth + 1)
                text.append(',\n' if i < len(keys) - 1 else '\n')
            text.append(INDENT * depth + '}')
        case str():
            text.append(_quote(value), style=STRING_STYLE)
        case bool():
            text.append('true' if value else 'false', style=BOOL_STYLE)
        case int() | float():
            text.append(_format_number(value), style=NUMBER_STYLE)
        case None:
            text.append('null', style=NULL_STYLE)
        case Sequence():
            if not value:
                text.append('[]')
                return
            text.append('[\n')
            for i, item in enumerate(value):
                text.append(INDENT * (depth + 1))
                _render_value(text, item, depth + 1)
                text.append(',\n' if i < len(value) - 1 else '\n')
            text.append(INDENT * depth + ']')
        case _:
            text.append(_quote(str(value)), style=STRING_STYLE)


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _format_number(value: int | float) -> str:
    """Shortest round-trip form; integral floats print without a fraction."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return repr(value)


def preview_payload(payload: Mapping[str, Any], max_len: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """Compact single-line JSON (sorted keys) bounded to max_len characters."""
    if not payload:
        return EMPTY_SOURCE
    raw = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(',', ':'), default=str)
    return truncate(raw, max_len)


def truncate(value: str, max_len: int) -> str:
    """Bound value to max_len characters, ending in '...' when cut.

    Counts code points, not bytes, so multi-byte characters are never split.
    A result that was cut is exactly max_len characters long.
    """
    if max_len <= 0 or len(value) <= max_len:
        return value
    if max_len <= len(ELLIPSIS):
        return value[:max_len]
    return value[: max_len - len(ELLIPSIS)] + ELLIPSIS


def collect_fields(data: Any, prefix: str, out: set[str]) -> None:
    """Add every field path referenced by data to out.

    Mapping keys are joined with '.'; sequences are walked transparently, so
    their items contribute paths under the sequence's own path.
    """
    match data:
        case Mapping():
            for key, value in data.items():
                field = f'{prefix}{FIELD_SEPARATOR}{key}' if prefix else str(key)
                out.add(field)
                collect_fields(value, field, out)
        case str() | bytes():
            return
        case Sequence():
            for item in data:
                collect_fields(item, prefix, out)


def extract_fields(payloads: Iterable[Mapping[str, Any]]) -> list[str]:
    """Sorted unique field paths across payloads."""
    fields: set[str] = set()
    for payload in payloads:
        collect_fields(payload, '', fields)
    return sorted(fields)


def merge_fields(current: Sequence[str], incoming: Sequence[str]) -> tuple[str, ...]:
    """Set union followed by sort. Empty incoming is a no-op; blank names are dropped."""
    if not incoming:
        return tuple(current)
    merged = {field for field in current if field}
    merged.update(field for field in incoming if field)
    return tuple(sorted(merged))


def render_field_hints(fields: Sequence[str], limit: int = MAX_FIELDS_DISPLAY) -> str:
    """'Fields: a, b, c' capped at limit entries, or '' when there are none."""
    if not fields:
        return ''
    shown = ', '.join(fields[:limit])
    line = f'Fields: {shown}'
    if len(fields) > limit:
        line += f' … (+{len(fields) - limit} more)'
    return line


def query_label(query: str) -> str:
    """How a query is shown in titles and status lines; blank means match_all."""
    if not query.strip():
        return 'match_all'
    return query
