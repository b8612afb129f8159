"""Size and duration helpers for collection summaries and status lines."""

from __future__ import annotations

import re
from datetime import timedelta

__all__ = [
    'format_duration',
    'human_bytes',
    'parse_store_size',
]

# Longest suffix first so 'kb' is not read as 'b'
_SIZE_UNITS: tuple[tuple[str, int], ...] = (
    ('pb', 1 << 50),
    ('tb', 1 << 40),
    ('gb', 1 << 30),
    ('mb', 1 << 20),
    ('kb', 1 << 10),
    ('b', 1),
)

_DISPLAY_UNITS = ('B', 'KB', 'MB', 'GB', 'TB', 'PB')

_INTEGER = re.compile(r'\d+')


def parse_store_size(value: str) -> int:
    """Parse a _cat store size into bytes.

    Accepts a bare integer byte count ('512') or a decimal number followed by a
    unit ('10kb', '1.5gb'), case-insensitive, using 1024-based multipliers.
    Anything unparsable yields 0 rather than raising.
    """
    value = value.strip().lower()
    if not value:
        return 0
    if _INTEGER.fullmatch(value):
        return int(value)

    for suffix, factor in _SIZE_UNITS:
        if value.endswith(suffix):
            number = value[: -len(suffix)].strip()
            try:
                return max(int(float(number) * factor), 0)
            except (ValueError, OverflowError):
                continue
    return 0


def human_bytes(value: int) -> str:
    """Format a byte count with binary prefixes: '512 B', '10.00 KB'."""
    if value <= 0:
        return '0 B'

    scaled = float(value)
    index = 0
    while scaled >= 1024 and index < len(_DISPLAY_UNITS) - 1:
        scaled /= 1024
        index += 1

    if index == 0:
        return f'{value} {_DISPLAY_UNITS[0]}'
    return f'{scaled:.2f} {_DISPLAY_UNITS[index]}'


def format_duration(took: timedelta) -> str:
    """Compact elapsed time for status lines: '850µs', '12ms', '1.25s'."""
    micros = took // timedelta(microseconds=1)
    if micros < 1000:
        return f'{micros}µs'
    if micros < 1_000_000:
        return f'{micros // 1000}ms'
    seconds = f'{micros / 1_000_000:.2f}'.rstrip('0').rstrip('.')
    return f'{seconds}s'
