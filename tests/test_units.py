"""Tests for store-size parsing and byte/duration formatting."""

from __future__ import annotations

from datetime import timedelta

import pytest

from elastic_browser.units import format_duration, human_bytes, parse_store_size


class TestParseStoreSize:
    """Verify _cat store sizes parse to byte counts with 1024-based units."""

    @pytest.mark.parametrize(
        'value, expected',
        [
            ('10kb', 10240),
            ('1gb', 1073741824),
            ('512', 512),
            ('512b', 512),
            ('1.5mb', 1572864),
            ('2TB', 2 * 1024**4),
            ('1pb', 1024**5),
            (' 3KB ', 3072),
        ],
    )
    def test_parses(self, value: str, expected: int) -> None:
        assert parse_store_size(value) == expected

    @pytest.mark.parametrize('value', ['bogus', '', 'kb', '-5', '-5kb', '1.2.3mb', 'nanmb', 'infgb'])
    def test_unparsable_is_zero(self, value: str) -> None:
        """Never raises; anything it cannot read is 0 bytes."""
        assert parse_store_size(value) == 0


class TestHumanBytes:
    @pytest.mark.parametrize(
        'value, expected',
        [
            (0, '0 B'),
            (-1, '0 B'),
            (512, '512 B'),
            (1023, '1023 B'),
            (10240, '10.00 KB'),
            (1572864, '1.50 MB'),
            (1073741824, '1.00 GB'),
            (1024**6, '1024.00 PB'),
        ],
    )
    def test_formats(self, value: int, expected: str) -> None:
        assert human_bytes(value) == expected


class TestFormatDuration:
    @pytest.mark.parametrize(
        'took, expected',
        [
            (timedelta(0), '0µs'),
            (timedelta(microseconds=850), '850µs'),
            (timedelta(milliseconds=12), '12ms'),
            (timedelta(seconds=1.25), '1.25s'),
            (timedelta(seconds=2), '2s'),
        ],
    )
    def test_formats(self, took: timedelta, expected: str) -> None:
        assert format_duration(took) == expected
