"""Collection (index) summary schemas.

A summary is an immutable snapshot of one row of `_cat/indices`. The whole
list is replaced on every refresh.
"""

from __future__ import annotations

from typing import Literal

import pydantic

from elastic_browser.schemas.base import PermissiveModel, StrictModel
from elastic_browser.units import human_bytes, parse_store_size

__all__ = [
    'CatIndexRow',
    'CollectionSummary',
    'Health',
    'IndexStatus',
]

type Health = Literal['green', 'yellow', 'red', 'unknown']
type IndexStatus = Literal['open', 'close', 'unknown']

_HEALTH_VALUES: frozenset[str] = frozenset({'green', 'yellow', 'red'})
_STATUS_VALUES: frozenset[str] = frozenset({'open', 'close'})


class CatIndexRow(PermissiveModel):
    """Raw `_cat/indices?format=json` row. Every column arrives as a string or null."""

    index: str
    health: str | None = None
    status: str | None = None
    docs_count: str | int | None = pydantic.Field(default=None, alias='docs.count')
    store_size: str | int | None = pydantic.Field(default=None, alias='store.size')


class CollectionSummary(StrictModel):
    """Metadata for one collection, keyed by name."""

    name: str
    health: Health = 'unknown'
    status: IndexStatus = 'unknown'
    docs_count: int = pydantic.Field(default=0, ge=0)
    store_size: str = ''
    store_bytes: int = pydantic.Field(default=0, ge=0)

    @classmethod
    def from_cat_row(cls, row: CatIndexRow) -> CollectionSummary:
        """Normalize a raw row; unparsable counts and sizes become 0."""
        health = (row.health or '').strip().lower()
        status = (row.status or '').strip().lower()
        store_size = '' if row.store_size is None else str(row.store_size)

        try:
            docs_count = max(int(row.docs_count or 0), 0)
        except ValueError:
            docs_count = 0

        return cls(
            name=row.index,
            health=health if health in _HEALTH_VALUES else 'unknown',  # type: ignore[arg-type]
            status=status if status in _STATUS_VALUES else 'unknown',  # type: ignore[arg-type]
            docs_count=docs_count,
            store_size=store_size,
            store_bytes=parse_store_size(store_size),
        )

    @property
    def title(self) -> str:
        return f'{self.name} ({self.docs_count} docs)'

    @property
    def size_label(self) -> str:
        """Human size, falling back to the raw store string when no byte count parsed."""
        if self.store_bytes > 0:
            return human_bytes(self.store_bytes)
        return self.store_size.strip() or 'n/a'

    @property
    def description(self) -> str:
        return f'health={self.health} status={self.status} size={self.size_label}'
