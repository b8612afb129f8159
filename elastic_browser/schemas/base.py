"""Pydantic base models shared by every schema module."""

from __future__ import annotations

import pydantic

__all__ = [
    'PermissiveModel',
    'StrictModel',
]


class StrictModel(pydantic.BaseModel):
    """Base model for values the browser creates itself.

    Config:
    - extra='forbid': Reject unknown fields (fail-fast)
    - strict=True: No implicit type coercion
    - frozen=True: Immutable snapshots, replaced wholesale
    """

    model_config = pydantic.ConfigDict(
        extra='forbid',
        strict=True,
        frozen=True,
    )


class PermissiveModel(pydantic.BaseModel):
    """For Elasticsearch responses - allow unknown fields and lax coercion.

    The _cat and _search APIs add columns between versions and report numbers
    as strings, so parsing has to tolerate both.
    """

    model_config = pydantic.ConfigDict(
        extra='ignore',
        frozen=True,
        populate_by_name=True,
    )
