"""Pydantic schemas for collections, documents and configuration."""

from __future__ import annotations

from elastic_browser.schemas.base import PermissiveModel, StrictModel
from elastic_browser.schemas.collections import CatIndexRow, CollectionSummary, Health, IndexStatus
from elastic_browser.schemas.config import BrowserConfig
from elastic_browser.schemas.documents import (
    DocumentRecord,
    QueryResult,
    SearchPage,
    display_document_id,
)

__all__ = [
    'BrowserConfig',
    'CatIndexRow',
    'CollectionSummary',
    'DocumentRecord',
    'Health',
    'IndexStatus',
    'PermissiveModel',
    'QueryResult',
    'SearchPage',
    'StrictModel',
    'display_document_id',
]
