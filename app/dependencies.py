"""
app/dependencies.py -- FastAPI dependency providers.

The executor and the process-wide session are built once from settings.
Tests swap them through app.dependency_overrides.
"""
from __future__ import annotations

from functools import lru_cache

from app.config import settings
from app.pipeline import QueryExecutor
from app.session import QuerySession
from app.sources import build_data_source


@lru_cache(maxsize=1)
def get_executor() -> QueryExecutor:
    return QueryExecutor(build_data_source(settings), strict=settings.STRICT_RECORDS)


@lru_cache(maxsize=1)
def get_session() -> QuerySession:
    return QuerySession(get_executor(), page_size=settings.PAGE_SIZE)


def get_page_size() -> int:
    return settings.PAGE_SIZE
