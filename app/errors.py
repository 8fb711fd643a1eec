"""
app/errors.py -- Internal exceptions raised by data sources and the adapter.

These never cross the executor boundary: QueryExecutor.execute converts
them into a QueryError value for the caller.
"""
from __future__ import annotations

from typing import Any, Optional


class TransactionQueryError(Exception):
    """Base class for query-pipeline failures."""


class DataSourceError(TransactionQueryError):
    """Transport or decode failure while fetching candidates."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedRecordError(TransactionQueryError):
    """A raw source record could not be coerced to a TransactionRecord."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw
