"""
pipeline.py -- Query executor and the query-result pipeline.

QueryExecutor(source, strict=False).execute(request)
  Runs: fetch_candidates -> normalize -> apply_filters
  Returns list[TransactionRecord] on success, QueryError on failure.

run_query(executor, request, sort, page, page_size)
  Runs: execute -> sort_records -> paginate

Critical rules implemented here:
  - Nothing raised by a data source or the adapter escapes execute(); it
    comes back as a QueryError value.
  - Filters are re-applied locally even for remote sources, so the result
    never depends on the remote honouring its query parameters.
  - Each call returns a fresh list; inputs are never mutated.
"""
from __future__ import annotations

import logging
from typing import List, Union

from app.errors import DataSourceError, MalformedRecordError
from app.models import (
    FilterRequest,
    PageSlice,
    QueryError,
    QueryErrorCode,
    SortSpec,
    TransactionRecord,
)
from app.sources import DataSource
from app.utils.filters import apply_filters
from app.utils.normalize import normalize_records
from app.utils.pager import paginate
from app.utils.sorting import sort_records

logger = logging.getLogger(__name__)

QueryResult = Union[List[TransactionRecord], QueryError]


class QueryExecutor:
    """
    Filters the candidate set of an injected data source.

    strict=False skips malformed source records (logged); strict=True fails
    the whole query with MALFORMED_RECORD.
    """

    def __init__(self, source: DataSource, strict: bool = False) -> None:
        self.source = source
        self.strict = strict

    async def execute(self, request: FilterRequest) -> QueryResult:
        try:
            raws = await self.source.fetch_candidates(request)
        except DataSourceError as exc:
            logger.error("Error fetching transaction data: %s", exc)
            cause = exc.cause if exc.cause is not None else exc
            return QueryError(
                code=QueryErrorCode.FETCH_FAILED,
                message=str(exc),
                details={"cause": repr(cause)},
            )
        except Exception as exc:
            logger.exception("Data source raised unexpectedly")
            return QueryError(
                code=QueryErrorCode.FETCH_FAILED,
                message="Failed to fetch transaction data",
                details={"cause": repr(exc)},
            )

        try:
            candidates = normalize_records(raws, strict=self.strict)
        except MalformedRecordError as exc:
            logger.error("Malformed transaction record: %s", exc)
            return QueryError(
                code=QueryErrorCode.MALFORMED_RECORD,
                message=str(exc),
                details={"record": repr(exc.raw)},
            )

        results = apply_filters(candidates, request)
        logger.info("Query matched %d of %d candidates", len(results), len(candidates))
        return results


async def run_query(
    executor: QueryExecutor,
    request: FilterRequest,
    sort: SortSpec,
    page: int,
    page_size: int,
) -> Union[PageSlice[TransactionRecord], QueryError]:
    """Execute, order, and window in one step (stateless callers)."""
    result = await executor.execute(request)
    if isinstance(result, QueryError):
        return result
    return paginate(sort_records(result, sort), page_size, page)
