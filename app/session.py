"""
app/session.py -- Query session: the UI-facing state machine.

States: idle -> loading -> success | error
  submit(request)  -- serialized by a lock: at most one in-flight query
  set_sort(field)  -- same field flips direction, new field starts ascending
  set_page(n)      -- clamped to [1, totalPages]
  view()           -- current page of the sorted results
  export()         -- CSV of the full sorted results (not just the page)
  credit_series()  -- (timestamp, credit) points in source order for charts

On fetch failure the previous filters, results and page are kept and one
generic message is shown until the next successful submission.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from app.models import (
    ChartPoint,
    FilterRequest,
    PageSlice,
    PageState,
    QueryError,
    SortField,
    SortSpec,
    TransactionRecord,
    fmt_timestamp,
)
from app.pipeline import QueryExecutor
from app.utils.exporter import to_csv
from app.utils.pager import clamp_page, paginate, total_pages
from app.utils.sorting import sort_records, toggle_sort

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "An error occurred while fetching the data. Please try again."


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SessionState:
    """Mutable UI state; only QuerySession transitions touch it."""

    __slots__ = ("status", "filters", "results", "sort", "page", "error")

    def __init__(self, page_size: int = 10) -> None:
        self.status: SessionStatus = SessionStatus.IDLE
        self.filters: FilterRequest = FilterRequest()
        self.results: List[TransactionRecord] = []
        self.sort: SortSpec = SortSpec.none()
        self.page: PageState = PageState(pageSize=page_size, currentPage=1)
        self.error: Optional[str] = None


class QuerySession:
    def __init__(self, executor: QueryExecutor, page_size: int = 10) -> None:
        self.executor = executor
        self.state = SessionState(page_size=page_size)
        self._lock = asyncio.Lock()

    @property
    def page_size(self) -> int:
        return self.state.page.pageSize

    async def submit(self, request: FilterRequest) -> Optional[QueryError]:
        """Run a new query. Returns the QueryError on failure, else None."""
        async with self._lock:
            self.state.status = SessionStatus.LOADING
            try:
                result = await self.executor.execute(request)
            except BaseException:
                # never leave LOADING behind, even on cancellation
                self.state.status = SessionStatus.ERROR
                self.state.error = FETCH_ERROR_MESSAGE
                raise

            if isinstance(result, QueryError):
                self.state.status = SessionStatus.ERROR
                self.state.error = FETCH_ERROR_MESSAGE
                return result

            self.state.filters = request
            self.state.results = result
            self.state.page = PageState(pageSize=self.page_size, currentPage=1)
            self.state.error = None
            self.state.status = SessionStatus.SUCCESS
            logger.debug("Session results replaced: %d records", len(result))
            return None

    def set_sort(self, field: SortField) -> SortSpec:
        self.state.sort = toggle_sort(self.state.sort, field)
        return self.state.sort

    def set_page(self, page: int) -> int:
        pages = total_pages(len(self.state.results), self.page_size)
        current = clamp_page(page, pages)
        self.state.page = PageState(pageSize=self.page_size, currentPage=current)
        return current

    def sorted_results(self) -> List[TransactionRecord]:
        return sort_records(self.state.results, self.state.sort)

    def view(self) -> PageSlice[TransactionRecord]:
        return paginate(self.sorted_results(), self.page_size, self.state.page.currentPage)

    def export(self) -> str:
        return to_csv(self.sorted_results())

    def credit_series(self) -> List[ChartPoint]:
        return [
            ChartPoint(timestamp=fmt_timestamp(r.timestamp), credit=r.creditAmount)
            for r in self.state.results
        ]
