"""
routes/session.py -- Session endpoints driving the process-wide QuerySession.

  POST /session/query   -- submit filters (page resets to 1)
  POST /session/sort    -- toggle/set sort field
  POST /session/page    -- navigate (clamped)
  GET  /session         -- current state + visible page
  GET  /session/export  -- CSV of the full sorted result set
  GET  /session/chart   -- credit series for charting
"""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from app.dependencies import get_session
from app.models import ChartPoint, FilterRequest, PageBody, SessionResponse, SortBody
from app.session import QuerySession
from routes.export import csv_response
from routes.query import error_response

router = APIRouter(prefix="/session")


def _snapshot(session: QuerySession) -> SessionResponse:
    page = session.view()
    state = session.state
    return SessionResponse(
        status=state.status.value,
        filters=state.filters,
        sort=state.sort,
        error=state.error,
        items=list(page.items),
        totalPages=page.totalPages,
        page=page.page,
        totalCount=page.totalCount,
    )


@router.get("", response_model=SessionResponse)
def get_state(session: QuerySession = Depends(get_session)) -> SessionResponse:
    return _snapshot(session)


@router.post("/query", response_model=SessionResponse)
async def submit_query(body: FilterRequest, session: QuerySession = Depends(get_session)):
    """New query: results replaced wholesale. On failure prior results stay."""
    err = await session.submit(body)
    if err is not None:
        return error_response(err)
    return _snapshot(session)


@router.post("/sort", response_model=SessionResponse)
def set_sort(body: SortBody, session: QuerySession = Depends(get_session)) -> SessionResponse:
    session.set_sort(body.field)
    return _snapshot(session)


@router.post("/page", response_model=SessionResponse)
def set_page(body: PageBody, session: QuerySession = Depends(get_session)) -> SessionResponse:
    session.set_page(body.page)
    return _snapshot(session)


@router.get("/export")
def export_session(session: QuerySession = Depends(get_session)):
    return csv_response(session.export())


@router.get("/chart", response_model=List[ChartPoint])
def chart_series(session: QuerySession = Depends(get_session)) -> List[ChartPoint]:
    return session.credit_series()
