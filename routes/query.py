"""routes/query.py -- Stateless query (POST /transactions:query)"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_executor, get_page_size
from app.models import QueryBody, QueryError, QueryResponse
from app.pipeline import QueryExecutor, run_query

router = APIRouter()


def error_response(err: QueryError) -> JSONResponse:
    """Fetch/record failures surface as 502 with the QueryError body."""
    return JSONResponse(status_code=502, content=err.model_dump(mode="json"))


@router.post("/transactions:query", response_model=QueryResponse)
async def query_transactions(
    body: QueryBody,
    executor: QueryExecutor = Depends(get_executor),
    page_size: int = Depends(get_page_size),
):
    """
    Filter -> sort -> page in one request.
    Out-of-range pages are clamped; the served page number is returned.
    """
    result = await run_query(executor, body.filters, body.sort, body.page, page_size)
    if isinstance(result, QueryError):
        return error_response(result)
    return QueryResponse.from_page(result)
