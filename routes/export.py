"""routes/export.py -- Stateless CSV export (POST /transactions:export)"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.dependencies import get_executor
from app.models import ExportBody, QueryError
from app.pipeline import QueryExecutor
from app.utils.exporter import EXPORT_FILENAME, EXPORT_MEDIA_TYPE, to_csv
from app.utils.sorting import sort_records
from routes.query import error_response

router = APIRouter()


def csv_response(content: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type=EXPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/transactions:export")
async def export_transactions(
    body: ExportBody,
    executor: QueryExecutor = Depends(get_executor),
):
    """Full filtered + sorted result set as a CSV download."""
    result = await executor.execute(body.filters)
    if isinstance(result, QueryError):
        return error_response(result)
    return csv_response(to_csv(sort_records(result, body.sort)))
