"""
app/main.py -- FastAPI application entry point.

START_TIME and PROCESS are set at module level (singleton pattern).
Logging is configured once here from settings.LOG_LEVEL.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import psutil
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings
from routes import export as _export_route
from routes import performance as _perf_route
from routes import query as _query_route
from routes import session as _session_route

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)

# Singleton performance tracking -- captured once at boot
START_TIME: datetime = datetime.now(timezone.utc)
PROCESS: psutil.Process = psutil.Process()

app = FastAPI(
    title="Transaction Query API",
    version="1.0.0",
    description="Filter, sort, paginate and export financial transactions.",
)


# ---------------------------------------------------------------------------
# Validation errors -> 400 with a single clean message
# ---------------------------------------------------------------------------

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        msg = errors[0].get("msg", "Validation error")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
    else:
        msg = "Validation error"
    logger.debug("Rejected request to %s: %s", request.url.path, msg)
    return JSONResponse(status_code=400, content={"detail": msg})


# ---------------------------------------------------------------------------
# Register routes
# ---------------------------------------------------------------------------

app.include_router(_query_route.router)
app.include_router(_export_route.router)
app.include_router(_session_route.router)
app.include_router(_perf_route.router)


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=False)
