"""
app/sources.py -- Pluggable candidate sources for the query executor.

DataSource (protocol)
  async fetch_candidates(request) -> list of raw record dicts

FixtureDataSource  -- the fixed ten-transaction dataset (fallback / test mode)
RemoteDataSource   -- GET {base_url}/transactions with the present bounds as
                      query parameters, via httpx.AsyncClient
build_data_source(settings) -- remote when TXN_API_URL is set, else fixture

Sources raise DataSourceError on transport/decode failure; they never retry.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from app.config import Settings
from app.errors import DataSourceError
from app.models import FilterRequest

logger = logging.getLogger(__name__)

FIXTURE_TRANSACTIONS: List[Dict[str, Any]] = [
    {"dateTime": "2023-06-01 10:30", "transId": "T001", "credit": 100, "detail": "Purchase at Store A"},
    {"dateTime": "2023-06-02 15:45", "transId": "T002", "credit": 200, "detail": "Online payment for Service B"},
    {"dateTime": "2023-06-03 09:15", "transId": "T003", "credit": 150, "detail": "Subscription renewal"},
    {"dateTime": "2023-06-04 14:20", "transId": "T004", "credit": 300, "detail": "Refund from Store C"},
    {"dateTime": "2023-06-05 11:00", "transId": "T005", "credit": 50, "detail": "Coffee shop purchase"},
    {"dateTime": "2023-06-06 16:30", "transId": "T006", "credit": 180, "detail": "Monthly utility bill"},
    {"dateTime": "2023-06-07 13:45", "transId": "T007", "credit": 90, "detail": "Book store purchase"},
    {"dateTime": "2023-06-08 10:00", "transId": "T008", "credit": 250, "detail": "Electronics store purchase"},
    {"dateTime": "2023-06-09 17:20", "transId": "T009", "credit": 120, "detail": "Restaurant dinner"},
    {"dateTime": "2023-06-10 12:30", "transId": "T010", "credit": 75, "detail": "Gas station fill-up"},
]


class DataSource(Protocol):
    async def fetch_candidates(self, request: FilterRequest) -> List[Dict[str, Any]]:
        ...


class FixtureDataSource:
    """Serves the fixed dataset, optionally after a simulated delay."""

    def __init__(
        self,
        records: Optional[List[Dict[str, Any]]] = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self.records = FIXTURE_TRANSACTIONS if records is None else records
        self.delay_seconds = delay_seconds

    async def fetch_candidates(self, request: FilterRequest) -> List[Dict[str, Any]]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        # fresh list of fresh dicts per call
        return [dict(r) for r in self.records]


class RemoteDataSource:
    """
    Remote transaction endpoint.

    Only present bounds are sent. The client is created per call unless one
    is injected (tests pass a client built on httpx.MockTransport).
    """

    PATH = "/transactions"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def fetch_candidates(self, request: FilterRequest) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{self.PATH}"
        params = request.to_query_params()
        logger.debug("Fetching candidates from %s params=%s", url, params)

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise DataSourceError(
                f"Failed to fetch transaction data: HTTP {exc.response.status_code}", cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            raise DataSourceError(f"Failed to fetch transaction data: {exc}", cause=exc) from exc
        except ValueError as exc:
            raise DataSourceError("Failed to decode transaction data", cause=exc) from exc

        if not isinstance(data, list):
            raise DataSourceError("Unexpected payload: expected a list of transactions")
        return data


def build_data_source(settings: Settings) -> DataSource:
    if settings.TXN_API_URL:
        logger.info("Using remote transaction source at %s", settings.TXN_API_URL)
        return RemoteDataSource(settings.TXN_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
    logger.info("TXN_API_URL not set; using fixture transaction source")
    return FixtureDataSource(delay_seconds=settings.FIXTURE_DELAY_SECONDS)
