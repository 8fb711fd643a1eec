# Test type: unit
# Validation: fixture and remote data sources -- query params, failures, source selection
# Command: pytest test/test_sources.py -v

import asyncio

import httpx
import pytest

from app.config import Settings
from app.errors import DataSourceError
from app.models import FilterRequest
from app.sources import (
    FIXTURE_TRANSACTIONS,
    FixtureDataSource,
    RemoteDataSource,
    build_data_source,
)


def _remote(handler) -> RemoteDataSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteDataSource("http://txn.test/api/", client=client)


class TestFixtureDataSource:
    @pytest.mark.asyncio
    async def test_returns_ten_records(self):
        raws = await FixtureDataSource().fetch_candidates(FilterRequest())
        assert len(raws) == 10
        assert raws[0]["transId"] == "T001"

    @pytest.mark.asyncio
    async def test_returns_copies(self):
        raws = await FixtureDataSource().fetch_candidates(FilterRequest())
        raws[0]["credit"] = 99999
        assert FIXTURE_TRANSACTIONS[0]["credit"] == 100

    @pytest.mark.asyncio
    async def test_ignores_bounds(self):
        raws = await FixtureDataSource().fetch_candidates(FilterRequest(minCredit=1000))
        assert len(raws) == 10

    @pytest.mark.asyncio
    async def test_simulated_delay(self, monkeypatch):
        slept = []

        async def fake_sleep(seconds):
            slept.append(seconds)

        monkeypatch.setattr(asyncio, "sleep", fake_sleep)
        await FixtureDataSource(delay_seconds=1.0).fetch_candidates(FilterRequest())
        assert slept == [1.0]


class TestRemoteDataSource:
    @pytest.mark.asyncio
    async def test_sends_only_present_bounds(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[])

        await _remote(handler).fetch_candidates(FilterRequest(minCredit="100", searchTerm="store"))
        assert seen["path"] == "/api/transactions"
        assert seen["params"] == {"minCredit": "100", "searchTerm": "store"}

    @pytest.mark.asyncio
    async def test_returns_payload_list(self):
        payload = [{"date_time": "2023-06-01 10:30", "transaction_id": "X1", "credit": 5}]

        def handler(request):
            return httpx.Response(200, json=payload)

        assert await _remote(handler).fetch_candidates(FilterRequest()) == payload

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        with pytest.raises(DataSourceError) as exc_info:
            await _remote(handler).fetch_candidates(FilterRequest())
        assert "HTTP 500" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DataSourceError) as exc_info:
            await _remote(handler).fetch_candidates(FilterRequest())
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(DataSourceError):
            await _remote(handler).fetch_candidates(FilterRequest())

    @pytest.mark.asyncio
    async def test_non_list_payload(self):
        def handler(request):
            return httpx.Response(200, json={"data": []})

        with pytest.raises(DataSourceError):
            await _remote(handler).fetch_candidates(FilterRequest())


class TestBuildDataSource:
    def test_fixture_when_url_unset(self):
        source = build_data_source(Settings(TXN_API_URL=None, FIXTURE_DELAY_SECONDS=0.5))
        assert isinstance(source, FixtureDataSource)
        assert source.delay_seconds == 0.5

    def test_remote_when_url_set(self):
        source = build_data_source(Settings(TXN_API_URL="http://txn.test", HTTP_TIMEOUT_SECONDS=3.0))
        assert isinstance(source, RemoteDataSource)
        assert source.base_url == "http://txn.test"
        assert source.timeout == 3.0
