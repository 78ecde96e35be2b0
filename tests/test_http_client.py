"""
HR backend HTTP client tests against a local aiohttp server.
"""

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from hrms_leave.core.integrations.http.http_client import HttpClient


@pytest.fixture
async def hr_backend():
    """Local server whose handlers count their calls."""
    calls = {"dates": 0, "leaves": 0, "flaky": 0}

    async def refused_dates(request):
        calls["dates"] += 1
        return web.json_response(
            {"success": False, "message": "Invalid range", "errors": ["DATE_RANGE"]},
            status=400,
        )

    async def unavailable_leaves(request):
        calls["leaves"] += 1
        return web.Response(status=503, text="maintenance")

    async def flaky(request):
        calls["flaky"] += 1
        if calls["flaky"] < 3:
            return web.Response(status=502, text="bad gateway")
        return web.json_response({"success": True, "data": [], "message": ""})

    async def missing(request):
        return web.Response(status=404, text="not found")

    app = web.Application()
    app.router.add_get("/employees/42/leaves/dates", refused_dates)
    app.router.add_post("/employees/42/leaves", unavailable_leaves)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/missing", missing)

    server = TestServer(app)
    await server.start_server()
    yield str(server.make_url("")), calls
    await server.close()


@pytest.mark.asyncio
async def test_client_error_returns_envelope_without_retry(hr_backend):
    base_url, calls = hr_backend

    async with HttpClient(base_url=base_url, max_retries=3, retry_delay=0) as client:
        body = await client.get("employees/42/leaves/dates")

    assert body["errors"] == ["DATE_RANGE"]
    assert calls["dates"] == 1


@pytest.mark.asyncio
async def test_post_is_never_retried(hr_backend):
    base_url, calls = hr_backend

    async with HttpClient(base_url=base_url, max_retries=3, retry_delay=0) as client:
        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await client.post("employees/42/leaves", json={"leaveCode": "AL"})

    assert exc_info.value.status == 503
    assert calls["leaves"] == 1


@pytest.mark.asyncio
async def test_get_is_retried_on_server_error(hr_backend):
    base_url, calls = hr_backend

    async with HttpClient(base_url=base_url, max_retries=3, retry_delay=0) as client:
        body = await client.get("flaky")

    assert body["success"] is True
    assert calls["flaky"] == 3


@pytest.mark.asyncio
async def test_client_error_without_json_body_raises(hr_backend):
    base_url, _ = hr_backend

    async with HttpClient(base_url=base_url, max_retries=3, retry_delay=0) as client:
        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await client.get("missing")

    assert exc_info.value.status == 404
