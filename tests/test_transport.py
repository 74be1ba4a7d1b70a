from __future__ import annotations

import logging

import pytest
from aiohttp import ClientSession, web
from aiohttp.test_utils import TestServer

from gpstracker._transport import HttpSubmissionTransport
from gpstracker.config import TrackerConfig
from gpstracker.exceptions import TrackerSubmissionError
from gpstracker.models.payload import SubmissionPayload

_PAYLOAD = SubmissionPayload(time="2026-01-01T00:00:00+00:00", gpsposition="40.0, -74.0")


def _app(status: int, seen: list[web.Request] | None = None) -> web.Application:
    async def handler(request: web.Request) -> web.Response:
        if seen is not None:
            seen.append(request)
            await request.read()
        return web.Response(status=status, text="topic says hi")

    app = web.Application()
    app.router.add_post("/gps", handler)
    return app


@pytest.mark.asyncio
async def test_submit_posts_json_with_auth_parameter() -> None:
    seen: list[web.Request] = []
    async with TestServer(_app(200, seen)) as server, ClientSession() as session:
        config = TrackerConfig(endpoint_url=str(server.make_url("/gps")), token="tk_transport")
        transport = HttpSubmissionTransport(config, session)

        await transport.submit(_PAYLOAD)

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert request.query["auth"] == "tk_transport"
    assert request.content_type == "application/json"
    assert await request.json() == {"time": "2026-01-01T00:00:00+00:00", "gpsposition": "40.0, -74.0"}


@pytest.mark.asyncio
async def test_submit_debug_log_masks_token(caplog: pytest.LogCaptureFixture) -> None:
    async with TestServer(_app(200)) as server, ClientSession() as session:
        config = TrackerConfig(endpoint_url=str(server.make_url("/gps")), token="tk_transport")
        transport = HttpSubmissionTransport(config, session)

        with caplog.at_level(logging.DEBUG, logger="gpstracker._transport"):
            await transport.submit(_PAYLOAD)

    assert "tk_transport" not in caplog.text
    assert "'auth': '<redacted>'" in caplog.text
    assert "40.0, -74.0" in caplog.text


@pytest.mark.asyncio
async def test_submit_raises_on_non_2xx_without_leaking_token() -> None:
    async with TestServer(_app(503)) as server, ClientSession() as session:
        config = TrackerConfig(endpoint_url=str(server.make_url("/gps")), token="tk_transport")
        transport = HttpSubmissionTransport(config, session)

        with pytest.raises(TrackerSubmissionError) as exc_info:
            await transport.submit(_PAYLOAD)

    exc = exc_info.value
    assert exc.status_code == 503
    assert exc.endpoint.endswith("/gps")
    assert "tk_transport" not in str(exc)


@pytest.mark.asyncio
async def test_submit_wraps_connection_errors() -> None:
    config = TrackerConfig(endpoint_url="http://127.0.0.1:1/gps", token="tk_transport", http_timeout=5.0)
    async with ClientSession() as session:
        transport = HttpSubmissionTransport(config, session)

        with pytest.raises(TrackerSubmissionError) as exc_info:
            await transport.submit(_PAYLOAD)

    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is not None
