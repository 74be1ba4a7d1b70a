"""HTTP transport that submits fixes to the notification endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Protocol

import aiohttp

from gpstracker._constants import AUTH_QUERY_PARAM, USER_AGENT
from gpstracker._redact import redact_for_log, redact_url
from gpstracker.config import TrackerConfig
from gpstracker.exceptions import TrackerSubmissionError
from gpstracker.models.payload import SubmissionPayload

_logger = logging.getLogger(__name__)


class SubmissionTransport(Protocol):
    """Structural transport interface used by the poller.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpSubmissionTransport`)
    concrete.
    """

    async def submit(self, payload: SubmissionPayload) -> None:
        ...


class HttpSubmissionTransport:
    """POSTs each payload to the configured endpoint with the static token."""

    def __init__(
        self,
        config: TrackerConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.http_timeout) if config.http_timeout > 0 else None

    async def submit(self, payload: SubmissionPayload) -> None:
        """Send one payload.

        Raises
        ------
        TrackerSubmissionError
            On a network error, a timeout or a non-2xx response.
        """
        url = self._config.endpoint_url
        body = json.dumps(payload.model_dump(), separators=(",", ":"))
        headers = {
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }

        params = {AUTH_QUERY_PARAM: self._config.token}

        _logger.debug(
            "POST %s params=%s body=%s",
            redact_url(url),
            redact_for_log(params),
            redact_for_log(payload.model_dump()),
        )

        request_kwargs = {"timeout": self._timeout} if self._timeout is not None else {}
        try:
            async with self._http.post(
                url,
                params=params,
                data=body,
                headers=headers,
                **request_kwargs,
            ) as resp:
                if not 200 <= resp.status < 300:
                    text = await resp.text()
                    raise TrackerSubmissionError(
                        f"HTTP {resp.status} from {redact_url(url)}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=redact_url(url),
                    )
        except TrackerSubmissionError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TrackerSubmissionError(
                f"Request to {redact_url(url)} failed: {exc!r}",
                endpoint=redact_url(url),
            ) from exc
