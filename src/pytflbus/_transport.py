"""HTTP transport for the TfL unified API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pytflbus._redact import redact_params
from pytflbus.config import TflConfig
from pytflbus.exceptions import (
    TflNotFoundError,
    TflRateLimitError,
    TflTimeoutError,
    TflTransportError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        ...


class HttpTransport:
    """GET-only JSON transport with per-request timeouts and error mapping."""

    def __init__(self, config: TflConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _build_params(self, params: Mapping[str, Any] | None) -> dict[str, str]:
        query: dict[str, str] = {}
        if params:
            for key, value in params.items():
                if value is None:
                    continue
                query[key] = str(value)
        if self._config.app_key:
            query["app_key"] = self._config.app_key
        return query

    async def get_json(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """GET ``base_url + endpoint`` and decode the JSON body.

        Raises
        ------
        TflTimeoutError
            The request exceeded *timeout* (or ``config.request_timeout``).
        TflNotFoundError, TflRateLimitError, TflTransportError
            Non-2xx status, network failure, or a body that is not JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        query = self._build_params(params)
        budget = timeout if timeout is not None else self._config.request_timeout
        headers = {
            "accept": "application/json",
            "cache-control": "no-cache",
            "user-agent": self._config.user_agent,
        }

        _logger.debug("GET %s params=%s", url, redact_params(query))

        try:
            async with self._http.get(
                url,
                params=query,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=budget),
            ) as resp:
                text = await resp.text()
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise TflTimeoutError(
                f"Request to {endpoint} timed out after {budget:.1f}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TflTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        if status == 404:
            raise TflNotFoundError(f"HTTP 404 from {endpoint}", status_code=status, endpoint=endpoint)
        if status == 429:
            raise TflRateLimitError(f"HTTP 429 from {endpoint}", status_code=status, endpoint=endpoint)
        if not 200 <= status < 300:
            raise TflTransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            )

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TflTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
