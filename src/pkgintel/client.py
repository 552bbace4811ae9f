"""Bounded-timeout JSON fetcher for registry APIs."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from pkgintel.errors import (
    PackageNotFoundError,
    RateLimitedError,
    RegistryTimeoutError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class RegistryClient:
    """Issues a single GET per call and classifies what goes wrong.

    No retries are attempted. On timeout the in-flight request is cancelled
    and :class:`RegistryTimeoutError` is raised.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            user_agent: Identifying User-Agent sent with every request.
            timeout: Seconds to wait for a complete response.
            client: Optional shared httpx client. If not provided, a new
                    client is created for each request.
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

    async def fetch_json(self, url: str) -> Any:
        """Fetch and decode a JSON document.

        Raises:
            PackageNotFoundError: On HTTP 404.
            RateLimitedError: On HTTP 429.
            RegistryTimeoutError: If no response arrives within ``timeout``.
            UpstreamError: On any other status, network failure or bad body.
        """
        client = await self._get_client()
        logger.debug(f"GET {url}")
        try:
            response = await asyncio.wait_for(
                client.get(url, headers=self._headers(), follow_redirects=True),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Registry request timed out after {self.timeout}s: {url}")
            raise RegistryTimeoutError(
                f"Request timed out after {self.timeout:g}s",
                {"url": url},
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Registry request error for {url}: {e}")
            raise UpstreamError(
                f"Request failed: {e}",
                {"url": url, "original_error": str(e)},
            ) from e
        finally:
            if self._client is None:
                await client.aclose()

        return self._decode(url, response)

    def _decode(self, url: str, response: httpx.Response) -> Any:
        status = response.status_code
        if status == 404:
            logger.debug(f"Not found: {url}")
            raise PackageNotFoundError(url, {"url": url, "status": status})
        if status == 429:
            logger.warning(f"Rate limited by registry: {url}")
            raise RateLimitedError(
                "Registry rate limit exceeded",
                {"url": url, "status": status},
            )
        if not response.is_success:
            logger.warning(f"Registry error {status}: {url}")
            raise UpstreamError(
                f"HTTP {status}: {response.reason_phrase}",
                {"url": url, "status": status, "original_error": f"HTTP {status}"},
            )

        try:
            return response.json()
        except ValueError as e:
            # JSON decode error
            logger.warning(f"Registry JSON decode error for {url}: {e}")
            raise UpstreamError(
                f"Malformed response body: {e}",
                {"url": url, "status": status, "original_error": str(e)},
            ) from e
