"""HTTP dispatcher implementation using httpx."""

import asyncio
import logging
import time
from email.utils import formatdate
from typing import TYPE_CHECKING

import httpx

from ..config import settings
from ..errors import HttpStatusError, TimeoutError, TransportError
from .protocols import Cache, CacheEntry, NetworkResponse, Result

if TYPE_CHECKING:
    from ..request import TextRequest

logger = logging.getLogger(__name__)


class HttpDispatcher:
    """Async dispatcher that sends text requests over httpx with connection reuse."""

    def __init__(
        self,
        timeout: float = settings.timeout,
        user_agent: str = settings.user_agent,
        cache: Cache | None = None,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.cache = cache
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "HttpDispatcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self.timeout,
                        headers={"User-Agent": self.user_agent},
                        follow_redirects=True,
                    )
        return self._client

    def _cached_entry(self, request: "TextRequest") -> CacheEntry | None:
        if self.cache is None or not request.should_cache:
            return None
        return self.cache.get(request.get_cache_key())

    def _from_cache(self, request: "TextRequest", cached: CacheEntry) -> Result:
        return request.parse_response(
            NetworkResponse(status_code=200, headers=cached.response_headers, content=cached.data)
        )

    async def _send(self, request: "TextRequest", cached: CacheEntry | None) -> NetworkResponse:
        """Perform the network exchange and return the raw response."""
        headers = dict(request.get_headers())
        if cached is not None:
            if cached.etag:
                headers.setdefault("If-None-Match", cached.etag)
            if cached.last_modified > 0:
                headers.setdefault(
                    "If-Modified-Since",
                    formatdate(cached.last_modified / 1000, usegmt=True),
                )

        body = request.get_body()
        if body is not None:
            headers["Content-Type"] = request.get_body_content_type()

        client = await self._get_client()
        start = time.monotonic()
        try:
            resp = await client.request(
                request.method.value,
                request.url,
                headers=headers,
                content=body,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(str(e)) from e

        return NetworkResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            content=resp.content,
            not_modified=resp.status_code == 304,
            network_time_ms=(time.monotonic() - start) * 1000,
        )

    async def _execute(self, request: "TextRequest") -> Result:
        cached = self._cached_entry(request)
        if cached is not None and not cached.refresh_needed():
            logger.debug("cache hit for %s", request.url)
            return self._from_cache(request, cached)

        try:
            response = await self._send(request, cached)
        except TransportError as e:
            logger.warning("%s %s failed: %s", request.method.value, request.url, e)
            if cached is not None and not cached.is_expired():
                # Past the soft TTL but within the hard TTL.
                logger.debug("serving stale cache entry for %s", request.url)
                return self._from_cache(request, cached)
            return Result.failure(e)

        if response.not_modified and cached is not None:
            logger.debug("not modified: %s", request.url)
            headers = {k.lower(): v for k, v in cached.response_headers.items()}
            headers.update({k.lower(): v for k, v in response.headers.items()})
            response = NetworkResponse(
                status_code=200,
                headers=headers,
                content=cached.data,
                network_time_ms=response.network_time_ms,
            )
        elif not 200 <= response.status_code < 300:
            logger.warning("%s %s returned %d", request.method.value, request.url, response.status_code)
            return Result.failure(HttpStatusError(response))

        result = request.parse_response(response)
        if self.cache is not None and request.should_cache and result.cache_entry is not None:
            self.cache.put(request.get_cache_key(), result.cache_entry)
        return result

    async def dispatch(self, request: "TextRequest") -> Result:
        """Send the request, deliver its result to the request and return it."""
        result = await self._execute(request)
        request.deliver(result)
        return result

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
