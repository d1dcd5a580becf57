"""Data types and protocols shared by requests and dispatchers."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..request import TextRequest


class Method(str, Enum):
    """HTTP methods a request can be sent with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


@dataclass
class NetworkResponse:
    """Raw HTTP response as delivered by a dispatcher."""

    status_code: int
    headers: dict[str, str]
    content: bytes
    not_modified: bool = False
    network_time_ms: float = 0.0


@dataclass
class CacheEntry:
    """Cache metadata derived from response headers.

    All timestamps are epoch milliseconds; 0 means unknown.
    """

    data: bytes
    etag: str | None = None
    server_date: int = 0
    last_modified: int = 0
    ttl: int = 0
    soft_ttl: int = 0
    response_headers: dict[str, str] = field(default_factory=dict)

    def is_expired(self, now: int | None = None) -> bool:
        """True if the entry may no longer be served."""
        if now is None:
            now = int(time.time() * 1000)
        return self.ttl < now

    def refresh_needed(self, now: int | None = None) -> bool:
        """True if the entry should be revalidated with the origin."""
        if now is None:
            now = int(time.time() * 1000)
        return self.soft_ttl < now


@dataclass
class Result:
    """Outcome of a request: a decoded value or an error, never both."""

    value: Any = None
    cache_entry: CacheEntry | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: Any, cache_entry: CacheEntry | None = None) -> "Result":
        return cls(value=value, cache_entry=cache_entry)

    @classmethod
    def failure(cls, error: Exception) -> "Result":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None


class Cache(Protocol):
    """Protocol for cache stores keyed by request cache key."""

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under key, if any."""
        ...

    def put(self, key: str, entry: CacheEntry) -> None:
        """Store entry under key."""
        ...


class Dispatcher(Protocol):
    """Protocol for request dispatchers."""

    async def dispatch(self, request: "TextRequest") -> Result:
        """Send the request and deliver its result."""
        ...
