"""Response header parsing: charset resolution and cache metadata."""

import time
from datetime import timezone
from email.utils import parsedate_to_datetime

from .core.protocols import CacheEntry, NetworkResponse

DEFAULT_CHARSET = "ISO-8859-1"


def _get_header(headers: dict[str, str], name: str) -> str | None:
    """Case-insensitive header lookup."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def parse_charset(headers: dict[str, str], default: str = DEFAULT_CHARSET) -> str:
    """Return the charset parameter of the Content-Type header, or default."""
    content_type = _get_header(headers, "Content-Type")
    if content_type is None:
        return default

    for param in content_type.split(";")[1:]:
        pair = param.strip().split("=")
        if len(pair) == 2 and pair[0].strip().lower() == "charset":
            charset = pair[1].strip().strip('"').strip("'")
            if charset:
                return charset

    return default


class CharsetResolver:
    """Charset resolution with an explicitly configured default."""

    def __init__(self, default_charset: str = DEFAULT_CHARSET):
        self.default_charset = default_charset

    def resolve(self, headers: dict[str, str]) -> str:
        return parse_charset(headers, self.default_charset)


def parse_date_as_epoch(value: str) -> int:
    """Parse an RFC 1123 date into epoch milliseconds. Returns 0 on failure."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def parse_cache_headers(response: NetworkResponse, now: int | None = None) -> CacheEntry | None:
    """
    Build a CacheEntry from the response's caching headers.

    Returns None when the response forbids caching (no-cache / no-store).
    Cache-Control takes precedence over Expires; without either the entry
    is created already expired.
    """
    if now is None:
        now = int(time.time() * 1000)
    headers = response.headers

    server_date = 0
    last_modified = 0
    server_expires = 0
    soft_expire = 0
    final_expire = 0
    max_age = 0
    stale_while_revalidate = 0
    has_cache_control = False
    must_revalidate = False

    value = _get_header(headers, "Date")
    if value:
        server_date = parse_date_as_epoch(value)

    value = _get_header(headers, "Cache-Control")
    if value:
        has_cache_control = True
        for token in value.split(","):
            token = token.strip().lower()
            if token in ("no-cache", "no-store"):
                return None
            if token.startswith("max-age="):
                try:
                    max_age = int(token[len("max-age="):])
                except ValueError:
                    pass
            elif token.startswith("stale-while-revalidate="):
                try:
                    stale_while_revalidate = int(token[len("stale-while-revalidate="):])
                except ValueError:
                    pass
            elif token in ("must-revalidate", "proxy-revalidate"):
                must_revalidate = True

    value = _get_header(headers, "Expires")
    if value:
        server_expires = parse_date_as_epoch(value)

    value = _get_header(headers, "Last-Modified")
    if value:
        last_modified = parse_date_as_epoch(value)

    etag = _get_header(headers, "ETag")

    if has_cache_control:
        soft_expire = now + max_age * 1000
        if must_revalidate:
            final_expire = soft_expire
        else:
            final_expire = soft_expire + stale_while_revalidate * 1000
    elif server_date > 0 and server_expires >= server_date:
        soft_expire = now + (server_expires - server_date)
        final_expire = soft_expire

    return CacheEntry(
        data=response.content,
        etag=etag,
        server_date=server_date,
        last_modified=last_modified,
        ttl=final_expire,
        soft_ttl=soft_expire,
        response_headers=dict(headers),
    )
