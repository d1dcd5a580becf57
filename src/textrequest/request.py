"""Text request: request descriptor and response decoder."""

import json
import logging
from typing import Any, Callable

from .config import settings
from .core.protocols import Method, NetworkResponse, Result
from .headers import CharsetResolver, parse_cache_headers

logger = logging.getLogger(__name__)

PROTOCOL_CHARSET = "utf-8"
PROTOCOL_CONTENT_TYPE = f"application/json; charset={PROTOCOL_CHARSET}"


def render_body(document: Any) -> str | None:
    """Render a body document to compact JSON text. Strings pass through."""
    if document is None:
        return None
    if isinstance(document, str):
        return document
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


class TextRequest:
    """A request whose response body is decoded to a string.

    The body document, if any, is rendered once at construction. The
    dispatcher reads the body, content type and cache key, then feeds the
    raw response to ``parse_response`` and hands the result to ``deliver``,
    which fires exactly one of the two callbacks.
    """

    def __init__(
        self,
        method: Method | str,
        url: str,
        on_success: Callable[[str], Any],
        on_error: Callable[[Exception], Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        body: Any = None,
        should_cache: bool = True,
        charset_resolver: CharsetResolver | None = None,
        fallback_charset: str | None = None,
    ):
        self.method = Method(method)
        self.url = url
        self.on_success = on_success
        self.on_error = on_error
        self.headers = headers if headers is not None else {}
        self.params = params if params is not None else {}
        self.body_text = render_body(body)
        self.should_cache = should_cache
        self.charset_resolver = charset_resolver or CharsetResolver(settings.default_charset)
        self.fallback_charset = fallback_charset or settings.fallback_charset
        self._delivered = False

        logger.debug(
            "Request String : URL: %s\nHeaders: %s\nParams: %s",
            url,
            "".join(f"{k}:{v}\n" for k, v in self.headers.items()),
            "".join(f"{k}:{v}\n" for k, v in self.params.items()),
        )

    def __repr__(self) -> str:
        return f"<TextRequest {self.method.value} {self.url}>"

    def get_headers(self) -> dict[str, str]:
        return self.headers

    def get_params(self) -> dict[str, str]:
        return self.params

    def get_body_content_type(self) -> str:
        """Content type sent with the body, independent of its shape."""
        return PROTOCOL_CONTENT_TYPE

    def get_body(self) -> bytes | None:
        """Return the body as UTF-8 bytes, or None if there is no body.

        An encoding failure is logged and reported as no body.
        """
        if self.body_text is None:
            return None
        try:
            return self.body_text.encode(PROTOCOL_CHARSET)
        except (UnicodeEncodeError, LookupError):
            logger.error(
                "Unsupported Encoding while trying to get the bytes of %r using %s",
                self.body_text,
                PROTOCOL_CHARSET,
            )
            return None

    def get_cache_key(self) -> str:
        """URL followed by every header key+value, iterated twice."""
        cache_key = self.url
        for key, value in self.headers.items():
            cache_key += key + value
        # Header entries appear twice; callers rely on this key format.
        for key, value in self.headers.items():
            cache_key += key + value
        return cache_key

    def parse_response(self, response: NetworkResponse) -> Result:
        """Decode the response body using its advertised charset."""
        charset = self.charset_resolver.resolve(response.headers)
        try:
            parsed = response.content.decode(charset)
        except (LookupError, UnicodeDecodeError) as e:
            logger.warning(
                "Could not decode %s response with charset %r (%s), using %s",
                self.url,
                charset,
                e,
                self.fallback_charset,
            )
            parsed = response.content.decode(self.fallback_charset, errors="replace")
        return Result.success(parsed, parse_cache_headers(response))

    @property
    def is_delivered(self) -> bool:
        return self._delivered

    def deliver(self, result: Result):
        """Fire on_success or on_error for the result. Only once per request."""
        if self._delivered:
            raise RuntimeError(f"{self!r} has already been delivered")
        self._delivered = True

        if result.is_success:
            self.on_success(result.value)
        elif self.on_error is not None:
            self.on_error(result.error)

    def deliver_error(self, error: Exception):
        self.deliver(Result.failure(error))
