"""Text request/response contract for single HTTP exchanges."""

from .core import CacheEntry, HttpDispatcher, Method, NetworkResponse, Result
from .errors import HttpStatusError, TextRequestError, TimeoutError, TransportError
from .headers import CharsetResolver, parse_cache_headers, parse_charset
from .request import PROTOCOL_CONTENT_TYPE, TextRequest

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CharsetResolver",
    "HttpDispatcher",
    "HttpStatusError",
    "Method",
    "NetworkResponse",
    "PROTOCOL_CONTENT_TYPE",
    "Result",
    "TextRequest",
    "TextRequestError",
    "TimeoutError",
    "TransportError",
    "parse_cache_headers",
    "parse_charset",
]
