"""Core dispatcher components."""

from .dispatcher import HttpDispatcher
from .protocols import Cache, CacheEntry, Dispatcher, Method, NetworkResponse, Result

__all__ = [
    "Cache",
    "CacheEntry",
    "Dispatcher",
    "HttpDispatcher",
    "Method",
    "NetworkResponse",
    "Result",
]
