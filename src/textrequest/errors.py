"""Exceptions raised at the dispatcher boundary."""

from builtins import TimeoutError as _TimeoutError


class TextRequestError(Exception):
    """Base class for textrequest exceptions."""


class TransportError(TextRequestError):
    """The network exchange did not complete."""


class TimeoutError(TransportError, _TimeoutError):
    """The network exchange timed out."""


class HttpStatusError(TextRequestError):
    """The server answered with a non-2xx status."""

    def __init__(self, response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code
