"""
Error types raised by the CWC client.

Configuration and parameter errors are raised before any network I/O.
``BadRequest`` wraps a 400 response from the delivery API together with the
error messages extracted from its body. All other transport failures are
left as the underlying ``httpx`` exceptions.
"""

from __future__ import annotations

import httpx


class CwcError(Exception):
    """Base class for errors raised by this package."""


class MissingConfiguration(CwcError):
    """A required client configuration key was not supplied."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Missing required configuration key: {key}")


class MissingParameter(CwcError):
    """A required message parameter was not supplied."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required message parameter: {name}")


class BadRequest(CwcError):
    """
    The delivery API rejected a message.

    Attributes:
        original_exception: The ``httpx.HTTPStatusError`` for the 400 response.
        errors: Error messages reported by the service, in document order.
                Never empty; falls back to the raw response body.
    """

    def __init__(self, original_exception: httpx.HTTPStatusError, errors: list[str]) -> None:
        self.original_exception = original_exception
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))

    @property
    def response(self) -> httpx.Response:
        return self.original_exception.response


DeliveryError = BadRequest
