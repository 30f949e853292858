"""Exception classes for 5Post SDK."""

from __future__ import annotations


class FivePostError(Exception):
    """Base exception for all 5Post SDK errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(FivePostError, ValueError):
    """Caller arguments are malformed.

    Raised before any request is sent, e.g. when an order identifier
    has neither ``order_id`` nor ``vendor_id``.
    """


class MalformedTokenError(FivePostError):
    """The bearer token cannot be decoded.

    This error is raised when:
    - The cached token is not a structurally valid JWT
    - The token endpoint answered without a ``jwt`` field
    """


class APIError(FivePostError):
    """Error reported by the 5Post API.

    All remote failure shapes are surfaced as this type (or a subclass),
    so callers can branch on the status or inspect the raw payloads.

    Attributes:
        status_code: Status code associated with the failure.
        message: Error message.
        raw_body: Response body exactly as received.
        raw_request: Serialized request that produced the response.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        raw_body: str = "",
        raw_request: str = "",
    ) -> None:
        self.status_code = status_code
        self.raw_body = raw_body
        self.raw_request = raw_request
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"


class EmptyResponseError(APIError):
    """The API answered with an empty or undecodable body."""


class RemoteFaultError(APIError):
    """The API answered with a ``fault`` object (gateway level failure)."""


class RemoteError(APIError):
    """The API answered with an ``error`` field.

    ``status_code`` comes from the ``status`` field of the response body,
    not from the HTTP status line.
    """


class BusinessError(APIError):
    """The API answered with a ``status`` other than OK."""
