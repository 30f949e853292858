"""HTTP client for 5Post API."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from .auth import SKIP_AUTH_EXTENSION, AuthInterceptor, TokenClaims, TokenManager, get_api_key
from .exceptions import (
    BusinessError,
    EmptyResponseError,
    InvalidArgumentError,
    MalformedTokenError,
    RemoteError,
    RemoteFaultError,
)
from .models import Order, OrderIdentifier, Warehouse

# Default configuration
PRODUCTION_BASE_URL = "https://api-omni.x5.ru"
SANDBOX_BASE_URL = "https://api-preprod-omni.x5.ru"
DEFAULT_BASE_URL = os.environ.get("FIVEPOST_API_URL", PRODUCTION_BASE_URL)
DEFAULT_TIMEOUT = 300.0
USER_AGENT = "fivepost-sdk-python/0.1.0"

# Token exchange contract
TOKEN_PATH = "/jwt-generate-claims/rs256/1"
TOKEN_SUBJECT = "OpenAPI"
TOKEN_AUDIENCE = "A122019!"

SUCCESS_STATUSES = ("OK", "ok")


class DataType(str, Enum):
    """Body encoding of a POST request."""

    JSON = "json"
    FORM = "form"


def _as_status_code(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class FivePost:
    """Client for the 5Post API.

    Example:
        ```python
        from fivepost_sdk import FivePost, SANDBOX_BASE_URL

        with FivePost(api_key="...", base_url=SANDBOX_BASE_URL) as client:
            page = client.get_pickup_points(size=100)
            for point in page["content"]:
                print(point["id"], point["name"])
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = DEFAULT_BASE_URL,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the 5Post client.

        Args:
            api_key: 5Post API key. If not provided, will be read from the
                FIVEPOST_API_KEY env var.
            timeout: Request timeout in seconds.
            base_url: API address, production or pre-production.
            logger: Logger receiving one line per request and per response.
            transport: Custom httpx transport.

        Raises:
            InvalidArgumentError: If no API key is available.
        """
        key = get_api_key(api_key)
        if not key:
            raise InvalidArgumentError(
                "No API key found. Pass api_key or set FIVEPOST_API_KEY environment variable"
            )

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._logger = logger
        self._tokens = TokenManager(key, self._generate_token)
        self._client: httpx.Client | None = None

    def __enter__(self) -> FivePost:
        """Enter context manager."""
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager."""
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
                event_hooks={"request": [AuthInterceptor(self._tokens)]},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def set_logger(self, logger: logging.Logger | logging.LoggerAdapter | None) -> None:
        """Set the logger used for request and response lines."""
        self._logger = logger

    # ==================== TOKEN ====================

    @property
    def tokens(self) -> TokenManager:
        """Token holder shared with the auth interceptor."""
        return self._tokens

    def get_token(self) -> str:
        """Get the bearer token, requesting one if none is cached.

        Raises:
            MalformedTokenError: If the cached token cannot be decoded.
        """
        return self._tokens.get()

    def set_token(self, token: str | None) -> None:
        """Use a previously obtained bearer token."""
        self._tokens.set(token)

    def refresh_token(self) -> str:
        """Request a new bearer token and cache it."""
        return self._tokens.refresh()

    def token_claims(self) -> TokenClaims | None:
        """Claims of the cached token, None if no token is cached."""
        return self._tokens.claims()

    def _generate_token(self, api_key: str) -> str:
        data = self._request(
            "POST",
            TOKEN_PATH,
            {"subject": TOKEN_SUBJECT, "audience": TOKEN_AUDIENCE},
            DataType.FORM,
            query={"apikey": api_key},
            authenticated=False,
        )
        token = data.get("jwt") if isinstance(data, dict) else None
        if not token:
            raise MalformedTokenError("5Post token response does not contain a jwt")
        return token

    # ==================== DISPATCH ====================

    def _request(
        self,
        method: str,
        path: str,
        params: Any = None,
        data_type: DataType = DataType.JSON,
        *,
        query: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Make a request to the API.

        Args:
            method: HTTP method, POST or DELETE.
            path: API path.
            params: Body for POST, query string for DELETE.
            data_type: Body encoding for POST.
            query: Extra query parameters, never logged.
            authenticated: Obtain a token before sending. Unauthenticated
                requests never carry the bearer header.

        Returns:
            Decoded JSON response.

        Raises:
            APIError: On any error reported by the API.
            httpx.TransportError: On network failures.
        """
        if method not in ("POST", "DELETE"):
            raise InvalidArgumentError(f"Unsupported HTTP method: {method}")

        if authenticated:
            self._tokens.get()

        client = self._ensure_client()
        if params is None:
            params = {}
        extensions = None if authenticated else {SKIP_AUTH_EXTENSION: True}

        if method == "DELETE":
            raw_request = urlencode(params)
            self._log(f"5Post API {method} request {path}: {raw_request}")
            request = client.build_request(
                method,
                path,
                params={**(query or {}), **params} or None,
                extensions=extensions,
            )
        else:
            raw_request = json.dumps(params)
            self._log(f"5Post API {method} request {path}: {raw_request}")
            if data_type is DataType.FORM:
                request = client.build_request(
                    method, path, params=query, data=params, extensions=extensions
                )
            else:
                request = client.build_request(
                    method, path, params=query, json=params, extensions=extensions
                )

        response = client.send(request)
        raw_body = response.text

        self._log(
            f"5Post API {method} response {path}: {raw_body}",
            headers=dict(response.headers),
            http_status=response.status_code,
        )

        return self._parse_response(path, response.status_code, raw_body, raw_request)

    def _log(self, message: str, **extra: Any) -> None:
        if self._logger is not None:
            self._logger.info(message, extra=extra or None)

    @staticmethod
    def _parse_response(path: str, status_code: int, raw_body: str, raw_request: str) -> Any:
        try:
            data = json.loads(raw_body)
        except ValueError:
            data = None

        if not data:
            raise EmptyResponseError(
                f"Empty response from 5Post for {path}", status_code, raw_body, raw_request
            )

        if not isinstance(data, dict):
            return data

        fault = data.get("fault")
        if fault:
            faultstring = fault.get("faultstring", "") if isinstance(fault, dict) else fault
            raise RemoteFaultError(
                f"5Post returned an error for {path}: {faultstring}",
                status_code,
                raw_body,
                raw_request,
            )

        if data.get("error"):
            raise RemoteError(
                f"5Post returned an error for {path}: {data['error']}, {data.get('message', '')}",
                _as_status_code(data.get("status")),
                raw_body,
                raw_request,
            )

        status = data.get("status")
        if status and status not in SUCCESS_STATUSES:
            description = data.get("description") or ""
            error_id = data.get("id") or ""
            raise BusinessError(
                f"5Post returned an error for {path}: {description}({error_id})",
                status_code,
                raw_body,
                raw_request,
            )

        return data

    # ==================== PICKUP POINTS ====================

    def get_pickup_points(self, number: int = 0, size: int = 1000) -> dict[str, Any]:
        """Get one page of pickup points.

        Args:
            number: Page number, starting at 0.
            size: Pickup points per page.

        Returns:
            The page as returned by the API.
        """
        return self._request(
            "POST",
            "/api/v1/pickuppoints/query",
            {"pageSize": size, "pageNumber": number},
        )

    def iter_pickup_points(self, size: int = 1000) -> Iterator[dict[str, Any]]:
        """Iterate over all pickup points, one page request at a time."""
        number = 0
        while True:
            page = self.get_pickup_points(number=number, size=size)
            content = page.get("content") or []
            yield from content

            total_pages = page.get("totalPages")
            if not content or page.get("last") is True:
                return
            if total_pages is not None and number + 1 >= total_pages:
                return
            number += 1

    # ==================== WAREHOUSES ====================

    def add_warehouses(self, warehouses: Iterable[Warehouse | Mapping[str, Any]]) -> Any:
        """Register partner warehouses.

        Args:
            warehouses: Warehouse models or ready-made mappings.
        """
        params = [w.as_dict() if isinstance(w, Warehouse) else dict(w) for w in warehouses]
        return self._request("POST", "/api/v1/warehouse", params)

    # ==================== ORDERS ====================

    def create_orders(self, orders: Iterable[Order | Mapping[str, Any]]) -> Any:
        """Create orders.

        Args:
            orders: Orders to submit, in the order they should be sent.
        """
        params = {
            "partnerOrders": [o.as_dict() if isinstance(o, Order) else dict(o) for o in orders]
        }
        return self._request("POST", "/api/v1/createOrder", params)

    def cancel_order(self, order_id: str) -> Any:
        """Cancel an order.

        Args:
            order_id: Order ID on the sender side.

        Raises:
            InvalidArgumentError: If order_id is empty.
        """
        if not order_id:
            raise InvalidArgumentError("order_id is required")
        return self._request("DELETE", f"/api/v1/cancelOrder/{quote(str(order_id), safe='')}")

    # ==================== STATUSES ====================

    def get_orders_status(
        self, order_ids: Iterable[OrderIdentifier | Mapping[str, Any]]
    ) -> Any:
        """Get the current status of several orders.

        Args:
            order_ids: Each item holds ``order_id`` and/or ``vendor_id``.

        Raises:
            InvalidArgumentError: If an item is not an identifier or has neither ID.
        """
        params = []
        for i, item in enumerate(order_ids):
            try:
                identifier = OrderIdentifier.coerce(item)
            except (TypeError, ValidationError) as e:
                raise InvalidArgumentError(f"Item {i} is not a valid order identifier: {e}") from e
            if identifier.is_empty():
                raise InvalidArgumentError(f"Item {i} has neither vendor_id nor order_id")
            params.append(identifier.to_params())

        return self._request("POST", "/api/v1/getOrderStatus", params)

    def get_order_statuses(
        self, order_id: str | None = None, vendor_id: str | None = None
    ) -> Any:
        """Get the status history of one order.

        Args:
            order_id: Order ID on the sender side.
            vendor_id: Order ID assigned by 5Post.

        Raises:
            InvalidArgumentError: If neither identifier is given or one is not a string.
        """
        try:
            identifier = OrderIdentifier(order_id=order_id, vendor_id=vendor_id)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid order identifier: {e}") from e
        if identifier.is_empty():
            raise InvalidArgumentError("order_id or vendor_id is required")

        return self._request("POST", "/api/v1/getOrderHistory", identifier.to_params())
