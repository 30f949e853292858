"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import base64
import json
import time
from typing import Any

import httpx
import pytest
import respx
from httpx import Response

from fivepost_sdk import FivePost
from fivepost_sdk.client import PRODUCTION_BASE_URL, TOKEN_PATH

# ==================== MOCK DATA ====================


def _b64url(data: dict[str, Any]) -> str:
    raw = json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def make_jwt(claims: dict[str, Any] | None = None) -> str:
    """Create an unsigned but structurally valid JWT."""
    if claims is None:
        claims = {"sub": "OpenAPI", "exp": int(time.time()) + 3600}
    header = {"alg": "RS256", "typ": "JWT"}
    return f"{_b64url(header)}.{_b64url(claims)}.c2lnbmF0dXJl"


def make_pickup_point(point_id: str = "pvz-1", name: str = "5Post Pyaterochka") -> dict[str, Any]:
    """Create a mock pickup point dictionary."""
    return {
        "id": point_id,
        "name": name,
        "partnerName": "5Post",
        "type": "POSTAMAT",
        "address": {"city": "Moscow", "street": "Tverskaya", "house": "1"},
    }


def make_pickup_page(
    points: list[dict[str, Any]] | None = None,
    number: int = 0,
    total_pages: int = 1,
) -> dict[str, Any]:
    """Create a mock pickup points page."""
    points = [make_pickup_point()] if points is None else points
    return {
        "content": points,
        "totalPages": total_pages,
        "totalElements": len(points) * total_pages,
        "number": number,
        "last": number + 1 >= total_pages,
    }


def make_order_dict(sender_order_id: str = "order-1") -> dict[str, Any]:
    """Create a mock order in constructor form."""
    return {
        "sender_order_id": sender_order_id,
        "client_name": "Ivan Petrov",
        "client_phone": "+79990001122",
        "receiver_location": "pvz-1",
        "sender_location": "wh-1",
        "cost": {"price": 1500},
        "cargoes": [
            {
                "sender_cargo_id": f"{sender_order_id}-1",
                "barcodes": [{"value": "4601234567890"}],
                "height": 100,
                "length": 200,
                "width": 150,
                "weight": 1200,
                "price": 1500,
            }
        ],
    }


def make_warehouse_dict(location_id: str = "wh-1") -> dict[str, Any]:
    """Create a mock warehouse in constructor form."""
    return {
        "name": "Main warehouse",
        "partner_name": "Test Shop",
        "partner_location_id": location_id,
        "region_code": 77,
        "federal_district": "Central",
        "region": "Moscow",
        "index": "101000",
        "town": "Moscow",
        "street": "Lenina",
        "house_number": "10",
        "coordinates": "55.75,37.61",
        "contact_phone_number": "+74950001122",
        "time_zone": "+03:00",
        "working_time": [{"day_number": 1, "time_from": "09:00:00", "time_till": "18:00:00"}],
    }


# ==================== FIXTURES ====================


@pytest.fixture
def api_base_url() -> str:
    """Base URL for API mocks."""
    return PRODUCTION_BASE_URL


@pytest.fixture
def mock_api_key() -> str:
    """Mock API key for testing."""
    return "test-api-key-1234567890"


@pytest.fixture
def mock_token() -> str:
    """Structurally valid bearer token."""
    return make_jwt()


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def client(mock_api_key, mock_token, api_base_url):
    """Client with a token already cached."""
    with FivePost(api_key=mock_api_key, base_url=api_base_url) as c:
        c.set_token(mock_token)
        yield c


class SpyTransport(httpx.MockTransport):
    """Mock transport that records every request it handles."""

    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.requests: list[httpx.Request] = []
        self._payload = {"status": "OK"} if payload is None else payload
        self._status_code = status_code
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> Response:
        self.requests.append(request)
        return Response(self._status_code, json=self._payload)


@pytest.fixture
def spy_transport() -> SpyTransport:
    return SpyTransport()


# ==================== API MOCK HELPERS ====================


def mock_token_generate(respx_mock, base_url: str, token: str | None = None):
    """Mock the token generation endpoint."""
    token = token or make_jwt()
    return respx_mock.post(f"{base_url}{TOKEN_PATH}").mock(
        return_value=Response(200, json={"jwt": token})
    )
