"""Authentication handling for 5Post SDK."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import MalformedTokenError

logger = logging.getLogger(__name__)

# Environment variable name for API key
FIVEPOST_API_KEY_ENV = "FIVEPOST_API_KEY"

# Request extension marking requests that must go out without a bearer token
SKIP_AUTH_EXTENSION = "fivepost_skip_auth"


class TokenClaims(BaseModel):
    """Payload of a 5Post bearer token."""

    model_config = ConfigDict(extra="allow")

    exp: int | None = Field(None, description="Expiry as a UNIX timestamp")
    iat: int | None = Field(None, description="Issue time as a UNIX timestamp")
    sub: str | None = Field(None, description="Token subject")
    aud: str | list[str] | None = Field(None, description="Token audience")

    @property
    def expires_at(self) -> datetime | None:
        """Expiry as an aware datetime, if the token carries one."""
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token has passed its expiry.

        Tokens without an ``exp`` claim never expire.
        """
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= expires_at


def get_api_key(api_key: str | None = None) -> str | None:
    """Get the API key from the argument or the environment.

    Checks in order of priority:
    1. Explicitly provided api_key parameter
    2. FIVEPOST_API_KEY environment variable

    Returns:
        The API key if found, None otherwise.
    """
    if api_key:
        return api_key
    return os.environ.get(FIVEPOST_API_KEY_ENV) or None


def _b64url_decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


def decode_token(token: str) -> dict[str, Any]:
    """Structurally decode a JWT without verifying its signature.

    Args:
        token: Encoded token, ``header.payload.signature``.

    Returns:
        The decoded payload.

    Raises:
        MalformedTokenError: If the token is not a well-formed JWT.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError("Wrong number of token segments")

    try:
        header = json.loads(_b64url_decode(parts[0]))
        payload = json.loads(_b64url_decode(parts[1]))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise MalformedTokenError(f"Cannot decode token: {e}") from e

    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise MalformedTokenError("Token header and payload must be JSON objects")

    return payload


class TokenManager:
    """Holder of the bearer token used by a client.

    The token is fetched lazily through ``generator`` and cached for the
    lifetime of the manager. It is never written anywhere by the SDK.
    """

    def __init__(self, api_key: str, generator: Callable[[str], str]) -> None:
        """Initialize the token manager.

        Args:
            api_key: 5Post API key, exchanged for tokens.
            generator: Callable taking the API key and returning a fresh token.
        """
        self._api_key = api_key
        self._generator = generator
        self._token: str | None = None

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def token(self) -> str | None:
        """Currently cached token, without fetching."""
        return self._token

    def get(self) -> str:
        """Return the cached token, fetching one if none is cached.

        A cached token is decoded on every access. A decode failure is
        reported to the caller and does not trigger a refresh.

        Raises:
            MalformedTokenError: If the cached token cannot be decoded.
        """
        if self._token:
            decode_token(self._token)
            return self._token
        return self.refresh()

    def refresh(self) -> str:
        """Fetch a new token and cache it."""
        logger.debug("Requesting new 5Post token")
        token = self._generator(self._api_key)
        self._token = token
        return token

    def set(self, token: str | None) -> None:
        """Replace the cached token, e.g. with one saved by a previous process."""
        logger.debug("5Post token replaced by caller")
        self._token = token

    def clear(self) -> None:
        """Forget the cached token."""
        self._token = None

    def claims(self) -> TokenClaims | None:
        """Decoded claims of the cached token, or None when no token is cached."""
        if not self._token:
            return None
        return TokenClaims.model_validate(decode_token(self._token))


class AuthInterceptor:
    """Request hook that attaches the cached bearer token.

    Installed as an httpx ``request`` event hook. It never fetches a token;
    requests sent while no token is cached, or marked with
    ``SKIP_AUTH_EXTENSION``, go out unauthenticated.
    """

    def __init__(self, tokens: TokenManager) -> None:
        self._tokens = tokens

    def __call__(self, request: httpx.Request) -> httpx.Request:
        if request.extensions.get(SKIP_AUTH_EXTENSION):
            return request
        token = self._tokens.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request
