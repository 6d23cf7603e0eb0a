"""Authentication flows for ``httpx.Client(auth=...)``."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator, Sequence

import httpx

from .api_models import ApiException

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"


class BearerAuth(httpx.Auth):
    """Sends a static bearer token with every request."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[AUTHORIZATION] = f"Bearer {self.token}"
        yield request


class OAuth2ClientCredentials(httpx.Auth):
    """OAuth 2.0 client credentials grant.

    The access token is fetched on first use, cached until it expires and
    refreshed once when the server answers 401.

    Example:
        >>> auth = OAuth2ClientCredentials("https://auth.example.com/token", "id", "secret")
        >>> client = httpx.Client(auth=auth)
    """

    requires_response_body = True

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        scopes: Sequence[str] = (),
        expiry_margin: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.scopes = tuple(scopes)
        self.expiry_margin = expiry_margin
        self._clock = clock
        self._access_token: str | None = None
        self._expires_at: float | None = None

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not self._has_valid_token():
            token_response = yield self._token_request()
            self._store_token(token_response)
        request.headers[AUTHORIZATION] = f"Bearer {self._access_token}"
        response = yield request
        if response.status_code == 401:
            logger.debug("Access token rejected, requesting a new one")
            token_response = yield self._token_request()
            self._store_token(token_response)
            request.headers[AUTHORIZATION] = f"Bearer {self._access_token}"
            yield request

    def _has_valid_token(self) -> bool:
        if self._access_token is None:
            return False
        return self._expires_at is None or self._clock() < self._expires_at

    def _token_request(self) -> httpx.Request:
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        if self.scopes:
            data["scope"] = " ".join(self.scopes)
        return httpx.Request("POST", self.token_url, data=data)

    def _store_token(self, response: httpx.Response) -> None:
        if not response.is_success:
            raise ApiException(
                "Token request failed",
                status_code=response.status_code,
                headers=response.headers,
                body=response.text,
            )
        payload = response.json()
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str):
            raise ApiException(
                "Token response has no access_token",
                status_code=response.status_code,
                headers=response.headers,
                body=response.text,
            )
        self._access_token = token
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, (int, float)):
            self._expires_at = self._clock() + max(float(expires_in) - self.expiry_margin, 0.0)
        else:
            self._expires_at = None
