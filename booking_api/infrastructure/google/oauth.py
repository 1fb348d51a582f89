from __future__ import annotations

import logging
import threading
import time

import httpx

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
REFRESH_MARGIN_SECONDS = 300


class GoogleAuthError(RuntimeError):
    """Raised when an access token cannot be obtained from the refresh token."""
    pass


class GoogleAccessTokenProvider:
    """Exchanges a long-lived refresh token for short-lived access tokens.

    Tokens are cached until five minutes before expiry. One provider is
    shared by the calendar and mail clients for the life of the process.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_url: str = GOOGLE_TOKEN_URL,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._token_url = token_url
        self._client = client or httpx.Client(timeout=timeout)
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_token(self) -> str:
        with self._lock:
            if self._access_token and time.monotonic() < self._expires_at - REFRESH_MARGIN_SECONDS:
                return self._access_token
            return self._refresh()

    def invalidate(self) -> None:
        with self._lock:
            self._access_token = None
            self._expires_at = 0.0

    def _refresh(self) -> str:
        self._logger.info("Refreshing Google access token")
        try:
            response = self._client.post(
                self._token_url,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                    "grant_type": "refresh_token",
                },
            )
            response.raise_for_status()
            tokens = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GoogleAuthError(f"Token refresh failed: {e}") from e

        access_token = tokens.get("access_token")
        if not access_token:
            raise GoogleAuthError("No access token in refresh response")

        self._access_token = access_token
        self._expires_at = time.monotonic() + int(tokens.get("expires_in", 3600))
        return access_token

    def close(self) -> None:
        self._client.close()
