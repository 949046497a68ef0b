# saivd/clients/auth_client.py

import logging
from dataclasses import dataclass, field

import requests

from saivd.core.config import AUTH_TIMEOUT, SUPABASE_ANON_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    id: str
    email: str | None = None
    user_metadata: dict = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict) -> "AuthUser":
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_metadata=payload.get("user_metadata") or {},
        )


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    expires_in: int
    user: AuthUser


class AuthClient:
    """Thin wrapper over the hosted auth provider's REST endpoints."""

    def __init__(self, base_url: str = SUPABASE_URL, api_key: str = SUPABASE_ANON_KEY,
                 session: requests.Session | None = None, timeout: float = AUTH_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, access_token: str | None = None) -> dict:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to its user; None when the provider rejects it."""
        if not self.base_url or not access_token:
            return None

        resp = self.session.get(
            f"{self.base_url}/auth/v1/user",
            headers=self._headers(access_token),
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            logger.debug("Auth provider rejected token (status %s)", resp.status_code)
            return None

        try:
            return AuthUser.from_payload(resp.json())
        except (ValueError, KeyError, TypeError):
            logger.warning("Auth provider returned an unreadable user payload")
            return None

    def refresh_session(self, refresh_token: str) -> AuthSession | None:
        """Exchange a refresh token for a new session; None on any rejection."""
        if not self.base_url or not refresh_token:
            return None

        resp = self.session.post(
            f"{self.base_url}/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            headers=self._headers(),
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            logger.info("Session refresh failed (status %s)", resp.status_code)
            return None

        try:
            data = resp.json()
            return AuthSession(
                access_token=data["access_token"],
                refresh_token=data["refresh_token"],
                expires_in=int(data.get("expires_in") or 3600),
                user=AuthUser.from_payload(data["user"]),
            )
        except (ValueError, KeyError, TypeError):
            logger.warning("Auth provider returned an unreadable session payload")
            return None


_client: AuthClient | None = None


def get_auth_client() -> AuthClient:
    global _client
    if _client is None:
        _client = AuthClient()
    return _client
