"""Session boundary towards the backend's auth endpoints.

Authentication itself is owned by the backend; this service only keeps the
current access token, asks the backend who it belongs to, and tells the
host where to redirect when a page requires a session or a team id.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from config import settings
from core.remote_client import RemoteError, RemoteStoreClient

__all__ = [
    "User",
    "Session",
    "SessionService",
    "SessionRequiredError",
    "MissingTeamIdError",
    "get_url_param",
    "require_team_id",
]

_log = logging.getLogger(__name__)

AUTH_PREFIX = "/auth/v1"


class SessionRequiredError(RuntimeError):
    """No active session; the host should navigate to ``redirect_url``."""

    def __init__(self, redirect_url: str = settings.LOGIN_PATH) -> None:
        super().__init__("No session")
        self.redirect_url = redirect_url


class MissingTeamIdError(RuntimeError):
    def __init__(self, redirect_url: str = settings.TEAMS_PATH) -> None:
        super().__init__(f"Missing {settings.TEAM_ID_PARAM}")
        self.redirect_url = redirect_url


@dataclass(frozen=True)
class User:
    id: str
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(id=str(data["id"]), email=data.get("email"))


@dataclass(frozen=True)
class Session:
    access_token: str
    user: User


class SessionService:
    def __init__(
        self,
        client: RemoteStoreClient,
        *,
        access_token: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._sleep = sleep
        self._session: Optional[Session] = None
        self._token = access_token
        if access_token:
            client.set_access_token(access_token)

    # Lookup ---------------------------------------------------------------
    def get_session(self) -> Optional[Session]:
        if self._session is not None:
            return self._session
        if not self._token:
            return None
        try:
            resp = self._client.request("GET", f"{AUTH_PREFIX}/user")
        except RemoteError as e:
            if e.status in (401, 403):
                _log.info("Stored access token rejected: %s", e.message)
                return None
            raise
        self._session = Session(access_token=self._token, user=User.from_dict(resp.json()))
        return self._session

    def current_user(self) -> Optional[User]:
        session = self.get_session()
        return session.user if session else None

    def check_auth(self) -> bool:
        """True when a session is active; lookup failures count as signed out."""
        try:
            return self.get_session() is not None
        except RemoteError as e:
            _log.error("Error checking authentication: %s", e)
            return False

    def require_session(self, redirect_url: str = settings.LOGIN_PATH) -> Session:
        session = self.get_session()
        if session is None:
            _log.warning("No active session, redirecting to %s", redirect_url)
            raise SessionRequiredError(redirect_url)
        return session

    def get_session_with_retry(self, max_retries: int = 5, delay: float = 0.2) -> Optional[Session]:
        """Poll for a session, for hosts where the token arrives shortly after start."""
        for attempt in range(max_retries + 1):
            session = self.get_session()
            if session is not None:
                return session
            if attempt < max_retries:
                self._sleep(delay)
        return None

    # Sign in / out --------------------------------------------------------
    def sign_in_with_password(self, email: str, password: str) -> Session:
        resp = self._client.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        body = resp.json()
        self._token = body["access_token"]
        self._client.set_access_token(self._token)
        self._session = Session(access_token=self._token, user=User.from_dict(body["user"]))
        return self._session

    def sign_out(self) -> str:
        """End the session; local state is cleared even if the backend call fails.

        Returns the URL the host should navigate to.
        """
        try:
            if self._token:
                self._client.request("POST", f"{AUTH_PREFIX}/logout")
        except RemoteError as e:
            _log.error("Error signing out: %s", e)
        finally:
            self._token = None
            self._session = None
            self._client.set_access_token(None)
        return settings.LOGIN_PATH


def get_url_param(url: str | None, name: str) -> Optional[str]:
    if not url:
        return None
    values = parse_qs(urlsplit(url).query).get(name)
    return values[0] if values else None


def require_team_id(url: str | None, redirect_url: str = settings.TEAMS_PATH) -> str:
    team_id = get_url_param(url, settings.TEAM_ID_PARAM)
    if not team_id:
        raise MissingTeamIdError(redirect_url)
    return team_id
