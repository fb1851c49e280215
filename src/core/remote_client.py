"""HTTP access to the managed backend's REST tables with simple retry logic.

Speaks the backend's PostgREST dialect:

    GET    /rest/v1/players?select=id,name&team_id=eq.7&order=number.asc
    HEAD   (same) + ``Prefer: count=exact``  -> ``Content-Range: */42``
    POST   /rest/v1/players                  (insert, JSON body)
    PATCH  /rest/v1/players?id=eq.3          (update)
    DELETE /rest/v1/players?id=eq.3

Transport failures are retried with exponential backoff; error responses are
not retried and surface as ``RemoteError``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from config import settings

__all__ = ["RemoteError", "RemoteResponse", "RemoteQuery", "RemoteStoreClient"]

_log = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
SINGLE_OBJECT_ACCEPT = "application/vnd.pgrst.object+json"


class RemoteError(RuntimeError):
    """Failed remote call. ``code`` carries the backend error code when present (e.g. 23505)."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


@dataclass
class RemoteResponse:
    data: Any
    count: Optional[int] = None


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_from_response(resp: httpx.Response) -> RemoteError:
    code = details = None
    message = resp.reason_phrase or f"HTTP {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("msg") or body.get("error_description") or message
        code = body.get("code")
        details = body.get("details")
        if code is not None:
            code = str(code)
    return RemoteError(message, status=resp.status_code, code=code, details=details)


def _parse_count(resp: httpx.Response) -> Optional[int]:
    content_range = resp.headers.get("content-range")
    if not content_range or "/" not in content_range:
        return None
    total = content_range.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class RemoteStoreClient:
    """Thin wrapper around ``httpx.Client`` carrying the backend credentials."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        backoff_factor: float | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or settings.REMOTE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.ANON_KEY
        self.access_token = access_token
        self.retries = retries if retries is not None else settings.DEFAULT_RETRIES
        self.backoff_factor = (
            backoff_factor if backoff_factor is not None else settings.DEFAULT_BACKOFF_FACTOR
        )
        self._sleep = sleep
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.DEFAULT_TIMEOUT,
            transport=transport,
        )

    # Credentials --------------------------------------------------------
    def set_access_token(self, token: str | None) -> None:
        self.access_token = token

    def _auth_headers(self) -> Dict[str, str]:
        bearer = self.access_token or self.api_key
        headers = {"apikey": self.api_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    # Transport ----------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        *,
        params: Sequence[Tuple[str, str]] | Mapping[str, str] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        merged = self._auth_headers()
        if headers:
            merged.update(headers)
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self._http.request(method, path, params=params, json=json, headers=merged)
            except httpx.TransportError as e:
                if attempt > self.retries:
                    raise RemoteError(
                        f"{method} {path} failed after {self.retries} retries: {e}"
                    ) from e
                sleep_for = self.backoff_factor * (2 ** (attempt - 1))
                _log.warning(
                    "Attempt %d/%d failed for %s %s: %s. Retrying in %.1fs",
                    attempt,
                    self.retries,
                    method,
                    path,
                    e,
                    sleep_for,
                )
                self._sleep(sleep_for)
                continue
            if resp.status_code >= 400:
                raise _error_from_response(resp)
            return resp

    def table(self, name: str) -> "RemoteQuery":
        return RemoteQuery(self, name)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RemoteStoreClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class RemoteQuery:
    """Fluent table query; filters apply to reads, counts, updates and deletes."""

    def __init__(self, client: RemoteStoreClient, table: str) -> None:
        self._client = client
        self._table = table
        self._columns = "*"
        self._filters: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._single = False

    @property
    def path(self) -> str:
        return f"{REST_PREFIX}/{self._table}"

    def select(self, columns: str = "*") -> "RemoteQuery":
        # Nested selects are sent as written, whitespace stripped
        self._columns = "".join(columns.split()) or "*"
        return self

    def eq(self, column: str, value: Any) -> "RemoteQuery":
        self._filters.append((column, f"eq.{_encode_value(value)}"))
        return self

    def order(self, column: str, *, ascending: bool = True) -> "RemoteQuery":
        self._order.append(f"{column}.{'asc' if ascending else 'desc'}")
        return self

    def single(self) -> "RemoteQuery":
        self._single = True
        return self

    def _read_params(self) -> List[Tuple[str, str]]:
        params = [("select", self._columns), *self._filters]
        if self._order:
            params.append(("order", ",".join(self._order)))
        return params

    @staticmethod
    def _body(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        return resp.json()

    # Execution ----------------------------------------------------------
    def execute(self) -> RemoteResponse:
        headers = {"Accept": SINGLE_OBJECT_ACCEPT} if self._single else None
        resp = self._client.request("GET", self.path, params=self._read_params(), headers=headers)
        return RemoteResponse(data=self._body(resp))

    def count(self) -> int:
        resp = self._client.request(
            "HEAD",
            self.path,
            params=[("select", self._columns), *self._filters],
            headers={"Prefer": "count=exact"},
        )
        return _parse_count(resp) or 0

    def insert(self, rows: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> RemoteResponse:
        payload = [dict(rows)] if isinstance(rows, Mapping) else [dict(r) for r in rows]
        resp = self._client.request(
            "POST", self.path, json=payload, headers={"Prefer": "return=representation"}
        )
        return RemoteResponse(data=self._body(resp))

    def update(self, values: Mapping[str, Any]) -> RemoteResponse:
        if not self._filters:
            raise RemoteError(f"Refusing unfiltered update on '{self._table}'")
        resp = self._client.request(
            "PATCH",
            self.path,
            params=self._filters,
            json=dict(values),
            headers={"Prefer": "return=representation"},
        )
        return RemoteResponse(data=self._body(resp))

    def delete(self) -> RemoteResponse:
        if not self._filters:
            raise RemoteError(f"Refusing unfiltered delete on '{self._table}'")
        resp = self._client.request("DELETE", self.path, params=self._filters)
        return RemoteResponse(data=self._body(resp))
