"""HTTP transport for the Moveware REST API.

Every call carries the tenant id, username and password as raw ``mw-*``
headers (the API does not use Basic auth). Only GET requests are retried;
write-backs are sent exactly once.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .fields import pick, to_str
from .models import MwCredentials

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
BODY_EXCERPT_LIMIT = 300
RETRY_STATUSES = (429, 500, 502, 503, 504)
RETRY_METHODS = ("GET",)


class MovewareAPIError(RuntimeError):
    """A non-2xx response, network failure or undecodable body."""

    def __init__(self, method: str, url: str, status: Optional[int] = None, body: str = ""):
        self.method = method
        self.url = url
        self.status = status
        self.body = (body or "")[:BODY_EXCERPT_LIMIT]
        label = status if status is not None else "error"
        super().__init__(f"Moveware {method} {label} at {url}: {self.body}")


def _session_with_retries(total: int = 2, backoff_factor: float = 0.3) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=total,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=RETRY_METHODS,
        raise_on_status=False,
    )
    s.mount("https://", HTTPAdapter(max_retries=retry))
    s.mount("http://", HTTPAdapter(max_retries=retry))
    return s


def resolve_created_id(created: Any) -> str:
    """Find the id of a freshly created record: ``id``, ``data.id`` or ``links.full``."""
    candidate = pick(created, "id")
    if candidate in (None, ""):
        candidate = pick(pick(created, "data"), "id")
    if candidate in (None, ""):
        candidate = pick(pick(created, "links"), "full")
    return to_str(candidate)


class MovewareClient:
    def __init__(
        self,
        credentials: MwCredentials,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_total: int = 2,
        retry_backoff: float = 0.3,
    ) -> None:
        self.credentials = credentials
        self.timeout = timeout
        self.session = session or _session_with_retries(retry_total, retry_backoff)

    @classmethod
    def from_config(cls, credentials: MwCredentials, config, session=None) -> "MovewareClient":
        return cls(
            credentials,
            session=session,
            timeout=float(config.get("MOVEWARE_TIMEOUT", DEFAULT_TIMEOUT)),
            retry_total=int(config.get("MOVEWARE_RETRY_TOTAL", 2)),
            retry_backoff=float(config.get("MOVEWARE_RETRY_BACKOFF", 0.3)),
        )

    @property
    def co_id(self) -> str:
        return self.credentials.co_id

    def _headers(self) -> dict:
        creds = self.credentials
        return {
            "mw-company-id": creds.co_id,
            "mw-username": creds.username,
            "mw-password": creds.password,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def url_for(self, path: str) -> str:
        base = self.credentials.base_url.rstrip("/")
        return f"{base}/{self.credentials.co_id}/api/{path.lstrip('/')}"

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        url = self.url_for(path)
        try:
            resp = self.session.request(
                method,
                url,
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise MovewareAPIError(method, url, None, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise MovewareAPIError(method, url, resp.status_code, resp.text or "")

        # 204 No Content and empty bodies are both treated as {}
        if resp.status_code == 204 or not (resp.text or "").strip():
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise MovewareAPIError(method, url, resp.status_code, resp.text) from exc

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def patch(self, path: str, body: Any) -> Any:
        return self._request("PATCH", path, body)

    def post(self, path: str, body: Any) -> Any:
        return self._request("POST", path, body)

    def post_then_patch(
        self,
        path: str,
        body: Any,
        patch_body: Any,
    ) -> Tuple[Any, bool]:
        """POST a new record, then PATCH ``{path}/{id}`` on the created id.

        Some fields are read-only at creation time and only stick when set
        by a follow-up PATCH. The PATCH is best-effort: a failure or a
        missing id is logged and reported as ``False`` in the returned
        ``(created, patched)`` pair.
        """
        created = self.post(path, body)
        record_id = resolve_created_id(created)
        if not record_id:
            logger.warning(
                "Could not determine record id from POST %s response; skipping follow-up PATCH",
                path,
            )
            return created, False
        try:
            self.patch(f"{path.rstrip('/')}/{record_id}", patch_body)
        except MovewareAPIError as exc:
            logger.warning("Follow-up PATCH for %s/%s failed: %s", path, record_id, exc)
            return created, False
        return created, True
