"""REST API client for the storage gateway."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

import requests

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 2
REQUEST_TIMEOUT_SECONDS = 15


class GatewayError(Exception):
    """Raised when the API answers with a non-2xx status or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None, error: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error = error


class RemoteStore:
    def __init__(self, base_url: str, token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"

    def probe(self) -> bool:
        try:
            resp = self.session.get(f"{self.base_url}/api/habits", timeout=PROBE_TIMEOUT_SECONDS)
        except requests.RequestException:
            return False
        return resp.ok

    def _request(self, method: str, path: str, **kwargs) -> dict:
        kwargs.setdefault("timeout", REQUEST_TIMEOUT_SECONDS)
        try:
            resp = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not resp.ok:
            error = body.get("error") if isinstance(body, dict) else None
            raise GatewayError(
                f"{method} {path} returned {resp.status_code}", resp.status_code, error
            )
        return body

    # --- habits ---

    def list_habits(self) -> List[dict]:
        return self._request("GET", "/api/habits").get("habits", [])

    def upsert_habit(self, payload: dict) -> dict:
        return self._request("POST", "/api/habits", json=payload).get("habit", payload)

    def delete_habit(self, habit_id: str) -> None:
        self._request("DELETE", f"/api/habits/{habit_id}")

    # --- entries ---

    def list_entries_by_date(self, day: date) -> List[dict]:
        return self._request("GET", f"/api/entries/date/{day.isoformat()}").get("entries", [])

    def list_entries_in_range(self, start: date, end: date) -> List[dict]:
        path = f"/api/entries/range/{start.isoformat()}/{end.isoformat()}"
        return self._request("GET", path).get("entries", [])

    def upsert_entry(self, payload: dict) -> dict:
        return self._request("POST", "/api/entries", json=payload).get("entry", payload)

    def delete_entry(self, entry_id: str) -> None:
        self._request("DELETE", f"/api/entries/{entry_id}")

    def materialize(self, day: date) -> List[dict]:
        body = self._request("POST", "/api/entries/materialize", json={"date": day.isoformat()})
        return body.get("created", [])

    # --- notes / ideas ---

    def list_collection(self, name: str) -> List[dict]:
        return self._request("GET", f"/api/{name}").get(name, [])

    def upsert_item(self, name: str, key: str, payload: dict) -> Any:
        return self._request("POST", f"/api/{name}", json=payload).get(key, payload)

    def delete_item(self, name: str, item_id: str) -> None:
        self._request("DELETE", f"/api/{name}/{item_id}")
