"""HTTP client for the habits API with a time-boxed read cache.

Reads are memoised per operation and parameters for ``cache_ttl`` seconds.
Any write (create, update, patch, delete, complete) drops the whole cache.
Concurrent identical reads are not coalesced; each miss goes to the network.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"
CACHE_TTL_SECONDS = 5 * 60


class HabitClientError(Exception):
    def __init__(self, status_code: int, error: str, message: Optional[str] = None):
        super().__init__(message or error)
        self.status_code = status_code
        self.error = error
        self.message = message or error


class HabitClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        cache_ttl: float = CACHE_TTL_SECONDS,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self._clock = clock
        self._cache: Dict[str, Tuple[float, Any]] = {}

    # ---- cache ----

    @staticmethod
    def cache_key(operation: str, params: Optional[dict] = None) -> str:
        return f"{operation}:{json.dumps(params, sort_keys=True)}" if params else operation

    def _cached(self, key: str):
        hit = self._cache.get(key)
        if hit is None:
            return None
        stored_at, data = hit
        if self._clock() - stored_at > self.cache_ttl:
            del self._cache[key]
            return None
        return data

    def _store(self, key: str, data):
        self._cache[key] = (self._clock(), data)
        return data

    def clear_cache(self) -> None:
        self._cache.clear()

    # ---- transport ----

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("API request %s %s failed: %s", method, url, exc)
            raise HabitClientError(0, "connection_error", str(exc)) from exc
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            raise HabitClientError(
                resp.status_code,
                body.get("error") or "An error occurred",
                body.get("message"),
            )
        return resp.json()

    # ---- reads ----

    def fetch_habits(self, force_refresh: bool = False, category: Optional[str] = None):
        params = {"category": category} if category is not None else None
        key = self.cache_key("habits", params)
        if not force_refresh:
            cached = self._cached(key)
            if cached is not None:
                return cached
        return self._store(key, self._request("GET", "/habits", params=params))

    def get_habit(self, habit_id: int):
        key = self.cache_key("habit", {"id": habit_id})
        cached = self._cached(key)
        if cached is not None:
            return cached
        return self._store(key, self._request("GET", f"/habits/{habit_id}"))

    # ---- writes ----

    def create_habit(self, data: dict) -> dict:
        result = self._request("POST", "/habits", json=data)
        self.clear_cache()
        return result

    def update_habit(self, habit_id: int, data: dict) -> dict:
        result = self._request("PUT", f"/habits/{habit_id}", json=data)
        self.clear_cache()
        return result

    def patch_habit(self, habit_id: int, data: dict) -> dict:
        result = self._request("PATCH", f"/habits/{habit_id}", json=data)
        self.clear_cache()
        return result

    def delete_habit(self, habit_id: int) -> dict:
        result = self._request("DELETE", f"/habits/{habit_id}")
        self.clear_cache()
        return result

    def complete_habit(self, habit_id: int, completed_at: Optional[datetime] = None) -> dict:
        stamp = completed_at or datetime.now(timezone.utc)
        result = self._request(
            "POST", f"/habits/{habit_id}/complete", json={"completed_at": stamp.isoformat()}
        )
        self.clear_cache()
        return result
