"""OpenDota public API client with a database-backed response cache."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from typing import Any, Callable

import requests
from sqlalchemy.orm import Session

from repositories.cache import CacheTTL, get_cached_payload, store_payload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.opendota.com/api"


class OpenDotaAPIError(RuntimeError):
    pass


class OpenDotaClient:
    """Thin wrapper over the endpoints the dashboard consumes."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        cache_session_factory: Callable[[], Session] | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.cache_session_factory = cache_session_factory
        self.timeout_seconds = timeout_seconds

    def fetch_with_cache(
        self,
        endpoint: str,
        cache_key: str,
        ttl: timedelta,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Serve ``cache_key`` from the cache when fresh, otherwise fetch and store it."""
        if self.cache_session_factory is None:
            return self._get_json(endpoint, params=params)

        with self.cache_session_factory() as cache:
            cached = get_cached_payload(cache, cache_key)
            if cached is not None:
                cache.commit()
                logger.debug("cache hit: %s", cache_key)
                return cached

            payload = self._get_json(endpoint, params=params)
            store_payload(cache, cache_key, payload, ttl)
            cache.commit()
            return payload

    def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.info("fetching %s", url)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except requests.Timeout as exc:
            raise OpenDotaAPIError(
                f"OpenDota API error: timeout after {self.timeout_seconds}s for {endpoint}"
            ) from exc
        except requests.RequestException as exc:
            raise OpenDotaAPIError(f"OpenDota API error: {exc}") from exc

        if response.status_code >= 400:
            raise OpenDotaAPIError(
                f"OpenDota API error: {response.status_code} - {_extract_error_detail(response)}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise OpenDotaAPIError(f"Non-JSON response from OpenDota API: {exc}") from exc

    def get_player(self, account_id: str) -> dict[str, Any]:
        return self.fetch_with_cache(f"/players/{account_id}", f"player_{account_id}", CacheTTL.PLAYER)

    def get_matches(self, account_id: str, limit: int = 100) -> list[dict[str, Any]]:
        return self.fetch_with_cache(
            f"/players/{account_id}/matches",
            f"matches_{account_id}_{limit}",
            CacheTTL.MATCHES,
            params={"limit": limit},
        )

    def get_match_details(self, match_id: int | str) -> dict[str, Any]:
        return self.fetch_with_cache(f"/matches/{match_id}", f"match_{match_id}", CacheTTL.MATCH_DETAIL)

    def get_hero_stats(self) -> list[dict[str, Any]]:
        return self.fetch_with_cache("/heroStats", "heroStats", CacheTTL.HEROES)

    def get_win_loss(self, account_id: str) -> dict[str, Any]:
        return self.fetch_with_cache(f"/players/{account_id}/wl", f"wl_{account_id}", CacheTTL.PLAYER)

    def get_totals(self, account_id: str) -> list[dict[str, Any]]:
        return self.fetch_with_cache(
            f"/players/{account_id}/totals", f"totals_{account_id}", CacheTTL.PLAYER
        )


def _extract_error_detail(response: requests.Response) -> str:
    text = response.text.strip()
    try:
        payload = response.json()
    except ValueError:
        return text or "No response body"

    if isinstance(payload, dict):
        if "error" in payload:
            return str(payload["error"])
        if "message" in payload:
            return str(payload["message"])
        return json.dumps(payload)

    return text or "No response body"
