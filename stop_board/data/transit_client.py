"""Transit public API client."""

from __future__ import annotations

import logging
from typing import Any

import requests

from stop_board.errors import ConfigError, UpstreamUnavailable

TRANSIT_API_BASE = "https://external.transitapp.com/v3/public"
DEFAULT_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger(__name__)


class TransitClient:
    """Thin wrapper around the Transit public API using requests."""

    def __init__(
        self,
        api_key: str,
        base_url: str = TRANSIT_API_BASE,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    def search_stops(
        self, query: str, lat: float, lon: float, max_num_results: int = 10
    ) -> list[dict]:
        """Search stops near a bias point; returns the raw results array."""
        params = {
            "query": query,
            "max_num_results": max_num_results,
            "lat": lat,
            "lon": lon,
        }
        response_json = self._get("/search_stops", params=params)
        results = response_json.get("results")
        return results if isinstance(results, list) else []

    def stop_departures(self, global_stop_id: str) -> list[dict]:
        """Fetch upcoming departures for a stop; returns the raw route_departures array."""
        params = {"global_stop_id": global_stop_id}
        response_json = self._get("/stop_departures", params=params)
        routes = response_json.get("route_departures")
        return routes if isinstance(routes, list) else []

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self._api_key:
            logger.error("TRANSIT_API_KEY not set; refusing to call %s", path)
            raise ConfigError("TRANSIT_API_KEY not set")

        url = f"{self._base_url}{path}"
        headers = {"apiKey": self._api_key}
        try:
            response = requests.get(url, headers=headers, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            logger.warning("Transit API request to %s failed: %s", path, exc)
            raise UpstreamUnavailable(f"Transit API request failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            logger.warning("Transit API %s returned %s", path, response.status_code)
            raise UpstreamUnavailable(f"Transit API request failed: {detail}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("Transit API response was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Transit API response was not a JSON object")
        return payload


__all__ = ["TRANSIT_API_BASE", "TransitClient"]
