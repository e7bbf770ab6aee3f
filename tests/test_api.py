"""
Integration tests for the HTTP endpoints.

The Transit API is never called: ``requests.get`` is patched per test and
the config dependency is overridden with an in-memory AppConfig.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from stop_board.api.app import app, get_config
from stop_board.config import ApiConfig, AppConfig, BoardConfig, LoggingConfig, TransitConfig

TRANSIT = TransitConfig(
    api_key="test-key",
    base_url="https://transit.test/v3/public",
    agency_marker="TTC",
    bias_lat=43.690730,
    bias_lon=-79.418124,
    max_search_results=10,
    window_minutes=60,
    poll_interval_seconds=30,
)


def _config(transit: TransitConfig = TRANSIT) -> AppConfig:
    return AppConfig(
        transit=transit,
        board=BoardConfig(stack_size=3, width=480, row_height=28),
        log=LoggingConfig(level="INFO", log_dir="logs/"),
        api=ApiConfig(host="127.0.0.1", port=8000),
    )


def _response(status_code: int, json_data: dict[str, Any] | None = None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = ""
    response.json.return_value = json_data or {}
    return response


def _search(*global_stop_ids: str) -> Mock:
    return _response(
        200,
        {
            "results": [
                {"global_stop_id": gid, "stop_name": f"Stop {gid}", "stop_code": "4125"}
                for gid in global_stop_ids
            ]
        },
    )


def _departures(*offsets_minutes: int, route: str = "504", branch: str | None = "A") -> Mock:
    now = datetime.now(timezone.utc).timestamp()
    return _response(
        200,
        {
            "route_departures": [
                {
                    "route_short_name": route,
                    "route_long_name": "King",
                    "mode_name": "Streetcar",
                    "itineraries": [
                        {
                            "branch_code": branch,
                            "schedule_items": [
                                {"departure_time": int(now + offset * 60 + 10)} for offset in offsets_minutes
                            ],
                        }
                    ],
                }
            ]
        },
    )


@pytest.fixture
def client():
    app.dependency_overrides[get_config] = _config
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# GET /api/stop
# ---------------------------------------------------------------------------

class TestStop:
    def test_returns_stop_and_schedule(self, client):
        with patch("requests.get", side_effect=[_search("GO:1", "TTC:4125"), _departures(0, 12, 45, 61)]):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 200
        assert resp.headers["cache-control"] == "no-store"
        body = resp.json()
        assert body["stop"]["global_stop_id"] == "TTC:4125"
        assert body["schedule"] == {
            "504A": {"minutes": [0, 12, 45], "route_long_name": "King", "mode_name": "Streetcar"}
        }

    def test_missing_stop_number_is_400(self, client):
        with patch("requests.get") as mock_get:
            resp = client.get("/api/stop")

        assert resp.status_code == 400
        mock_get.assert_not_called()

    def test_blank_stop_number_is_400(self, client):
        resp = client.get("/api/stop", params={"stopNumber": "  "})
        assert resp.status_code == 400

    def test_no_agency_match_is_404(self, client):
        ids = [f"YRT:{idx}" for idx in range(10)]
        with patch("requests.get", return_value=_search(*ids)) as mock_get:
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 404
        assert mock_get.call_count == 1

    def test_search_failure_is_404(self, client):
        with patch("requests.get", return_value=_response(503)):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 404

    def test_departures_failure_is_404(self, client):
        with patch("requests.get", side_effect=[_search("TTC:4125"), _response(500)]):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 404

    def test_empty_schedule_is_200(self, client):
        with patch("requests.get", side_effect=[_search("TTC:4125"), _departures(75, 90)]):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 200
        assert resp.json()["schedule"] == {}

    def test_missing_credential_is_404_without_upstream_call(self, client):
        app.dependency_overrides[get_config] = lambda: _config(replace(TRANSIT, api_key=""))
        with patch("requests.get") as mock_get:
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 404
        assert "not configured" in resp.json()["detail"]
        mock_get.assert_not_called()

    def test_malformed_itineraries_give_empty_schedule(self, client):
        junk = _response(200, {"route_departures": [{"route_short_name": "5", "itineraries": ["junk"]}]})
        with patch("requests.get", side_effect=[_search("TTC:4125"), junk]):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 200
        assert resp.json()["schedule"] == {}

    def test_non_object_departures_body_is_404(self, client):
        listing = _response(200)
        listing.json.return_value = [{"route_short_name": "5"}]
        with patch("requests.get", side_effect=[_search("TTC:4125"), listing]):
            resp = client.get("/api/stop", params={"stopNumber": "4125"})

        assert resp.status_code == 404

    def test_upstream_calls_use_default_timeout(self, client):
        with patch("requests.get", side_effect=[_search("TTC:4125"), _departures(3)]) as mock_get:
            client.get("/api/stop", params={"stopNumber": "4125"})

        assert [call.kwargs["timeout"] for call in mock_get.call_args_list] == [10.0, 10.0]


# ---------------------------------------------------------------------------
# GET /api/board
# ---------------------------------------------------------------------------

class TestBoard:
    def test_rows_are_capped_and_labelled(self, client):
        with patch("requests.get", side_effect=[_search("TTC:4125"), _departures(0, 5, 9, 14, 20, 33)]):
            resp = client.get("/api/board", params={"stopNumber": "4125"})

        assert resp.status_code == 200
        rows = resp.json()["rows"]
        assert len(rows) == 1
        assert rows[0]["route_key"] == "504A"
        assert rows[0]["label"] == "King"
        assert rows[0]["primary"] == "Due"
        assert rows[0]["stack"] == ["5 min", "9 min", "14 min"]
        assert rows[0]["minutes"] == [0, 5, 9, 14]

    def test_not_found_is_404(self, client):
        with patch("requests.get", return_value=_search()):
            resp = client.get("/api/board", params={"stopNumber": "4125"})

        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# GET /healthz
# ---------------------------------------------------------------------------

def test_health(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
