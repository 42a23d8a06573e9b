"""Stats client tests."""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from parlaydesk.data import stats_client as sc
from parlaydesk.errors import GatewayUnavailable, NotFoundError, ValidationError


def _client(handler) -> sc.StatsClient:
    return sc.StatsClient(
        api_key="bdl-key",
        balldontlie_base_url="https://bdl.test/v1",
        nhl_base_url="https://nhl.test/v1",
        transport=httpx.MockTransport(handler),
    )


def test_season_labels() -> None:
    assert sc.nba_season(date(2025, 11, 2)) == 2025
    assert sc.nba_season(date(2026, 3, 1)) == 2025
    assert sc.nhl_season(date(2026, 3, 1)) == "20252026"


def test_nba_teams_are_static() -> None:
    client = _client(lambda request: httpx.Response(500))
    teams = client.teams("nba")["teams"]
    assert len(teams) == 30
    assert client.team_stats("nba", "2")["team"]["name"] == "Boston Celtics"
    with pytest.raises(NotFoundError):
        client.team_stats("nba", "99")
    with pytest.raises(NotFoundError):
        client.team_stats("nba", "BOS")


def test_search_players_maps_fields() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": 237,
                        "first_name": "LeBron",
                        "last_name": "James",
                        "position": "F",
                        "team": {"full_name": "Los Angeles Lakers"},
                    }
                ]
            },
        )

    players = _client(handler).search_players("nba", "lebron")["players"]
    assert players == [
        {"id": 237, "firstName": "LeBron", "lastName": "James", "position": "F", "team": "Los Angeles Lakers"}
    ]
    assert seen[0].headers["Authorization"] == "bdl-key"
    assert seen[0].url.params["search"] == "lebron"


def test_search_requires_two_characters() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(ValidationError):
        client.search_players("nba", "a")
    assert client.search_players("nhl", "mcdavid")["players"] == []


def test_unknown_sport_rejected() -> None:
    with pytest.raises(ValidationError):
        _client(lambda request: httpx.Response(200, json={})).teams("nfl")


def test_nhl_team_stats_keeps_top_ten_skaters() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/club-stats/TOR/now"
        return httpx.Response(200, json={"skaters": [{"playerId": n} for n in range(15)], "goalies": [{}]})

    stats = _client(handler).team_stats("nhl", "tor")
    assert stats["teamAbbr"] == "TOR"
    assert len(stats["skaters"]) == 10
    assert len(stats["goalies"]) == 1


def test_client_error_is_not_retried() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(404)

    with pytest.raises(GatewayUnavailable):
        _client(handler).nhl_roster("XYZ")
    assert len(calls) == 1


def test_server_error_retried_then_surfaces(monkeypatch) -> None:
    monkeypatch.setattr(sc.StatsClient._fetch.retry, "sleep", lambda seconds: None)
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    with pytest.raises(GatewayUnavailable):
        _client(handler).player_stats("nhl", 8478402)
    assert len(calls) == 3
