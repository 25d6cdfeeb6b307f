import inspect

import pytest
from fastapi.testclient import TestClient

from roster_keeper import api
from roster_keeper.config import STORAGE_KEY


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(api, "service", api.RosterService(data_dir=tmp_path))
    with TestClient(api.app) as test_client:
        yield test_client


def _create_team(client: TestClient, name: str = "Warriors") -> dict:
    response = client.post("/api/teams", json={"name": name, "coach": "Sam"})
    assert response.status_code == 201
    return response.json()


def test_health_and_meta_after_startup_load(client) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}
    meta = client.get("/api/meta").json()
    assert meta["loading"] is False
    assert meta["team_count"] == 0


def test_create_and_fetch_team(client, tmp_path) -> None:
    created = _create_team(client)
    assert created["name"] == "Warriors"
    assert created["players"] == []
    assert created["isActive"] is True
    assert "description" not in created
    assert (tmp_path / f"{STORAGE_KEY}.json").exists()

    assert client.get(f"/api/teams/{created['id']}").json() == created
    assert [t["id"] for t in client.get("/api/teams").json()] == [created["id"]]


def test_invalid_team_is_rejected_before_any_write(client, tmp_path) -> None:
    response = client.post("/api/teams", json={"name": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == ["Team name is required"]
    assert not (tmp_path / f"{STORAGE_KEY}.json").exists()


def test_update_and_delete_team(client) -> None:
    team = _create_team(client)
    response = client.patch(f"/api/teams/{team['id']}", json={"season": "Fall 2024"})
    assert response.status_code == 200
    assert response.json()["season"] == "Fall 2024"
    assert response.json()["coach"] == "Sam"

    assert client.patch(f"/api/teams/{team['id']}", json={"name": ""}).status_code == 400
    assert client.delete(f"/api/teams/{team['id']}").json() == {"ok": True, "id": team["id"]}
    assert client.get(f"/api/teams/{team['id']}").status_code == 404


def test_unknown_ids_return_404(client) -> None:
    assert client.get("/api/teams/missing-id").status_code == 404
    assert client.patch("/api/teams/missing-id", json={"name": "X"}).status_code == 404
    assert client.delete("/api/teams/missing-id").status_code == 404
    team = _create_team(client)
    assert client.get(f"/api/teams/{team['id']}/players/ghost").status_code == 404
    assert client.delete(f"/api/teams/{team['id']}/players/ghost").status_code == 404


def test_jersey_numbers_are_unique_among_active_players(client) -> None:
    team = _create_team(client)
    base = f"/api/teams/{team['id']}/players"
    p1 = client.post(base, json={"name": "P1", "jersey_number": 10}).json()
    p2 = client.post(base, json={"name": "P2", "jersey_number": 10, "is_active": False}).json()
    assert p1["jerseyNumber"] == 10
    assert p2["isActive"] is False

    response = client.post(base, json={"name": "P3", "jersey_number": 10})
    assert response.status_code == 400
    assert response.json()["detail"] == ["Jersey number 10 is already taken by P1"]

    response = client.patch(f"{base}/{p2['id']}", json={"notes": "Back next season"})
    assert response.status_code == 200
    assert response.json()["jerseyNumber"] == 10

    response = client.patch(f"{base}/{p1['id']}", json={"position": "Forward"})
    assert response.status_code == 200


def test_player_listing_filters_and_sorts(client) -> None:
    team = _create_team(client)
    base = f"/api/teams/{team['id']}/players"
    client.post(base, json={"name": "Ana", "position": "Forward", "jersey_number": 7})
    client.post(base, json={"name": "Ben", "position": "Defense"})
    client.post(base, json={"name": "Cal", "position": "Forward", "jersey_number": 3, "is_active": False})

    names = [p["name"] for p in client.get(base, params={"sort_by": "jersey_number", "order": "desc"}).json()]
    assert names == ["Ana", "Cal", "Ben"]

    names = [p["name"] for p in client.get(base, params={"active": True, "search": "for"}).json()]
    assert names == ["Ana"]

    assert client.get(base, params={"sort_by": "age"}).status_code == 422


def test_team_stats_endpoint(client) -> None:
    team = _create_team(client)
    base = f"/api/teams/{team['id']}/players"
    client.post(base, json={"name": "A", "position": "Forward"})
    client.post(base, json={"name": "B", "position": "Forward"})
    client.post(base, json={"name": "C", "position": "Defense", "is_active": False})

    stats = client.get(f"/api/teams/{team['id']}/stats").json()
    assert stats["totalPlayers"] == 3
    assert stats["activePlayers"] == 2
    assert stats["inactivePlayers"] == 1
    assert stats["positionCounts"] == {"Forward": 2, "Defense": 1}
    assert stats["insights"]["warnings"] == ["Team needs more players (2/11 minimum)"]


def test_remove_player_and_refresh(client) -> None:
    team = _create_team(client)
    base = f"/api/teams/{team['id']}/players"
    player = client.post(base, json={"name": "Ana"}).json()
    assert client.delete(f"{base}/{player['id']}").json() == {"ok": True, "id": player["id"]}

    meta = client.post("/api/refresh").json()
    assert meta["team_count"] == 1
    assert client.get(base).json() == []


def test_null_active_flag_is_rejected(client) -> None:
    team = _create_team(client)
    base = f"/api/teams/{team['id']}/players"
    client.post(base, json={"name": "P1", "jersey_number": 10})
    p2 = client.post(base, json={"name": "P2", "jersey_number": 5}).json()

    response = client.patch(f"{base}/{p2['id']}", json={"jersey_number": 10, "is_active": None})
    assert response.status_code == 422
    assert client.patch(f"/api/teams/{team['id']}", json={"is_active": None}).status_code == 422

    client.post("/api/refresh")
    numbers = [p["jerseyNumber"] for p in client.get(base, params={"active": True}).json()]
    assert sorted(numbers) == [5, 10]
    assert client.get(f"/api/teams/{team['id']}").json()["isActive"] is True


def test_refresh_runs_in_the_threadpool(client, tmp_path) -> None:
    # Takes the service lock, so it must stay a plain def.
    assert not inspect.iscoroutinefunction(api.refresh)
    _create_team(client)
    (tmp_path / f"{STORAGE_KEY}.json").write_text('{"teams": [], "lastUpdated": "x"}', encoding="utf-8")
    assert client.post("/api/refresh").json()["team_count"] == 0
    assert client.get("/api/teams").json() == []
