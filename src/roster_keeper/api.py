from __future__ import annotations

import os
from contextlib import asynccontextmanager
from dataclasses import fields
from pathlib import Path
from threading import Lock
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import DATA_DIR_ENV, DEFAULT_DATA_DIR
from .models import Team
from .queries import available_jersey_numbers, calculate_team_stats, filter_players, sort_players, sort_teams
from .state import TeamState
from .stats import generate_team_insights, team_completeness
from .storage import FileMedium, TeamStore, player_to_dict, team_to_dict
from .validation import ValidationResult, validate_player, validate_team


class TeamCreate(BaseModel):
    name: str = ""
    description: str | None = None
    coach: str | None = None
    season: str | None = None


class TeamUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    coach: str | None = None
    season: str | None = None
    is_active: bool = True


class PlayerCreate(BaseModel):
    name: str = ""
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    jersey_number: int | None = None
    is_active: bool = True
    notes: str | None = None


class PlayerUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    jersey_number: int | None = None
    is_active: bool = True
    notes: str | None = None


def _current_fields(entity: Any) -> dict[str, Any]:
    return {f.name: getattr(entity, f.name) for f in fields(entity)}


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.is_valid:
        raise HTTPException(status_code=400, detail=result.errors)


class RosterService:
    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir or os.environ.get(DATA_DIR_ENV, DEFAULT_DATA_DIR))
        self.state = TeamState(TeamStore(FileMedium(self.data_dir)))
        self._lock = Lock()

    def _team(self, team_id: str) -> Team:
        team = self.state.get_team(team_id)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return team

    def meta(self) -> dict[str, Any]:
        return {
            "loading": self.state.loading,
            "team_count": len(self.state.teams),
            "last_error": self.state.last_error,
            "last_save_error": self.state.store.last_save_error,
        }

    def teams(self) -> list[dict[str, Any]]:
        return [team_to_dict(team) for team in sort_teams(self.state.teams)]

    def team(self, team_id: str) -> dict[str, Any]:
        return team_to_dict(self._team(team_id))

    def create_team(self, payload: TeamCreate) -> dict[str, Any]:
        data = payload.model_dump(exclude_none=True)
        _raise_if_invalid(validate_team(data))
        return team_to_dict(self.state.create_team(data))

    def update_team(self, team_id: str, payload: TeamUpdate) -> dict[str, Any]:
        team = self._team(team_id)
        updates = payload.model_dump(exclude_unset=True)
        _raise_if_invalid(validate_team({**_current_fields(team), **updates}))
        updated = self.state.update_team(team_id, updates)
        if updated is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return team_to_dict(updated)

    def delete_team(self, team_id: str) -> dict[str, Any]:
        if not self.state.delete_team(team_id):
            raise HTTPException(status_code=404, detail="Team could not be deleted")
        return {"ok": True, "id": team_id}

    def team_stats(self, team_id: str) -> dict[str, Any]:
        team = self._team(team_id)
        stats = calculate_team_stats(team)
        insights = generate_team_insights(team)
        return {
            "totalPlayers": stats.total_players,
            "activePlayers": stats.active_players,
            "inactivePlayers": stats.inactive_players,
            "positionCounts": stats.position_counts,
            "availableJerseyNumbers": available_jersey_numbers(team),
            "completeness": team_completeness(team),
            "insights": {
                "recommendations": insights.recommendations,
                "warnings": insights.warnings,
                "strengths": insights.strengths,
            },
        }

    def players(
        self,
        team_id: str,
        sort_by: str,
        order: str,
        is_active: bool | None,
        position: str | None,
        search: str | None,
    ) -> list[dict[str, Any]]:
        team = self._team(team_id)
        filtered = filter_players(team.players, is_active=is_active, position=position, search_term=search)
        try:
            ordered = sort_players(filtered, sort_by=sort_by, order=order)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return [player_to_dict(player) for player in ordered]

    def player(self, team_id: str, player_id: str) -> dict[str, Any]:
        player = self.state.get_player(team_id, player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_to_dict(player)

    def add_player(self, team_id: str, payload: PlayerCreate) -> dict[str, Any]:
        team = self._team(team_id)
        data = payload.model_dump(exclude_none=True)
        _raise_if_invalid(validate_player(data, team.players))
        player = self.state.add_player(team_id, data)
        if player is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return player_to_dict(player)

    def update_player(self, team_id: str, player_id: str, payload: PlayerUpdate) -> dict[str, Any]:
        team = self._team(team_id)
        existing = team.player_by_id(player_id)
        if existing is None:
            raise HTTPException(status_code=404, detail="Player not found")
        updates = payload.model_dump(exclude_unset=True)
        _raise_if_invalid(validate_player({**_current_fields(existing), **updates}, team.players))
        updated = self.state.update_player(team_id, player_id, updates)
        if updated is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_to_dict(updated)

    def remove_player(self, team_id: str, player_id: str) -> dict[str, Any]:
        if not self.state.remove_player(team_id, player_id):
            raise HTTPException(status_code=404, detail="Player not found")
        return {"ok": True, "id": player_id}


service = RosterService()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await service.state.load()
    yield


app = FastAPI(title="Roster Keeper API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/meta")
def meta() -> dict[str, Any]:
    with service._lock:
        return service.meta()


@app.post("/api/refresh")
def refresh() -> dict[str, Any]:
    with service._lock:
        service.state.reload()
        return service.meta()


@app.get("/api/teams")
def teams() -> list[dict[str, Any]]:
    with service._lock:
        return service.teams()


@app.post("/api/teams", status_code=201)
def create_team(payload: TeamCreate) -> dict[str, Any]:
    with service._lock:
        return service.create_team(payload)


@app.get("/api/teams/{team_id}")
def team(team_id: str) -> dict[str, Any]:
    with service._lock:
        return service.team(team_id)


@app.patch("/api/teams/{team_id}")
def update_team(team_id: str, payload: TeamUpdate) -> dict[str, Any]:
    with service._lock:
        return service.update_team(team_id, payload)


@app.delete("/api/teams/{team_id}")
def delete_team(team_id: str) -> dict[str, Any]:
    with service._lock:
        return service.delete_team(team_id)


@app.get("/api/teams/{team_id}/stats")
def team_stats(team_id: str) -> dict[str, Any]:
    with service._lock:
        return service.team_stats(team_id)


@app.get("/api/teams/{team_id}/players")
def players(
    team_id: str,
    sort_by: Literal["name", "position", "jersey_number", "date_added"] = "name",
    order: Literal["asc", "desc"] = "asc",
    active: bool | None = None,
    position: str | None = None,
    search: str | None = None,
) -> list[dict[str, Any]]:
    with service._lock:
        return service.players(team_id, sort_by, order, active, position, search)


@app.post("/api/teams/{team_id}/players", status_code=201)
def add_player(team_id: str, payload: PlayerCreate) -> dict[str, Any]:
    with service._lock:
        return service.add_player(team_id, payload)


@app.get("/api/teams/{team_id}/players/{player_id}")
def player(team_id: str, player_id: str) -> dict[str, Any]:
    with service._lock:
        return service.player(team_id, player_id)


@app.patch("/api/teams/{team_id}/players/{player_id}")
def update_player(team_id: str, player_id: str, payload: PlayerUpdate) -> dict[str, Any]:
    with service._lock:
        return service.update_player(team_id, player_id, payload)


@app.delete("/api/teams/{team_id}/players/{player_id}")
def remove_player(team_id: str, player_id: str) -> dict[str, Any]:
    with service._lock:
        return service.remove_player(team_id, player_id)
