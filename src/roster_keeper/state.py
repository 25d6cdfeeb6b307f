"""In-memory mirror of the stored teams.

Writes go to the store first and are then copied into ``teams``. Nothing is
rolled back if the mirror step goes wrong, and no validation happens here:
callers run :mod:`roster_keeper.validation` before creating or updating.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Mapping

from .models import Player, Team, utc_now_iso
from .storage import TeamStore

logger = logging.getLogger(__name__)


def _writable(cls: type, data: Mapping[str, Any], excluded: tuple[str, ...]) -> dict[str, Any]:
    # Unknown keys are dropped so a stray field never breaks construction.
    names = {f.name for f in fields(cls)} - set(excluded)
    return {k: v for k, v in data.items() if k in names}


class TeamState:
    def __init__(self, store: TeamStore) -> None:
        self.store = store
        self.teams: list[Team] = []
        self.loading: bool = True
        self.last_error: str = ""

    async def load(self) -> None:
        self.reload()

    async def refresh_data(self) -> None:
        await self.load()

    def reload(self) -> None:
        """Blocking form of :meth:`load` for callers that hold a thread lock."""
        self.loading = True
        try:
            self.teams = self.store.get_all()
            self.last_error = self.store.last_load_error
        except Exception as exc:
            logger.exception("Error loading teams")
            self.last_error = f"Failed to load teams ({exc})."
        finally:
            self.loading = False

    def _mirror_team(self, team: Team) -> None:
        self.teams = [team if t.id == team.id else t for t in self.teams]

    def create_team(self, data: Mapping[str, Any]) -> Team:
        values = _writable(Team, data, (*Team.WRITE_ONCE_FIELDS, "players", "is_active"))
        values.setdefault("name", "")
        team = Team(
            **values,
            id=self.store.generate_id(),
            date_created=utc_now_iso(),
            players=[],
            is_active=True,
        )
        self.store.save(team)
        self.teams.append(team)
        return team

    def update_team(self, team_id: str, updates: Mapping[str, Any]) -> Team | None:
        existing = self.store.get_by_id(team_id)
        if existing is None:
            return None
        changes = _writable(Team, updates, Team.WRITE_ONCE_FIELDS)
        updated = replace(existing, **changes)
        self.store.save(updated)
        self._mirror_team(updated)
        return updated

    def delete_team(self, team_id: str) -> bool:
        try:
            removed = self.store.delete(team_id)
        except Exception:
            logger.exception("Error deleting team %s", team_id)
            return False
        if not removed:
            return False
        self.teams = [t for t in self.teams if t.id != team_id]
        return True

    def get_team(self, team_id: str) -> Team | None:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def add_player(self, team_id: str, data: Mapping[str, Any]) -> Player | None:
        values = _writable(Player, data, Player.WRITE_ONCE_FIELDS)
        values.setdefault("name", "")
        values.setdefault("is_active", True)
        player = Player(**values, id=self.store.generate_id(), date_added=utc_now_iso())
        if not self.store.add_player_to_team(team_id, player):
            return None
        team = self.get_team(team_id)
        if team is not None:
            team.players.append(player)
        return player

    def update_player(self, team_id: str, player_id: str, updates: Mapping[str, Any]) -> Player | None:
        existing = self.store.get_player_by_id(team_id, player_id)
        if existing is None:
            return None
        changes = _writable(Player, updates, Player.WRITE_ONCE_FIELDS)
        updated = replace(existing, **changes)
        if not self.store.update_player_in_team(team_id, player_id, updated):
            return None
        team = self.get_team(team_id)
        if team is not None:
            team.players = [updated if p.id == player_id else p for p in team.players]
        return updated

    def remove_player(self, team_id: str, player_id: str) -> bool:
        if not self.store.remove_player_from_team(team_id, player_id):
            return False
        team = self.get_team(team_id)
        if team is not None:
            team.players = [p for p in team.players if p.id != player_id]
        return True

    def get_player(self, team_id: str, player_id: str) -> Player | None:
        team = self.get_team(team_id)
        if team is None:
            return None
        return team.player_by_id(player_id)
