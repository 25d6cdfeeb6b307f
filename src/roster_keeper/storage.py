"""Single-blob persistence for the team collection.

Every read loads the whole ``{"teams": [...], "lastUpdated": ...}`` document and every
write replaces it. There is no locking: two writers that interleave their
read-modify-write cycles lose the earlier change (last write wins).
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Protocol

from .config import STORAGE_KEY
from .models import Player, Team, new_id, utc_now_iso

logger = logging.getLogger(__name__)


class StorageMedium(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryMedium:
    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileMedium:
    """One JSON file per key inside ``directory``; the previous file is kept as ``.bak``."""

    def __init__(self, directory: str | Path, *, with_backup: bool = True) -> None:
        self.directory = Path(directory)
        self.with_backup = with_backup

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        if self.with_backup and path.exists():
            backup = path.with_suffix(path.suffix + ".bak")
            try:
                shutil.copy2(path, backup)
            except OSError as exc:
                logger.warning("Could not refresh backup %s: %s", backup, exc)
        path.write_text(value, encoding="utf-8")

    def remove_item(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def player_to_dict(player: Player) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": player.id,
        "name": player.name,
        "email": player.email,
        "phone": player.phone,
        "position": player.position,
        "jerseyNumber": player.jersey_number,
        "isActive": player.is_active,
        "dateAdded": player.date_added,
        "notes": player.notes,
    }
    # Unset optionals are omitted rather than written as null.
    return {key: value for key, value in data.items() if value is not None}


def player_from_dict(raw: dict[str, Any]) -> Player:
    return Player(
        id=str(raw.get("id") or new_id()),
        name=str(raw.get("name") or ""),
        email=_optional_str(raw.get("email")),
        phone=_optional_str(raw.get("phone")),
        position=_optional_str(raw.get("position")),
        jersey_number=_optional_int(raw.get("jerseyNumber")),
        is_active=bool(raw.get("isActive", True)),
        date_added=str(raw.get("dateAdded") or utc_now_iso()),
        notes=_optional_str(raw.get("notes")),
    )


def team_to_dict(team: Team) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": team.id,
        "name": team.name,
        "description": team.description,
        "coach": team.coach,
        "season": team.season,
        "dateCreated": team.date_created,
        "players": [player_to_dict(player) for player in team.players],
        "isActive": team.is_active,
    }
    return {key: value for key, value in data.items() if value is not None}


def team_from_dict(raw: dict[str, Any]) -> Team:
    raw_players = raw.get("players", [])
    players = (
        [player_from_dict(p) for p in raw_players if isinstance(p, dict)]
        if isinstance(raw_players, list)
        else []
    )
    return Team(
        id=str(raw.get("id") or new_id()),
        name=str(raw.get("name") or ""),
        description=_optional_str(raw.get("description")),
        coach=_optional_str(raw.get("coach")),
        season=_optional_str(raw.get("season")),
        date_created=str(raw.get("dateCreated") or utc_now_iso()),
        is_active=bool(raw.get("isActive", True)),
        players=players,
    )


class TeamStore:
    """Team CRUD over one serialized blob kept under ``key`` in ``medium``.

    A store built with ``medium=None`` behaves as if the backend were missing:
    reads come back empty and writes are dropped, both with a logged reason.
    """

    def __init__(self, medium: StorageMedium | None, key: str = STORAGE_KEY) -> None:
        self.medium = medium
        self.key = key
        self.last_load_error: str = ""
        self.last_save_error: str = ""

    @staticmethod
    def generate_id() -> str:
        return new_id()

    def _empty_payload(self) -> dict[str, Any]:
        return {"teams": [], "lastUpdated": utc_now_iso()}

    def _unavailable(self, message: str) -> dict[str, Any]:
        self.last_load_error = message
        logger.warning(message)
        return self._empty_payload()

    def load_payload(self) -> dict[str, Any]:
        self.last_load_error = ""
        if self.medium is None:
            return self._unavailable("Storage medium unavailable; starting with no teams.")
        try:
            stored = self.medium.get_item(self.key)
        except OSError as exc:
            return self._unavailable(f"Failed to read team data ({exc}); starting with no teams.")
        except UnicodeDecodeError as exc:
            return self._unavailable(f"Team data is not valid UTF-8 ({exc}); starting with no teams.")
        if not stored:
            return self._empty_payload()
        try:
            raw = json.loads(stored)
        except json.JSONDecodeError as exc:
            return self._unavailable(f"Team data is not valid JSON ({exc}); starting with no teams.")
        if not isinstance(raw, dict) or not isinstance(raw.get("teams"), list):
            return self._unavailable("Team data has invalid format; starting with no teams.")
        return raw

    def save_payload(self, payload: dict[str, Any]) -> None:
        payload["lastUpdated"] = utc_now_iso()
        self.last_save_error = ""
        if self.medium is None:
            self.last_save_error = "Storage medium unavailable; change was not persisted."
            logger.error(self.last_save_error)
            return
        try:
            self.medium.set_item(self.key, json.dumps(payload, indent=2))
        except OSError as exc:
            self.last_save_error = f"Failed to save team data ({exc})."
            logger.error(self.last_save_error)

    def get_all(self) -> list[Team]:
        payload = self.load_payload()
        return [team_from_dict(raw) for raw in payload["teams"] if isinstance(raw, dict)]

    def get_by_id(self, team_id: str) -> Team | None:
        for team in self.get_all():
            if team.id == team_id:
                return team
        return None

    def save(self, team: Team) -> None:
        payload = self.load_payload()
        raw_teams: list[Any] = payload["teams"]
        serialized = team_to_dict(team)
        for idx, raw in enumerate(raw_teams):
            if isinstance(raw, dict) and raw.get("id") == team.id:
                raw_teams[idx] = serialized
                break
        else:
            raw_teams.append(serialized)
        self.save_payload(payload)

    def delete(self, team_id: str) -> bool:
        payload = self.load_payload()
        kept = [raw for raw in payload["teams"] if not (isinstance(raw, dict) and raw.get("id") == team_id)]
        if len(kept) == len(payload["teams"]):
            return False
        payload["teams"] = kept
        self.save_payload(payload)
        return True

    def get_player_by_id(self, team_id: str, player_id: str) -> Player | None:
        team = self.get_by_id(team_id)
        if team is None:
            return None
        return team.player_by_id(player_id)

    def add_player_to_team(self, team_id: str, player: Player) -> bool:
        team = self.get_by_id(team_id)
        if team is None:
            return False
        team.players.append(player)
        self.save(team)
        return True

    def update_player_in_team(self, team_id: str, player_id: str, player: Player) -> bool:
        team = self.get_by_id(team_id)
        if team is None:
            return False
        for idx, existing in enumerate(team.players):
            if existing.id == player_id:
                team.players[idx] = player
                self.save(team)
                return True
        return False

    def remove_player_from_team(self, team_id: str, player_id: str) -> bool:
        team = self.get_by_id(team_id)
        if team is None:
            return False
        remaining = [p for p in team.players if p.id != player_id]
        if len(remaining) == len(team.players):
            return False
        team.players = remaining
        self.save(team)
        return True

    def clear_all_data(self) -> None:
        if self.medium is None:
            return
        try:
            self.medium.remove_item(self.key)
        except OSError as exc:
            logger.error("Failed to clear team data: %s", exc)
