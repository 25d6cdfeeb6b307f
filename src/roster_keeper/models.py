from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


def utc_now_iso() -> str:
    """Current UTC time in the millisecond ``...Z`` form stored in the blob."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(slots=True)
class Player:
    name: str
    id: str = field(default_factory=new_id)
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    jersey_number: int | None = None
    is_active: bool = True
    date_added: str = field(default_factory=utc_now_iso)
    notes: str | None = None

    WRITE_ONCE_FIELDS: ClassVar[tuple[str, ...]] = ("id", "date_added")

    @property
    def has_jersey_number(self) -> bool:
        return self.jersey_number is not None

    @property
    def has_contact_info(self) -> bool:
        return bool(self.email or self.phone)

    @property
    def added_at(self) -> datetime:
        return parse_timestamp(self.date_added)


@dataclass(slots=True)
class Team:
    name: str
    id: str = field(default_factory=new_id)
    description: str | None = None
    coach: str | None = None
    season: str | None = None
    date_created: str = field(default_factory=utc_now_iso)
    is_active: bool = True
    players: list[Player] = field(default_factory=list)

    WRITE_ONCE_FIELDS: ClassVar[tuple[str, ...]] = ("id", "date_created")

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.date_created)

    def player_by_id(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def active_players(self) -> list[Player]:
        return [p for p in self.players if p.is_active]

    def inactive_players(self) -> list[Player]:
        return [p for p in self.players if not p.is_active]

    def numbered_active_players(self) -> list[Player]:
        return [p for p in self.active_players() if p.has_jersey_number]


@dataclass(slots=True)
class TeamStats:
    total_players: int = 0
    active_players: int = 0
    inactive_players: int = 0
    position_counts: dict[str, int] | None = None
