from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Literal

from .config import FULL_ROSTER_SIZE, JERSEY_MAX, UNNUMBERED_JERSEY
from .models import Player, Team, TeamStats

PlayerSortKey = Literal["name", "position", "jersey_number", "date_added"]
SortOrder = Literal["asc", "desc"]

PLAYER_SORT_KEYS: tuple[str, ...] = ("name", "position", "jersey_number", "date_added")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _strip_diacritics(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def collation_key(value: str) -> tuple[str, str]:
    """Accent-insensitive primary key, with the accented form breaking ties."""
    folded = value.casefold()
    return (_strip_diacritics(folded), folded)


def _added_at(player: Player) -> datetime:
    try:
        return player.added_at
    except ValueError:
        return _EPOCH


def sort_players(
    players: Iterable[Player],
    sort_by: PlayerSortKey = "name",
    order: SortOrder = "asc",
) -> list[Player]:
    """Return a new, stably sorted list of ``players``.

    For ``jersey_number`` the unnumbered players always come last; ``order``
    only reverses the numbered ones.
    """
    descending = order == "desc"
    if sort_by == "name":
        return sorted(players, key=lambda p: collation_key(p.name), reverse=descending)
    if sort_by == "position":
        return sorted(players, key=lambda p: collation_key(p.position or ""), reverse=descending)
    if sort_by == "jersey_number":

        def _jersey_key(p: Player) -> tuple[bool, int]:
            number = p.jersey_number if p.jersey_number is not None else UNNUMBERED_JERSEY
            return (p.jersey_number is None, -number if descending else number)

        return sorted(players, key=_jersey_key)
    if sort_by == "date_added":
        return sorted(players, key=_added_at, reverse=descending)
    raise ValueError(f"Unknown player sort key '{sort_by}'")


def filter_players(
    players: Iterable[Player],
    *,
    is_active: bool | None = None,
    position: str | None = None,
    search_term: str | None = None,
) -> list[Player]:
    filtered = list(players)
    if is_active is not None:
        filtered = [p for p in filtered if p.is_active == is_active]
    if position:
        filtered = [p for p in filtered if p.position == position]
    if search_term:
        needle = search_term.lower().strip()
        filtered = [
            p
            for p in filtered
            if any(needle in value.lower() for value in (p.name, p.email, p.position, p.notes) if value)
        ]
    return filtered


def calculate_team_stats(team: Team) -> TeamStats:
    stats = TeamStats(
        total_players=len(team.players),
        active_players=len(team.active_players()),
        inactive_players=len(team.inactive_players()),
    )
    if team.players:
        counts: dict[str, int] = {}
        for player in team.players:
            if player.position:
                counts[player.position] = counts.get(player.position, 0) + 1
        stats.position_counts = counts
    return stats


def sort_teams(teams: Iterable[Team]) -> list[Team]:
    return sorted(teams, key=lambda t: (not t.is_active, collation_key(t.name)))


def available_jersey_numbers(team: Team, max_number: int = JERSEY_MAX) -> list[int]:
    taken = {p.jersey_number for p in team.numbered_active_players()}
    return [number for number in range(1, max_number + 1) if number not in taken]


@dataclass(slots=True)
class TeamSummary:
    name: str
    player_count: int
    active_player_count: int
    most_recent_activity: date
    has_full_roster: bool


def team_summary(team: Team) -> TeamSummary:
    stats = calculate_team_stats(team)
    if team.players:
        most_recent = max(_added_at(p) for p in team.players)
    else:
        most_recent = team.created_at
    return TeamSummary(
        name=team.name,
        player_count=stats.total_players,
        active_player_count=stats.active_players,
        most_recent_activity=most_recent.date(),
        has_full_roster=stats.active_players >= FULL_ROSTER_SIZE,
    )
