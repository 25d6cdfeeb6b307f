from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Iterable, Mapping

from .config import (
    EMAIL_PATTERN,
    JERSEY_MAX,
    JERSEY_MIN,
    PHONE_PATTERN,
    PLAYER_NAME_MAX,
    PLAYER_NOTES_MAX,
    TEAM_DESCRIPTION_MAX,
    TEAM_NAME_MAX,
)
from .models import Player, Team

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_PHONE_RE = re.compile(PHONE_PATTERN)


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _as_fields(entity: Team | Player | Mapping[str, Any]) -> dict[str, Any]:
    if is_dataclass(entity):
        return {f.name: getattr(entity, f.name) for f in fields(entity)}
    return dict(entity)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(phone))


def validate_team(team: Team | Mapping[str, Any]) -> ValidationResult:
    data = _as_fields(team)
    result = ValidationResult()
    name = str(data.get("name") or "").strip()
    if not name:
        result.errors.append("Team name is required")
    elif len(name) > TEAM_NAME_MAX:
        result.errors.append(f"Team name must be {TEAM_NAME_MAX} characters or less")

    description = data.get("description")
    if description and len(description) > TEAM_DESCRIPTION_MAX:
        result.errors.append(f"Team description must be {TEAM_DESCRIPTION_MAX} characters or less")

    if not isinstance(data.get("is_active", True), bool):
        result.errors.append("Active status must be true or false")
    return result


def validate_player(
    player: Player | Mapping[str, Any],
    existing_players: Iterable[Player] = (),
) -> ValidationResult:
    """Check one player's fields against the roster they are joining or already on.

    ``existing_players`` is the full team roster. The candidate's own entry is
    skipped by id, so re-validating an unchanged jersey number never conflicts.
    Numbers are only reserved between active players: an inactive candidate or
    an inactive teammate never produces a clash.
    """
    data = _as_fields(player)
    result = ValidationResult()

    name = str(data.get("name") or "").strip()
    if not name:
        result.errors.append("Player name is required")
    elif len(name) > PLAYER_NAME_MAX:
        result.errors.append(f"Player name must be {PLAYER_NAME_MAX} characters or less")

    email = data.get("email")
    if email and not is_valid_email(email):
        result.errors.append("Invalid email format")

    phone = data.get("phone")
    if phone and not is_valid_phone(phone):
        result.errors.append("Invalid phone number format")

    is_active = data.get("is_active", True)
    if not isinstance(is_active, bool):
        result.errors.append("Active status must be true or false")

    number = data.get("jersey_number")
    if number is not None:
        if isinstance(number, bool) or not isinstance(number, int):
            result.errors.append("Jersey number must be a whole number")
        else:
            if not JERSEY_MIN <= number <= JERSEY_MAX:
                result.errors.append(f"Jersey number must be between {JERSEY_MIN} and {JERSEY_MAX}")
            player_id = data.get("id")
            duplicate = None
            # Only an explicit False skips the clash check.
            if is_active is not False:
                duplicate = next(
                    (
                        p
                        for p in existing_players
                        if p.id != player_id and p.is_active and p.jersey_number == number
                    ),
                    None,
                )
            if duplicate is not None:
                result.errors.append(f"Jersey number {number} is already taken by {duplicate.name}")

    notes = data.get("notes")
    if notes and len(notes) > PLAYER_NOTES_MAX:
        result.errors.append(f"Notes must be {PLAYER_NOTES_MAX} characters or less")
    return result
