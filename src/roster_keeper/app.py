from __future__ import annotations

import argparse
import logging
import os
import random
from typing import Iterable, Sequence

from .config import COMMON_POSITIONS, DATA_DIR_ENV, DEFAULT_DATA_DIR, JERSEY_MAX
from .models import Player, Team
from .queries import calculate_team_stats, sort_players, sort_teams
from .storage import FileMedium, TeamStore

FIRST_NAMES = (
    "Alex", "Noah", "Liam", "Maya", "Lucas", "Ava", "Owen", "Zoe", "Ethan", "Nora",
    "Caleb", "Iris", "Miles", "Leah", "Julian", "Tess", "Reid", "Cora", "Silas", "Jude",
)
LAST_NAMES = (
    "Anderson", "Bennett", "Carter", "Dalton", "Ellis", "Foster", "Hughes", "Jensen",
    "Keller", "Lawson", "Morrison", "Nash", "Olsen", "Quinn", "Sullivan", "Turner",
)

DEMO_TEAMS: tuple[tuple[str, str, str, str], ...] = (
    ("Harbor Kings", "soccer", "Coach Rivera", "Spring 2025"),
    ("Prairie Storm", "basketball", "Coach Patel", "Winter 2025"),
    ("Summit Eagles", "hockey", "Coach Lindqvist", "Fall 2025"),
)


def _make_players(rng: random.Random, sport: str, count: int) -> list[Player]:
    positions = COMMON_POSITIONS.get(sport, COMMON_POSITIONS["default"])
    numbers = rng.sample(range(1, JERSEY_MAX + 1), count)
    used_names: set[str] = set()
    players: list[Player] = []
    for idx in range(count):
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        while name in used_names:
            name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        used_names.add(name)
        handle = name.lower().replace(" ", ".")
        players.append(
            Player(
                name=name,
                email=f"{handle}@example.com",
                position=positions[idx % len(positions)],
                jersey_number=numbers[idx],
                # Roughly one in eight players is sitting out.
                is_active=rng.random() > 0.125,
            )
        )
    return players


def build_demo_teams(seed: int = 7) -> list[Team]:
    rng = random.Random(seed)
    teams: list[Team] = []
    for name, sport, coach, season in DEMO_TEAMS:
        teams.append(
            Team(
                name=name,
                description=f"Demo {sport} roster",
                coach=coach,
                season=season,
                players=_make_players(rng, sport, rng.randint(9, 16)),
            )
        )
    return teams


def format_teams(teams: Iterable[Team]) -> str:
    lines = ["Id                               Team             Season       Plyr Act Status"]
    for team in teams:
        stats = calculate_team_stats(team)
        status = "active" if team.is_active else "inactive"
        lines.append(
            f"{team.id:<32} {team.name:<16} {(team.season or '-'):<12} {stats.total_players:>4}"
            f" {stats.active_players:>3} {status}"
        )
    return "\n".join(lines)


def format_roster(team: Team, sort_by: str = "jersey_number") -> str:
    lines = [f"{team.name} ({team.coach or 'no coach'})", " No Player                Position         Active"]
    for player in sort_players(team.players, sort_by=sort_by):
        number = "--" if player.jersey_number is None else f"{player.jersey_number:>2}"
        lines.append(
            f" {number} {player.name:<20} {(player.position or '-'):<16} {'yes' if player.is_active else 'no'}"
        )
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roster-keeper", description="Manage team rosters stored on disk.")
    parser.add_argument(
        "--data-dir",
        default=os.environ.get(DATA_DIR_ENV, DEFAULT_DATA_DIR),
        help="directory holding the roster data file",
    )
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="list stored teams")
    show = sub.add_parser("show", help="print one team's roster")
    show.add_argument("team_id")
    show.add_argument("--sort", default="jersey_number", choices=("name", "position", "jersey_number", "date_added"))
    seed = sub.add_parser("seed", help="add the demo teams")
    seed.add_argument("--seed", type=int, default=7)
    sub.add_parser("clear", help="remove all stored teams")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    store = TeamStore(FileMedium(args.data_dir))

    if args.command == "list":
        print(format_teams(sort_teams(store.get_all())))
    elif args.command == "show":
        team = store.get_by_id(args.team_id)
        if team is None:
            print(f"Team '{args.team_id}' not found.")
            return 1
        print(format_roster(team, sort_by=args.sort))
    elif args.command == "seed":
        teams = build_demo_teams(seed=args.seed)
        for team in teams:
            store.save(team)
        print(f"Added {len(teams)} demo teams.")
    elif args.command == "clear":
        store.clear_all_data()
        print("Cleared all team data.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
