"""Roster analysis layered on top of the basic team statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .config import COMMON_POSITIONS, DEEP_ROSTER_SIZE, FULL_ROSTER_SIZE, JERSEY_MAX
from .models import Player, Team, TeamStats
from .queries import calculate_team_stats


@dataclass(slots=True)
class AdvancedTeamStats:
    base: TeamStats
    position_depth: dict[str, int] = field(default_factory=dict)
    jersey_numbers_used: list[int] = field(default_factory=list)
    players_added_this_week: int = 0
    players_added_this_month: int = 0

    @property
    def active_players(self) -> int:
        return self.base.active_players


@dataclass(slots=True)
class PlayerStats:
    total_count: int
    active_count: int
    position_distribution: dict[str, int]
    jersey_number_gaps: list[int]
    contact_info_complete: int


@dataclass(slots=True)
class TeamInsights:
    recommendations: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TeamComparison:
    by_size: list[Team]
    by_activity: list[Team]
    by_completeness: list[Team]


def _added_since(player: Player, cutoff: datetime) -> bool:
    try:
        return player.added_at >= cutoff
    except ValueError:
        return False


def calculate_advanced_team_stats(team: Team, now: datetime | None = None) -> AdvancedTeamStats:
    now = now or datetime.now(timezone.utc)
    stats = AdvancedTeamStats(base=calculate_team_stats(team))
    for player in team.active_players():
        if player.position:
            stats.position_depth[player.position] = stats.position_depth.get(player.position, 0) + 1
    stats.jersey_numbers_used = sorted(p.jersey_number for p in team.numbered_active_players())
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)
    stats.players_added_this_week = sum(1 for p in team.players if _added_since(p, week_ago))
    stats.players_added_this_month = sum(1 for p in team.players if _added_since(p, month_ago))
    return stats


def calculate_player_stats(players: list[Player]) -> PlayerStats:
    distribution: dict[str, int] = {}
    for player in players:
        if player.position:
            distribution[player.position] = distribution.get(player.position, 0) + 1
    used = {p.jersey_number for p in players if p.has_jersey_number}
    gaps = [number for number in range(1, JERSEY_MAX + 1) if number not in used]
    return PlayerStats(
        total_count=len(players),
        active_count=sum(1 for p in players if p.is_active),
        position_distribution=distribution,
        jersey_number_gaps=gaps[:10],
        contact_info_complete=sum(1 for p in players if p.has_contact_info),
    )


def generate_team_insights(team: Team, now: datetime | None = None) -> TeamInsights:
    stats = calculate_advanced_team_stats(team, now=now)
    insights = TeamInsights()

    if stats.active_players < FULL_ROSTER_SIZE:
        insights.warnings.append(
            f"Team needs more players ({stats.active_players}/{FULL_ROSTER_SIZE} minimum)"
        )
        insights.recommendations.append(
            "Consider recruiting additional players to meet minimum roster requirements"
        )
    elif stats.active_players >= DEEP_ROSTER_SIZE:
        insights.strengths.append("Good roster depth with adequate player coverage")

    positions = len(stats.position_depth)
    if positions < 3:
        insights.recommendations.append(
            "Consider adding players in different positions for better team balance"
        )
    elif positions >= 5:
        insights.strengths.append("Well-balanced team with good position coverage")

    if stats.players_added_this_month == 0 and stats.active_players < DEEP_ROSTER_SIZE:
        insights.recommendations.append("Consider recruiting new players to strengthen the roster")

    if len(stats.jersey_numbers_used) != stats.active_players:
        insights.recommendations.append(
            "Assign jersey numbers to all active players for better organization"
        )
    return insights


def team_completeness(team: Team) -> int:
    """Score 0-100: 30 for team details, 40 for roster size, 30 for player details."""
    score = 0.0
    if team.name:
        score += 10
    if team.description:
        score += 10
    if team.coach:
        score += 5
    if team.season:
        score += 5

    score += min(len(team.players) / DEEP_ROSTER_SIZE * 40, 40)

    if team.players:
        detailed = sum(
            1 for p in team.players if p.position or p.email or p.phone or p.has_jersey_number
        )
        score += detailed / len(team.players) * 30
    return round(score)


def _last_activity(team: Team) -> datetime:
    # Teams without players sink to the bottom of the activity ranking.
    stamps = []
    for player in team.players:
        try:
            stamps.append(player.added_at)
        except ValueError:
            continue
    return max(stamps) if stamps else datetime.min.replace(tzinfo=timezone.utc)


def compare_teams(teams: list[Team]) -> TeamComparison:
    return TeamComparison(
        by_size=sorted(teams, key=lambda t: len(t.active_players()), reverse=True),
        by_activity=sorted(teams, key=_last_activity, reverse=True),
        by_completeness=sorted(teams, key=team_completeness, reverse=True),
    )


def common_positions(sport: str = "soccer") -> list[str]:
    return list(COMMON_POSITIONS.get(sport.lower(), COMMON_POSITIONS["default"]))
