import pytest

from roster_keeper.models import Player, Team
from roster_keeper.queries import (
    available_jersey_numbers,
    calculate_team_stats,
    filter_players,
    sort_players,
    sort_teams,
    team_summary,
)


def _numbers(players: list[Player]) -> list[int | None]:
    return [p.jersey_number for p in players]


def _sample_roster() -> list[Player]:
    return [
        Player(id="a", name="Ana", position="Forward", is_active=True),
        Player(id="b", name="Ben", position="Defense", is_active=True),
        Player(id="c", name="Cal", position="Forward", is_active=False),
    ]


def test_unnumbered_players_sort_last_in_both_directions() -> None:
    players = [Player(name="A", jersey_number=7), Player(name="B"), Player(name="C", jersey_number=3)]
    assert _numbers(sort_players(players, "jersey_number", "asc")) == [3, 7, None]
    assert _numbers(sort_players(players, "jersey_number", "desc")) == [7, 3, None]


def test_sort_returns_a_new_list() -> None:
    players = [Player(name="Zed"), Player(name="amy")]
    ordered = sort_players(players)
    assert [p.name for p in ordered] == ["amy", "Zed"]
    assert [p.name for p in players] == ["Zed", "amy"]


def test_sort_by_name_descending_and_stable_ties() -> None:
    players = [Player(id="1", name="Bo"), Player(id="2", name="Al"), Player(id="3", name="Bo")]
    assert [p.id for p in sort_players(players, "name", "desc")] == ["1", "3", "2"]
    assert [p.id for p in sort_players(players, "name")] == ["2", "1", "3"]


def test_accented_names_sort_with_their_base_letter() -> None:
    players = [Player(name="Zoe"), Player(name="Émile"), Player(name="Adam"), Player(name="Eli")]
    assert [p.name for p in sort_players(players, "name")] == ["Adam", "Eli", "Émile", "Zoe"]
    teams = [Team(name="Zurich"), Team(name="Örebro"), Team(name="Oslo")]
    assert [t.name for t in sort_teams(teams)] == ["Örebro", "Oslo", "Zurich"]


def test_sort_by_position_puts_missing_first_ascending() -> None:
    players = [Player(name="A", position="Goalie"), Player(name="B"), Player(name="C", position="Defense")]
    assert [p.position for p in sort_players(players, "position")] == [None, "Defense", "Goalie"]


def test_sort_by_date_added_compares_timestamps() -> None:
    players = [
        Player(name="late", date_added="2024-03-01T00:00:00.000Z"),
        Player(name="early", date_added="2024-01-01T00:00:00.000Z"),
        Player(name="mid", date_added="2024-02-01T12:00:00+00:00"),
    ]
    assert [p.name for p in sort_players(players, "date_added")] == ["early", "mid", "late"]
    assert [p.name for p in sort_players(players, "date_added", "desc")] == ["late", "mid", "early"]


def test_unknown_sort_key_is_rejected() -> None:
    with pytest.raises(ValueError):
        sort_players([Player(name="A")], "age")  # type: ignore[arg-type]


def test_filters_are_and_combined() -> None:
    result = filter_players(_sample_roster(), is_active=True, search_term="for")
    assert [p.id for p in result] == ["a"]


def test_search_term_matches_any_text_field() -> None:
    players = [
        Player(id="1", name="Dana", email="dana@club.org"),
        Player(id="2", name="Eli", notes="Prefers the LEFT wing"),
        Player(id="3", name="Fay"),
    ]
    assert [p.id for p in filter_players(players, search_term="CLUB")] == ["1"]
    assert [p.id for p in filter_players(players, search_term="  left ")] == ["2"]
    assert [p.id for p in filter_players(players, search_term="fay")] == ["3"]


def test_position_and_inactive_filters() -> None:
    roster = _sample_roster()
    assert [p.id for p in filter_players(roster, position="Forward")] == ["a", "c"]
    assert [p.id for p in filter_players(roster, is_active=False)] == ["c"]
    assert len(filter_players(roster)) == 3


def test_team_stats_example() -> None:
    team = Team(
        name="Stats",
        players=[
            Player(name="A", position="Forward"),
            Player(name="B", position="Forward"),
            Player(name="C", position="Defense", is_active=False),
        ],
    )
    stats = calculate_team_stats(team)
    assert stats.total_players == 3
    assert stats.active_players == 2
    assert stats.inactive_players == 1
    assert stats.position_counts == {"Forward": 2, "Defense": 1}


def test_position_counts_only_present_with_players() -> None:
    assert calculate_team_stats(Team(name="Empty")).position_counts is None
    stats = calculate_team_stats(Team(name="No positions", players=[Player(name="A")]))
    assert stats.position_counts == {}


def test_sort_teams_active_first_then_name() -> None:
    teams = [
        Team(name="zulu"),
        Team(name="Alpha", is_active=False),
        Team(name="bravo"),
    ]
    assert [t.name for t in sort_teams(teams)] == ["bravo", "zulu", "Alpha"]


def test_available_jersey_numbers_ignore_inactive_holders() -> None:
    team = Team(
        name="Numbers",
        players=[
            Player(name="A", jersey_number=1),
            Player(name="B", jersey_number=2, is_active=False),
            Player(name="C", jersey_number=4),
        ],
    )
    assert available_jersey_numbers(team, max_number=5) == [2, 3, 5]


def test_team_summary_uses_latest_player_activity() -> None:
    team = Team(
        name="Summary",
        date_created="2024-01-01T00:00:00.000Z",
        players=[
            Player(name="A", date_added="2024-02-10T09:00:00.000Z"),
            Player(name="B", date_added="2024-03-05T09:00:00.000Z", is_active=False),
        ],
    )
    summary = team_summary(team)
    assert summary.player_count == 2
    assert summary.active_player_count == 1
    assert summary.most_recent_activity.isoformat() == "2024-03-05"
    assert summary.has_full_roster is False
    assert team_summary(Team(name="New", date_created="2024-01-01T00:00:00.000Z")).most_recent_activity.isoformat() == "2024-01-01"
