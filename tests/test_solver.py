from __future__ import annotations

import pytest

from lineupcard.contracts import SOLVER_POSITIONS, Position
from lineupcard.core import SequenceRandomSource, seeded_random
from lineupcard.engine import InningSolver, build_pool, solve_inning
from tests.helpers import make_player, utility_players


def _assigned(result):
    return [p.player_id for p in result.values() if p is not None]


def test_full_roster_fills_every_position_on_every_call():
    players = utility_players(9)
    pitcher = players[4]
    for seed in range(50):
        result = InningSolver(seeded_random(seed)).solve(players, pitcher)
        assert set(result) == set(SOLVER_POSITIONS)
        assert pitcher.player_id not in _assigned(result)

        field = {**result, Position.P: pitcher}
        assert all(p is not None for p in field.values())
        ids = [p.player_id for p in field.values()]
        assert len(ids) == len(set(ids)) == 9


def test_specialists_land_at_their_only_position():
    specialists = [make_player(f"s_{pos.value}", (pos,)) for pos in SOLVER_POSITIONS]
    result = InningSolver(seeded_random(17)).solve(specialists, None)
    for pos in SOLVER_POSITIONS:
        assert result[pos].player_id == f"s_{pos.value}"


def test_preference_rank_beats_fill_order():
    first_ss = make_player("a", (Position.SS, Position.SECOND_BASE))
    first_2b = make_player("b", (Position.SECOND_BASE, Position.SS))
    others = [
        make_player(f"s_{pos.value}", (pos,))
        for pos in SOLVER_POSITIONS
        if pos not in (Position.SS, Position.SECOND_BASE)
    ]
    for seed in range(20):
        result = InningSolver(seeded_random(seed)).solve([first_ss, first_2b, *others], None)
        assert result[Position.SS].player_id == "a"
        assert result[Position.SECOND_BASE].player_id == "b"
        assert all(p is not None for p in result.values())


def test_fallback_consumes_a_player_needed_later():
    catcher = make_player("catcher", (Position.C,))
    # all-zero draws visit SS first and C last
    result = InningSolver(SequenceRandomSource([0.0])).solve([catcher], None)
    assert result[Position.SS] == catcher
    assert result[Position.C] is None


def test_ineligible_player_is_still_placed_as_fallback():
    pitcher_only = make_player("only_p", (Position.P,))
    events = []
    result = InningSolver(seeded_random(5), trace=events.append).solve([pitcher_only], None)

    assert _assigned(result) == ["only_p"]
    reasons = [e.data["reason"] for e in events if e.event_type == "assigned"]
    assert reasons[0] == "fallback"
    assert reasons[1:] == ["empty_pool"] * 7


def test_short_roster_leaves_positions_empty():
    players = utility_players(5)
    result = InningSolver(seeded_random(8)).solve(players, players[0])
    assert len(_assigned(result)) == 4
    assert sum(1 for p in result.values() if p is None) == 4


def test_unavailable_and_repeated_players_are_excluded_from_pool():
    players = utility_players(9)
    batting_order = players + [players[0], players[1]]
    available = {p.player_id for p in players[:6]}

    pool = build_pool(batting_order, available)
    assert [p.player_id for p in pool] == [p.player_id for p in players[:6]]

    result = solve_inning(batting_order, None, seeded_random(2), available_ids=available)
    assigned = _assigned(result)
    assert set(assigned) == available
    assert len(assigned) == len(set(assigned))


def test_pitcher_missing_from_batting_order_is_ignored():
    players = utility_players(8)
    outsider = make_player("outsider", (Position.P,))
    result = InningSolver(seeded_random(4)).solve(players, outsider)
    assert len(_assigned(result)) == 8


def test_same_seed_gives_same_assignment():
    players = utility_players(11)
    first = InningSolver(seeded_random(42)).solve(players, players[0])
    second = InningSolver(seeded_random(42)).solve(players, players[0])
    assert {pos: p.player_id for pos, p in first.items()} == {pos: p.player_id for pos, p in second.items()}


def test_scripted_draws_fix_fill_order_and_tie_breaks():
    players = utility_players(8)
    events = []
    source = SequenceRandomSource([0.0])
    result = InningSolver(source, trace=events.append).solve(players, None)

    fill_order = next(e.data["order"] for e in events if e.event_type == "fill_order")
    assert fill_order == ["SS", "2B", "3B", "1B", "LF", "CF", "RF", "C"]
    # every draw of 0.0 takes the earliest tied player in batting order
    for idx, code in enumerate(fill_order):
        assert result[Position(code)].player_id == players[idx].player_id
    assert source.draws == 7 + 8


def test_sequence_source_rejects_values_outside_unit_interval():
    with pytest.raises(ValueError):
        SequenceRandomSource([])
    with pytest.raises(ValueError):
        SequenceRandomSource([0.5, 1.0])
