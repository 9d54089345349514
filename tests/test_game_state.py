# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for the derived game state helpers.

Validates:
  1. Batting and fielding side per half-inning
  2. Outs implied by result codes, and outs recorded in a half-inning
  3. Score implied by the play log
  4. Half-inning the game should be in after edits
  5. Starting and active lineups
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from game_state import (
    batting_side,
    calculate_correct_inning_state,
    calculate_outs,
    calculate_scores,
    fielding_side,
    get_active_lineup,
    get_next_half_inning,
    get_outs_from_result,
    get_starting_lineup,
    group_plays_by_at_bat,
    infer_team_side,
    is_starter,
    opponent,
)
from models import AtBat, Half, LineupEntry, Play, TeamSide


def _ab(ab_id, inning, half, batter_number, result):
    return AtBat(id=ab_id, game_id="g1", inning=inning, half=half,
                 batter_number=batter_number, result_type=result)


def _play(play_id, ab, seq=1, **kw):
    return Play(id=play_id, at_bat_id=ab.id, play_sequence=seq, inning=ab.inning,
                half=ab.half, batter_number=ab.batter_number, **kw)


def _entry(entry_id, slot, inning=1, half="top", batter=0, active=True):
    return LineupEntry(id=entry_id, game_id="g1", team_side="home", player_name=entry_id,
                       batting_order=slot, entry_inning=inning, entry_half=half,
                       entry_batter=batter, is_active=active)


class TestSides:
    def test_top_half(self):
        assert batting_side("top") == TeamSide.AWAY
        assert fielding_side(Half.TOP) == TeamSide.HOME

    def test_bottom_half(self):
        assert batting_side(Half.BOTTOM) == TeamSide.HOME
        assert fielding_side("bottom") == TeamSide.AWAY

    def test_opponent(self):
        assert opponent("home") == TeamSide.AWAY
        assert opponent(TeamSide.AWAY) == TeamSide.HOME

    def test_infer_team_side(self):
        assert infer_team_side([_entry("h1", 1)]) == TeamSide.HOME
        assert infer_team_side([], "away") == TeamSide.AWAY
        assert infer_team_side([]) is None


class TestOuts:
    @pytest.mark.parametrize("code,outs", [
        ("K", 1), ("GO", 1), ("SF", 1), ("DP", 2), ("TP", 3),
        ("1B", 0), ("BB", 0), ("E", 0), ("dp", 2), ("??", 0),
    ])
    def test_outs_from_result(self, code, outs):
        assert get_outs_from_result(code) == outs

    def test_half_inning_outs(self):
        a = _ab("a", 2, "top", 5, "K")
        b = _ab("b", 2, "top", 6, "1B")
        c = _ab("c", 2, "top", 7, "DP")
        other = _ab("d", 2, "bottom", 5, "K")
        assert calculate_outs([a, b, c, other], [], 2, "top") == 3

    def test_plays_take_precedence(self):
        c = _ab("c", 1, "top", 1, "DP")
        plays = [_play("p1", c, is_out=True)]
        assert calculate_outs([c], plays, 1, "top") == 1

    def test_group_plays_sorted(self):
        a = _ab("a", 1, "top", 1, "1B")
        plays = [_play("p2", a, seq=2), _play("p1", a, seq=1)]
        assert [p.id for p in group_plays_by_at_bat(plays)["a"]] == ["p1", "p2"]


class TestScores:
    def test_scores_from_plays(self):
        top = _ab("t", 1, "top", 1, "HR")
        bottom = _ab("b", 1, "bottom", 1, "1B")
        plays = [
            _play("r1", top, run_scored=True),
            _play("r2", bottom, run_scored=True),
            _play("r3", bottom, seq=2, run_scored=True),
            _play("adv", bottom, seq=3),
        ]
        assert calculate_scores([top, bottom], plays) == {"home": 2, "away": 1}

    def test_orphan_runs_ignored(self):
        top = _ab("t", 1, "top", 1, "HR")
        orphan = Play(id="x", at_bat_id="zz", inning=1, half="top", batter_number=1,
                      run_scored=True)
        assert calculate_scores([top], [orphan]) == {"home": 0, "away": 0}


class TestInningState:
    def test_next_half(self):
        assert get_next_half_inning(3, "top") == (3, Half.BOTTOM)
        assert get_next_half_inning(3, Half.BOTTOM) == (4, Half.TOP)

    def test_no_at_bats(self):
        assert calculate_correct_inning_state([], []) == (1, Half.TOP)

    def test_half_still_open(self):
        at_bats = [_ab("a", 4, "bottom", 20, "K"), _ab("b", 4, "bottom", 21, "1B")]
        assert calculate_correct_inning_state(at_bats, []) == (4, Half.BOTTOM)

    def test_three_outs_advance(self):
        at_bats = [_ab("a", 4, "bottom", 20, "K"), _ab("b", 4, "bottom", 21, "DP")]
        assert calculate_correct_inning_state(at_bats, []) == (5, Half.TOP)


class TestLineups:
    def test_starting_lineup(self):
        lineup = [_entry("s2", 2), _entry("s1", 1), _entry("sub", 1, inning=6),
                  _entry("bench", None)]
        assert [e.id for e in get_starting_lineup(lineup)] == ["s1", "s2"]

    def test_starting_lineup_recorded_at_first_batter(self):
        lineup = [_entry(f"s{slot}", slot, batter=1) for slot in (3, 1, 2)]
        lineup.append(_entry("sub", 1, batter=2))
        assert [e.id for e in get_starting_lineup(lineup)] == ["s1", "s2", "s3"]

    def test_is_starter(self):
        assert is_starter(_entry("zero", 1))
        assert is_starter(_entry("one", 1, batter=1))
        assert not is_starter(_entry("two", 1, batter=2))
        assert not is_starter(_entry("bottom", 1, half="bottom"))

    def test_active_lineup(self):
        lineup = [
            _entry("gone", 1, active=False),
            _entry("sub", 1, inning=6),
            _entry("s2", 2),
            _entry("late", 3, inning=8),
        ]
        assert [e.id for e in get_active_lineup(lineup, 6, "bottom")] == ["sub", "s2"]
