# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for the batting aggregator.

Validates:
  1. Team totals are the sums of the batter rows (AB, H, R, RBI)
  2. Each plate appearance goes to whoever held the slot when it began
  3. Pinch hitters and pinch runners get their own rows and credit
  4. Runs are credited to the runner who scored, including the batter-runner
  5. Walks, HBP and sacrifices are not official at-bats
  6. Batters with no at-bats show ".---", never ".000"
  7. Unattributable events still count in the totals, with warnings
  8. Row inclusion: starters always, substitutes once they entered
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from boxscore.batting import BattingLine, batting_average, compute_team_batting_stats
from models import AtBat, LineupEntry, Play, TeamSide


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _entry(entry_id, slot, side="away", position=None, inning=1, half="top", batter=0):
    return LineupEntry(
        id=entry_id, game_id="g1", team_side=side, player_name=f"Player {entry_id}",
        batting_order=slot, defensive_position=position,
        entry_inning=inning, entry_half=half, entry_batter=batter,
    )


def _ab(ab_id, batter_number, slot, result, inning=1, half="top", rbis=0, **kw):
    return AtBat(
        id=ab_id, game_id="g1", inning=inning, half=half,
        batter_number=batter_number, batting_order=slot,
        result_type=result, rbis=rbis, **kw,
    )


def _run(play_id, ab, runner_slot=None, from_base="1", seq=1, **kw):
    return Play(
        id=play_id, at_bat_id=ab.id, play_sequence=seq,
        inning=ab.inning, half=ab.half, batter_number=ab.batter_number,
        runner_batting_order=runner_slot, from_base=from_base, to_base="H",
        run_scored=True, **kw,
    )


def _row(stats, lineup_id):
    return next(b for b in stats.batters if b.lineup_id == lineup_id)


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

class TestTeamTotals:
    @pytest.fixture
    def three_batters(self):
        lineup = [_entry("a1", 1), _entry("a2", 2), _entry("a3", 3)]
        results = {
            1: ["1B", "2B", "GO", "K"],
            2: ["1B", "GO", "FO", "BB"],
            3: ["GO", "K", "FO", "PO"],
        }
        at_bats = []
        n = 0
        for rnd in range(4):
            for slot in (1, 2, 3):
                n += 1
                at_bats.append(_ab(f"ab{n}", n, slot, results[slot][rnd], inning=rnd + 1))
        return lineup, at_bats

    def test_per_batter_lines(self, three_batters):
        lineup, at_bats = three_batters
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert [b.ab for b in stats.batters] == [4, 3, 4]
        assert [b.h for b in stats.batters] == [2, 1, 0]

    def test_totals_sum_rows(self, three_batters):
        lineup, at_bats = three_batters
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert stats.totals.h == 3
        assert stats.totals.ab == 11
        assert stats.totals.bb == 1
        assert stats.totals.k == 2
        assert stats.totals.h == sum(b.h for b in stats.batters)
        assert stats.totals.ab == sum(b.ab for b in stats.batters)

    def test_averages(self, three_batters):
        lineup, at_bats = three_batters
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert [b.avg_display for b in stats.batters] == [".500", ".333", ".000"]
        assert stats.totals.avg_display == ".273"

    def test_side_inferred_from_lineup(self, three_batters):
        lineup, at_bats = three_batters
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert stats.team_side == TeamSide.AWAY
        assert stats.warnings == []

    def test_other_teams_at_bats_ignored(self):
        lineup = [_entry("a1", 1)]
        at_bats = [_ab("t", 1, 1, "1B"), _ab("b", 1, 1, "HR", half="bottom")]
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert stats.totals.h == 1
        assert stats.totals.ab == 1


class TestRuns:
    def test_runs_from_plays_only(self):
        lineup = [_entry("a1", 1), _entry("a2", 2)]
        ab1 = _ab("ab1", 1, 1, "1B")
        ab2 = _ab("ab2", 2, 2, "HR", rbis=2)
        plays = [_run("p1", ab2, runner_slot=1), _run("p2", ab2, from_base="0", seq=2)]
        stats = compute_team_batting_stats([ab1, ab2], plays, lineup)
        assert _row(stats, "a1").r == 1
        assert _row(stats, "a2").r == 1
        assert _row(stats, "a2").rbi == 2
        assert stats.totals.r == 2

    def test_runner_lineup_id(self):
        lineup = [_entry("a1", 1), _entry("a2", 2)]
        ab1 = _ab("ab1", 1, 1, "2B")
        ab2 = _ab("ab2", 2, 2, "1B", rbis=1)
        plays = [_run("p1", ab2, from_base="2", runner_lineup_id="a1")]
        stats = compute_team_batting_stats([ab1, ab2], plays, lineup)
        assert _row(stats, "a1").r == 1

    def test_non_scoring_plays_ignored(self):
        lineup = [_entry("a1", 1)]
        ab1 = _ab("ab1", 1, 1, "1B")
        plays = [Play(id="p", at_bat_id="ab1", inning=1, half="top", batter_number=1,
                      from_base="0", to_base="1")]
        stats = compute_team_batting_stats([ab1], plays, lineup)
        assert stats.totals.r == 0


# ---------------------------------------------------------------------------
# Substitutions
# ---------------------------------------------------------------------------

class TestSubstitutions:
    def test_pinch_hitter_gets_own_row(self):
        lineup = [
            _entry("a3", 3),
            _entry("ph", 3, inning=3, batter=7),
        ]
        at_bats = [
            _ab("ab1", 1, 3, "1B", inning=1),
            _ab("ab2", 4, 3, "GO", inning=2),
            _ab("ab3", 7, 3, "2B", inning=3),
        ]
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert [b.lineup_id for b in stats.batters] == ["a3", "ph"]
        assert _row(stats, "a3").ab == 2
        assert _row(stats, "a3").h == 1
        assert _row(stats, "ph").ab == 1
        assert _row(stats, "ph").h == 1
        assert stats.totals.ab == 3

    def test_pinch_runner_scores(self):
        lineup = [
            _entry("a1", 1),
            _entry("a2", 2),
            _entry("pr", 1, inning=5, batter=20),
        ]
        single = _ab("ab1", 19, 1, "1B", inning=5)
        double = _ab("ab2", 20, 2, "2B", inning=5, rbis=1)
        plays = [_run("p1", double, runner_slot=1)]
        stats = compute_team_batting_stats([single, double], plays, lineup)
        assert _row(stats, "a1").h == 1
        assert _row(stats, "a1").r == 0
        assert _row(stats, "pr").r == 1
        assert _row(stats, "pr").ab == 0
        assert _row(stats, "pr").avg_display == ".---"

    def test_substitute_not_yet_entered_is_omitted(self):
        lineup = [_entry("a1", 1), _entry("later", 1, inning=8)]
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "K")], [], lineup)
        assert [b.lineup_id for b in stats.batters] == ["a1"]

    def test_defensive_sub_that_entered_is_listed(self):
        lineup = [_entry("a1", 1), _entry("def", 1, position="CF", inning=2, half="bottom")]
        at_bats = [
            _ab("ab1", 1, 1, "K"),
            _ab("hb1", 1, 4, "GO", inning=3, half="bottom"),
        ]
        stats = compute_team_batting_stats(at_bats, [], lineup, side="away")
        assert [b.lineup_id for b in stats.batters] == ["a1", "def"]
        assert _row(stats, "def").ab == 0

    def test_starter_without_plate_appearance_is_listed(self):
        lineup = [_entry("a1", 1), _entry("a9", 9)]
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "K")], [], lineup)
        assert [b.lineup_id for b in stats.batters] == ["a1", "a9"]
        assert _row(stats, "a9").avg is None
        assert _row(stats, "a9").avg_display == ".---"

    def test_starters_recorded_at_first_batter_listed_before_any_event(self):
        lineup = [_entry(f"a{slot}", slot, batter=1) for slot in range(1, 10)]
        stats = compute_team_batting_stats([], [], lineup, side="away")
        assert [b.lineup_id for b in stats.batters] == [f"a{slot}" for slot in range(1, 10)]

    def test_first_batter_starter_credited_with_first_at_bat(self):
        lineup = [_entry("a1", 1, batter=1)]
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "1B")], [], lineup)
        assert _row(stats, "a1").h == 1
        assert stats.warnings == []

    def test_substitute_after_first_batter_not_a_starter(self):
        lineup = [_entry("a1", 1, batter=1), _entry("late", 2, batter=2)]
        stats = compute_team_batting_stats([], [], lineup, side="away")
        assert [b.lineup_id for b in stats.batters] == ["a1"]


# ---------------------------------------------------------------------------
# Result codes
# ---------------------------------------------------------------------------

class TestResultCodes:
    def test_non_at_bat_results(self):
        lineup = [_entry("a1", 1)]
        at_bats = [
            _ab("ab1", 1, 1, "BB"),
            _ab("ab2", 2, 1, "HBP"),
            _ab("ab3", 3, 1, "SF", rbis=1),
            _ab("ab4", 4, 1, "SAC"),
            _ab("ab5", 5, 1, "IBB"),
        ]
        stats = compute_team_batting_stats(at_bats, [], lineup)
        row = _row(stats, "a1")
        assert row.ab == 0
        assert row.bb == 2
        assert row.hbp == 1
        assert row.rbi == 1
        assert row.avg_display == ".---"

    def test_reached_on_error_is_an_at_bat(self):
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "E")], [], [_entry("a1", 1)])
        assert _row(stats, "a1").ab == 1
        assert _row(stats, "a1").h == 0

    def test_looking_strikeout_counts_as_k(self):
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "kl")], [], [_entry("a1", 1)])
        assert _row(stats, "a1").k == 1


# ---------------------------------------------------------------------------
# Unattributable events
# ---------------------------------------------------------------------------

class TestAttributionWarnings:
    def test_unresolved_batter_counts_in_totals(self):
        lineup = [_entry("a1", 1)]
        at_bats = [_ab("ab1", 1, 1, "1B"), _ab("ab2", 2, 6, "2B")]
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert stats.totals.h == 2
        assert sum(b.h for b in stats.batters) == 1
        assert [w.kind for w in stats.warnings] == ["batter"]
        assert stats.warnings[0].event_id == "ab2"

    def test_unresolved_runner_counts_in_totals(self):
        lineup = [_entry("a1", 1)]
        ab1 = _ab("ab1", 1, 1, "1B")
        plays = [_run("p1", ab1, runner_lineup_id="nobody", from_base="2")]
        stats = compute_team_batting_stats([ab1], plays, lineup)
        assert stats.totals.r == 1
        assert _row(stats, "a1").r == 0
        assert stats.warnings[0].kind == "runner"

    def test_bench_player_counted_in_totals_only(self):
        lineup = [_entry("a1", 1), _entry("bench", None)]
        at_bats = [
            _ab("ab1", 1, 1, "K"),
            AtBat(id="ab2", game_id="g1", inning=1, half="top", batter_number=2,
                  batter_lineup_id="bench", result_type="1B"),
        ]
        stats = compute_team_batting_stats(at_bats, [], lineup)
        assert [b.lineup_id for b in stats.batters] == ["a1"]
        assert stats.totals.ab == 2
        assert stats.totals.h == 1
        assert any(w.event_id == "bench" for w in stats.warnings)

    def test_unknown_side_returns_empty_stats(self):
        lineup = [_entry("a1", 1), _entry("h1", 1, side="home")]
        stats = compute_team_batting_stats([_ab("ab1", 1, 1, "1B")], [], lineup)
        assert stats.team_side is None
        assert stats.batters == []
        assert stats.warnings[0].kind == "team"

    def test_no_events(self):
        stats = compute_team_batting_stats([], [], [_entry("a1", 1)])
        assert stats.totals.ab == 0
        assert stats.totals.avg is None
        assert stats.totals.avg_display == ".---"
        assert [b.lineup_id for b in stats.batters] == ["a1"]


class TestHelpers:
    def test_batting_average_no_at_bats(self):
        assert batting_average(0, 0) is None

    def test_batting_average(self):
        assert batting_average(1, 4) == 0.25

    def test_line_merge(self):
        a = BattingLine(ab=2, h=1)
        a.merge(BattingLine(ab=3, h=2, r=1))
        assert (a.ab, a.h, a.r) == (5, 3, 1)
