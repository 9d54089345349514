# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Cross-check between the line score and the batting/pitching totals.

The line score, the batting aggregator and the pitching aggregator read
the same event log along different paths (per half-inning, per batter, per
pitcher).  Their run and hit totals must agree; a mismatch means the
snapshot is inconsistent.  Mismatches are returned and logged, never
raised, so rendering is never blocked.
"""

from __future__ import annotations

import logging

from game_state import opponent
from models import (
    Discrepancy,
    Game,
    GameStatus,
    LineScore,
    TeamBattingStats,
    TeamPitchingStats,
    TeamSide,
)

logger = logging.getLogger(__name__)


def _compare(out: list[Discrepancy], side: TeamSide, stat: str,
             expected: int, actual: int, source: str) -> None:
    if expected == actual:
        return
    logger.warning(
        "%s %s mismatch: line score %d, %s %d",
        side.value, stat, expected, source, actual,
    )
    out.append(Discrepancy(
        team_side=side, stat=stat, expected=expected, actual=actual, source=source,
    ))


def cross_check_totals(
    line_score: LineScore,
    away_batting: TeamBattingStats,
    home_batting: TeamBattingStats,
    away_pitching: TeamPitchingStats,
    home_pitching: TeamPitchingStats,
    game: Game | None = None,
) -> list[Discrepancy]:
    """Compare line-score R/H with the aggregators and the final score.

    For each batting side, the line score total must equal that team's
    batting totals and the opposing team's pitching totals.  For a
    completed game the header's final score must match as well.
    """
    batting = {TeamSide.AWAY: away_batting, TeamSide.HOME: home_batting}
    pitching = {TeamSide.AWAY: away_pitching, TeamSide.HOME: home_pitching}
    discrepancies: list[Discrepancy] = []

    for side in (TeamSide.AWAY, TeamSide.HOME):
        line = line_score.total_for(side)
        bat = batting[side].totals
        pit = pitching[opponent(side)].totals

        # Per-inning buckets add up to the line total unless the game ran
        # past the innings laid out.
        if not any(w.kind == "inning" and w.team_side == side for w in line_score.warnings):
            inning_runs = sum(r for r in line_score.runs_for(side) if r is not None)
            _compare(discrepancies, side, "r", line.r, inning_runs, "innings")

        _compare(discrepancies, side, "r", line.r, bat.r, "batting")
        _compare(discrepancies, side, "h", line.h, bat.h, "batting")
        _compare(discrepancies, side, "r", line.r, pit.r, "pitching")
        _compare(discrepancies, side, "h", line.h, pit.h, "pitching")

        if game is not None and game.status == GameStatus.COMPLETED:
            final = game.home_final_score if side == TeamSide.HOME else game.away_final_score
            _compare(discrepancies, side, "r", line.r, final, "final_score")

    return discrepancies
