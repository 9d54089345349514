# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Line score: runs per inning per team plus R/H/E totals.

A half-inning with no recorded at-bats has not been played and is stored
as ``None``; a half-inning that was played without scoring is ``0``.  Runs
and hits belong to the batting team, errors to the fielding team.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from game_state import batting_side, fielding_side, group_plays_by_at_bat
from models import (
    AtBat,
    AttributionWarning,
    Game,
    Half,
    LineScore,
    LineScoreTotals,
    Play,
    PlayType,
    TeamSide,
)

logger = logging.getLogger(__name__)


@dataclass
class InningSummary:
    inning: int
    half: Half
    runs: int = 0
    hits: int = 0
    errors: int = 0  # committed by the fielding team
    played: bool = False


def _errors_in_at_bat(at_bat: AtBat, ab_plays: list[Play]) -> int:
    errors = sum(
        1 for p in ab_plays
        if p.play_type == PlayType.ERROR or p.error_position is not None
    )
    if errors == 0 and at_bat.result_type == "E":
        # Reached on error with no play detail recorded.
        return 1
    return errors


def compute_inning_summary(
    at_bats: Iterable[AtBat],
    plays: Iterable[Play],
    inning: int,
    half: Half | str,
) -> InningSummary:
    """Runs, hits and errors recorded in one half-inning."""
    half = Half(half)
    summary = InningSummary(inning=inning, half=half)
    plays_by_at_bat = group_plays_by_at_bat(plays)
    for ab in at_bats:
        if ab.inning != inning or ab.half != half:
            continue
        summary.played = True
        ab_plays = plays_by_at_bat.get(ab.id, [])
        if ab.result.is_hit:
            summary.hits += 1
        summary.runs += sum(1 for p in ab_plays if p.run_scored)
        summary.errors += _errors_in_at_bat(ab, ab_plays)
    return summary


def compute_line_score(
    at_bats: Iterable[AtBat],
    plays: Iterable[Play],
    max_inning: int,
) -> LineScore:
    """Bucket the event log into a fixed-length line score.

    Args:
        at_bats: All at-bats of the game.
        plays: All plays of the game.
        max_inning: Number of innings to lay out per team.

    Returns:
        LineScore whose per-team lists have exactly *max_inning* items.
        Events past *max_inning* still count in the totals and are
        reported as warnings.
    """
    at_bats = list(at_bats)
    plays = list(plays)
    plays_by_at_bat = group_plays_by_at_bat(plays)
    known_at_bats = {ab.id for ab in at_bats}
    warnings: list[AttributionWarning] = []

    runs: dict[tuple[TeamSide, int], int] = {}
    totals = {TeamSide.AWAY: LineScoreTotals(), TeamSide.HOME: LineScoreTotals()}

    for ab in at_bats:
        batting = batting_side(ab.half)
        fielding = fielding_side(ab.half)
        ab_plays = plays_by_at_bat.get(ab.id, [])
        scored = sum(1 for p in ab_plays if p.run_scored)

        key = (batting, ab.inning)
        runs[key] = runs.get(key, 0) + scored
        totals[batting].r += scored
        if ab.result.is_hit:
            totals[batting].h += 1
        totals[fielding].e += _errors_in_at_bat(ab, ab_plays)

        if ab.inning > max_inning:
            logger.warning("At-bat %s in inning %d is past the line score (%d innings)",
                           ab.id, ab.inning, max_inning)
            warnings.append(AttributionWarning(
                kind="inning", event_id=ab.id, team_side=batting,
                message=f"Inning {ab.inning} is beyond the {max_inning} innings laid out",
            ))

    for play in plays:
        if play.at_bat_id not in known_at_bats:
            logger.warning("Play %s references unknown at-bat %s", play.id, play.at_bat_id)
            warnings.append(AttributionWarning(
                kind="play", event_id=play.id,
                message=f"Play {play.id} has no at-bat {play.at_bat_id}; ignored",
            ))

    def per_inning(side: TeamSide) -> list[int | None]:
        return [runs.get((side, i)) for i in range(1, max_inning + 1)]

    return LineScore(
        innings=max_inning,
        away=per_inning(TeamSide.AWAY),
        home=per_inning(TeamSide.HOME),
        away_total=totals[TeamSide.AWAY],
        home_total=totals[TeamSide.HOME],
        warnings=warnings,
    )


def line_score_innings(game: Game, at_bats: Iterable[AtBat]) -> int:
    """Innings to lay out: scheduled, current, or the last inning batted."""
    last = max((ab.inning for ab in at_bats), default=0)
    return max(game.innings_scheduled, game.current_inning, last)
