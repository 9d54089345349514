# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batting aggregator: per-batter and team batting lines for one team.

Every plate appearance is credited to the lineup entry that held the
batting slot when the at-bat began, so a pinch hitter gets a separate line and
the replaced starter keeps the at-bats taken before leaving.  Runs are
credited to the runner who crossed the plate.

Events that cannot be tied to a lineup entry still count toward the team
totals; they are reported back as warnings instead of being dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from boxscore.formatters import format_average
from boxscore.timeline import (
    LineupTimeline,
    Role,
    at_bat_end,
    at_bat_start,
    activation_point,
    play_point,
)
from game_state import batting_side, group_plays_by_at_bat, infer_team_side, is_starter
from models import (
    STRIKEOUT_RESULTS,
    WALK_RESULTS,
    AtBat,
    AttributionWarning,
    BatterBoxScore,
    BattingTotals,
    LineupEntry,
    Play,
    TeamBattingStats,
    TeamSide,
)

logger = logging.getLogger(__name__)


@dataclass
class BattingLine:
    """Running counting stats for one batter (or the unattributed bucket)."""
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0

    def add_plate_appearance(self, at_bat: AtBat) -> None:
        result = at_bat.result
        if result.is_at_bat:
            self.ab += 1
        if result.is_hit:
            self.h += 1
        if at_bat.result_type in WALK_RESULTS:
            self.bb += 1
        if at_bat.result_type in STRIKEOUT_RESULTS:
            self.k += 1
        if at_bat.result_type == "HBP":
            self.hbp += 1
        self.rbi += at_bat.rbis

    def merge(self, other: BattingLine) -> None:
        self.ab += other.ab
        self.r += other.r
        self.h += other.h
        self.rbi += other.rbi
        self.bb += other.bb
        self.k += other.k
        self.hbp += other.hbp


def batting_average(h: int, ab: int) -> Optional[float]:
    """H / AB, or ``None`` when there are no official at-bats."""
    if ab <= 0:
        return None
    return h / ab


def _resolve_batter(timeline: LineupTimeline, side: TeamSide, at_bat: AtBat) -> LineupEntry | None:
    if at_bat.batting_order is not None:
        return timeline.occupant(side, Role.BATTER, at_bat_start(at_bat), slot=at_bat.batting_order)
    entry = timeline.entry(at_bat.batter_lineup_id)
    if entry is not None and entry.team_side == side:
        return entry
    return None


def _resolve_runner(
    timeline: LineupTimeline,
    side: TeamSide,
    play: Play,
    batter: LineupEntry | None,
) -> LineupEntry | None:
    if play.runner_lineup_id is not None:
        entry = timeline.entry(play.runner_lineup_id)
        if entry is not None and entry.team_side == side:
            return entry
        return None
    if play.runner_batting_order is not None:
        return timeline.occupant(side, Role.BATTER, play_point(play), slot=play.runner_batting_order)
    if play.from_base in (None, "0"):
        # Batter-runner scoring on their own at-bat (home run, error, ...).
        return batter
    return None


def compute_team_batting_stats(
    at_bats: Iterable[AtBat],
    plays: Iterable[Play],
    lineup: Iterable[LineupEntry],
    side: TeamSide | str | None = None,
) -> TeamBattingStats:
    """Aggregate one team's batting from the whole game's event log.

    Args:
        at_bats: All at-bats of the game (both teams).
        plays: All plays of the game (both teams).
        lineup: The team's lineup entries, starters and substitutes.
        side: Team side; inferred from the lineup when omitted.

    Returns:
        TeamBattingStats with one row per batting-order entry that had
        entered the game, ordered by slot then entry, plus team totals and
        attribution warnings.
    """
    lineup = list(lineup)
    at_bats = list(at_bats)
    plays = list(plays)
    team_side = infer_team_side(lineup, side)
    warnings: list[AttributionWarning] = []

    if team_side is None:
        message = "Cannot determine team side for batting stats; all events dropped"
        logger.warning(message)
        warnings.append(AttributionWarning(kind="team", event_id="*", message=message))
        return TeamBattingStats(warnings=warnings)

    timeline = LineupTimeline(lineup)
    plays_by_at_bat = group_plays_by_at_bat(plays)
    lines: dict[str, BattingLine] = {}
    unattributed = BattingLine()
    last_point = max((at_bat_end(ab) for ab in at_bats), default=None)

    team_at_bats = sorted(
        (ab for ab in at_bats if batting_side(ab.half) == team_side),
        key=at_bat_start,
    )
    for at_bat in team_at_bats:
        batter = _resolve_batter(timeline, team_side, at_bat)
        if batter is None:
            logger.warning(
                "Unresolved batter for at-bat %s (inning %d %s, batter %d)",
                at_bat.id, at_bat.inning, at_bat.half.value, at_bat.batter_number,
            )
            warnings.append(AttributionWarning(
                kind="batter", event_id=at_bat.id, team_side=team_side,
                message=f"No lineup entry held the batter's slot for at-bat {at_bat.id}",
            ))
            unattributed.add_plate_appearance(at_bat)
        else:
            lines.setdefault(batter.id, BattingLine()).add_plate_appearance(at_bat)

        for play in plays_by_at_bat.get(at_bat.id, []):
            if not play.run_scored:
                continue
            runner = _resolve_runner(timeline, team_side, play, batter)
            if runner is None:
                logger.warning("Unresolved runner for scoring play %s", play.id)
                warnings.append(AttributionWarning(
                    kind="runner", event_id=play.id, team_side=team_side,
                    message=f"Run on play {play.id} could not be credited to a runner",
                ))
                unattributed.r += 1
            else:
                lines.setdefault(runner.id, BattingLine()).r += 1

    batters: list[BatterBoxScore] = []
    totals = BattingLine()
    ordered = sorted(
        (e for e in lineup if e.batting_order is not None and e.team_side == team_side),
        key=lambda e: (e.batting_order, activation_point(e)),
    )
    emitted: set[str] = set()
    for entry in ordered:
        line = lines.get(entry.id)
        entered = last_point is not None and activation_point(entry) <= last_point
        if line is None and not (entered or is_starter(entry)):
            continue
        line = line or BattingLine()
        emitted.add(entry.id)
        totals.merge(line)
        avg = batting_average(line.h, line.ab)
        batters.append(BatterBoxScore(
            lineup_id=entry.id,
            player_name=entry.player_name,
            jersey_number=entry.jersey_number,
            batting_order=entry.batting_order,
            position=entry.defensive_position,
            ab=line.ab, r=line.r, h=line.h, rbi=line.rbi,
            bb=line.bb, k=line.k, hbp=line.hbp,
            avg=avg,
            avg_display=format_average(avg),
        ))

    # Bench entries (no batting slot) referenced directly by an event.
    for entry_id, line in lines.items():
        if entry_id in emitted:
            continue
        logger.info("Counting %s toward totals only (no batting slot)", entry_id)
        warnings.append(AttributionWarning(
            kind="batter", event_id=entry_id, team_side=team_side,
            message=f"Lineup entry {entry_id} has no batting slot; counted in totals only",
        ))
        totals.merge(line)
    totals.merge(unattributed)

    team_avg = batting_average(totals.h, totals.ab)
    return TeamBattingStats(
        team_side=team_side,
        batters=batters,
        totals=BattingTotals(
            ab=totals.ab, r=totals.r, h=totals.h, rbi=totals.rbi,
            bb=totals.bb, k=totals.k, hbp=totals.hbp,
            avg=team_avg,
            avg_display=format_average(team_avg),
        ),
        warnings=warnings,
    )
