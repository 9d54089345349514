# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitching aggregator: per-pitcher and team pitching lines for one team.

The pitcher of record is resolved separately for every event rather than
once per at-bat:

- the at-bat's own result (hit, walk, strikeout, pitch count, batter
  faced) belongs to whoever was on the mound when the at-bat ended;
- each play (an out, a run scoring) belongs to whoever was on the mound
  when that play happened.

A reliever who enters in the middle of an at-bat therefore gets the outs
and runs that happen after the change, and the outgoing pitcher keeps
everything before.

Innings pitched are carried as whole outs.  ``ip_display`` uses the
traditional thirds notation (7 outs -> ``"2.1"``) and ERA is derived from
outs, never from the display value.

Earned runs
-----------
Within a half-inning, once a defensive error has happened (an at-bat
result of ``E``, or a play of type ``error`` or carrying an error
position), every run that scores from that event on, in the same half, is
unearned.  Before the first error a run is earned unless the scorer
cleared the play's ``is_earned_run`` flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from boxscore.formatters import format_era
from boxscore.timeline import (
    LineupTimeline,
    Role,
    activation_point,
    at_bat_end,
    at_bat_start,
    play_point,
)
from game_state import fielding_side, group_plays_by_at_bat, infer_team_side
from models import (
    STRIKEOUT_RESULTS,
    WALK_RESULTS,
    AtBat,
    AttributionWarning,
    LineupEntry,
    PitcherBoxScore,
    PitchingTotals,
    Play,
    PlayType,
    TeamPitchingStats,
    TeamSide,
)

logger = logging.getLogger(__name__)

ERA_INNINGS = 9


# ---------------------------------------------------------------------------
# Innings pitched / ERA arithmetic
# ---------------------------------------------------------------------------

def format_innings_pitched(outs: int) -> str:
    """Render outs in thirds notation: 0 -> "0.0", 7 -> "2.1", 28 -> "9.1"."""
    if outs < 0:
        raise ValueError(f"outs must be non-negative, got {outs}")
    return f"{outs // 3}.{outs % 3}"


def parse_innings_pitched(display: str) -> int:
    """Convert thirds notation back to whole outs ("2.1" -> 7)."""
    text = display.strip()
    whole, _, partial = text.partition(".")
    try:
        innings = int(whole or "0")
        thirds = int(partial or "0")
    except ValueError:
        raise ValueError(f"Not an innings-pitched value: {display!r}") from None
    if innings < 0 or thirds not in (0, 1, 2):
        raise ValueError(f"Not an innings-pitched value: {display!r}")
    return innings * 3 + thirds


def compute_era(er: int, outs: int, innings_per_game: int = ERA_INNINGS) -> Optional[float]:
    """Earned runs per *innings_per_game* innings, or ``None`` with no outs.

    ``ER * N / (outs / 3)`` is evaluated as ``ER * N * 3 / outs`` so a
    single division is the only source of rounding.
    """
    if outs <= 0:
        return None
    return er * innings_per_game * 3 / outs


# ---------------------------------------------------------------------------
# Earned runs
# ---------------------------------------------------------------------------

def _is_error_play(play: Play) -> bool:
    return play.play_type == PlayType.ERROR or play.error_position is not None


def earned_run_flags(at_bats: Iterable[AtBat], plays: Iterable[Play]) -> dict[str, bool]:
    """Map the id of every scoring play to whether the run is earned."""
    plays_by_at_bat = group_plays_by_at_bat(plays)
    halves: dict[tuple[int, str], list[AtBat]] = {}
    for ab in at_bats:
        halves.setdefault((ab.inning, ab.half.value), []).append(ab)

    flags: dict[str, bool] = {}
    for half_at_bats in halves.values():
        error_seen = False
        for ab in sorted(half_at_bats, key=at_bat_start):
            ab_plays = plays_by_at_bat.get(ab.id, [])
            # A result E without an error play happens at the at-bat's end,
            # after every play except the batter-runner's own advance.
            reached_on_error = ab.result_type == "E" and not any(
                _is_error_play(p) for p in ab_plays
            )
            for play in ab_plays:
                if _is_error_play(play):
                    error_seen = True
                if play.run_scored:
                    batter_runner = play.from_base in (None, "0")
                    unearned = error_seen or (reached_on_error and batter_runner)
                    flags[play.id] = play.is_earned_run and not unearned
            if reached_on_error:
                error_seen = True
    return flags


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

@dataclass
class PitchingLine:
    outs: int = 0
    h: int = 0
    r: int = 0
    er: int = 0
    bb: int = 0
    k: int = 0
    pc: int = 0
    batters_faced: int = 0

    def add_result(self, at_bat: AtBat) -> None:
        self.batters_faced += 1
        self.pc += at_bat.pitch_count
        if at_bat.result.is_hit:
            self.h += 1
        if at_bat.result_type in WALK_RESULTS:
            self.bb += 1
        if at_bat.result_type in STRIKEOUT_RESULTS:
            self.k += 1

    def merge(self, other: PitchingLine) -> None:
        self.outs += other.outs
        self.h += other.h
        self.r += other.r
        self.er += other.er
        self.bb += other.bb
        self.k += other.k
        self.pc += other.pc
        self.batters_faced += other.batters_faced


def compute_team_pitching_stats(
    at_bats: Iterable[AtBat],
    plays: Iterable[Play],
    lineup: Iterable[LineupEntry],
    side: TeamSide | str | None = None,
    innings_per_game: int = ERA_INNINGS,
) -> TeamPitchingStats:
    """Aggregate one team's pitching from the whole game's event log.

    Args:
        at_bats: All at-bats of the game (both teams).
        plays: All plays of the game (both teams).
        lineup: The pitching team's lineup entries.
        side: Team side; inferred from the lineup when omitted.
        innings_per_game: ERA denominator (9 for a standard game).

    Returns:
        TeamPitchingStats with one row per pitcher in order of appearance,
        team totals re-derived from summed outs and earned runs, and
        attribution warnings.
    """
    lineup = list(lineup)
    at_bats = list(at_bats)
    plays = list(plays)
    team_side = infer_team_side(lineup, side)
    warnings: list[AttributionWarning] = []

    if team_side is None:
        message = "Cannot determine team side for pitching stats; all events dropped"
        logger.warning(message)
        warnings.append(AttributionWarning(kind="team", event_id="*", message=message))
        return TeamPitchingStats(warnings=warnings)

    timeline = LineupTimeline(lineup)
    plays_by_at_bat = group_plays_by_at_bat(plays)
    earned = earned_run_flags(at_bats, plays)
    lines: dict[str, PitchingLine] = {}
    unattributed = PitchingLine()

    def line_for(point, event_id: str, kind: str) -> PitchingLine:
        pitcher = timeline.occupant(team_side, Role.PITCHER, point)
        if pitcher is None:
            logger.warning("No pitcher of record for %s %s", kind, event_id)
            warnings.append(AttributionWarning(
                kind="pitcher", event_id=event_id, team_side=team_side,
                message=f"No {team_side.value} pitcher was on the mound for {kind} {event_id}",
            ))
            return unattributed
        return lines.setdefault(pitcher.id, PitchingLine())

    team_at_bats = sorted(
        (ab for ab in at_bats if fielding_side(ab.half) == team_side),
        key=at_bat_start,
    )
    for at_bat in team_at_bats:
        result_line = line_for(at_bat_end(at_bat), at_bat.id, "at-bat")
        result_line.add_result(at_bat)

        ab_plays = plays_by_at_bat.get(at_bat.id)
        if not ab_plays:
            result_line.outs += at_bat.outs_on_result
            continue
        for play in ab_plays:
            if not (play.is_out or play.run_scored):
                continue
            play_line = line_for(play_point(play), play.id, "play")
            if play.is_out:
                play_line.outs += 1
            if play.run_scored:
                play_line.r += 1
                if earned.get(play.id, False):
                    play_line.er += 1

    pitchers: list[PitcherBoxScore] = []
    totals = PitchingLine()
    for entry in sorted((e for e in lineup if e.id in lines), key=activation_point):
        line = lines[entry.id]
        totals.merge(line)
        era = compute_era(line.er, line.outs, innings_per_game)
        pitchers.append(PitcherBoxScore(
            lineup_id=entry.id,
            player_name=entry.player_name,
            jersey_number=entry.jersey_number,
            outs=line.outs,
            ip_display=format_innings_pitched(line.outs),
            h=line.h, r=line.r, er=line.er, bb=line.bb, k=line.k,
            pc=line.pc,
            batters_faced=line.batters_faced,
            era=era,
            era_display=format_era(era),
        ))
    totals.merge(unattributed)

    # Team ERA comes from summed outs and ER, never from averaging rows.
    team_era = compute_era(totals.er, totals.outs, innings_per_game)
    return TeamPitchingStats(
        team_side=team_side,
        pitchers=pitchers,
        totals=PitchingTotals(
            outs=totals.outs,
            ip_display=format_innings_pitched(totals.outs),
            h=totals.h, r=totals.r, er=totals.er, bb=totals.bb, k=totals.k,
            pc=totals.pc,
            batters_faced=totals.batters_faced,
            era=team_era,
            era_display=format_era(team_era),
        ),
        warnings=warnings,
    )
