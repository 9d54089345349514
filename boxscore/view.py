# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Box score view model built from one game snapshot."""

from __future__ import annotations

import logging

from boxscore.batting import compute_team_batting_stats
from boxscore.consistency import cross_check_totals
from boxscore.line_score import compute_line_score, line_score_innings
from boxscore.pitching import ERA_INNINGS, compute_team_pitching_stats
from models import BoxScore, GameSnapshot, TeamBoxScore, TeamSide

logger = logging.getLogger(__name__)


def build_box_score(snapshot: GameSnapshot, innings_per_game: int | None = None) -> BoxScore:
    """Compute the full box score for *snapshot*.

    The batting, pitching and line score computations are independent of
    each other; the cross-check only compares their outputs.  Nothing here
    raises for inconsistent data: problems come back as ``warnings`` and
    ``discrepancies`` on the result.
    """
    era_innings = innings_per_game or ERA_INNINGS
    at_bats = snapshot.at_bats
    plays = snapshot.plays

    teams = {}
    for side in (TeamSide.AWAY, TeamSide.HOME):
        lineup = snapshot.lineup_for(side)
        teams[side] = TeamBoxScore(
            team_side=side,
            team_name=(snapshot.game.home_team_name if side == TeamSide.HOME
                       else snapshot.game.away_team_name),
            batting=compute_team_batting_stats(at_bats, plays, lineup, side=side),
            pitching=compute_team_pitching_stats(
                at_bats, plays, lineup, side=side, innings_per_game=era_innings,
            ),
        )

    line_score = compute_line_score(at_bats, plays, line_score_innings(snapshot.game, at_bats))

    discrepancies = cross_check_totals(
        line_score,
        teams[TeamSide.AWAY].batting,
        teams[TeamSide.HOME].batting,
        teams[TeamSide.AWAY].pitching,
        teams[TeamSide.HOME].pitching,
        game=snapshot.game,
    )

    warnings = list(line_score.warnings)
    for team in teams.values():
        warnings.extend(team.batting.warnings)
        warnings.extend(team.pitching.warnings)

    if warnings or discrepancies:
        logger.info(
            "Box score for game %s: %d warning(s), %d discrepancy(ies)",
            snapshot.game.id, len(warnings), len(discrepancies),
        )

    return BoxScore(
        game=snapshot.game,
        line_score=line_score,
        away=teams[TeamSide.AWAY],
        home=teams[TeamSide.HOME],
        warnings=warnings,
        discrepancies=discrepancies,
    )
