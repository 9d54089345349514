# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Box score engine -- batting, pitching and line score from a game snapshot."""

from boxscore.batting import compute_team_batting_stats
from boxscore.consistency import cross_check_totals
from boxscore.formatters import format_average, format_era, format_percentage
from boxscore.line_score import compute_inning_summary, compute_line_score, line_score_innings
from boxscore.pitching import (
    compute_era,
    compute_team_pitching_stats,
    earned_run_flags,
    format_innings_pitched,
    parse_innings_pitched,
)
from boxscore.render import box_score_csv, render_box_score_text
from boxscore.timeline import GamePoint, LineupTimeline, Role, resolve_occupant
from boxscore.view import build_box_score

__all__ = [
    "GamePoint",
    "LineupTimeline",
    "Role",
    "box_score_csv",
    "build_box_score",
    "compute_era",
    "compute_inning_summary",
    "compute_line_score",
    "compute_team_batting_stats",
    "compute_team_pitching_stats",
    "cross_check_totals",
    "earned_run_flags",
    "format_average",
    "format_era",
    "format_innings_pitched",
    "format_percentage",
    "line_score_innings",
    "parse_innings_pitched",
    "render_box_score_text",
    "resolve_occupant",
]
