# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Plain-text and CSV renderings of a box score."""

from __future__ import annotations

import csv
import io

from models import BoxScore, TeamSide

SIDES = (TeamSide.AWAY, TeamSide.HOME)

CSV_HEADERS = ["team", "batting_order", "player_name", "position",
               "ab", "r", "h", "rbi", "bb", "k", "avg"]


def render_box_score_text(box: BoxScore) -> str:
    """Generate a formatted box score string."""
    lines = []
    title = f"{box.game.away_team_name} at {box.game.home_team_name}"
    if box.game.game_date:
        title += f" ({box.game.game_date})"

    lines.append("=" * 72)
    lines.append(title)
    lines.append("=" * 72)

    # Line score
    ls = box.line_score
    header = f"{'Team':<20}"
    for i in range(1, ls.innings + 1):
        header += f" {i:>3}"
    header += "  |   R   H   E"
    lines.append(header)
    lines.append("-" * len(header))

    for side in SIDES:
        team = box.team(side)
        total = ls.total_for(side)
        row = f"{team.team_name:<20}"
        for runs in ls.runs_for(side):
            row += f" {'-' if runs is None else runs:>3}"
        row += f"  | {total.r:>3} {total.h:>3} {total.e:>3}"
        lines.append(row)

    # Batting lines
    for side in SIDES:
        team = box.team(side)
        lines.append(f"\n{team.team_name} Batting:")
        lines.append(f"  {'#':>1} {'Name':<20} {'Pos':<4} {'AB':>3} {'R':>3} {'H':>3} "
                     f"{'RBI':>4} {'BB':>3} {'K':>3} {'AVG':>5}")
        lines.append(f"  {'-'} {'-'*20} {'-'*4} {'-'*3} {'-'*3} {'-'*3} {'-'*4} {'-'*3} {'-'*3} {'-'*5}")
        for b in team.batting.batters:
            pos = b.position.value if b.position else ""
            lines.append(
                f"  {b.batting_order:>1} {b.player_name:<20} {pos:<4} {b.ab:>3} {b.r:>3} {b.h:>3} "
                f"{b.rbi:>4} {b.bb:>3} {b.k:>3} {b.avg_display:>5}"
            )
        t = team.batting.totals
        lines.append(
            f"  {'':>1} {'Totals':<20} {'':<4} {t.ab:>3} {t.r:>3} {t.h:>3} "
            f"{t.rbi:>4} {t.bb:>3} {t.k:>3} {t.avg_display:>5}"
        )

    # Pitching lines
    for side in SIDES:
        team = box.team(side)
        lines.append(f"\n{team.team_name} Pitching:")
        lines.append(f"  {'Name':<20} {'IP':>5} {'H':>3} {'R':>3} {'ER':>3} {'BB':>3} "
                     f"{'K':>3} {'PC':>4} {'ERA':>6}")
        lines.append(f"  {'-'*20} {'-'*5} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*4} {'-'*6}")
        for p in team.pitching.pitchers:
            lines.append(
                f"  {p.player_name:<20} {p.ip_display:>5} {p.h:>3} {p.r:>3} "
                f"{p.er:>3} {p.bb:>3} {p.k:>3} {p.pc:>4} {p.era_display:>6}"
            )
        t = team.pitching.totals
        lines.append(
            f"  {'Totals':<20} {t.ip_display:>5} {t.h:>3} {t.r:>3} "
            f"{t.er:>3} {t.bb:>3} {t.k:>3} {t.pc:>4} {t.era_display:>6}"
        )

    if box.discrepancies:
        lines.append("\nDiscrepancies:")
        for d in box.discrepancies:
            lines.append(
                f"  {d.team_side.value} {d.stat.upper()}: line score {d.expected}, "
                f"{d.source} {d.actual}"
            )

    return "\n".join(lines)


def box_score_csv(box: BoxScore) -> str:
    """Batting rows for both teams as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for side in SIDES:
        for b in box.team(side).batting.batters:
            writer.writerow([
                side.value,
                b.batting_order,
                b.player_name,
                b.position.value if b.position else "",
                b.ab, b.r, b.h, b.rbi, b.bb, b.k,
                b.avg_display,
            ])
    return buf.getvalue()
