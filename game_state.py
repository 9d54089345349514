# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Read-only game state derived from a scorebook snapshot.

Helpers for questions the box score needs answered about the flow of a
game: which team bats in a half, how many outs a result implies, the score
implied by the play log, and where the game stands after edits.
"""

from __future__ import annotations

from typing import Iterable

from models import AT_BAT_RESULTS, AtBat, Half, LineupEntry, Play, TeamSide


def batting_side(half: Half | str) -> TeamSide:
    return TeamSide.AWAY if Half(half) == Half.TOP else TeamSide.HOME


def fielding_side(half: Half | str) -> TeamSide:
    return TeamSide.HOME if Half(half) == Half.TOP else TeamSide.AWAY


def opponent(side: TeamSide | str) -> TeamSide:
    return TeamSide.AWAY if TeamSide(side) == TeamSide.HOME else TeamSide.HOME


def get_outs_from_result(result_type: str) -> int:
    """Outs implied by a result code alone (DP = 2, TP = 3)."""
    info = AT_BAT_RESULTS.get(result_type.strip().upper())
    if info is None:
        return 0
    return info.outs


def group_plays_by_at_bat(plays: Iterable[Play]) -> dict[str, list[Play]]:
    """Map at-bat id to its plays in sequence order."""
    grouped: dict[str, list[Play]] = {}
    for play in plays:
        grouped.setdefault(play.at_bat_id, []).append(play)
    for seq in grouped.values():
        seq.sort(key=lambda p: p.play_sequence)
    return grouped


def calculate_outs(at_bats: Iterable[AtBat], plays: Iterable[Play],
                   inning: int, half: Half | str) -> int:
    """Outs recorded so far in one half-inning.

    Play detail wins when an at-bat has any; otherwise the at-bat's own
    out count is used.
    """
    half = Half(half)
    by_at_bat = group_plays_by_at_bat(plays)
    outs = 0
    for ab in at_bats:
        if ab.inning != inning or ab.half != half:
            continue
        ab_plays = by_at_bat.get(ab.id)
        if ab_plays:
            outs += sum(1 for p in ab_plays if p.is_out)
        else:
            outs += ab.outs_on_result
    return outs


def calculate_scores(at_bats: Iterable[AtBat], plays: Iterable[Play]) -> dict[str, int]:
    """Score implied by the play log: ``{"home": .., "away": ..}``."""
    half_by_at_bat = {ab.id: ab.half for ab in at_bats}
    scores = {TeamSide.HOME.value: 0, TeamSide.AWAY.value: 0}
    for play in plays:
        if not play.run_scored:
            continue
        half = half_by_at_bat.get(play.at_bat_id)
        if half is None:
            continue
        scores[batting_side(half).value] += 1
    return scores


def get_next_half_inning(inning: int, half: Half | str) -> tuple[int, Half]:
    if Half(half) == Half.TOP:
        return inning, Half.BOTTOM
    return inning + 1, Half.TOP


def calculate_correct_inning_state(at_bats: list[AtBat], plays: list[Play]) -> tuple[int, Half]:
    """Half-inning the game should be in given the recorded events.

    Used after an at-bat is deleted or edited: the latest at-bat decides,
    and three outs in its half move the game on to the next half.
    """
    if not at_bats:
        return 1, Half.TOP

    latest = max(
        at_bats,
        key=lambda ab: (ab.inning, 0 if ab.half == Half.TOP else 1, ab.batter_number),
    )
    outs = calculate_outs(at_bats, plays, latest.inning, latest.half)
    if outs >= 3:
        return get_next_half_inning(latest.inning, latest.half)
    return latest.inning, latest.half


def is_starter(entry: LineupEntry) -> bool:
    """True when *entry* was in the game by the first plate appearance.

    Scorebooks record starters either at batter 0 or at batter 1 of the
    top of the first; both count.
    """
    return (
        entry.entry_inning == 1 and entry.entry_half == Half.TOP
        and (entry.entry_batter, entry.entry_sequence) <= (1, 0)
    )


def get_starting_lineup(lineup: Iterable[LineupEntry]) -> list[LineupEntry]:
    """Batting-order entries that were in the game from the first pitch."""
    starters = [e for e in lineup if e.batting_order is not None and is_starter(e)]
    return sorted(starters, key=lambda e: e.batting_order)


def get_active_lineup(lineup: Iterable[LineupEntry], inning: int,
                      half: Half | str) -> list[LineupEntry]:
    """Entries still in the game that had entered by the start of a half."""
    rank = 0 if Half(half) == Half.TOP else 1
    active = []
    for e in lineup:
        if not e.is_active:
            continue
        entry_rank = 0 if e.entry_half == Half.TOP else 1
        if (e.entry_inning, entry_rank) > (inning, rank):
            continue
        active.append(e)
    return sorted(active, key=lambda e: e.batting_order if e.batting_order is not None else 99)


def infer_team_side(lineup: Iterable[LineupEntry],
                    side: TeamSide | str | None = None) -> TeamSide | None:
    """Explicit *side*, else the single side all lineup entries share."""
    if side is not None:
        return TeamSide(side)
    sides = {e.team_side for e in lineup}
    if len(sides) == 1:
        return sides.pop()
    return None
