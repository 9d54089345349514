# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Lineup timeline: who occupied a lineup role at a given point of the game.

Lineup entries are never edited in place when a substitution happens.  A new
entry is written with the same batting slot (or the same defensive position)
and a later activation point, so each role is a sequence of half-open
activation windows::

    starter     [ (1, top, 0, 0)   ,  (6, top, 23, 0) )
    substitute  [ (6, top, 23, 0)  ,  end of game     )

The timeline indexes those windows per ``(team side, role, key)`` where the
key is the batting slot for the batter role and the defensive position for
the pitcher and fielder roles.  Queries are a binary search over the window
starts.

``is_active`` is ignored: a deactivated entry still owns the
window during which it was on the field.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from models import AtBat, Half, LineupEntry, Play, Position, TeamSide

logger = logging.getLogger(__name__)

# Sequence used for the at-bat's own result; sorts after every play in it.
AT_BAT_END = 1_000_000


class Role(str, Enum):
    BATTER = "batter"
    PITCHER = "pitcher"
    FIELDER = "fielder"


# ---------------------------------------------------------------------------
# Game points
# ---------------------------------------------------------------------------

class GamePoint(NamedTuple):
    """A totally ordered position in the game.

    Ordered by inning, then half (top before bottom), then batter number,
    then play sequence inside the at-bat.
    """
    inning: int
    half_rank: int
    batter_number: int
    sequence: int = 0

    @classmethod
    def at(cls, inning: int, half: Half | str, batter_number: int,
           sequence: int = 0) -> GamePoint:
        return cls(inning, half_rank(half), batter_number, sequence)

    @property
    def half(self) -> Half:
        return Half.TOP if self.half_rank == 0 else Half.BOTTOM


def half_rank(half: Half | str) -> int:
    return 0 if Half(half) == Half.TOP else 1


def activation_point(entry: LineupEntry) -> GamePoint:
    return GamePoint.at(entry.entry_inning, entry.entry_half,
                        entry.entry_batter, entry.entry_sequence)


def at_bat_start(at_bat: AtBat) -> GamePoint:
    return GamePoint.at(at_bat.inning, at_bat.half, at_bat.batter_number, 0)


def at_bat_end(at_bat: AtBat) -> GamePoint:
    return GamePoint.at(at_bat.inning, at_bat.half, at_bat.batter_number, AT_BAT_END)


def play_point(play: Play) -> GamePoint:
    return GamePoint.at(play.inning, play.half, play.batter_number, play.play_sequence)


# ---------------------------------------------------------------------------
# Interval index
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Window:
    entry: LineupEntry
    start: GamePoint
    end: Optional[GamePoint]  # exclusive; None = open until end of game

    def contains(self, point: GamePoint) -> bool:
        if point < self.start:
            return False
        return self.end is None or point < self.end


def _role_keys(entry: LineupEntry) -> list[tuple[Role, object]]:
    keys: list[tuple[Role, object]] = []
    if entry.batting_order is not None:
        keys.append((Role.BATTER, entry.batting_order))
    if entry.defensive_position is not None:
        keys.append((Role.FIELDER, entry.defensive_position))
        if entry.defensive_position == Position.P:
            keys.append((Role.PITCHER, Position.P))
    return keys


class LineupTimeline:
    """Sorted activation windows for every role of both teams' lineups."""

    def __init__(self, lineup: Iterable[LineupEntry]) -> None:
        self._by_id: dict[str, LineupEntry] = {}
        grouped: dict[tuple[TeamSide, Role, object], list[LineupEntry]] = {}
        for entry in lineup:
            self._by_id[entry.id] = entry
            for role, key in _role_keys(entry):
                grouped.setdefault((entry.team_side, role, key), []).append(entry)

        self._windows: dict[tuple[TeamSide, Role, object], list[Window]] = {}
        self._starts: dict[tuple[TeamSide, Role, object], list[GamePoint]] = {}
        for index_key, entries in grouped.items():
            # Stable sort: for identical activation points the later record wins.
            entries.sort(key=activation_point)
            windows = []
            for i, entry in enumerate(entries):
                start = activation_point(entry)
                end = activation_point(entries[i + 1]) if i + 1 < len(entries) else None
                if end is not None and end == start:
                    logger.debug(
                        "Lineup entry %s is superseded at its own activation point %s",
                        entry.id, start,
                    )
                windows.append(Window(entry, start, end))
            self._windows[index_key] = windows
            self._starts[index_key] = [w.start for w in windows]

    # -- lookups -----------------------------------------------------------

    def entry(self, entry_id: str | None) -> LineupEntry | None:
        if entry_id is None:
            return None
        return self._by_id.get(entry_id)

    def windows(self, side: TeamSide, role: Role, key: object) -> list[Window]:
        return list(self._windows.get((TeamSide(side), Role(role), key), []))

    def window_of(self, entry: LineupEntry, role: Role) -> Window | None:
        """Return the activation window *entry* holds for *role*, if any."""
        for r, key in _role_keys(entry):
            if r != role:
                continue
            for window in self._windows.get((entry.team_side, r, key), []):
                if window.entry.id == entry.id:
                    return window
        return None

    def occupant(
        self,
        side: TeamSide,
        role: Role,
        point: GamePoint,
        slot: int | None = None,
        position: Position | str | None = None,
    ) -> LineupEntry | None:
        """Return the entry holding *role* for *side* at *point*, or None."""
        role = Role(role)
        if role == Role.BATTER:
            if slot is None:
                return None
            key: object = slot
        elif role == Role.PITCHER:
            key = Position.P
        else:
            if position is None:
                return None
            key = Position(position)

        index_key = (TeamSide(side), role, key)
        starts = self._starts.get(index_key)
        if not starts:
            return None
        i = bisect_right(starts, point) - 1
        if i < 0:
            return None
        window = self._windows[index_key][i]
        if not window.contains(point):
            return None
        return window.entry


def resolve_occupant(
    lineup: Iterable[LineupEntry],
    side: TeamSide,
    role: Role,
    inning: int,
    half: Half | str,
    batter_number: int,
    sequence: int = 0,
    slot: int | None = None,
    position: Position | str | None = None,
) -> LineupEntry | None:
    """One-off lookup of the lineup entry holding *role* at a game point.

    Aggregators build a :class:`LineupTimeline` once and query it per event;
    this helper is for single questions such as "who was pitching in the
    top of the 7th when batter 31 came up?".
    """
    point = GamePoint.at(inning, half, batter_number, sequence)
    return LineupTimeline(lineup).occupant(side, role, point, slot=slot, position=position)
