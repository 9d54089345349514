# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the scorebook box score engine."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class TeamSide(str, Enum):
    HOME = "home"
    AWAY = "away"


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class Position(str, Enum):
    P = "P"
    C = "C"
    FIRST_BASE = "1B"
    SECOND_BASE = "2B"
    THIRD_BASE = "3B"
    SS = "SS"
    LF = "LF"
    CF = "CF"
    RF = "RF"
    DH = "DH"


class PlayType(str, Enum):
    ADVANCE = "advance"
    OUT = "out"
    ERROR = "error"
    STOLEN_BASE = "stolen_base"
    CAUGHT_STEALING = "caught_stealing"
    WILD_PITCH = "wild_pitch"
    PASSED_BALL = "passed_ball"
    BALK = "balk"
    PICKOFF = "pickoff"
    INTERFERENCE = "interference"


# ---------------------------------------------------------------------------
# At-bat result codes
# ---------------------------------------------------------------------------

class ResultInfo(NamedTuple):
    label: str
    is_hit: bool
    is_at_bat: bool
    outs: int  # outs recorded when the at-bat has no play detail


AT_BAT_RESULTS: dict[str, ResultInfo] = {
    # Hits
    "1B": ResultInfo("Single", True, True, 0),
    "2B": ResultInfo("Double", True, True, 0),
    "3B": ResultInfo("Triple", True, True, 0),
    "HR": ResultInfo("Home Run", True, True, 0),
    # Outs
    "GO": ResultInfo("Ground Out", False, True, 1),
    "FO": ResultInfo("Fly Out", False, True, 1),
    "LO": ResultInfo("Line Out", False, True, 1),
    "PO": ResultInfo("Pop Out", False, True, 1),
    "K": ResultInfo("Strikeout (Swinging)", False, True, 1),
    "KL": ResultInfo("Strikeout (Looking)", False, True, 1),
    "FC": ResultInfo("Fielder's Choice", False, True, 1),
    "DP": ResultInfo("Double Play", False, True, 2),
    "TP": ResultInfo("Triple Play", False, True, 3),
    "SAC": ResultInfo("Sacrifice Bunt", False, False, 1),
    "SF": ResultInfo("Sacrifice Fly", False, False, 1),
    # Walks/HBP
    "BB": ResultInfo("Walk", False, False, 0),
    "IBB": ResultInfo("Intentional Walk", False, False, 0),
    "HBP": ResultInfo("Hit By Pitch", False, False, 0),
    # Errors
    "E": ResultInfo("Reached on Error", False, True, 0),
    # Interference
    "CI": ResultInfo("Catcher Interference", False, False, 0),
    "INT": ResultInfo("Interference", False, False, 0),
}

WALK_RESULTS = frozenset({"BB", "IBB"})
STRIKEOUT_RESULTS = frozenset({"K", "KL"})


# ---------------------------------------------------------------------------
# Snapshot records (read-only inputs)
# ---------------------------------------------------------------------------

class Game(BaseModel):
    """Game header as stored by the scorekeeping application."""
    model_config = ConfigDict(frozen=True)

    id: str
    home_team_name: str
    away_team_name: str
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    innings_scheduled: int = Field(default=9, ge=1)
    current_inning: int = Field(default=1, ge=1)
    current_half: Half = Half.TOP
    home_final_score: int = Field(default=0, ge=0)
    away_final_score: int = Field(default=0, ge=0)
    status: GameStatus = GameStatus.IN_PROGRESS
    use_dh: bool = False
    game_date: Optional[str] = None
    location: Optional[str] = None
    updated_at: Optional[str] = Field(default=None, description="Snapshot version marker")


class LineupEntry(BaseModel):
    """One occupant of a lineup role, active from its entry point onward."""
    model_config = ConfigDict(frozen=True)

    id: str
    game_id: str
    team_side: TeamSide
    player_name: str
    player_id: Optional[str] = None
    jersey_number: Optional[str] = None
    batting_order: Optional[int] = Field(default=None, ge=1, le=9)
    defensive_position: Optional[Position] = None
    entry_inning: int = Field(default=1, ge=1)
    entry_half: Half = Half.TOP
    entry_batter: int = Field(default=0, ge=0)
    entry_sequence: int = Field(default=0, ge=0, description="Play sequence within the entry at-bat")
    is_active: bool = True


class AtBat(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    game_id: str
    inning: int = Field(ge=1)
    half: Half
    batter_number: int = Field(ge=0)
    batting_order: Optional[int] = Field(default=None, ge=1, le=9)
    batter_lineup_id: Optional[str] = None
    pitcher_lineup_id: Optional[str] = None
    result_type: str
    rbis: int = Field(default=0, ge=0)
    outs_recorded: Optional[int] = Field(default=None, ge=0, le=3)
    pitch_count: int = Field(default=0, ge=0)
    balls: int = Field(default=0, ge=0)
    strikes: int = Field(default=0, ge=0)

    @field_validator("result_type")
    @classmethod
    def validate_result_type(cls, v: str) -> str:
        code = v.strip().upper()
        if code not in AT_BAT_RESULTS:
            raise ValueError(
                f"result_type must be one of {sorted(AT_BAT_RESULTS)}, got '{v}'"
            )
        return code

    @property
    def result(self) -> ResultInfo:
        return AT_BAT_RESULTS[self.result_type]

    @property
    def outs_on_result(self) -> int:
        """Outs charged when the at-bat carries no play detail."""
        if self.outs_recorded is not None:
            return self.outs_recorded
        return self.result.outs


class Play(BaseModel):
    """A sub-event of an at-bat, carrying its own position in the game."""
    model_config = ConfigDict(frozen=True)

    id: str
    at_bat_id: str
    play_sequence: int = Field(default=1, ge=1)
    play_type: PlayType = PlayType.ADVANCE
    inning: int = Field(ge=1)
    half: Half
    batter_number: int = Field(ge=0)
    runner_lineup_id: Optional[str] = None
    runner_batting_order: Optional[int] = Field(default=None, ge=1, le=9)
    from_base: Optional[str] = None  # "0" (home plate), "1", "2", "3"
    to_base: Optional[str] = None  # "1", "2", "3", "H", "OUT"
    error_position: Optional[Position] = None
    is_out: bool = False
    run_scored: bool = False
    is_earned_run: bool = True


class GameSnapshot(BaseModel):
    """One consistent read of a game: header, both lineups and the event log."""
    model_config = ConfigDict(frozen=True)

    game: Game
    home_lineup: list[LineupEntry] = Field(default_factory=list)
    away_lineup: list[LineupEntry] = Field(default_factory=list)
    at_bats: list[AtBat] = Field(default_factory=list)
    plays: list[Play] = Field(default_factory=list)

    def lineup_for(self, side: TeamSide) -> list[LineupEntry]:
        return self.home_lineup if side == TeamSide.HOME else self.away_lineup


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class AttributionWarning(BaseModel):
    """An event that could not be credited to a lineup entry."""
    kind: str = Field(description="batter, runner, pitcher, play or inning")
    event_id: str
    team_side: Optional[TeamSide] = None
    message: str


class Discrepancy(BaseModel):
    """A mismatch between two aggregation paths that should agree."""
    team_side: TeamSide
    stat: str
    expected: int
    actual: int
    source: str


# ---------------------------------------------------------------------------
# Batting output
# ---------------------------------------------------------------------------

class BatterBoxScore(BaseModel):
    lineup_id: str
    player_name: str
    jersey_number: Optional[str] = None
    batting_order: int
    position: Optional[Position] = None
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0
    avg: Optional[float] = None
    avg_display: str = ".---"


class BattingTotals(BaseModel):
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0
    avg: Optional[float] = None
    avg_display: str = ".---"


class TeamBattingStats(BaseModel):
    team_side: Optional[TeamSide] = None
    batters: list[BatterBoxScore] = Field(default_factory=list)
    totals: BattingTotals = Field(default_factory=BattingTotals)
    warnings: list[AttributionWarning] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pitching output
# ---------------------------------------------------------------------------

class PitcherBoxScore(BaseModel):
    lineup_id: str
    player_name: str
    jersey_number: Optional[str] = None
    outs: int = 0
    ip_display: str = "0.0"
    h: int = 0
    r: int = 0
    er: int = 0
    bb: int = 0
    k: int = 0
    pc: int = 0
    batters_faced: int = 0
    era: Optional[float] = None
    era_display: str = "-.--"


class PitchingTotals(BaseModel):
    outs: int = 0
    ip_display: str = "0.0"
    h: int = 0
    r: int = 0
    er: int = 0
    bb: int = 0
    k: int = 0
    pc: int = 0
    batters_faced: int = 0
    era: Optional[float] = None
    era_display: str = "-.--"


class TeamPitchingStats(BaseModel):
    team_side: Optional[TeamSide] = None
    pitchers: list[PitcherBoxScore] = Field(default_factory=list)
    totals: PitchingTotals = Field(default_factory=PitchingTotals)
    warnings: list[AttributionWarning] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Line score output
# ---------------------------------------------------------------------------

class LineScoreTotals(BaseModel):
    r: int = 0
    h: int = 0
    e: int = 0


class LineScore(BaseModel):
    """Runs per inning for each team; ``None`` marks a half not yet played."""
    innings: int
    away: list[Optional[int]] = Field(default_factory=list)
    home: list[Optional[int]] = Field(default_factory=list)
    away_total: LineScoreTotals = Field(default_factory=LineScoreTotals)
    home_total: LineScoreTotals = Field(default_factory=LineScoreTotals)
    warnings: list[AttributionWarning] = Field(default_factory=list)

    def runs_for(self, side: TeamSide) -> list[Optional[int]]:
        return self.home if side == TeamSide.HOME else self.away

    def total_for(self, side: TeamSide) -> LineScoreTotals:
        return self.home_total if side == TeamSide.HOME else self.away_total


# ---------------------------------------------------------------------------
# Full box score view model
# ---------------------------------------------------------------------------

class TeamBoxScore(BaseModel):
    team_side: TeamSide
    team_name: str
    batting: TeamBattingStats
    pitching: TeamPitchingStats


class BoxScore(BaseModel):
    """Everything a box score, scoresheet or export surface renders."""
    game: Game
    line_score: LineScore
    away: TeamBoxScore
    home: TeamBoxScore
    warnings: list[AttributionWarning] = Field(default_factory=list)
    discrepancies: list[Discrepancy] = Field(default_factory=list)

    def team(self, side: TeamSide) -> TeamBoxScore:
        return self.home if side == TeamSide.HOME else self.away
