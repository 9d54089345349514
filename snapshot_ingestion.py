# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Game snapshot ingestion module.

Handles parsing raw game snapshot payloads into the strict
:class:`~models.GameSnapshot` used by the box score engine.  Supports two
input formats:

1. **Snapshot format** -- snake_case keys as stored by the scorebook
   database: ``game``, ``home_lineup``, ``away_lineup``, ``at_bats``,
   ``plays`` (a single ``lineups`` list split by ``team_side`` is also
   accepted).
2. **Client format** -- the camelCase shape the browser client passes
   around: ``game``, ``homeLineup``, ``awayLineup``, ``atBats``, ``plays``,
   with camelCase field names inside the records.

Loose field spellings, half/position casing, ``0`` batting orders and
play positions inherited from their at-bat are all normalised here, so the
aggregators only ever see one representation.  All ingestion paths
validate the result with the Pydantic models and return clear errors for
missing or invalid data.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from models import AtBat, Game, GameSnapshot, LineupEntry, Play

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class IngestionError(Exception):
    """Raised when a game snapshot payload cannot be ingested."""

    def __init__(self, message: str, field: str | None = None,
                 details: list[str] | None = None):
        self.field = field
        self.details = details or []
        super().__init__(message)


class IngestionValidationError(IngestionError):
    """Raised when a parsed snapshot fails Pydantic validation."""

    def __init__(self, message: str, validation_errors: list[dict]):
        self.validation_errors = validation_errors
        super().__init__(message, details=[
            f"{e.get('loc', '?')}: {e.get('msg', '?')}" for e in validation_errors
        ])


# ---------------------------------------------------------------------------
# Field aliases
# ---------------------------------------------------------------------------

GAME_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "game_id", "gameId"),
    "home_team_name": ("home_team_name", "homeTeamName", "home_team", "home"),
    "away_team_name": ("away_team_name", "awayTeamName", "away_team", "away"),
    "home_team_id": ("home_team_id", "homeTeamId"),
    "away_team_id": ("away_team_id", "awayTeamId"),
    "innings_scheduled": ("innings_scheduled", "inningsScheduled", "innings"),
    "current_inning": ("current_inning", "currentInning"),
    "current_half": ("current_half", "currentHalf"),
    "home_final_score": ("home_final_score", "homeFinalScore", "home_score"),
    "away_final_score": ("away_final_score", "awayFinalScore", "away_score"),
    "status": ("status",),
    "use_dh": ("use_dh", "useDh", "dh"),
    "game_date": ("game_date", "gameDate", "date"),
    "location": ("location",),
    "updated_at": ("updated_at", "updatedAt", "version"),
}

LINEUP_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "lineup_id", "lineupId"),
    "game_id": ("game_id", "gameId"),
    "team_side": ("team_side", "teamSide", "side"),
    "player_name": ("player_name", "playerName", "name"),
    "player_id": ("player_id", "playerId"),
    "jersey_number": ("jersey_number", "jerseyNumber", "jersey"),
    "batting_order": ("batting_order", "battingOrder", "order"),
    "defensive_position": ("defensive_position", "defensivePosition", "position"),
    "entry_inning": ("entry_inning", "entryInning"),
    "entry_half": ("entry_half", "entryHalf"),
    "entry_batter": ("entry_batter", "entryBatter"),
    "entry_sequence": ("entry_sequence", "entrySequence"),
    "is_active": ("is_active", "isActive", "active"),
}

AT_BAT_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "at_bat_id", "atBatId"),
    "game_id": ("game_id", "gameId"),
    "inning": ("inning",),
    "half": ("half",),
    "batter_number": ("batter_number", "batterNumber"),
    "batting_order": ("batting_order", "battingOrder"),
    "batter_lineup_id": ("batter_lineup_id", "batterLineupId"),
    "pitcher_lineup_id": ("pitcher_lineup_id", "pitcherLineupId"),
    "result_type": ("result_type", "resultType", "result"),
    "rbis": ("rbis", "rbi"),
    "outs_recorded": ("outs_recorded", "outsRecorded", "outs"),
    "pitch_count": ("pitch_count", "pitchCount"),
    "balls": ("balls",),
    "strikes": ("strikes",),
}

PLAY_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "play_id", "playId"),
    "at_bat_id": ("at_bat_id", "atBatId"),
    "play_sequence": ("play_sequence", "playSequence", "sequence"),
    "play_type": ("play_type", "playType", "type"),
    "inning": ("inning",),
    "half": ("half",),
    "batter_number": ("batter_number", "batterNumber"),
    "runner_lineup_id": ("runner_lineup_id", "runnerLineupId"),
    "runner_batting_order": ("runner_batting_order", "runnerBattingOrder"),
    "from_base": ("from_base", "fromBase"),
    "to_base": ("to_base", "toBase"),
    "error_position": ("error_position", "errorPosition"),
    "is_out": ("is_out", "isOut"),
    "run_scored": ("run_scored", "runScored"),
    "is_earned_run": ("is_earned_run", "isEarnedRun"),
}


# ---------------------------------------------------------------------------
# Format detection
# ---------------------------------------------------------------------------

def detect_format(payload: dict[str, Any]) -> str:
    """Detect the format of a game snapshot payload.

    Returns:
        ``"snapshot"`` for the snake_case database shape, ``"client"`` for
        the camelCase browser shape, or ``"unknown"`` otherwise.
    """
    if "game" not in payload:
        return "unknown"
    if "at_bats" in payload:
        return "snapshot"
    if "atBats" in payload:
        return "client"
    return "unknown"


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def _pick(raw: dict[str, Any], fields: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    """Collapse alias spellings onto canonical field names.

    The first alias present (and not None) wins; unknown keys are dropped.
    """
    out: dict[str, Any] = {}
    for name, aliases in fields.items():
        for alias in aliases:
            if raw.get(alias) is not None:
                out[name] = raw[alias]
                break
    return out


def _normalize_half(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip().lower()
    if text in ("t", "top", "away"):
        return "top"
    if text in ("b", "bot", "bottom", "home"):
        return "bottom"
    return text


def _normalize_side(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _normalize_position(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip().upper()
        return text or None
    return value


def _normalize_order(value: Any) -> Any:
    """Batting order 0 or "" means bench."""
    if value in (0, "0", ""):
        return None
    return value


def _normalize_base(value: Any) -> Any:
    if value is None:
        return None
    text = str(value).strip().upper()
    if text in ("HOME", "HP"):
        return "H"
    return text


# ---------------------------------------------------------------------------
# Record normalisers
# ---------------------------------------------------------------------------

def normalize_game(raw: dict[str, Any]) -> dict[str, Any]:
    data = _pick(raw, GAME_FIELDS)
    if "current_half" in data:
        data["current_half"] = _normalize_half(data["current_half"])
    if isinstance(data.get("status"), str):
        data["status"] = data["status"].strip().lower()
    if "id" in data:
        data["id"] = str(data["id"])
    return data


def normalize_lineup_entry(raw: dict[str, Any], game_id: str,
                           side: str | None = None) -> dict[str, Any]:
    """Normalise one lineup record; *side* is the list it came from."""
    data = _pick(raw, LINEUP_FIELDS)
    data.setdefault("game_id", game_id)
    if "team_side" in data:
        data["team_side"] = _normalize_side(data["team_side"])
        if side is not None and data["team_side"] != side:
            raise IngestionError(
                f"Lineup entry {data.get('id')} is listed under {side} "
                f"but has team_side {data['team_side']!r}",
                field="team_side",
            )
    elif side is not None:
        data["team_side"] = side
    if "batting_order" in data:
        data["batting_order"] = _normalize_order(data["batting_order"])
    if "defensive_position" in data:
        data["defensive_position"] = _normalize_position(data["defensive_position"])
    if "entry_half" in data:
        data["entry_half"] = _normalize_half(data["entry_half"])
    if "jersey_number" in data:
        data["jersey_number"] = str(data["jersey_number"])
    for key in ("id", "game_id", "player_id"):
        if key in data:
            data[key] = str(data[key])
    return data


def normalize_at_bat(raw: dict[str, Any], game_id: str) -> dict[str, Any]:
    data = _pick(raw, AT_BAT_FIELDS)
    data.setdefault("game_id", game_id)
    if "half" in data:
        data["half"] = _normalize_half(data["half"])
    if "batting_order" in data:
        data["batting_order"] = _normalize_order(data["batting_order"])
    for key in ("id", "game_id", "batter_lineup_id", "pitcher_lineup_id"):
        if key in data:
            data[key] = str(data[key])
    return data


def normalize_play(raw: dict[str, Any], at_bat: dict[str, Any] | None,
                   default_sequence: int) -> dict[str, Any]:
    """Normalise one play; position fields default to the parent at-bat's."""
    data = _pick(raw, PLAY_FIELDS)
    data.setdefault("play_sequence", default_sequence)
    if at_bat is not None:
        for key in ("inning", "half", "batter_number"):
            if key not in data and key in at_bat:
                data[key] = at_bat[key]
    if "half" in data:
        data["half"] = _normalize_half(data["half"])
    if isinstance(data.get("play_type"), str):
        data["play_type"] = data["play_type"].strip().lower()
    if "error_position" in data:
        data["error_position"] = _normalize_position(data["error_position"])
    for key in ("from_base", "to_base"):
        if key in data:
            data[key] = _normalize_base(data[key])
    if "runner_batting_order" in data:
        data["runner_batting_order"] = _normalize_order(data["runner_batting_order"])
    for key in ("id", "at_bat_id", "runner_lineup_id"):
        if key in data:
            data[key] = str(data[key])
    return data


# ---------------------------------------------------------------------------
# Validation and model construction
# ---------------------------------------------------------------------------

def _collect(errors: list[dict], model: str, index: int | None, exc: ValidationError) -> None:
    for e in exc.errors():
        loc = str(e.get("loc", ""))
        errors.append({
            "model": model,
            "loc": loc if index is None else f"[{index}]{loc}",
            "msg": e.get("msg", ""),
            "type": e.get("type", ""),
        })


def _require_object(errors: list[dict], model: str, index: int, raw: Any) -> bool:
    if isinstance(raw, dict):
        return True
    errors.append({
        "model": model,
        "loc": f"[{index}]",
        "msg": f"Input should be an object, got {type(raw).__name__}",
        "type": "model_type",
    })
    return False


def _require_list(value: Any, field: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise IngestionError(
            f"'{field}' must be a list, got {type(value).__name__}",
            field=field,
        )
    return value


def _split_payload(payload: dict[str, Any], fmt: str) -> tuple[Any, list, list, list, list]:
    if fmt == "client":
        return (
            payload["game"],
            _require_list(payload.get("homeLineup"), "homeLineup"),
            _require_list(payload.get("awayLineup"), "awayLineup"),
            _require_list(payload.get("atBats"), "atBats"),
            _require_list(payload.get("plays"), "plays"),
        )
    home = list(_require_list(payload.get("home_lineup"), "home_lineup"))
    away = list(_require_list(payload.get("away_lineup"), "away_lineup"))
    for i, entry in enumerate(_require_list(payload.get("lineups"), "lineups")):
        if not isinstance(entry, dict):
            raise IngestionError(
                f"Lineup entry {i} must be an object, got {type(entry).__name__}",
                field="lineups",
            )
        side = _normalize_side(_pick(entry, {"s": LINEUP_FIELDS["team_side"]}).get("s"))
        if side == "home":
            home.append(entry)
        elif side == "away":
            away.append(entry)
        else:
            raise IngestionError(
                f"Lineup entry {entry.get('id')} has no team side",
                field="team_side",
            )
    return (
        payload["game"],
        home,
        away,
        _require_list(payload.get("at_bats"), "at_bats"),
        _require_list(payload.get("plays"), "plays"),
    )


def ingest_snapshot(payload: dict[str, Any] | str) -> GameSnapshot:
    """Ingest a game snapshot payload and return a validated GameSnapshot.

    This is the primary entry point. It auto-detects the payload format
    and normalises every record before validation.

    Args:
        payload: Either a JSON string or a dict in snapshot or client format.

    Returns:
        A frozen :class:`GameSnapshot`.

    Raises:
        IngestionError: If the payload format is not recognized or required
            data is missing.
        IngestionValidationError: If normalised data fails Pydantic validation.
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise IngestionError(
                f"Invalid JSON payload: {exc}",
                field="payload",
            ) from exc

    if not isinstance(payload, dict):
        raise IngestionError(
            f"Payload must be a dict or JSON string, got {type(payload).__name__}",
            field="payload",
        )

    fmt = detect_format(payload)
    if fmt == "unknown":
        raise IngestionError(
            "Unrecognized payload format. Expected a 'game' header with "
            "'at_bats' (snapshot format) or 'atBats' (client format).",
            field="payload",
        )

    raw_game, raw_home, raw_away, raw_at_bats, raw_plays = _split_payload(payload, fmt)
    if not isinstance(raw_game, dict):
        raise IngestionError("'game' must be an object", field="game")

    errors: list[dict] = []

    game = None
    game_dict = normalize_game(raw_game)
    try:
        game = Game(**game_dict)
    except ValidationError as exc:
        _collect(errors, "Game", None, exc)
    game_id = str(game_dict.get("id", ""))

    lineups: dict[str, list[LineupEntry]] = {"home": [], "away": []}
    for side, raw_entries in (("home", raw_home), ("away", raw_away)):
        for i, raw in enumerate(raw_entries):
            if not _require_object(errors, f"LineupEntry[{side}]", i, raw):
                continue
            try:
                lineups[side].append(LineupEntry(**normalize_lineup_entry(raw, game_id, side)))
            except ValidationError as exc:
                _collect(errors, f"LineupEntry[{side}]", i, exc)

    at_bats: list[AtBat] = []
    at_bat_dicts: dict[str, dict[str, Any]] = {}
    for i, raw in enumerate(raw_at_bats):
        if not _require_object(errors, "AtBat", i, raw):
            continue
        data = normalize_at_bat(raw, game_id)
        try:
            at_bats.append(AtBat(**data))
        except ValidationError as exc:
            _collect(errors, "AtBat", i, exc)
            continue
        at_bat_dicts[data["id"]] = data

    plays: list[Play] = []
    sequence_by_at_bat: dict[str, int] = {}
    for i, raw in enumerate(raw_plays):
        if not _require_object(errors, "Play", i, raw):
            continue
        at_bat_id = _pick(raw, {"a": PLAY_FIELDS["at_bat_id"]}).get("a")
        at_bat_id = str(at_bat_id) if at_bat_id is not None else None
        parent = at_bat_dicts.get(at_bat_id) if at_bat_id is not None else None
        if parent is None:
            logger.warning("Dropping play %s: unknown at-bat %s", raw.get("id"), at_bat_id)
            continue
        sequence_by_at_bat[at_bat_id] = sequence_by_at_bat.get(at_bat_id, 0) + 1
        try:
            plays.append(Play(**normalize_play(raw, parent, sequence_by_at_bat[at_bat_id])))
        except ValidationError as exc:
            _collect(errors, "Play", i, exc)

    if errors:
        raise IngestionValidationError(
            f"Validation failed with {len(errors)} error(s)",
            validation_errors=errors,
        )

    return GameSnapshot(
        game=game,
        home_lineup=lineups["home"],
        away_lineup=lineups["away"],
        at_bats=at_bats,
        plays=plays,
    )


# ---------------------------------------------------------------------------
# JSON file ingestion convenience
# ---------------------------------------------------------------------------

def load_snapshot(path: str | Path) -> GameSnapshot:
    """Load a game snapshot JSON file and ingest it.

    Raises:
        FileNotFoundError: If the file does not exist.
        IngestionError: On parse/validation errors.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Game snapshot file not found: {path}")

    with open(p) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise IngestionError(f"Invalid JSON in {p.name}: {exc}", field="payload") from exc

    return ingest_snapshot(data)
