# /// script
# requires-python = ">=3.12"
# dependencies = ["flask>=3.0", "pydantic>=2.0"]
# ///
"""Web API for the scorebook box score engine.

Serves box scores for the game snapshots stored in the snapshot directory,
and computes box scores for snapshots posted by the scorekeeping client.

Usage:
    uv run app.py
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, Response, jsonify, request

import config
from boxscore import build_box_score, render_box_score_text
from models import BoxScore, GameSnapshot
from snapshot_ingestion import IngestionError, IngestionValidationError, ingest_snapshot, load_snapshot

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = Flask(__name__)

# Latest computed box score per game, keyed on (source, game id) and
# tagged with the (snapshot version, ERA innings) it was computed for
BOX_SCORES: dict[tuple[str, str], tuple[tuple[str, int], BoxScore]] = {}


def _invalid_name(name: str) -> bool:
    return "/" in name or "\\" in name or ".." in name


def _snapshot_path(game_id: str) -> Path:
    return config.get_snapshot_dir() / f"{game_id}.json"


def _box_score_for(key: tuple[str, str] | None, version: str | None,
                   snapshot: GameSnapshot, era_innings: int) -> BoxScore:
    """Compute a box score, reusing the cached one while the version matches.

    Only the latest version of each game is kept.
    """
    if key is None or version is None:
        return build_box_score(snapshot, innings_per_game=era_innings)
    tag = (version, era_innings)
    cached = BOX_SCORES.get(key)
    if cached is not None and cached[0] == tag:
        return cached[1]
    box = build_box_score(snapshot, innings_per_game=era_innings)
    BOX_SCORES[key] = (tag, box)
    return box


def _load_stored_box_score(game_id: str, era_innings: int) -> BoxScore:
    """Box score for a stored snapshot, recomputed only when the file changes.

    Raises:
        FileNotFoundError: If no snapshot is stored under *game_id*.
        IngestionError: If the stored snapshot is invalid.
    """
    path = _snapshot_path(game_id)
    if not path.exists():
        raise FileNotFoundError(f"Game snapshot file not found: {path.name}")
    key = ("stored", game_id)
    version = str(path.stat().st_mtime_ns)
    cached = BOX_SCORES.get(key)
    if cached is not None and cached[0] == (version, era_innings):
        return cached[1]
    return _box_score_for(key, version, load_snapshot(path), era_innings)


def _config_error_response(exc: ValueError):
    logger.error("Invalid configuration: %s", exc)
    return jsonify({"error": f"Server misconfigured: {exc}"}), 500


def _ingestion_error_response(exc: IngestionError):
    body = {"error": str(exc)}
    if exc.details:
        body["details"] = exc.details
    return jsonify(body), 400


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.route("/api/games")
def api_list_games():
    snapshot_dir = config.get_snapshot_dir()
    games = []
    if not snapshot_dir.is_dir():
        return jsonify(games)
    for f in sorted(snapshot_dir.glob("*.json")):
        try:
            snapshot = load_snapshot(f)
        except (IngestionError, OSError) as e:
            logger.warning("Skipping unreadable snapshot %s: %s", f.name, e)
            continue
        game = snapshot.game
        games.append({
            "game_id": f.stem,
            "home_team": game.home_team_name,
            "away_team": game.away_team_name,
            "game_date": game.game_date,
            "status": game.status.value,
            "final_score": {"home": game.home_final_score, "away": game.away_final_score},
        })
    return jsonify(games)


@app.route("/api/games/<game_id>/box-score")
def api_game_box_score(game_id: str):
    if _invalid_name(game_id):
        return jsonify({"error": "Invalid game id"}), 400
    try:
        era_innings = config.get_era_innings()
    except ValueError as e:
        return _config_error_response(e)
    try:
        box = _load_stored_box_score(game_id, era_innings)
    except FileNotFoundError:
        return jsonify({"error": "Not found"}), 404
    except IngestionError as e:
        return _ingestion_error_response(e)
    return jsonify(box.model_dump(mode="json"))


@app.route("/api/games/<game_id>/box-score.txt")
def api_game_box_score_text(game_id: str):
    if _invalid_name(game_id):
        return "Invalid game id", 400
    try:
        era_innings = config.get_era_innings()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return f"Server misconfigured: {e}", 500
    try:
        box = _load_stored_box_score(game_id, era_innings)
    except FileNotFoundError:
        return "Not found", 404
    except IngestionError as e:
        return f"Invalid snapshot: {e}", 400
    return Response(render_box_score_text(box), mimetype="text/plain")


@app.route("/api/box-score", methods=["POST"])
def api_box_score():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be a JSON game snapshot"}), 400
    try:
        era_innings = config.get_era_innings()
    except ValueError as e:
        return _config_error_response(e)
    try:
        snapshot = ingest_snapshot(data)
    except IngestionValidationError as e:
        return jsonify({
            "error": str(e),
            "details": e.details,
            "validation_errors": e.validation_errors,
        }), 400
    except IngestionError as e:
        return _ingestion_error_response(e)

    version = snapshot.game.updated_at or None
    box = _box_score_for(("posted", snapshot.game.id), version, snapshot, era_innings)
    return jsonify(box.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    config.configure_logging()
    config.get_era_innings()
    config.get_snapshot_dir().mkdir(parents=True, exist_ok=True)
    app.run(debug=True, host="0.0.0.0", port=config.get_port())
