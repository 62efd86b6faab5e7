from functools import wraps

from flask import jsonify, request

from app.routes.api import bp
from app.scoring import (
    all_players_submitted,
    has_complete_picks,
    pick_deadline,
    pick_distribution,
)
from app.scoring.records import InvalidRecordError
from app.services import results_service
from app.services.pick_store import PickStore
from app.services.standings_service import StandingsService
from app.utils.cache_utils import cached_route, invalidate_route_cache


def add_security_headers(f):
    """Add no-store headers to responses carrying player data"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = jsonify_response(f(*args, **kwargs))
        response.headers["Cache-Control"] = (
            "no-store, no-cache, must-revalidate, max-age=0"
        )
        return response

    return decorated_function


def jsonify_response(result):
    """Turn a dict or (dict, status) view result into a Response"""
    if isinstance(result, tuple):
        body, status = result
        response = jsonify(body)
        response.status_code = status
        return response
    return jsonify(result)


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@bp.route("/week/current")
def current_week():
    """Get the week players are currently picking"""
    return jsonify({"current_week": PickStore().get_current_week()})


@bp.route("/week/current", methods=["PUT"])
def set_current_week():
    data = _json_body()
    week, message = PickStore().set_current_week(data.get("week"))
    if week is None:
        return jsonify({"error": message}), 400

    invalidate_route_cache()
    return jsonify({"success": True, "current_week": week, "message": message})


@bp.route("/weeks/<int:week>/games")
@cached_route(timeout=300, key_prefix="week_games")  # Short, scores change live
def week_games(week):
    """Get games for a specific week"""
    games = PickStore().fetch_games_for_week(week)
    return {"week": week, "games": [game.to_dict() for game in games]}


@bp.route("/weeks/<int:week>/picks")
@add_security_headers
def week_picks(week):
    """Every player's picks for a week"""
    store = PickStore()
    games = store.fetch_games_for_week(week)
    picks = store.fetch_all_picks_for_week(week)
    return {
        "week": week,
        "picks": [
            dict(pick.to_dict(), complete=has_complete_picks(pick, games))
            for pick in picks
        ],
        "all_submitted": all_players_submitted(
            games, picks, players=StandingsService().roster
        ),
        "deadline": _deadline_dict(pick_deadline(games)),
    }


def _deadline_dict(deadline):
    if deadline is None:
        return None
    return dict(deadline, game=deadline["game"].to_dict())


@bp.route("/players")
def players():
    """Roster plus anyone else who has turned in picks"""
    return jsonify({"players": StandingsService().known_players()})


@bp.route("/weeks/<int:week>/picks/<player>")
@add_security_headers
def player_picks(week, player):
    pick = PickStore().fetch_pick(player, week)
    if pick is None:
        return {"error": f"No picks for {player} in week {week}"}, 404
    return pick.to_dict()


@bp.route("/weeks/<int:week>/picks", methods=["POST"])
def save_pick(week):
    """Save one game pick; other games already picked are kept"""
    data = _json_body()

    missing = [
        name for name in ("player", "game_id", "team") if data.get(name) in (None, "")
    ]
    if missing:
        return jsonify({"error": "Missing required fields", "missing": missing}), 400

    try:
        game_id = int(data["game_id"])
    except (TypeError, ValueError):
        return jsonify({"error": "game_id must be a number"}), 400

    pick, message = PickStore().upsert_pick(
        data["player"], week, game_id, data["team"], data.get("tiebreaker")
    )
    if pick is None:
        status = 404 if message == "Game not found" else 400
        return jsonify({"error": message}), status

    invalidate_route_cache()
    return jsonify({"success": True, "message": message, "pick": pick.to_dict()})


@bp.route("/weeks/<int:week>/picks/batch", methods=["POST"])
def save_picks_batch(week):
    """Save several picks at once; each one succeeds or fails on its own"""
    items = _json_body().get("picks")
    if not isinstance(items, list) or not items:
        return jsonify({"error": "picks must be a non-empty list"}), 400

    results = PickStore().save_picks(week, items)
    saved = sum(1 for result in results if result["success"])
    if saved:
        invalidate_route_cache()

    return jsonify(
        {
            "success": saved == len(results),
            "saved": saved,
            "failed": len(results) - saved,
            "results": results,
        }
    )


@bp.route("/weeks/<int:week>/picks/<player>/tiebreaker", methods=["PUT"])
def save_tiebreaker(week, player):
    data = _json_body()
    pick, message = PickStore().set_tiebreaker(player, week, data.get("tiebreaker"))
    if pick is None:
        return jsonify({"error": message}), 400

    invalidate_route_cache()
    return jsonify({"success": True, "message": message, "pick": pick.to_dict()})


@bp.route("/weeks/<int:week>/scores")
@cached_route(timeout=120, key_prefix="week_scores")
def week_scores(week):
    """Graded picks and the weekly winner(s)"""
    summary = StandingsService().week_summary(week)
    tiebreaker_game = summary["tiebreaker_game"]
    return {
        "week": week,
        "scores": [score.to_dict() for score in summary["scores"]],
        "resolution": summary["resolution"].to_dict(),
        "tiebreaker_game": tiebreaker_game.to_dict() if tiebreaker_game else None,
        "stale": summary["stale"],
    }


@bp.route("/weeks/<int:week>/games/<int:game_id>/distribution")
def game_distribution(week, game_id):
    """How the players split on one game"""
    store = PickStore()
    game = store.fetch_game(game_id)
    if game is None or game.week != week:
        return jsonify({"error": "Game not found"}), 404

    picks = store.fetch_all_picks_for_week(week)
    return jsonify({"game": game.to_dict(), "distribution": pick_distribution(game, picks)})


@bp.route("/games/<int:game_id>/result", methods=["POST"])
def record_game_result(game_id):
    """Record a game's score from the result feed"""
    data = _json_body()
    game, message = results_service.record_result(
        game_id,
        data.get("away_score"),
        data.get("home_score"),
        completed=bool(data.get("completed", True)),
    )
    if game is None:
        status = 404 if message == "Game not found" else 400
        return jsonify({"error": message}), status

    invalidate_route_cache()
    return jsonify({"success": True, "message": message, "game": game.to_dict()})


@bp.route("/games/<int:game_id>/result", methods=["DELETE"])
def clear_game_result(game_id):
    """Put a game back to unplayed after a mistaken result"""
    game, message = results_service.clear_result(game_id)
    if game is None:
        return jsonify({"error": message}), 404

    invalidate_route_cache()
    return jsonify({"success": True, "message": message, "game": game.to_dict()})


@bp.route("/standings")
def standings():
    """Season leaderboard"""
    rows, stale = StandingsService().season_standings()
    return jsonify(
        {
            "standings": [
                dict(standing.to_dict(), rank=rank)
                for rank, standing in enumerate(rows, start=1)
            ],
            "stale": stale,
        }
    )


@bp.route("/standings/recompute", methods=["POST"])
def recompute_standings():
    data = _json_body()
    try:
        rows = StandingsService().recompute_season(
            through_week=data.get("through_week")
        )
    except InvalidRecordError as e:
        return jsonify({"error": str(e)}), 400

    invalidate_route_cache()
    return jsonify(
        {
            "success": True,
            "standings": [
                dict(standing.to_dict(), rank=rank)
                for rank, standing in enumerate(rows, start=1)
            ],
        }
    )

