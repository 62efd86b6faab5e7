"""
Result ingestion

Applies final (or live) scores to the game catalog. This is the only writer
of ``completed``, the scores and ``winner``.
"""

import logging

from app import db
from app.models import Game
from app.services.standings_service import StandingsService, StorageUnavailable

logger = logging.getLogger(__name__)


def record_result(game_id, away_score, home_score, completed=True):
    """
    Record a score for a game.

    The winner is derived from the score; a tied final leaves it empty.

    Final scores rebuild the season standings so the leaderboard follows
    results without a manual recompute.

    Returns:
        (Game record, message) or (None, error message)
    """
    game = db.session.get(Game, game_id)
    if game is None:
        return None, "Game not found"

    try:
        away_score = int(away_score)
        home_score = int(home_score)
    except (TypeError, ValueError):
        return None, "Scores must be whole numbers"
    if away_score < 0 or home_score < 0:
        return None, "Scores cannot be negative"

    game.update_score(away_score, home_score, completed=completed)
    db.session.commit()

    record = game.to_record()
    if record.is_tie:
        logger.warning(
            f"Game {game_id} ({game.away_team} @ {game.home_team}) ended tied "
            f"{away_score}-{home_score}; no pick is graded correct"
        )
    else:
        logger.info(
            f"Recorded {game.away_team} {away_score} @ {game.home_team} {home_score} "
            f"(final={completed})"
        )

    if completed:
        refresh_standings()
    return record, "Result recorded"


def clear_result(game_id):
    """Put a game back to unplayed, e.g. after a mistaken entry"""
    game = db.session.get(Game, game_id)
    if game is None:
        return None, "Game not found"
    game.update_score(None, None, completed=False)
    db.session.commit()
    refresh_standings()
    return game.to_record(), "Result cleared"


def refresh_standings():
    """
    Recompute season standings after a result changed.

    The result is already committed, so a storage failure here only leaves
    the previous standings in place.
    """
    try:
        StandingsService().recompute_season()
    except StorageUnavailable as e:
        logger.error(f"Standings not refreshed after result change: {e}")
