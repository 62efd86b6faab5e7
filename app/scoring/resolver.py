"""
Weekly Resolver

Decides who won a week. Primary key is correct picks (highest wins); ties go
to the player whose tiebreaker guess lands closest to the combined score of
the week's tiebreaker game. Exact ties at either level are shared.
"""

import logging
import math

from .records import WeekResolution

logger = logging.getLogger(__name__)

# Distance given to a player who skipped the tiebreaker
MISSING_GUESS_DISTANCE = math.inf


def select_tiebreaker_game(games):
    """
    Pick the single game whose total breaks ties for the week.

    The flagged game wins; if the schedule flags more than one, the last
    scheduled (highest id) is used. Without a flag, fall back to the last
    Monday game.
    """
    flagged = [game for game in games if game.is_tiebreaker_game]
    if len(flagged) > 1:
        logger.warning(
            f"Week {flagged[0].week} has {len(flagged)} tiebreaker games flagged, "
            f"using game {max(g.id for g in flagged)}"
        )
    if flagged:
        return max(flagged, key=lambda g: g.id)

    monday = [game for game in games if "monday" in (game.day or "").lower()]
    if monday:
        return max(monday, key=lambda g: g.id)
    return None


def tiebreaker_distance(score, target):
    if score.tiebreaker_score is None:
        return MISSING_GUESS_DISTANCE
    return abs(score.tiebreaker_score - target)


def resolve_week(scores, tiebreaker_game):
    """
    Determine the weekly winner(s).

    Args:
        scores: WeeklyScore records for every player in the week
        tiebreaker_game: Game used to break ties, or None

    Returns:
        WeekResolution. When the tiebreaker game is not final yet the tied
        leaders are returned together and resolution is left for later.
    """
    if not scores:
        return WeekResolution()

    max_correct = max(score.correct for score in scores)
    candidates = [score for score in scores if score.correct == max_correct]

    if len(candidates) == 1:
        return WeekResolution(winners=(candidates[0].player,))

    if (
        tiebreaker_game is None
        or not tiebreaker_game.completed
        or tiebreaker_game.total_points is None
    ):
        return WeekResolution(winners=tuple(c.player for c in candidates))

    target = tiebreaker_game.total_points
    ranked = sorted(candidates, key=lambda c: tiebreaker_distance(c, target))
    best = tiebreaker_distance(ranked[0], target)
    winners = tuple(
        c.player for c in ranked if tiebreaker_distance(c, target) == best
    )

    return WeekResolution(
        winners=winners, used_tiebreaker=True, tiebreaker_target=target
    )
