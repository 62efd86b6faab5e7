"""
Season Aggregator

Folds weekly results into season standings and orders the leaderboard.
"""

from dataclasses import replace

from .engine import compute_standings_for_week
from .records import SeasonStanding
from .resolver import resolve_week, select_tiebreaker_game


def win_percentage(wins, total_games):
    if total_games <= 0:
        return 0.0
    return wins / total_games


def apply_week_result(standing, week_score, is_weekly_winner):
    """
    Add one graded week to a player's season record.

    Args:
        standing: SeasonStanding so far
        week_score: WeeklyScore for the week being applied
        is_weekly_winner: whether the player won (or shared) the week

    Returns:
        New SeasonStanding; the input is left untouched
    """
    wins = standing.wins + week_score.correct
    total_games = standing.total_games + week_score.total
    changes = {
        "wins": wins,
        "total_games": total_games,
        "weekly_wins": standing.weekly_wins + (1 if is_weekly_winner else 0),
        "win_percentage": win_percentage(wins, total_games),
    }

    # A week with nothing graded says nothing about best or worst
    if week_score.total > 0:
        correct = week_score.correct
        if standing.best_week is None or correct > standing.best_week_correct:
            changes.update(best_week=week_score.week, best_week_correct=correct)
        if standing.worst_week is None or correct < standing.worst_week_correct:
            changes.update(worst_week=week_score.week, worst_week_correct=correct)

    return replace(standing, **changes)


def rank_standings(standings):
    """Most weekly wins first, then best pick percentage; full ties keep input order"""
    return sorted(
        standings, key=lambda s: (-s.weekly_wins, -s.win_percentage)
    )


def season_players(weeks, players=None):
    """Roster order first, then everyone who turned in a pick sheet, alphabetically"""
    roster = list(players or [])
    seen = set(roster)
    others = sorted(
        {pick.player for _, picks in weeks for pick in picks} - seen
    )
    return roster + others


def build_season_standings(weeks, players=None):
    """
    Compute season standings from scratch.

    Every player seen in any week is graded in every week, so a skipped week
    counts as all incorrect instead of being left out of ``total_games``.

    Args:
        weeks: iterable of (games, picks) pairs, one per week
        players: Optional roster; rostered players appear even without picks

    Returns:
        Ranked list of SeasonStanding
    """
    weeks = list(weeks)
    everyone = season_players(weeks, players)
    standings = {player: SeasonStanding(player=player) for player in everyone}

    for games, picks in weeks:
        if not any(game.completed for game in games):
            continue

        scores = compute_standings_for_week(games, picks, players=everyone)
        resolution = resolve_week(scores, select_tiebreaker_game(games))

        for score in scores:
            standings[score.player] = apply_week_result(
                standings[score.player], score, score.player in resolution.winners
            )

    return rank_standings([standings[player] for player in everyone])
