"""
Scoring Engine for the family pick'em

Grades a player's picks for one week against the game catalog. For the
weekly winner see app/scoring/resolver.py, for season totals see
app/scoring/season.py.
"""

from .records import Pick, WeeklyScore


def score_player(games, pick):
    """
    Grade one player's picks for a week.

    Every completed game counts toward ``total`` whether or not the player
    picked it; a missing or unknown selection is simply incorrect. Games
    still in progress only count as pending.

    Args:
        games: Game records for the week
        pick: Pick record for the player, or None if they never picked

    Returns:
        WeeklyScore
    """
    selections = pick.selections if pick else {}
    correct = 0
    total = 0
    pending = 0

    for game in games:
        if not game.completed:
            pending += 1
            continue

        total += 1
        if game.winner is not None and selections.get(game.id) == game.winner:
            correct += 1

    week = pick.week if pick else (games[0].week if games else 0)
    return WeeklyScore(
        player=pick.player if pick else "",
        week=week,
        correct=correct,
        total=total,
        pending=pending,
        tiebreaker_score=pick.tiebreaker_score if pick else None,
    )


def compute_standings_for_week(games, picks, players=None):
    """
    Score every player for a week.

    Args:
        games: Game records for the week
        picks: Pick records for the week
        players: Optional roster. Rostered players without a pick still get
            a zero-credit score so they show up in the weekly table.

    Returns:
        list of WeeklyScore, roster order first, then the remaining players
        alphabetically
    """
    picks_by_player = {}
    for pick in picks:
        picks_by_player[pick.player] = pick

    ordered = list(players or [])
    seen = set(ordered)
    ordered.extend(sorted(p for p in picks_by_player if p not in seen))

    week = games[0].week if games else (picks[0].week if picks else 0)

    scores = []
    for player in ordered:
        pick = picks_by_player.get(player) or Pick(player=player, week=week)
        scores.append(score_player(games, pick))
    return scores


def completed_games(games):
    return [game for game in games if game.completed]


def remaining_games(games):
    return [game for game in games if not game.completed]


def has_complete_picks(pick, games):
    """True when the player has a selection for every game still open"""
    if pick is None:
        return False
    return all(game.id in pick.selections for game in remaining_games(games))


def all_players_submitted(games, picks, players=None):
    """
    True when every player has picked every open game.

    Without a roster the players are the ones who turned in a sheet. Nobody
    to wait on is reported as False so an empty week never looks finished.
    """
    picks_by_player = {pick.player: pick for pick in picks}
    expected = list(players or picks_by_player)
    if not expected:
        return False
    return all(
        has_complete_picks(picks_by_player.get(player), games) for player in expected
    )


def pick_deadline(games):
    """
    The next game still open, in schedule order.

    Returns:
        dict with the game and a display ``deadline``, or None once every game
        is final
    """
    upcoming = remaining_games(games)
    if not upcoming:
        return None
    game = upcoming[0]
    when = " at ".join(part for part in (game.day, game.time) if part)
    return {"game": game, "deadline": when or None}


def pick_distribution(game, picks):
    """
    How the group split on a single game.

    Returns:
        dict with ``away_team``, ``home_team`` and ``no_pick`` buckets, each
        holding a count and the players in it
    """
    distribution = {
        "away_team": {"team": game.away_team, "count": 0, "players": []},
        "home_team": {"team": game.home_team, "count": 0, "players": []},
        "no_pick": {"count": 0, "players": []},
    }

    for pick in picks:
        selection = pick.selection_for(game.id)
        if selection == game.away_team:
            bucket = distribution["away_team"]
        elif selection == game.home_team:
            bucket = distribution["home_team"]
        else:
            bucket = distribution["no_pick"]
        bucket["count"] += 1
        bucket["players"].append(pick.player)

    return distribution
