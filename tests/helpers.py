from app.scoring import Game


def final(game_id, away_score, home_score, week=1, away="Away", home="Home", **kw):
    """A completed game record with the winner derived from the score"""
    return Game(id=game_id, week=week, away_team=away, home_team=home, **kw).with_result(
        away_score, home_score
    )


def scheduled(game_id, week=1, away="Away", home="Home", **kw):
    return Game(id=game_id, week=week, away_team=away, home_team=home, **kw)
