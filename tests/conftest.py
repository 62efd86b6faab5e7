import pytest

from app import cache, create_app, db
from app.services.pick_store import PickStore


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        cache.clear()
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return PickStore()


@pytest.fixture
def week_one(store):
    """Three games in week 1, the Monday game flagged as tiebreaker"""
    games = []
    for away, home, day in [
        ("Baltimore", "Kansas City", "Thursday, Sep. 5"),
        ("Green Bay", "Philadelphia", "Sunday, Sep. 8"),
        ("NY Jets", "San Francisco", "Monday, Sep. 9"),
    ]:
        game, message = store.add_game(1, away, home, day=day, over_under=45.5)
        assert game is not None, message
        games.append(game)
    db.session.commit()
    return games

