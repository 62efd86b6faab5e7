from app import db
from app.models import Game
from app.scoring import SeasonStanding
from app.services import results_service


def test_add_game_flags_monday_as_tiebreaker(week_one):
    assert [g.is_tiebreaker_game for g in week_one] == [False, False, True]


def test_add_game_rejects_invalid(store):
    game, message = store.add_game(1, "Dallas", "Dallas")
    assert game is None
    assert "twice" in message

    game, message = store.add_game(19, "Dallas", "Miami")
    assert game is None


def test_fetch_games_for_week(store, week_one):
    games = store.fetch_games_for_week(1)
    assert [g.id for g in games] == [g.id for g in week_one]
    assert store.fetch_games_for_week(2) == []


def test_fetch_games_skips_malformed_rows(store, week_one):
    row = db.session.get(Game, week_one[0].id)
    row.completed = True
    row.winner = "Nobody"
    db.session.commit()

    assert [g.id for g in store.fetch_games_for_week(1)] == [g.id for g in week_one[1:]]


def test_upsert_merges_per_game(store, week_one):
    first, second, _ = week_one

    pick, message = store.upsert_pick("Kid1", 1, first.id, first.home_team, 45)
    assert message == "Pick saved"
    pick, _ = store.upsert_pick("Kid1", 1, second.id, second.away_team)

    assert pick.selections == {first.id: first.home_team, second.id: second.away_team}
    assert pick.tiebreaker_score == 45


def test_upsert_overwrites_same_game(store, week_one):
    game = week_one[0]
    store.upsert_pick("Kid1", 1, game.id, game.home_team)
    pick, message = store.upsert_pick("Kid1", 1, game.id, game.away_team, 51)

    assert message == "Pick updated"
    assert pick.selections == {game.id: game.away_team}
    assert pick.tiebreaker_score == 51
    assert store.fetch_pick("Kid1", 1) == pick


def test_upsert_rejects_bad_input(store, week_one):
    game = week_one[0]

    assert store.upsert_pick("Kid1", 1, 999, "Baltimore") == (None, "Game not found")
    assert store.upsert_pick("Kid1", 2, game.id, game.home_team)[0] is None
    assert store.upsert_pick("Kid1", 1, game.id, "Dallas")[0] is None
    assert store.upsert_pick("", 1, game.id, game.home_team)[0] is None
    assert store.upsert_pick(7, 1, game.id, game.home_team)[0] is None
    assert store.upsert_pick(None, 1, game.id, game.home_team)[0] is None
    assert store.upsert_pick("Kid1", 1, game.id, game.home_team, 200)[0] is None

    results_service.record_result(game.id, 20, 17)
    pick, message = store.upsert_pick("Kid1", 1, game.id, game.home_team)
    assert pick is None
    assert message == "Cannot pick completed games"
    assert store.fetch_pick("Kid1", 1) is None


def test_set_tiebreaker(store, week_one):
    pick, _ = store.set_tiebreaker("Kid2", 1, "38")
    assert pick.tiebreaker_score == 38
    assert pick.selections == {}

    assert store.set_tiebreaker("Kid2", 1, None)[0] is None
    assert store.fetch_pick("Kid2", 1).tiebreaker_score == 38


def test_fetch_all_picks_for_week_sorted(store, week_one):
    game = week_one[0]
    store.upsert_pick("Zed", 1, game.id, game.home_team)
    store.upsert_pick("Amy", 1, game.id, game.away_team)

    assert [p.player for p in store.fetch_all_picks_for_week(1)] == ["Amy", "Zed"]
    assert store.fetch_all_picks_for_week(2) == []


def test_persist_and_fetch_standings(store):
    standings = [
        SeasonStanding(player="b", wins=5, weekly_wins=2, total_games=6, win_percentage=5 / 6,
                       best_week=1, best_week_correct=3, worst_week=2, worst_week_correct=2),
        SeasonStanding(player="a", wins=1, weekly_wins=0, total_games=6, win_percentage=1 / 6),
    ]
    store.persist_season_standings(standings)
    assert store.fetch_season_standings() == standings

    store.persist_season_standings(standings[1:])
    assert store.fetch_season_standings() == standings[1:]


def test_current_week(store):
    assert store.get_current_week() == 1
    assert store.set_current_week(5) == (5, "Current week set to 5")
    assert store.get_current_week() == 5
    assert store.set_current_week(25)[0] is None
    assert store.get_current_week() == 5


def test_import_schedule(store):
    added, errors = store.import_schedule(
        [
            {"week": 2, "away_team": "Buffalo", "home_team": "Miami", "over_under": "49.0"},
            {"week": 2, "away_team": "Cincinnati", "home_team": "Washington",
             "day": "Monday, Sep. 16", "time": "8:15 PM ET"},
            {"week": "x", "away_team": "A", "home_team": "B"},
            {"week": 2, "away_team": "Dallas", "home_team": "Dallas"},
        ]
    )

    assert added == 2
    assert len(errors) == 2
    games = store.fetch_games_for_week(2)
    assert games[0].over_under == 49.0
    assert games[1].is_tiebreaker_game is True


def test_reset_all_data(store, week_one):
    store.upsert_pick("Kid1", 1, week_one[0].id, week_one[0].home_team)
    store.persist_season_standings([SeasonStanding(player="Kid1")])

    store.reset_all_data()
    assert store.fetch_all_picks_for_week(1) == []
    assert store.fetch_season_standings() == []
    assert len(store.fetch_games_for_week(1)) == 3

    store.reset_all_data(keep_schedule=False)
    assert store.fetch_games_for_week(1) == []


def test_record_result(store, week_one):
    game = week_one[2]
    record, _ = results_service.record_result(game.id, 17, 27)
    assert record.completed
    assert record.winner == "San Francisco"

    record, _ = results_service.record_result(game.id, 20, 20)
    assert record.winner is None

    record, _ = results_service.record_result(game.id, 7, 3, completed=False)
    assert not record.completed
    assert record.winner is None

    assert results_service.record_result(999, 1, 0) == (None, "Game not found")
    assert results_service.record_result(game.id, -3, 0)[0] is None
    assert results_service.record_result(game.id, "x", 0)[0] is None

    record, _ = results_service.clear_result(game.id)
    assert record.away_score is None and not record.completed


def test_fetch_players(store, week_one):
    game = week_one[0]
    store.upsert_pick("Zed", 1, game.id, game.home_team)
    store.upsert_pick("Amy", 1, game.id, game.away_team)
    store.upsert_pick("Amy", 1, week_one[1].id, week_one[1].away_team)

    assert store.fetch_players() == ["Amy", "Zed"]


def test_save_picks_keeps_going_after_a_failure(store, week_one):
    thu, sun, _ = week_one
    results = store.save_picks(
        1,
        [
            {"player": "Kid1", "game_id": thu.id, "team": thu.away_team},
            "not a pick",
            {"player": "Kid1", "game_id": 999, "team": "Dallas"},
            {"player": "Kid1", "game_id": sun.id, "team": sun.home_team, "tiebreaker": 33},
        ],
    )

    assert [r["success"] for r in results] == [True, False, False, True]
    assert results[2]["error"] == "Game not found"
    pick = store.fetch_pick("Kid1", 1)
    assert pick.selections == {thu.id: thu.away_team, sun.id: sun.home_team}
    assert pick.tiebreaker_score == 33
