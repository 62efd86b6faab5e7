import json

import pytest

from manage import cli


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def test_schedule_import_and_list(runner, store, tmp_path):
    path = tmp_path / "week2.json"
    path.write_text(
        json.dumps(
            {
                "games": [
                    {"week": 2, "away_team": "Buffalo", "home_team": "Miami",
                     "day": "Thursday, Sep. 12", "time": "8:15 PM ET", "over_under": 49.0},
                    {"week": 2, "away_team": "Cincinnati", "home_team": "Washington",
                     "day": "Monday, Sep. 16", "time": "8:15 PM ET"},
                    {"week": 2, "away_team": "Dallas", "home_team": "Dallas"},
                ]
            }
        )
    )

    result = runner.invoke(cli, ["schedule", "import", str(path)])
    assert "Imported 2 games" in result.output
    assert "Row 3" in result.output

    result = runner.invoke(cli, ["schedule", "list", "2"])
    assert "Buffalo @ Miami" in result.output
    assert "[tiebreaker]" in result.output

    result = runner.invoke(cli, ["schedule", "list", "3"])
    assert "No games found for week 3" in result.output


def test_result_record(runner, week_one):
    game = week_one[0]

    result = runner.invoke(cli, ["result", "record", str(game.id), "24", "17"])
    assert "(Baltimore)" in result.output

    result = runner.invoke(cli, ["result", "record", str(game.id), "10", "10"])
    assert "(tie)" in result.output

    result = runner.invoke(cli, ["result", "record", "999", "1", "0"])
    assert "Game not found" in result.output


def test_week_commands(runner):
    assert "Current week: 1" in runner.invoke(cli, ["week", "current"]).output
    assert "Current week set to 6" in runner.invoke(cli, ["week", "set", "6"]).output
    assert "Current week: 6" in runner.invoke(cli, ["week", "current"]).output
    assert "❌" in runner.invoke(cli, ["week", "set", "30"]).output


def test_standings_commands(runner, store, week_one):
    result = runner.invoke(cli, ["standings", "show"])
    assert "No standings yet" in result.output

    game = week_one[0]
    store.upsert_pick("Kid1", 1, game.id, game.home_team)
    runner.invoke(cli, ["result", "record", str(game.id), "3", "30"])

    # Recording a final result refreshes the stored standings
    result = runner.invoke(cli, ["standings", "show"])
    assert "1. Kid1: 1 weekly wins, 1/1 correct" in result.output

    result = runner.invoke(cli, ["standings", "recompute"])
    assert "Recomputed standings for 1 players" in result.output

    result = runner.invoke(cli, ["standings", "recompute", "--through-week", "0"])
    assert "❌" in result.output
    assert "1. Kid1" in runner.invoke(cli, ["standings", "show"]).output


def test_result_clear(runner, week_one):
    game = week_one[0]
    runner.invoke(cli, ["result", "record", str(game.id), "24", "17"])

    result = runner.invoke(cli, ["result", "clear", str(game.id)])
    assert "Result cleared" in result.output
    assert "Games: 3 (0 final)" in runner.invoke(cli, ["status"]).output

    result = runner.invoke(cli, ["result", "clear", "999"])
    assert "Game not found" in result.output


def test_reset_requires_confirmation(runner, store, week_one):
    store.upsert_pick("Kid1", 1, week_one[0].id, week_one[0].home_team)

    result = runner.invoke(cli, ["db-cmd", "reset"], input="n\n")
    assert "Cancelled" in result.output
    assert store.fetch_pick("Kid1", 1) is not None

    result = runner.invoke(cli, ["db-cmd", "reset", "--yes"])
    assert "Pick data reset" in result.output
    assert store.fetch_pick("Kid1", 1) is None


def test_status(runner, week_one):
    result = runner.invoke(cli, ["status"])
    assert "Games: 3 (0 final)" in result.output
