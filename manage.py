#!/usr/bin/env python3
"""
Family Pick'em Management CLI

This script provides command-line management functionality for the pick'em
application: loading schedules, recording results and rebuilding standings.
"""

import json

import click
from flask.cli import FlaskGroup, with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from app import create_app, db
from app.scoring import completed_games
from app.scoring.records import InvalidRecordError
from app.services import results_service
from app.services.pick_store import PickStore
from app.services.standings_service import StandingsService, StorageUnavailable
from app.utils.logging_config import get_logger

logger = get_logger("manage")


@click.group(cls=FlaskGroup, create_app=create_app, add_default_commands=False)
def cli():
    """Family Pick'em Management CLI"""
    pass


# Schedule Commands
@cli.group()
def schedule():
    """Game schedule commands"""
    pass


@schedule.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_schedule(path):
    """Import games from a JSON file (a list of game objects)"""
    try:
        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"❌ Could not read {path}: {e}")
        return

    if isinstance(rows, dict):
        rows = rows.get("games", [])

    try:
        added, errors = PickStore().import_schedule(rows)
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error importing schedule: {str(e)}")
        logger.error(f"Schedule import failed - SQL error: {e}")
        return

    for error in errors:
        click.echo(f"⚠️  {error}")
    click.echo(f"✅ Imported {added} games")


@schedule.command("list")
@click.argument("week", type=int)
@with_appcontext
def list_games(week):
    """List the games for a week"""
    games = PickStore().fetch_games_for_week(week)

    if not games:
        click.echo(f"No games found for week {week}.")
        return

    click.echo(f"Week {week}:")
    for game in games:
        if game.completed:
            status = f"FINAL {game.away_score}-{game.home_score}"
        else:
            status = f"{game.day} {game.time}".strip()
        flag = " [tiebreaker]" if game.is_tiebreaker_game else ""
        click.echo(f"  {game.id}: {game.away_team} @ {game.home_team} - {status}{flag}")


# Result Commands
@cli.group()
def result():
    """Game result commands"""
    pass


@result.command("record")
@click.argument("game_id", type=int)
@click.argument("away_score", type=int)
@click.argument("home_score", type=int)
@click.option("--in-progress", is_flag=True, help="Live score, game not final yet")
@with_appcontext
def record(game_id, away_score, home_score, in_progress):
    """Record a game score"""
    try:
        game, message = results_service.record_result(
            game_id, away_score, home_score, completed=not in_progress
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error recording result: {str(e)}")
        logger.error(f"Result recording failed - SQL error: {e}")
        return

    if game is None:
        click.echo(f"❌ {message}")
        return

    winner = game.winner or ("tie" if game.is_tie else "in progress")
    click.echo(
        f"✅ {game.away_team} {game.away_score} @ {game.home_team} {game.home_score} ({winner})"
    )


@result.command("clear")
@click.argument("game_id", type=int)
@with_appcontext
def clear(game_id):
    """Put a game back to unplayed"""
    try:
        game, message = results_service.clear_result(game_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error clearing result: {str(e)}")
        logger.error(f"Result clearing failed - SQL error: {e}")
        return

    if game is None:
        click.echo(f"❌ {message}")
        return
    click.echo(f"✅ {message}: {game.away_team} @ {game.home_team}")


# Week Commands
@cli.group()
def week():
    """Current week commands"""
    pass


@week.command("current")
@with_appcontext
def show_current_week():
    """Show the current week"""
    click.echo(f"Current week: {PickStore().get_current_week()}")


@week.command("set")
@click.argument("number", type=int)
@with_appcontext
def set_week(number):
    """Set the current week"""
    value, message = PickStore().set_current_week(number)
    if value is None:
        click.echo(f"❌ {message}")
        return
    click.echo(f"✅ {message}")


# Standings Commands
@cli.group()
def standings():
    """Season standings commands"""
    pass


@standings.command("recompute")
@click.option("--through-week", type=int, help="Last week to include")
@with_appcontext
def recompute(through_week):
    """Rebuild season standings from games and picks"""
    try:
        rows = StandingsService().recompute_season(through_week=through_week)
    except (InvalidRecordError, StorageUnavailable) as e:
        click.echo(f"❌ {e}")
        return

    click.echo(f"✅ Recomputed standings for {len(rows)} players")
    _print_standings(rows)


@standings.command("show")
@with_appcontext
def show():
    """Show the stored season standings"""
    try:
        rows, stale = StandingsService().season_standings()
    except StorageUnavailable as e:
        click.echo(f"❌ {e}")
        return

    if not rows:
        click.echo("No standings yet. Run 'standings recompute'.")
        return
    if stale:
        click.echo("⚠️  Showing cached standings")
    _print_standings(rows)


def _print_standings(rows):
    for rank, s in enumerate(rows, start=1):
        click.echo(
            f"  {rank}. {s.player}: {s.weekly_wins} weekly wins, "
            f"{s.wins}/{s.total_games} correct ({s.win_percentage:.1%})"
        )


# Database Commands
@cli.group("db-cmd")
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command("init")
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command("reset")
@click.option("--all", "reset_everything", is_flag=True, help="Also delete the schedule")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_appcontext
def reset(reset_everything, yes):
    """⚠️  DANGER: Delete all picks and standings"""
    if not yes and not click.confirm("This will DELETE ALL PICKS. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        PickStore().reset_all_data(keep_schedule=not reset_everything)
        click.echo("✅ Pick data reset")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Error resetting data: {str(e)}")
        logger.error(f"Data reset failed - SQL error: {e}")


@cli.command()
@with_appcontext
def status():
    """Show application status"""
    store = PickStore()
    current = store.get_current_week()
    games = store.fetch_games_for_week(current)
    picks = store.fetch_all_picks_for_week(current)
    completed = len(completed_games(games))

    click.echo(f"Current week: {current}")
    click.echo(f"Games: {len(games)} ({completed} final)")
    click.echo(f"Pick sheets: {len(picks)}")


if __name__ == "__main__":
    cli()
