"""
Pick Store

Storage boundary between the database and the scoring engine. Rows are
validated and converted into immutable records here; the engine never sees
an ORM object. Write operations follow the rest of the app and report rule
violations as ``(None, message)`` instead of raising.
"""

import logging

from flask import current_app

from app import db
from app.models import Game, PickEntry, PickSelection, Setting, Standing
from app.scoring import records
from app.scoring.records import InvalidRecordError

logger = logging.getLogger(__name__)

CURRENT_WEEK_KEY = "current_week"


class PickStore:
    """Repository over games, picks, standings and settings"""

    def __init__(self, session=None):
        self.session = session or db.session

    # Limits come from app config so deployments can tune them
    @property
    def max_week(self):
        return current_app.config.get("MAX_WEEKS", records.MAX_WEEK)

    def _validate_tiebreaker(self, score):
        return records.validate_tiebreaker(
            score,
            minimum=current_app.config.get("TIEBREAKER_MIN", records.MIN_TIEBREAKER),
            maximum=current_app.config.get("TIEBREAKER_MAX", records.MAX_TIEBREAKER),
        )

    # Game catalog

    def fetch_games_for_week(self, week):
        """Valid games for a week in schedule order; malformed rows are skipped"""
        games = []
        for row in Game.get_games_for_week(week):
            try:
                games.append(records.validate_game(row.to_record(), self.max_week))
            except InvalidRecordError as e:
                logger.warning(f"Skipping malformed game {row.id}: {e}")
        return games

    def fetch_game(self, game_id):
        row = self.session.get(Game, game_id)
        return row.to_record() if row else None

    def add_game(
        self,
        week,
        away_team,
        home_team,
        day="",
        time="",
        over_under=None,
        is_tiebreaker_game=None,
        game_id=None,
    ):
        """
        Publish a game in a week's schedule.

        When ``is_tiebreaker_game`` is not given, Monday games are flagged.

        Returns:
            (Game record, message) or (None, error message)
        """
        if is_tiebreaker_game is None:
            is_tiebreaker_game = "monday" in (day or "").lower()

        candidate = records.Game(
            id=game_id or 0,
            week=week,
            day=day or "",
            time=time or "",
            away_team=(away_team or "").strip(),
            home_team=(home_team or "").strip(),
            over_under=over_under,
            is_tiebreaker_game=bool(is_tiebreaker_game),
        )
        try:
            records.validate_game(candidate, self.max_week)
        except InvalidRecordError as e:
            return None, str(e)

        if game_id is not None and self.session.get(Game, game_id) is not None:
            return None, f"Game {game_id} already exists"

        row = Game(
            id=game_id,
            week=candidate.week,
            day=candidate.day,
            time=candidate.time,
            away_team=candidate.away_team,
            home_team=candidate.home_team,
            over_under=candidate.over_under,
            is_tiebreaker_game=candidate.is_tiebreaker_game,
        )
        self.session.add(row)
        self.session.flush()
        return row.to_record(), "Game added"

    def import_schedule(self, rows):
        """
        Load a list of game dicts (as found in a schedule JSON file).

        Returns:
            (number of games added, list of error messages)
        """
        added = 0
        errors = []
        for index, data in enumerate(rows, start=1):
            try:
                week = int(data.get("week"))
                over_under = data.get("over_under")
                over_under = float(over_under) if over_under is not None else None
            except (TypeError, ValueError):
                errors.append(f"Row {index}: week and over_under must be numbers")
                continue

            game, message = self.add_game(
                week=week,
                away_team=data.get("away_team"),
                home_team=data.get("home_team"),
                day=data.get("day", ""),
                time=data.get("time", ""),
                over_under=over_under,
                is_tiebreaker_game=data.get("is_tiebreaker_game"),
                game_id=data.get("id"),
            )
            if game is None:
                errors.append(f"Row {index}: {message}")
            else:
                added += 1

        self.session.commit()
        logger.info(f"Imported {added} games ({len(errors)} rejected)")
        return added, errors

    # Picks

    def _get_entry(self, player, week):
        return PickEntry.query.filter_by(player=player, week=week).first()

    def fetch_pick(self, player, week):
        entry = self._get_entry(player, week)
        return entry.to_record() if entry else None

    def fetch_all_picks_for_week(self, week):
        entries = (
            PickEntry.query.filter_by(week=week).order_by(PickEntry.player).all()
        )
        return [entry.to_record() for entry in entries]

    def fetch_players(self):
        """Everyone who has ever turned in a pick sheet, alphabetically"""
        rows = (
            self.session.query(PickEntry.player)
            .distinct()
            .order_by(PickEntry.player)
            .all()
        )
        return [row.player for row in rows]

    def _get_or_create_entry(self, player, week):
        entry = self._get_entry(player, week)
        if entry is None:
            entry = PickEntry(player=player, week=week)
            self.session.add(entry)
        return entry

    def _check_player_week(self, player, week):
        if not isinstance(player, str) or not player.strip():
            raise InvalidRecordError("Please select a player before making picks")
        records.validate_week(week, self.max_week)

    def upsert_pick(self, player, week, game_id, team, tiebreaker_score=None):
        """
        Save one game selection, merging into the player's existing sheet.

        Other games' selections are never touched. A ``tiebreaker_score`` of
        None keeps whatever guess is already stored.

        Returns:
            (Pick record, message) or (None, error message)
        """
        try:
            self._check_player_week(player, week)
            tiebreaker = self._validate_tiebreaker(tiebreaker_score)

            game = self.session.get(Game, game_id)
            if game is None:
                return None, "Game not found"
            if game.week != week:
                return None, f"Game {game_id} is not part of week {week}"
            records.validate_selection(game.to_record(), team)
        except InvalidRecordError as e:
            return None, str(e)

        player = player.strip()
        entry = self._get_or_create_entry(player, week)
        selection = entry.selection_for(game_id)
        if selection is None:
            entry.selections.append(PickSelection(game_id=game_id, team=team))
            message = "Pick saved"
        else:
            selection.team = team
            message = "Pick updated"

        if tiebreaker is not None:
            entry.tiebreaker_score = tiebreaker

        self.session.commit()
        logger.info(f"{message}: {player} week {week} game {game_id} -> {team}")
        return entry.to_record(), message

    def set_tiebreaker(self, player, week, tiebreaker_score):
        """Set or replace a player's tiebreaker guess for the week"""
        try:
            self._check_player_week(player, week)
            tiebreaker = self._validate_tiebreaker(tiebreaker_score)
        except InvalidRecordError as e:
            return None, str(e)
        if tiebreaker is None:
            return None, "Tiebreaker score is required"

        entry = self._get_or_create_entry(player.strip(), week)
        entry.tiebreaker_score = tiebreaker
        self.session.commit()
        return entry.to_record(), "Tiebreaker saved"

    def save_picks(self, week, items):
        """
        Save several picks, one result per item.

        A rejected item does not stop the rest; each accepted pick is
        committed on its own.

        Returns:
            list of dicts with ``success`` plus the saved pick or the error
        """
        results = []
        for item in items:
            if not isinstance(item, dict):
                results.append({"success": False, "error": "Pick must be an object"})
                continue
            try:
                game_id = int(item.get("game_id"))
            except (TypeError, ValueError):
                results.append(
                    {"success": False, "game_id": item.get("game_id"),
                     "error": "game_id must be a number"}
                )
                continue

            pick, message = self.upsert_pick(
                item.get("player"), week, game_id, item.get("team"),
                item.get("tiebreaker"),
            )
            if pick is None:
                results.append({"success": False, "game_id": game_id, "error": message})
            else:
                results.append(
                    {"success": True, "game_id": game_id, "message": message,
                     "pick": pick.to_dict()}
                )

        saved = sum(1 for result in results if result["success"])
        logger.info(
            f"Batch save for week {week}: {saved} saved, {len(results) - saved} failed"
        )
        return results

    # Standings

    def fetch_season_standings(self):
        rows = Standing.query.order_by(Standing.rank).all()
        return [row.to_record() for row in rows]

    def persist_season_standings(self, standings):
        """Replace the stored standings with a freshly ranked list"""
        Standing.query.delete()
        for rank, standing in enumerate(standings, start=1):
            self.session.add(Standing.from_record(standing, rank))
        self.session.commit()
        logger.info(f"Persisted standings for {len(standings)} players")

    # Settings

    def get_current_week(self):
        value = Setting.get_value(CURRENT_WEEK_KEY)
        try:
            return int(value) if value is not None else 1
        except ValueError:
            logger.warning(f"Ignoring invalid stored current week {value!r}")
            return 1

    def set_current_week(self, week):
        try:
            records.validate_week(week, self.max_week)
        except InvalidRecordError as e:
            return None, str(e)
        Setting.set_value(CURRENT_WEEK_KEY, week)
        self.session.commit()
        return week, f"Current week set to {week}"

    def reset_all_data(self, keep_schedule=True):
        """Delete all picks and standings, and the schedule unless kept"""
        PickSelection.query.delete()
        PickEntry.query.delete()
        Standing.query.delete()
        if not keep_schedule:
            Game.query.delete()
            Setting.query.delete()
        self.session.commit()
        logger.warning(f"Pick data reset (schedule kept: {keep_schedule})")
