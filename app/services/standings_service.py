"""
Standings Service

Glue between the pick store and the pure scoring engine. Fetches happen
here, and a failed fetch is answered from the last-known-good copy in the
cache so the engine is never handed partial data.
"""

import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app import cache, db
from app.scoring import (
    build_season_standings,
    compute_standings_for_week,
    resolve_week,
    select_tiebreaker_game,
)
from app.scoring import records
from app.services.pick_store import PickStore

logger = logging.getLogger(__name__)

STANDINGS_CACHE_KEY = "last_good_standings"


class StorageUnavailable(Exception):
    """Raised when storage fails and there is no cached copy to fall back on"""


def week_cache_key(week):
    return f"last_good_week_{week}"


class StandingsService:
    def __init__(self, store=None):
        self.store = store or PickStore()

    @property
    def roster(self):
        return list(current_app.config.get("PICKEM_PLAYERS") or [])

    @property
    def cache_timeout(self):
        return current_app.config.get("STANDINGS_CACHE_TIMEOUT", 0)

    def known_players(self):
        """The roster, then anyone else who has turned in picks"""
        roster = self.roster
        others = [p for p in self.store.fetch_players() if p not in roster]
        return roster + others

    def _load_week(self, week):
        games = self.store.fetch_games_for_week(week)
        picks = self.store.fetch_all_picks_for_week(week)
        return games, picks

    def summarize_week(self, week, games, picks):
        """Score and resolve a week that has already been fetched"""
        scores = compute_standings_for_week(games, picks, players=self.roster)
        tiebreaker_game = select_tiebreaker_game(games)
        return {
            "week": week,
            "games": games,
            "picks": picks,
            "scores": scores,
            "tiebreaker_game": tiebreaker_game,
            "resolution": resolve_week(scores, tiebreaker_game),
            "stale": False,
        }

    def week_summary(self, week):
        """
        Scores and winner(s) for a week.

        Returns:
            dict with games, picks, scores, tiebreaker_game, resolution and a
            ``stale`` flag set when the data came from the cache
        """
        try:
            games, picks = self._load_week(week)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f"Failed to load week {week}: {e}")
            cached = cache.get(week_cache_key(week))
            if cached is None:
                raise StorageUnavailable(f"Week {week} could not be loaded") from e
            logger.warning(f"Serving cached results for week {week}")
            return dict(cached, stale=True)

        summary = self.summarize_week(week, games, picks)
        cache.set(week_cache_key(week), summary, timeout=self.cache_timeout)
        return summary

    def recompute_season(self, through_week=None):
        """
        Rebuild season standings from the games and picks tables.

        Args:
            through_week: last week to include, defaults to the current week

        Returns:
            Ranked list of SeasonStanding

        Raises:
            InvalidRecordError: ``through_week`` is not a week in the season
        """
        if through_week is not None:
            records.validate_week(through_week, self.store.max_week)

        try:
            if through_week is None:
                last_week = self.store.get_current_week()
            else:
                last_week = through_week
            weeks = [self._load_week(week) for week in range(1, last_week + 1)]
            standings = build_season_standings(weeks, players=self.roster)
            self.store.persist_season_standings(standings)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f"Season recompute failed: {e}")
            raise StorageUnavailable("Standings could not be recomputed") from e

        cache.set(STANDINGS_CACHE_KEY, standings, timeout=self.cache_timeout)
        logger.info(
            f"Recomputed standings through week {last_week} "
            f"for {len(standings)} players"
        )
        return standings

    def season_standings(self):
        """
        Stored season standings.

        Returns:
            (standings, stale) - ``stale`` is True when storage failed and the
            last-known-good copy was served instead
        """
        try:
            standings = self.store.fetch_season_standings()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f"Failed to load standings: {e}")
            cached = cache.get(STANDINGS_CACHE_KEY)
            if cached is None:
                raise StorageUnavailable("Standings could not be loaded") from e
            logger.warning("Serving cached standings")
            return cached, True

        cache.set(STANDINGS_CACHE_KEY, standings, timeout=self.cache_timeout)
        return standings, False
