"""
Value objects for the pick'em scoring engine.

Games, picks and derived scores are immutable records handed to the pure
scoring functions. Validation lives here too, but it is only called from the
storage layer: scoring itself never rejects a record.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

MIN_WEEK = 1
MAX_WEEK = 18
MIN_TIEBREAKER = 0
MAX_TIEBREAKER = 150


class InvalidRecordError(ValueError):
    """Raised when a record read from or written to storage is malformed"""


def determine_winner(away_team, home_team, away_score, home_score):
    """
    Winner of a final score.

    Returns:
        The higher-scoring team, or None when either score is unknown or the
        game ended tied.
    """
    if away_score is None or home_score is None:
        return None
    if away_score > home_score:
        return away_team
    if home_score > away_score:
        return home_team
    return None


@dataclass(frozen=True)
class Game:
    """A single matchup in a week's schedule."""

    id: int
    week: int
    away_team: str
    home_team: str
    day: str = ""
    time: str = ""
    over_under: Optional[float] = None
    is_tiebreaker_game: bool = False
    completed: bool = False
    away_score: Optional[int] = None
    home_score: Optional[int] = None
    winner: Optional[str] = None

    @property
    def teams(self):
        return (self.away_team, self.home_team)

    def has_team(self, team):
        return team in self.teams

    @property
    def total_points(self):
        """Combined score, None until both scores are known"""
        if self.away_score is None or self.home_score is None:
            return None
        return self.away_score + self.home_score

    @property
    def is_tie(self):
        return self.completed and self.total_points is not None and (
            self.away_score == self.home_score
        )

    @property
    def over_under_result(self):
        """'over', 'under' or 'push' against the line once the game is final"""
        total = self.total_points
        if not self.completed or total is None or self.over_under is None:
            return None
        if total > self.over_under:
            return "over"
        if total < self.over_under:
            return "under"
        return "push"

    def with_result(self, away_score, home_score, completed=True):
        """Return a copy carrying the given score and the winner it implies"""
        winner = None
        if completed:
            winner = determine_winner(
                self.away_team, self.home_team, away_score, home_score
            )
        return replace(
            self,
            away_score=away_score,
            home_score=home_score,
            completed=completed,
            winner=winner,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "week": self.week,
            "day": self.day,
            "time": self.time,
            "away_team": self.away_team,
            "home_team": self.home_team,
            "over_under": self.over_under,
            "is_tiebreaker_game": self.is_tiebreaker_game,
            "completed": self.completed,
            "away_score": self.away_score,
            "home_score": self.home_score,
            "winner": self.winner,
            "total_points": self.total_points,
            "over_under_result": self.over_under_result,
        }


@dataclass(frozen=True)
class Pick:
    """A player's selections for one week, keyed by (player, week)."""

    player: str
    week: int
    selections: Dict[int, str] = field(default_factory=dict)
    tiebreaker_score: Optional[int] = None

    def selection_for(self, game_id):
        return self.selections.get(game_id)

    def to_dict(self):
        return {
            "player": self.player,
            "week": self.week,
            "selections": {str(k): v for k, v in self.selections.items()},
            "tiebreaker_score": self.tiebreaker_score,
        }


@dataclass(frozen=True)
class WeeklyScore:
    """Graded picks for one player in one week."""

    player: str
    week: int
    correct: int = 0
    total: int = 0
    pending: int = 0
    tiebreaker_score: Optional[int] = None

    @property
    def incorrect(self):
        return self.total - self.correct

    @property
    def accuracy(self):
        if self.total <= 0:
            return 0.0
        return self.correct / self.total

    def to_dict(self):
        return {
            "player": self.player,
            "week": self.week,
            "correct": self.correct,
            "incorrect": self.incorrect,
            "total": self.total,
            "pending": self.pending,
            "accuracy": self.accuracy,
            "tiebreaker_score": self.tiebreaker_score,
        }


@dataclass(frozen=True)
class SeasonStanding:
    """Season-long record for a player.

    ``wins`` is the cumulative number of correct picks. ``weekly_wins`` counts
    the weeks the player finished first. Best and worst week are the graded
    weeks with the most and fewest correct picks; the earlier week wins ties.
    """

    player: str
    wins: int = 0
    weekly_wins: int = 0
    total_games: int = 0
    win_percentage: float = 0.0
    best_week: Optional[int] = None
    best_week_correct: int = 0
    worst_week: Optional[int] = None
    worst_week_correct: int = 0

    @property
    def losses(self):
        return self.total_games - self.wins

    def to_dict(self):
        return {
            "player": self.player,
            "wins": self.wins,
            "losses": self.losses,
            "weekly_wins": self.weekly_wins,
            "total_games": self.total_games,
            "win_percentage": self.win_percentage,
            "best_week": _week_summary(self.best_week, self.best_week_correct),
            "worst_week": _week_summary(self.worst_week, self.worst_week_correct),
        }


def _week_summary(week, correct):
    if week is None:
        return None
    return {"week": week, "correct": correct}


@dataclass(frozen=True)
class WeekResolution:
    """Outcome of a week: the winner(s) and how they were decided."""

    winners: tuple = ()
    used_tiebreaker: bool = False
    tiebreaker_target: Optional[int] = None

    @property
    def is_shared(self):
        return len(self.winners) > 1

    def to_dict(self):
        return {
            "winners": list(self.winners),
            "used_tiebreaker": self.used_tiebreaker,
            "tiebreaker_target": self.tiebreaker_target,
            "is_shared": self.is_shared,
        }


def validate_week(week, max_week=MAX_WEEK):
    if isinstance(week, bool) or not isinstance(week, int):
        raise InvalidRecordError(f"Week must be an integer, got {week!r}")
    if week < MIN_WEEK or week > max_week:
        raise InvalidRecordError(
            f"Invalid week {week}: must be between {MIN_WEEK} and {max_week}"
        )
    return week


def validate_tiebreaker(score, minimum=MIN_TIEBREAKER, maximum=MAX_TIEBREAKER):
    """Coerce a tiebreaker guess to int; None means no guess"""
    if score is None or score == "":
        return None
    if isinstance(score, bool):
        raise InvalidRecordError("Tiebreaker must be a whole number")
    try:
        value = int(score)
    except (TypeError, ValueError):
        raise InvalidRecordError(f"Tiebreaker must be a whole number, got {score!r}")
    if isinstance(score, float) and value != score:
        raise InvalidRecordError(f"Tiebreaker must be a whole number, got {score!r}")
    if value < minimum or value > maximum:
        raise InvalidRecordError(
            f"Tiebreaker must be between {minimum} and {maximum}"
        )
    return value


def validate_game(game, max_week=MAX_WEEK):
    """
    Check the structural invariants of a game record.

    Raises:
        InvalidRecordError: teams missing or identical, week out of range,
            scores negative, or a winner inconsistent with the final score.
    """
    validate_week(game.week, max_week)
    if not game.away_team or not game.home_team:
        raise InvalidRecordError(f"Game {game.id} is missing a team")
    if game.away_team == game.home_team:
        raise InvalidRecordError(f"Game {game.id} lists {game.away_team} twice")

    for score in (game.away_score, game.home_score):
        if score is not None and score < 0:
            raise InvalidRecordError(f"Game {game.id} has a negative score")

    if not game.completed:
        if game.winner is not None:
            raise InvalidRecordError(f"Game {game.id} has a winner but is not final")
        return game

    if game.away_score is None or game.home_score is None:
        raise InvalidRecordError(f"Game {game.id} is final without both scores")
    expected = determine_winner(
        game.away_team, game.home_team, game.away_score, game.home_score
    )
    if game.winner != expected:
        raise InvalidRecordError(
            f"Game {game.id} winner {game.winner!r} does not match the score"
        )
    return game


def validate_selection(game, team):
    """A selection is valid only for an open game and one of its two teams"""
    if game.completed:
        raise InvalidRecordError("Cannot pick completed games")
    if not game.has_team(team):
        raise InvalidRecordError(
            f"Invalid team selection: {team} is not playing in game {game.id}"
        )
    return team
