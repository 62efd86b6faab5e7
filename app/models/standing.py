"""Persisted season standings - a cache of derived data, always recomputable"""

from datetime import datetime, timezone

from app import db
from app.scoring import records


class Standing(db.Model):
    __tablename__ = "season_standings"

    id = db.Column(db.Integer, primary_key=True)
    player = db.Column(db.String(50), unique=True, nullable=False)

    # Cumulative correct picks
    wins = db.Column(db.Integer, default=0, nullable=False)
    # Weeks finished first (shared weeks count)
    weekly_wins = db.Column(db.Integer, default=0, nullable=False)
    total_games = db.Column(db.Integer, default=0, nullable=False)
    win_percentage = db.Column(db.Float, default=0.0, nullable=False)
    best_week = db.Column(db.Integer)
    best_week_correct = db.Column(db.Integer, default=0, nullable=False)
    worst_week = db.Column(db.Integer)
    worst_week_correct = db.Column(db.Integer, default=0, nullable=False)
    rank = db.Column(db.Integer, nullable=False)

    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Standing {self.rank}. {self.player} weekly_wins={self.weekly_wins}>"

    @staticmethod
    def from_record(standing, rank):
        return Standing(
            player=standing.player,
            wins=standing.wins,
            weekly_wins=standing.weekly_wins,
            total_games=standing.total_games,
            win_percentage=standing.win_percentage,
            best_week=standing.best_week,
            best_week_correct=standing.best_week_correct,
            worst_week=standing.worst_week,
            worst_week_correct=standing.worst_week_correct,
            rank=rank,
        )

    def to_record(self):
        return records.SeasonStanding(
            player=self.player,
            wins=self.wins or 0,
            weekly_wins=self.weekly_wins or 0,
            total_games=self.total_games or 0,
            win_percentage=self.win_percentage or 0.0,
            best_week=self.best_week,
            best_week_correct=self.best_week_correct or 0,
            worst_week=self.worst_week,
            worst_week_correct=self.worst_week_correct or 0,
        )
