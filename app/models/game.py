from datetime import datetime, timezone

from app import db
from app.scoring import records


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.Integer, primary_key=True)

    # Game identification
    week = db.Column(db.Integer, nullable=False)

    # Schedule info as published ("Monday, Sep. 9", "8:15 PM ET")
    day = db.Column(db.String(50), default="")
    time = db.Column(db.String(50), default="")

    # Teams
    away_team = db.Column(db.String(50), nullable=False)
    home_team = db.Column(db.String(50), nullable=False)

    over_under = db.Column(db.Float)
    is_tiebreaker_game = db.Column(db.Boolean, default=False, nullable=False)

    # Result, set by result ingestion only
    completed = db.Column(db.Boolean, default=False, nullable=False)
    away_score = db.Column(db.Integer)
    home_score = db.Column(db.Integer)
    winner = db.Column(db.String(50))

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("idx_game_week", "week"),
        db.CheckConstraint("home_team != away_team", name="different_teams"),
    )

    def __repr__(self):
        return f"<Game {self.away_team} @ {self.home_team} Week {self.week}>"

    def update_score(self, away_score, home_score, completed=True):
        """Record a score; the winner is derived from it once the game is final"""
        self.away_score = away_score
        self.home_score = home_score
        self.completed = completed
        self.winner = (
            records.determine_winner(
                self.away_team, self.home_team, away_score, home_score
            )
            if completed
            else None
        )

    def to_record(self):
        """Convert the row into the immutable Game the scoring engine consumes"""
        return records.Game(
            id=self.id,
            week=self.week,
            day=self.day or "",
            time=self.time or "",
            away_team=self.away_team,
            home_team=self.home_team,
            over_under=self.over_under,
            is_tiebreaker_game=bool(self.is_tiebreaker_game),
            completed=bool(self.completed),
            away_score=self.away_score,
            home_score=self.home_score,
            winner=self.winner,
        )

    @staticmethod
    def get_games_for_week(week):
        """Get all games for a specific week in schedule order"""
        return Game.query.filter_by(week=week).order_by(Game.id).all()
