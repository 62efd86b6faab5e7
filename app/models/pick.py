from datetime import datetime, timezone

from app import db
from app.scoring import records


class PickEntry(db.Model):
    """One player's pick sheet for a week"""

    __tablename__ = "pick_entries"

    id = db.Column(db.Integer, primary_key=True)
    player = db.Column(db.String(50), nullable=False)
    week = db.Column(db.Integer, nullable=False)
    tiebreaker_score = db.Column(db.Integer)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    selections = db.relationship(
        "PickSelection",
        backref="entry",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="PickSelection.game_id",
    )

    __table_args__ = (
        db.UniqueConstraint("player", "week", name="unique_player_week_entry"),
        db.Index("idx_entry_week", "week"),
    )

    def __repr__(self):
        return f"<PickEntry {self.player} week={self.week}>"

    def selection_for(self, game_id):
        for selection in self.selections:
            if selection.game_id == game_id:
                return selection
        return None

    def to_record(self):
        return records.Pick(
            player=self.player,
            week=self.week,
            selections={s.game_id: s.team for s in self.selections},
            tiebreaker_score=self.tiebreaker_score,
        )


class PickSelection(db.Model):
    """A single game pick; one row per game so writes merge instead of replace"""

    __tablename__ = "pick_selections"

    id = db.Column(db.Integer, primary_key=True)
    entry_id = db.Column(
        db.Integer, db.ForeignKey("pick_entries.id"), nullable=False
    )
    game_id = db.Column(db.Integer, db.ForeignKey("games.id"), nullable=False)
    team = db.Column(db.String(50), nullable=False)

    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    game = db.relationship("Game")

    __table_args__ = (
        db.UniqueConstraint("entry_id", "game_id", name="unique_entry_game_pick"),
        db.Index("idx_selection_game", "game_id"),
    )

    def __repr__(self):
        return f"<PickSelection entry={self.entry_id} game={self.game_id} team={self.team}>"
