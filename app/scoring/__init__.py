from .engine import (
    all_players_submitted,
    completed_games,
    compute_standings_for_week,
    has_complete_picks,
    pick_deadline,
    pick_distribution,
    score_player,
)
from .records import (
    Game,
    InvalidRecordError,
    Pick,
    SeasonStanding,
    WeeklyScore,
    WeekResolution,
)
from .resolver import resolve_week, select_tiebreaker_game
from .season import apply_week_result, build_season_standings, rank_standings

__all__ = [
    "Game",
    "Pick",
    "WeeklyScore",
    "SeasonStanding",
    "WeekResolution",
    "InvalidRecordError",
    "score_player",
    "compute_standings_for_week",
    "has_complete_picks",
    "all_players_submitted",
    "completed_games",
    "pick_deadline",
    "pick_distribution",
    "resolve_week",
    "select_tiebreaker_game",
    "apply_week_result",
    "rank_standings",
    "build_season_standings",
]
