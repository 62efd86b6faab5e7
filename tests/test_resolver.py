from app.scoring import WeeklyScore, resolve_week, select_tiebreaker_game
from tests.helpers import final, scheduled


def ws(player, correct, tiebreaker=None):
    return WeeklyScore(player=player, week=1, correct=correct, total=12, tiebreaker_score=tiebreaker)


def mnf(away_score, home_score, game_id=16):
    return final(game_id, away_score, home_score, is_tiebreaker_game=True)


def test_single_leader_wins_outright():
    result = resolve_week([ws("A", 9), ws("B", 11), ws("C", 10)], mnf(20, 25))

    assert result.winners == ("B",)
    assert result.used_tiebreaker is False
    assert result.tiebreaker_target is None


def test_no_scores_no_winners():
    result = resolve_week([], mnf(20, 25))
    assert result.winners == ()
    assert not result.used_tiebreaker


def test_equal_distance_is_shared():
    result = resolve_week([ws("A", 10, 50), ws("B", 10, 40)], mnf(20, 25))

    assert set(result.winners) == {"A", "B"}
    assert result.used_tiebreaker is True
    assert result.tiebreaker_target == 45
    assert result.is_shared


def test_closest_guess_wins():
    result = resolve_week([ws("A", 10, 48), ws("B", 10, 40), ws("C", 7, 45)], mnf(20, 25))

    assert result.winners == ("A",)
    assert result.used_tiebreaker is True


def test_missing_guess_loses_to_any_guess():
    result = resolve_week([ws("A", 10, None), ws("B", 10, 150)], mnf(3, 0))
    assert result.winners == ("B",)


def test_zero_is_a_real_guess():
    result = resolve_week([ws("A", 10, 0), ws("B", 10, None)], mnf(0, 0))
    assert result.winners == ("A",)


def test_everyone_missing_guess_stays_tied():
    result = resolve_week([ws("A", 10), ws("B", 10)], mnf(10, 17))
    assert set(result.winners) == {"A", "B"}
    assert result.used_tiebreaker is True


def test_unfinished_tiebreaker_defers_resolution():
    game = scheduled(16, is_tiebreaker_game=True)
    result = resolve_week([ws("A", 10, 48), ws("B", 10, 40)], game)

    assert set(result.winners) == {"A", "B"}
    assert result.used_tiebreaker is False
    assert result.tiebreaker_target is None


def test_no_tiebreaker_game_returns_co_winners():
    result = resolve_week([ws("A", 8, 48), ws("B", 8, 40)], None)
    assert set(result.winners) == {"A", "B"}
    assert not result.used_tiebreaker


def test_select_tiebreaker_prefers_flag():
    games = [scheduled(1, day="Monday"), scheduled(2, is_tiebreaker_game=True)]
    assert select_tiebreaker_game(games).id == 2


def test_select_tiebreaker_with_multiple_flags_uses_last():
    games = [
        scheduled(7, is_tiebreaker_game=True),
        scheduled(9, is_tiebreaker_game=True),
        scheduled(8, is_tiebreaker_game=True),
    ]
    assert select_tiebreaker_game(games).id == 9


def test_select_tiebreaker_falls_back_to_monday():
    games = [scheduled(1, day="Sunday, Sep. 8"), scheduled(2, day="Monday, Sep. 9")]
    assert select_tiebreaker_game(games).id == 2
    assert select_tiebreaker_game([scheduled(1, day="Sunday")]) is None
    assert select_tiebreaker_game([]) is None
