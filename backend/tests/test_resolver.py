from wordduel.services.duels import resolve_winner

CHALLENGER = 1
OPPONENT = 2


def test_equal_score_faster_challenger_wins():
    assert resolve_winner(CHALLENGER, OPPONENT, 5, 5, 1000, 1200) == CHALLENGER


def test_equal_score_and_time_is_draw():
    assert resolve_winner(CHALLENGER, OPPONENT, 5, 5, 1200, 1200) is None


def test_higher_score_wins_regardless_of_time():
    assert resolve_winner(CHALLENGER, OPPONENT, 4, 5, 100, 99999) == OPPONENT
    assert resolve_winner(CHALLENGER, OPPONENT, 4, 5, 99999, 100) == OPPONENT
    assert resolve_winner(CHALLENGER, OPPONENT, 3, 1, 9000, 10) == CHALLENGER


def test_equal_score_faster_opponent_wins():
    assert resolve_winner(CHALLENGER, OPPONENT, 2, 2, 3000, 2999) == OPPONENT


def test_same_inputs_same_result():
    results = {resolve_winner(CHALLENGER, OPPONENT, 3, 3, 4000, 4500) for _ in range(10)}
    assert results == {CHALLENGER}
