import re

from quizroom.services.codes import generate_code
from quizroom.services.scoring import score, time_remaining, QUESTION_TIME_LIMIT


def test_wrong_answer_scores_zero():
    for remaining in (0, 1, 7.5, 15):
        assert score(False, remaining, 15, 500, 500) == 0


def test_instant_correct_answer_gets_full_bonus():
    assert score(True, 15, 15, 500, 500) == 1000


def test_partial_bonus_is_floored():
    assert score(True, 10, 15, 500, 500) == 833
    assert score(True, 5, 15, 500, 500) == 666
    assert score(True, 1, 15, 500, 500) == 533


def test_no_time_left_still_earns_base_points():
    assert score(True, 0, 15, 500, 500) == 500


def test_correct_scores_are_bounded_and_monotonic():
    previous = None
    for remaining in range(0, QUESTION_TIME_LIMIT + 1):
        points = score(True, remaining, QUESTION_TIME_LIMIT)
        assert 500 <= points <= 1000
        if previous is not None:
            assert points >= previous
        previous = points


def test_time_remaining_counts_down_in_whole_seconds():
    assert time_remaining(0, 15) == 15
    assert time_remaining(0.9, 15) == 15
    assert time_remaining(10.0, 15) == 5
    assert time_remaining(10.99, 15) == 5
    assert time_remaining(15, 15) == 0
    assert time_remaining(40, 15) == 0
    # Clock skew never grants more than the limit
    assert time_remaining(-3, 15) == 15


def test_generated_codes_are_six_uppercase_alphanumerics():
    pattern = re.compile(r'^[A-Z0-9]{6}$')
    for _ in range(200):
        assert pattern.match(generate_code())


def test_generate_code_honours_length():
    assert len(generate_code(8)) == 8
