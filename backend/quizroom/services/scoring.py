import math

QUESTION_TIME_LIMIT = 15  # seconds
POINTS_PER_CORRECT = 500
MAX_SPEED_BONUS = 500


def score(is_correct: bool, time_remaining: float, time_limit: float,
          points_per_correct: int = POINTS_PER_CORRECT,
          max_speed_bonus: int = MAX_SPEED_BONUS) -> int:
    """Points for a single answer.

    0 for a wrong answer; otherwise the base points plus a speed bonus
    proportional to the time left. ``time_remaining`` must already be
    within ``[0, time_limit]``.
    """
    if not is_correct:
        return 0
    # Multiply before dividing so whole-second inputs floor exactly
    bonus = math.floor(time_remaining * max_speed_bonus / time_limit)
    return int(points_per_correct + bonus)


def time_remaining(elapsed_seconds: float, time_limit: int) -> int:
    """Whole seconds left on a countdown that ticks once per second."""
    remaining = time_limit - int(max(0.0, elapsed_seconds))
    return max(0, min(time_limit, remaining))
