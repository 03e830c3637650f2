import math

DEFAULT_ROUND_DURATION = 20
DEFAULT_BASE_POINTS = 500


def time_weighted_points(elapsed: float, duration: float = DEFAULT_ROUND_DURATION,
                         base: int = DEFAULT_BASE_POINTS) -> int:
    """Points for a correct answer given ``elapsed`` seconds into the round.

    ``base`` at (or after) the buzzer, up to ``2 * base`` for an instant
    answer. Elapsed time is clamped to ``[0, duration]``.
    """
    if duration <= 0:
        return base
    elapsed = min(max(elapsed, 0.0), float(duration))
    bonus = base * (duration - elapsed) / duration
    # Half-up rounding, so 499.5 -> 500 rather than banker's rounding.
    return base + int(math.floor(bonus + 0.5))


def score_answer(answer, correct_answer, elapsed: float,
                 duration: float = DEFAULT_ROUND_DURATION,
                 base: int = DEFAULT_BASE_POINTS) -> int:
    """Points earned by ``answer``; wrong answers earn nothing."""
    if answer != correct_answer:
        return 0
    return time_weighted_points(elapsed, duration, base)
