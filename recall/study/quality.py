"""
Quiz score to SM-2 quality mapping.

This is caller-side policy: the scheduler only ever sees the resulting
0-5 rating. Proportional scaling keeps a perfect quiz at 5 and an empty
one at 0, with 60% as the pass/fail boundary (3).
"""

from __future__ import annotations

from loguru import logger

from recall.core.errors import InvalidArgument
from recall.core.scheduler import MAX_QUALITY, round_half_up


def quality_from_score(score: int, total: int) -> int:
    """
    Convert a quiz result to an SM-2 quality rating.

    Args:
        score: Number of correct answers
        total: Number of questions in the quiz

    Returns:
        Quality 0-5

    Raises:
        InvalidArgument: If the counts are not integers, total is not
            positive, or score falls outside 0..total
    """
    for name, value in (("score", score), ("total", total)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidArgument(f"{name} must be an integer, got {value!r}")

    if total <= 0:
        raise InvalidArgument(f"total must be positive, got {total}")
    if not 0 <= score <= total:
        raise InvalidArgument(f"score must be within 0..{total}, got {score}")

    quality = round_half_up(score / total * MAX_QUALITY)
    logger.debug(f"Quiz {score}/{total} -> quality {quality}")
    return quality
