"""
recall-scheduler: SM-2 spaced repetition scheduling for study notes.

    from recall import ReviewScheduler

    scheduler = ReviewScheduler()
    state = scheduler.advance(5)          # first review
    state = scheduler.advance(4, state)   # later review
    scheduler.is_due_for_review(state)
"""

from recall.core import (
    InvalidArgument,
    InvalidReviewState,
    RecallError,
    ReviewScheduler,
    ReviewState,
    SchedulerConfig,
    advance,
    get_memory_strength,
    is_due_for_review,
)

__version__ = "1.0.0"

__all__ = [
    "ReviewScheduler",
    "ReviewState",
    "SchedulerConfig",
    "advance",
    "get_memory_strength",
    "is_due_for_review",
    "RecallError",
    "InvalidArgument",
    "InvalidReviewState",
]
