"""
Core Module - SM-2 review scheduling.

Components:
- ReviewState: Immutable per-item scheduling record and its JSON record form
- ReviewScheduler: advance / get_memory_strength / is_due_for_review
- SchedulerConfig: Named tuning constants
- Errors: RecallError, InvalidArgument, InvalidReviewState

The core has no storage and no I/O; callers persist states themselves.
"""

from recall.core.errors import InvalidArgument, InvalidReviewState, RecallError
from recall.core.review_state import ReviewState, ReviewStateRecord
from recall.core.scheduler import (
    ReviewScheduler,
    SchedulerConfig,
    advance,
    get_memory_strength,
    is_due_for_review,
    round_half_up,
    utc_now,
)

__all__ = [
    # State
    "ReviewState",
    "ReviewStateRecord",
    # Scheduling
    "ReviewScheduler",
    "SchedulerConfig",
    "advance",
    "get_memory_strength",
    "is_due_for_review",
    "round_half_up",
    "utc_now",
    # Errors
    "RecallError",
    "InvalidArgument",
    "InvalidReviewState",
]
