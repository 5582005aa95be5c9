"""
Review State - the per-item scheduling record.

A ReviewState is produced by the scheduler on every review outcome and
replaced (never mutated) on the next one. Storage belongs to the caller;
this module only defines the value object and the JSON record shape used
to persist it:

    {
        "easeFactor": 2.6,
        "interval": 6,
        "repetitions": 2,
        "nextReview": "2024-03-08T09:00:00Z",
        "lastReviewed": "2024-03-02T09:00:00Z"
    }
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidReviewState

DAY = timedelta(days=1)


# =============================================================================
# Value Object
# =============================================================================


@dataclass(frozen=True)
class ReviewState:
    """SM-2 scheduling state for a single learning item."""

    ease_factor: float  # Retention-ease multiplier, starts at 2.5
    interval: int  # Days between last_reviewed and next_review
    repetitions: int  # Consecutive successful reviews
    next_review: datetime
    last_reviewed: datetime

    def __post_init__(self) -> None:
        problems = _state_problems(self)
        if problems:
            message = f"Malformed review state: {'; '.join(problems)}"
            logger.warning(message)
            raise InvalidReviewState(message)

    @property
    def is_reset(self) -> bool:
        """True when the last review failed and the schedule restarted."""
        return self.repetitions == 0

    def to_record(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON record callers persist."""
        record = ReviewStateRecord(
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            next_review=self.next_review,
            last_reviewed=self.last_reviewed,
        )
        return record.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_record(cls, data: Any) -> ReviewState:
        """
        Rebuild a state from a persisted record.

        Args:
            data: Mapping with easeFactor, interval, repetitions,
                nextReview and lastReviewed keys

        Returns:
            Validated ReviewState

        Raises:
            InvalidReviewState: If fields are missing, mistyped or violate
                the state invariants
        """
        try:
            record = ReviewStateRecord.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Rejected review record: {e.error_count()} validation error(s)")
            raise InvalidReviewState(f"Invalid review record: {e}") from e

        return cls(
            ease_factor=record.ease_factor,
            interval=record.interval,
            repetitions=record.repetitions,
            next_review=record.next_review,
            last_reviewed=record.last_reviewed,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_aware(value: Any) -> bool:
    return isinstance(value, datetime) and value.utcoffset() is not None


def _state_problems(state: ReviewState) -> list[str]:
    """Collect invariant violations that hold regardless of scheduler tuning."""
    problems = []

    if not _is_number(state.ease_factor) or not math.isfinite(state.ease_factor):
        problems.append(f"ease_factor must be a finite number, got {state.ease_factor!r}")
    elif state.ease_factor <= 0:
        problems.append(f"ease_factor must be positive, got {state.ease_factor}")

    if not isinstance(state.interval, int) or isinstance(state.interval, bool):
        problems.append(f"interval must be an integer, got {state.interval!r}")
    elif state.interval < 1:
        problems.append(f"interval must be >= 1, got {state.interval}")

    if not isinstance(state.repetitions, int) or isinstance(state.repetitions, bool):
        problems.append(f"repetitions must be an integer, got {state.repetitions!r}")
    elif state.repetitions < 0:
        problems.append(f"repetitions must be >= 0, got {state.repetitions}")

    for name in ("next_review", "last_reviewed"):
        if not _is_aware(getattr(state, name)):
            problems.append(f"{name} must be a timezone-aware datetime")

    if not problems:
        try:
            scheduled = state.next_review - state.last_reviewed == state.interval * DAY
        except OverflowError:
            scheduled = False
        if not scheduled:
            problems.append(
                f"next_review ({state.next_review.isoformat()}) must be {state.interval} days "
                f"after last_reviewed ({state.last_reviewed.isoformat()})"
            )

    return problems


# =============================================================================
# Persisted Record
# =============================================================================


class ReviewStateRecord(BaseModel):
    """Wire/storage shape of a ReviewState."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ease_factor: float = Field(alias="easeFactor")
    interval: int
    repetitions: int
    next_review: datetime = Field(alias="nextReview")
    last_reviewed: datetime = Field(alias="lastReviewed")
