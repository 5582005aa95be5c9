"""
SM-2 Review Scheduler.

Computes the next review state for an item from a quality rating, and
answers whether a stored state is due and how strong the memory is now.

Quality Scale:
0 - Complete blackout, wrong response
1 - Incorrect, but upon seeing answer remembered
2 - Incorrect, but answer seemed easy to recall
3 - Correct, but with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall

The scheduler holds no per-item state. "Now" comes from an injectable
clock, or from an explicit ``now=`` argument on each call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from loguru import logger

from .errors import InvalidArgument, InvalidReviewState
from .review_state import DAY, ReviewState

MIN_QUALITY = 0
MAX_QUALITY = 5

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not to even)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class SchedulerConfig:
    """Tuning constants for the SM-2 algorithm and strength estimate."""

    initial_ease: float = 2.5
    minimum_ease: float = 1.3
    first_interval: int = 1  # Days after the first success
    second_interval: int = 6  # Days after the second consecutive success
    passing_quality: int = 3  # Lowest quality that counts as recalled
    overdue_decay_per_day: float = 10.0
    review_decay_scale: float = 5.0

    def __post_init__(self) -> None:
        if self.minimum_ease <= 0:
            raise InvalidArgument(f"minimum_ease must be positive, got {self.minimum_ease}")
        if self.initial_ease < self.minimum_ease:
            raise InvalidArgument(
                f"initial_ease ({self.initial_ease}) is below minimum_ease ({self.minimum_ease})"
            )
        if self.first_interval < 1 or self.second_interval < 1:
            raise InvalidArgument("first_interval and second_interval must be >= 1 day")
        if not MIN_QUALITY <= self.passing_quality <= MAX_QUALITY:
            raise InvalidArgument(f"passing_quality must be within 0-5, got {self.passing_quality}")

    @classmethod
    def from_settings(cls, settings: Any = None) -> SchedulerConfig:
        """
        Build a config from environment settings.

        Args:
            settings: Settings instance (uses cached get_settings() if None)
        """
        if settings is None:
            from recall.config import get_settings

            settings = get_settings()

        return cls(
            initial_ease=settings.initial_ease,
            minimum_ease=settings.minimum_ease,
            first_interval=settings.first_interval,
            second_interval=settings.second_interval,
            overdue_decay_per_day=settings.overdue_decay_per_day,
            review_decay_scale=settings.review_decay_scale,
        )


# =============================================================================
# Scheduler
# =============================================================================


class ReviewScheduler:
    """
    Implements the SM-2 spaced repetition algorithm.

    Each item's ReviewState carries:
    - Ease Factor: How easy the item is (2.5 default, min 1.3)
    - Interval: Days until next review
    - Repetitions: Consecutive correct recalls

    Instances are immutable after construction and safe to share.
    """

    def __init__(self, config: SchedulerConfig | None = None, clock: Clock | None = None):
        """
        Initialize the scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
            clock: Zero-argument callable returning an aware datetime
                (uses utc_now if None)
        """
        self.config = config or SchedulerConfig()
        self.clock = clock or utc_now

    def advance(
        self,
        quality: int,
        previous_state: ReviewState | None = None,
        now: datetime | None = None,
    ) -> ReviewState:
        """
        Calculate the next review state from a review outcome.

        Args:
            quality: Recall quality (0-5)
            previous_state: Current state for the item, None on first review
            now: Review time (reads the clock if None)

        Returns:
            A new ReviewState; previous_state is left untouched

        Raises:
            InvalidArgument: If quality or now is invalid
            InvalidReviewState: If previous_state is malformed
        """
        self._check_quality(quality)
        now = self.resolve_now(now)
        cfg = self.config

        # First review seeds the schedule; quality has no prior ease to adjust
        if previous_state is None:
            new_state = self._next_state(cfg.initial_ease, cfg.first_interval, 1, now)
            logger.debug(f"First review: interval={new_state.interval}d, next={new_state.next_review}")
            return new_state

        self._check_state(previous_state)

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        miss = MAX_QUALITY - quality
        new_ease = previous_state.ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
        new_ease = max(cfg.minimum_ease, new_ease)

        if quality < cfg.passing_quality:
            # Failed - restart the schedule
            new_repetitions = 0
            new_interval = cfg.first_interval
        else:
            new_repetitions = previous_state.repetitions + 1

            if new_repetitions == 1:
                new_interval = cfg.first_interval
            elif new_repetitions == 2:
                new_interval = cfg.second_interval
            else:
                new_interval = previous_state.interval * new_ease

        new_state = self._next_state(new_ease, new_interval, new_repetitions, now)

        logger.debug(
            f"Advanced review: quality={quality}, ease={new_ease:.2f}, "
            f"repetitions={new_repetitions}, interval={new_state.interval}d"
        )

        return new_state

    def get_memory_strength(self, state: ReviewState, now: datetime | None = None) -> int:
        """
        Estimate current recall confidence for display.

        Overdue items lose a fixed number of points per day past due.
        Items not yet due decay with time since review, faster for
        low-ease (harder) items.

        Args:
            state: Stored review state
            now: Evaluation time (reads the clock if None)

        Returns:
            Strength between 0 and 100
        """
        self._check_state(state)
        now = self.resolve_now(now)
        cfg = self.config

        # Clock rollback must not push strength above 100
        days_since_review = max(0.0, (now - state.last_reviewed) / DAY)
        days_since_scheduled = (now - state.next_review) / DAY

        if days_since_scheduled > 0:
            strength = max(0.0, 100 - days_since_scheduled * cfg.overdue_decay_per_day)
        else:
            decay_rate = 1 / state.ease_factor
            strength = max(0.0, 100 - days_since_review * decay_rate * cfg.review_decay_scale)

        return min(100, max(0, round_half_up(strength)))

    def is_due_for_review(self, state: ReviewState, now: datetime | None = None) -> bool:
        """Check whether the state's next_review has been reached."""
        self._check_state(state)
        now = self.resolve_now(now)
        return now >= state.next_review

    def _next_state(self, ease: float, interval: float, repetitions: int, now: datetime) -> ReviewState:
        try:
            days = round_half_up(interval)
            return ReviewState(
                ease_factor=ease,
                interval=days,
                repetitions=repetitions,
                next_review=now + days * DAY,
                last_reviewed=now,
            )
        except OverflowError as e:
            message = f"next review for an interval of {interval:.0f} days is out of the supported date range"
            logger.warning(f"Rejected review state: {message}")
            raise InvalidReviewState(message) from e

    # =========================================================================
    # Validation
    # =========================================================================

    def resolve_now(self, now: datetime | None) -> datetime:
        if now is None:
            now = self.clock()
        if not isinstance(now, datetime) or now.utcoffset() is None:
            logger.warning(f"Rejected review time {now!r}: not a timezone-aware datetime")
            raise InvalidArgument("now must be a timezone-aware datetime")
        return now

    def _check_quality(self, quality: Any) -> None:
        if not isinstance(quality, int) or isinstance(quality, bool):
            logger.warning(f"Rejected quality {quality!r}: not an integer")
            raise InvalidArgument(f"quality must be an integer 0-5, got {quality!r}")
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            logger.warning(f"Rejected quality {quality}: out of range")
            raise InvalidArgument(f"quality must be within 0-5, got {quality}")

    def _check_state(self, state: Any) -> None:
        if not isinstance(state, ReviewState):
            raise InvalidArgument(f"expected a ReviewState, got {type(state).__name__}")
        if state.ease_factor < self.config.minimum_ease:
            message = (
                f"ease_factor {state.ease_factor} is below the minimum {self.config.minimum_ease}"
            )
            logger.warning(f"Rejected review state: {message}")
            raise InvalidReviewState(message)


# =============================================================================
# Module-level API
# =============================================================================

_default_scheduler = ReviewScheduler()


def advance(
    quality: int,
    previous_state: ReviewState | None = None,
    now: datetime | None = None,
) -> ReviewState:
    """Advance a review state using the default scheduler."""
    return _default_scheduler.advance(quality, previous_state, now=now)


def get_memory_strength(state: ReviewState, now: datetime | None = None) -> int:
    """Memory strength (0-100) using the default scheduler."""
    return _default_scheduler.get_memory_strength(state, now=now)


def is_due_for_review(state: ReviewState, now: datetime | None = None) -> bool:
    """Due check using the default scheduler."""
    return _default_scheduler.is_due_for_review(state, now=now)
