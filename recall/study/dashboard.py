"""
Review Dashboard - read-only summaries over stored review states.

Mirrors what the study dashboard shows for a user's notes:
- Per-note memory strength
- Average memory strength across reviewed notes
- A 7-day memory strength trend
- Upcoming reviews, labelled and prioritised by due date
- Count of reviews due today or overdue

Notes without review data have never been quizzed and are left out of
every aggregate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from recall.core.errors import InvalidArgument
from recall.core.review_state import DAY, ReviewState
from recall.core.scheduler import ReviewScheduler, round_half_up

DEFAULT_SUBJECT = "General"
DEFAULT_UPCOMING_LIMIT = 4
DEFAULT_TREND_DAYS = 7

_datetime_adapter = TypeAdapter(datetime)


class ReviewPriority(str, Enum):
    """Urgency of an upcoming review."""

    HIGH = "high"  # Overdue or due today
    MEDIUM = "medium"  # Due within 3 days
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER[self]


_PRIORITY_ORDER = {
    ReviewPriority.HIGH: 0,
    ReviewPriority.MEDIUM: 1,
    ReviewPriority.LOW: 2,
}

OVERDUE = "Overdue"
TODAY = "Today"
TOMORROW = "Tomorrow"


# =============================================================================
# Data Classes
# =============================================================================


def _parse_updated_at(value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidArgument(f"updated_at is not a timestamp: {value!r}") from e
    if parsed.utcoffset() is None:
        raise InvalidArgument(f"updated_at must include a timezone offset: {value!r}")
    return parsed


@dataclass
class ReviewItem:
    """A learning item (note) and its stored review state, if any."""

    item_id: str
    title: str
    state: ReviewState | None = None
    subject: str | None = None
    updated_at: datetime | None = None  # Last change to the note itself

    @classmethod
    def from_note(cls, note: dict[str, Any]) -> ReviewItem:
        """
        Build an item from a stored note object.

        Args:
            note: Mapping with "id", "title", optional "subject",
                optional "updated_at" (ISO-8601) and optional
                "review_data" (a ReviewState record)
        """
        if not isinstance(note, dict) or "id" not in note:
            raise InvalidArgument("note must be an object with an 'id'")

        review_data = note.get("review_data")
        state = ReviewState.from_record(review_data) if review_data else None

        return cls(
            item_id=str(note["id"]),
            title=note.get("title") or "Untitled",
            state=state,
            subject=note.get("subject"),
            updated_at=_parse_updated_at(note.get("updated_at")),
        )

    @property
    def tracked_since(self) -> date | None:
        """UTC day from which the item counts toward the strength trend."""
        if self.state is None:
            return None
        since = self.updated_at or self.state.last_reviewed
        return since.astimezone(timezone.utc).date()


@dataclass
class ItemStrength:
    item_id: str
    title: str
    subject: str
    strength: int


@dataclass
class UpcomingReview:
    """A scheduled review as shown in the upcoming list."""

    item_id: str
    title: str
    due_in: str  # "Overdue", "Today", "Tomorrow" or "N days"
    priority: ReviewPriority
    days_until_due: int
    strength: int


@dataclass
class TrendPoint:
    day: date
    strength: int  # 0 when no item was tracked yet


@dataclass
class DashboardSummary:
    average_strength: int
    due_count: int
    high_priority_count: int
    reviewed_count: int
    upcoming: list[UpcomingReview] = field(default_factory=list)
    strengths: list[ItemStrength] = field(default_factory=list)
    trend: list[TrendPoint] = field(default_factory=list)


# =============================================================================
# Dashboard
# =============================================================================


def classify_due(days_until_due: int) -> tuple[str, ReviewPriority]:
    """
    Label a review by whole days until it is due.

    Args:
        days_until_due: ceil((next_review - now) / 1 day)

    Returns:
        (due_in label, priority)
    """
    if days_until_due < 0:
        return OVERDUE, ReviewPriority.HIGH
    if days_until_due == 0:
        return TODAY, ReviewPriority.HIGH
    if days_until_due == 1:
        return TOMORROW, ReviewPriority.MEDIUM

    priority = ReviewPriority.MEDIUM if days_until_due <= 3 else ReviewPriority.LOW
    return f"{days_until_due} days", priority


def _mean(values: list[int]) -> int:
    return round_half_up(sum(values) / len(values)) if values else 0


class ReviewDashboard:
    """
    Computes dashboard figures for a set of items at a single instant.

    "Now" is fixed at construction so every figure in one summary is
    consistent.
    """

    def __init__(
        self,
        items: Iterable[ReviewItem],
        scheduler: ReviewScheduler | None = None,
        now: datetime | None = None,
    ):
        self.scheduler = scheduler or ReviewScheduler()
        self.items = list(items)
        self.now = self.scheduler.resolve_now(now)

    @property
    def reviewed(self) -> list[ReviewItem]:
        return [item for item in self.items if item.state is not None]

    def _strength(self, item: ReviewItem) -> int:
        return self.scheduler.get_memory_strength(item.state, now=self.now)

    def item_strengths(self) -> list[ItemStrength]:
        return [
            ItemStrength(
                item_id=item.item_id,
                title=item.title,
                subject=item.subject or DEFAULT_SUBJECT,
                strength=self._strength(item),
            )
            for item in self.reviewed
        ]

    def average_strength(self) -> int:
        """Rounded mean strength of reviewed items, 0 when none."""
        return _mean([s.strength for s in self.item_strengths()])

    def strength_trend(self, days: int = DEFAULT_TREND_DAYS) -> list[TrendPoint]:
        """
        Average current strength per day over the last `days` UTC days.

        An item counts toward a day once it was last updated on or before
        that day (its last review when the update time is unknown). Days
        with no counted items score 0.

        Args:
            days: Number of days ending today, oldest first

        Returns:
            One TrendPoint per day
        """
        if days < 1:
            raise InvalidArgument(f"days must be >= 1, got {days}")

        today = self.now.astimezone(timezone.utc).date()
        tracked = [(item.tracked_since, self._strength(item)) for item in self.reviewed]

        trend = []
        for offset in range(days - 1, -1, -1):
            day = today - offset * DAY
            trend.append(TrendPoint(day=day, strength=_mean([s for since, s in tracked if since <= day])))
        return trend

    def _all_upcoming(self) -> list[UpcomingReview]:
        upcoming = []
        for item in self.reviewed:
            days = math.ceil((item.state.next_review - self.now) / DAY)
            due_in, priority = classify_due(days)
            upcoming.append(
                UpcomingReview(
                    item_id=item.item_id,
                    title=item.title,
                    due_in=due_in,
                    priority=priority,
                    days_until_due=days,
                    strength=self._strength(item),
                )
            )

        # Stable sort keeps input order within a priority band
        upcoming.sort(key=lambda r: r.priority.rank)
        return upcoming

    def upcoming_reviews(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> list[UpcomingReview]:
        """Reviews ordered by priority, truncated to limit."""
        if limit < 1:
            raise InvalidArgument(f"limit must be >= 1, got {limit}")
        return self._all_upcoming()[:limit]

    def due_count(self) -> int:
        """Number of items overdue or due today."""
        return _count_due(self._all_upcoming())

    def high_priority_count(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> int:
        """High-priority entries among the displayed upcoming reviews."""
        return _count_high(self.upcoming_reviews(limit))

    def summary(
        self, limit: int = DEFAULT_UPCOMING_LIMIT, trend_days: int = DEFAULT_TREND_DAYS
    ) -> DashboardSummary:
        if limit < 1:
            raise InvalidArgument(f"limit must be >= 1, got {limit}")

        strengths = self.item_strengths()
        all_upcoming = self._all_upcoming()
        upcoming = all_upcoming[:limit]

        summary = DashboardSummary(
            average_strength=_mean([s.strength for s in strengths]),
            due_count=_count_due(all_upcoming),
            high_priority_count=_count_high(upcoming),
            reviewed_count=len(strengths),
            upcoming=upcoming,
            strengths=strengths,
            trend=self.strength_trend(trend_days),
        )

        logger.debug(
            f"Dashboard: {summary.reviewed_count}/{len(self.items)} reviewed, "
            f"avg strength {summary.average_strength}, {summary.due_count} due"
        )

        return summary


def _count_due(upcoming: list[UpcomingReview]) -> int:
    return sum(1 for r in upcoming if r.due_in in (OVERDUE, TODAY))


def _count_high(upcoming: list[UpcomingReview]) -> int:
    return sum(1 for r in upcoming if r.priority is ReviewPriority.HIGH)
