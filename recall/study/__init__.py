"""
Study Module - caller-side policies around the scheduler.

Provides:
- Quiz score to SM-2 quality mapping
- Review dashboard summaries (strength, trend, upcoming and due reviews)
"""

from recall.study.dashboard import (
    DashboardSummary,
    ItemStrength,
    ReviewDashboard,
    ReviewItem,
    ReviewPriority,
    TrendPoint,
    UpcomingReview,
    classify_due,
)
from recall.study.quality import quality_from_score

__all__ = [
    "quality_from_score",
    "ReviewDashboard",
    "ReviewItem",
    "ReviewPriority",
    "ItemStrength",
    "UpcomingReview",
    "DashboardSummary",
    "TrendPoint",
    "classify_due",
]
