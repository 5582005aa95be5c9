"""
Error hierarchy for the review scheduler.

Every error is a programming or data-integrity fault: nothing here is
transient, so callers should surface these rather than retry.
"""

from __future__ import annotations


class RecallError(Exception):
    """Base class for all scheduler errors."""

    pass


class InvalidArgument(RecallError, ValueError):
    """Raised when a caller passes a value outside the operation's contract."""

    pass


class InvalidReviewState(RecallError, ValueError):
    """Raised when a review state (or its stored record) is malformed."""

    pass
