"""Confidence engine for Hunch memory records.

Components:
- engine: tiered confidence, exponential decay, confidence levels, staleness
- cooldown: suggestion feedback and exponential resurfacing backoff
"""

from .cooldown import (
    apply_cooldown,
    apply_suggestion_feedback,
    is_in_cooldown,
    record_ignored,
    record_shown,
    reset_cooldown,
    should_suppress,
    was_shown_recently,
)
from .engine import (
    BASE_CONFIDENCE,
    DECAY_DAYS,
    RECENT_WINDOW_DAYS,
    STALE_AFTER_DAYS,
    check_invariants,
    compute_confidence,
    confidence_level,
    confirm_by_user,
    days_since,
    decayed_confidence,
    decayed_confidence_level,
    deny_by_user,
    effectiveness_score,
    has_recent_data,
    is_stale,
    recent_occurrence_count,
    recompute,
    record_confidence_level,
    record_failure,
    record_occurrence,
    record_success,
)

__all__ = [
    # Constants
    "BASE_CONFIDENCE",
    "DECAY_DAYS",
    "RECENT_WINDOW_DAYS",
    "STALE_AFTER_DAYS",
    # Updates
    "record_occurrence",
    "record_success",
    "record_failure",
    "confirm_by_user",
    "deny_by_user",
    "recompute",
    "compute_confidence",
    # Reads
    "effectiveness_score",
    "days_since",
    "decayed_confidence",
    "recent_occurrence_count",
    "confidence_level",
    "record_confidence_level",
    "decayed_confidence_level",
    "is_stale",
    "has_recent_data",
    "check_invariants",
    # Suggestion feedback
    "apply_suggestion_feedback",
    "record_shown",
    "record_ignored",
    "apply_cooldown",
    "reset_cooldown",
    "is_in_cooldown",
    "was_shown_recently",
    "should_suppress",
]
