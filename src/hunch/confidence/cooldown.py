"""Suggestion feedback and resurfacing cooldown.

A memory that keeps being shown without helping is backed off
exponentially: after three consecutive ignores it is suppressed for one
day, then two, four and eight, never more than fourteen. Positive
feedback resets the counter.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from hunch.models.base import ensure_utc, utcnow
from hunch.models.events import UserFeedback
from hunch.models.memory import MemoryRecord

from .engine import clamp_confidence, record_failure, record_success

BASE_COOLDOWN_HOURS = 24
MAX_COOLDOWN_DAYS = 14
IGNORES_BEFORE_COOLDOWN = 3
RECENTLY_SHOWN_HOURS = 4

NOT_RELEVANT_PENALTY = 0.25
DEACTIVATE_AT_OR_BELOW = 0.2


def _now(now: datetime | None) -> datetime:
    return utcnow() if now is None else ensure_utc(now)


def record_shown(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    now = _now(now)
    record.last_shown_at = now
    record.last_updated = now
    return record


def apply_cooldown(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """Suppress the record for 24h * 2^(n-1), n = ignores past the threshold (max 4)."""
    now = _now(now)
    multiplier = min(record.consecutive_ignores - IGNORES_BEFORE_COOLDOWN + 1, 4)
    hours = BASE_COOLDOWN_HOURS * 2 ** max(multiplier - 1, 0)
    hours = min(hours, MAX_COOLDOWN_DAYS * 24)
    record.cooldown_until = now + timedelta(hours=hours)
    record.last_updated = now
    return record


def record_ignored(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """Count a surfacing without positive feedback; start cooldown at the threshold."""
    now = _now(now)
    record.consecutive_ignores += 1
    record.last_updated = now
    if record.consecutive_ignores >= IGNORES_BEFORE_COOLDOWN:
        apply_cooldown(record, now)
    return record


def reset_cooldown(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    record.consecutive_ignores = 0
    record.cooldown_until = None
    record.last_updated = _now(now)
    return record


def is_in_cooldown(record: MemoryRecord, now: datetime | None = None) -> bool:
    if record.cooldown_until is None:
        return False
    return _now(now) < record.cooldown_until


def was_shown_recently(record: MemoryRecord, now: datetime | None = None) -> bool:
    if record.last_shown_at is None:
        return False
    return _now(now) - record.last_shown_at < timedelta(hours=RECENTLY_SHOWN_HOURS)


def should_suppress(record: MemoryRecord, now: datetime | None = None) -> bool:
    """Whether the record should be kept out of surfaced suggestions right now."""
    return is_in_cooldown(record, now) or was_shown_recently(record, now)


def apply_suggestion_feedback(
    record: MemoryRecord,
    feedback: UserFeedback,
    now: datetime | None = None,
) -> MemoryRecord:
    """Fold a quick reaction to a surfaced suggestion into the record.

    - helped: success outcome, confirmed, cooldown reset.
    - didnt_help: failure outcome, counts as ignored.
    - not_sure_yet: no evidence change.
    - not_relevant: denied, confidence cut by 0.25, counts as ignored; the
      record is deactivated once confidence falls to 0.2 or below.
    """
    now = _now(now)

    if feedback is UserFeedback.HELPED:
        record_success(record, now)
        record.user_denied = False
        record.user_confirmed = True
        reset_cooldown(record, now)
    elif feedback is UserFeedback.DIDNT_HELP:
        record_failure(record, now)
        record_ignored(record, now)
    elif feedback is UserFeedback.NOT_RELEVANT:
        record.user_confirmed = False
        record.user_denied = True
        record.confidence = clamp_confidence(record.confidence - NOT_RELEVANT_PENALTY)
        record_ignored(record, now)
        if record.confidence <= DEACTIVATE_AT_OR_BELOW:
            record.is_active = False

    record.last_updated = now
    return record
