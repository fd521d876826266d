"""Confidence update, decay and classification rules for memory records.

Every function here works on a single ``MemoryRecord`` and on nothing
else: no module state, no clock reads except the ``now`` default. Mutating
functions change the record in place and return it, so a caller can apply
one triggering event inside a single critical section.

Confidence is tiered rather than continuous so that it stays readable
("10+ consistent observations is High"):

    confidence = 0.30
               + occurrence tier   (+0.10 at 3, +0.20 at 5, +0.30 at 10)
               + effectiveness tier (remedies only: +0.15 at 0.5, +0.30 at 0.7)
               + 0.10 if confirmed by the user
               - 0.20 if denied by the user

Within each category the highest tier wins; the two categories add up.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from hunch.exceptions import InvariantViolationError
from hunch.models.base import ConfidenceLevel, ensure_utc, utcnow
from hunch.models.memory import MAX_RECENT_DATES, MemoryRecord

BASE_CONFIDENCE = 0.30
CONFIRM_BOOST = 0.10
DENY_PENALTY = 0.20

DECAY_DAYS = 180.0
STALE_AFTER_DAYS = 180
RECENT_WINDOW_DAYS = 90
RECENT_OCCURRENCE_FLOOR = 3

# (minimum occurrences, boost), highest first
OCCURRENCE_TIERS: tuple[tuple[int, float], ...] = ((10, 0.30), (5, 0.20), (3, 0.10))
# (minimum effectiveness ratio, boost), highest first
EFFECTIVENESS_TIERS: tuple[tuple[float, float], ...] = ((0.7, 0.30), (0.5, 0.15))

HIGH_MIN_OCCURRENCES = 10
HIGH_MIN_CONFIDENCE = 0.7
MEDIUM_MIN_OCCURRENCES = 5
MEDIUM_MIN_CONFIDENCE = 0.5


def clamp_confidence(value: float) -> float:
    """Clamp to [0, 1]."""
    # Rounding keeps tier sums such as 0.3 + 0.3 + 0.3 off the float noise floor.
    return round(min(1.0, max(0.0, value)), 10)


def _now(now: datetime | None) -> datetime:
    return utcnow() if now is None else ensure_utc(now)


def _tier(value: float, tiers: tuple[tuple[float, float], ...]) -> float:
    for threshold, boost in tiers:
        if value >= threshold:
            return boost
    return 0.0


def effectiveness_score(record: MemoryRecord) -> float:
    """successes / (successes + failures), or the neutral 0.5 with no outcomes."""
    return record.effectiveness_score


def compute_confidence(record: MemoryRecord) -> float:
    """Confidence the record's evidence supports, without assigning it."""
    value = BASE_CONFIDENCE
    value += _tier(record.occurrence_count, OCCURRENCE_TIERS)
    if record.memory_type.is_remedy:
        value += _tier(effectiveness_score(record), EFFECTIVENESS_TIERS)
    if record.user_confirmed:
        value += CONFIRM_BOOST
    if record.user_denied:
        value -= DENY_PENALTY
    return clamp_confidence(value)


def recompute(record: MemoryRecord) -> float:
    """Recompute and store the record's confidence.

    Returns:
        The new confidence value.
    """
    record.confidence = compute_confidence(record)
    return record.confidence


def record_occurrence(record: MemoryRecord, at: datetime | None = None) -> MemoryRecord:
    """Count one more observation of the association at ``at``.

    ``recent_dates`` keeps the last 20 appended timestamps in insertion
    order, even when an older date is appended after a newer one.
    """
    at = _now(at)
    record.occurrence_count += 1
    record.last_occurrence = at
    record.recent_dates = [*record.recent_dates, at][-MAX_RECENT_DATES:]
    record.last_updated = at
    recompute(record)
    return record


def record_success(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """Record that the remedy or suggestion helped."""
    record.success_count += 1
    record.last_updated = _now(now)
    recompute(record)
    return record


def record_failure(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """Record that the remedy or suggestion didn't help."""
    record.failure_count += 1
    record.last_updated = _now(now)
    recompute(record)
    return record


def confirm_by_user(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """User says the memory is accurate: flag it and boost confidence by 0.10.

    The boost is applied to the current value, not through ``recompute``;
    the next recompute folds the confirmation into the tier sum.
    """
    record.user_denied = False
    record.user_confirmed = True
    record.confidence = clamp_confidence(record.confidence + CONFIRM_BOOST)
    record.last_updated = _now(now)
    return record


def deny_by_user(record: MemoryRecord, now: datetime | None = None) -> MemoryRecord:
    """User says the memory is wrong: flag it and cut confidence by 0.20."""
    record.user_confirmed = False
    record.user_denied = True
    record.confidence = clamp_confidence(record.confidence - DENY_PENALTY)
    record.last_updated = _now(now)
    return record


def days_since(then: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed from ``then`` to ``now``; never negative."""
    delta = _now(now) - ensure_utc(then)
    return max(0, delta.days)


def decayed_confidence(
    record: MemoryRecord,
    now: datetime | None = None,
    decay_days: float = DECAY_DAYS,
) -> float:
    """Confidence discounted for inactivity.

    ``confidence * exp(-days / 180)``: six idle months leave ~37%, a year
    ~14%. Stale observations stop dominating rankings without ever being
    thrown away.
    """
    days = days_since(record.last_occurrence, now)
    return record.confidence * math.exp(-days / decay_days)


def recent_occurrence_count(
    record: MemoryRecord,
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
) -> int:
    """Observations within the recent window, floored at min(occurrences, 3)."""
    cutoff = _now(now) - timedelta(days=window_days)
    recent = sum(1 for d in record.recent_dates if d >= cutoff)
    return max(recent, min(record.occurrence_count, RECENT_OCCURRENCE_FLOOR))


def confidence_level(confidence: float, occurrence_count: int) -> ConfidenceLevel:
    """Bucket a confidence score given how much evidence backs it."""
    if occurrence_count >= HIGH_MIN_OCCURRENCES and confidence >= HIGH_MIN_CONFIDENCE:
        return ConfidenceLevel.HIGH
    if occurrence_count >= MEDIUM_MIN_OCCURRENCES and confidence >= MEDIUM_MIN_CONFIDENCE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def record_confidence_level(record: MemoryRecord) -> ConfidenceLevel:
    """Lifetime confidence level of a record."""
    return confidence_level(record.confidence, record.occurrence_count)


def decayed_confidence_level(
    record: MemoryRecord,
    now: datetime | None = None,
    decay_days: float = DECAY_DAYS,
    window_days: int = RECENT_WINDOW_DAYS,
) -> ConfidenceLevel:
    """Confidence level using decayed confidence and recent occurrences."""
    return confidence_level(
        decayed_confidence(record, now, decay_days),
        recent_occurrence_count(record, now, window_days),
    )


def is_stale(
    record: MemoryRecord,
    now: datetime | None = None,
    stale_after_days: int = STALE_AFTER_DAYS,
) -> bool:
    """More than 180 days since the last observation."""
    return days_since(record.last_occurrence, now) > stale_after_days


def has_recent_data(
    record: MemoryRecord,
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
) -> bool:
    """Observed within the recent window."""
    return days_since(record.last_occurrence, now) <= window_days


def check_invariants(record: MemoryRecord) -> None:
    """Raise if the record breaks an invariant.

    Validated records cannot; this guards records created with
    ``model_construct`` or loaded by a collaborator without validation.

    Raises:
        InvariantViolationError: On the first broken invariant.
    """
    if math.isnan(record.confidence) or not 0.0 <= record.confidence <= 1.0:
        raise InvariantViolationError(record.id, f"confidence {record.confidence} outside [0, 1]")
    if record.occurrence_count < 1:
        raise InvariantViolationError(record.id, "occurrence_count below 1")
    if len(record.recent_dates) > MAX_RECENT_DATES:
        raise InvariantViolationError(
            record.id, f"{len(record.recent_dates)} recent dates (max {MAX_RECENT_DATES})"
        )
    if record.user_confirmed and record.user_denied:
        raise InvariantViolationError(record.id, "both confirmed and denied")
