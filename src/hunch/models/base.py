"""Base enums, ids and time helpers shared by Hunch models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class MemoryType(str, Enum):
    """What kind of association a memory record captures.

    Fixed when the record is created.
    """

    WHAT_WORKED = "what_worked"  # "Magnesium helped headache"
    WHAT_DIDNT_WORK = "what_didnt_work"  # "Ibuprofen didn't help"
    TRIGGER = "trigger"  # "Dairy precedes bloating"
    PATTERN = "pattern"  # "Headaches on low pressure days"
    CORRELATION = "correlation"  # "Short sleep precedes fatigue"
    PREFERENCE = "preference"  # "Prefers natural remedies"

    @property
    def is_remedy(self) -> bool:
        """Whether success/failure feedback shapes this type's confidence."""
        return self in (MemoryType.WHAT_WORKED, MemoryType.WHAT_DIDNT_WORK)


class ConfidenceLevel(str, Enum):
    """Human-facing bucket for a confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def description(self) -> str:
        return _LEVEL_DESCRIPTIONS[self]


_LEVEL_DESCRIPTIONS = {
    ConfidenceLevel.HIGH: "Observed many times with consistent results",
    ConfidenceLevel.MEDIUM: "Observed several times, pattern emerging",
    ConfidenceLevel.LOW: "Limited observations, needs more data",
}


def generate_id(prefix: str) -> str:
    """Generate a unique ID with the given prefix.

    Examples:
        generate_id("mem") -> "mem_a1b2c3d4e5f6"
    """
    return f"{prefix}_{uuid4().hex[:12]}"


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
