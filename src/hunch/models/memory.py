"""MemoryRecord model - one learned trigger/symptom/resolution association."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import MemoryType, ensure_utc, generate_id, utcnow

MAX_RECENT_DATES = 20
CURRENT_SCHEMA_VERSION = 1


class MemoryKey(NamedTuple):
    """Identity of an association inside a memory store."""

    memory_type: MemoryType
    symptom: str
    trigger: str
    resolution: str
    environmental_factor: str
    time_of_day: str


def _norm(value: str | None) -> str:
    return (value or "").strip().casefold()


def build_key(
    memory_type: MemoryType,
    symptom: str | None = None,
    trigger: str | None = None,
    resolution: str | None = None,
    environmental_factor: str | None = None,
    time_of_day: str | None = None,
) -> MemoryKey:
    """Build the store key for an association.

    Text parts are compared case-insensitively. Environmental factor and
    time of day only distinguish ``pattern`` memories; for every other
    type they are context, not identity.
    """
    if memory_type is not MemoryType.PATTERN:
        environmental_factor = None
        time_of_day = None
    return MemoryKey(
        memory_type,
        _norm(symptom),
        _norm(trigger),
        _norm(resolution),
        _norm(environmental_factor),
        _norm(time_of_day),
    )


class MemoryRecord(BaseModel):
    """A learned association with confidence and occurrence bookkeeping.

    Records are mutated only through ``hunch.confidence`` functions and the
    memory store. Every assignment is validated, so a mutation that would
    break an invariant raises instead of leaving the record half-updated.

    Attributes:
        memory_type: Kind of association; immutable after creation.
        symptom: Related symptom (e.g. "Headache").
        trigger: Food, event or condition that preceded the symptom.
        resolution: Remedy that was tried.
        resolution_time_descriptor: Free-text bucket such as "within 2 hours".
        occurrence_count: Observed instances, never below 1.
        success_count: Explicit "it helped" outcomes.
        failure_count: Explicit "it didn't help" outcomes.
        recent_dates: Most recent observation timestamps, oldest first.
        confidence: Reliability score in [0, 1].
        user_confirmed: User said this is accurate.
        user_denied: User said this is wrong.
        is_active: False once the record is soft-deleted.
        last_shown_at: When this memory was last surfaced as a suggestion.
        consecutive_ignores: Surfacings in a row without positive feedback.
        cooldown_until: Suggestion suppressed until this time.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(default_factory=lambda: generate_id("mem"))
    memory_type: MemoryType = Field(frozen=True, description="Kind of association")

    symptom: str | None = None
    trigger: str | None = None
    resolution: str | None = None
    resolution_time_descriptor: str | None = None
    related_environmental_factor: str | None = None
    related_time_of_day: str | None = None
    notes: str | None = None

    occurrence_count: int = Field(default=1, ge=1)
    success_count: int = Field(default=0, ge=0)
    failure_count: int = Field(default=0, ge=0)

    last_occurrence: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)
    recent_dates: list[datetime] = Field(default_factory=list, max_length=MAX_RECENT_DATES)

    confidence: float = Field(default=0.30, ge=0.0, le=1.0)
    user_confirmed: bool = False
    user_denied: bool = False
    is_active: bool = True

    last_shown_at: datetime | None = None
    consecutive_ignores: int = Field(default=0, ge=0)
    cooldown_until: datetime | None = None

    schema_version: int = Field(default=CURRENT_SCHEMA_VERSION, ge=1)

    @field_validator("last_occurrence", "created_at", "last_updated", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("last_shown_at", "cooldown_until", mode="after")
    @classmethod
    def _optional_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @field_validator("recent_dates", mode="after")
    @classmethod
    def _utc_dates(cls, value: list[datetime]) -> list[datetime]:
        return [ensure_utc(v) for v in value]

    @model_validator(mode="after")
    def _feedback_flags_exclusive(self) -> MemoryRecord:
        if self.user_confirmed and self.user_denied:
            raise ValueError("user_confirmed and user_denied cannot both be set")
        return self

    @property
    def effectiveness_score(self) -> float:
        """Share of explicit outcomes that were successes, 0.5 with none."""
        total = self.success_count + self.failure_count
        if total == 0:
            return 0.5
        return self.success_count / total

    @property
    def effectiveness_percentage(self) -> int:
        return int(self.effectiveness_score * 100)

    @property
    def key(self) -> MemoryKey:
        return build_key(
            self.memory_type,
            self.symptom,
            self.trigger,
            self.resolution,
            self.related_environmental_factor,
            self.related_time_of_day,
        )

    def __str__(self) -> str:
        parts = [p for p in (self.trigger, self.resolution, self.symptom) if p]
        return f"MemoryRecord({self.memory_type.value}: {' / '.join(parts)!r})"
