"""Inbound events supplied by the host application."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import MemoryType, ensure_utc, utcnow


class Observation(BaseModel):
    """One observed instance of an association.

    Attributes:
        memory_type: Kind of association observed.
        symptom: Symptom involved, if any.
        trigger: Preceding food, event or condition, if any.
        resolution: Remedy tried, if any.
        resolution_time_descriptor: Free-text time bucket ("next day").
        timestamp: When the observation happened.
        environmental_factor: e.g. "Low pressure".
        time_of_day: e.g. "Morning".
        notes: Optional human-readable note kept on the record.
    """

    model_config = ConfigDict(extra="forbid")

    memory_type: MemoryType
    symptom: str | None = None
    trigger: str | None = None
    resolution: str | None = None
    resolution_time_descriptor: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    environmental_factor: str | None = None
    time_of_day: str | None = None
    notes: str | None = None

    @field_validator("timestamp", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class Judgment(str, Enum):
    CONFIRM = "confirm"
    DENY = "deny"


class UserFeedback(str, Enum):
    """Quick reaction to a surfaced suggestion."""

    HELPED = "helped"
    DIDNT_HELP = "didnt_help"
    NOT_SURE_YET = "not_sure_yet"
    NOT_RELEVANT = "not_relevant"  # suppresses future resurfacing


class OutcomeFeedback(BaseModel):
    """Explicit success/failure outcome for a remedy or suggestion."""

    model_config = ConfigDict(extra="forbid")

    memory_record_id: str = Field(min_length=1)
    outcome: Outcome


class JudgmentFeedback(BaseModel):
    """User statement that a memory is accurate or wrong."""

    model_config = ConfigDict(extra="forbid")

    memory_record_id: str = Field(min_length=1)
    user_judgment: Judgment


class SuggestionFeedback(BaseModel):
    """User reaction to a suggestion that was shown to them."""

    model_config = ConfigDict(extra="forbid")

    memory_record_id: str = Field(min_length=1)
    feedback: UserFeedback
