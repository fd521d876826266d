"""Protocol candidates, usage history and ranked recommendations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import ensure_utc


class UsageLog(BaseModel):
    """One logged use of a protocol, as supplied by the log repository.

    Attributes:
        severity: Symptom severity recorded with the use (0 = none).
        effectiveness_rating: Optional explicit 1-5 rating.
        timestamp: When the log was recorded.
        group_key: Originating record/user; severity deltas are computed
            within a group.
    """

    model_config = ConfigDict(extra="forbid")

    severity: float = Field(ge=0.0)
    effectiveness_rating: int | None = Field(default=None, ge=1, le=5)
    timestamp: datetime
    group_key: str

    @field_validator("timestamp", mode="after")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ProtocolCandidate(BaseModel):
    """A protocol that may be recommended for a set of symptoms."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    symptoms: list[str] = Field(default_factory=list)


class RankedRecommendation(BaseModel):
    """A scored protocol in a ranked recommendation list.

    Attributes:
        protocol_id: Candidate id.
        final_score: Weighted combination used for ranking.
        match_score: Fraction of the target symptoms this protocol covers.
        effectiveness_score: Past effectiveness in [0, 1], 0.5 if unknown.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    protocol_id: str
    final_score: float
    match_score: float = Field(ge=0.0, le=1.0)
    effectiveness_score: float = Field(ge=0.0, le=1.0)
