"""Outbound structures consumed by the host UI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .base import ConfidenceLevel, MemoryType
from .protocol import RankedRecommendation


class MemorySummary(BaseModel):
    """Confidence snapshot of one memory record at a point in time."""

    model_config = ConfigDict(extra="forbid")

    record_id: str
    confidence: float = Field(ge=0.0, le=1.0)
    decayed_confidence: float = Field(ge=0.0, le=1.0)
    confidence_level: ConfidenceLevel
    effectiveness_percentage: int = Field(ge=0, le=100)
    is_stale: bool

    memory_type: MemoryType
    symptom: str | None = None
    trigger: str | None = None
    resolution: str | None = None
    occurrence_count: int = Field(ge=1)
    decayed_confidence_level: ConfidenceLevel
    evidence: str | None = Field(
        default=None,
        description="Human-readable reason, e.g. 'Based on 6 occurrences, 83% effective'",
    )


class NeedsMoreDataMessage(BaseModel):
    """Shown instead of insights when the evidence is too thin.

    Attributes:
        text: Prompt for the user.
        data_needed: What additional logging would help.
        current_progress: e.g. "2 of ~5 logs"; None when nothing is logged.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    data_needed: list[str]
    current_progress: str | None = None

    @classmethod
    def default(cls) -> NeedsMoreDataMessage:
        return cls(
            text=(
                "I'm still learning your patterns. "
                "Keep logging and I'll start spotting trends soon!"
            ),
            data_needed=[
                "More symptom logs",
                "Food/trigger tracking",
                "Time to observe patterns",
            ],
        )

    @classmethod
    def for_symptom(
        cls, symptom: str, occurrences: int, minimum_needed: int
    ) -> NeedsMoreDataMessage:
        name = symptom.lower()
        return cls(
            text=(
                f"I don't have enough data about your {name} yet to identify patterns. "
                "I'll keep tracking as you log."
            ),
            data_needed=[f"More {name} logs", "Potential trigger info", "What helped or didn't"],
            current_progress=(
                f"{occurrences} of ~{minimum_needed} logs" if occurrences > 0 else None
            ),
        )

    @classmethod
    def general_low_confidence(cls) -> NeedsMoreDataMessage:
        return cls(
            text=(
                "I have some early observations, but need more data to be confident. "
                "I'll keep learning as you log more."
            ),
            data_needed=[
                "Continue logging symptoms",
                "Note what you eat and do",
                "Track what helps",
            ],
        )

    @classmethod
    def insufficient_context(cls) -> NeedsMoreDataMessage:
        return cls(
            text=(
                "Tell me which symptoms you're dealing with "
                "and I can look for protocols that fit."
            ),
            data_needed=["At least one current symptom"],
        )


class GatedResponse(BaseModel):
    """Either memory summaries or a needs-more-data message, never both."""

    model_config = ConfigDict(extra="forbid")

    summaries: list[MemorySummary] = Field(default_factory=list)
    needs_more_data: NeedsMoreDataMessage | None = None

    @property
    def has_enough_data(self) -> bool:
        return self.needs_more_data is None


class RecommendationResponse(BaseModel):
    """Ranked protocols, or the reason none can be offered."""

    model_config = ConfigDict(extra="forbid")

    recommendations: list[RankedRecommendation] = Field(default_factory=list)
    needs_more_data: NeedsMoreDataMessage | None = None
