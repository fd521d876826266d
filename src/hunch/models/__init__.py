"""Data models for Hunch.

Memory:
    - MemoryRecord: one learned association with confidence bookkeeping
    - MemoryType, ConfidenceLevel: classification enums

Inbound events:
    - Observation, OutcomeFeedback, JudgmentFeedback, SuggestionFeedback

Recommendations:
    - ProtocolCandidate, UsageLog, RankedRecommendation

Outbound responses:
    - MemorySummary, NeedsMoreDataMessage, GatedResponse, RecommendationResponse
"""

from .base import ConfidenceLevel, MemoryType, ensure_utc, generate_id, utcnow
from .events import (
    Judgment,
    JudgmentFeedback,
    Observation,
    Outcome,
    OutcomeFeedback,
    SuggestionFeedback,
    UserFeedback,
)
from .memory import CURRENT_SCHEMA_VERSION, MAX_RECENT_DATES, MemoryKey, MemoryRecord, build_key
from .protocol import ProtocolCandidate, RankedRecommendation, UsageLog
from .responses import (
    GatedResponse,
    MemorySummary,
    NeedsMoreDataMessage,
    RecommendationResponse,
)

__all__ = [
    # Base types
    "ConfidenceLevel",
    "MemoryType",
    "ensure_utc",
    "generate_id",
    "utcnow",
    # Memory
    "CURRENT_SCHEMA_VERSION",
    "MAX_RECENT_DATES",
    "MemoryKey",
    "MemoryRecord",
    "build_key",
    # Events
    "Judgment",
    "JudgmentFeedback",
    "Observation",
    "Outcome",
    "OutcomeFeedback",
    "SuggestionFeedback",
    "UserFeedback",
    # Recommendations
    "ProtocolCandidate",
    "RankedRecommendation",
    "UsageLog",
    # Responses
    "GatedResponse",
    "MemorySummary",
    "NeedsMoreDataMessage",
    "RecommendationResponse",
]
