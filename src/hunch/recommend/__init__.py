"""Protocol recommendation scoring."""

from .scorer import (
    NEUTRAL_EFFECTIVENESS,
    RecommendationScorer,
    effectiveness_from_logs,
    match_score,
)

__all__ = [
    "NEUTRAL_EFFECTIVENESS",
    "RecommendationScorer",
    "effectiveness_from_logs",
    "match_score",
]
