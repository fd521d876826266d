"""Configuration management for Hunch."""

import logging
import warnings
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class RecommendationWeights(BaseModel):
    """Weights for combining protocol recommendation signals.

    The scoring formula is:
        final_score = match * match_score + effectiveness * effectiveness_score

    Weights should sum to 1.0 so that final scores stay in [0, 1].

    Attributes:
        match: Weight for the fraction of target symptoms a protocol covers.
        effectiveness: Weight for the protocol's past effectiveness.
    """

    match: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Weight for symptom match score",
    )
    effectiveness: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Weight for historical effectiveness score",
    )

    @model_validator(mode="after")
    def _warn_if_weights_not_normalized(self) -> "RecommendationWeights":
        """Warn if weights don't sum to approximately 1.0."""
        total = self.match + self.effectiveness
        if abs(total - 1.0) > 0.01:
            warnings.warn(
                f"RecommendationWeights sum to {total:.3f}, expected ~1.0. "
                f"Scores may be outside [0, 1]. "
                f"Weights: match={self.match}, effectiveness={self.effectiveness}",
                UserWarning,
                stacklevel=2,
            )
            logger.warning(
                "RecommendationWeights sum to %.3f (expected ~1.0): match=%.2f, effectiveness=%.2f",
                total,
                self.match,
                self.effectiveness,
            )
        return self

    def validate_weights_sum(self) -> bool:
        """Return True if weights sum to 1.0 (within tolerance)."""
        return abs(self.match + self.effectiveness - 1.0) < 0.01


class Settings(BaseSettings):
    """Hunch configuration loaded from environment variables.

    All settings can be overridden via environment variables with the
    HUNCH_ prefix. For example:
        HUNCH_LOG_FORMAT=text
        HUNCH_DECAY_DAYS=120
        HUNCH_RECOMMENDATION_WEIGHTS__MATCH=0.7
    """

    # Environment
    env: Literal["development", "production", "test"] = Field(
        default="development",
        description="Environment: development, production, or test",
    )

    # Confidence engine
    base_confidence: float = Field(
        default=0.30,
        ge=0.0,
        le=1.0,
        description="Confidence assigned to a freshly observed memory",
    )

    # Decay
    decay_days: float = Field(
        default=180.0,
        gt=0.0,
        description="e-folding time in days for decayed confidence",
    )
    stale_after_days: int = Field(
        default=180,
        ge=1,
        description="Memories with no observation for longer than this are stale",
    )
    recent_window_days: int = Field(
        default=90,
        ge=1,
        description="Window for counting recent occurrences in the decayed confidence level",
    )

    # Gating
    gating_minimum_needed: int = Field(
        default=5,
        ge=1,
        description="Logs shown as the target in 'needs more data' progress strings",
    )
    gating_min_occurrences: int = Field(
        default=3,
        ge=1,
        description="Low-confidence memories below this occurrence count are gated",
    )
    gating_max_summaries: int = Field(
        default=3,
        ge=1,
        description="Most memory summaries returned by one insights response",
    )

    # Recommendations
    recommendation_weights: RecommendationWeights = Field(
        default_factory=RecommendationWeights,
        description="Weights for protocol ranking",
    )

    # Maintenance
    prune_after_days: int = Field(
        default=180,
        ge=1,
        description="Weak, unconfirmed memories older than this are deactivated by prune",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # CORS Configuration
    cors_enabled: bool = Field(
        default=True,
        description="Enable CORS middleware",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="List of allowed CORS origins",
    )

    model_config = {
        "env_prefix": "HUNCH_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }

    @model_validator(mode="after")
    def validate_windows(self) -> "Settings":
        """The recent window must fit inside the staleness horizon.

        A memory counted as "recent" can never also be stale.
        """
        if self.recent_window_days > self.stale_after_days:
            raise ValueError(
                f"recent_window_days ({self.recent_window_days}) must not exceed "
                f"stale_after_days ({self.stale_after_days})"
            )
        return self


# Global settings instance
settings = Settings()
