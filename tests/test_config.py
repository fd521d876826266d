"""Unit tests for Hunch configuration."""

import os
import warnings
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hunch.config import RecommendationWeights, Settings


class TestRecommendationWeights:
    """Tests for RecommendationWeights model."""

    def test_default_weights(self):
        """Default weights should sum to 1.0."""
        weights = RecommendationWeights()
        assert weights.match == 0.6
        assert weights.effectiveness == 0.4
        assert weights.validate_weights_sum()

    def test_custom_weights(self):
        weights = RecommendationWeights(match=0.7, effectiveness=0.3)
        assert weights.validate_weights_sum()

    def test_unnormalized_weights_warn(self):
        """Weights that don't sum to 1 are accepted with a warning."""
        with pytest.warns(UserWarning, match="sum to 1.500"):
            weights = RecommendationWeights(match=0.8, effectiveness=0.7)
        assert not weights.validate_weights_sum()

    def test_normalized_weights_do_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            RecommendationWeights(match=0.5, effectiveness=0.5)

    def test_weight_bounds(self):
        """Weights must be between 0 and 1."""
        with pytest.raises(ValidationError):
            RecommendationWeights(match=1.5)
        with pytest.raises(ValidationError):
            RecommendationWeights(effectiveness=-0.1)


class TestSettings:
    """Tests for Settings model."""

    def test_default_settings(self):
        """Default settings should be reasonable."""
        # Use _env_file=None to prevent reading from .env file
        settings = Settings(_env_file=None)
        assert settings.base_confidence == 0.30
        assert settings.decay_days == 180.0
        assert settings.stale_after_days == 180
        assert settings.recent_window_days == 90
        assert settings.gating_minimum_needed == 5
        assert settings.gating_min_occurrences == 3
        assert settings.gating_max_summaries == 3
        assert settings.prune_after_days == 180
        assert isinstance(settings.recommendation_weights, RecommendationWeights)

    def test_log_formats(self):
        assert Settings(log_format="json", _env_file=None).log_format == "json"
        assert Settings(log_format="text", _env_file=None).log_format == "text"
        with pytest.raises(ValidationError):
            Settings(log_format="xml", _env_file=None)

    def test_decay_days_positive(self):
        with pytest.raises(ValidationError):
            Settings(decay_days=0, _env_file=None)

    def test_base_confidence_bounds(self):
        with pytest.raises(ValidationError):
            Settings(base_confidence=1.2, _env_file=None)

    def test_window_must_fit_stale_horizon(self):
        """A memory counted as recent can't also be stale."""
        with pytest.raises(ValidationError, match="recent_window_days"):
            Settings(recent_window_days=200, stale_after_days=180, _env_file=None)

    def test_env_prefix(self):
        """Settings should use HUNCH_ prefix for environment variables."""
        with patch.dict(os.environ, {"HUNCH_LOG_LEVEL": "DEBUG", "HUNCH_DECAY_DAYS": "120"}):
            settings = Settings(_env_file=None)
            assert settings.log_level == "DEBUG"
            assert settings.decay_days == 120.0

    def test_nested_env(self):
        env = {
            "HUNCH_RECOMMENDATION_WEIGHTS__MATCH": "0.7",
            "HUNCH_RECOMMENDATION_WEIGHTS__EFFECTIVENESS": "0.3",
        }
        with patch.dict(os.environ, env):
            settings = Settings(_env_file=None)
            assert settings.recommendation_weights.match == 0.7
            assert settings.recommendation_weights.effectiveness == 0.3
