"""Core Hunch service layer.

This module provides HunchService, which ties the per-user memory
stores, the confidence engine, the gating policy and the recommendation
scorer into one interface.

Example:
    ```python
    from hunch.models import MemoryType, Observation
    from hunch.service import HunchService

    hunch = HunchService.create()
    hunch.observe("user_123", Observation(
        memory_type=MemoryType.TRIGGER, symptom="Headache", trigger="Red wine",
    ))
    response = hunch.insights("user_123", "Headache")
    if not response.has_enough_data:
        print(response.needs_more_data.text)
    ```
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from hunch.config import Settings
from hunch.confidence import (
    apply_suggestion_feedback,
    confirm_by_user,
    deny_by_user,
    is_in_cooldown,
    record_confidence_level,
    record_failure,
    record_shown,
    record_success,
)
from hunch.exceptions import ValidationError
from hunch.gating import GatingPolicy
from hunch.models import (
    GatedResponse,
    Judgment,
    JudgmentFeedback,
    MemoryRecord,
    MemorySummary,
    MemoryType,
    Observation,
    Outcome,
    OutcomeFeedback,
    ProtocolCandidate,
    RecommendationResponse,
    SuggestionFeedback,
    ensure_utc,
    utcnow,
)
from hunch.recommend import RecommendationScorer
from hunch.storage import InMemoryLogRepository, LogRepository, MemoryStore
from hunch.workflows import MaintenanceResult, SystemStatus, run_maintenance, system_status

logger = logging.getLogger(__name__)

STILL_LEARNING_TEXT = (
    "I'm still learning about your patterns. Keep logging your symptoms and "
    "what you try, and I'll start noticing correlations!"
)


@dataclass
class HunchService:
    """High-level Hunch service for learning from logs and surfacing insights.

    This service provides a simple interface for:
    - observe(): count an observation against its memory
    - record_outcome() / record_judgment() / record_suggestion_feedback():
      fold user feedback into a memory
    - insights(): gated summaries for a symptom
    - recommend(): gated protocol ranking

    Each user gets an isolated MemoryStore, created on first use.

    Attributes:
        settings: Configuration settings.
        log_repository: Source of protocol usage history.
    """

    settings: Settings
    log_repository: LogRepository

    _stores: dict[str, MemoryStore] = field(default_factory=dict, init=False, repr=False)
    _stores_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _gating: GatingPolicy = field(init=False, repr=False)
    _scorer: RecommendationScorer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Build the policy and scorer from settings."""
        self._gating = GatingPolicy.from_settings(self.settings)
        self._scorer = RecommendationScorer(
            self.log_repository, self.settings.recommendation_weights
        )

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        log_repository: LogRepository | None = None,
    ) -> HunchService:
        """Create a HunchService with default dependencies.

        Args:
            settings: Optional settings. Uses defaults if None.
            log_repository: Optional usage log source. Uses an empty
                in-memory repository if None.
        """
        if settings is None:
            settings = Settings()
        if log_repository is None:
            log_repository = InMemoryLogRepository()
        return cls(settings=settings, log_repository=log_repository)

    @property
    def gating(self) -> GatingPolicy:
        return self._gating

    def store_for(self, user_id: str) -> MemoryStore:
        """Get (or create) the memory store for a user."""
        with self._stores_lock:
            store = self._stores.get(user_id)
            if store is None:
                store = self._stores[user_id] = MemoryStore(
                    base_confidence=self.settings.base_confidence,
                    decay_days=self.settings.decay_days,
                )
                logger.debug("Created memory store for user %s", user_id)
            return store

    def observe(self, user_id: str, observation: Observation) -> MemoryRecord:
        return self.store_for(user_id).upsert(observation)

    def record_outcome(self, user_id: str, feedback: OutcomeFeedback) -> MemoryRecord:
        """Record that a remedy or suggestion worked or didn't.

        Raises:
            NotFoundError: If the record id is unknown for this user.
        """
        mutation = record_success if feedback.outcome is Outcome.SUCCESS else record_failure
        return self.store_for(user_id).apply(feedback.memory_record_id, mutation)

    def record_judgment(self, user_id: str, feedback: JudgmentFeedback) -> MemoryRecord:
        """Record that the user confirmed or denied a memory.

        Raises:
            NotFoundError: If the record id is unknown for this user.
        """
        mutation = confirm_by_user if feedback.user_judgment is Judgment.CONFIRM else deny_by_user
        return self.store_for(user_id).apply(feedback.memory_record_id, mutation)

    def record_suggestion_feedback(
        self,
        user_id: str,
        feedback: SuggestionFeedback,
        now: datetime | None = None,
    ) -> MemoryRecord:
        """Fold a reaction to a surfaced suggestion into its memory.

        Raises:
            NotFoundError: If the record id is unknown for this user.
        """
        record = self.store_for(user_id).apply(
            feedback.memory_record_id,
            lambda r: apply_suggestion_feedback(r, feedback.feedback, now),
        )
        if not record.is_active:
            logger.info("Memory %s deactivated after not_relevant feedback", record.id)
        return record

    def insights(
        self,
        user_id: str,
        symptom: str,
        now: datetime | None = None,
    ) -> GatedResponse:
        """Gated insights about a symptom.

        Memories in suggestion cooldown are left out of the summaries but
        still count toward the gate. Surfaced memories are marked shown.

        Raises:
            ValidationError: If the symptom is blank.
        """
        if not symptom.strip():
            raise ValidationError("symptom", "must not be blank")
        now = utcnow() if now is None else ensure_utc(now)
        store = self.store_for(user_id)
        records = store.query(symptom=symptom, now=now)
        surfaced = [r for r in records if not is_in_cooldown(r, now)]

        response = self._gating.evaluate(symptom, records, now, surfaced=surfaced)
        for summary in response.summaries:
            store.apply(summary.record_id, lambda r: record_shown(r, now))
        return response

    def recommend(
        self,
        user_id: str,
        target_symptoms: Iterable[str],
        candidates: Iterable[ProtocolCandidate],
    ) -> RecommendationResponse:
        """Gated protocol ranking for the user's current symptoms."""
        target = set(target_symptoms)
        ranked = self._scorer.rank(target, candidates)
        logger.debug("User %s: %d protocols ranked", user_id, len(ranked))
        return self._gating.evaluate_recommendations(target, ranked)

    def summaries(
        self,
        user_id: str,
        symptom: str | None = None,
        trigger: str | None = None,
        memory_type: MemoryType | None = None,
        now: datetime | None = None,
    ) -> list[MemorySummary]:
        """Ungated summaries of active memories, best first."""
        now = utcnow() if now is None else ensure_utc(now)
        records = self.store_for(user_id).query(
            symptom=symptom, trigger=trigger, memory_type=memory_type, now=now
        )
        return [self._gating.summarize(r, now) for r in records]

    def reset_memory(self, user_id: str) -> int:
        """Deactivate everything learned for a user.

        Returns:
            Number of memories deactivated.
        """
        return self.store_for(user_id).deactivate_all()

    def learned_summary_text(self, user_id: str, now: datetime | None = None) -> str:
        """Plain-text digest of what has been learned for a user."""
        store = self.store_for(user_id)
        triggers = store.query(memory_type=MemoryType.TRIGGER, now=now)[:5]
        remedies = store.query(memory_type=MemoryType.WHAT_WORKED, now=now)[:5]
        patterns = store.query(memory_type=MemoryType.PATTERN, now=now)[:3]

        if not (triggers or remedies or patterns):
            return STILL_LEARNING_TEXT

        lines = ["Based on your logs, I've learned:", ""]
        if triggers:
            lines.append("**Triggers:**")
            for record in triggers:
                level = record_confidence_level(record).value
                lines.append(
                    f"- {record.trigger or 'Unknown'} may trigger "
                    f"{record.symptom or 'symptoms'} ({level} confidence)"
                )
            lines.append("")
        if remedies:
            lines.append("**What Helps:**")
            for record in remedies:
                lines.append(
                    f"- {record.resolution or 'Unknown'} for {record.symptom or 'symptoms'} "
                    f"({record.effectiveness_percentage}% effective)"
                )
            lines.append("")
        if patterns:
            lines.append("**Patterns:**")
            for record in patterns:
                lines.append(f"- {record.notes or record.symptom or 'Pattern observed'}")
        return "\n".join(lines).rstrip() + "\n"

    def run_maintenance(self, user_id: str, now: datetime | None = None) -> MaintenanceResult:
        return run_maintenance(
            self.store_for(user_id),
            now,
            prune_after_days=self.settings.prune_after_days,
        )

    def status(self, user_id: str, now: datetime | None = None) -> SystemStatus:
        return system_status(self.store_for(user_id).all_records(), now)
