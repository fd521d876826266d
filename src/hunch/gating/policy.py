"""Insufficient-data gate in front of every surfaced insight.

Before anything about a symptom is shown, the best matching memory must
carry real evidence. When it doesn't, the whole response is replaced by
a "still learning" message; there is no partial answer with a caveat,
so thin evidence never reads as a diagnosis.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from hunch.config import Settings
from hunch.confidence import (
    DECAY_DAYS,
    RECENT_WINDOW_DAYS,
    STALE_AFTER_DAYS,
    days_since,
    decayed_confidence,
    decayed_confidence_level,
    is_stale,
    record_confidence_level,
)
from hunch.models import (
    ConfidenceLevel,
    GatedResponse,
    MemoryRecord,
    MemorySummary,
    NeedsMoreDataMessage,
    RankedRecommendation,
    RecommendationResponse,
    ensure_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

MINIMUM_NEEDED = 5
MIN_OCCURRENCES = 3
MAX_SUMMARIES = 3


def evidence_summary(record: MemoryRecord, now: datetime | None = None) -> str | None:
    """Explain what a memory is based on, e.g. "Based on 6 occurrences, over 3 months".

    Returns:
        The sentence, or None when there is nothing worth citing.
    """
    parts: list[str] = []
    if record.occurrence_count > 1:
        parts.append(f"{record.occurrence_count} occurrences")

    age = days_since(record.created_at, now)
    if age > 90:
        parts.append(f"over {age // 30} months")
    elif age > 30:
        parts.append(f"over {age // 7} weeks")
    elif age > 7:
        parts.append(f"past {age} days")

    if record.effectiveness_percentage > 0 and record.success_count + record.failure_count >= 3:
        parts.append(f"{record.effectiveness_percentage}% effective")

    if not parts:
        return None
    return "Based on " + ", ".join(parts)


class GatingPolicy:
    """Decide between specific insights and a needs-more-data message.

    Attributes:
        minimum_needed: Log count quoted as the target in progress strings.
        min_occurrences: Low-confidence memories seen fewer times are gated.
        max_summaries: Most summaries returned by one insights response.
    """

    def __init__(
        self,
        minimum_needed: int = MINIMUM_NEEDED,
        min_occurrences: int = MIN_OCCURRENCES,
        max_summaries: int = MAX_SUMMARIES,
        decay_days: float = DECAY_DAYS,
        stale_after_days: int = STALE_AFTER_DAYS,
        recent_window_days: int = RECENT_WINDOW_DAYS,
    ) -> None:
        self.minimum_needed = minimum_needed
        self.min_occurrences = min_occurrences
        self.max_summaries = max_summaries
        self._decay_days = decay_days
        self._stale_after_days = stale_after_days
        self._recent_window_days = recent_window_days

    @classmethod
    def from_settings(cls, settings: Settings) -> GatingPolicy:
        return cls(
            minimum_needed=settings.gating_minimum_needed,
            min_occurrences=settings.gating_min_occurrences,
            max_summaries=settings.gating_max_summaries,
            decay_days=settings.decay_days,
            stale_after_days=settings.stale_after_days,
            recent_window_days=settings.recent_window_days,
        )

    def has_enough_evidence(self, records: Sequence[MemoryRecord]) -> bool:
        """Whether the best record (first in query order) may be surfaced."""
        if not records:
            return False
        best = records[0]
        return not (
            record_confidence_level(best) is ConfidenceLevel.LOW
            and best.occurrence_count < self.min_occurrences
        )

    def summarize(self, record: MemoryRecord, now: datetime | None = None) -> MemorySummary:
        now = utcnow() if now is None else ensure_utc(now)
        return MemorySummary(
            record_id=record.id,
            confidence=record.confidence,
            decayed_confidence=decayed_confidence(record, now, self._decay_days),
            confidence_level=record_confidence_level(record),
            effectiveness_percentage=record.effectiveness_percentage,
            is_stale=is_stale(record, now, self._stale_after_days),
            memory_type=record.memory_type,
            symptom=record.symptom,
            trigger=record.trigger,
            resolution=record.resolution,
            occurrence_count=record.occurrence_count,
            decayed_confidence_level=decayed_confidence_level(
                record, now, self._decay_days, self._recent_window_days
            ),
            evidence=evidence_summary(record, now),
        )

    def evaluate(
        self,
        symptom: str,
        records: Sequence[MemoryRecord],
        now: datetime | None = None,
        surfaced: Iterable[MemoryRecord] | None = None,
    ) -> GatedResponse:
        """Gate the memories found for a symptom.

        Args:
            symptom: Symptom the user asked about.
            records: Memory store query result, best first.
            now: Evaluation time.
            surfaced: Records to summarize when the gate passes; defaults
                to ``records``. The gate itself always looks at ``records``.

        Returns:
            Up to ``max_summaries`` summaries, best first, when the evidence
            is adequate. Otherwise a needs-more-data message and no
            summaries. When the gate passes but nothing may be surfaced,
            the low-confidence message is returned instead.
        """
        if not self.has_enough_evidence(records):
            occurrences = records[0].occurrence_count if records else 0
            logger.debug("Gated insights for %s at %d occurrences", symptom, occurrences)
            return GatedResponse(
                needs_more_data=NeedsMoreDataMessage.for_symptom(
                    symptom, occurrences, self.minimum_needed
                )
            )
        chosen = list(records if surfaced is None else surfaced)[: self.max_summaries]
        if not chosen:
            logger.debug("Nothing to surface for %s", symptom)
            return GatedResponse(needs_more_data=NeedsMoreDataMessage.general_low_confidence())
        return GatedResponse(summaries=[self.summarize(r, now) for r in chosen])

    def evaluate_recommendations(
        self,
        target_symptoms: Iterable[str],
        ranked: list[RankedRecommendation],
    ) -> RecommendationResponse:
        """Pass a ranking through, or explain why there is none."""
        if not set(target_symptoms):
            return RecommendationResponse(
                needs_more_data=NeedsMoreDataMessage.insufficient_context()
            )
        if not ranked:
            return RecommendationResponse(needs_more_data=NeedsMoreDataMessage.default())
        return RecommendationResponse(recommendations=ranked)
