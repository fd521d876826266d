"""Protocol ranking for a set of current symptoms.

    final_score = 0.6 * match_score + 0.4 * effectiveness_score

``match_score`` is the share of the *target* symptoms a protocol covers,
so a protocol covering every target symptom scores 1.0 even if it also
treats unrelated ones. ``effectiveness_score`` comes from the protocol's
usage history, falling back to a neutral 0.5.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from statistics import fmean

from hunch.config import RecommendationWeights
from hunch.models import ProtocolCandidate, RankedRecommendation, UsageLog
from hunch.storage import LogRepository

logger = logging.getLogger(__name__)

NEUTRAL_EFFECTIVENESS = 0.5
MAX_RATING = 5.0


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def effectiveness_from_logs(logs: Sequence[UsageLog]) -> float:
    """Past effectiveness of a protocol in [0, 1].

    1. Explicit 1-5 ratings, if any: mean rating / 5.
    2. Otherwise severity change per group: for each group with at least
       two logs and a non-zero first severity, ``(first - last) / first``
       in timestamp order; the mean improvement maps onto
       ``0.5 + improvement / 2`` (no change 0.5, full resolution 1.0).
    3. Otherwise 0.5.
    """
    if not logs:
        return NEUTRAL_EFFECTIVENESS

    ratings = [log.effectiveness_rating for log in logs if log.effectiveness_rating is not None]
    if ratings:
        return _clamp(fmean(ratings) / MAX_RATING)

    groups: defaultdict[str, list[UsageLog]] = defaultdict(list)
    for log in logs:
        groups[log.group_key].append(log)

    improvements: list[float] = []
    for group_key in sorted(groups):
        ordered = sorted(groups[group_key], key=lambda log: log.timestamp)
        if len(ordered) < 2:
            continue
        first, last = ordered[0].severity, ordered[-1].severity
        if first <= 0:
            # No baseline to improve on.
            continue
        improvements.append((first - last) / first)

    if not improvements:
        return NEUTRAL_EFFECTIVENESS
    return _clamp(NEUTRAL_EFFECTIVENESS + fmean(improvements) / 2)


def match_score(candidate_symptoms: Iterable[str], target: set[str]) -> float:
    """Fraction of ``target`` covered by the candidate; 0.0 for an empty target."""
    if not target:
        return 0.0
    return len(set(candidate_symptoms) & target) / len(target)


class RecommendationScorer:
    """Rank protocol candidates for a target symptom set.

    Ranking is deterministic: equal final scores are ordered by protocol
    id, which matters because neutral defaults tie often.
    """

    def __init__(
        self,
        log_repository: LogRepository,
        weights: RecommendationWeights | None = None,
    ) -> None:
        self._logs = log_repository
        self._weights = weights or RecommendationWeights()

    def protocol_effectiveness(self, protocol_id: str) -> float:
        return effectiveness_from_logs(self._logs.usage_logs_for(protocol_id))

    def score(self, candidate: ProtocolCandidate, target: set[str]) -> RankedRecommendation:
        match = match_score(candidate.symptoms, target)
        effectiveness = self.protocol_effectiveness(candidate.id)
        final = self._weights.match * match + self._weights.effectiveness * effectiveness
        return RankedRecommendation(
            protocol_id=candidate.id,
            final_score=final,
            match_score=match,
            effectiveness_score=effectiveness,
        )

    def rank(
        self,
        target_symptoms: Iterable[str],
        candidates: Iterable[ProtocolCandidate],
    ) -> list[RankedRecommendation]:
        """Score and order candidates that share a symptom with the target.

        Returns:
            Recommendations by final score descending, then protocol id.
            Empty when the target is empty or nothing overlaps.
        """
        target = set(target_symptoms)
        if not target:
            logger.debug("Empty target symptom set; no recommendations")
            return []

        scored = [
            self.score(candidate, target)
            for candidate in candidates
            if not target.isdisjoint(candidate.symptoms)
        ]
        scored.sort(key=lambda r: (-r.final_score, r.protocol_id))
        logger.debug("Ranked %d protocols for %d symptoms", len(scored), len(target))
        return scored
