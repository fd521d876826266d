"""In-memory keyed store of memory records.

Records are keyed by ``(memory_type, symptom, trigger, resolution)``,
plus environmental factor and time of day for ``pattern`` memories.
Every mutation for a key runs under that key's lock, so concurrent
upserts of the same association each count exactly once. Records are
never deleted; resets and pruning only deactivate them.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta

from hunch.confidence import (
    BASE_CONFIDENCE,
    DECAY_DAYS,
    decayed_confidence,
    record_occurrence,
)
from hunch.exceptions import NotFoundError
from hunch.models import (
    MemoryKey,
    MemoryRecord,
    MemoryType,
    Observation,
    build_key,
    ensure_utc,
    utcnow,
)

logger = logging.getLogger(__name__)

PRUNE_AFTER_DAYS = 180
PRUNE_MAX_CONFIDENCE = 0.3
PRUNE_MAX_OCCURRENCES = 3


def _matches(value: str | None, wanted: str | None) -> bool:
    if wanted is None:
        return True
    return (value or "").strip().casefold() == wanted.strip().casefold()


class MemoryStore:
    """Keyed repository over ``MemoryRecord`` for a single user.

    Example:
        ```python
        store = MemoryStore()
        record = store.upsert(Observation(
            memory_type=MemoryType.TRIGGER, symptom="Headache", trigger="Red wine",
        ))
        store.query(symptom="Headache")  # [record]
        ```
    """

    def __init__(
        self,
        base_confidence: float = BASE_CONFIDENCE,
        decay_days: float = DECAY_DAYS,
    ) -> None:
        """Initialize an empty store.

        Args:
            base_confidence: Confidence given to newly created records.
            decay_days: Decay constant used to order query results.
        """
        self._base_confidence = base_confidence
        self._decay_days = decay_days
        self._records: dict[str, MemoryRecord] = {}
        self._active_by_key: dict[MemoryKey, str] = {}
        self._key_locks: dict[MemoryKey, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MemoryRecord]:
        return iter(self.all_records())

    def _lock_for(self, key: MemoryKey) -> threading.Lock:
        with self._guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def _active_for(self, key: MemoryKey) -> MemoryRecord | None:
        record_id = self._active_by_key.get(key)
        if record_id is None:
            return None
        record = self._records[record_id]
        return record if record.is_active else None

    def upsert(self, observation: Observation) -> MemoryRecord:
        """Count an observation against its association.

        Applies ``record_occurrence`` to the active record for the
        observation's key, or creates one with a single occurrence and
        the base confidence.

        Returns:
            The created or updated record.
        """
        key = build_key(
            observation.memory_type,
            observation.symptom,
            observation.trigger,
            observation.resolution,
            observation.environmental_factor,
            observation.time_of_day,
        )
        with self._lock_for(key):
            existing = self._active_for(key)
            if existing is not None:
                record_occurrence(existing, observation.timestamp)
                self._merge_context(existing, observation)
                logger.debug(
                    "Recorded occurrence %d for memory %s",
                    existing.occurrence_count,
                    existing.id,
                )
                return existing

            record = MemoryRecord(
                memory_type=observation.memory_type,
                symptom=observation.symptom,
                trigger=observation.trigger,
                resolution=observation.resolution,
                resolution_time_descriptor=observation.resolution_time_descriptor,
                related_environmental_factor=observation.environmental_factor,
                related_time_of_day=observation.time_of_day,
                notes=observation.notes,
                occurrence_count=1,
                confidence=self._base_confidence,
                last_occurrence=observation.timestamp,
                recent_dates=[observation.timestamp],
            )
            with self._guard:
                self._records[record.id] = record
                self._active_by_key[key] = record.id
            logger.debug("Created %s memory %s", record.memory_type.value, record.id)
            return record

    @staticmethod
    def _merge_context(record: MemoryRecord, observation: Observation) -> None:
        if observation.resolution_time_descriptor:
            record.resolution_time_descriptor = observation.resolution_time_descriptor
        if observation.environmental_factor:
            record.related_environmental_factor = observation.environmental_factor
        if observation.time_of_day:
            record.related_time_of_day = observation.time_of_day
        if observation.notes:
            record.notes = observation.notes

    def add(self, record: MemoryRecord) -> MemoryRecord:
        """Import an existing record, e.g. one loaded from persistence.

        An active record becomes the key's target unless the key already
        has an active record.
        """
        key = record.key
        with self._lock_for(key), self._guard:
            self._records[record.id] = record
            current = self._active_by_key.get(key)
            if record.is_active and (current is None or not self._records[current].is_active):
                self._active_by_key[key] = record.id
        return record

    def find(self, record_id: str) -> MemoryRecord | None:
        return self._records.get(record_id)

    def get(self, record_id: str) -> MemoryRecord:
        """Get a record by id, active or not.

        Raises:
            NotFoundError: If no record has this id.
        """
        record = self._records.get(record_id)
        if record is None:
            raise NotFoundError("memory_record", record_id)
        return record

    def apply(
        self,
        record_id: str,
        mutation: Callable[[MemoryRecord], object],
    ) -> MemoryRecord:
        """Run ``mutation`` on a record while holding its key lock.

        Raises:
            NotFoundError: If no record has this id.
        """
        record = self.get(record_id)
        with self._lock_for(record.key):
            mutation(record)
        return record

    def all_records(self) -> list[MemoryRecord]:
        with self._guard:
            return list(self._records.values())

    def query(
        self,
        symptom: str | None = None,
        trigger: str | None = None,
        memory_type: MemoryType | None = None,
        now: datetime | None = None,
        include_inactive: bool = False,
    ) -> list[MemoryRecord]:
        """Records matching every given filter, most trustworthy first.

        Ordering is decayed confidence descending, then last occurrence
        descending, then id ascending, so equal scores always come back in
        the same order.
        """
        now = utcnow() if now is None else ensure_utc(now)
        matches = [
            r
            for r in self.all_records()
            if (include_inactive or r.is_active)
            and (memory_type is None or r.memory_type == memory_type)
            and _matches(r.symptom, symptom)
            and _matches(r.trigger, trigger)
        ]
        return sorted(
            matches,
            key=lambda r: (
                -decayed_confidence(r, now, self._decay_days),
                -r.last_occurrence.timestamp(),
                r.id,
            ),
        )

    def deactivate_all(self) -> int:
        """Soft-delete every record ("reset what you've learned").

        Returns:
            Number of records that were active.
        """
        changed = 0
        for record in self.all_records():
            with self._lock_for(record.key):
                if record.is_active:
                    record.is_active = False
                    changed += 1
        logger.info("Deactivated %d memories", changed)
        return changed

    def prune(
        self,
        now: datetime | None = None,
        after_days: int = PRUNE_AFTER_DAYS,
    ) -> int:
        """Deactivate old, weak, unconfirmed records.

        A record is pruned when its last occurrence is older than
        ``after_days``, the user never confirmed it, its confidence is
        below 0.3 and it was seen fewer than 3 times.

        Returns:
            Number of records deactivated.
        """
        now = utcnow() if now is None else ensure_utc(now)
        cutoff = now - timedelta(days=after_days)
        pruned = 0
        for record in self.all_records():
            with self._lock_for(record.key):
                if (
                    record.is_active
                    and record.last_occurrence < cutoff
                    and not record.user_confirmed
                    and record.confidence < PRUNE_MAX_CONFIDENCE
                    and record.occurrence_count < PRUNE_MAX_OCCURRENCES
                ):
                    record.is_active = False
                    pruned += 1
        if pruned:
            logger.info("Pruned %d weak memories", pruned)
        return pruned
