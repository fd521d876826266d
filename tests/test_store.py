"""Tests for the in-memory memory store."""

import threading
from datetime import timedelta

import pytest

from hunch.confidence import confirm_by_user, record_success
from hunch.exceptions import NotFoundError
from hunch.models import MemoryRecord, MemoryType
from hunch.storage import MemoryStore


class TestUpsert:
    """Tests for counting observations against associations."""

    def test_new_record(self, store, make_observation, now):
        """A first observation creates one record at the base confidence."""
        record = store.upsert(make_observation())
        assert record.occurrence_count == 1
        assert record.confidence == 0.30
        assert record.last_occurrence == now
        assert record.recent_dates == [now]
        assert len(store) == 1

    def test_same_key_merges(self, store, make_observation, now):
        first = store.upsert(make_observation())
        later = now + timedelta(days=1)
        second = store.upsert(make_observation(trigger="RED WINE", timestamp=later))
        assert second is first
        assert first.occurrence_count == 2
        assert first.last_occurrence == now + timedelta(days=1)
        assert len(store) == 1

    def test_different_key_creates(self, store, make_observation):
        store.upsert(make_observation())
        store.upsert(make_observation(trigger="Cheese"))
        assert len(store) == 2

    def test_third_occurrence_reaches_tier(self, store, make_observation):
        for _ in range(3):
            record = store.upsert(make_observation())
        assert record.confidence == pytest.approx(0.40)

    def test_context_merged(self, store, make_observation):
        record = store.upsert(make_observation())
        store.upsert(make_observation(environmental_factor="Humid", notes="after dinner"))
        assert record.related_environmental_factor == "Humid"
        assert record.notes == "after dinner"

    def test_patterns_keyed_by_context(self, store, make_observation):
        a = store.upsert(
            make_observation(memory_type=MemoryType.PATTERN, trigger=None, time_of_day="Morning")
        )
        b = store.upsert(
            make_observation(memory_type=MemoryType.PATTERN, trigger=None, time_of_day="Evening")
        )
        assert a.id != b.id

    def test_custom_base_confidence(self, make_observation):
        record = MemoryStore(base_confidence=0.25).upsert(make_observation())
        assert record.confidence == 0.25

    def test_inactive_record_not_reused(self, store, make_observation):
        old = store.upsert(make_observation())
        store.deactivate_all()
        new = store.upsert(make_observation())
        assert new.id != old.id
        assert new.occurrence_count == 1
        assert len(store) == 2


class TestConcurrency:
    def test_parallel_upserts_count_once_each(self, store, make_observation):
        """Concurrent observations of one association are never lost."""
        workers = 8
        per_worker = 50
        barrier = threading.Barrier(workers)

        def work():
            barrier.wait()
            for _ in range(per_worker):
                store.upsert(make_observation())

        threads = [threading.Thread(target=work) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 1
        (record,) = store.all_records()
        assert record.occurrence_count == workers * per_worker
        assert len(record.recent_dates) == 20

    def test_parallel_feedback(self, store, make_observation):
        record = store.upsert(
            make_observation(memory_type=MemoryType.WHAT_WORKED, resolution="Nap")
        )

        def work():
            for _ in range(100):
                store.apply(record.id, record_success)

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert record.success_count == 400


class TestLookup:
    def test_get(self, store, make_observation):
        record = store.upsert(make_observation())
        assert store.get(record.id) is record
        assert store.find(record.id) is record

    def test_get_unknown_raises(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.get("mem_missing")
        assert exc_info.value.resource_type == "memory_record"
        assert exc_info.value.resource_id == "mem_missing"

    def test_find_unknown_returns_none(self, store):
        assert store.find("mem_missing") is None

    def test_apply_runs_mutation(self, store, make_observation):
        record = store.upsert(make_observation())
        store.apply(record.id, confirm_by_user)
        assert record.user_confirmed

    def test_apply_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.apply("mem_missing", confirm_by_user)

    def test_add_existing_record(self, store, make_record, make_observation):
        record = store.add(
            make_record(memory_type=MemoryType.TRIGGER, trigger="Red wine", resolution=None)
        )
        merged = store.upsert(make_observation())
        assert merged is record
        assert record.occurrence_count == 2

    def test_iteration(self, store, make_observation):
        store.upsert(make_observation())
        assert [r.trigger for r in store] == ["Red wine"]


class TestQuery:
    """Tests for filtered, ordered reads."""

    def test_filters(self, store, make_observation):
        store.upsert(make_observation())
        store.upsert(make_observation(symptom="Nausea"))
        store.upsert(
            make_observation(memory_type=MemoryType.WHAT_WORKED, trigger=None, resolution="Nap")
        )
        assert len(store.query(symptom="headache")) == 2
        assert len(store.query(symptom="Headache", memory_type=MemoryType.TRIGGER)) == 1
        assert len(store.query(trigger="red wine")) == 2
        assert len(store.query()) == 3

    def test_excludes_inactive_by_default(self, store, make_observation):
        store.upsert(make_observation())
        store.deactivate_all()
        assert store.query() == []
        assert len(store.query(include_inactive=True)) == 1

    def test_ordered_by_decayed_confidence(self, store, make_record, now):
        fresh = store.add(make_record(trigger="A", confidence=0.5))
        long_ago = now - timedelta(days=200)
        old = store.add(make_record(trigger="B", confidence=0.6, last_occurrence=long_ago))
        strong = store.add(make_record(trigger="C", confidence=0.9))
        assert [r.id for r in store.query(now=now)] == [strong.id, fresh.id, old.id]

    def test_ties_broken_by_recency_then_id(self, store, make_record, now):
        earlier = now - timedelta(hours=2)
        a = store.add(make_record(id="mem_b", trigger="A", last_occurrence=earlier))
        b = store.add(make_record(id="mem_a", trigger="B", last_occurrence=earlier))
        c = store.add(make_record(id="mem_c", trigger="C", last_occurrence=now))
        assert [r.id for r in store.query(now=now)] == [c.id, b.id, a.id]


class TestDeactivateAndPrune:
    def test_deactivate_all(self, store, make_observation):
        store.upsert(make_observation())
        store.upsert(make_observation(trigger="Cheese"))
        assert store.deactivate_all() == 2
        assert store.deactivate_all() == 0
        assert len(store) == 2

    def test_prune_old_weak_memory(self, store, make_record, now):
        old = now - timedelta(days=200)
        weak = store.add(make_record(confidence=0.2, last_occurrence=old))
        assert store.prune(now) == 1
        assert not weak.is_active

    @pytest.mark.parametrize(
        "overrides",
        [
            {"confidence": 0.3},
            {"occurrence_count": 3},
            {"user_confirmed": True},
            {"last_occurrence_days": 100},
        ],
    )
    def test_prune_keeps(self, store, make_record, now, overrides):
        values = {"confidence": 0.2, "last_occurrence_days": 200}
        values.update(overrides)
        days = values.pop("last_occurrence_days")
        record = store.add(make_record(last_occurrence=now - timedelta(days=days), **values))
        assert store.prune(now) == 0
        assert record.is_active

    def test_prune_horizon(self, store, make_record, now):
        store.add(make_record(confidence=0.2, last_occurrence=now - timedelta(days=40)))
        assert store.prune(now, after_days=30) == 1

    def test_records_never_removed(self, store, make_record, now):
        store.add(make_record(confidence=0.2, last_occurrence=now - timedelta(days=365)))
        store.prune(now)
        store.deactivate_all()
        assert len(store.all_records()) == 1
        assert isinstance(store.all_records()[0], MemoryRecord)
