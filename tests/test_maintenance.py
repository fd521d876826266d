"""Tests for the maintenance workflow."""

import math
from datetime import timedelta

import pytest

from hunch.models import MemoryRecord, MemoryType
from hunch.workflows import (
    HealthIssue,
    IssueType,
    MaintenanceResult,
    auto_fix,
    check_health,
    run_maintenance,
    system_status,
)


def _issue_types(issues):
    return [issue.issue_type for issue in issues]


class TestCheckHealth:
    """Tests for health issue detection."""

    def test_healthy_records(self, make_record, now):
        assert check_health([make_record(), make_record(trigger="Wine")], now) == []

    def test_invalid_confidence(self, now):
        record = MemoryRecord.model_construct(
            memory_type=MemoryType.TRIGGER, trigger="Wine", confidence=1.5
        )
        assert _issue_types(check_health([record], now)) == [IssueType.INVALID_CONFIDENCE]

    def test_stuck_needs_more_data(self, make_record, now):
        record = make_record(occurrence_count=2, created_at=now - timedelta(days=100))
        assert _issue_types(check_health([record], now)) == [IssueType.STUCK_NEEDS_MORE_DATA]

    def test_not_stuck_with_enough_occurrences(self, make_record, now):
        record = make_record(occurrence_count=3, created_at=now - timedelta(days=100))
        assert check_health([record], now) == []

    def test_stale_high_confidence(self, make_record, now):
        record = make_record(confidence=0.85, last_occurrence=now - timedelta(days=200))
        assert _issue_types(check_health([record], now)) == [IssueType.STALE_HIGH_CONFIDENCE]

    def test_duplicates_keep_oldest(self, make_record, now):
        newer = make_record(id="mem_new", created_at=now - timedelta(days=1))
        older = make_record(id="mem_old", created_at=now - timedelta(days=2))
        issues = check_health([newer, older], now)
        assert issues == [
            HealthIssue(
                record_id="mem_new",
                issue_type=IssueType.DUPLICATE,
                detail="another active memory has the same association",
            )
        ]

    def test_inactive_records_skipped(self, make_record, now):
        record = make_record(
            occurrence_count=1, created_at=now - timedelta(days=100), is_active=False
        )
        assert check_health([record, make_record()], now) == []


class TestAutoFix:
    """Tests for in-place repairs."""

    def test_invalid_confidence_reset(self, now):
        record = MemoryRecord.model_construct(
            memory_type=MemoryType.TRIGGER, trigger="Wine", confidence=float("nan")
        )
        issue = check_health([record], now)[0]
        assert auto_fix(record, issue, now)
        assert record.confidence == 0.5

    def test_stale_high_decayed(self, make_record, now):
        record = make_record(confidence=0.85, last_occurrence=now - timedelta(days=200))
        (issue,) = check_health([record], now)
        assert auto_fix(record, issue, now)
        assert record.confidence == pytest.approx(0.85 * math.exp(-200 / 180))

    def test_duplicate_deactivated(self, make_record, now):
        record = make_record()
        issue = HealthIssue(record_id=record.id, issue_type=IssueType.DUPLICATE, detail="dup")
        assert auto_fix(record, issue, now)
        assert not record.is_active
        assert not auto_fix(record, issue, now)


class TestRunMaintenance:
    def test_prunes_then_fixes(self, store, make_record, now):
        year_ago = now - timedelta(days=365)
        weak = store.add(make_record(trigger="A", confidence=0.2, last_occurrence=year_ago))
        stale = store.add(
            make_record(trigger="B", confidence=0.85, last_occurrence=now - timedelta(days=200))
        )
        original = store.add(make_record(trigger="C", created_at=now - timedelta(days=3)))
        duplicate = store.add(make_record(trigger="c", created_at=now - timedelta(days=1)))

        result = run_maintenance(store, now)

        assert result == MaintenanceResult(issues_found=2, issues_fixed=2, pruned=1)
        assert not weak.is_active
        assert stale.confidence < 0.85
        assert original.is_active
        assert not duplicate.is_active

    def test_clean_store(self, store, make_record, now):
        store.add(make_record())
        assert run_maintenance(store, now) == MaintenanceResult(
            issues_found=0, issues_fixed=0, pruned=0
        )

    def test_custom_prune_horizon(self, store, make_record, now):
        store.add(make_record(confidence=0.2, last_occurrence=now - timedelta(days=40)))
        assert run_maintenance(store, now, prune_after_days=30).pruned == 1


class TestSystemStatus:
    """Tests for the health snapshot."""

    def test_healthy(self, make_record, now):
        status = system_status([make_record(), make_record(trigger="x", is_active=False)], now)
        assert status.status == "healthy"
        assert status.total_memories == 2
        assert status.active_memories == 1

    def test_degraded(self, make_record, now):
        record = make_record(occurrence_count=1, created_at=now - timedelta(days=100))
        assert system_status([record], now).status == "degraded"

    def test_needs_attention_on_many_issues(self, make_record, now):
        old = now - timedelta(days=100)
        records = [make_record(trigger=str(i), created_at=old) for i in range(4)]
        assert system_status(records, now).status == "needs_attention"

    def test_schema_mismatch(self, make_record, now):
        status = system_status([make_record(schema_version=2)], now)
        assert status.status == "needs_attention"
        assert status.schema_mismatches == 1

    def test_counts(self, make_record, now):
        records = [
            make_record(trigger="a", cooldown_until=now + timedelta(hours=3)),
            make_record(trigger="b", last_occurrence=now - timedelta(days=200)),
        ]
        status = system_status(records, now)
        assert status.in_cooldown == 1
        assert status.stale == 1
