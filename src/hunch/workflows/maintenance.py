"""Maintenance workflow for a user's memory store.

This workflow runs periodically to:
1. Prune weak, unconfirmed memories that have gone quiet
2. Detect unhealthy records (bad confidence, stuck, stale, duplicated)
3. Repair what can be repaired in place

Nothing is ever deleted; repairs only adjust confidence or deactivate.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hunch.confidence import days_since, decayed_confidence, is_in_cooldown, is_stale
from hunch.models import CURRENT_SCHEMA_VERSION, MemoryKey, MemoryRecord, ensure_utc, utcnow
from hunch.storage import MemoryStore

logger = logging.getLogger(__name__)

STUCK_AFTER_DAYS = 90
STUCK_MAX_OCCURRENCES = 3
STALE_HIGH_CONFIDENCE = 0.8
RESET_CONFIDENCE = 0.5
DEGRADED_MAX_ISSUES = 3


class IssueType(str, Enum):
    """Kinds of unhealthy memory records."""

    INVALID_CONFIDENCE = "invalid_confidence"
    STUCK_NEEDS_MORE_DATA = "stuck_needs_more_data"
    STALE_HIGH_CONFIDENCE = "stale_high_confidence"
    DUPLICATE = "duplicate"


class HealthIssue(BaseModel):
    """One problem found on one record."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    record_id: str
    issue_type: IssueType
    detail: str


class MaintenanceResult(BaseModel):
    """Result of a maintenance run.

    Attributes:
        issues_found: Health issues detected after pruning.
        issues_fixed: Issues repaired in place.
        pruned: Records deactivated by prune.
    """

    model_config = ConfigDict(extra="forbid")

    issues_found: int = Field(ge=0)
    issues_fixed: int = Field(ge=0)
    pruned: int = Field(ge=0)


class SystemStatus(BaseModel):
    """Overall health snapshot of a memory store."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["healthy", "degraded", "needs_attention"]
    total_memories: int = Field(ge=0)
    active_memories: int = Field(ge=0)
    in_cooldown: int = Field(ge=0)
    stale: int = Field(ge=0)
    issue_count: int = Field(ge=0)
    schema_mismatches: int = Field(ge=0)


def _in_creation_order(records: Iterable[MemoryRecord]) -> list[MemoryRecord]:
    return sorted(records, key=lambda r: (r.created_at, r.id))


def check_health(
    records: Iterable[MemoryRecord],
    now: datetime | None = None,
) -> list[HealthIssue]:
    """Find unhealthy records.

    Records are visited oldest first, so for a duplicated key the oldest
    active record is kept and every later one is reported.

    Args:
        records: Records to inspect, active or not.
        now: Evaluation time.

    Returns:
        Issues in visiting order; a record can have more than one.
    """
    now = utcnow() if now is None else ensure_utc(now)
    issues: list[HealthIssue] = []
    seen_keys: set[MemoryKey] = set()

    for record in _in_creation_order(records):
        confidence = record.confidence
        if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
            issues.append(
                HealthIssue(
                    record_id=record.id,
                    issue_type=IssueType.INVALID_CONFIDENCE,
                    detail=f"confidence {confidence} outside [0, 1]",
                )
            )

        if not record.is_active:
            continue

        if (
            days_since(record.created_at, now) > STUCK_AFTER_DAYS
            and record.occurrence_count < STUCK_MAX_OCCURRENCES
        ):
            issues.append(
                HealthIssue(
                    record_id=record.id,
                    issue_type=IssueType.STUCK_NEEDS_MORE_DATA,
                    detail=f"{record.occurrence_count} occurrences after {STUCK_AFTER_DAYS}+ days",
                )
            )

        if is_stale(record, now) and confidence > STALE_HIGH_CONFIDENCE:
            issues.append(
                HealthIssue(
                    record_id=record.id,
                    issue_type=IssueType.STALE_HIGH_CONFIDENCE,
                    detail=f"stale with confidence {confidence:.2f}",
                )
            )

        key = record.key
        if key in seen_keys:
            issues.append(
                HealthIssue(
                    record_id=record.id,
                    issue_type=IssueType.DUPLICATE,
                    detail="another active memory has the same association",
                )
            )
        else:
            seen_keys.add(key)

    return issues


def auto_fix(record: MemoryRecord, issue: HealthIssue, now: datetime | None = None) -> bool:
    """Repair one issue on a record.

    Returns:
        True if the record was changed.
    """
    now = utcnow() if now is None else ensure_utc(now)
    if issue.issue_type is IssueType.INVALID_CONFIDENCE:
        record.confidence = RESET_CONFIDENCE
    elif issue.issue_type in (IssueType.STUCK_NEEDS_MORE_DATA, IssueType.DUPLICATE):
        if not record.is_active:
            return False
        record.is_active = False
    elif issue.issue_type is IssueType.STALE_HIGH_CONFIDENCE:
        record.confidence = decayed_confidence(record, now)
    else:
        return False
    record.last_updated = now
    return True


def run_maintenance(
    store: MemoryStore,
    now: datetime | None = None,
    prune_after_days: int | None = None,
) -> MaintenanceResult:
    """Run the maintenance workflow on one store.

    Args:
        store: The user's memory store.
        now: Evaluation time.
        prune_after_days: Prune horizon; the store's default if None.

    Returns:
        MaintenanceResult with processing statistics.
    """
    now = utcnow() if now is None else ensure_utc(now)
    logger.info("Starting memory maintenance over %d records", len(store))

    if prune_after_days is None:
        pruned = store.prune(now)
    else:
        pruned = store.prune(now, after_days=prune_after_days)

    issues = check_health(store.all_records(), now)
    fixed = 0
    for issue in issues:
        changed: list[bool] = []
        store.apply(
            issue.record_id,
            lambda record, issue=issue: changed.append(auto_fix(record, issue, now)),
        )
        fixed += changed.count(True)

    logger.info(
        "Maintenance complete: %d pruned, %d issues found, %d fixed",
        pruned,
        len(issues),
        fixed,
    )
    return MaintenanceResult(issues_found=len(issues), issues_fixed=fixed, pruned=pruned)


def system_status(
    records: Iterable[MemoryRecord],
    now: datetime | None = None,
) -> SystemStatus:
    """Summarize store health.

    Healthy means no issues and every record on the current schema
    version. Up to three issues with no schema mismatch is degraded;
    anything worse needs attention.
    """
    now = utcnow() if now is None else ensure_utc(now)
    records = list(records)
    active = [r for r in records if r.is_active]
    issues = check_health(records, now)
    mismatches = sum(1 for r in records if r.schema_version != CURRENT_SCHEMA_VERSION)

    if not issues and not mismatches:
        status = "healthy"
    elif len(issues) <= DEGRADED_MAX_ISSUES and not mismatches:
        status = "degraded"
    else:
        status = "needs_attention"

    return SystemStatus(
        status=status,
        total_memories=len(records),
        active_memories=len(active),
        in_cooldown=sum(1 for r in active if is_in_cooldown(r, now)),
        stale=sum(1 for r in active if is_stale(r, now)),
        issue_count=len(issues),
        schema_mismatches=mismatches,
    )
