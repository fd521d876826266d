"""Background workflows for Hunch.

- maintenance: prune, health check and auto-fix of a memory store
"""

from .maintenance import (
    HealthIssue,
    IssueType,
    MaintenanceResult,
    SystemStatus,
    auto_fix,
    check_health,
    run_maintenance,
    system_status,
)

__all__ = [
    "HealthIssue",
    "IssueType",
    "MaintenanceResult",
    "SystemStatus",
    "auto_fix",
    "check_health",
    "run_maintenance",
    "system_status",
]
