"""Read-only access to protocol usage history.

The log repository belongs to the host application; the recommendation
scorer only needs ``usage_logs_for``. ``InMemoryLogRepository`` is a
reference implementation for tests and single-process deployments.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections import defaultdict

from hunch.models import UsageLog


class LogRepository(ABC):
    """Abstract source of protocol usage logs.

    Implementations that fail to decode stored logs should return an
    empty list rather than raise; the scorer then falls back to the
    neutral effectiveness prior.
    """

    @abstractmethod
    def usage_logs_for(self, protocol_id: str) -> list[UsageLog]:
        """Return every usage log recorded for a protocol.

        Args:
            protocol_id: Protocol identifier.

        Returns:
            Usage logs in any order.
        """
        ...


class InMemoryLogRepository(LogRepository):
    """Thread-safe in-process log repository."""

    def __init__(self, logs: dict[str, list[UsageLog]] | None = None) -> None:
        self._logs: defaultdict[str, list[UsageLog]] = defaultdict(list)
        self._lock = threading.Lock()
        for protocol_id, entries in (logs or {}).items():
            self._logs[protocol_id].extend(entries)

    def add(self, protocol_id: str, log: UsageLog) -> None:
        with self._lock:
            self._logs[protocol_id].append(log)

    def usage_logs_for(self, protocol_id: str) -> list[UsageLog]:
        with self._lock:
            return list(self._logs.get(protocol_id, []))
