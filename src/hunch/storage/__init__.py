"""Storage for Hunch.

- MemoryStore: keyed, lock-per-key repository of memory records
- LogRepository: read-only protocol usage history (external collaborator)
"""

from .logs import InMemoryLogRepository, LogRepository
from .store import MemoryStore

__all__ = [
    "InMemoryLogRepository",
    "LogRepository",
    "MemoryStore",
]
