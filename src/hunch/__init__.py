"""Hunch: symptom memory that only speaks when it knows.

Learns which triggers and remedies go with a user's symptoms from their
logs, tracks how much each association can be trusted, and withholds
insights until the evidence is strong enough.

Quick Start:
    from hunch.service import HunchService

    hunch = HunchService.create()

    # Count an observation
    hunch.observe("user_123", Observation(
        memory_type=MemoryType.WHAT_WORKED, symptom="Headache", resolution="Nap",
    ))

    # Ask about a symptom; either summaries or a needs-more-data message
    response = hunch.insights("user_123", "Headache")

Memory Types:
    - what_worked / what_didnt_work: remedies and their track record
    - trigger: something that precedes a symptom
    - pattern: environmental or time-of-day regularities
    - correlation, preference: other learned associations
"""

__version__ = "0.1.0"

# Configuration
from .config import RecommendationWeights, Settings, settings

# Exceptions
from .exceptions import (
    ConfigurationError,
    HunchError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)

# Logging
from .logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)

# Models
from .models import (
    ConfidenceLevel,
    GatedResponse,
    MemoryRecord,
    MemorySummary,
    MemoryType,
    NeedsMoreDataMessage,
    Observation,
    ProtocolCandidate,
    RankedRecommendation,
    RecommendationResponse,
    UsageLog,
)

# Service
from .service import HunchService

__all__ = [
    "__version__",
    # Configuration
    "RecommendationWeights",
    "Settings",
    "settings",
    # Exceptions
    "ConfigurationError",
    "HunchError",
    "InvariantViolationError",
    "NotFoundError",
    "ValidationError",
    # Logging
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # Models
    "ConfidenceLevel",
    "GatedResponse",
    "MemoryRecord",
    "MemorySummary",
    "MemoryType",
    "NeedsMoreDataMessage",
    "Observation",
    "ProtocolCandidate",
    "RankedRecommendation",
    "RecommendationResponse",
    "UsageLog",
    # Service
    "HunchService",
]
