"""FastAPI router for Hunch API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from hunch.logging import bind_context
from hunch.models import (
    GatedResponse,
    JudgmentFeedback,
    MemoryRecord,
    MemorySummary,
    MemoryType,
    Observation,
    OutcomeFeedback,
    RecommendationResponse,
    SuggestionFeedback,
)
from hunch.service import HunchService
from hunch.workflows import MaintenanceResult, SystemStatus

from .schemas import HealthResponse, LearnedSummaryResponse, RecommendRequest, ResetResponse

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

router = APIRouter()

# Service instance (set by app lifespan)
_service: HunchService | None = None


def set_service(service: HunchService | None) -> None:
    """Set the global service instance."""
    global _service
    _service = service


async def get_service() -> HunchService:
    """Dependency to get the HunchService instance."""
    if _service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return _service


async def bind_user(user_id: str) -> str:
    """Dependency that tags log lines of this request with the user id."""
    bind_context(user_id=user_id)
    return user_id


ServiceDep = Annotated[HunchService, Depends(get_service)]
UserDep = Annotated[str, Depends(bind_user)]


@router.get("/health", response_model=HealthResponse, tags=["system"])
async def health_check() -> HealthResponse:
    """Check service health."""
    ready = _service is not None
    return HealthResponse(
        status="healthy" if ready else "unhealthy",
        version=API_VERSION,
        service_ready=ready,
    )


@router.post(
    "/users/{user_id}/observations",
    response_model=MemoryRecord,
    status_code=status.HTTP_201_CREATED,
    tags=["memory"],
)
async def observe(observation: Observation, user_id: UserDep, service: ServiceDep) -> MemoryRecord:
    """Count an observation against its memory, creating it if new."""
    record = service.observe(user_id, observation)
    logger.debug("Observation stored as %s", record.id)
    return record


@router.post("/users/{user_id}/feedback/outcome", response_model=MemoryRecord, tags=["feedback"])
async def outcome_feedback(
    feedback: OutcomeFeedback, user_id: UserDep, service: ServiceDep
) -> MemoryRecord:
    return service.record_outcome(user_id, feedback)


@router.post("/users/{user_id}/feedback/judgment", response_model=MemoryRecord, tags=["feedback"])
async def judgment_feedback(
    feedback: JudgmentFeedback, user_id: UserDep, service: ServiceDep
) -> MemoryRecord:
    return service.record_judgment(user_id, feedback)


@router.post("/users/{user_id}/feedback/suggestion", response_model=MemoryRecord, tags=["feedback"])
async def suggestion_feedback(
    feedback: SuggestionFeedback, user_id: UserDep, service: ServiceDep
) -> MemoryRecord:
    return service.record_suggestion_feedback(user_id, feedback)


@router.get("/users/{user_id}/insights", response_model=GatedResponse, tags=["insights"])
async def insights(
    user_id: UserDep,
    service: ServiceDep,
    symptom: Annotated[str, Query()],
) -> GatedResponse:
    """Gated insights for a symptom.

    Returns either summaries or a needs-more-data message, never both.
    """
    return service.insights(user_id, symptom)


@router.get("/users/{user_id}/memories", response_model=list[MemorySummary], tags=["insights"])
async def memories(
    user_id: UserDep,
    service: ServiceDep,
    symptom: str | None = None,
    trigger: str | None = None,
    memory_type: MemoryType | None = None,
) -> list[MemorySummary]:
    return service.summaries(user_id, symptom=symptom, trigger=trigger, memory_type=memory_type)


@router.get("/users/{user_id}/summary", response_model=LearnedSummaryResponse, tags=["insights"])
async def learned_summary(user_id: UserDep, service: ServiceDep) -> LearnedSummaryResponse:
    return LearnedSummaryResponse(text=service.learned_summary_text(user_id))


@router.post(
    "/users/{user_id}/recommendations",
    response_model=RecommendationResponse,
    tags=["recommendations"],
)
async def recommend(
    request: RecommendRequest, user_id: UserDep, service: ServiceDep
) -> RecommendationResponse:
    """Rank candidate protocols for the user's current symptoms."""
    return service.recommend(user_id, request.target_symptoms, request.candidate_protocols)


@router.post("/users/{user_id}/reset", response_model=ResetResponse, tags=["memory"])
async def reset(user_id: UserDep, service: ServiceDep) -> ResetResponse:
    """Deactivate everything learned for the user."""
    deactivated = service.reset_memory(user_id)
    logger.info("Reset memory for user %s: %d deactivated", user_id, deactivated)
    return ResetResponse(deactivated=deactivated)


@router.post(
    "/users/{user_id}/maintenance", response_model=MaintenanceResult, tags=["workflows"]
)
async def maintenance(user_id: UserDep, service: ServiceDep) -> MaintenanceResult:
    return service.run_maintenance(user_id)


@router.get("/users/{user_id}/status", response_model=SystemStatus, tags=["workflows"])
async def memory_status(user_id: UserDep, service: ServiceDep) -> SystemStatus:
    return service.status(user_id)
