"""Pydantic schemas for API request/response models.

Domain models (Observation, feedback events, summaries, gated responses)
are used directly as request and response bodies; only shapes that
exist purely for HTTP live here.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hunch.models import ProtocolCandidate


class RecommendRequest(BaseModel):
    """Request body for protocol recommendations.

    Attributes:
        target_symptoms: Symptoms the user has right now.
        candidate_protocols: Protocols to rank.
    """

    model_config = ConfigDict(extra="forbid")

    target_symptoms: list[str] = Field(default_factory=list)
    candidate_protocols: list[ProtocolCandidate] = Field(default_factory=list)


class ResetResponse(BaseModel):
    """Response for the reset endpoint."""

    model_config = ConfigDict(extra="forbid")

    deactivated: int = Field(ge=0)


class LearnedSummaryResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str


class HealthResponse(BaseModel):
    """Response for health check endpoint.

    Attributes:
        status: Service status (healthy, unhealthy).
        version: API version.
        service_ready: Whether the service is initialized.
    """

    model_config = ConfigDict(extra="forbid")

    status: Literal["healthy", "unhealthy"]
    version: str
    service_ready: bool
