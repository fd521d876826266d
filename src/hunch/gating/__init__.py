"""Insufficient-data gating policy."""

from .policy import MAX_SUMMARIES, MINIMUM_NEEDED, GatingPolicy, evidence_summary

__all__ = [
    "MAX_SUMMARIES",
    "MINIMUM_NEEDED",
    "GatingPolicy",
    "evidence_summary",
]
