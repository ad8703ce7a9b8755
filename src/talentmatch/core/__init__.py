"""Core extraction, scoring, storage and comparison components."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..schemas import CandidateProfile, JobRequirement

# NOTE: keep imports explicit for export clarity.
from .comparison import ProfileComparator, ProfileComparisonResult
from .evaluators import (
    BehavioralEvaluator,
    CommunicationEvaluator,
    CulturalFitEvaluator,
    EducationEvaluator,
    ExperienceEvaluator,
    TechnicalEvaluator,
)
from .extraction import SkillExtractionEngine
from .scoring import EvaluationResult, ScoringEngine, generate_score_report, weights_for_role
from .store import ProfileStore
from .taxonomy import SkillTaxonomy


@runtime_checkable
class Evaluator(Protocol):
    """Evaluator contract for computing one scoring category."""

    method: str

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict:
        """Return ``{"method", "scores", "metadata"}`` for a profile under a job."""


__all__ = [
    "Evaluator",
    "EvaluationResult",
    "ScoringEngine",
    "SkillExtractionEngine",
    "SkillTaxonomy",
    "ProfileStore",
    "ProfileComparator",
    "ProfileComparisonResult",
    "TechnicalEvaluator",
    "CommunicationEvaluator",
    "ExperienceEvaluator",
    "CulturalFitEvaluator",
    "BehavioralEvaluator",
    "EducationEvaluator",
    "generate_score_report",
    "weights_for_role",
]
