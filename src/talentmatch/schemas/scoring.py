"""Scoring records produced for a (profile, job requirement) pair."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RecommendationType = Literal["strength", "improvement", "concern", "verification"]
Impact = Literal["high", "medium", "low"]

CATEGORY_NAMES: tuple[str, ...] = (
    "technical",
    "communication",
    "experience",
    "cultural",
    "behavioral",
    "education",
)


class ScoringWeights(BaseModel):
    """Per-category weights. Not required to sum to 1."""

    technical: float = 0.35
    communication: float = 0.20
    experience: float = 0.25
    cultural: float = 0.10
    behavioral: float = 0.10
    education: float = 0.05

    model_config = ConfigDict(extra="forbid")

    def total(self) -> float:
        return sum(getattr(self, name) for name in CATEGORY_NAMES)

    def normalized(self) -> "ScoringWeights":
        total = self.total()
        if total <= 0:
            return self.model_copy()
        return ScoringWeights(**{name: getattr(self, name) / total for name in CATEGORY_NAMES})


class CategoryScores(BaseModel):
    technical: float = 0.0
    communication: float = 0.0
    experience: float = 0.0
    cultural: float = 0.0
    behavioral: float = 0.0
    education: float = 0.0

    model_config = ConfigDict(extra="forbid")


class DetailedScores(BaseModel):
    skill_relevance: float = 0.0
    skill_proficiency: float = 0.0
    experience_relevance: float = 0.0
    experience_depth: float = 0.0
    communication_clarity: float = 0.0
    communication_enthusiasm: float = 0.0
    response_completeness: float = 0.0
    consistency_score: float = 0.0
    learning_agility: float = 0.0
    problem_solving: float = 0.0
    leadership: float = 0.0
    teamwork: float = 0.0

    model_config = ConfigDict(extra="forbid")


class ScoreRecommendation(BaseModel):
    type: RecommendationType
    category: str
    description: str
    impact: Impact
    actionable: bool
    suggestion: str | None = None

    model_config = ConfigDict(extra="forbid")


class ScoringMetadata(BaseModel):
    data_completeness: float
    confidence_factors: list[str] = Field(default_factory=list)
    scoring_date: datetime
    version: str
    weights: ScoringWeights
    evaluations: dict[str, dict] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ScoringResult(BaseModel):
    """Assessment of one profile against one job requirement."""

    overall_score: float
    category_scores: CategoryScores
    detailed_scores: DetailedScores
    recommendations: list[ScoreRecommendation] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    confidence: float
    metadata: ScoringMetadata

    model_config = ConfigDict(extra="forbid")
