"""Multi-category scoring of candidate profiles against job requirements."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable, Literal, Mapping

import pendulum
import structlog

from .. import __version__
from ..schemas import (
    CandidateProfile,
    CategoryScores,
    DetailedScores,
    JobRequirement,
    ProficiencyLevel,
    ScoreRecommendation,
    ScoringMetadata,
    ScoringResult,
    ScoringWeights,
)
from ..schemas.scoring import CATEGORY_NAMES
from .evaluators import default_evaluators

RoleWeighting = Literal["technical", "leadership", "communication", "balanced"]

WEIGHT_PRESETS: dict[str, ScoringWeights] = {
    "technical": ScoringWeights(
        technical=0.50, communication=0.15, experience=0.20, cultural=0.05, behavioral=0.05, education=0.05
    ),
    "leadership": ScoringWeights(
        technical=0.25, communication=0.25, experience=0.25, cultural=0.10, behavioral=0.15, education=0.0
    ),
    "communication": ScoringWeights(
        technical=0.20, communication=0.40, experience=0.15, cultural=0.15, behavioral=0.10, education=0.0
    ),
    "balanced": ScoringWeights(),
}

# detailed score -> (evaluator method, score key)
_DETAIL_SOURCES: dict[str, tuple[str, str]] = {
    "skill_relevance": ("technical", "skill_match"),
    "skill_proficiency": ("technical", "skill_proficiency"),
    "experience_relevance": ("experience", "experience_relevance"),
    "experience_depth": ("experience", "experience_depth"),
    "communication_clarity": ("communication", "communication_clarity"),
    "communication_enthusiasm": ("communication", "communication_enthusiasm"),
    "learning_agility": ("behavioral", "learning_agility"),
    "problem_solving": ("behavioral", "problem_solving"),
    "leadership": ("behavioral", "leadership"),
    "teamwork": ("behavioral", "teamwork"),
}

_INCONSISTENCY_PENALTIES: dict[str, float] = {"high": 0.3, "medium": 0.2, "low": 0.1}

MAX_RECOMMENDATIONS = 8
MAX_STRENGTHS = 5
MAX_WEAKNESSES = 5


@dataclass(slots=True)
class EvaluationResult:
    """Normalized evaluator output."""

    method: str
    scores: dict[str, float]
    metadata: dict[str, Any] = field(default_factory=dict)


def weights_for_role(role: RoleWeighting | str) -> ScoringWeights:
    """Preset weights for a role emphasis; unknown roles get the balanced defaults."""
    return WEIGHT_PRESETS.get(role, WEIGHT_PRESETS["balanced"]).model_copy()


def score_response_completeness(profile: CandidateProfile) -> float:
    multiplier = 1.0
    if profile.skills:
        mean_mentions = sum(skill.mention_count for skill in profile.skills) / len(profile.skills)
        if mean_mentions > 2:
            multiplier += 0.1
    if len(profile.achievements) > 2:
        multiplier += 0.1
    if len(profile.projects) > 1:
        multiplier += 0.1
    return min(profile.profile_completeness * multiplier, 1.0)


def score_consistency(profile: CandidateProfile) -> float:
    score = 1.0
    for flag in profile.flags:
        if flag.type == "inconsistency":
            score -= _INCONSISTENCY_PENALTIES.get(flag.severity, 0.0)
    return max(score, 0.0)


def scoring_confidence(profile: CandidateProfile) -> float:
    """Certainty of a score given profile quality and serious flags."""
    style = profile.communication_style
    mean_communication = (style.clarity + style.articulation + style.structure) / 3
    serious = sum(
        1
        for flag in profile.flags
        if flag.type == "red_flag" or (flag.type == "inconsistency" and flag.severity == "high")
    )
    confidence = profile.confidence * profile.profile_completeness
    confidence *= 0.5 + mean_communication * 0.5
    confidence *= max(0.3, 1 - serious * 0.2)
    return min(confidence, 1.0)


def confidence_factors(profile: CandidateProfile, job: JobRequirement) -> list[str]:
    factors = [
        "Comprehensive profile data"
        if profile.profile_completeness > 0.8
        else "Limited profile information",
        "Diverse skill set mentioned" if len(profile.skills) > 5 else "Limited skill information",
        "Multiple work experiences" if len(profile.experiences) > 2 else "Limited work history",
    ]
    high_confidence = sum(1 for skill in profile.skills if skill.confidence > 0.8) + sum(
        1 for exp in profile.experiences if exp.confidence > 0.8
    )
    factors.append(
        "High confidence in extracted data"
        if high_confidence > 3
        else "Some uncertainty in data extraction"
    )

    if not profile.skills:
        factors.append("No skills recorded; technical scores degraded")
    if not profile.experiences:
        factors.append("No work experience recorded; experience scored 0")
    if not profile.education:
        factors.append("No education records; education scored neutral")
    if not job.required_skills:
        factors.append("No required skills specified; skill match not discriminating")
    return factors


class ScoringEngine:
    """Coordinates category evaluators and aggregates a weighted assessment.

    Results depend only on (profile, job, weights) apart from
    ``metadata.scoring_date``, which is read from ``now_provider``. Inject a
    fixed clock when whole results must compare equal.
    """

    DEFAULT_WEIGHTS = ScoringWeights()

    def __init__(
        self,
        evaluators: Iterable[Any] | None = None,
        *,
        weights: ScoringWeights | Mapping[str, float] | None = None,
        normalize_weights: bool = False,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._evaluators = list(evaluators) if evaluators is not None else default_evaluators()
        self._weights = self._merge_weights(self.DEFAULT_WEIGHTS, weights)
        self._normalize = normalize_weights
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    @property
    def weights(self) -> ScoringWeights:
        return self._weights.model_copy()

    def score_candidate(
        self,
        profile: CandidateProfile,
        job: JobRequirement,
        custom_weights: ScoringWeights | Mapping[str, float] | None = None,
    ) -> ScoringResult:
        weights = self._merge_weights(self._weights, custom_weights)
        if self._normalize:
            weights = weights.normalized()

        evaluations = [
            self._normalize_evaluation_result(evaluator.evaluate(profile, job))
            for evaluator in self._evaluators
        ]
        by_method = {evaluation.method: evaluation for evaluation in evaluations}

        category_scores = CategoryScores(
            **{
                name: by_method[name].scores.get(name, 0.0) if name in by_method else 0.0
                for name in CATEGORY_NAMES
            }
        )
        detailed_scores = self._detailed_scores(profile, by_method)
        overall = self._compute_weighted_score(category_scores, weights)
        strengths, weaknesses = self._strengths_and_weaknesses(category_scores, detailed_scores)

        result = ScoringResult(
            overall_score=overall,
            category_scores=category_scores,
            detailed_scores=detailed_scores,
            recommendations=self._recommendations(profile, category_scores, detailed_scores),
            strengths=strengths,
            weaknesses=weaknesses,
            confidence=scoring_confidence(profile),
            metadata=ScoringMetadata(
                data_completeness=profile.profile_completeness,
                confidence_factors=confidence_factors(profile, job),
                scoring_date=self._now_provider(),
                version=__version__,
                weights=weights,
                evaluations={
                    evaluation.method: asdict(evaluation) for evaluation in evaluations
                },
            ),
        )

        self._logger.info(
            "scoring.completed",
            profile_id=profile.id,
            job_id=job.job_id,
            overall_score=result.overall_score,
            confidence=result.confidence,
        )
        return result

    @staticmethod
    def _merge_weights(
        base: ScoringWeights,
        override: ScoringWeights | Mapping[str, float] | None,
    ) -> ScoringWeights:
        if override is None:
            return base.model_copy()
        if isinstance(override, ScoringWeights):
            return override.model_copy()
        return ScoringWeights.model_validate({**base.model_dump(), **dict(override)})

    @staticmethod
    def _normalize_evaluation_result(payload: dict[str, Any]) -> EvaluationResult:
        method = payload.get("method")
        scores = payload.get("scores") or {}
        metadata = payload.get("metadata") or {}
        if method is None:
            raise ValueError("Evaluator result must include 'method'.")
        if not isinstance(scores, dict):
            raise ValueError("Evaluator result 'scores' must be a mapping.")
        return EvaluationResult(
            method=str(method),
            scores={k: float(v) for k, v in scores.items()},
            metadata=dict(metadata),
        )

    @staticmethod
    def _compute_weighted_score(scores: CategoryScores, weights: ScoringWeights) -> float:
        return sum(getattr(scores, name) * getattr(weights, name) for name in CATEGORY_NAMES)

    @staticmethod
    def _detailed_scores(
        profile: CandidateProfile, by_method: dict[str, EvaluationResult]
    ) -> DetailedScores:
        values: dict[str, float] = {}
        for detail, (method, key) in _DETAIL_SOURCES.items():
            evaluation = by_method.get(method)
            values[detail] = evaluation.scores.get(key, 0.0) if evaluation else 0.0
        values["response_completeness"] = score_response_completeness(profile)
        values["consistency_score"] = score_consistency(profile)
        return DetailedScores(**values)

    @staticmethod
    def _recommendations(
        profile: CandidateProfile,
        categories: CategoryScores,
        details: DetailedScores,
    ) -> list[ScoreRecommendation]:
        recommendations: list[ScoreRecommendation] = []

        if categories.technical < 0.7:
            recommendations.append(
                ScoreRecommendation(
                    type="improvement",
                    category="Technical",
                    description="Technical skills alignment could be stronger",
                    impact="high",
                    actionable=True,
                    suggestion="Focus on specific technical skills matching job requirements",
                )
            )
        if categories.communication < 0.6:
            recommendations.append(
                ScoreRecommendation(
                    type="concern",
                    category="Communication",
                    description="Communication skills need improvement",
                    impact="medium",
                    actionable=True,
                    suggestion="Provide more structured and detailed responses",
                )
            )
        if categories.experience < 0.5:
            recommendations.append(
                ScoreRecommendation(
                    type="concern",
                    category="Experience",
                    description="Experience level may not meet requirements",
                    impact="high",
                    actionable=False,
                    suggestion="Consider for junior positions or with additional training",
                )
            )
        if categories.technical > 0.8:
            recommendations.append(
                ScoreRecommendation(
                    type="strength",
                    category="Technical",
                    description="Strong technical skills alignment",
                    impact="high",
                    actionable=False,
                )
            )
        if details.leadership > 0.8:
            recommendations.append(
                ScoreRecommendation(
                    type="strength",
                    category="Leadership",
                    description="Demonstrates strong leadership potential",
                    impact="medium",
                    actionable=False,
                )
            )

        has_expert_skill = any(
            skill.proficiency_level == ProficiencyLevel.EXPERT for skill in profile.skills
        )
        if has_expert_skill and profile.confidence < 0.8:
            recommendations.append(
                ScoreRecommendation(
                    type="verification",
                    category="Technical",
                    description="Expert-level skills need technical verification",
                    impact="medium",
                    actionable=True,
                    suggestion="Conduct technical assessment or coding interview",
                )
            )

        return recommendations[:MAX_RECOMMENDATIONS]

    @staticmethod
    def _strengths_and_weaknesses(
        categories: CategoryScores, details: DetailedScores
    ) -> tuple[list[str], list[str]]:
        strengths: list[str] = []
        weaknesses: list[str] = []

        for name in CATEGORY_NAMES:
            score = getattr(categories, name)
            if score > 0.8:
                strengths.append(f"Excellent {name} capabilities")
            elif score < 0.5:
                weaknesses.append(f"Needs improvement in {name}")

        if details.skill_relevance > 0.8:
            strengths.append("Skills highly relevant to role")
        if details.communication_clarity > 0.8:
            strengths.append("Clear and articulate communication")
        if details.problem_solving > 0.8:
            strengths.append("Strong problem-solving abilities")

        if details.response_completeness < 0.6:
            weaknesses.append("Responses could be more comprehensive")
        if details.consistency_score < 0.7:
            weaknesses.append("Some inconsistencies in responses")

        return strengths[:MAX_STRENGTHS], weaknesses[:MAX_WEAKNESSES]


_REPORT_LABELS: dict[str, str] = {
    "technical": "Technical",
    "communication": "Communication",
    "experience": "Experience",
    "cultural": "Cultural Fit",
    "behavioral": "Behavioral",
    "education": "Education",
}


def generate_score_report(result: ScoringResult) -> str:
    """Render a plain-text report for a scoring result."""

    def pct(value: float) -> str:
        return f"{value * 100:.1f}%"

    def bullets(items: Iterable[str]) -> list[str]:
        return [f"- {item}" for item in items]

    lines = [
        "CANDIDATE SCORING REPORT",
        "========================",
        "",
        f"Overall Score: {pct(result.overall_score)}",
        f"Confidence: {pct(result.confidence)}",
        "",
        "CATEGORY BREAKDOWN:",
    ]
    lines.extend(
        f"- {label}: {pct(getattr(result.category_scores, name))}"
        for name, label in _REPORT_LABELS.items()
    )
    lines.extend(["", "STRENGTHS:", *bullets(result.strengths)])
    lines.extend(["", "AREAS FOR IMPROVEMENT:", *bullets(result.weaknesses)])
    lines.extend(
        ["", "RECOMMENDATIONS:", *bullets(r.description for r in result.recommendations)]
    )
    lines.extend(["", "CONFIDENCE FACTORS:", *bullets(result.metadata.confidence_factors)])
    return "\n".join(lines) + "\n"
