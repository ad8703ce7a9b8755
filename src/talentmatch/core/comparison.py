"""Cross-candidate comparison matrix, rankings and insights."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Sequence

import structlog

from ..errors import InsufficientProfilesError
from ..schemas import CandidateProfile, ProficiencyLevel, ScoringResult, SkillCategory
from .evaluators.experience import total_experience_years

_DURATION_PATTERN = re.compile(r"(\d+)")

STANDOUT_MARGIN = 0.15
TECHNICAL_STRENGTH_THRESHOLD = 0.8
TENURE_SPREAD_THRESHOLD = 3
RELEVANT_EXPERIENCE_THRESHOLD = 0.7
MAX_DIFFERENTIATORS = 5
MAX_SIMILARITIES = 3


@dataclass(slots=True)
class SkillHolder:
    profile_id: str
    candidate_id: str
    proficiency: ProficiencyLevel
    confidence: float
    years_experience: float | None = None


@dataclass(slots=True)
class SkillComparison:
    skill: str
    category: SkillCategory
    candidates: list[SkillHolder] = field(default_factory=list)


@dataclass(slots=True)
class ExperienceComparison:
    total_years: dict[str, float] = field(default_factory=dict)
    relevant_years: dict[str, float] = field(default_factory=dict)
    companies: dict[str, list[str]] = field(default_factory=dict)
    roles: dict[str, list[str]] = field(default_factory=dict)


@dataclass(slots=True)
class CommunicationComparison:
    clarity: dict[str, float] = field(default_factory=dict)
    structure: dict[str, float] = field(default_factory=dict)
    enthusiasm: dict[str, float] = field(default_factory=dict)
    professionalism: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class ScoreComparison:
    """Scores keyed by profile id; unscored profiles are absent."""

    overall: dict[str, float] = field(default_factory=dict)
    technical: dict[str, float] = field(default_factory=dict)
    communication: dict[str, float] = field(default_factory=dict)
    experience: dict[str, float] = field(default_factory=dict)
    cultural: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class ComparisonMatrix:
    skills: list[SkillComparison]
    experience: ExperienceComparison
    communication: CommunicationComparison
    scores: ScoreComparison


@dataclass(slots=True)
class ComparisonRecommendation:
    type: str
    description: str
    profile_ids: list[str]
    confidence: float


@dataclass(slots=True)
class RankingEntry:
    profile_id: str
    candidate_id: str
    rank: int
    score: float


@dataclass(slots=True)
class ComparisonSummary:
    top_candidate: str
    rankings: list[RankingEntry]
    key_differentiators: list[str]
    similarities_found: list[str]


@dataclass(slots=True)
class ProfileComparisonResult:
    profiles: list[CandidateProfile]
    comparison: ComparisonMatrix
    recommendations: list[ComparisonRecommendation]
    summary: ComparisonSummary


def relevant_years(profile: CandidateProfile, *, threshold: float = RELEVANT_EXPERIENCE_THRESHOLD) -> int:
    """Sum of stated durations for experiences above the relevance threshold."""
    total = 0
    for exp in profile.experiences:
        if exp.relevance_score <= threshold or not exp.duration:
            continue
        match = _DURATION_PATTERN.search(exp.duration)
        if match:
            total += int(match.group(1))
    return total


def profile_years(profile: CandidateProfile) -> float:
    if profile.personal_info.years_experience is not None:
        return profile.personal_info.years_experience
    return total_experience_years(profile.experiences)


def _label(profile: CandidateProfile) -> str:
    return profile.personal_info.name or profile.candidate_id


class ProfileComparator:
    """Build comparison matrices and rankings for two or more profiles."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def compare(
        self,
        profiles: Sequence[CandidateProfile],
        scoring_results: Mapping[str, ScoringResult] | None = None,
        *,
        requested: Sequence[str] | None = None,
    ) -> ProfileComparisonResult:
        if len(profiles) < 2:
            ids = list(requested) if requested is not None else [p.id for p in profiles]
            raise InsufficientProfilesError(ids, len(profiles))

        results = dict(scoring_results or {})
        matrix = self.build_matrix(profiles, results)
        rankings = self.rank(profiles, matrix)
        recommendations = self._recommendations(profiles, matrix, rankings)
        summary = ComparisonSummary(
            top_candidate=rankings[0].profile_id,
            rankings=rankings,
            key_differentiators=self._differentiators(matrix)[:MAX_DIFFERENTIATORS],
            similarities_found=self._similarities(matrix)[:MAX_SIMILARITIES],
        )

        self._logger.info(
            "comparison.completed",
            profile_ids=[p.id for p in profiles],
            top_candidate=summary.top_candidate,
        )
        return ProfileComparisonResult(
            profiles=list(profiles),
            comparison=matrix,
            recommendations=recommendations,
            summary=summary,
        )

    @staticmethod
    def build_matrix(
        profiles: Sequence[CandidateProfile],
        scoring_results: Mapping[str, ScoringResult],
    ) -> ComparisonMatrix:
        skills: dict[str, SkillComparison] = {}
        experience = ExperienceComparison()
        communication = CommunicationComparison()
        scores = ScoreComparison()

        for profile in profiles:
            for skill in profile.skills:
                entry = skills.setdefault(
                    skill.name.lower(),
                    SkillComparison(skill=skill.name, category=skill.category),
                )
                entry.candidates.append(
                    SkillHolder(
                        profile_id=profile.id,
                        candidate_id=profile.candidate_id,
                        proficiency=skill.proficiency_level,
                        confidence=skill.confidence,
                        years_experience=skill.years_experience,
                    )
                )

            experience.total_years[profile.id] = profile_years(profile)
            experience.relevant_years[profile.id] = relevant_years(profile)
            experience.companies[profile.id] = [exp.company for exp in profile.experiences if exp.company]
            experience.roles[profile.id] = [exp.role for exp in profile.experiences if exp.role]

            style = profile.communication_style
            communication.clarity[profile.id] = style.clarity
            communication.structure[profile.id] = style.structure
            communication.enthusiasm[profile.id] = style.enthusiasm
            communication.professionalism[profile.id] = style.professionalism

            result = scoring_results.get(profile.id)
            if result is not None:
                categories = result.category_scores
                scores.overall[profile.id] = result.overall_score
                scores.technical[profile.id] = categories.technical
                scores.communication[profile.id] = categories.communication
                scores.experience[profile.id] = categories.experience
                scores.cultural[profile.id] = categories.cultural

        return ComparisonMatrix(
            skills=list(skills.values()),
            experience=experience,
            communication=communication,
            scores=scores,
        )

    @staticmethod
    def rank(profiles: Sequence[CandidateProfile], matrix: ComparisonMatrix) -> list[RankingEntry]:
        """Rank by overall score, highest first; ties keep input order, unscored count as 0."""
        ordered = sorted(
            profiles,
            key=lambda p: matrix.scores.overall.get(p.id, 0.0),
            reverse=True,
        )
        return [
            RankingEntry(
                profile_id=profile.id,
                candidate_id=profile.candidate_id,
                rank=index,
                score=matrix.scores.overall.get(profile.id, 0.0),
            )
            for index, profile in enumerate(ordered, start=1)
        ]

    @staticmethod
    def _recommendations(
        profiles: Sequence[CandidateProfile],
        matrix: ComparisonMatrix,
        rankings: list[RankingEntry],
    ) -> list[ComparisonRecommendation]:
        by_id = {profile.id: profile for profile in profiles}
        ordering = ", ".join(
            f"{entry.rank}. Candidate {_label(by_id[entry.profile_id])}" for entry in rankings
        )
        recommendations = [
            ComparisonRecommendation(
                type="ranking",
                description=f"Based on overall assessment, recommended ranking: {ordering}",
                profile_ids=[entry.profile_id for entry in rankings],
                confidence=0.8,
            )
        ]

        overall = sorted(matrix.scores.overall.items(), key=lambda item: item[1], reverse=True)
        if len(overall) > 1 and overall[0][1] - overall[1][1] > STANDOUT_MARGIN:
            leader, score = overall[0]
            recommendations.append(
                ComparisonRecommendation(
                    type="strength",
                    description=(
                        f"Candidate {_label(by_id[leader])} significantly outperforms others "
                        f"with {score * 100:.1f}% overall score"
                    ),
                    profile_ids=[leader],
                    confidence=0.9,
                )
            )

        technical = sorted(matrix.scores.technical.items(), key=lambda item: item[1], reverse=True)
        if technical and technical[0][1] > TECHNICAL_STRENGTH_THRESHOLD:
            leader = technical[0][0]
            recommendations.append(
                ComparisonRecommendation(
                    type="strength",
                    description=f"Candidate {_label(by_id[leader])} shows exceptional technical competency",
                    profile_ids=[leader],
                    confidence=0.85,
                )
            )
        return recommendations

    @staticmethod
    def _differentiators(matrix: ComparisonMatrix) -> list[str]:
        differentiators = [
            f"{entry.skill} proficiency levels vary significantly"
            for entry in matrix.skills
            if len({holder.proficiency for holder in entry.candidates}) > 1
        ]
        years = list(matrix.experience.total_years.values())
        if years and max(years) - min(years) > TENURE_SPREAD_THRESHOLD:
            differentiators.append(f"Experience ranges from {min(years):g} to {max(years):g} years")
        return differentiators

    @staticmethod
    def _similarities(matrix: ComparisonMatrix) -> list[str]:
        company_lists = list(matrix.experience.companies.values())
        if not company_lists:
            return []
        common = [
            company
            for company in dict.fromkeys(company_lists[0])
            if all(company in companies for companies in company_lists[1:])
        ]
        if not common:
            return []
        return [f"Shared experience at: {', '.join(common)}"]
