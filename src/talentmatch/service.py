"""Profile-building session plus store-backed candidate helpers."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Literal, Mapping

import pendulum
import structlog

from .core.comparison import ProfileComparisonResult
from .core.extraction import SkillExtractionEngine
from .core.scoring import ScoringEngine
from .core.store import ProfileStore
from .errors import SessionNotStartedError
from .schemas import (
    CandidateProfile,
    CategoryScores,
    DataSource,
    ExtractedSkill,
    JobRequirement,
    ProfileFlag,
    ProfileSearchQuery,
    ProfileSearchResult,
    ProfileSummary,
    ProficiencyLevel,
    ScoringResult,
    ScoringWeights,
    SkillGapReport,
    SkillProfile,
)
from .schemas.search import NumericRange

ROLE_SKILL_MAPPINGS: dict[str, list[str]] = {
    "senior_frontend_developer": ["React", "TypeScript", "CSS", "Webpack", "Testing"],
    "backend_engineer": ["Node.js", "PostgreSQL", "Docker", "Microservices", "AWS"],
    "fullstack_developer": ["React", "Node.js", "PostgreSQL", "REST API", "Git"],
    "devops_engineer": ["Docker", "Kubernetes", "AWS", "CI/CD", "Terraform"],
    "data_scientist": ["Python", "Machine Learning", "SQL", "Statistics", "TensorFlow"],
}

# section -> (weight, item count for full credit)
COMPLETENESS_WEIGHTS: dict[str, tuple[float, int]] = {
    "personal_info": (0.15, 6),
    "skills": (0.25, 5),
    "experiences": (0.25, 2),
    "education": (0.10, 1),
    "projects": (0.15, 2),
    "achievements": (0.10, 2),
}

CANDIDATE_SPEAKERS = frozenset({"candidate", "user"})


@dataclass(slots=True)
class IngestResult:
    profile: CandidateProfile
    extracted_skills: list[ExtractedSkill]
    updated_at: datetime


def profile_completeness(profile: CandidateProfile) -> float:
    filled = sum(1 for value in profile.personal_info.model_dump().values() if value is not None)
    counts = {
        "personal_info": filled,
        "skills": len(profile.skills),
        "experiences": len(profile.experiences),
        "education": len(profile.education),
        "projects": len(profile.projects),
        "achievements": len(profile.achievements),
    }
    return sum(
        min(counts[section] / target, 1.0) * weight
        for section, (weight, target) in COMPLETENESS_WEIGHTS.items()
    )


def profile_confidence(profile: CandidateProfile) -> float:
    values = [
        *(skill.confidence for skill in profile.skills),
        *(exp.confidence for exp in profile.experiences),
        *(edu.confidence for edu in profile.education),
        *(project.confidence for project in profile.projects),
        *(item.confidence for item in profile.achievements),
    ]
    if not values:
        return profile.confidence
    return sum(values) / len(values)


def merge_extracted_skills(
    skills: Iterable[SkillProfile], extracted: Iterable[ExtractedSkill]
) -> list[SkillProfile]:
    """Fold freshly extracted skills into existing profile skills by case-insensitive name."""
    merged = {skill.name.lower(): skill.model_copy(deep=True) for skill in skills}
    for item in extracted:
        key = item.name.lower()
        contexts = item.contexts or ([item.context] if item.context else [])
        current = merged.get(key)
        if current is None:
            merged[key] = SkillProfile(
                name=item.name,
                category=item.category,
                proficiency_level=item.proficiency_level,
                confidence=item.confidence,
                contexts=list(contexts),
                related_skills=list(item.related_skills),
                years_experience=item.years_experience,
                certifications=list(item.certifications),
            )
            continue

        current.mention_count += 1
        current.contexts.extend([c for c in contexts if c not in current.contexts])
        current.confidence = max(current.confidence, item.confidence)
        if ProficiencyLevel(item.proficiency_level).rank > ProficiencyLevel(current.proficiency_level).rank:
            current.proficiency_level = item.proficiency_level
        if item.years_experience is not None:
            current.years_experience = max(current.years_experience or 0, item.years_experience)
    return list(merged.values())


class CandidateProfileService:
    """Build a profile from interview messages, then score, store and analyse it."""

    def __init__(
        self,
        *,
        extractor: SkillExtractionEngine,
        scorer: ScoringEngine,
        store: ProfileStore,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._extractor = extractor
        self._scorer = scorer
        self._store = store
        self._now_provider = now_provider or pendulum.now
        self._profile: CandidateProfile | None = None
        self._logger = structlog.get_logger(__name__)

    @property
    def store(self) -> ProfileStore:
        return self._store

    @property
    def profile(self) -> CandidateProfile | None:
        return self._profile.model_copy(deep=True) if self._profile else None

    def _require_session(self) -> CandidateProfile:
        if self._profile is None:
            raise SessionNotStartedError("Profile session not started; call start_session() first")
        return self._profile

    # session

    def start_session(self, candidate_id: str, interview_id: str | None = None) -> CandidateProfile:
        self._profile = CandidateProfile(
            candidate_id=candidate_id,
            interview_id=interview_id,
            last_updated=self._now_provider(),
        )
        self._logger.info("session.started", candidate_id=candidate_id, interview_id=interview_id)
        return self._profile.model_copy(deep=True)

    def ingest_message(
        self,
        text: str,
        speaker: str = "candidate",
        *,
        message_id: str | None = None,
    ) -> IngestResult:
        """Extract skills from candidate speech and merge them into the session profile.

        Interviewer messages are ignored and leave the profile untouched.
        """
        profile = self._require_session()
        if speaker.lower() not in CANDIDATE_SPEAKERS:
            return IngestResult(
                profile=profile.model_copy(deep=True),
                extracted_skills=[],
                updated_at=profile.last_updated,
            )

        extraction = self._extractor.extract_skills(text)
        now = self._now_provider()

        profile.skills = merge_extracted_skills(profile.skills, extraction.skills)
        profile.sources.append(DataSource(message_id=message_id, timestamp=now))
        self._flag_unverified_expertise(profile)
        profile.profile_completeness = profile_completeness(profile)
        profile.confidence = profile_confidence(profile)
        profile.last_updated = now

        self._logger.info(
            "session.message_ingested",
            profile_id=profile.id,
            extracted=len(extraction.skills),
            total_skills=len(profile.skills),
        )
        return IngestResult(
            profile=profile.model_copy(deep=True),
            extracted_skills=extraction.skills,
            updated_at=now,
        )

    @staticmethod
    def _flag_unverified_expertise(profile: CandidateProfile) -> None:
        flagged = {flag.source for flag in profile.flags if flag.type == "verification_needed"}
        for skill in profile.skills:
            source = f"skill:{skill.name.lower()}"
            if (
                skill.proficiency_level == ProficiencyLevel.EXPERT
                and skill.mention_count == 1
                and source not in flagged
            ):
                profile.flags.append(
                    ProfileFlag(
                        type="verification_needed",
                        description=f"Expert-level {skill.name} claimed with a single mention",
                        severity="low",
                        source=source,
                    )
                )

    def score(
        self,
        job: JobRequirement,
        weights: ScoringWeights | Mapping[str, float] | None = None,
    ) -> ScoringResult:
        profile = self._require_session()
        return self._scorer.score_candidate(profile, job, weights)

    def save(self, scoring_result: ScoringResult | None = None) -> str:
        profile = self._require_session()
        self._store.store_profile(profile, scoring_result)
        return profile.id

    # store-backed helpers

    def search_profiles(self, query: ProfileSearchQuery | None = None) -> ProfileSearchResult:
        return self._store.search_profiles(query)

    def compare_profiles(self, profile_ids: Iterable[str]) -> ProfileComparisonResult:
        return self._store.compare_profiles(profile_ids)

    def skill_gap_analysis(self, profile_id: str, job: JobRequirement) -> SkillGapReport:
        profile = self._store.require_profile(profile_id)
        return self._extractor.generate_skill_gaps(
            profile.skills,
            [requirement.name for requirement in job.required_skills],
            job.experience_level,
        )

    def find_similar_candidates(self, profile_id: str, limit: int = 5) -> list[ProfileSummary]:
        """Profiles sharing top skills within two years of experience, best scored first."""
        target = self._store.require_profile(profile_id)
        years = target.personal_info.years_experience or 0
        query = ProfileSearchQuery(
            skills=[skill.name for skill in target.skills[:5]],
            experience_years=NumericRange(min=max(0, years - 2), max=years + 2),
            sort_by="score",
            sort_order="desc",
            limit=limit + 1,
        )
        result = self._store.search_profiles(query)
        return [summary for summary in result.profiles if summary.id != profile_id][:limit]

    def recommend_skills_for_role(self, profile_id: str, role: str) -> dict[str, list[str]]:
        profile = self._store.require_profile(profile_id)
        required = ROLE_SKILL_MAPPINGS.get(role, [])
        names = [skill.name for skill in profile.skills]

        gaps = [
            skill
            for skill in required
            if not any(skill.lower() in name.lower() for name in names)
        ]
        strengths = [
            name
            for name in names
            if any(skill.lower() in name.lower() for skill in required)
        ]
        return {
            "recommended_skills": gaps[:5],
            "skill_gaps": gaps,
            "strength_areas": strengths,
        }

    def profile_analytics(self) -> dict[str, Any]:
        profiles = self._store.list_profiles()
        result = self._store.search_profiles(ProfileSearchQuery(limit=max(len(profiles), 1)))

        scored = [summary for summary in result.profiles if summary.category_scores is not None]
        averages = CategoryScores()
        if scored:
            averages = CategoryScores(
                **{
                    name: sum(getattr(s.category_scores, name) for s in scored) / len(scored)
                    for name in CategoryScores.model_fields
                }
            )

        skill_counts: Counter[str] = Counter()
        for profile in profiles:
            skill_counts.update({skill.name for skill in profile.skills})

        top_performers = sorted(
            (summary for summary in result.profiles if summary.overall_score is not None),
            key=lambda summary: summary.overall_score,
            reverse=True,
        )[:10]
        return {
            "total_profiles": len(profiles),
            "skill_distribution": [
                {"skill": skill, "count": count} for skill, count in skill_counts.most_common(10)
            ],
            "experience_distribution": [
                facet.model_dump() for facet in result.facets.experience_ranges
            ],
            "average_scores": averages,
            "top_performers": top_performers,
        }

    def export_profile_data(
        self,
        profile_ids: Iterable[str] | None = None,
        format: Literal["json", "csv"] = "json",
    ) -> str:
        return self._store.export_profiles(format, profile_ids)
