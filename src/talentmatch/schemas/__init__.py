"""Pydantic schema definitions for profiles, requirements and scores."""

from __future__ import annotations

from .job import (
    JobRequirement,
    RequiredSkill,
    build_job_requirement,
    job_requirement_for_role,
)
from .profile import (
    Achievement,
    AchievementType,
    BehavioralProfile,
    CandidateProfile,
    CommunicationAssessment,
    DataSource,
    EducationRecord,
    ExperienceEntry,
    PersonalInfo,
    ProfileFlag,
    ProjectRecord,
    SkillProfile,
    TechnicalAssessment,
)
from .scoring import (
    CategoryScores,
    DetailedScores,
    ScoreRecommendation,
    ScoringMetadata,
    ScoringResult,
    ScoringWeights,
)
from .search import (
    DateRange,
    FacetCount,
    NumericRange,
    ProfileSearchQuery,
    ProfileSearchResult,
    ProfileSummary,
    SearchFacets,
)
from .skills import (
    ExtractedSkill,
    ProficiencyLevel,
    SkillCategory,
    SkillDefinition,
    SkillExtractionResult,
    SkillGap,
    SkillGapReport,
    SkillSuggestion,
)

__all__ = [
    "Achievement",
    "AchievementType",
    "BehavioralProfile",
    "CandidateProfile",
    "CategoryScores",
    "CommunicationAssessment",
    "DateRange",
    "DataSource",
    "DetailedScores",
    "EducationRecord",
    "ExperienceEntry",
    "ExtractedSkill",
    "FacetCount",
    "JobRequirement",
    "NumericRange",
    "PersonalInfo",
    "ProficiencyLevel",
    "ProfileFlag",
    "ProfileSearchQuery",
    "ProfileSearchResult",
    "ProfileSummary",
    "ProjectRecord",
    "RequiredSkill",
    "ScoreRecommendation",
    "ScoringMetadata",
    "ScoringResult",
    "ScoringWeights",
    "SearchFacets",
    "SkillCategory",
    "SkillDefinition",
    "SkillExtractionResult",
    "SkillGap",
    "SkillGapReport",
    "SkillProfile",
    "SkillSuggestion",
    "TechnicalAssessment",
    "build_job_requirement",
    "job_requirement_for_role",
]
