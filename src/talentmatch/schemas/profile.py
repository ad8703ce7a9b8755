"""Candidate profile records assembled from interview transcripts."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Literal

import pendulum
from pydantic import BaseModel, ConfigDict, Field

from .skills import ProficiencyLevel, SkillCategory

WorkStylePreference = Literal["remote", "hybrid", "onsite", "flexible"]
ResponseLength = Literal["too_short", "optimal", "too_long"]
FlagType = Literal["inconsistency", "red_flag", "strength", "concern", "verification_needed"]
Severity = Literal["low", "medium", "high"]


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def utcnow() -> datetime:
    return pendulum.now("UTC")


class AchievementType(str, Enum):
    AWARD = "award"
    PROMOTION = "promotion"
    PROJECT_SUCCESS = "project_success"
    COST_SAVING = "cost_saving"
    PERFORMANCE_IMPROVEMENT = "performance_improvement"
    INNOVATION = "innovation"
    LEADERSHIP = "leadership"
    CERTIFICATION = "certification"
    PUBLICATION = "publication"
    PATENT = "patent"


class PersonalInfo(BaseModel):
    """Self-reported candidate details."""

    name: str | None = None
    current_title: str | None = None
    current_company: str | None = None
    location: str | None = None
    years_experience: float | None = None
    expected_salary: float | None = None
    notice_period: str | None = None
    availability: str | None = None
    preferred_work_style: WorkStylePreference | None = None

    model_config = ConfigDict(extra="forbid")


class SkillProfile(BaseModel):
    """Aggregated skill record on a profile."""

    id: str = Field(default_factory=lambda: _new_id("skill"))
    name: str
    category: SkillCategory = SkillCategory.TOOL
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    verified: bool = False
    mention_count: int = 1
    contexts: list[str] = Field(default_factory=list)
    related_skills: list[str] = Field(default_factory=list)
    years_experience: float | None = None
    last_used: str | None = None
    certifications: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ExperienceEntry(BaseModel):
    """Employment history entry.

    ``duration`` is free text such as ``"5 years"``; the leading integer is
    used as the tenure in years. ``relevance_score`` is the fit to the target
    role and gates experience-based scoring.
    """

    id: str = Field(default_factory=lambda: _new_id("exp"))
    role: str = ""
    company: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration: str | None = None
    is_current: bool = False
    responsibilities: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    team_size: int | None = None
    reporting_level: str | None = None
    relevance_score: float = 0.5
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class EducationRecord(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("edu"))
    degree: str = ""
    field: str = ""
    institution: str = ""
    graduation_year: int | None = None
    gpa: float | None = None
    honors: list[str] = Field(default_factory=list)
    relevant_courses: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    relevant: bool = False
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class ProjectRecord(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("proj"))
    name: str = ""
    description: str = ""
    role: str = ""
    technologies: list[str] = Field(default_factory=list)
    duration: str | None = None
    team_size: int | None = None
    challenges: list[str] = Field(default_factory=list)
    outcomes: list[str] = Field(default_factory=list)
    metrics: list[str] = Field(default_factory=list)
    relevance_score: float = 0.5
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class Achievement(BaseModel):
    id: str = Field(default_factory=lambda: _new_id("ach"))
    title: str = ""
    description: str = ""
    type: AchievementType = AchievementType.PROJECT_SUCCESS
    date: datetime | None = None
    metrics: list[str] = Field(default_factory=list)
    impact: str = ""
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class CommunicationAssessment(BaseModel):
    """Communication sub-scores, neutral (0.5) until assessed."""

    clarity: float = 0.5
    articulation: float = 0.5
    structure: float = 0.5
    enthusiasm: float = 0.5
    professionalism: float = 0.5
    storytelling: float = 0.5
    technical_explanation: float = 0.5
    response_length: ResponseLength = "optimal"
    vocabulary_level: Literal["basic", "intermediate", "advanced", "expert"] = "intermediate"
    grammar_quality: float = 0.5
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class BehavioralProfile(BaseModel):
    leadership: float = 0.5
    teamwork: float = 0.5
    problem_solving: float = 0.5
    adaptability: float = 0.5
    initiative: float = 0.5
    resilience: float = 0.5
    communication: float = 0.5
    empathy: float = 0.5
    conflict_resolution: float = 0.5
    time_management: float = 0.5
    learning_agility: float = 0.5
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class TechnicalAssessment(BaseModel):
    overall_level: Literal["junior", "mid", "senior", "expert"] = "mid"
    primary_skills: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    growth_areas: list[str] = Field(default_factory=list)
    architectural_thinking: float = 0.5
    problem_solving_approach: float = 0.5
    code_quality: float = 0.5
    system_design: float = 0.5
    debugging: float = 0.5
    testing: float = 0.5
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class DataSource(BaseModel):
    type: Literal["interview_response", "resume", "linkedin", "portfolio", "assessment"] = (
        "interview_response"
    )
    message_id: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    reliability: float = 0.7

    model_config = ConfigDict(extra="forbid")


class ProfileFlag(BaseModel):
    type: FlagType
    description: str
    severity: Severity = "low"
    source: str = ""
    confidence: float = 0.5

    model_config = ConfigDict(extra="forbid")


class CandidateProfile(BaseModel):
    """Structured candidate profile consumed by scoring and search."""

    id: str = Field(default_factory=lambda: _new_id("profile"))
    candidate_id: str
    interview_id: str | None = None
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    skills: list[SkillProfile] = Field(default_factory=list)
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationRecord] = Field(default_factory=list)
    projects: list[ProjectRecord] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    communication_style: CommunicationAssessment = Field(
        default_factory=CommunicationAssessment
    )
    behavioral_traits: BehavioralProfile = Field(default_factory=BehavioralProfile)
    technical_competency: TechnicalAssessment = Field(default_factory=TechnicalAssessment)
    profile_completeness: float = Field(default=0.0, ge=0.0, le=1.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    last_updated: datetime = Field(default_factory=utcnow)
    sources: list[DataSource] = Field(default_factory=list)
    flags: list[ProfileFlag] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
