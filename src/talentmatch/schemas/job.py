"""Job requirement records and role/level helpers."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .skills import ProficiencyLevel, SkillCategory

Importance = Literal["critical", "important", "nice_to_have"]
WorkStyle = Literal["individual", "team", "mixed"]
RoleType = Literal["frontend", "backend", "fullstack", "mobile", "devops", "data", "qa"]
RoleLevel = Literal["entry", "mid", "senior", "lead"]


class RequiredSkill(BaseModel):
    """Single skill requirement attached to a job."""

    name: str
    category: SkillCategory = SkillCategory.PROGRAMMING_LANGUAGE
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    importance: Importance = "important"
    weight: float = 1.0

    model_config = ConfigDict(extra="forbid")


class JobRequirement(BaseModel):
    """Target profile a candidate is scored against."""

    job_id: str | None = None
    required_skills: list[RequiredSkill] = Field(default_factory=list)
    experience_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    minimum_years: float = 0.0
    preferred_skills: list[str] = Field(default_factory=list)
    communication_level: float = 0.7
    leadership_required: bool = False
    teamwork_importance: float = 0.7
    domain_knowledge: list[str] = Field(default_factory=list)
    cultural_values: list[str] = Field(default_factory=lambda: ["teamwork", "innovation"])
    work_style: WorkStyle = "mixed"

    model_config = ConfigDict(extra="forbid")


ROLE_SKILL_SETS: dict[str, list[str]] = {
    "frontend": ["JavaScript", "React", "CSS", "HTML", "TypeScript"],
    "backend": ["Node.js", "Python", "PostgreSQL", "REST API", "Microservices"],
    "fullstack": ["JavaScript", "React", "Node.js", "PostgreSQL", "REST API"],
    "mobile": ["React Native", "Swift", "Kotlin", "Mobile UI/UX"],
    "devops": ["Docker", "Kubernetes", "AWS", "CI/CD", "Infrastructure"],
    "data": ["Python", "SQL", "Machine Learning", "Data Analysis", "Statistics"],
    "qa": ["Test Automation", "Selenium", "Jest", "Quality Assurance"],
}

LEVEL_MAPPINGS: dict[str, tuple[ProficiencyLevel, float]] = {
    "entry": (ProficiencyLevel.INTERMEDIATE, 1),
    "mid": (ProficiencyLevel.ADVANCED, 3),
    "senior": (ProficiencyLevel.ADVANCED, 5),
    "lead": (ProficiencyLevel.EXPERT, 7),
}


def build_job_requirement(
    skills: list[str],
    level: ProficiencyLevel,
    years: float,
    **options: Any,
) -> JobRequirement:
    """Build a requirement where every skill is 'important' at ``level`` with weight 1."""
    payload: dict[str, Any] = {
        "required_skills": [
            RequiredSkill(name=name, proficiency_level=level) for name in skills
        ],
        "experience_level": level,
        "minimum_years": years,
    }
    payload.update(options)
    return JobRequirement.model_validate(payload)


def job_requirement_for_role(
    role: RoleType,
    level: RoleLevel,
    custom_skills: list[str] | None = None,
) -> JobRequirement:
    try:
        proficiency, years = LEVEL_MAPPINGS[level]
        skills = custom_skills or ROLE_SKILL_SETS[role]
    except KeyError as exc:
        raise ValueError(f"Unsupported role/level: {role!r}/{level!r}") from exc

    return build_job_requirement(
        skills,
        proficiency,
        years,
        communication_level=0.9 if level == "lead" else 0.7,
        leadership_required=level == "lead",
        teamwork_importance=0.8,
        cultural_values=["collaboration", "continuous learning", "innovation"],
    )
