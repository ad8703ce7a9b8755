"""Skill taxonomy and extraction records."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SkillCategory(str, Enum):
    PROGRAMMING_LANGUAGE = "programming_language"
    FRAMEWORK = "framework"
    DATABASE = "database"
    CLOUD = "cloud"
    DEVOPS = "devops"
    FRONTEND = "frontend"
    BACKEND = "backend"
    MOBILE = "mobile"
    TESTING = "testing"
    DESIGN = "design"
    PROJECT_MANAGEMENT = "project_management"
    SOFT_SKILL = "soft_skill"
    DOMAIN_KNOWLEDGE = "domain_knowledge"
    TOOL = "tool"
    METHODOLOGY = "methodology"


class ProficiencyLevel(str, Enum):
    """Ordered mastery tier: beginner < intermediate < advanced < expert."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    @classmethod
    def ordered(cls) -> tuple["ProficiencyLevel", ...]:
        return _LEVEL_ORDER


_LEVEL_ORDER: tuple[ProficiencyLevel, ...] = (
    ProficiencyLevel.BEGINNER,
    ProficiencyLevel.INTERMEDIATE,
    ProficiencyLevel.ADVANCED,
    ProficiencyLevel.EXPERT,
)

SkillSource = Literal["taxonomy", "inferred", "augmented"]


class ProficiencyIndicators(BaseModel):
    """Keywords that hint at each proficiency level."""

    beginner: tuple[str, ...] = ()
    intermediate: tuple[str, ...] = ()
    advanced: tuple[str, ...] = ()
    expert: tuple[str, ...] = ()

    model_config = ConfigDict(extra="forbid", frozen=True)

    def items(self) -> list[tuple[ProficiencyLevel, tuple[str, ...]]]:
        return [(level, getattr(self, level.value)) for level in ProficiencyLevel.ordered()]


class SkillDefinition(BaseModel):
    """Immutable taxonomy entry."""

    name: str
    aliases: tuple[str, ...] = ()
    related_skills: tuple[str, ...] = ()
    category: SkillCategory
    subcategory: str | None = None
    frameworks: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()
    certifications: tuple[str, ...] = ()
    proficiency_indicators: ProficiencyIndicators = Field(
        default_factory=ProficiencyIndicators
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


class ExtractedSkill(BaseModel):
    """Skill mention found in a single piece of text."""

    name: str
    category: SkillCategory
    proficiency_level: ProficiencyLevel = ProficiencyLevel.INTERMEDIATE
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    context: str = ""
    contexts: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    related_skills: list[str] = Field(default_factory=list)
    years_experience: int | None = None
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    source: SkillSource = "taxonomy"

    model_config = ConfigDict(extra="forbid")


class SkillSuggestion(BaseModel):
    skill: str
    reason: str
    confidence: float
    category: SkillCategory

    model_config = ConfigDict(extra="forbid")


class SkillExtractionResult(BaseModel):
    """Output of a single extraction call."""

    skills: list[ExtractedSkill] = Field(default_factory=list)
    confidence: float = 0.0
    suggestions: list[SkillSuggestion] = Field(default_factory=list)
    missing_categories: list[SkillCategory] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class SkillGap(BaseModel):
    skill: str
    required: ProficiencyLevel
    current: ProficiencyLevel

    model_config = ConfigDict(extra="forbid")


class SkillGapReport(BaseModel):
    missing: list[str] = Field(default_factory=list)
    underqualified: list[SkillGap] = Field(default_factory=list)
    overqualified: list[SkillGap] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
