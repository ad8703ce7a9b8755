"""Search query, summary and facet records for the profile store."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .scoring import CategoryScores
from .skills import ProficiencyLevel, SkillCategory

SortField = Literal["score", "date", "experience", "name"]
SortOrder = Literal["asc", "desc"]


class NumericRange(BaseModel):
    """Inclusive bounds; a missing bound is open."""

    min: float | None = None
    max: float | None = None

    model_config = ConfigDict(extra="forbid")

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class DateRange(BaseModel):
    start: datetime | None = Field(default=None, alias="from")
    end: datetime | None = Field(default=None, alias="to")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ProfileSearchQuery(BaseModel):
    """Structured filters, free text, sort and pagination for a store search.

    Filters combine with AND across filter types and OR within a list filter.
    Score ranges only constrain profiles that already have a scoring result.
    """

    skills: list[str] = Field(default_factory=list)
    skill_categories: list[SkillCategory] = Field(default_factory=list)
    experience_years: NumericRange | None = None
    proficiency_levels: list[ProficiencyLevel] = Field(default_factory=list)
    overall_score: NumericRange | None = None
    technical_score: NumericRange | None = None
    communication_score: NumericRange | None = None
    current_company: list[str] = Field(default_factory=list)
    location: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    profile_completeness: NumericRange | None = None
    interview_date: DateRange | None = None
    search_text: str | None = None
    sort_by: SortField = "date"
    sort_order: SortOrder = "asc"
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class ProfileSummary(BaseModel):
    id: str
    candidate_id: str
    interview_id: str | None = None
    candidate_name: str | None = None
    overall_score: float | None = None
    category_scores: CategoryScores | None = None
    top_skills: list[str] = Field(default_factory=list)
    experience: str
    current_role: str | None = None
    profile_completeness: float
    interview_date: datetime
    flags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class FacetCount(BaseModel):
    value: str
    count: int

    model_config = ConfigDict(extra="forbid")


class SearchFacets(BaseModel):
    skill_categories: list[FacetCount] = Field(default_factory=list)
    experience_ranges: list[FacetCount] = Field(default_factory=list)
    companies: list[FacetCount] = Field(default_factory=list)
    locations: list[FacetCount] = Field(default_factory=list)
    score_ranges: list[FacetCount] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ProfileSearchResult(BaseModel):
    profiles: list[ProfileSummary] = Field(default_factory=list)
    total: int
    facets: SearchFacets
    suggestions: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
