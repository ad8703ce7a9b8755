"""In-memory profile store with term indexes, faceted search and comparison."""

from __future__ import annotations

import csv
import io
import json
import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Literal

import pendulum
import structlog
from rapidfuzz import fuzz, process

from ..errors import ProfileNotFoundError
from ..schemas import (
    CandidateProfile,
    FacetCount,
    ProfileSearchQuery,
    ProfileSearchResult,
    ProfileSummary,
    ScoringResult,
    SearchFacets,
)
from .comparison import ProfileComparator, ProfileComparisonResult

IndexDimension = Literal["skills", "companies", "locations", "education", "technologies"]
INDEX_DIMENSIONS: tuple[IndexDimension, ...] = (
    "skills",
    "companies",
    "locations",
    "education",
    "technologies",
)

EXPORT_CSV_COLUMNS = (
    "id",
    "candidate_id",
    "name",
    "current_title",
    "years_experience",
    "profile_completeness",
    "overall_score",
    "top_skills",
)
EXPORT_TOP_SKILLS = 3

_SUMMARY_FLAG_TYPES = ("red_flag", "concern")


@dataclass
class StoreConfig:
    default_limit: int = 50
    max_suggestions: int = 8
    suggestion_skills: int = 5
    suggestion_companies: int = 3
    suggestion_cutoff: float = 60.0
    facet_limit: int = 10
    top_skills: int = 5
    cleanup_days: int = 30


def experience_range(years: float) -> str:
    if years < 1:
        return "0-1 years"
    if years < 3:
        return "1-3 years"
    if years < 5:
        return "3-5 years"
    if years < 10:
        return "5-10 years"
    return "10+ years"


def score_range(score: float) -> str:
    """10-point band label; scores at or above 0.9 share the top band."""
    band = min(max(int(score * 10), 0), 9) * 10
    upper = 100 if band == 90 else band + 9
    return f"{band}-{upper}%"


def searchable_text(profile: CandidateProfile) -> str:
    info = profile.personal_info
    parts: list[str] = [
        info.name or "",
        info.current_title or "",
        info.current_company or "",
        info.location or "",
    ]
    parts.extend(skill.name for skill in profile.skills)
    parts.extend(
        f"{exp.role} {exp.company} {' '.join(exp.responsibilities)}" for exp in profile.experiences
    )
    parts.extend(f"{edu.degree} {edu.institution} {edu.field}" for edu in profile.education)
    parts.extend(f"{project.name} {project.description}" for project in profile.projects)
    parts.extend(f"{item.title} {item.description}" for item in profile.achievements)
    return " ".join(parts).lower()


def index_terms(profile: CandidateProfile) -> dict[IndexDimension, set[str]]:
    """Lower-cased index terms per dimension for one profile."""
    terms: dict[IndexDimension, set[str]] = {dimension: set() for dimension in INDEX_DIMENSIONS}
    info = profile.personal_info

    terms["skills"].update(skill.name.lower() for skill in profile.skills)
    if info.current_company:
        terms["companies"].add(info.current_company.lower())
    terms["companies"].update(exp.company.lower() for exp in profile.experiences if exp.company)
    if info.location:
        terms["locations"].add(info.location.lower())
    for edu in profile.education:
        terms["education"].update(value.lower() for value in (edu.institution, edu.degree) if value)
    for exp in profile.experiences:
        terms["technologies"].update(tech.lower() for tech in exp.technologies)
    for project in profile.projects:
        terms["technologies"].update(tech.lower() for tech in project.technologies)
    return terms


def _as_utc(value: datetime) -> pendulum.DateTime:
    return pendulum.instance(value).in_timezone("UTC")


def _count_facet(counter: Counter[str], limit: int | None = None) -> list[FacetCount]:
    # Counter.most_common keeps first-seen order among equal counts
    return [FacetCount(value=value, count=count) for value, count in counter.most_common(limit)]


class ProfileStore:
    """Keyed profile and scoring-result storage with search indexes.

    Every read and write holds the store lock, and values are deep-copied on the
    way in and out so callers never share state with the store.
    """

    def __init__(
        self,
        *,
        config: StoreConfig | None = None,
        comparator: ProfileComparator | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._config = config or StoreConfig()
        self._comparator = comparator or ProfileComparator()
        self._now_provider = now_provider or pendulum.now
        self._lock = threading.RLock()
        self._profiles: dict[str, CandidateProfile] = {}
        self._scores: dict[str, ScoringResult] = {}
        self._postings: dict[IndexDimension, dict[str, set[str]]] = {
            dimension: {} for dimension in INDEX_DIMENSIONS
        }
        self._profile_terms: dict[str, dict[IndexDimension, set[str]]] = {}
        self._logger = structlog.get_logger(__name__)

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)

    def __contains__(self, profile_id: object) -> bool:
        with self._lock:
            return profile_id in self._profiles

    # storage

    def store_profile(
        self,
        profile: CandidateProfile,
        scoring_result: ScoringResult | None = None,
    ) -> None:
        with self._lock:
            self._profiles[profile.id] = profile.model_copy(deep=True)
            if scoring_result is not None:
                self._scores[profile.id] = scoring_result.model_copy(deep=True)
            self._reindex(profile.id)
        self._logger.info("profile.stored", profile_id=profile.id, scored=scoring_result is not None)

    def get_profile(self, profile_id: str) -> CandidateProfile | None:
        with self._lock:
            profile = self._profiles.get(profile_id)
            return profile.model_copy(deep=True) if profile else None

    def require_profile(self, profile_id: str) -> CandidateProfile:
        profile = self.get_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    def list_profiles(self) -> list[CandidateProfile]:
        with self._lock:
            return [profile.model_copy(deep=True) for profile in self._profiles.values()]

    def get_scoring_result(self, profile_id: str) -> ScoringResult | None:
        with self._lock:
            if profile_id not in self._profiles:
                raise ProfileNotFoundError(profile_id)
            result = self._scores.get(profile_id)
            return result.model_copy(deep=True) if result else None

    def store_scoring_result(self, profile_id: str, result: ScoringResult) -> None:
        with self._lock:
            if profile_id not in self._profiles:
                raise ProfileNotFoundError(profile_id)
            self._scores[profile_id] = result.model_copy(deep=True)
        self._logger.info("profile.scored", profile_id=profile_id, overall_score=result.overall_score)

    def update_profile(self, profile_id: str, **changes: Any) -> CandidateProfile:
        """Apply field changes, refresh ``last_updated`` and reindex."""
        if "id" in changes and changes["id"] != profile_id:
            raise ValueError("Profile id cannot be changed")
        with self._lock:
            existing = self._profiles.get(profile_id)
            if existing is None:
                raise ProfileNotFoundError(profile_id)
            payload = existing.model_dump()
            payload.update(changes)
            payload["last_updated"] = self._now_provider()
            # nested model instances in changes are kept by reference otherwise
            updated = CandidateProfile.model_validate(payload).model_copy(deep=True)
            self._profiles[profile_id] = updated
            self._reindex(profile_id)
            snapshot = updated.model_copy(deep=True)
        self._logger.info("profile.updated", profile_id=profile_id, fields=sorted(changes))
        return snapshot

    def delete_profile(self, profile_id: str) -> None:
        with self._lock:
            if profile_id not in self._profiles:
                raise ProfileNotFoundError(profile_id)
            del self._profiles[profile_id]
            self._scores.pop(profile_id, None)
            self._unindex(profile_id)
        self._logger.info("profile.deleted", profile_id=profile_id)

    # indexes

    def _reindex(self, profile_id: str) -> None:
        self._unindex(profile_id)
        terms = index_terms(self._profiles[profile_id])
        for dimension, values in terms.items():
            postings = self._postings[dimension]
            for term in values:
                postings.setdefault(term, set()).add(profile_id)
        self._profile_terms[profile_id] = terms

    def _unindex(self, profile_id: str) -> None:
        terms = self._profile_terms.pop(profile_id, None)
        if not terms:
            return
        for dimension, values in terms.items():
            postings = self._postings[dimension]
            for term in values:
                ids = postings.get(term)
                if ids is None:
                    continue
                ids.discard(profile_id)
                if not ids:
                    del postings[term]

    def rebuild_indexes(self) -> None:
        """Recompute every posting list from a full scan of stored profiles."""
        with self._lock:
            self._postings = {dimension: {} for dimension in INDEX_DIMENSIONS}
            self._profile_terms = {}
            for profile_id in self._profiles:
                self._reindex(profile_id)
        self._logger.info("index.rebuilt", profiles=len(self._profile_terms))

    def vocabulary(self, dimension: IndexDimension) -> list[str]:
        """Indexed terms for a dimension, most widely held first."""
        with self._lock:
            postings = self._postings[dimension]
            return sorted(postings, key=lambda term: (-len(postings[term]), term))

    def profiles_for_term(self, dimension: IndexDimension, term: str) -> set[str]:
        with self._lock:
            return set(self._postings[dimension].get(term.lower(), set()))

    # search

    def search_profiles(self, query: ProfileSearchQuery | None = None) -> ProfileSearchResult:
        query = query or ProfileSearchQuery()
        with self._lock:
            matches = [profile for profile in self._profiles.values() if self._matches(profile, query)]
            if query.search_text:
                terms = query.search_text.lower().split()
                matches = [
                    profile
                    for profile in matches
                    if all(term in searchable_text(profile) for term in terms)
                ]
            matches = self._sort(matches, query)

            total = len(matches)
            limit = self._config.default_limit if query.limit is None else query.limit
            page = matches[query.offset : query.offset + limit]

            result = ProfileSearchResult(
                profiles=[self._summarize(profile) for profile in page],
                total=total,
                facets=self._facets(),
                suggestions=self._suggestions(query),
            )
        self._logger.debug("profile.search", total=total, returned=len(result.profiles))
        return result

    def _matches(self, profile: CandidateProfile, query: ProfileSearchQuery) -> bool:
        info = profile.personal_info

        if query.skills:
            names = {skill.name.lower() for skill in profile.skills}
            if not any(skill.lower() in names for skill in query.skills):
                return False
        if query.skill_categories:
            categories = {skill.category for skill in profile.skills}
            if not any(category in categories for category in query.skill_categories):
                return False
        if query.experience_years and not query.experience_years.contains(info.years_experience or 0):
            return False
        if query.proficiency_levels:
            levels = {skill.proficiency_level for skill in profile.skills}
            if not any(level in levels for level in query.proficiency_levels):
                return False

        result = self._scores.get(profile.id)
        if result is not None:
            if query.overall_score and not query.overall_score.contains(result.overall_score):
                return False
            if query.technical_score and not query.technical_score.contains(
                result.category_scores.technical
            ):
                return False
            if query.communication_score and not query.communication_score.contains(
                result.category_scores.communication
            ):
                return False

        if query.current_company:
            company = (info.current_company or "").lower()
            if not company or company not in {value.lower() for value in query.current_company}:
                return False
        if query.location:
            location = (info.location or "").lower()
            if not location or not any(value.lower() in location for value in query.location):
                return False
        if query.education:
            texts = [
                f"{edu.degree} {edu.institution} {edu.field}".lower() for edu in profile.education
            ]
            if not any(value.lower() in text for value in query.education for text in texts):
                return False
        if query.profile_completeness and not query.profile_completeness.contains(
            profile.profile_completeness
        ):
            return False
        if query.interview_date:
            updated = _as_utc(profile.last_updated)
            if query.interview_date.start and updated < _as_utc(query.interview_date.start):
                return False
            if query.interview_date.end and updated > _as_utc(query.interview_date.end):
                return False
        return True

    def _sort(self, profiles: list[CandidateProfile], query: ProfileSearchQuery) -> list[CandidateProfile]:
        key: Callable[[CandidateProfile], Any]
        if query.sort_by == "score":
            key = lambda p: self._scores[p.id].overall_score if p.id in self._scores else 0.0  # noqa: E731
        elif query.sort_by == "experience":
            key = lambda p: p.personal_info.years_experience or 0  # noqa: E731
        elif query.sort_by == "name":
            key = lambda p: (p.personal_info.name or "").lower()  # noqa: E731
        else:
            key = lambda p: _as_utc(p.last_updated)  # noqa: E731
        return sorted(profiles, key=key, reverse=query.sort_order == "desc")

    def _summarize(self, profile: CandidateProfile) -> ProfileSummary:
        result = self._scores.get(profile.id)
        top_skills = sorted(profile.skills, key=lambda skill: skill.confidence, reverse=True)
        info = profile.personal_info
        return ProfileSummary(
            id=profile.id,
            candidate_id=profile.candidate_id,
            interview_id=profile.interview_id,
            candidate_name=info.name,
            overall_score=result.overall_score if result else None,
            category_scores=result.category_scores.model_copy() if result else None,
            top_skills=[skill.name for skill in top_skills[: self._config.top_skills]],
            experience=f"{info.years_experience or 0:g} years",
            current_role=info.current_title,
            profile_completeness=profile.profile_completeness,
            interview_date=profile.last_updated,
            flags=[flag.description for flag in profile.flags if flag.type in _SUMMARY_FLAG_TYPES],
        )

    def _facets(self) -> SearchFacets:
        categories: Counter[str] = Counter()
        experience: Counter[str] = Counter()
        companies: Counter[str] = Counter()
        locations: Counter[str] = Counter()
        scores: Counter[str] = Counter()

        for profile in self._profiles.values():
            info = profile.personal_info
            categories.update(skill.category.value for skill in profile.skills)
            experience[experience_range(info.years_experience or 0)] += 1
            if info.current_company:
                companies[info.current_company] += 1
            if info.location:
                locations[info.location] += 1
            result = self._scores.get(profile.id)
            if result is not None:
                scores[score_range(result.overall_score)] += 1

        return SearchFacets(
            skill_categories=_count_facet(categories),
            experience_ranges=_count_facet(experience),
            companies=_count_facet(companies, self._config.facet_limit),
            locations=_count_facet(locations, self._config.facet_limit),
            score_ranges=_count_facet(scores),
        )

    def _suggestions(self, query: ProfileSearchQuery) -> list[str]:
        skills = self.vocabulary("skills")
        companies = self.vocabulary("companies")
        limit = self._config.max_suggestions

        if query.search_text:
            choices = [f"skill:{term}" for term in skills] + [f"company:{term}" for term in companies]
            labels = [choice.split(":", 1)[1] for choice in choices]
            matches = process.extract(
                query.search_text.lower(),
                labels,
                scorer=fuzz.WRatio,
                limit=limit,
                score_cutoff=self._config.suggestion_cutoff,
            )
            return [choices[index] for _, _, index in matches]

        suggestions = [f"skill:{term}" for term in skills[: self._config.suggestion_skills]]
        suggestions.extend(f"company:{term}" for term in companies[: self._config.suggestion_companies])
        return suggestions[:limit]

    # comparison, analytics and maintenance

    def compare_profiles(self, profile_ids: Iterable[str]) -> ProfileComparisonResult:
        requested = list(profile_ids)
        with self._lock:
            resolved = [
                self._profiles[pid].model_copy(deep=True)
                for pid in dict.fromkeys(requested)
                if pid in self._profiles
            ]
            scores = {
                profile.id: self._scores[profile.id].model_copy(deep=True)
                for profile in resolved
                if profile.id in self._scores
            }
        return self._comparator.compare(resolved, scores, requested=requested)

    def storage_stats(self) -> dict[str, Any]:
        with self._lock:
            profiles = list(self._profiles.values())
            total_scores = len(self._scores)

        skill_counts: Counter[str] = Counter()
        company_counts: Counter[str] = Counter()
        for profile in profiles:
            skill_counts.update(skill.name for skill in profile.skills)
            if profile.personal_info.current_company:
                company_counts[profile.personal_info.current_company] += 1

        completeness = (
            sum(profile.profile_completeness for profile in profiles) / len(profiles)
            if profiles
            else 0.0
        )
        return {
            "total_profiles": len(profiles),
            "total_scores": total_scores,
            "average_completeness": completeness,
            "top_skills": [name for name, _ in skill_counts.most_common(10)],
            "top_companies": [name for name, _ in company_counts.most_common(10)],
        }

    def export_profiles(
        self,
        format: Literal["json", "csv"] = "json",
        profile_ids: Iterable[str] | None = None,
    ) -> str:
        """Serialize stored profiles; ``profile_ids`` selects a subset, unknown ids are skipped."""
        with self._lock:
            if profile_ids is None:
                selected = list(self._profiles.values())
            else:
                selected = [
                    self._profiles[pid] for pid in dict.fromkeys(profile_ids) if pid in self._profiles
                ]
            profiles = [profile.model_dump(mode="json") for profile in selected]
            scores = {
                profile.id: self._scores[profile.id].overall_score
                for profile in selected
                if profile.id in self._scores
            }

        if format == "json":
            return json.dumps(profiles, ensure_ascii=False, indent=2)
        if format != "csv":
            raise ValueError(f"Unsupported export format: {format!r}")

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(EXPORT_CSV_COLUMNS)
        for profile in profiles:
            info = profile["personal_info"]
            writer.writerow(
                [
                    profile["id"],
                    profile["candidate_id"],
                    info.get("name") or "",
                    info.get("current_title") or "",
                    info.get("years_experience") or 0,
                    profile["profile_completeness"],
                    scores.get(profile["id"], ""),
                    ";".join(skill["name"] for skill in profile["skills"][:EXPORT_TOP_SKILLS]),
                ]
            )
        return buffer.getvalue()

    def cleanup(self, older_than: datetime | None = None) -> int:
        """Delete profiles last updated before ``older_than`` (default: cleanup_days ago)."""
        cutoff = _as_utc(older_than) if older_than else _as_utc(
            self._now_provider()
        ).subtract(days=self._config.cleanup_days)
        with self._lock:
            stale = [
                profile_id
                for profile_id, profile in self._profiles.items()
                if _as_utc(profile.last_updated) < cutoff
            ]
            for profile_id in stale:
                self.delete_profile(profile_id)
        self._logger.info("profile.cleanup", removed=len(stale), cutoff=cutoff.to_iso8601_string())
        return len(stale)
