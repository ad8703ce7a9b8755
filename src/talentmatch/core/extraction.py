"""Taxonomy-driven skill extraction from free text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable

import structlog

from ..schemas import (
    ExtractedSkill,
    ProficiencyLevel,
    SkillCategory,
    SkillDefinition,
    SkillExtractionResult,
    SkillGap,
    SkillGapReport,
    SkillSuggestion,
)
from .taxonomy import SkillTaxonomy

_RELEVANT_WORDS: tuple[str, ...] = (
    "experience",
    "skilled",
    "proficient",
    "expert",
    "years",
    "worked",
    "used",
)
_NEGATION_PATTERN = re.compile(r"\b(?:not|never)\b")

_GENERIC_LEVEL_WORDS: tuple[tuple[ProficiencyLevel, tuple[str, ...]], ...] = (
    (ProficiencyLevel.EXPERT, ("expert", "master", "architect")),
    (ProficiencyLevel.ADVANCED, ("senior", "advanced", "lead", "proficient", "experienced")),
    (ProficiencyLevel.BEGINNER, ("basic", "beginner", "learning")),
)

# (skill, trigger, reason, confidence, category)
_PAIRINGS: tuple[tuple[str, str, str, float, SkillCategory], ...] = (
    ("Redux", "react", "Commonly used with React for state management", 0.7, SkillCategory.FRAMEWORK),
    ("Express", "node.js", "Popular Node.js framework", 0.8, SkillCategory.FRAMEWORK),
)


@runtime_checkable
class SkillAugmenter(Protocol):
    """Optional secondary extraction source, typically backed by a language model."""

    def extract_skills(self, text: str) -> list[dict[str, Any]]:
        """Return raw skill dictionaries for the given text."""


@dataclass
class ExtractionConfig:
    """Tuning knobs for taxonomy extraction."""

    context_window: int = 50
    base_confidence: float = 0.8
    relevance_step: float = 0.05
    relevance_cap: float = 0.2
    negation_factor: float = 0.3
    inferred_confidence: float = 0.6
    related_confidence: float = 0.6
    max_suggestions: int = 5
    whole_words: bool = False


class SkillExtractionEngine:
    """Map free text onto typed skill records."""

    def __init__(
        self,
        taxonomy: SkillTaxonomy,
        *,
        config: ExtractionConfig | None = None,
        augmenter: SkillAugmenter | None = None,
    ) -> None:
        self._taxonomy = taxonomy
        self._config = config or ExtractionConfig()
        self._augmenter = augmenter
        self._logger = structlog.get_logger(__name__)

    @property
    def taxonomy(self) -> SkillTaxonomy:
        return self._taxonomy

    def get_skill_definition(self, name: str) -> SkillDefinition | None:
        return self._taxonomy.get(name)

    def all_skill_definitions(self) -> list[SkillDefinition]:
        return self._taxonomy.definitions()

    def extract_skills(self, text: str) -> SkillExtractionResult:
        extracted: list[ExtractedSkill] = []
        extracted.extend(self._find_direct_matches(text))
        extracted.extend(self._augment(text))
        extracted.extend(self._infer_from_context(text))

        suggestions = self._suggest(text, extracted)
        skills = deduplicate_skills(extracted)

        return SkillExtractionResult(
            skills=skills,
            confidence=self._overall_confidence(skills, text),
            suggestions=suggestions,
            missing_categories=self._missing_categories(skills),
        )

    def _find_direct_matches(self, text: str) -> list[ExtractedSkill]:
        lower_text = text.lower()
        window = self._config.context_window
        matches: list[ExtractedSkill] = []

        for key, definition in self._taxonomy.keys():
            index = self._locate(lower_text, key)
            if index < 0:
                continue
            start = max(0, index - window)
            end = min(len(text), index + len(key) + window)
            context = text[start:end]

            matches.append(
                ExtractedSkill(
                    name=definition.name,
                    category=definition.category,
                    proficiency_level=infer_proficiency(context, definition),
                    confidence=self._match_confidence(context),
                    context=context.strip(),
                    contexts=[context.strip()],
                    aliases=list(definition.aliases),
                    related_skills=list(definition.related_skills),
                    years_experience=extract_years_experience(context, key),
                    frameworks=list(definition.frameworks),
                    tools=list(definition.tools),
                    certifications=list(definition.certifications),
                )
            )
        return matches

    def _locate(self, lower_text: str, key: str) -> int:
        if not self._config.whole_words:
            return lower_text.find(key)
        match = re.search(rf"(?<![a-z0-9]){re.escape(key)}(?![a-z0-9])", lower_text)
        return match.start() if match else -1

    def _match_confidence(self, context: str) -> float:
        lowered = context.lower()
        confidence = self._config.base_confidence

        relevant = sum(
            1
            for word in lowered.split()
            if any(candidate in word for candidate in _RELEVANT_WORDS)
        )
        confidence += min(relevant * self._config.relevance_step, self._config.relevance_cap)

        if _NEGATION_PATTERN.search(lowered):
            confidence *= self._config.negation_factor
        return min(confidence, 1.0)

    def _augment(self, text: str) -> list[ExtractedSkill]:
        if self._augmenter is None:
            return []
        try:
            raw_skills = self._augmenter.extract_skills(text) or []
            return [self._from_augmented(item) for item in raw_skills]
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("extraction.augmenter_failed", error=str(exc))
            return []

    def _from_augmented(self, item: dict[str, Any]) -> ExtractedSkill:
        name = str(item["name"])
        definition = self._taxonomy.get(name)
        context = str(item.get("context", ""))
        return ExtractedSkill(
            name=definition.name if definition else name,
            category=item.get("category") or self._taxonomy.category_for(name),
            proficiency_level=item.get("proficiency") or ProficiencyLevel.INTERMEDIATE,
            confidence=float(item.get("confidence", self._config.inferred_confidence)),
            context=context,
            contexts=[context] if context else [],
            related_skills=list(definition.related_skills) if definition else [],
            source="augmented",
        )

    def _infer_from_context(self, text: str) -> list[ExtractedSkill]:
        lowered = text.lower()

        rules: list[tuple[bool, str, SkillCategory]] = [
            (
                "full stack" in lowered or "fullstack" in lowered,
                "Full Stack Development",
                SkillCategory.FRAMEWORK,
            ),
            (
                "frontend" in lowered or "front-end" in lowered,
                "Frontend Development",
                SkillCategory.FRONTEND,
            ),
            (
                "backend" in lowered or "back-end" in lowered,
                "Backend Development",
                SkillCategory.BACKEND,
            ),
            (
                _has_word(lowered, "mern") or ("mongo" in lowered and "react" in lowered),
                "MERN Stack",
                SkillCategory.FRAMEWORK,
            ),
            (
                _has_word(lowered, "mean") or ("mongo" in lowered and "angular" in lowered),
                "MEAN Stack",
                SkillCategory.FRAMEWORK,
            ),
            (
                "api" in lowered and "develop" in lowered,
                "API Development",
                SkillCategory.BACKEND,
            ),
            (
                "database" in lowered and "design" in lowered,
                "Database Design",
                SkillCategory.DATABASE,
            ),
        ]

        snippet = text[:100]
        return [
            ExtractedSkill(
                name=name,
                category=category,
                proficiency_level=ProficiencyLevel.INTERMEDIATE,
                confidence=self._config.inferred_confidence,
                context=snippet,
                contexts=[snippet],
                source="inferred",
            )
            for matched, name, category in rules
            if matched
        ]

    def _suggest(self, text: str, extracted: list[ExtractedSkill]) -> list[SkillSuggestion]:
        present = {skill.name.lower() for skill in extracted}
        suggestions: dict[str, SkillSuggestion] = {}

        for skill in extracted:
            definition = self._taxonomy.get(skill.name)
            if definition is None:
                continue
            for related in definition.related_skills:
                key = related.lower()
                if key in present or key in suggestions:
                    continue
                suggestions[key] = SkillSuggestion(
                    skill=related,
                    reason=f"Often used with {skill.name}",
                    confidence=self._config.related_confidence,
                    category=self._taxonomy.category_for(related),
                )

        lowered = text.lower()
        for skill, trigger, reason, confidence, category in _PAIRINGS:
            key = skill.lower()
            if trigger in lowered and key not in present and key not in suggestions:
                suggestions[key] = SkillSuggestion(
                    skill=skill, reason=reason, confidence=confidence, category=category
                )

        return list(suggestions.values())[: self._config.max_suggestions]

    @staticmethod
    def _missing_categories(skills: Iterable[ExtractedSkill]) -> list[SkillCategory]:
        present = {skill.category for skill in skills}
        return [category for category in SkillCategory if category not in present]

    @staticmethod
    def _overall_confidence(skills: list[ExtractedSkill], text: str) -> float:
        if not skills:
            return 0.0
        mean_confidence = sum(skill.confidence for skill in skills) / len(skills)
        text_quality = min(len(text) / 100, 1.0)
        diversity = min(len({skill.category for skill in skills}) / 5, 1.0)
        return mean_confidence * 0.6 + text_quality * 0.2 + diversity * 0.2

    def generate_skill_gaps(
        self,
        candidate_skills: Iterable[Any],
        required_skills: Iterable[str],
        job_level: ProficiencyLevel,
    ) -> SkillGapReport:
        """Compare candidate skills to required names at a single job level.

        Candidates more than one level above the job level are reported as
        overqualified.
        """
        by_name = {skill.name.lower(): skill for skill in candidate_skills}
        report = SkillGapReport()
        for required in required_skills:
            skill = by_name.get(required.lower())
            if skill is None:
                report.missing.append(required)
                continue
            current = ProficiencyLevel(skill.proficiency_level)
            gap = SkillGap(skill=required, required=job_level, current=current)
            if current.rank < job_level.rank:
                report.underqualified.append(gap)
            elif current.rank > job_level.rank + 1:
                report.overqualified.append(gap)
        return report


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{word}\b", text) is not None


def infer_proficiency(context: str, definition: SkillDefinition) -> ProficiencyLevel:
    lowered = context.lower()
    for level, indicators in definition.proficiency_indicators.items():
        if any(indicator.lower() in lowered for indicator in indicators):
            return level
    for level, words in _GENERIC_LEVEL_WORDS:
        if any(word in lowered for word in words):
            return level
    return ProficiencyLevel.INTERMEDIATE


def extract_years_experience(context: str, skill: str) -> int | None:
    escaped = re.escape(skill)
    patterns = (
        rf"(\d+)\s*years?\s*(?:of\s*)?(?:experience\s*)?(?:with\s*)?{escaped}",
        rf"{escaped}\s*for\s*(\d+)\s*years?",
        rf"(\d+)\s*years?\s*{escaped}",
    )
    for pattern in patterns:
        match = re.search(pattern, context, flags=re.IGNORECASE)
        if match:
            return int(match.group(1))
    return None


def deduplicate_skills(skills: Iterable[ExtractedSkill]) -> list[ExtractedSkill]:
    """Collapse records by case-insensitive name.

    The highest-confidence record is kept (first one on ties) and carries the
    contexts of every merged record.
    """
    merged: dict[str, ExtractedSkill] = {}
    for skill in skills:
        key = skill.name.lower()
        contexts = skill.contexts or ([skill.context] if skill.context else [])
        existing = merged.get(key)
        if existing is None:
            merged[key] = skill.model_copy(update={"contexts": list(contexts)})
            continue
        combined = existing.contexts + [c for c in contexts if c not in existing.contexts]
        winner = skill if skill.confidence > existing.confidence else existing
        merged[key] = winner.model_copy(update={"contexts": combined})
    return list(merged.values())


def categorize_skills(skills: Iterable[ExtractedSkill]) -> dict[SkillCategory, list[ExtractedSkill]]:
    grouped: dict[SkillCategory, list[ExtractedSkill]] = {}
    for skill in skills:
        grouped.setdefault(skill.category, []).append(skill)
    return grouped


def skills_by_proficiency(
    skills: Iterable[ExtractedSkill], level: ProficiencyLevel
) -> list[ExtractedSkill]:
    return [skill for skill in skills if skill.proficiency_level == level]


def top_skills_by_category(
    skills: Iterable[ExtractedSkill], category: SkillCategory, limit: int = 5
) -> list[ExtractedSkill]:
    filtered = [skill for skill in skills if skill.category == category]
    filtered.sort(key=lambda skill: skill.confidence, reverse=True)
    return filtered[:limit]
