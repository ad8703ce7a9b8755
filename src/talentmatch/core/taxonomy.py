"""Skill taxonomy lookup built from YAML reference data."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator

from ..config import ConfigManager
from ..schemas import SkillCategory, SkillDefinition

_FALLBACK_CATEGORIES: dict[SkillCategory, frozenset[str]] = {
    SkillCategory.PROGRAMMING_LANGUAGE: frozenset({"javascript", "python", "java", "c++", "go"}),
    SkillCategory.FRAMEWORK: frozenset({"react", "angular", "vue", "express", "django"}),
    SkillCategory.DATABASE: frozenset({"mysql", "postgresql", "mongodb"}),
}


class SkillTaxonomy:
    """Case-insensitive index of skill definitions by canonical name and alias.

    Later definitions win when two entries share an alias, so ``node.js``
    resolves to the Node.js entry even though JavaScript also lists it.
    """

    def __init__(self, definitions: Iterable[SkillDefinition]) -> None:
        self._definitions: list[SkillDefinition] = []
        self._lookup: dict[str, SkillDefinition] = {}
        for definition in definitions:
            self._definitions.append(definition)
            self._lookup[definition.name.lower()] = definition
            for alias in definition.aliases:
                self._lookup[alias.lower()] = definition

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "SkillTaxonomy":
        return cls(SkillDefinition.model_validate(record) for record in records)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "SkillTaxonomy":
        """Load the bundled taxonomy, or a user-supplied YAML file."""
        if path is None:
            raw = ConfigManager().load("taxonomy")
        else:
            raw = ConfigManager.load_path(path)
        if not isinstance(raw, dict) or not isinstance(raw.get("skills"), list):
            raise ValueError("Taxonomy YAML must contain a 'skills' list")
        return cls.from_records(raw["skills"])

    def keys(self) -> Iterator[tuple[str, SkillDefinition]]:
        """Yield ``(lower-cased key, definition)`` pairs in declaration order."""
        yield from self._lookup.items()

    def get(self, name: str) -> SkillDefinition | None:
        return self._lookup.get(name.lower())

    def definitions(self) -> list[SkillDefinition]:
        unique: dict[str, SkillDefinition] = {}
        for definition in self._lookup.values():
            unique[definition.name] = definition
        return list(unique.values())

    def category_for(self, name: str) -> SkillCategory:
        definition = self.get(name)
        if definition is not None:
            return definition.category
        lowered = name.lower()
        for category, names in _FALLBACK_CATEGORIES.items():
            if lowered in names:
                return category
        return SkillCategory.TOOL

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lookup
