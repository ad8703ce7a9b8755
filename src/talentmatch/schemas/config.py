"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class ScoringSection(BaseModel):
    weights: dict[str, float] | None = None
    normalize_weights: bool | None = None


class ExtractionSection(BaseModel):
    context_window: int | None = None
    base_confidence: float | None = None
    inferred_confidence: float | None = None
    max_suggestions: int | None = None
    whole_words: bool | None = None


class StoreSection(BaseModel):
    default_limit: int | None = None
    max_suggestions: int | None = None
    cleanup_days: int | None = None


class LLMSection(BaseModel):
    endpoint: str | None = None
    api_key: str | None = None
    timeout: float | None = None


class AppConfig(BaseModel):
    scoring: ScoringSection = Field(default_factory=ScoringSection)
    extraction: ExtractionSection = Field(default_factory=ExtractionSection)
    store: StoreSection = Field(default_factory=StoreSection)
    llm: LLMSection = Field(default_factory=LLMSection)
    evaluators: dict[str, dict[str, Any]] = Field(default_factory=dict)
    taxonomy_path: str | None = None

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("scoring", "extraction", "store", "llm"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        if self.evaluators:
            settings["evaluators"] = self.evaluators
        if self.taxonomy_path:
            settings["taxonomy_path"] = self.taxonomy_path
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
