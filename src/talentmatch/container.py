"""Dependency injection container for the matching system."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    BehavioralEvaluator,
    CommunicationEvaluator,
    CulturalFitEvaluator,
    EducationEvaluator,
    ExperienceEvaluator,
    ProfileComparator,
    ProfileStore,
    ScoringEngine,
    SkillExtractionEngine,
    SkillTaxonomy,
    TechnicalEvaluator,
)
from .core.evaluators import (
    BehavioralConfig,
    CommunicationConfig,
    CulturalConfig,
    EducationConfig,
    ExperienceConfig,
    TechnicalConfig,
)
from .core.extraction import ExtractionConfig
from .core.store import StoreConfig
from .llm import HTTPSkillAugmenter
from .pipeline import MatchingPipeline
from .service import CandidateProfileService

_EVALUATOR_OVERRIDES = {
    "technical": ("technical_evaluator", TechnicalEvaluator, TechnicalConfig),
    "communication": ("communication_evaluator", CommunicationEvaluator, CommunicationConfig),
    "experience": ("experience_evaluator", ExperienceEvaluator, ExperienceConfig),
    "cultural": ("cultural_evaluator", CulturalFitEvaluator, CulturalConfig),
    "behavioral": ("behavioral_evaluator", BehavioralEvaluator, BehavioralConfig),
    "education": ("education_evaluator", EducationEvaluator, EducationConfig),
}


class MatchingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    taxonomy = providers.Singleton(SkillTaxonomy.load, path=config.taxonomy_path)
    augmenter = providers.Object(None)

    extractor = providers.Singleton(
        SkillExtractionEngine,
        taxonomy=taxonomy,
        augmenter=augmenter,
    )

    technical_evaluator = providers.Singleton(TechnicalEvaluator)
    communication_evaluator = providers.Singleton(CommunicationEvaluator)
    experience_evaluator = providers.Singleton(ExperienceEvaluator)
    cultural_evaluator = providers.Singleton(CulturalFitEvaluator)
    behavioral_evaluator = providers.Singleton(BehavioralEvaluator)
    education_evaluator = providers.Singleton(EducationEvaluator)

    evaluators = providers.List(
        technical_evaluator,
        communication_evaluator,
        experience_evaluator,
        cultural_evaluator,
        behavioral_evaluator,
        education_evaluator,
    )

    scorer = providers.Singleton(
        ScoringEngine,
        evaluators=evaluators,
        weights=config.scoring.weights,
        normalize_weights=config.scoring.normalize_weights.as_(bool),
    )

    comparator = providers.Singleton(ProfileComparator)
    store = providers.Singleton(ProfileStore, comparator=comparator)

    service = providers.Factory(
        CandidateProfileService,
        extractor=extractor,
        scorer=scorer,
        store=store,
    )

    pipeline = providers.Factory(
        MatchingPipeline,
        scorer=scorer,
        store=store,
    )


def create_container(*, settings: dict | None = None) -> MatchingContainer:
    """Instantiate container with optional overrides."""

    container = MatchingContainer()

    if not settings:
        return container

    if not isinstance(settings, dict):
        raise TypeError("settings must be a mapping")

    core_settings = {
        key: settings[key] for key in ("scoring", "taxonomy_path") if key in settings
    }
    if core_settings:
        container.config.from_dict(core_settings)

    if "extraction" in settings:
        extraction_config = ExtractionConfig(**settings["extraction"])
        container.extractor.override(
            providers.Singleton(
                SkillExtractionEngine,
                taxonomy=container.taxonomy,
                augmenter=container.augmenter,
                config=extraction_config,
            )
        )

    if "store" in settings:
        store_config = StoreConfig(**settings["store"])
        container.store.override(
            providers.Singleton(ProfileStore, config=store_config, comparator=container.comparator)
        )

    llm_settings = settings.get("llm") or {}
    if llm_settings.get("endpoint"):
        container.augmenter.override(
            providers.Singleton(
                HTTPSkillAugmenter,
                llm_settings["endpoint"],
                llm_settings.get("api_key"),
                timeout=llm_settings.get("timeout", 10.0),
            )
        )

    evaluator_settings = settings.get("evaluators", {})
    for name, values in evaluator_settings.items():
        try:
            attribute, evaluator_cls, config_cls = _EVALUATOR_OVERRIDES[name]
        except KeyError as exc:
            raise ValueError(f"Unknown evaluator: {name!r}") from exc
        getattr(container, attribute).override(
            providers.Singleton(evaluator_cls, config=config_cls(**values))
        )

    return container
