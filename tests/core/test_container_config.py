from __future__ import annotations

import pytest

from talentmatch.container import create_container
from talentmatch.llm import HTTPSkillAugmenter
from talentmatch.schemas.config import load_config


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "scoring": {"weights": {"technical": 0.55}, "normalize_weights": True},
            "extraction": {"whole_words": True, "max_suggestions": 3},
            "store": {"default_limit": 10},
            "evaluators": {
                "technical": {"nice_to_have_credit": 0.25},
                "education": {"neutral_score": 0.4},
                "cultural": {"trait_threshold": 0.6},
            },
        }
    )

    technical = container.technical_evaluator()
    education = container.education_evaluator()
    cultural = container.cultural_evaluator()
    scorer = container.scorer()
    extractor = container.extractor()
    store = container.store()

    assert technical._config.nice_to_have_credit == 0.25
    assert education._config.neutral_score == 0.4
    assert cultural._config.trait_threshold == 0.6
    assert scorer.weights.technical == 0.55
    assert scorer.weights.communication == 0.20
    assert scorer._normalize is True
    assert extractor._config.whole_words is True
    assert extractor._config.max_suggestions == 3
    assert store._config.default_limit == 10


def test_default_container_wires_shared_store():
    container = create_container()

    service = container.service()
    pipeline = container.pipeline()

    assert service.store is pipeline.store
    assert container.scorer()._normalize is False
    assert container.extractor()._augmenter is None
    assert len(container.taxonomy()) >= 10


def test_llm_endpoint_installs_augmenter():
    container = create_container(settings={"llm": {"endpoint": "http://localhost:9/skills", "timeout": 2}})

    augmenter = container.extractor()._augmenter

    assert isinstance(augmenter, HTTPSkillAugmenter)
    assert augmenter._timeout == 2


def test_unknown_evaluator_override_is_rejected():
    with pytest.raises(ValueError):
        create_container(settings={"evaluators": {"salary": {"tolerance": 0.1}}})


def test_yaml_settings_flow_into_container():
    settings = load_config(
        {"scoring": {"weights": {"education": 0.0}}, "evaluators": {"behavioral": {"leadership_weight": 0.5}}}
    ).to_settings()

    container = create_container(settings=settings)

    assert container.scorer().weights.education == 0.0
    assert container.behavioral_evaluator()._config.leadership_weight == 0.5
