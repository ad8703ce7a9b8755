from __future__ import annotations

import pytest
from pydantic import ValidationError

from talentmatch.schemas.config import AppConfig, load_config


def test_load_config_builds_settings_from_non_empty_sections():
    data = {
        "scoring": {"weights": {"technical": 0.6}, "normalize_weights": True},
        "extraction": {"whole_words": True},
        "evaluators": {"education": {"neutral_score": 0.4}},
        "taxonomy_path": "custom.yaml",
    }

    app_config = load_config(data)

    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["scoring"] == {"weights": {"technical": 0.6}, "normalize_weights": True}
    assert settings["extraction"] == {"whole_words": True}
    assert settings["evaluators"]["education"]["neutral_score"] == 0.4
    assert settings["taxonomy_path"] == "custom.yaml"
    assert "store" not in settings
    assert "llm" not in settings


def test_empty_config_yields_empty_settings():
    assert load_config({}).to_settings() == {}


def test_load_config_requires_mapping():
    with pytest.raises(ValidationError):
        load_config(["not", "a", "mapping"])


def test_load_config_rejects_bad_types():
    with pytest.raises(ValidationError):
        load_config({"store": {"default_limit": "many"}})
