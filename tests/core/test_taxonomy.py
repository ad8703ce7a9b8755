from __future__ import annotations

from pathlib import Path

import pytest

from talentmatch.core.taxonomy import SkillTaxonomy
from talentmatch.schemas import ProficiencyLevel, SkillCategory


def test_bundled_taxonomy_loads_definitions():
    taxonomy = SkillTaxonomy.load()

    assert len(taxonomy) >= 10
    assert "Python" in taxonomy
    python = taxonomy.get("py")
    assert python is not None
    assert python.name == "Python"
    assert python.category == SkillCategory.PROGRAMMING_LANGUAGE
    assert python.proficiency_indicators.items()[0][0] == ProficiencyLevel.BEGINNER


def test_shared_alias_resolves_to_later_definition():
    taxonomy = SkillTaxonomy.load()

    definition = taxonomy.get("node.js")
    assert definition is not None
    assert definition.name == "Node.js"


def test_category_for_falls_back_to_known_names_then_tool():
    taxonomy = SkillTaxonomy.from_records(
        [{"name": "Terraform", "category": "devops", "aliases": ["tf"]}]
    )

    assert taxonomy.category_for("TF") == SkillCategory.DEVOPS
    assert taxonomy.category_for("mysql") == SkillCategory.DATABASE
    assert taxonomy.category_for("Jira") == SkillCategory.TOOL


def test_definitions_are_unique_per_name():
    taxonomy = SkillTaxonomy.load()

    names = [definition.name for definition in taxonomy.definitions()]
    assert len(names) == len(set(names))


def test_load_rejects_yaml_without_skills(tmp_path: Path):
    path = tmp_path / "taxonomy.yaml"
    path.write_text("skills: nope\n", encoding="utf-8")

    with pytest.raises(ValueError):
        SkillTaxonomy.load(path)


def test_load_custom_yaml(tmp_path: Path):
    path = tmp_path / "taxonomy.yaml"
    path.write_text(
        "skills:\n  - name: Rust\n    aliases: [rustlang]\n    category: programming_language\n",
        encoding="utf-8",
    )

    taxonomy = SkillTaxonomy.load(path)

    assert len(taxonomy) == 1
    assert taxonomy.get("RUSTLANG").name == "Rust"
