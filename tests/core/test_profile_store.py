from __future__ import annotations

import csv
import io
import json

import pendulum
import pytest

from talentmatch.core.scoring import ScoringEngine
from talentmatch.core.store import ProfileStore, StoreConfig, experience_range, score_range
from talentmatch.errors import InsufficientProfilesError, ProfileNotFoundError
from talentmatch.schemas import (
    CandidateProfile,
    DateRange,
    EducationRecord,
    ExperienceEntry,
    JobRequirement,
    NumericRange,
    PersonalInfo,
    ProficiencyLevel,
    ProfileSearchQuery,
    RequiredSkill,
    SkillCategory,
    SkillProfile,
)

FIXED_NOW = pendulum.datetime(2024, 5, 1, 12, 0, tz="UTC")


def build_profile(index: int = 0, **kwargs) -> CandidateProfile:
    defaults = {
        "id": f"profile_{index:03d}",
        "candidate_id": f"cand-{index:03d}",
        "personal_info": PersonalInfo(
            name=f"Candidate {index:03d}",
            current_company="Acme",
            location="Berlin, Germany",
            years_experience=4,
        ),
        "skills": [
            SkillProfile(
                name="Python",
                category=SkillCategory.PROGRAMMING_LANGUAGE,
                proficiency_level=ProficiencyLevel.ADVANCED,
                confidence=0.8,
            )
        ],
        "experiences": [
            ExperienceEntry(role="Engineer", company="Acme", duration="4 years", technologies=["Django"])
        ],
        "profile_completeness": 0.6,
        "last_updated": FIXED_NOW.subtract(minutes=index),
    }
    defaults.update(kwargs)
    return CandidateProfile(**defaults)


def build_job(**kwargs) -> JobRequirement:
    defaults = {
        "job_id": "JD-1",
        "required_skills": [RequiredSkill(name="Python", proficiency_level=ProficiencyLevel.ADVANCED)],
        "minimum_years": 3,
    }
    defaults.update(kwargs)
    return JobRequirement(**defaults)


def build_store(**kwargs) -> ProfileStore:
    kwargs.setdefault("now_provider", lambda: FIXED_NOW)
    return ProfileStore(**kwargs)


def score(profile: CandidateProfile):
    return ScoringEngine(now_provider=lambda: FIXED_NOW).score_candidate(profile, build_job())


def test_unfiltered_search_applies_default_limit():
    store = build_store()
    for index in range(60):
        store.store_profile(build_profile(index))

    result = store.search_profiles()

    assert result.total == 60
    assert len(result.profiles) == 50
    # default ordering is oldest update first
    assert result.profiles[0].id == "profile_059"


def test_pagination_and_name_sort():
    store = build_store()
    for index in range(5):
        store.store_profile(build_profile(index))

    query = ProfileSearchQuery(sort_by="name", sort_order="desc", limit=2, offset=1)
    result = store.search_profiles(query)

    assert result.total == 5
    assert [summary.id for summary in result.profiles] == ["profile_003", "profile_002"]


def test_zero_limit_returns_no_summaries_but_full_total():
    store = build_store()
    for index in range(3):
        store.store_profile(build_profile(index))

    result = store.search_profiles(ProfileSearchQuery(limit=0))

    assert result.total == 3
    assert result.profiles == []


def test_filters_combine_with_and_across_types_and_or_within():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(
        build_profile(
            2,
            skills=[SkillProfile(name="Go", category=SkillCategory.PROGRAMMING_LANGUAGE)],
            personal_info=PersonalInfo(current_company="Globex", location="Paris", years_experience=8),
        )
    )
    store.store_profile(
        build_profile(
            3,
            skills=[SkillProfile(name="Docker", category=SkillCategory.DEVOPS)],
            education=[EducationRecord(degree="MSc", field="Computer Science", institution="TU Munich")],
        )
    )

    either_skill = store.search_profiles(ProfileSearchQuery(skills=["python", "GO"]))
    assert {summary.id for summary in either_skill.profiles} == {"profile_001", "profile_002"}

    narrowed = store.search_profiles(
        ProfileSearchQuery(skills=["python", "go"], experience_years=NumericRange(min=5))
    )
    assert [summary.id for summary in narrowed.profiles] == ["profile_002"]

    by_location = store.search_profiles(ProfileSearchQuery(location=["berlin"]))
    assert {summary.id for summary in by_location.profiles} == {"profile_001", "profile_003"}

    by_company = store.search_profiles(ProfileSearchQuery(current_company=["globex"]))
    assert [summary.id for summary in by_company.profiles] == ["profile_002"]

    by_education = store.search_profiles(ProfileSearchQuery(education=["munich"]))
    assert [summary.id for summary in by_education.profiles] == ["profile_003"]

    by_category = store.search_profiles(ProfileSearchQuery(skill_categories=[SkillCategory.DEVOPS]))
    assert [summary.id for summary in by_category.profiles] == ["profile_003"]


def test_facets_cover_whole_store_regardless_of_filters():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(build_profile(2, personal_info=PersonalInfo(current_company="Globex", years_experience=12)))

    unfiltered = store.search_profiles()
    filtered = store.search_profiles(ProfileSearchQuery(current_company=["Globex"]))

    assert filtered.total == 1
    assert filtered.facets == unfiltered.facets
    companies = {facet.value: facet.count for facet in unfiltered.facets.companies}
    assert companies == {"Acme": 1, "Globex": 1}
    ranges = {facet.value: facet.count for facet in unfiltered.facets.experience_ranges}
    assert ranges == {"3-5 years": 1, "10+ years": 1}


def test_score_filters_skip_unscored_profiles():
    store = build_store()
    scored = build_profile(1)
    store.store_profile(scored, score(scored))
    store.store_profile(build_profile(2))

    result = store.search_profiles(ProfileSearchQuery(overall_score=NumericRange(min=0.99)))

    assert [summary.id for summary in result.profiles] == ["profile_002"]
    assert result.facets.score_ranges[0].count == 1


def test_text_search_and_date_range():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(build_profile(2, experiences=[ExperienceEntry(role="Designer", company="Initech")]))

    text = store.search_profiles(ProfileSearchQuery(search_text="Initech designer"))
    assert [summary.id for summary in text.profiles] == ["profile_002"]

    recent = store.search_profiles(
        ProfileSearchQuery(interview_date=DateRange.model_validate({"from": FIXED_NOW.subtract(minutes=1)}))
    )
    assert {summary.id for summary in recent.profiles} == {"profile_001"}


def test_sort_by_score_descending():
    store = build_store()
    weak = build_profile(1, skills=[])
    strong = build_profile(2)
    store.store_profile(weak, score(weak))
    store.store_profile(strong, score(strong))
    store.store_profile(build_profile(3))

    result = store.search_profiles(ProfileSearchQuery(sort_by="score", sort_order="desc"))

    assert [summary.id for summary in result.profiles] == ["profile_002", "profile_001", "profile_003"]
    assert result.profiles[0].overall_score is not None
    assert result.profiles[2].overall_score is None


def test_suggestions_from_vocabulary_and_fuzzy_text():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(build_profile(2))
    store.store_profile(build_profile(3, skills=[SkillProfile(name="Kubernetes")]))

    assert store.search_profiles().suggestions[:2] == ["skill:python", "skill:kubernetes"]
    assert "company:acme" in store.search_profiles().suggestions

    fuzzy = store.search_profiles(ProfileSearchQuery(search_text="pythn"))
    assert fuzzy.total == 0
    assert "skill:python" in fuzzy.suggestions


def test_missing_profiles_raise_not_found():
    store = build_store()
    profile = build_profile(1)

    with pytest.raises(ProfileNotFoundError):
        store.update_profile("profile_missing", profile_completeness=0.9)
    with pytest.raises(ProfileNotFoundError):
        store.delete_profile("profile_missing")
    with pytest.raises(ProfileNotFoundError):
        store.get_scoring_result("profile_missing")
    with pytest.raises(ProfileNotFoundError):
        store.store_scoring_result("profile_missing", score(profile))
    with pytest.raises(ProfileNotFoundError):
        store.require_profile("profile_missing")
    assert store.get_profile("profile_missing") is None


def test_store_keeps_private_copies():
    store = build_store()
    profile = build_profile(1)
    store.store_profile(profile)

    profile.skills.append(SkillProfile(name="Rust"))
    fetched = store.get_profile("profile_001")
    fetched.personal_info.name = "Changed"

    stored = store.get_profile("profile_001")
    assert [skill.name for skill in stored.skills] == ["Python"]
    assert stored.personal_info.name == "Candidate 001"


def test_update_profile_stores_copies_of_changed_values():
    store = build_store()
    store.store_profile(build_profile(1))
    skill = SkillProfile(name="Go", proficiency_level=ProficiencyLevel.EXPERT, confidence=0.9)
    info = PersonalInfo(name="Alice", location="Paris")

    store.update_profile("profile_001", skills=[skill], personal_info=info)
    skill.confidence = 0.1
    info.name = "Bob"

    stored = store.get_profile("profile_001")
    assert stored.skills[0].confidence == 0.9
    assert stored.personal_info.name == "Alice"


def test_update_profile_refreshes_timestamp_and_indexes():
    store = build_store()
    store.store_profile(build_profile(1, last_updated=FIXED_NOW.subtract(days=3)))

    updated = store.update_profile("profile_001", skills=[SkillProfile(name="Rust")])

    assert updated.last_updated == FIXED_NOW
    assert store.vocabulary("skills") == ["rust"]
    assert store.profiles_for_term("skills", "Rust") == {"profile_001"}
    with pytest.raises(ValueError):
        store.update_profile("profile_001", id="profile_other")


def test_delete_prunes_indexes_and_rebuild_is_consistent():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(build_profile(2, skills=[SkillProfile(name="Rust")]))

    store.delete_profile("profile_002")

    assert "rust" not in store.vocabulary("skills")
    assert store.profiles_for_term("skills", "rust") == set()
    assert "profile_002" not in store
    before = {dimension: store.vocabulary(dimension) for dimension in ("skills", "companies", "technologies")}
    store.rebuild_indexes()
    after = {dimension: store.vocabulary(dimension) for dimension in ("skills", "companies", "technologies")}
    assert before == after
    assert after["technologies"] == ["django"]


def test_compare_requires_two_resolved_profiles():
    store = build_store()
    store.store_profile(build_profile(1))

    with pytest.raises(InsufficientProfilesError) as excinfo:
        store.compare_profiles(["profile_001", "profile_missing"])

    assert excinfo.value.resolved == 1
    assert excinfo.value.requested == ["profile_001", "profile_missing"]


def test_compare_ranks_scored_profiles():
    store = build_store()
    weak = build_profile(1, skills=[])
    strong = build_profile(2)
    store.store_profile(weak, score(weak))
    store.store_profile(strong, score(strong))

    result = store.compare_profiles(["profile_001", "profile_002"])

    assert [entry.profile_id for entry in result.summary.rankings] == ["profile_002", "profile_001"]
    assert result.summary.top_candidate == "profile_002"


def react_profile(index: int, level: ProficiencyLevel, confidence: float, years: float) -> CandidateProfile:
    return build_profile(
        index,
        personal_info=PersonalInfo(name=f"Candidate {index:03d}", years_experience=years),
        skills=[
            SkillProfile(
                name="React",
                category=SkillCategory.FRAMEWORK,
                proficiency_level=level,
                confidence=confidence,
            )
        ],
        experiences=[],
    )


def test_compare_prefers_stronger_react_candidate():
    store = build_store()
    engine = ScoringEngine(now_provider=lambda: FIXED_NOW)
    job = build_job(
        required_skills=[RequiredSkill(name="React", proficiency_level=ProficiencyLevel.ADVANCED)],
        minimum_years=3,
    )
    strong = react_profile(1, ProficiencyLevel.ADVANCED, 0.9, 5)
    weak = react_profile(2, ProficiencyLevel.BEGINNER, 0.6, 1)
    for profile in (weak, strong):
        store.store_profile(profile, engine.score_candidate(profile, job))

    result = store.compare_profiles([strong.id, weak.id])

    assert result.summary.top_candidate == strong.id
    assert result.comparison.experience.total_years == {strong.id: 5, weak.id: 1}
    assert result.comparison.scores.overall[strong.id] > result.comparison.scores.overall[weak.id]


def test_json_export_round_trips():
    store = build_store()
    store.store_profile(build_profile(1))
    store.store_profile(build_profile(2))

    exported = json.loads(store.export_profiles("json"))

    restored = [CandidateProfile.model_validate(item) for item in exported]
    assert restored == store.list_profiles()


def test_csv_export_has_header_row():
    store = build_store()
    store.store_profile(build_profile(1))

    rows = list(csv.reader(io.StringIO(store.export_profiles("csv"))))

    assert rows[0] == [
        "id",
        "candidate_id",
        "name",
        "current_title",
        "years_experience",
        "profile_completeness",
        "overall_score",
        "top_skills",
    ]
    assert rows[1][:3] == ["profile_001", "cand-001", "Candidate 001"]
    assert rows[1][-2:] == ["", "Python"]
    with pytest.raises(ValueError):
        store.export_profiles("xml")  # type: ignore[arg-type]


def test_csv_export_selects_ids_and_includes_scores():
    store = build_store()
    scored = build_profile(1)
    store.store_profile(scored, score(scored))
    store.store_profile(build_profile(2))

    rows = list(csv.reader(io.StringIO(store.export_profiles("csv", ["profile_001", "missing"]))))

    assert len(rows) == 2
    assert rows[1][0] == "profile_001"
    assert float(rows[1][6]) == pytest.approx(store.get_scoring_result("profile_001").overall_score)


def test_cleanup_removes_stale_profiles():
    store = build_store(config=StoreConfig(cleanup_days=30))
    store.store_profile(build_profile(1, last_updated=FIXED_NOW.subtract(days=45)))
    store.store_profile(build_profile(2, last_updated=FIXED_NOW.subtract(days=5)))

    removed = store.cleanup()

    assert removed == 1
    assert len(store) == 1
    assert "profile_002" in store
    assert store.cleanup(older_than=FIXED_NOW) == 1
    assert len(store) == 0


def test_storage_stats():
    store = build_store()
    store.store_profile(build_profile(1, profile_completeness=0.4))
    store.store_profile(build_profile(2, profile_completeness=0.8))

    stats = store.storage_stats()

    assert stats["total_profiles"] == 2
    assert stats["total_scores"] == 0
    assert stats["average_completeness"] == pytest.approx(0.6)
    assert stats["top_skills"] == ["Python"]
    assert stats["top_companies"] == ["Acme"]


@pytest.mark.parametrize(
    ("years", "label"),
    [(0.5, "0-1 years"), (1, "1-3 years"), (4, "3-5 years"), (9.9, "5-10 years"), (10, "10+ years")],
)
def test_experience_range(years: float, label: str):
    assert experience_range(years) == label


@pytest.mark.parametrize(
    ("value", "label"),
    [(0.0, "0-9%"), (0.42, "40-49%"), (0.9, "90-100%"), (1.0, "90-100%")],
)
def test_score_range(value: float, label: str):
    assert score_range(value) == label
