from __future__ import annotations

import pytest

from talentmatch.core.comparison import ProfileComparator, profile_years, relevant_years
from talentmatch.errors import InsufficientProfilesError
from talentmatch.schemas import (
    CandidateProfile,
    CategoryScores,
    DetailedScores,
    ExperienceEntry,
    PersonalInfo,
    ProficiencyLevel,
    ScoringMetadata,
    ScoringResult,
    ScoringWeights,
    SkillProfile,
)


def build_profile(profile_id: str, **kwargs) -> CandidateProfile:
    defaults = {
        "id": profile_id,
        "candidate_id": f"cand-{profile_id}",
        "personal_info": PersonalInfo(name=profile_id.upper()),
        "skills": [SkillProfile(name="React", proficiency_level=ProficiencyLevel.ADVANCED)],
        "experiences": [
            ExperienceEntry(role="Engineer", company="Acme", duration="3 years", relevance_score=0.8)
        ],
    }
    defaults.update(kwargs)
    return CandidateProfile(**defaults)


def build_result(overall: float, technical: float = 0.5) -> ScoringResult:
    return ScoringResult(
        overall_score=overall,
        category_scores=CategoryScores(technical=technical),
        detailed_scores=DetailedScores(),
        confidence=0.5,
        metadata=ScoringMetadata(
            data_completeness=0.5,
            scoring_date="2024-05-01T00:00:00Z",
            version="test",
            weights=ScoringWeights(),
        ),
    )


def test_single_profile_is_rejected():
    with pytest.raises(InsufficientProfilesError) as excinfo:
        ProfileComparator().compare([build_profile("a")])

    assert excinfo.value.requested == ["a"]
    assert excinfo.value.resolved == 1


def test_rankings_follow_overall_score():
    profiles = [build_profile("a"), build_profile("b")]

    result = ProfileComparator().compare(profiles, {"a": build_result(0.5), "b": build_result(0.6)})

    rankings = result.summary.rankings
    assert [(entry.profile_id, entry.rank) for entry in rankings] == [("b", 1), ("a", 2)]
    assert rankings[0].candidate_id == "cand-b"
    assert result.summary.top_candidate == "b"
    assert result.recommendations[0].type == "ranking"
    assert result.recommendations[0].profile_ids == ["b", "a"]


def test_unscored_profiles_rank_last_and_ties_keep_input_order():
    profiles = [build_profile("a"), build_profile("b"), build_profile("c")]

    result = ProfileComparator().compare(profiles, {"c": build_result(0.4)})

    assert [entry.profile_id for entry in result.summary.rankings] == ["c", "a", "b"]
    assert result.comparison.scores.overall == {"c": 0.4}


def test_standout_and_technical_recommendations():
    profiles = [build_profile("a"), build_profile("b")]

    result = ProfileComparator().compare(
        profiles, {"a": build_result(0.9, technical=0.85), "b": build_result(0.5)}
    )

    kinds = [(item.type, item.profile_ids) for item in result.recommendations]
    assert ("strength", ["a"]) in kinds
    assert len([item for item in result.recommendations if item.type == "strength"]) == 2
    assert "significantly outperforms" in result.recommendations[1].description
    assert "90.0%" in result.recommendations[1].description


def test_no_standout_for_close_scores():
    profiles = [build_profile("a"), build_profile("b")]

    result = ProfileComparator().compare(profiles, {"a": build_result(0.6), "b": build_result(0.5)})

    assert [item.type for item in result.recommendations] == ["ranking"]


def test_differentiators_and_similarities():
    profiles = [
        build_profile(
            "a",
            skills=[SkillProfile(name="React", proficiency_level=ProficiencyLevel.EXPERT)],
            personal_info=PersonalInfo(years_experience=10),
        ),
        build_profile("b", personal_info=PersonalInfo(years_experience=2)),
    ]

    result = ProfileComparator().compare(profiles)

    assert result.summary.key_differentiators == [
        "React proficiency levels vary significantly",
        "Experience ranges from 2 to 10 years",
    ]
    assert result.summary.similarities_found == ["Shared experience at: Acme"]
    react = result.comparison.skills[0]
    assert [holder.profile_id for holder in react.candidates] == ["a", "b"]


def test_no_similarities_without_common_company():
    profiles = [
        build_profile("a"),
        build_profile("b", experiences=[ExperienceEntry(company="Globex", duration="1 year")]),
    ]

    result = ProfileComparator().compare(profiles)

    assert result.summary.similarities_found == []


def test_experience_year_helpers():
    profile = build_profile(
        "a",
        personal_info=PersonalInfo(),
        experiences=[
            ExperienceEntry(company="Acme", duration="3 years", relevance_score=0.8),
            ExperienceEntry(company="Globex", duration="2 years", relevance_score=0.3),
        ],
    )

    assert relevant_years(profile) == 3
    assert profile_years(profile) == 5
    stated = profile.model_copy(update={"personal_info": PersonalInfo(years_experience=7)})
    assert profile_years(stated) == 7
