from __future__ import annotations

import pendulum
import pytest

from talentmatch.core.scoring import (
    ScoringEngine,
    confidence_factors,
    generate_score_report,
    score_consistency,
    scoring_confidence,
    weights_for_role,
)
from talentmatch.schemas import (
    CandidateProfile,
    ExperienceEntry,
    JobRequirement,
    ProficiencyLevel,
    ProfileFlag,
    RequiredSkill,
    ScoringWeights,
    SkillProfile,
)

FIXED_NOW = pendulum.datetime(2024, 5, 1, 12, 0, tz="UTC")


class StubTechnicalEvaluator:
    method = "technical"

    def __init__(self, score: float) -> None:
        self.score = score

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict:
        return {"method": self.method, "scores": {"technical": self.score, "skill_match": 0.4}}


class MethodlessEvaluator:
    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict:
        return {"scores": {"technical": 1.0}}


def build_profile(**kwargs) -> CandidateProfile:
    defaults = {
        "candidate_id": "cand-1",
        "skills": [
            SkillProfile(name="React", proficiency_level=ProficiencyLevel.EXPERT, confidence=0.9),
        ],
        "experiences": [
            ExperienceEntry(role="Frontend Engineer", company="Acme", duration="5 years", relevance_score=0.9),
        ],
        "profile_completeness": 0.8,
        "confidence": 0.9,
        "last_updated": FIXED_NOW,
    }
    defaults.update(kwargs)
    return CandidateProfile(**defaults)


def build_job(**kwargs) -> JobRequirement:
    defaults = {
        "job_id": "JD-1",
        "required_skills": [
            RequiredSkill(name="React", category="framework", proficiency_level=ProficiencyLevel.ADVANCED),
        ],
        "experience_level": ProficiencyLevel.ADVANCED,
        "minimum_years": 3,
    }
    defaults.update(kwargs)
    return JobRequirement(**defaults)


def build_engine(**kwargs) -> ScoringEngine:
    kwargs.setdefault("now_provider", lambda: FIXED_NOW)
    return ScoringEngine(**kwargs)


def test_stronger_skill_match_scores_higher_technical():
    engine = build_engine()
    strong = build_profile()
    weak = build_profile(
        candidate_id="cand-2",
        skills=[SkillProfile(name="React", proficiency_level=ProficiencyLevel.BEGINNER, confidence=0.5)],
    )

    strong_result = engine.score_candidate(strong, build_job())
    weak_result = engine.score_candidate(weak, build_job())

    assert strong_result.category_scores.technical > weak_result.category_scores.technical
    assert strong_result.overall_score > weak_result.overall_score
    assert strong_result.detailed_scores.skill_relevance == pytest.approx(0.9)


def test_scoring_is_deterministic_with_fixed_clock():
    engine = build_engine()
    profile = build_profile()
    job = build_job()

    first = engine.score_candidate(profile, job)
    second = engine.score_candidate(profile, job)

    assert first == second


def test_only_scoring_date_follows_the_wall_clock():
    engine = ScoringEngine()
    profile = build_profile()
    job = build_job()

    first = engine.score_candidate(profile, job)
    second = engine.score_candidate(profile, job)

    untimed = {"metadata": {"scoring_date"}}
    assert first.model_dump(exclude=untimed) == second.model_dump(exclude=untimed)
    assert first.metadata.scoring_date == FIXED_NOW


def test_overall_score_is_weighted_sum_of_categories():
    result = build_engine().score_candidate(build_profile(), build_job())

    weights = result.metadata.weights
    expected = sum(
        getattr(result.category_scores, name) * getattr(weights, name)
        for name in ("technical", "communication", "experience", "cultural", "behavioral", "education")
    )
    assert result.overall_score == pytest.approx(expected)
    assert set(result.metadata.evaluations) == {
        "technical",
        "communication",
        "experience",
        "cultural",
        "behavioral",
        "education",
    }


def test_custom_weight_mapping_merges_over_defaults():
    result = build_engine().score_candidate(build_profile(), build_job(), {"technical": 1.0})

    assert result.metadata.weights.technical == 1.0
    assert result.metadata.weights.communication == pytest.approx(0.20)


def test_custom_weight_model_replaces_defaults():
    weights = ScoringWeights(technical=1.0, communication=0, experience=0, cultural=0, behavioral=0, education=0)

    result = build_engine().score_candidate(build_profile(), build_job(), weights)

    assert result.overall_score == pytest.approx(result.category_scores.technical)


def test_engine_weights_can_be_normalized():
    engine = build_engine(weights={"technical": 2.0}, normalize_weights=True)

    result = engine.score_candidate(build_profile(), build_job())

    assert result.metadata.weights.total() == pytest.approx(1.0)
    assert engine.weights.technical == 2.0


def test_missing_categories_score_zero_with_partial_evaluators():
    engine = build_engine(evaluators=[StubTechnicalEvaluator(1.0)])

    result = engine.score_candidate(build_profile(), build_job())

    assert result.category_scores.technical == 1.0
    assert result.category_scores.communication == 0.0
    assert result.detailed_scores.skill_relevance == pytest.approx(0.4)
    assert result.overall_score == pytest.approx(0.35)


def test_evaluator_result_requires_method():
    engine = build_engine(evaluators=[MethodlessEvaluator()])

    with pytest.raises(ValueError):
        engine.score_candidate(build_profile(), build_job())


def test_expert_claims_need_verification_when_confidence_low():
    profile = build_profile(confidence=0.5)

    result = build_engine(evaluators=[StubTechnicalEvaluator(0.5)]).score_candidate(profile, build_job())

    types = [(item.type, item.category) for item in result.recommendations]
    assert ("verification", "Technical") in types
    assert ("improvement", "Technical") in types
    assert len(result.recommendations) <= 8
    assert len(result.strengths) <= 5
    assert len(result.weaknesses) <= 5


def test_high_technical_score_is_a_strength():
    result = build_engine(evaluators=[StubTechnicalEvaluator(0.95)]).score_candidate(
        build_profile(), build_job()
    )

    assert "Excellent technical capabilities" in result.strengths
    assert any(item.description == "Strong technical skills alignment" for item in result.recommendations)
    assert "Needs improvement in communication" in result.weaknesses


def test_scoring_confidence_penalizes_serious_flags():
    profile = build_profile(profile_completeness=1.0, confidence=1.0)
    flagged = build_profile(
        profile_completeness=1.0,
        confidence=1.0,
        flags=[ProfileFlag(type="red_flag", description="Conflicting dates", severity="high")],
    )

    assert scoring_confidence(profile) == pytest.approx(0.75)
    assert scoring_confidence(flagged) == pytest.approx(0.6)


def test_consistency_penalty_by_severity():
    profile = build_profile(
        flags=[
            ProfileFlag(type="inconsistency", description="a", severity="high"),
            ProfileFlag(type="inconsistency", description="b", severity="low"),
            ProfileFlag(type="concern", description="c", severity="high"),
        ]
    )

    assert score_consistency(profile) == pytest.approx(0.6)


def test_confidence_factors_report_missing_data():
    profile = CandidateProfile(candidate_id="empty")

    factors = confidence_factors(profile, build_job(required_skills=[]))

    assert "Limited profile information" in factors
    assert "No skills recorded; technical scores degraded" in factors
    assert "No work experience recorded; experience scored 0" in factors
    assert "No education records; education scored neutral" in factors
    assert "No required skills specified; skill match not discriminating" in factors


def test_weight_presets():
    assert weights_for_role("technical").technical == 0.50
    assert weights_for_role("leadership").education == 0.0
    assert weights_for_role("unknown") == ScoringWeights()


def test_generate_score_report_sections():
    result = build_engine().score_candidate(build_profile(), build_job())

    report = generate_score_report(result)

    assert report.startswith("CANDIDATE SCORING REPORT\n")
    assert f"Overall Score: {result.overall_score * 100:.1f}%" in report
    assert "- Cultural Fit:" in report
    for heading in ("STRENGTHS:", "AREAS FOR IMPROVEMENT:", "RECOMMENDATIONS:", "CONFIDENCE FACTORS:"):
        assert heading in report
