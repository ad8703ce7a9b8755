"""Technical fit evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from ...schemas import (
    CandidateProfile,
    ExperienceEntry,
    JobRequirement,
    ProficiencyLevel,
    RequiredSkill,
    SkillProfile,
    TechnicalAssessment,
)

LEVEL_SCORES: dict[ProficiencyLevel, float] = {
    ProficiencyLevel.EXPERT: 1.0,
    ProficiencyLevel.ADVANCED: 0.8,
    ProficiencyLevel.INTERMEDIATE: 0.6,
    ProficiencyLevel.BEGINNER: 0.3,
}


@dataclass
class TechnicalConfig:
    """Blend weights and thresholds for technical scoring."""

    skill_match_weight: float = 0.4
    proficiency_weight: float = 0.3
    experience_weight: float = 0.2
    competency_weight: float = 0.1
    relevance_threshold: float = 0.6
    irrelevant_floor: float = 0.2
    nice_to_have_credit: float = 0.5
    gap_penalty: float = 0.25


def proficiency_match(
    candidate_level: ProficiencyLevel,
    required_level: ProficiencyLevel,
    *,
    gap_penalty: float = 0.25,
) -> float:
    """1.0 when the candidate meets the level, otherwise lose ``gap_penalty`` per level."""
    candidate = ProficiencyLevel(candidate_level)
    required = ProficiencyLevel(required_level)
    if candidate.rank >= required.rank:
        return 1.0
    return max(0.0, 1.0 - (required.rank - candidate.rank) * gap_penalty)


def find_matching_skill(
    skills: Sequence[SkillProfile], required_name: str
) -> SkillProfile | None:
    """Exact case-insensitive name first, then the first two-way substring hit."""
    needle = required_name.lower()
    partial = None
    for skill in skills:
        name = skill.name.lower()
        if name == needle:
            return skill
        if partial is None and (needle in name or name in needle):
            partial = skill
    return partial


def score_skill_match(
    skills: Sequence[SkillProfile],
    required: Sequence[RequiredSkill],
    *,
    nice_to_have_credit: float = 0.5,
    gap_penalty: float = 0.25,
) -> float:
    if not required:
        return 1.0

    total_weight = 0.0
    matched_weight = 0.0
    for requirement in required:
        total_weight += requirement.weight
        match = find_matching_skill(skills, requirement.name)
        if match is not None:
            fit = proficiency_match(
                match.proficiency_level,
                requirement.proficiency_level,
                gap_penalty=gap_penalty,
            )
            matched_weight += requirement.weight * fit * match.confidence
        elif requirement.importance == "nice_to_have":
            matched_weight += requirement.weight * nice_to_have_credit

    if total_weight <= 0:
        return 1.0
    return min(matched_weight / total_weight, 1.0)


def score_skill_proficiency(skills: Sequence[SkillProfile]) -> float:
    if not skills:
        return 0.0
    weighted = [LEVEL_SCORES.get(skill.proficiency_level, 0.5) * skill.confidence for skill in skills]
    return sum(weighted) / len(weighted)


def assess_technical_depth(experience: ExperienceEntry) -> float:
    depth = 0.5
    if len(experience.technologies) > 3:
        depth += 0.2
    achievements = [achievement.lower() for achievement in experience.achievements]
    for marker in ("architecture", "performance", "scale"):
        if any(marker in achievement for achievement in achievements):
            depth += 0.1
    if experience.team_size and experience.team_size > 5:
        depth += 0.1
    return min(depth, 1.0)


def score_technical_competency(competency: TechnicalAssessment) -> float:
    values = [
        competency.architectural_thinking,
        competency.problem_solving_approach,
        competency.code_quality,
        competency.system_design,
        competency.debugging,
        competency.testing,
    ]
    valid = [value for value in values if value > 0]
    if not valid:
        return 0.5
    return sum(valid) / len(valid)


class TechnicalEvaluator:
    """Evaluate skill coverage, proficiency and technical depth."""

    method = "technical"

    def __init__(self, *, config: TechnicalConfig | None = None) -> None:
        self._config = config or TechnicalConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        cfg = self._config
        skill_match = score_skill_match(
            profile.skills,
            job.required_skills,
            nice_to_have_credit=cfg.nice_to_have_credit,
            gap_penalty=cfg.gap_penalty,
        )
        skill_proficiency = score_skill_proficiency(profile.skills)
        experience, relevant_count = self._score_experience(profile.experiences)
        competency = score_technical_competency(profile.technical_competency)

        technical = (
            skill_match * cfg.skill_match_weight
            + skill_proficiency * cfg.proficiency_weight
            + experience * cfg.experience_weight
            + competency * cfg.competency_weight
        )

        return {
            "method": self.method,
            "scores": {
                self.method: technical,
                "skill_match": skill_match,
                "skill_proficiency": skill_proficiency,
                "technical_experience": experience,
                "technical_competency": competency,
            },
            "metadata": {
                "matched_skills": self._matched_names(profile.skills, job.required_skills),
                "relevant_experiences": relevant_count,
            },
        }

    def _score_experience(self, experiences: Sequence[ExperienceEntry]) -> tuple[float, int]:
        if not experiences:
            return 0.0, 0
        relevant = [
            exp for exp in experiences if exp.relevance_score > self._config.relevance_threshold
        ]
        if not relevant:
            return self._config.irrelevant_floor, 0
        scores = [
            exp.relevance_score * 0.4 + exp.confidence * 0.3 + assess_technical_depth(exp) * 0.3
            for exp in relevant
        ]
        return sum(scores) / len(scores), len(relevant)

    @staticmethod
    def _matched_names(
        skills: Sequence[SkillProfile], required: Iterable[RequiredSkill]
    ) -> dict[str, str | None]:
        matched: dict[str, str | None] = {}
        for requirement in required:
            match = find_matching_skill(skills, requirement.name)
            matched[requirement.name] = match.name if match else None
        return matched
