"""Cultural fit evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import CandidateProfile, JobRequirement


@dataclass
class CulturalConfig:
    """Additive blend on top of a 0.5 base; the sum may exceed 1 before clamping."""

    base: float = 0.5
    work_style_weight: float = 0.3
    communication_weight: float = 0.3
    values_weight: float = 0.4
    trait_threshold: float = 0.7
    value_step: float = 0.1


# cultural value keyword -> behavioral trait that evidences it
_VALUE_TRAITS: dict[str, str] = {
    "teamwork": "teamwork",
    "leadership": "leadership",
    "innovation": "initiative",
    "learning": "learning_agility",
}


class CulturalFitEvaluator:
    method = "cultural"

    def __init__(self, *, config: CulturalConfig | None = None) -> None:
        self._config = config or CulturalConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        cfg = self._config
        work_style = self._work_style_alignment(profile, job)
        communication_fit = self._communication_fit(profile, job)
        values = self._values_alignment(profile, job)

        score = min(
            cfg.base
            + work_style * cfg.work_style_weight
            + communication_fit * cfg.communication_weight
            + values * cfg.values_weight,
            1.0,
        )
        return {
            "method": self.method,
            "scores": {
                self.method: score,
                "work_style_alignment": work_style,
                "communication_fit": communication_fit,
                "values_alignment": values,
            },
            "metadata": {
                "preferred_work_style": profile.personal_info.preferred_work_style,
                "required_work_style": job.work_style,
            },
        }

    @staticmethod
    def _work_style_alignment(profile: CandidateProfile, job: JobRequirement) -> float:
        preferred = profile.personal_info.preferred_work_style
        if not preferred:
            return 0.5
        if preferred == job.work_style:
            return 1.0
        if preferred == "flexible" or job.work_style == "mixed":
            return 0.8
        return 0.3

    @staticmethod
    def _communication_fit(profile: CandidateProfile, job: JobRequirement) -> float:
        style = profile.communication_style
        candidate_level = (style.clarity + style.articulation + style.professionalism) / 3
        if job.communication_level <= 0:
            return 1.0
        return min(candidate_level / job.communication_level, 1.0)

    def _values_alignment(self, profile: CandidateProfile, job: JobRequirement) -> float:
        alignment = 0.5
        traits = profile.behavioral_traits
        for value in job.cultural_values:
            lowered = value.lower()
            for keyword, trait in _VALUE_TRAITS.items():
                if keyword in lowered and getattr(traits, trait) > self._config.trait_threshold:
                    alignment += self._config.value_step
        return min(alignment, 1.0)
