"""Behavioral trait evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import CandidateProfile, JobRequirement


@dataclass
class BehavioralConfig:
    leadership_weight: float = 0.3
    problem_solving_weight: float = 0.2
    communication_weight: float = 0.15
    adaptability_weight: float = 0.15
    initiative_weight: float = 0.1


class BehavioralEvaluator:
    """Mean of importance-weighted trait scores.

    Leadership only counts when the job requires it; teamwork is weighted by
    the job's teamwork importance.
    """

    method = "behavioral"

    def __init__(self, *, config: BehavioralConfig | None = None) -> None:
        self._config = config or BehavioralConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        cfg = self._config
        traits = profile.behavioral_traits

        weighted: dict[str, float] = {}
        if job.leadership_required:
            weighted["leadership"] = traits.leadership * cfg.leadership_weight
        weighted["teamwork"] = traits.teamwork * job.teamwork_importance
        weighted["problem_solving"] = traits.problem_solving * cfg.problem_solving_weight
        weighted["communication"] = traits.communication * cfg.communication_weight
        weighted["adaptability"] = traits.adaptability * cfg.adaptability_weight
        weighted["initiative"] = traits.initiative * cfg.initiative_weight

        score = sum(weighted.values()) / len(weighted)
        return {
            "method": self.method,
            "scores": {
                self.method: score,
                "learning_agility": traits.learning_agility,
                "problem_solving": traits.problem_solving,
                "leadership": traits.leadership,
                "teamwork": traits.teamwork,
            },
            "metadata": {"weighted_traits": weighted},
        }
