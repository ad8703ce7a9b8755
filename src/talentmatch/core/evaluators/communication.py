"""Communication quality evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...schemas import CandidateProfile, CommunicationAssessment, JobRequirement


@dataclass
class CommunicationConfig:
    """Sub-score weights and response modifiers."""

    weights: dict[str, float] = field(
        default_factory=lambda: {
            "clarity": 0.25,
            "articulation": 0.2,
            "structure": 0.2,
            "professionalism": 0.15,
            "technical_explanation": 0.2,
        }
    )
    too_short_modifier: float = 0.8
    too_long_modifier: float = 0.9
    grammar_threshold: float = 0.6
    grammar_modifier: float = 0.85


def score_communication(
    assessment: CommunicationAssessment,
    config: CommunicationConfig | None = None,
) -> tuple[float, float]:
    """Return ``(score, modifier)`` for a communication assessment."""
    cfg = config or CommunicationConfig()
    weighted = sum(getattr(assessment, name) * weight for name, weight in cfg.weights.items())

    modifier = 1.0
    if assessment.response_length == "too_short":
        modifier *= cfg.too_short_modifier
    elif assessment.response_length == "too_long":
        modifier *= cfg.too_long_modifier
    if assessment.grammar_quality < cfg.grammar_threshold:
        modifier *= cfg.grammar_modifier

    return min(weighted * modifier, 1.0), modifier


class CommunicationEvaluator:
    method = "communication"

    def __init__(self, *, config: CommunicationConfig | None = None) -> None:
        self._config = config or CommunicationConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        assessment = profile.communication_style
        score, modifier = score_communication(assessment, self._config)
        return {
            "method": self.method,
            "scores": {
                self.method: score,
                "communication_clarity": assessment.clarity,
                "communication_enthusiasm": assessment.enthusiasm,
            },
            "metadata": {
                "modifier": modifier,
                "response_length": assessment.response_length,
                "grammar_quality": assessment.grammar_quality,
            },
        }
