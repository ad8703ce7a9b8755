"""Education evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import CandidateProfile, JobRequirement


@dataclass
class EducationConfig:
    neutral_score: float = 0.5
    relevant_bonus: float = 0.2
    technical_bonus: float = 0.2
    honors_bonus: float = 0.1
    technical_fields: tuple[str, ...] = (
        "computer",
        "software",
        "engineering",
        "information technology",
        "data science",
        "mathematic",
    )


class EducationEvaluator:
    method = "education"

    def __init__(self, *, config: EducationConfig | None = None) -> None:
        self._config = config or EducationConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        cfg = self._config
        records = profile.education
        if not records:
            return {
                "method": self.method,
                "scores": {self.method: cfg.neutral_score},
                "metadata": {"status": "no_records"},
            }

        score = cfg.neutral_score
        technical_degrees = 0
        for record in records:
            if record.relevant:
                score += cfg.relevant_bonus
            degree_text = f"{record.degree} {record.field}".lower()
            if any(term in degree_text for term in cfg.technical_fields):
                score += cfg.technical_bonus
                technical_degrees += 1
            if record.honors:
                score += cfg.honors_bonus

        return {
            "method": self.method,
            "scores": {self.method: min(score, 1.0)},
            "metadata": {
                "status": "scored",
                "records": len(records),
                "technical_degrees": technical_degrees,
            },
        }
