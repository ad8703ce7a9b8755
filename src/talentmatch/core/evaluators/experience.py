"""Work experience evaluator."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Sequence

import pendulum

from ...schemas import CandidateProfile, ExperienceEntry, JobRequirement

_DURATION_PATTERN = re.compile(r"(\d+)")


@dataclass
class ExperienceConfig:
    years_weight: float = 0.4
    relevance_weight: float = 0.4
    depth_weight: float = 0.2
    headroom: float = 1.5


def experience_years(experience: ExperienceEntry) -> int:
    """Years for one entry: the leading integer of ``duration``, else the date span."""
    if experience.duration:
        match = _DURATION_PATTERN.search(experience.duration)
        if match:
            return int(match.group(1))
    if experience.start_date and experience.end_date:
        start = pendulum.instance(experience.start_date)
        end = pendulum.instance(experience.end_date)
        if end >= start:
            return end.diff(start).in_years()
    return 0


def total_experience_years(experiences: Sequence[ExperienceEntry]) -> int:
    return sum(experience_years(exp) for exp in experiences)


def score_experience_years(total_years: float, minimum_years: float, *, headroom: float = 1.5) -> float:
    if minimum_years <= 0:
        return 1.0
    if total_years >= minimum_years:
        return min(1.0, total_years / (minimum_years * headroom))
    return total_years / minimum_years


def score_experience_relevance(experiences: Sequence[ExperienceEntry]) -> float:
    if not experiences:
        return 0.0
    return sum(exp.relevance_score for exp in experiences) / len(experiences)


def score_experience_depth(experiences: Sequence[ExperienceEntry]) -> float:
    if not experiences:
        return 0.0
    depths: list[float] = []
    for exp in experiences:
        depth = 0.5
        if len(exp.responsibilities) > 3:
            depth += 0.1
        if len(exp.achievements) > 2:
            depth += 0.2
        if exp.team_size and exp.team_size > 3:
            depth += 0.1
        if exp.reporting_level:
            depth += 0.1
        depths.append(min(depth, 1.0))
    return sum(depths) / len(depths)


class ExperienceEvaluator:
    """Evaluate tenure adequacy, relevance and depth of work history."""

    method = "experience"

    def __init__(self, *, config: ExperienceConfig | None = None) -> None:
        self._config = config or ExperienceConfig()

    def evaluate(self, profile: CandidateProfile, job: JobRequirement) -> dict[str, Any]:
        experiences = profile.experiences
        total_years = total_experience_years(experiences)
        relevance = score_experience_relevance(experiences)
        depth = score_experience_depth(experiences)

        if experiences:
            years_score = score_experience_years(
                total_years, job.minimum_years, headroom=self._config.headroom
            )
            score = (
                years_score * self._config.years_weight
                + relevance * self._config.relevance_weight
                + depth * self._config.depth_weight
            )
        else:
            years_score = 0.0
            score = 0.0

        return {
            "method": self.method,
            "scores": {
                self.method: score,
                "years_adequacy": years_score,
                "experience_relevance": relevance,
                "experience_depth": depth,
            },
            "metadata": {
                "total_years": total_years,
                "minimum_years": job.minimum_years,
                "entries": len(experiences),
            },
        }
