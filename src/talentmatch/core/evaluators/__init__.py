"""Category evaluators for the scoring engine."""

from .behavioral import BehavioralConfig, BehavioralEvaluator
from .communication import CommunicationConfig, CommunicationEvaluator
from .cultural import CulturalConfig, CulturalFitEvaluator
from .education import EducationConfig, EducationEvaluator
from .experience import ExperienceConfig, ExperienceEvaluator
from .technical import TechnicalConfig, TechnicalEvaluator, proficiency_match


def default_evaluators() -> list:
    """One evaluator per scoring category, in category order."""
    return [
        TechnicalEvaluator(),
        CommunicationEvaluator(),
        ExperienceEvaluator(),
        CulturalFitEvaluator(),
        BehavioralEvaluator(),
        EducationEvaluator(),
    ]


__all__ = [
    "BehavioralConfig",
    "BehavioralEvaluator",
    "CommunicationConfig",
    "CommunicationEvaluator",
    "CulturalConfig",
    "CulturalFitEvaluator",
    "EducationConfig",
    "EducationEvaluator",
    "ExperienceConfig",
    "ExperienceEvaluator",
    "TechnicalConfig",
    "TechnicalEvaluator",
    "default_evaluators",
    "proficiency_match",
]
