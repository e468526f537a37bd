"""Configuration schema and loading for linkcap surveys."""

from linkcap.config.schema import (
    CandidateConfig,
    EstimatorConfig,
    SurveyConfig,
)
from linkcap.config.loader import (
    SurveyLoader,
    SurveyLoadError,
    format_validation_errors,
    load_survey,
)

__all__ = [
    "CandidateConfig",
    "EstimatorConfig",
    "SurveyConfig",
    "SurveyLoadError",
    "SurveyLoader",
    "format_validation_errors",
    "load_survey",
]
