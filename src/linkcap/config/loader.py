"""
YAML survey file loader with validation.

Loads survey.yaml files and validates them against the Pydantic schema.
"""

import logging
from pathlib import Path
from typing import Sequence, Union

import yaml
from pydantic import ValidationError

from linkcap.config.schema import SurveyConfig

logger = logging.getLogger(__name__)


class SurveyLoadError(Exception):
    """Error loading or parsing survey file."""

    pass


def format_validation_errors(errors: Sequence[dict]) -> str:
    """
    Format pydantic error dicts as one indented "loc: msg" line each.

    Args:
        errors: Output of ValidationError.errors()

    Returns:
        Multi-line message
    """
    lines = []
    for error in errors:
        loc = ".".join(str(x) for x in error["loc"])
        lines.append(f"  {loc}: {error['msg']}")
    return "\n".join(lines)


class SurveyLoader:
    """Load and validate surveys from YAML files."""

    def __init__(self, survey_path: Union[str, Path]):
        """
        Initialize loader with path to survey file.

        Args:
            survey_path: Path to survey.yaml file
        """
        self.survey_path = Path(survey_path)
        if not self.survey_path.exists():
            raise SurveyLoadError(f"Survey file not found: {survey_path}")
        if not self.survey_path.is_file():
            raise SurveyLoadError(f"Not a file: {survey_path}")

    def load(self) -> SurveyConfig:
        """
        Load and validate survey from YAML file.

        Relative MCS table paths are resolved against the survey's directory.

        Returns:
            Validated SurveyConfig object

        Raises:
            SurveyLoadError: If file cannot be parsed or validation fails
        """
        raw_data = self.load_raw()

        if not isinstance(raw_data, dict):
            raise SurveyLoadError("Survey file must contain a YAML mapping")

        try:
            survey = SurveyConfig.model_validate(raw_data)
        except ValidationError as e:
            error_msg = format_validation_errors(e.errors())
            raise SurveyLoadError(f"Survey validation failed:\n{error_msg}") from e

        table = survey.estimator.mcs_snr_table
        if table is not None and not table.is_absolute():
            survey.estimator.mcs_snr_table = self.survey_path.parent / table

        logger.info(
            f"Loaded survey '{survey.name}' with {len(survey.candidates)} candidates "
            f"from {self.survey_path}"
        )
        return survey

    def load_raw(self) -> dict:
        """
        Load raw YAML data without validation.

        Returns:
            Raw data from YAML file

        Raises:
            SurveyLoadError: If the file is not valid YAML
        """
        try:
            with open(self.survey_path) as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SurveyLoadError(f"YAML parse error: {e}") from e


def load_survey(path: Union[str, Path]) -> SurveyConfig:
    """
    Convenience function to load a survey from file.

    Args:
        path: Path to survey.yaml file

    Returns:
        Validated SurveyConfig object
    """
    loader = SurveyLoader(path)
    return loader.load()
