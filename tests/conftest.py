"""Pytest configuration and fixtures for linkcap tests."""

import pytest
from pathlib import Path

from linkcap.capacity.estimator import CapacityEstimator
from linkcap.channel.noise import StaticNoiseModel
from linkcap.channel.snr import SNRCalculator


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def surveys_dir(fixtures_dir: Path) -> Path:
    """Return the directory of test survey files."""
    return fixtures_dir / "surveys"


@pytest.fixture
def office_survey_path(surveys_dir: Path) -> Path:
    """Return path to the sample office survey."""
    return surveys_dir / "office.yaml"


@pytest.fixture
def snr_calculator() -> SNRCalculator:
    """SNR calculator with default noise floors."""
    return SNRCalculator(StaticNoiseModel.default())


@pytest.fixture
def estimator(snr_calculator: SNRCalculator) -> CapacityEstimator:
    """Capacity estimator with default settings."""
    return CapacityEstimator(snr_calculator)
