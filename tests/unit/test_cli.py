"""
Tests for the linkcap command line interface.
"""

import json

import pytest
from click.testing import CliRunner
from pathlib import Path

from linkcap.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestEstimateCommand:
    """Test `linkcap estimate`."""

    def test_estimate_json(self, runner):
        result = runner.invoke(
            main,
            [
                "estimate",
                "--rssi", "-50",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--width", "80",
                "--nss", "2",
                "--json",
            ],
        )
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["max_mcs"] == 11
        assert data["estimated_effective_downlink_mbps"] == pytest.approx(803.04)

    def test_estimate_noise_preset(self, runner):
        result = runner.invoke(
            main,
            [
                "estimate",
                "--rssi", "-50",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--width", "80",
                "--noise-preset", "conservative",
                "--json",
            ],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["snr_db"] == pytest.approx(42.0)

    def test_estimate_table_warns_without_mcs(self, runner):
        result = runner.invoke(
            main,
            ["estimate", "--rssi", "-100", "--band", "2.4ghz", "--standard", "wifi4"],
        )
        assert result.exit_code == 0, result.output
        assert "Signal too weak" in result.stdout

    def test_invalid_rssi_exits(self, runner):
        result = runner.invoke(
            main,
            ["estimate", "--rssi", "5", "--band", "5ghz", "--standard", "wifi6"],
        )
        assert result.exit_code == 1
        assert "Invalid input" in result.stdout

    def test_invalid_margin_names_field(self, runner):
        result = runner.invoke(
            main,
            [
                "estimate",
                "--rssi", "-50",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--min-margin", "-1",
            ],
        )
        assert result.exit_code == 1
        assert "min_link_margin_db:" in result.stdout

    def test_unknown_band_rejected(self, runner):
        result = runner.invoke(
            main,
            ["estimate", "--rssi", "-50", "--band", "60ghz", "--standard", "wifi6"],
        )
        assert result.exit_code == 2


class TestRankCommand:
    """Test `linkcap rank`."""

    def test_rank_json(self, runner, office_survey_path: Path):
        result = runner.invoke(main, ["rank", str(office_survey_path), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert [e["bssid"] for e in data] == [
            "aa:bb:cc:00:00:02",
            "aa:bb:cc:00:00:01",
            "aa:bb:cc:00:00:03",
        ]
        assert data[0]["utilization_adjusted_downlink_mbps"] == pytest.approx(2409.12)
        assert data[2]["capacity_category"] == "unknown"

    def test_rank_table(self, runner, office_survey_path: Path):
        result = runner.invoke(main, ["rank", str(office_survey_path)])
        assert result.exit_code == 0, result.output
        assert "Best:" in result.stdout
        assert "aa:bb:cc:00:00:02" in result.stdout
        assert "significant" in result.stdout

    def test_rank_custom_survey(self, runner, surveys_dir: Path):
        """Custom floors and the MCS override table both apply."""
        result = runner.invoke(main, ["rank", str(surveys_dir / "custom_noise.yaml"), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data[0]["snr_db"] == pytest.approx(33.0)
        assert data[0]["max_mcs"] == 7
        assert data[0]["estimated_effective_downlink_mbps"] == pytest.approx(481.6)

    def test_rank_invalid_survey(self, runner, surveys_dir: Path):
        result = runner.invoke(main, ["rank", str(surveys_dir / "invalid_rssi.yaml")])
        assert result.exit_code == 1
        assert "Ranking failed" in result.stdout


class TestSweepCommand:
    def test_sweep(self, runner):
        result = runner.invoke(
            main,
            [
                "sweep",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--width", "80",
                "--nss", "2",
                "--rssi-min", "-60",
                "--rssi-max", "-40",
                "--step", "10",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "-40.0" in result.stdout
        assert "803.0" in result.stdout

    def test_sweep_uneven_step_stops_before_max(self, runner):
        """The last row never exceeds --rssi-max when step does not divide the range."""
        result = runner.invoke(
            main,
            [
                "sweep",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--rssi-min", "-90",
                "--rssi-max", "-30",
                "--step", "7",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "-34.0" in result.stdout
        assert "-27.0" not in result.stdout

    def test_sweep_uneven_step_near_zero_dbm(self, runner):
        """A range ending at 0 dBm never steps past the valid RSSI limit."""
        result = runner.invoke(
            main,
            [
                "sweep",
                "--band", "5ghz",
                "--standard", "wifi6",
                "--rssi-min", "-10",
                "--rssi-max", "0",
                "--step", "6",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Sweep failed" not in result.stdout
        assert "-4.0" in result.stdout

    def test_sweep_invalid_range(self, runner):
        result = runner.invoke(
            main,
            ["sweep", "--band", "5ghz", "--standard", "wifi6", "--rssi-min", "-30", "--rssi-max", "-60"],
        )
        assert result.exit_code == 1
        assert "Invalid range" in result.stdout


class TestValidateCommand:
    def test_validate_survey(self, runner, office_survey_path: Path):
        result = runner.invoke(main, ["validate", str(office_survey_path)])
        assert result.exit_code == 0, result.output
        assert "Survey syntax valid" in result.stdout
        assert "office-floor-2" in result.stdout

    def test_validate_reports_mcs_table(self, runner, surveys_dir: Path):
        result = runner.invoke(main, ["validate", str(surveys_dir / "custom_noise.yaml")])
        assert result.exit_code == 0, result.output
        assert "MCS table exists" in result.stdout

    def test_validate_malformed(self, runner, surveys_dir: Path):
        result = runner.invoke(main, ["validate", str(surveys_dir / "malformed.yaml")])
        assert result.exit_code == 1
        assert "validation failed" in result.stdout

    def test_validate_missing_mcs_table(self, runner, tmp_path: Path):
        survey = tmp_path / "survey.yaml"
        survey.write_text(
            "estimator:\n"
            "  mcs_snr_table: missing.csv\n"
            "candidates:\n"
            "  - bssid: ap1\n"
            "    rssi_dbm: -60\n"
            "    band: 5ghz\n"
            "    standard: wifi6\n"
        )
        result = runner.invoke(main, ["validate", str(survey)])
        assert result.exit_code == 1
        assert "MCS table not found" in result.stdout


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
