"""
Unit tests for noise.py - noise floor models.

Tests preset floors, custom floors with fallback, frequency lookup and
validation of floor values.
"""

import pytest
import numpy as np

from linkcap.channel.noise import (
    BOLTZMANN_DBM_HZ,
    DEFAULT_NOISE_FLOOR_DBM,
    NoisePreset,
    StaticNoiseModel,
    thermal_noise_floor_dbm,
)
from linkcap.phy.standards import WiFiBand


class TestPresets:
    """Test the built-in presets."""

    @pytest.mark.parametrize(
        "band,expected",
        [
            (WiFiBand.BAND_2_4GHZ, -92.0),
            (WiFiBand.BAND_5GHZ, -95.0),
            (WiFiBand.BAND_6GHZ, -96.0),
        ],
    )
    def test_default_floors(self, band: WiFiBand, expected: float):
        """Test default per-band floors."""
        assert StaticNoiseModel.default().noise_floor_dbm(band) == expected

    def test_conservative_is_worse_than_default(self):
        """Conservative floors are 3-4 dB above default."""
        default = StaticNoiseModel.default()
        conservative = StaticNoiseModel.conservative()
        for band in WiFiBand:
            delta = conservative.noise_floor_dbm(band) - default.noise_floor_dbm(band)
            assert 3.0 <= delta <= 4.0

    def test_optimistic_is_better_than_default(self):
        """Optimistic floors are 2.5-3 dB below default."""
        default = StaticNoiseModel.default()
        optimistic = StaticNoiseModel.optimistic()
        for band in WiFiBand:
            delta = default.noise_floor_dbm(band) - optimistic.noise_floor_dbm(band)
            assert 2.5 <= delta <= 3.0

    @pytest.mark.parametrize(
        "model",
        [
            StaticNoiseModel.default(),
            StaticNoiseModel.conservative(),
            StaticNoiseModel.optimistic(),
        ],
    )
    def test_band_ordering(self, model: StaticNoiseModel):
        """2.4 GHz floor >= 5 GHz floor >= 6 GHz floor for every preset."""
        n24 = model.noise_floor_dbm(WiFiBand.BAND_2_4GHZ)
        n5 = model.noise_floor_dbm(WiFiBand.BAND_5GHZ)
        n6 = model.noise_floor_dbm(WiFiBand.BAND_6GHZ)
        assert n24 >= n5 >= n6

    @pytest.mark.parametrize(
        "preset,factory",
        [
            (NoisePreset.DEFAULT, StaticNoiseModel.default),
            (NoisePreset.CONSERVATIVE, StaticNoiseModel.conservative),
            (NoisePreset.OPTIMISTIC, StaticNoiseModel.optimistic),
        ],
    )
    def test_from_preset_matches_factory(self, preset, factory):
        """from_preset returns the same floors as the named constructor."""
        model = StaticNoiseModel.from_preset(preset)
        assert dict(model.band_floors) == dict(factory().band_floors)

    def test_from_preset_accepts_string(self):
        """Preset names are accepted as plain strings."""
        model = StaticNoiseModel.from_preset("conservative")
        assert model.noise_floor_dbm(WiFiBand.BAND_2_4GHZ) == -88.0

    def test_custom_preset_requires_floors(self):
        """Custom preset without floors is a caller error."""
        with pytest.raises(ValueError, match="requires band floors"):
            StaticNoiseModel.from_preset(NoisePreset.CUSTOM)


class TestCustomModel:
    """Test caller-supplied floors."""

    def test_unmapped_band_uses_default_floor(self):
        """Bands missing from the map fall back to the default floor."""
        model = StaticNoiseModel.custom({WiFiBand.BAND_2_4GHZ: -85.0})
        assert model.noise_floor_dbm(WiFiBand.BAND_2_4GHZ) == -85.0
        assert model.noise_floor_dbm(WiFiBand.BAND_6GHZ) == DEFAULT_NOISE_FLOOR_DBM

    def test_custom_default_floor(self):
        """The fallback floor is configurable."""
        model = StaticNoiseModel.custom({}, default_floor=-90.0)
        assert model.noise_floor_dbm(WiFiBand.BAND_5GHZ) == -90.0

    def test_with_noise_returns_copy(self):
        """with_noise changes one band and leaves the original untouched."""
        original = StaticNoiseModel.default()
        updated = original.with_noise(WiFiBand.BAND_5GHZ, -90.0)

        assert updated.noise_floor_dbm(WiFiBand.BAND_5GHZ) == -90.0
        assert updated.noise_floor_dbm(WiFiBand.BAND_2_4GHZ) == -92.0
        assert original.noise_floor_dbm(WiFiBand.BAND_5GHZ) == -95.0

    @pytest.mark.parametrize("floor", [-121.0, 1.0])
    def test_floor_out_of_range_raises(self, floor: float):
        """Floors outside [-120, 0] dBm are rejected."""
        with pytest.raises(ValueError, match="between -120 and 0"):
            StaticNoiseModel.custom({WiFiBand.BAND_5GHZ: floor})

    def test_default_floor_out_of_range_raises(self):
        with pytest.raises(ValueError, match="Default noise floor"):
            StaticNoiseModel.custom({}, default_floor=-130.0)

    def test_band_floors_read_only(self):
        """The floor map cannot be mutated after construction."""
        model = StaticNoiseModel.default()
        with pytest.raises(TypeError):
            model.band_floors[WiFiBand.BAND_5GHZ] = -50.0


class TestModelProperties:
    """Test frequency lookup and model metadata."""

    def test_frequency_resolves_to_band_floor(self):
        """Frequency-qualified lookup returns the band's floor."""
        model = StaticNoiseModel.default()
        assert model.noise_floor_dbm(WiFiBand.BAND_5GHZ, freq_mhz=5180) == model.noise_floor_dbm(
            WiFiBand.BAND_5GHZ
        )

    def test_non_positive_frequency_raises(self):
        with pytest.raises(ValueError, match="Frequency must be positive"):
            StaticNoiseModel.default().noise_floor_dbm(WiFiBand.BAND_5GHZ, freq_mhz=0)

    def test_not_calibrated(self):
        assert StaticNoiseModel.default().is_calibrated is False

    def test_confidence(self):
        assert StaticNoiseModel.optimistic().confidence == 0.5


class TestThermalNoise:
    """Test kTB thermal noise floor."""

    @pytest.mark.parametrize(
        "bandwidth_hz,expected_noise_approx",
        [
            (20e6, -174 + 73 + 7),  # 20 MHz: -94 dBm (with 7dB NF)
            (40e6, -174 + 76 + 7),  # 40 MHz: -91 dBm
            (80e6, -174 + 79 + 7),  # 80 MHz: -88 dBm
            (160e6, -174 + 82 + 7),  # 160 MHz: -85 dBm
        ],
    )
    def test_thermal_noise_floor(self, bandwidth_hz: float, expected_noise_approx: float):
        """Test noise floor for various bandwidths."""
        assert abs(thermal_noise_floor_dbm(bandwidth_hz) - expected_noise_approx) < 1.0

    def test_thermal_noise_formula(self):
        expected = BOLTZMANN_DBM_HZ + 10 * np.log10(20e6) + 5.0
        assert thermal_noise_floor_dbm(20e6, noise_figure_db=5.0) == pytest.approx(expected)

    def test_zero_bandwidth_raises(self):
        with pytest.raises(ValueError):
            thermal_noise_floor_dbm(0.0)
