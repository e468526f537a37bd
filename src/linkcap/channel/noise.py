"""
Noise floor models.

SNR (dB) = RSSI (dBm) - N (dBm)

The static model uses per-band floors chosen for typical indoor
environments rather than measured values:

- 2.4 GHz: -92 dBm (Bluetooth, microwave ovens, crowded channels)
- 5 GHz:   -95 dBm
- 6 GHz:   -96 dBm (cleanest spectrum)

For reference, the thermal floor of a 20 MHz receiver with a 7 dB noise
figure is N = -174 + 10*log10(20e6) + 7 = -94 dBm.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from linkcap.phy.standards import WiFiBand

logger = logging.getLogger(__name__)

# Physical constants
BOLTZMANN_DBM_HZ = -174.0  # Thermal noise density in dBm/Hz at 290K

DEFAULT_NOISE_FLOOR_DBM = -95.0  # Fallback for bands without a floor
MIN_NOISE_FLOOR_DBM = -120.0
MAX_NOISE_FLOOR_DBM = 0.0


class NoisePreset(str, Enum):
    """Named noise floor presets."""

    DEFAULT = "default"
    CONSERVATIVE = "conservative"  # Assume a noisier environment
    OPTIMISTIC = "optimistic"  # Assume a clean environment
    CUSTOM = "custom"  # Caller-supplied floors


STANDARD_FLOORS = {
    WiFiBand.BAND_2_4GHZ: -92.0,
    WiFiBand.BAND_5GHZ: -95.0,
    WiFiBand.BAND_6GHZ: -96.0,
}

CONSERVATIVE_FLOORS = {
    WiFiBand.BAND_2_4GHZ: -88.0,  # 4 dB worse than standard
    WiFiBand.BAND_5GHZ: -92.0,  # 3 dB worse
    WiFiBand.BAND_6GHZ: -93.0,  # 3 dB worse
}

OPTIMISTIC_FLOORS = {
    WiFiBand.BAND_2_4GHZ: -95.0,  # 3 dB better than standard
    WiFiBand.BAND_5GHZ: -98.0,
    WiFiBand.BAND_6GHZ: -99.0,
}


def thermal_noise_floor_dbm(bandwidth_hz: float, noise_figure_db: float = 7.0) -> float:
    """
    Calculate thermal noise floor for a receiver.

    N = -174 dBm/Hz + 10*log10(B) + NF

    Args:
        bandwidth_hz: Receiver bandwidth in Hz
        noise_figure_db: Receiver noise figure in dB (typical WiFi: 7dB)

    Returns:
        Noise floor in dBm
    """
    if bandwidth_hz <= 0:
        raise ValueError(f"Bandwidth must be positive: {bandwidth_hz}")
    return float(BOLTZMANN_DBM_HZ + 10 * np.log10(bandwidth_hz) + noise_figure_db)


def _check_floor(noise_dbm: float, what: str = "Noise floor") -> None:
    if not MIN_NOISE_FLOOR_DBM <= noise_dbm <= MAX_NOISE_FLOOR_DBM:
        raise ValueError(f"{what} must be between -120 and 0 dBm: {noise_dbm}")


class StaticNoiseModel:
    """
    Noise floor model with a fixed value per band.

    Floors are statistical estimates, not measurements, so the model always
    reports ``is_calibrated = False`` and a confidence of 0.5.
    """

    is_calibrated = False
    confidence = 0.5

    def __init__(
        self,
        band_floors: Mapping[WiFiBand, float],
        default_floor: float = DEFAULT_NOISE_FLOOR_DBM,
    ):
        """
        Initialize noise model.

        Args:
            band_floors: Noise floor in dBm per band
            default_floor: Floor returned for bands missing from band_floors

        Raises:
            ValueError: If any floor is outside [-120, 0] dBm
        """
        for noise in band_floors.values():
            _check_floor(noise)
        _check_floor(default_floor, "Default noise floor")

        self._band_floors = MappingProxyType(dict(band_floors))
        self.default_floor = default_floor

    @property
    def band_floors(self) -> Mapping[WiFiBand, float]:
        """Read-only view of the configured floors."""
        return self._band_floors

    def noise_floor_dbm(self, band: WiFiBand, freq_mhz: Optional[int] = None) -> float:
        """
        Get noise floor for a band.

        The frequency is accepted for callers that carry it, but it resolves
        to the same per-band value.

        Args:
            band: WiFi band
            freq_mhz: Optional center frequency in MHz

        Returns:
            Noise floor in dBm
        """
        if freq_mhz is not None and freq_mhz <= 0:
            raise ValueError(f"Frequency must be positive: {freq_mhz}")
        return self._band_floors.get(band, self.default_floor)

    def with_noise(self, band: WiFiBand, noise_dbm: float) -> "StaticNoiseModel":
        """Return a copy with the floor for one band replaced."""
        _check_floor(noise_dbm)
        floors = dict(self._band_floors)
        floors[band] = noise_dbm
        return StaticNoiseModel(floors, self.default_floor)

    @classmethod
    def default(cls) -> "StaticNoiseModel":
        """Typical residential/office floors."""
        return cls(STANDARD_FLOORS)

    @classmethod
    def conservative(cls) -> "StaticNoiseModel":
        """Pessimistic floors for dense or industrial environments."""
        return cls(CONSERVATIVE_FLOORS)

    @classmethod
    def optimistic(cls) -> "StaticNoiseModel":
        """Optimistic floors for known-clean environments."""
        return cls(OPTIMISTIC_FLOORS)

    @classmethod
    def custom(
        cls,
        band_floors: Mapping[WiFiBand, float],
        default_floor: float = DEFAULT_NOISE_FLOOR_DBM,
    ) -> "StaticNoiseModel":
        """Caller-supplied floors; unmapped bands fall back to default_floor."""
        return cls(band_floors, default_floor)

    @classmethod
    def from_preset(
        cls,
        preset: NoisePreset,
        band_floors: Optional[Mapping[WiFiBand, float]] = None,
        default_floor: float = DEFAULT_NOISE_FLOOR_DBM,
    ) -> "StaticNoiseModel":
        """
        Build a model from a preset name.

        Args:
            preset: Preset to use
            band_floors: Required for the custom preset, ignored otherwise
            default_floor: Fallback floor for the custom preset

        Returns:
            Configured noise model
        """
        preset = NoisePreset(preset)
        logger.debug(f"Building noise model from '{preset.value}' preset")
        if preset == NoisePreset.CUSTOM:
            if not band_floors:
                raise ValueError("Custom noise preset requires band floors")
            return cls.custom(band_floors, default_floor)
        if preset == NoisePreset.CONSERVATIVE:
            return cls.conservative()
        if preset == NoisePreset.OPTIMISTIC:
            return cls.optimistic()
        return cls.default()

    def __repr__(self) -> str:
        floors = ", ".join(f"{b.display_name}={v}" for b, v in self._band_floors.items())
        return f"StaticNoiseModel({floors}, default={self.default_floor})"
