"""
Pydantic models for linkcap configuration.

This module defines the schema for survey.yaml files that describe:
- Estimator settings (noise preset, link margin, uplink ratio)
- Candidate BSS observations to rank
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from linkcap.capacity.estimator import CapacityEstimator
from linkcap.capacity.models import BssCapacityData
from linkcap.channel.mcs import McsSnrTable
from linkcap.channel.noise import DEFAULT_NOISE_FLOOR_DBM, NoisePreset, StaticNoiseModel
from linkcap.channel.snr import SNRCalculator
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard


class EstimatorConfig(BaseModel):
    """Capacity estimator settings."""

    model_config = ConfigDict(extra="forbid")

    noise_preset: NoisePreset = Field(default=NoisePreset.DEFAULT)
    noise_floors_dbm: dict[WiFiBand, float] = Field(
        default_factory=dict, description="Per-band noise floors for the custom preset"
    )
    default_noise_floor_dbm: float = Field(
        default=DEFAULT_NOISE_FLOOR_DBM,
        description="Floor for bands missing from noise_floors_dbm",
        ge=-120.0,
        le=0.0,
    )
    min_link_margin_db: float = Field(
        default=3.0, description="Minimum link margin for MCS selection", ge=0.0
    )
    uplink_ratio: float = Field(
        default=0.75, description="Uplink/downlink capacity ratio", ge=0.0, le=1.0
    )
    mcs_snr_table: Path | None = Field(
        default=None, description="CSV file overriding MCS SNR requirements"
    )

    @field_validator("noise_floors_dbm", mode="after")
    @classmethod
    def validate_floor_range(cls, v: dict[WiFiBand, float]) -> dict[WiFiBand, float]:
        """Noise floors must lie in [-120, 0] dBm."""
        for band, floor in v.items():
            if not -120.0 <= floor <= 0.0:
                raise ValueError(
                    f"Noise floor for {band.display_name} must be between -120 and 0 dBm: {floor}"
                )
        return v

    @model_validator(mode="after")
    def validate_custom_floors(self) -> "EstimatorConfig":
        """Custom preset requires floors; other presets must not set them."""
        if self.noise_preset == NoisePreset.CUSTOM and not self.noise_floors_dbm:
            raise ValueError("noise_floors_dbm required when noise_preset is 'custom'")
        if self.noise_preset != NoisePreset.CUSTOM and self.noise_floors_dbm:
            raise ValueError("noise_floors_dbm is only used with noise_preset 'custom'")
        return self

    def build_noise_model(self) -> StaticNoiseModel:
        return StaticNoiseModel.from_preset(
            self.noise_preset, self.noise_floors_dbm, self.default_noise_floor_dbm
        )

    def build_estimator(self) -> CapacityEstimator:
        """Create a CapacityEstimator from these settings."""
        mcs_table = McsSnrTable.from_csv(self.mcs_snr_table) if self.mcs_snr_table else None
        return CapacityEstimator(
            snr_calculator=SNRCalculator(self.build_noise_model(), mcs_table),
            uplink_ratio=self.uplink_ratio,
            min_link_margin_db=self.min_link_margin_db,
        )


class CandidateConfig(BaseModel):
    """Observed BSS to estimate."""

    model_config = ConfigDict(extra="forbid")

    bssid: str = Field(..., description="AP MAC address or identifier")
    rssi_dbm: float = Field(..., description="Received signal strength", ge=-120.0, le=0.0)
    band: WiFiBand
    standard: WifiStandard
    channel_width_mhz: int = Field(default=20, description="Channel width in MHz")
    nss: int | None = Field(default=None, description="Spatial streams", ge=1, le=16)
    channel_utilization_pct: float | None = Field(
        default=None, description="Channel utilization in percent", ge=0.0, le=100.0
    )

    @field_validator("channel_width_mhz", mode="after")
    @classmethod
    def validate_width(cls, v: int) -> int:
        """Width must be one of 20/40/80/160/320 MHz."""
        ChannelWidth.from_mhz(v)
        return v

    @property
    def channel_width(self) -> ChannelWidth:
        return ChannelWidth.from_mhz(self.channel_width_mhz)

    def to_bss_data(self) -> BssCapacityData:
        """Convert to the estimator's input record."""
        return BssCapacityData(
            bssid=self.bssid,
            rssi_dbm=self.rssi_dbm,
            band=self.band,
            standard=self.standard,
            channel_width=self.channel_width,
            nss=self.nss,
            channel_utilization_pct=self.channel_utilization_pct,
        )


class SurveyConfig(BaseModel):
    """Root definition for survey.yaml files."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="survey", description="Survey name")
    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    candidates: list[CandidateConfig] = Field(..., min_length=1)

    @field_validator("candidates", mode="after")
    @classmethod
    def validate_unique_bssids(cls, v: list[CandidateConfig]) -> list[CandidateConfig]:
        """BSSIDs must be unique within a survey."""
        seen: set[str] = set()
        for candidate in v:
            key = candidate.bssid.lower()
            if key in seen:
                raise ValueError(f"Duplicate BSSID in candidates: {candidate.bssid}")
            seen.add(key)
        return v

    def bss_data(self) -> list[BssCapacityData]:
        return [c.to_bss_data() for c in self.candidates]
