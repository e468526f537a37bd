"""
SNR (Signal-to-Noise Ratio) and link margin calculation.

SNR (dB) = RSSI (dBm) - N (dBm)
Link margin (dB) = SNR - required SNR for the MCS

Typical requirements at 20 MHz / 1 stream:
- MCS 0 (BPSK 1/2): 6 dB
- MCS 7 (64-QAM 5/6): 22 dB
- MCS 11 (1024-QAM 5/6): 33 dB
- MCS 13 (4096-QAM 5/6): 41 dB
"""

from enum import Enum
from typing import Optional

from linkcap.channel.mcs import McsSnrTable
from linkcap.channel.noise import StaticNoiseModel
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard

MIN_RSSI_DBM = -120
MAX_RSSI_DBM = 0

DEFAULT_MIN_MARGIN_DB = 3.0


def validate_rssi(rssi_dbm: float) -> None:
    """Raise ValueError if RSSI is outside [-120, 0] dBm."""
    if not MIN_RSSI_DBM <= rssi_dbm <= MAX_RSSI_DBM:
        raise ValueError(f"RSSI must be between -120 and 0 dBm: {rssi_dbm}")


class SnrQuality(str, Enum):
    """SNR quality categories."""

    EXCELLENT = "excellent"  # WiFi 7 capable (4096-QAM)
    VERY_GOOD = "very_good"  # WiFi 6 high MCS (1024-QAM)
    GOOD = "good"  # 256-QAM
    FAIR = "fair"  # 64-QAM
    POOR = "poor"  # QPSK/16-QAM, frequent retries
    VERY_POOR = "very_poor"  # Unreliable

    @property
    def min_snr_db(self) -> float:
        mapping = {
            SnrQuality.EXCELLENT: 40.0,
            SnrQuality.VERY_GOOD: 30.0,
            SnrQuality.GOOD: 20.0,
            SnrQuality.FAIR: 15.0,
            SnrQuality.POOR: 10.0,
            SnrQuality.VERY_POOR: float("-inf"),
        }
        return mapping[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def score(self) -> int:
        """Numeric score (0-100) for this quality level."""
        mapping = {
            SnrQuality.EXCELLENT: 100,
            SnrQuality.VERY_GOOD: 85,
            SnrQuality.GOOD: 70,
            SnrQuality.FAIR: 55,
            SnrQuality.POOR: 35,
            SnrQuality.VERY_POOR: 15,
        }
        return mapping[self]


class SNRCalculator:
    """Calculate SNR, link margin and the highest sustainable MCS."""

    def __init__(
        self,
        noise_model: Optional[StaticNoiseModel] = None,
        mcs_table: Optional[McsSnrTable] = None,
    ):
        """
        Initialize SNR calculator.

        Args:
            noise_model: Noise floor model (default: StaticNoiseModel.default())
            mcs_table: SNR requirement table (default: built-in IEEE values)
        """
        self.noise_model = noise_model or StaticNoiseModel.default()
        self.mcs_table = mcs_table or McsSnrTable()

    def calculate_snr(
        self, rssi_dbm: float, band: WiFiBand, freq_mhz: Optional[int] = None
    ) -> float:
        """
        Calculate SNR from RSSI.

        Args:
            rssi_dbm: Received signal strength in dBm
            band: WiFi band
            freq_mhz: Optional center frequency; resolves to the band's floor

        Returns:
            SNR in dB

        Raises:
            ValueError: If RSSI is outside [-120, 0] dBm
        """
        validate_rssi(rssi_dbm)
        return rssi_dbm - self.noise_model.noise_floor_dbm(band, freq_mhz)

    def calculate_link_margin(
        self,
        snr_db: float,
        mcs: int,
        standard: WifiStandard = WifiStandard.WIFI_6,
        channel_width: ChannelWidth = ChannelWidth.WIDTH_80MHZ,
        nss: int = 1,
    ) -> float:
        """
        Calculate link margin for an MCS.

        Positive margin means the link can sustain the MCS; 3-6 dB is
        reliable under most conditions, below 0 dB it is unsustainable.

        Args:
            snr_db: Current SNR in dB
            mcs: Target MCS index
            standard: WiFi standard
            channel_width: Channel bandwidth
            nss: Number of spatial streams

        Returns:
            Link margin in dB
        """
        required = self.mcs_table.required_snr_db(mcs, standard, channel_width, nss)
        return snr_db - required

    def max_achievable_mcs(
        self,
        snr_db: float,
        standard: WifiStandard,
        channel_width: ChannelWidth,
        nss: int,
        min_margin: float = DEFAULT_MIN_MARGIN_DB,
    ) -> Optional[int]:
        """
        Find the highest MCS with at least min_margin dB of link margin.

        Searches the per-stream MCS range from highest to lowest.

        Args:
            snr_db: Current SNR in dB
            standard: WiFi standard
            channel_width: Channel bandwidth
            nss: Number of spatial streams
            min_margin: Minimum required link margin in dB

        Returns:
            MCS index, or None if the SNR is too low for MCS 0
        """
        for mcs in reversed(standard.profile.per_stream_mcs_range):
            margin = self.calculate_link_margin(snr_db, mcs, standard, channel_width, nss)
            if margin >= min_margin:
                return mcs
        return None

    @staticmethod
    def snr_quality(snr_db: float) -> SnrQuality:
        """Classify an SNR value."""
        for quality in SnrQuality:
            if snr_db >= quality.min_snr_db:
                return quality
        return SnrQuality.VERY_POOR

    @staticmethod
    def is_reliable_snr(snr_db: float) -> bool:
        """Whether SNR is enough for basic WiFi 4/5 connectivity (15 dB)."""
        return snr_db >= 15.0

    @staticmethod
    def supports_high_performance(snr_db: float) -> bool:
        """Whether SNR supports MCS 8+ (25 dB)."""
        return snr_db >= 25.0
