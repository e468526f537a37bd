"""Capacity estimate, candidate input and comparison records."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard, validate_nss
from linkcap.channel.snr import validate_rssi

GIGABIT_MBPS = 1000.0
MULTI_GIGABIT_MBPS = 5000.0
ASYMMETRY_RATIO = 0.8  # Uplink below 80% of downlink
SIGNIFICANT_DIFFERENCE_FRACTION = 0.20


def validate_utilization(utilization_pct: float) -> None:
    """Raise ValueError if channel utilization is outside [0, 100] %."""
    if not 0.0 <= utilization_pct <= 100.0:
        raise ValueError(f"Utilization must be 0-100%: {utilization_pct}")


class CapacityClass(str, Enum):
    """Capacity categories, best to worst."""

    ULTRA_HIGH = "ultra_high"  # 5+ Gbps
    VERY_HIGH = "very_high"  # 2-5 Gbps
    HIGH = "high"  # 1-2 Gbps
    MEDIUM = "medium"  # 500 Mbps - 1 Gbps
    LOW = "low"  # 100-500 Mbps
    VERY_LOW = "very_low"  # < 100 Mbps
    UNKNOWN = "unknown"  # No usable rate

    @property
    def min_typical_mbps(self) -> float:
        """Lower bound of effective downlink for this class."""
        mapping = {
            CapacityClass.ULTRA_HIGH: 5000.0,
            CapacityClass.VERY_HIGH: 2000.0,
            CapacityClass.HIGH: 1000.0,
            CapacityClass.MEDIUM: 500.0,
            CapacityClass.LOW: 100.0,
            CapacityClass.VERY_LOW: 0.0,
            CapacityClass.UNKNOWN: 0.0,
        }
        return mapping[self]

    @property
    def display_name(self) -> str:
        mapping = {
            CapacityClass.ULTRA_HIGH: "Ultra-High (5+ Gbps)",
            CapacityClass.VERY_HIGH: "Very High (2-5 Gbps)",
            CapacityClass.HIGH: "High (1-2 Gbps)",
            CapacityClass.MEDIUM: "Medium (500 Mbps - 1 Gbps)",
            CapacityClass.LOW: "Low (100-500 Mbps)",
            CapacityClass.VERY_LOW: "Very Low (< 100 Mbps)",
            CapacityClass.UNKNOWN: "Unknown",
        }
        return mapping[self]

    @property
    def rank(self) -> int:
        """Position in best-to-worst order (0 = best)."""
        return list(CapacityClass).index(self)

    @classmethod
    def from_downlink(cls, downlink_mbps: Optional[float]) -> "CapacityClass":
        """Classify an effective downlink figure."""
        if downlink_mbps is None:
            return cls.UNKNOWN
        for category in (cls.ULTRA_HIGH, cls.VERY_HIGH, cls.HIGH, cls.MEDIUM, cls.LOW):
            if downlink_mbps >= category.min_typical_mbps:
                return category
        return cls.VERY_LOW


@dataclass(frozen=True)
class CapacityEstimate:
    """
    Throughput estimate for one BSS.

    Optional figures are None when no MCS meets the margin requirement or
    the standard does not support the width/stream combination.
    """

    bssid: str
    band: WiFiBand
    standard: WifiStandard
    channel_width: ChannelWidth
    nss: int
    snr_db: float
    max_mcs: Optional[int] = None
    link_margin_db: Optional[float] = None
    max_phy_rate_mbps: Optional[float] = None
    estimated_effective_downlink_mbps: Optional[float] = None
    estimated_effective_uplink_mbps: Optional[float] = None
    utilization_adjusted_downlink_mbps: Optional[float] = None

    @property
    def capacity_category(self) -> CapacityClass:
        return CapacityClass.from_downlink(self.estimated_effective_downlink_mbps)

    @property
    def is_gigabit_capable(self) -> bool:
        downlink = self.estimated_effective_downlink_mbps
        return downlink is not None and downlink > GIGABIT_MBPS

    @property
    def is_multi_gigabit_capable(self) -> bool:
        downlink = self.estimated_effective_downlink_mbps
        return downlink is not None and downlink > MULTI_GIGABIT_MBPS

    @property
    def ranking_downlink_mbps(self) -> float:
        """Effective downlink used for ranking (None counts as 0.0)."""
        return self.estimated_effective_downlink_mbps or 0.0

    @property
    def available_capacity_mbps(self) -> Optional[float]:
        """Downlink remaining after current channel utilization."""
        return self.utilization_adjusted_downlink_mbps

    @property
    def utilization_pct(self) -> Optional[float]:
        """Share of effective downlink consumed by current utilization."""
        downlink = self.estimated_effective_downlink_mbps
        adjusted = self.utilization_adjusted_downlink_mbps
        if downlink is None or adjusted is None or downlink <= 0.0:
            return None
        used = (downlink - adjusted) / downlink * 100.0
        return min(max(used, 0.0), 100.0)

    @property
    def has_asymmetric_capacity(self) -> bool:
        downlink = self.estimated_effective_downlink_mbps
        uplink = self.estimated_effective_uplink_mbps
        if downlink is None or uplink is None or downlink <= 0.0:
            return False
        return uplink / downlink < ASYMMETRY_RATIO

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict including derived fields."""
        data = asdict(self)
        data["band"] = self.band.value
        data["standard"] = self.standard.value
        data["channel_width"] = self.channel_width.width_mhz
        data["capacity_category"] = self.capacity_category.value
        data["is_gigabit_capable"] = self.is_gigabit_capable
        data["is_multi_gigabit_capable"] = self.is_multi_gigabit_capable
        return data


@dataclass(frozen=True)
class BssCapacityData:
    """Observation of one BSS, input to multi-candidate estimation."""

    bssid: str
    rssi_dbm: float
    band: WiFiBand
    standard: WifiStandard
    channel_width: ChannelWidth
    nss: Optional[int] = None  # None = estimate from standard/width
    channel_utilization_pct: Optional[float] = None  # None = unknown

    def __post_init__(self):
        validate_rssi(self.rssi_dbm)
        if self.nss is not None:
            validate_nss(self.nss)
        if self.channel_utilization_pct is not None:
            validate_utilization(self.channel_utilization_pct)


@dataclass(frozen=True)
class CapacityComparison:
    """Capacity comparison between two BSSs."""

    bss1: CapacityEstimate
    bss2: CapacityEstimate
    preferred_bssid: str
    capacity_difference_mbps: float  # bss1 - bss2 (positive = bss1 better)
    capacity_difference_pct: float  # |difference| as % of the larger value

    @property
    def is_significant_difference(self) -> bool:
        """Whether the gap is at least 20% of the larger capacity."""
        return self.capacity_difference_pct >= SIGNIFICANT_DIFFERENCE_FRACTION * 100.0

    @property
    def bss1_is_better(self) -> bool:
        return self.preferred_bssid == self.bss1.bssid


def compare_capacity(bss1: CapacityEstimate, bss2: CapacityEstimate) -> CapacityComparison:
    """
    Compare effective downlink of two estimates.

    Missing downlink figures count as 0.0. Ties prefer bss1.

    Args:
        bss1: First BSS estimate
        bss2: Second BSS estimate

    Returns:
        Comparison with preferred BSSID, signed difference and significance
    """
    capacity1 = bss1.ranking_downlink_mbps
    capacity2 = bss2.ranking_downlink_mbps

    difference = capacity1 - capacity2
    preferred = bss1.bssid if difference >= 0.0 else bss2.bssid
    larger = max(capacity1, capacity2)
    difference_pct = abs(difference) / larger * 100.0 if larger > 0.0 else 0.0

    return CapacityComparison(
        bss1=bss1,
        bss2=bss2,
        preferred_bssid=preferred,
        capacity_difference_mbps=difference,
        capacity_difference_pct=difference_pct,
    )
