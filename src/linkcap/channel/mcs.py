"""
MCS (Modulation and Coding Scheme) rate and SNR requirement tables.

PHY rate = base_rate(MCS, standard) * (width / 20 MHz) * NSS

Base rates are the IEEE 802.11 single-stream 20 MHz values with 800ns GI:
- WiFi 4/5 (HT/VHT): 6.5 Mbps (MCS 0) to 86.7 Mbps (MCS 9)
- WiFi 6/7 (HE/EHT): 8.6 Mbps (MCS 0) to 172.1 Mbps (MCS 13)

HE/EHT rates run ahead of HT/VHT at the same index because of the longer
OFDM symbol (12.8us) with 4x the subcarriers.

Required SNR = base_snr(MCS) + width_penalty + nss_penalty
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import csv
import logging

import numpy as np

from linkcap.phy.standards import ChannelWidth, WifiStandard, validate_nss

logger = logging.getLogger(__name__)

# Bits per symbol for each modulation scheme
MODULATION_BITS = {
    "bpsk": 1,
    "qpsk": 2,
    "16qam": 4,
    "64qam": 6,
    "256qam": 8,
    "1024qam": 10,
    "4096qam": 12,
}

# (modulation, code_rate) per MCS index, shared by 802.11n/ac/ax/be
MCS_SCHEMES = [
    ("bpsk", 1 / 2),  # MCS 0
    ("qpsk", 1 / 2),  # MCS 1
    ("qpsk", 3 / 4),  # MCS 2
    ("16qam", 1 / 2),  # MCS 3
    ("16qam", 3 / 4),  # MCS 4
    ("64qam", 2 / 3),  # MCS 5
    ("64qam", 3 / 4),  # MCS 6
    ("64qam", 5 / 6),  # MCS 7
    ("256qam", 3 / 4),  # MCS 8
    ("256qam", 5 / 6),  # MCS 9
    ("1024qam", 3 / 4),  # MCS 10 (WiFi 6+)
    ("1024qam", 5 / 6),  # MCS 11 (WiFi 6+)
    ("4096qam", 3 / 4),  # MCS 12 (WiFi 7)
    ("4096qam", 5 / 6),  # MCS 13 (WiFi 7)
]

# 20 MHz, 1 stream, 800ns GI
HT_VHT_BASE_RATES = [6.5, 13.0, 19.5, 26.0, 39.0, 52.0, 58.5, 65.0, 78.0, 86.7]
HE_EHT_BASE_RATES = [
    8.6, 17.2, 25.8, 34.4, 51.5, 68.8, 77.4, 86.0, 103.2, 114.7, 129.0, 143.4, 154.9, 172.1,
]

# Minimum SNR for ~10% PER at 20 MHz / 1 stream, includes ~3 dB implementation margin
BASE_SNR_DB = [6.0, 8.0, 10.0, 12.0, 14.0, 18.0, 20.0, 22.0, 24.0, 26.0, 30.0, 33.0, 38.0, 41.0]

# Returned for indexes beyond a standard's range
OUT_OF_RANGE_SNR_DB = {
    WifiStandard.WIFI_4: 24.0,
    WifiStandard.WIFI_5: 28.0,
    WifiStandard.WIFI_6: 35.0,
    WifiStandard.WIFI_7: 45.0,
}

# Noise bandwidth grows 3 dB per doubling of channel width
WIDTH_PENALTY_DB = {
    ChannelWidth.WIDTH_20MHZ: 0.0,
    ChannelWidth.WIDTH_40MHZ: 3.0,
    ChannelWidth.WIDTH_80MHZ: 6.0,
    ChannelWidth.WIDTH_160MHZ: 9.0,
    ChannelWidth.WIDTH_320MHZ: 12.0,
}


def nss_penalty_db(nss: int) -> float:
    """
    SNR penalty for MIMO operation (~1.5 dB per doubling of streams).

    Covers inter-stream interference and channel estimation error.
    """
    if nss <= 1:
        return 0.0
    if nss == 2:
        return 1.5
    if nss <= 4:
        return 3.0
    if nss <= 8:
        return 4.5
    return 6.0


def per_stream_mcs(mcs: int, standard: WifiStandard) -> int:
    """Map an MCS index to its per-stream modulation/coding index (HT folds NSS into MCS)."""
    if standard == WifiStandard.WIFI_4:
        return mcs % 8
    return mcs


def _base_rates(standard: WifiStandard) -> list[float]:
    if standard in (WifiStandard.WIFI_4, WifiStandard.WIFI_5):
        return HT_VHT_BASE_RATES[: standard.profile.max_per_stream_mcs + 1]
    return HE_EHT_BASE_RATES[: standard.profile.max_per_stream_mcs + 1]


@dataclass(frozen=True)
class MCSEntry:
    """Single MCS table entry for one standard."""

    mcs_index: int
    modulation: str  # e.g., "bpsk", "qpsk", "16qam", ..., "4096qam"
    code_rate: float  # e.g., 0.5, 0.75, 0.833
    min_snr_db: float  # Minimum SNR at 20 MHz / 1 stream
    bits_per_symbol: int  # Derived from modulation
    base_rate_mbps: Optional[float] = None  # 20 MHz / 1 stream PHY rate

    @property
    def spectral_efficiency(self) -> float:
        """Return spectral efficiency (bits/symbol * code_rate)."""
        return self.bits_per_symbol * self.code_rate

    @classmethod
    def from_csv_row(cls, row: dict) -> "MCSEntry":
        """Create MCSEntry from CSV row dictionary."""
        modulation = row["modulation"].lower()
        if modulation not in MODULATION_BITS:
            raise ValueError(f"Unknown modulation: {row['modulation']}")

        base_rate = None
        if row.get("base_rate_mbps"):
            base_rate = float(row["base_rate_mbps"])

        return cls(
            mcs_index=int(row["mcs_index"]),
            modulation=modulation,
            code_rate=float(row["code_rate"]),
            min_snr_db=float(row["min_snr_db"]),
            bits_per_symbol=MODULATION_BITS[modulation],
            base_rate_mbps=base_rate,
        )


def default_entries(standard: WifiStandard) -> list[MCSEntry]:
    """Return the built-in per-stream MCS entries for a standard."""
    entries = []
    for index, base_rate in enumerate(_base_rates(standard)):
        modulation, code_rate = MCS_SCHEMES[index]
        entries.append(
            MCSEntry(
                mcs_index=index,
                modulation=modulation,
                code_rate=code_rate,
                min_snr_db=BASE_SNR_DB[index],
                bits_per_symbol=MODULATION_BITS[modulation],
                base_rate_mbps=base_rate,
            )
        )
    return entries


# ============================================================================
# PHY rates
# ============================================================================


def phy_rate_mbps(
    mcs: int,
    standard: WifiStandard,
    channel_width: ChannelWidth,
    nss: int,
) -> Optional[float]:
    """
    Get PHY data rate for an MCS configuration.

    Args:
        mcs: MCS index (HT numbering 0-31 for WiFi 4)
        standard: WiFi standard
        channel_width: Channel bandwidth
        nss: Number of spatial streams

    Returns:
        PHY rate in Mbps, or None if the standard does not support the
        combination of width, stream count and MCS index

    Raises:
        ValueError: If nss is outside 1-16
    """
    validate_nss(nss)

    profile = standard.profile
    if not profile.supports_width(channel_width):
        return None
    if not profile.supports_streams(nss):
        return None
    if not profile.supports_mcs(mcs):
        return None

    base_rate = _base_rates(standard)[per_stream_mcs(mcs, standard)]
    return base_rate * channel_width.scale_factor * nss


def max_phy_rate_mbps(
    standard: WifiStandard, channel_width: ChannelWidth, nss: int
) -> Optional[float]:
    """Get PHY rate at the standard's highest per-stream MCS."""
    return phy_rate_mbps(standard.profile.max_per_stream_mcs, standard, channel_width, nss)


def effective_throughput_mbps(phy_rate: float, standard: WifiStandard) -> float:
    """
    Convert PHY rate to effective MAC throughput.

    Efficiency covers MAC headers, (block) ACKs, inter-frame spacing and
    contention: WiFi 4 50%, WiFi 5 60%, WiFi 6 70%, WiFi 7 75%.
    """
    return phy_rate * standard.profile.efficiency


def phy_rate_curve(
    standard: WifiStandard, channel_width: ChannelWidth, nss: int
) -> tuple[np.ndarray, np.ndarray]:
    """
    Calculate PHY rate over the standard's per-stream MCS range.

    Args:
        standard: WiFi standard
        channel_width: Channel bandwidth
        nss: Number of spatial streams

    Returns:
        Tuple of (mcs_array, rate_mbps_array); rates are NaN where the
        combination is unsupported
    """
    mcs = np.arange(standard.profile.max_per_stream_mcs + 1)
    rates = []
    for index in mcs:
        rate = phy_rate_mbps(int(index), standard, channel_width, nss)
        rates.append(np.nan if rate is None else rate)
    return mcs, np.array(rates, dtype=float)


# ============================================================================
# SNR requirements
# ============================================================================


class McsSnrTable:
    """Minimum SNR required per MCS, standard, channel width and stream count."""

    def __init__(self, entries: Optional[dict[WifiStandard, list[MCSEntry]]] = None):
        """
        Initialize SNR table.

        Args:
            entries: Per-standard entries overriding the built-in requirements.
                Standards or indexes not listed keep their defaults.
        """
        self._entries: dict[WifiStandard, dict[int, MCSEntry]] = {
            standard: {e.mcs_index: e for e in default_entries(standard)}
            for standard in WifiStandard
        }
        for standard, overrides in (entries or {}).items():
            for entry in overrides:
                if entry.mcs_index not in standard.profile.per_stream_mcs_range:
                    raise ValueError(
                        f"MCS {entry.mcs_index} is not a per-stream index for {standard.display_name}"
                    )
                self._entries[standard][entry.mcs_index] = entry

    @classmethod
    def from_csv(cls, csv_path: str | Path) -> "McsSnrTable":
        """
        Load SNR requirement overrides from CSV file.

        Columns: standard, mcs_index, modulation, code_rate, min_snr_db

        Args:
            csv_path: Path to CSV file

        Returns:
            Loaded McsSnrTable

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a row has a missing column or an invalid value
        """
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(f"MCS table not found: {csv_path}")

        entries: dict[WifiStandard, list[MCSEntry]] = {}
        count = 0
        with open(path, newline="") as f:
            reader = csv.DictReader(f)
            # Line 1 is the header
            for line, row in enumerate(reader, start=2):
                try:
                    standard = WifiStandard(row["standard"].strip().lower())
                    entry = MCSEntry.from_csv_row(row)
                except (KeyError, AttributeError, TypeError, ValueError) as e:
                    raise ValueError(f"Invalid MCS table row {line} in {csv_path}: {e}") from e
                entries.setdefault(standard, []).append(entry)
                count += 1

        logger.info(f"Loaded MCS SNR table with {count} entries from {csv_path}")
        return cls(entries)

    def get_entry(self, mcs: int, standard: WifiStandard) -> Optional[MCSEntry]:
        """Get MCS entry for an index (HT indexes map to their per-stream entry)."""
        if not standard.profile.supports_mcs(mcs):
            return None
        return self._entries[standard].get(per_stream_mcs(mcs, standard))

    def required_snr_db(
        self,
        mcs: int,
        standard: WifiStandard,
        channel_width: ChannelWidth,
        nss: int,
    ) -> float:
        """
        Get minimum SNR for an MCS configuration.

        Args:
            mcs: MCS index
            standard: WiFi standard
            channel_width: Channel bandwidth (wider = more noise)
            nss: Number of spatial streams (more streams = MIMO penalty)

        Returns:
            Required SNR in dB

        Raises:
            ValueError: If nss is outside 1-16
        """
        validate_nss(nss)

        entry = self.get_entry(mcs, standard)
        base_snr = entry.min_snr_db if entry else OUT_OF_RANGE_SNR_DB[standard]
        return base_snr + WIDTH_PENALTY_DB[channel_width] + nss_penalty_db(nss)

    def __len__(self) -> int:
        """Return total number of entries across standards."""
        return sum(len(v) for v in self._entries.values())

    def __repr__(self) -> str:
        return f"McsSnrTable({len(self)} entries)"
