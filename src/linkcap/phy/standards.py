"""
WiFi bands, channel widths and PHY standards.

Each standard carries a small static profile holding the limits that the
rate and SNR tables enforce:

| Standard        | Max width | Max NSS | MCS range | Efficiency |
|-----------------|-----------|---------|-----------|------------|
| WiFi 4 (11n)    | 40 MHz    | 8       | 0-31 (HT) | 50%        |
| WiFi 5 (11ac)   | 160 MHz   | 8       | 0-9       | 60%        |
| WiFi 6 (11ax)   | 160 MHz   | 8       | 0-11      | 70%        |
| WiFi 7 (11be)   | 320 MHz   | 16      | 0-13      | 75%        |

WiFi 4 uses HT MCS numbering, where indexes 8-31 fold the stream count into
the index (MCS = 8 * (NSS - 1) + per-stream MCS). The modulation and coding
for a WiFi 4 index is therefore index % 8.
"""

from dataclasses import dataclass
from enum import Enum


class WiFiBand(str, Enum):
    """WiFi frequency bands."""

    BAND_2_4GHZ = "2.4ghz"
    BAND_5GHZ = "5ghz"
    BAND_6GHZ = "6ghz"

    @property
    def display_name(self) -> str:
        """Return human-readable band name."""
        mapping = {
            WiFiBand.BAND_2_4GHZ: "2.4 GHz",
            WiFiBand.BAND_5GHZ: "5 GHz",
            WiFiBand.BAND_6GHZ: "6 GHz",
        }
        return mapping[self]

    @classmethod
    def from_frequency(cls, freq_mhz: int) -> "WiFiBand":
        """
        Resolve the band containing a center frequency.

        Args:
            freq_mhz: Center frequency in MHz

        Returns:
            Band containing the frequency

        Raises:
            ValueError: If the frequency is outside every WiFi band
        """
        if 2400 <= freq_mhz <= 2500:
            return cls.BAND_2_4GHZ
        if 5000 <= freq_mhz <= 5900:
            return cls.BAND_5GHZ
        if 5925 <= freq_mhz <= 7125:
            return cls.BAND_6GHZ
        raise ValueError(f"Frequency {freq_mhz} MHz is not in a WiFi band")


class ChannelWidth(int, Enum):
    """Channel bandwidths, ordered narrowest to widest."""

    WIDTH_20MHZ = 20
    WIDTH_40MHZ = 40
    WIDTH_80MHZ = 80
    WIDTH_160MHZ = 160
    WIDTH_320MHZ = 320

    @property
    def width_mhz(self) -> int:
        return int(self.value)

    @property
    def display_name(self) -> str:
        return f"{self.value} MHz"

    @property
    def scale_factor(self) -> float:
        """PHY rate multiplier relative to a 20 MHz channel."""
        return self.value / 20.0

    @classmethod
    def from_mhz(cls, width_mhz: int) -> "ChannelWidth":
        """Return the width for a value in MHz (e.g. 80)."""
        for width in cls:
            if width.value == width_mhz:
                return width
        valid = ", ".join(str(w.value) for w in cls)
        raise ValueError(f"Unknown channel width {width_mhz} MHz (valid: {valid})")


class WifiStandard(str, Enum):
    """IEEE 802.11 PHY generations supported by the capacity model."""

    WIFI_4 = "wifi4"
    WIFI_5 = "wifi5"
    WIFI_6 = "wifi6"
    WIFI_7 = "wifi7"

    @property
    def display_name(self) -> str:
        """Return consumer name (e.g. 'WiFi 6')."""
        return f"WiFi {self.value[-1]}"

    @property
    def ieee_name(self) -> str:
        """Return IEEE amendment name (e.g. '802.11ax')."""
        mapping = {
            WifiStandard.WIFI_4: "802.11n",
            WifiStandard.WIFI_5: "802.11ac",
            WifiStandard.WIFI_6: "802.11ax",
            WifiStandard.WIFI_7: "802.11be",
        }
        return mapping[self]

    @property
    def profile(self) -> "StandardProfile":
        """Return the static PHY profile for this standard."""
        return STANDARD_PROFILES[self]


@dataclass(frozen=True)
class StandardProfile:
    """PHY limits and MAC efficiency for one standard."""

    max_width: ChannelWidth
    max_streams: int
    mcs_range: range  # Valid MCS indexes accepted by the rate table
    max_per_stream_mcs: int  # Highest modulation/coding index per stream
    efficiency: float  # Effective throughput / PHY rate

    def supports_width(self, width: ChannelWidth) -> bool:
        return width <= self.max_width

    def supports_streams(self, nss: int) -> bool:
        return 1 <= nss <= self.max_streams

    def supports_mcs(self, mcs: int) -> bool:
        return mcs in self.mcs_range

    @property
    def per_stream_mcs_range(self) -> range:
        """MCS indexes searched when selecting a rate (0..max_per_stream_mcs)."""
        return range(0, self.max_per_stream_mcs + 1)


STANDARD_PROFILES: dict[WifiStandard, StandardProfile] = {
    WifiStandard.WIFI_4: StandardProfile(
        max_width=ChannelWidth.WIDTH_40MHZ,
        max_streams=8,
        mcs_range=range(0, 32),
        max_per_stream_mcs=7,
        efficiency=0.50,  # Basic A-MPDU aggregation
    ),
    WifiStandard.WIFI_5: StandardProfile(
        max_width=ChannelWidth.WIDTH_160MHZ,
        max_streams=8,
        mcs_range=range(0, 10),
        max_per_stream_mcs=9,
        efficiency=0.60,  # Larger aggregates, beamforming
    ),
    WifiStandard.WIFI_6: StandardProfile(
        max_width=ChannelWidth.WIDTH_160MHZ,
        max_streams=8,
        mcs_range=range(0, 12),
        max_per_stream_mcs=11,
        efficiency=0.70,  # OFDMA, BSS coloring, TWT
    ),
    WifiStandard.WIFI_7: StandardProfile(
        max_width=ChannelWidth.WIDTH_320MHZ,
        max_streams=16,
        mcs_range=range(0, 14),
        max_per_stream_mcs=13,
        efficiency=0.75,  # MLO, preamble puncturing
    ),
}

_missing = set(WifiStandard) - set(STANDARD_PROFILES)
if _missing:
    raise RuntimeError(f"No PHY profile for: {sorted(s.value for s in _missing)}")


# Absolute stream limit across all standards (WiFi 7)
MAX_SPATIAL_STREAMS = 16


def validate_nss(nss: int) -> None:
    """Raise ValueError if a spatial stream count is outside 1-16."""
    if nss < 1:
        raise ValueError(f"NSS must be at least 1: {nss}")
    if nss > MAX_SPATIAL_STREAMS:
        raise ValueError(f"NSS must be at most {MAX_SPATIAL_STREAMS}: {nss}")
