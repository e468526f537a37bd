"""WiFi PHY standards, bands and channel widths."""

from linkcap.phy.standards import (
    STANDARD_PROFILES,
    ChannelWidth,
    StandardProfile,
    WiFiBand,
    WifiStandard,
)

__all__ = [
    "STANDARD_PROFILES",
    "ChannelWidth",
    "StandardProfile",
    "WiFiBand",
    "WifiStandard",
]
