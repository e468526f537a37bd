"""
Spatial stream heuristic.

When a scan does not report NSS, assume the stream count typically
deployed for the standard and channel width. This is a policy table, not a
physical law: wider channels and newer standards usually ship with more
antennas.
"""

from linkcap.phy.standards import ChannelWidth, WifiStandard

DEFAULT_NSS = 1

NSS_LOOKUP_TABLE: dict[tuple[WifiStandard, ChannelWidth], int] = {
    # WiFi 4: 1-2 streams
    (WifiStandard.WIFI_4, ChannelWidth.WIDTH_20MHZ): 1,
    (WifiStandard.WIFI_4, ChannelWidth.WIDTH_40MHZ): 2,
    # WiFi 5: 1-4 streams
    (WifiStandard.WIFI_5, ChannelWidth.WIDTH_20MHZ): 1,
    (WifiStandard.WIFI_5, ChannelWidth.WIDTH_40MHZ): 2,
    (WifiStandard.WIFI_5, ChannelWidth.WIDTH_80MHZ): 2,
    (WifiStandard.WIFI_5, ChannelWidth.WIDTH_160MHZ): 4,
    # WiFi 6: 1-4 streams
    (WifiStandard.WIFI_6, ChannelWidth.WIDTH_20MHZ): 1,
    (WifiStandard.WIFI_6, ChannelWidth.WIDTH_40MHZ): 2,
    (WifiStandard.WIFI_6, ChannelWidth.WIDTH_80MHZ): 2,
    (WifiStandard.WIFI_6, ChannelWidth.WIDTH_160MHZ): 4,
    # WiFi 7: 1-8 streams
    (WifiStandard.WIFI_7, ChannelWidth.WIDTH_20MHZ): 1,
    (WifiStandard.WIFI_7, ChannelWidth.WIDTH_40MHZ): 2,
    (WifiStandard.WIFI_7, ChannelWidth.WIDTH_80MHZ): 2,
    (WifiStandard.WIFI_7, ChannelWidth.WIDTH_160MHZ): 4,
    (WifiStandard.WIFI_7, ChannelWidth.WIDTH_320MHZ): 8,
}


def estimate_nss(standard: WifiStandard, channel_width: ChannelWidth) -> int:
    """Return the typical spatial stream count for a standard and width."""
    return NSS_LOOKUP_TABLE.get((standard, channel_width), DEFAULT_NSS)
