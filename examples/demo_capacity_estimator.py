#!/usr/bin/env python3
"""
Demonstration of CapacityEstimator.

Estimates capacity for a WiFi 5, a WiFi 6 and a WiFi 7 access point seen
from the same client, ranks them, and compares the two best.
This is a standalone example that doesn't need a survey file.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from linkcap.capacity import BssCapacityData, CapacityEstimator, compare_capacity
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard


def main():
    """Rank three access points by effective downlink."""
    print("=" * 80)
    print("CapacityEstimator Demo - Three Access Points")
    print("=" * 80)
    print()

    candidates = [
        BssCapacityData(
            bssid="11:22:33:44:55:01",
            rssi_dbm=-58.0,
            band=WiFiBand.BAND_5GHZ,
            standard=WifiStandard.WIFI_5,
            channel_width=ChannelWidth.WIDTH_80MHZ,
        ),
        BssCapacityData(
            bssid="11:22:33:44:55:02",
            rssi_dbm=-52.0,
            band=WiFiBand.BAND_5GHZ,
            standard=WifiStandard.WIFI_6,
            channel_width=ChannelWidth.WIDTH_160MHZ,
            channel_utilization_pct=40.0,
        ),
        BssCapacityData(
            bssid="11:22:33:44:55:03",
            rssi_dbm=-61.0,
            band=WiFiBand.BAND_6GHZ,
            standard=WifiStandard.WIFI_7,
            channel_width=ChannelWidth.WIDTH_320MHZ,
        ),
    ]

    print("1. Candidates:")
    for bss in candidates:
        print(
            f"   {bss.bssid}: {bss.standard.display_name}, {bss.band.display_name}, "
            f"{bss.channel_width.display_name}, RSSI {bss.rssi_dbm} dBm"
        )
    print()

    print("2. Ranked estimates:")
    print("-" * 80)
    estimator = CapacityEstimator()
    ranked = estimator.estimate_capacity_for_multiple_bss(candidates)

    for position, estimate in enumerate(ranked, start=1):
        downlink = estimate.estimated_effective_downlink_mbps
        print(f"\n   #{position} {estimate.bssid} (NSS {estimate.nss})")
        print(f"      SNR:        {estimate.snr_db:.1f} dB")
        print(f"      Max MCS:    {estimate.max_mcs}")
        if downlink is None:
            print("      Downlink:   no usable MCS")
            continue
        print(f"      Margin:     {estimate.link_margin_db:.1f} dB")
        print(f"      PHY rate:   {estimate.max_phy_rate_mbps:.1f} Mbps")
        print(f"      Downlink:   {downlink:.1f} Mbps")
        print(f"      Uplink:     {estimate.estimated_effective_uplink_mbps:.1f} Mbps")
        print(f"      Available:  {estimate.available_capacity_mbps:.1f} Mbps")
        print(f"      Category:   {estimate.capacity_category.display_name}")
    print()

    print("3. Best two compared:")
    print("-" * 80)
    comparison = compare_capacity(ranked[0], ranked[1])
    print(f"   Preferred:   {comparison.preferred_bssid}")
    print(f"   Difference:  {comparison.capacity_difference_mbps:.1f} Mbps "
          f"({comparison.capacity_difference_pct:.0f}%)")
    print(f"   Significant: {comparison.is_significant_difference}")
    print()


if __name__ == "__main__":
    main()
