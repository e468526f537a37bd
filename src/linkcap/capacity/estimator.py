"""
Capacity estimation for a BSS.

Pipeline:
1. SNR = RSSI - noise floor
2. Highest MCS with at least the minimum link margin
3. PHY rate from MCS, channel width and NSS
4. Effective downlink = PHY rate * standard efficiency (50/60/70/75%)
5. Uplink = downlink * uplink ratio
6. Available downlink = effective downlink * (1 - utilization)
"""

import logging
from typing import Optional, Sequence

import numpy as np

from linkcap.capacity.models import (
    BssCapacityData,
    CapacityEstimate,
    validate_utilization,
)
from linkcap.capacity.streams import estimate_nss
from linkcap.channel.mcs import effective_throughput_mbps, phy_rate_mbps
from linkcap.channel.snr import DEFAULT_MIN_MARGIN_DB, SNRCalculator, validate_rssi
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard

logger = logging.getLogger(__name__)

DEFAULT_UPLINK_RATIO = 0.75


def _validate_uplink_ratio(ratio: float) -> None:
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"Uplink ratio must be 0.0-1.0: {ratio}")


class CapacityEstimator:
    """Estimate achievable throughput from signal observations."""

    def __init__(
        self,
        snr_calculator: Optional[SNRCalculator] = None,
        uplink_ratio: float = DEFAULT_UPLINK_RATIO,
        min_link_margin_db: float = DEFAULT_MIN_MARGIN_DB,
    ):
        """
        Initialize capacity estimator.

        Args:
            snr_calculator: SNR calculator (default: default noise floors)
            uplink_ratio: Uplink/downlink capacity ratio (0.0-1.0)
            min_link_margin_db: Default margin required when selecting MCS
        """
        _validate_uplink_ratio(uplink_ratio)
        self.snr_calculator = snr_calculator or SNRCalculator()
        self.uplink_ratio = uplink_ratio
        self.min_link_margin_db = min_link_margin_db

    def estimate_capacity(
        self,
        bssid: str,
        rssi_dbm: float,
        band: WiFiBand,
        standard: WifiStandard,
        channel_width: ChannelWidth,
        nss: Optional[int] = None,
        channel_utilization_pct: Optional[float] = None,
        uplink_ratio: Optional[float] = None,
        min_link_margin_db: Optional[float] = None,
    ) -> CapacityEstimate:
        """
        Estimate capacity for a BSS.

        Args:
            bssid: MAC address of the AP
            rssi_dbm: Received signal strength in dBm
            band: WiFi band
            standard: WiFi standard
            channel_width: Channel bandwidth
            nss: Spatial streams (None = estimate from standard and width)
            channel_utilization_pct: Current channel utilization 0-100% (None = unknown)
            uplink_ratio: Override of the estimator's uplink/downlink ratio
            min_link_margin_db: Override of the estimator's minimum link margin

        Returns:
            Capacity estimate; throughput fields are None if no MCS is usable

        Raises:
            ValueError: If RSSI, utilization, uplink ratio or NSS is out of range
        """
        validate_rssi(rssi_dbm)
        if channel_utilization_pct is not None:
            validate_utilization(channel_utilization_pct)
        if uplink_ratio is None:
            uplink_ratio = self.uplink_ratio
        _validate_uplink_ratio(uplink_ratio)
        if min_link_margin_db is None:
            min_link_margin_db = self.min_link_margin_db

        effective_nss = nss if nss is not None else estimate_nss(standard, channel_width)

        snr = self.snr_calculator.calculate_snr(rssi_dbm, band)
        max_mcs = self.snr_calculator.max_achievable_mcs(
            snr_db=snr,
            standard=standard,
            channel_width=channel_width,
            nss=effective_nss,
            min_margin=min_link_margin_db,
        )

        link_margin = None
        phy_rate = None
        downlink = None
        uplink = None
        if max_mcs is not None:
            link_margin = self.snr_calculator.calculate_link_margin(
                snr, max_mcs, standard, channel_width, effective_nss
            )
            phy_rate = phy_rate_mbps(max_mcs, standard, channel_width, effective_nss)
            if phy_rate is not None:
                downlink = effective_throughput_mbps(phy_rate, standard)
                uplink = downlink * uplink_ratio

        if downlink is not None and channel_utilization_pct is not None:
            adjusted = max(downlink * (1.0 - channel_utilization_pct / 100.0), 0.0)
        else:
            adjusted = downlink

        logger.debug(
            f"{bssid}: snr={snr:.1f}dB nss={effective_nss} mcs={max_mcs} "
            f"phy={phy_rate} downlink={downlink}"
        )

        return CapacityEstimate(
            bssid=bssid,
            band=band,
            standard=standard,
            channel_width=channel_width,
            nss=effective_nss,
            snr_db=snr,
            max_mcs=max_mcs,
            link_margin_db=link_margin,
            max_phy_rate_mbps=phy_rate,
            estimated_effective_downlink_mbps=downlink,
            estimated_effective_uplink_mbps=uplink,
            utilization_adjusted_downlink_mbps=adjusted,
        )

    def estimate_bss(self, bss: BssCapacityData) -> CapacityEstimate:
        """Estimate capacity for a BssCapacityData record."""
        return self.estimate_capacity(
            bssid=bss.bssid,
            rssi_dbm=bss.rssi_dbm,
            band=bss.band,
            standard=bss.standard,
            channel_width=bss.channel_width,
            nss=bss.nss,
            channel_utilization_pct=bss.channel_utilization_pct,
        )

    def estimate_capacity_for_multiple_bss(
        self, bss_data_list: Sequence[BssCapacityData]
    ) -> list[CapacityEstimate]:
        """
        Estimate capacity for several BSSs.

        Args:
            bss_data_list: BSS observations

        Returns:
            Estimates sorted by effective downlink, highest first (missing
            downlink counts as 0.0)

        Raises:
            ValueError: If the list is empty
        """
        if not bss_data_list:
            raise ValueError("BSS data list cannot be empty")

        estimates = [self.estimate_bss(bss) for bss in bss_data_list]
        return sorted(estimates, key=lambda e: e.ranking_downlink_mbps, reverse=True)

    def find_best_capacity_bss(
        self, bss_data_list: Sequence[BssCapacityData]
    ) -> CapacityEstimate:
        """Return the estimate with the highest effective downlink."""
        return self.estimate_capacity_for_multiple_bss(bss_data_list)[0]

    def downlink_vs_rssi(
        self,
        band: WiFiBand,
        standard: WifiStandard,
        channel_width: ChannelWidth,
        nss: Optional[int] = None,
        rssi_min: float = -90.0,
        rssi_max: float = -30.0,
        num_points: int = 61,
    ) -> tuple[np.ndarray, np.ndarray]:
        """
        Calculate effective downlink over an RSSI range.

        Args:
            band: WiFi band
            standard: WiFi standard
            channel_width: Channel bandwidth
            nss: Spatial streams (None = estimate)
            rssi_min: Lowest RSSI in dBm
            rssi_max: Highest RSSI in dBm
            num_points: Number of points in curve

        Returns:
            Tuple of (rssi_dbm_array, downlink_mbps_array); NaN where no MCS
            is usable
        """
        rssi = np.linspace(rssi_min, rssi_max, num_points)
        downlink = []
        for value in rssi:
            estimate = self.estimate_capacity(
                bssid="sweep",
                rssi_dbm=float(value),
                band=band,
                standard=standard,
                channel_width=channel_width,
                nss=nss,
            )
            mbps = estimate.estimated_effective_downlink_mbps
            downlink.append(np.nan if mbps is None else mbps)
        return rssi, np.array(downlink, dtype=float)
