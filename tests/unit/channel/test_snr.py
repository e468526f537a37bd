"""
Unit tests for SNR calculation, link margin and MCS selection.
"""

import pytest

from linkcap.channel.mcs import McsSnrTable, MCSEntry
from linkcap.channel.noise import StaticNoiseModel
from linkcap.channel.snr import SNRCalculator, SnrQuality
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard


class TestSNRCalculation:
    """Test SNR from RSSI and band noise floor."""

    @pytest.mark.parametrize(
        "rssi,band,expected_snr",
        [
            (-50.0, WiFiBand.BAND_5GHZ, 45.0),
            (-65.0, WiFiBand.BAND_2_4GHZ, 27.0),
            (-45.0, WiFiBand.BAND_6GHZ, 51.0),
            (-95.0, WiFiBand.BAND_5GHZ, 0.0),
            (-100.0, WiFiBand.BAND_2_4GHZ, -8.0),  # Below the noise floor
        ],
    )
    def test_calculate_snr(self, snr_calculator, rssi, band, expected_snr):
        assert snr_calculator.calculate_snr(rssi, band) == pytest.approx(expected_snr)

    def test_snr_with_frequency(self, snr_calculator):
        assert snr_calculator.calculate_snr(-50.0, WiFiBand.BAND_5GHZ, freq_mhz=5180) == 45.0

    @pytest.mark.parametrize("rssi", [-121.0, 0.5, 10.0])
    def test_rssi_out_of_range_raises(self, snr_calculator, rssi):
        with pytest.raises(ValueError, match="RSSI must be between"):
            snr_calculator.calculate_snr(rssi, WiFiBand.BAND_5GHZ)

    @pytest.mark.parametrize("rssi", [-120.0, 0.0])
    def test_rssi_bounds_inclusive(self, snr_calculator, rssi):
        snr_calculator.calculate_snr(rssi, WiFiBand.BAND_5GHZ)

    def test_conservative_model_lowers_snr(self):
        default = SNRCalculator(StaticNoiseModel.default())
        conservative = SNRCalculator(StaticNoiseModel.conservative())
        assert conservative.calculate_snr(-60.0, WiFiBand.BAND_2_4GHZ) == pytest.approx(
            default.calculate_snr(-60.0, WiFiBand.BAND_2_4GHZ) - 4.0
        )


class TestLinkMargin:
    """Test link margin against required SNR."""

    def test_margin(self, snr_calculator):
        """45 dB SNR vs 40.5 dB required for WiFi 6 MCS 11 / 80 MHz / 2SS."""
        margin = snr_calculator.calculate_link_margin(
            45.0, 11, WifiStandard.WIFI_6, ChannelWidth.WIDTH_80MHZ, 2
        )
        assert margin == pytest.approx(4.5)

    def test_negative_margin(self, snr_calculator):
        margin = snr_calculator.calculate_link_margin(
            10.0, 9, WifiStandard.WIFI_5, ChannelWidth.WIDTH_20MHZ, 1
        )
        assert margin == pytest.approx(-16.0)

    def test_defaults(self, snr_calculator):
        """Defaults are WiFi 6, 80 MHz, 1 stream."""
        assert snr_calculator.calculate_link_margin(40.0, 0) == pytest.approx(40.0 - 6.0 - 6.0)


class TestMaxAchievableMCS:
    """Test highest sustainable MCS selection."""

    @pytest.mark.parametrize(
        "snr,standard,width,nss,expected",
        [
            (45.0, WifiStandard.WIFI_6, ChannelWidth.WIDTH_80MHZ, 2, 11),
            (27.0, WifiStandard.WIFI_4, ChannelWidth.WIDTH_20MHZ, 1, 7),
            (51.0, WifiStandard.WIFI_7, ChannelWidth.WIDTH_320MHZ, 8, 10),
            (20.0, WifiStandard.WIFI_5, ChannelWidth.WIDTH_80MHZ, 2, 1),
            (9.0, WifiStandard.WIFI_6, ChannelWidth.WIDTH_20MHZ, 1, 0),
        ],
    )
    def test_selection(self, snr_calculator, snr, standard, width, nss, expected):
        assert snr_calculator.max_achievable_mcs(snr, standard, width, nss) == expected

    def test_too_weak_returns_none(self, snr_calculator):
        assert (
            snr_calculator.max_achievable_mcs(
                0.0, WifiStandard.WIFI_6, ChannelWidth.WIDTH_20MHZ, 1
            )
            is None
        )

    def test_wifi4_never_selects_ht_stream_index(self, snr_calculator):
        """Search covers per-stream indexes only."""
        mcs = snr_calculator.max_achievable_mcs(
            90.0, WifiStandard.WIFI_4, ChannelWidth.WIDTH_20MHZ, 4
        )
        assert mcs == 7

    def test_larger_margin_never_raises_mcs(self, snr_calculator):
        selected = []
        for margin in [0.0, 3.0, 6.0, 10.0, 20.0, 40.0]:
            mcs = snr_calculator.max_achievable_mcs(
                35.0, WifiStandard.WIFI_6, ChannelWidth.WIDTH_40MHZ, 1, min_margin=margin
            )
            selected.append(-1 if mcs is None else mcs)
        assert selected == sorted(selected, reverse=True)
        assert selected[-1] == -1

    def test_zero_margin_allows_exact_fit(self, snr_calculator):
        """SNR exactly at the requirement is enough with zero margin."""
        mcs = snr_calculator.max_achievable_mcs(
            22.0, WifiStandard.WIFI_4, ChannelWidth.WIDTH_20MHZ, 1, min_margin=0.0
        )
        assert mcs == 7

    def test_custom_table_changes_selection(self):
        entry = MCSEntry(
            mcs_index=11,
            modulation="1024qam",
            code_rate=5 / 6,
            min_snr_db=25.0,
            bits_per_symbol=10,
        )
        calculator = SNRCalculator(mcs_table=McsSnrTable({WifiStandard.WIFI_6: [entry]}))
        assert (
            calculator.max_achievable_mcs(
                30.0, WifiStandard.WIFI_6, ChannelWidth.WIDTH_20MHZ, 1
            )
            == 11
        )


class TestSnrQuality:
    """Test SNR classification helpers."""

    @pytest.mark.parametrize(
        "snr,quality",
        [
            (45.0, SnrQuality.EXCELLENT),
            (40.0, SnrQuality.EXCELLENT),
            (35.0, SnrQuality.VERY_GOOD),
            (25.0, SnrQuality.GOOD),
            (15.0, SnrQuality.FAIR),
            (12.0, SnrQuality.POOR),
            (5.0, SnrQuality.VERY_POOR),
            (-10.0, SnrQuality.VERY_POOR),
        ],
    )
    def test_snr_quality(self, snr: float, quality: SnrQuality):
        assert SNRCalculator.snr_quality(snr) == quality

    def test_scores_decrease(self):
        scores = [q.score for q in SnrQuality]
        assert scores == sorted(scores, reverse=True)

    def test_display_name(self):
        assert SnrQuality.VERY_GOOD.display_name == "Very Good"

    def test_reliability_thresholds(self):
        assert SNRCalculator.is_reliable_snr(15.0)
        assert not SNRCalculator.is_reliable_snr(14.9)
        assert SNRCalculator.supports_high_performance(25.0)
        assert not SNRCalculator.supports_high_performance(24.9)
