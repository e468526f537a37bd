"""linkcap - WiFi link capacity estimation from signal observations."""

from linkcap.capacity import (
    BssCapacityData,
    CapacityClass,
    CapacityComparison,
    CapacityEstimate,
    CapacityEstimator,
    compare_capacity,
)
from linkcap.channel import SNRCalculator, StaticNoiseModel
from linkcap.phy import ChannelWidth, WiFiBand, WifiStandard

__version__ = "0.1.0"

__all__ = [
    "BssCapacityData",
    "CapacityClass",
    "CapacityComparison",
    "CapacityEstimate",
    "CapacityEstimator",
    "ChannelWidth",
    "SNRCalculator",
    "StaticNoiseModel",
    "WiFiBand",
    "WifiStandard",
    "compare_capacity",
]
