"""Noise floor, MCS table and SNR computation."""

from linkcap.channel.mcs import McsSnrTable, MCSEntry
from linkcap.channel.noise import NoisePreset, StaticNoiseModel
from linkcap.channel.snr import SNRCalculator, SnrQuality

__all__ = [
    "McsSnrTable",
    "MCSEntry",
    "NoisePreset",
    "SNRCalculator",
    "SnrQuality",
    "StaticNoiseModel",
]
