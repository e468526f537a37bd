"""Capacity estimation from signal observations."""

from linkcap.capacity.estimator import CapacityEstimator
from linkcap.capacity.models import (
    BssCapacityData,
    CapacityClass,
    CapacityComparison,
    CapacityEstimate,
    compare_capacity,
)
from linkcap.capacity.streams import estimate_nss

__all__ = [
    "BssCapacityData",
    "CapacityClass",
    "CapacityComparison",
    "CapacityEstimate",
    "CapacityEstimator",
    "compare_capacity",
    "estimate_nss",
]
