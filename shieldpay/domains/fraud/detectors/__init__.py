"""Pattern detectors package.

Exports ALL_DETECTORS (detector instances in evaluation order) and the
individual detector classes for direct use.
"""

from .base import PatternDetector
from .modifiers import OddHourModifier, RoundAmountModifier
from .structural import FlashLaunderingDetector, MuleNetworkDetector, SmurfingDetector

# Evaluation order matters: the last matching structural detector sets the
# pattern label, so later entries are the more specific patterns.
ALL_DETECTORS: list[PatternDetector] = [
    # Structural
    SmurfingDetector(),
    FlashLaunderingDetector(),
    MuleNetworkDetector(),
    # Modifiers
    RoundAmountModifier(),
    OddHourModifier(),
]

__all__ = [
    "ALL_DETECTORS",
    "PatternDetector",
    # Structural
    "SmurfingDetector",
    "FlashLaunderingDetector",
    "MuleNetworkDetector",
    # Modifiers
    "RoundAmountModifier",
    "OddHourModifier",
]
