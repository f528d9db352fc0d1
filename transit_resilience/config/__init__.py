"""
Configuration Package

Environment and YAML settings, time-of-day presets.
"""

from .settings import Settings, TIME_OF_DAY_PRESETS, coefficients_for

__all__ = [
    "Settings",
    "TIME_OF_DAY_PRESETS",
    "coefficients_for",
]
