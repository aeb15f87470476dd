"""
Utils Package - Core utilities for the activity tracker
Contains configuration, logging, calendar and enumeration utilities
"""

from .config_loader import ConfigLoader, TrackerConfig
from .enums import Enums
from .logger import Logger


__all__ = [
    "ConfigLoader",
    "TrackerConfig",
    "Enums",
    "Logger",
]
