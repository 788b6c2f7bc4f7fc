"""
Utils Package - Core utilities for the animals store
Contains logging helpers
"""

from .logger import Logger
from .structured_logging import setup_logging


__all__ = [
    "Logger",
    "setup_logging",
]
