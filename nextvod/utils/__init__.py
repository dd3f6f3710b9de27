"""Utility helpers for NextVOD"""

from nextvod.utils.logging_setup import parse_size, setup_logging

__all__ = ["parse_size", "setup_logging"]
