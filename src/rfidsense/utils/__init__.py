"""Shared helpers for rfidsense."""

from .logging import get_logger
from .numeric import EPS, TIME_EPS, finite_mask, finite_values, median, median_abs_deviation, safe_div

__all__ = [
    "get_logger",
    "EPS",
    "TIME_EPS",
    "finite_mask",
    "finite_values",
    "median",
    "median_abs_deviation",
    "safe_div",
]
