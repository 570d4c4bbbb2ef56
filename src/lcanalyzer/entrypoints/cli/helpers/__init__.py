"""CLI helpers for lcanalyzer.

Logger-level option parsing and stderr message emitters with emoji→ASCII fallbacks.
"""

from .log_level_parser import parse_log_level
from .messages import success, warn

__all__ = ["parse_log_level", "success", "warn"]
