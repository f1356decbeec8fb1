"""
Common utilities and shared modules.
"""

from admedia.common.config import get_settings, settings
from admedia.common.exceptions import AdMediaError
from admedia.common.logger import get_logger, log_context, logger

__all__ = [
    "settings",
    "get_settings",
    "logger",
    "get_logger",
    "log_context",
    "AdMediaError",
]
