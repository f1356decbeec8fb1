"""
Utility functions for AdMedia.
"""

from __future__ import annotations

import hashlib
import time
import uuid


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def current_timestamp() -> int:
    """Get current Unix timestamp in seconds."""
    return int(time.time())


def sha1_hex(s: str) -> str:
    """Hex SHA-1 digest of a string."""
    return hashlib.sha1(s.encode()).hexdigest()


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safe division that returns default on zero division."""
    if denominator == 0:
        return default
    return numerator / denominator
