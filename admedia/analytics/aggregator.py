"""
Campaign analytics aggregation and click-through-rate computation.

All CTR arithmetic in AdMedia goes through this module: the persistence
hook, the analytics update endpoint and the dashboard totals.  Every
function here is pure; callers persist the returned values.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from numbers import Real
from typing import Any

from admedia.common.exceptions import InvalidInputError, InvariantViolationError
from admedia.common.utils import safe_divide

# Largest value a counter column (BIGINT) can hold
MAX_COUNTER = 2**63 - 1


@dataclass(frozen=True)
class CampaignAnalytics:
    """Impression/click counters with their derived CTR (percent)."""

    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0

    def to_dict(self, formatted: bool = False) -> dict[str, Any]:
        return {
            "impressions": self.impressions,
            "clicks": self.clicks,
            "ctr": format_ctr(self.ctr) if formatted else self.ctr,
        }


def compute_ctr(impressions: int, clicks: int) -> float:
    """clicks / impressions * 100, or 0 when there are no impressions."""
    if impressions <= 0:
        return 0.0
    return safe_divide(clicks, impressions) * 100


def recompute(impressions: int, clicks: int) -> CampaignAnalytics:
    """Re-derive CTR from stored counters. Idempotent."""
    return CampaignAnalytics(
        impressions=impressions,
        clicks=clicks,
        ctr=compute_ctr(impressions, clicks),
    )


def _as_count(value: Any, field: str) -> int:
    """Coerce an increment to an int counter, or raise InvalidInputError."""
    # bool is a Real subclass but never a counter
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(
            "Impressions and clicks must be numbers",
            details={field: repr(value)},
        )
    if isinstance(value, int):
        count = value
    else:
        number = float(value)
        if not math.isfinite(number) or not number.is_integer():
            raise InvalidInputError(
                "Impressions and clicks must be whole numbers",
                details={field: repr(value)},
            )
        count = int(number)

    if count > MAX_COUNTER:
        raise InvalidInputError(
            "Impressions and clicks are too large",
            details={field: repr(value), "max": MAX_COUNTER},
        )
    return count


def apply_increment(
    current: CampaignAnalytics,
    incoming_impressions: Any,
    incoming_clicks: Any,
) -> CampaignAnalytics:
    """
    Add an impressions/clicks increment to ``current``.

    Checks run in order: both increments numeric and within MAX_COUNTER,
    both non-negative, the resulting totals within MAX_COUNTER, then the
    resulting clicks must not exceed the resulting impressions.

    Args:
        current: Stored counters for the campaign.
        incoming_impressions: Impressions to add.
        incoming_clicks: Clicks to add.

    Returns:
        New analytics with CTR re-derived from the new counters.

    Raises:
        InvalidInputError: An increment is non-numeric, negative, or pushes
            a counter past MAX_COUNTER.
        InvariantViolationError: New clicks would exceed new impressions.
    """
    impressions = _as_count(incoming_impressions, "impressions")
    clicks = _as_count(incoming_clicks, "clicks")

    if impressions < 0 or clicks < 0:
        raise InvalidInputError(
            "Impressions and clicks cannot be negative",
            details={"impressions": impressions, "clicks": clicks},
        )

    new_impressions = current.impressions + impressions
    new_clicks = current.clicks + clicks

    if new_impressions > MAX_COUNTER or new_clicks > MAX_COUNTER:
        raise InvalidInputError(
            "Impressions and clicks would exceed the counter limit",
            details={"impressions": new_impressions, "clicks": new_clicks, "max": MAX_COUNTER},
        )

    if new_clicks > new_impressions:
        raise InvariantViolationError(
            "Clicks cannot be greater than impressions",
            details={"impressions": new_impressions, "clicks": new_clicks},
        )

    return recompute(new_impressions, new_clicks)


def summarize(items: Iterable[CampaignAnalytics]) -> CampaignAnalytics:
    """Total the counters of several campaigns and derive the overall CTR."""
    impressions = 0
    clicks = 0
    for item in items:
        impressions += item.impressions
        clicks += item.clicks
    return recompute(impressions, clicks)


def format_ctr(ctr: float) -> str:
    """Render a CTR with two decimals, e.g. ``9.33``."""
    return f"{ctr:.2f}"
