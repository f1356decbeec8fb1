"""
Campaign analytics: impression/click counters and CTR.
"""

from admedia.analytics.aggregator import (
    MAX_COUNTER,
    CampaignAnalytics,
    apply_increment,
    compute_ctr,
    format_ctr,
    recompute,
    summarize,
)

__all__ = [
    "MAX_COUNTER",
    "CampaignAnalytics",
    "apply_increment",
    "compute_ctr",
    "format_ctr",
    "recompute",
    "summarize",
]
