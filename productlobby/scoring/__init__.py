"""Pure, stateless calculators over aggregate campaign counts.

Nothing in this package touches the database or the network; the server's
services gather the counts and hand them in.

Modules:
- signal_score: weighted-factor credibility score and tiers
- business_case: revenue scenarios and confidence for a responding brand
- sentiment: keyword-based comment sentiment
- retention: supporter retention percentages
- weather: weather metaphor for campaign health
- engagement: per-supporter engagement scores
- milestones: milestone progress
- surveys: survey result aggregation, insights and export
- analytics: analytics export over contribution events
- utils: clamp, percentile and percentage-change helpers
"""

from .signal_score import (
    SIGNAL_THRESHOLDS,
    SignalScoreInputs,
    SignalScoreResult,
    SignalTier,
    compute_signal_score,
    tier_for_score,
)
from .utils import calculate_percentile, clamp, percentage_change

__all__ = [
    "SIGNAL_THRESHOLDS",
    "SignalScoreInputs",
    "SignalScoreResult",
    "SignalTier",
    "calculate_percentile",
    "clamp",
    "compute_signal_score",
    "percentage_change",
    "tier_for_score",
]
