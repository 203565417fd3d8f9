"""
Spike detection between two adjacent counting windows.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

SPIKE_THRESHOLD_PERCENT = 30.0


@dataclass(frozen=True)
class SpikeResult:
    """Outcome of comparing a current count against the previous window."""

    is_spike: bool
    increase: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


NO_SPIKE = SpikeResult(is_spike=False, increase=0, percentage=0.0)


def detect_spike(current: int, previous: Optional[int]) -> SpikeResult:
    """
    Flag a spike when the count grew by at least SPIKE_THRESHOLD_PERCENT.

    Args:
        current: Count in the current window
        previous: Count in the previous window; None or 0 means no baseline

    Returns:
        SpikeResult, never a spike when there is no baseline
    """
    if not previous:
        return NO_SPIKE

    increase = current - previous
    raw_percentage = increase / previous * 100
    return SpikeResult(
        is_spike=raw_percentage >= SPIKE_THRESHOLD_PERCENT,
        increase=increase,
        # Reported to 2 decimals, halves rounded up
        percentage=math.floor(raw_percentage * 100 + 0.5) / 100,
    )


# Negative-sentiment spikes use the same rule over negative counts
detect_negative_spike = detect_spike
