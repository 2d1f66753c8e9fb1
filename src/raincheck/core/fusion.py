"""Weighted fusion of primary and secondary precipitation values."""
from __future__ import annotations

from typing import Optional

PRIMARY_WEIGHT = 0.7
SECONDARY_WEIGHT = 0.3


def combine(primary: Optional[float], secondary: Optional[float]) -> float:
    """
    Fuse two optional readings (mm/h) into one value.

    The primary source is trusted more; the secondary only confirms it.
    Pure and total: every combination of present/absent has a result.
    """
    if primary is not None and secondary is not None:
        return primary * PRIMARY_WEIGHT + secondary * SECONDARY_WEIGHT
    if primary is not None:
        return primary
    if secondary is not None:
        return secondary
    return 0.0
