"""
Z-score outlier detection over same-category spending history
"""
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from scipy import stats

from config import ZSCORE_MIN_POINTS, ZSCORE_THRESHOLD


def zscores(values: Sequence[float]) -> np.ndarray:
    """
    Population z-scores (ddof=0).

    A constant series has no spread; every score is 0 instead of NaN.
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return data
    if np.all(data == data[0]):
        return np.zeros_like(data)
    return stats.zscore(data, ddof=0)


def category_zscore(
    transaction: Dict[str, Any],
    history: List[Dict[str, Any]],
    min_points: int = ZSCORE_MIN_POINTS
) -> Optional[float]:
    """
    Z-score of a transaction within the expenses of its category.

    Args:
        transaction: Normalized expense transaction
        history: Normalized transactions to use as baseline; the transaction
            joins the series when it is not already part of it

    Returns:
        The z-score, or None with insufficient history
    """
    peers = [
        t for t in history
        if t['type'] == 'expense' and t['category'] == transaction['category']
    ]
    position = next((i for i, t in enumerate(peers) if t is transaction), None)
    if position is None:
        peers.append(transaction)
        position = len(peers) - 1

    if len(peers) < min_points:
        return None
    return float(zscores([t['amount'] for t in peers])[position])


def is_unusual(
    transaction: Dict[str, Any],
    history: List[Dict[str, Any]],
    threshold: float = ZSCORE_THRESHOLD
) -> bool:
    """True when the transaction sits at least `threshold` deviations from its category mean"""
    z = category_zscore(transaction, history)
    return z is not None and abs(z) >= threshold
