"""
Behavioral spending patterns
Rapid successive purchases, weekend-heavy spending and categories whose
recent transactions run above their own average.
"""
from datetime import timedelta
from typing import Any, Dict, List

from config import (
    BEHAVIORAL_MIN_EXPENSES,
    RAPID_SPENDING_HOURS,
    RAPID_SPENDING_RATIO,
    WEEKEND_SPENDING_RATIO
)
from utils.logger import get_logger
from utils.transactions import expenses_of

logger = get_logger(__name__)


def count_rapid_spending(expenses: List[Dict[str, Any]], window_hours: float = RAPID_SPENDING_HOURS) -> int:
    """Number of consecutive expense pairs closer together than the window"""
    ordered = sorted(expenses, key=lambda t: t['date'])
    window = timedelta(hours=window_hours)
    return sum(
        1 for previous, current in zip(ordered, ordered[1:])
        if current['date'] - previous['date'] < window
    )


def weekend_weekday_totals(expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
    weekend = [t for t in expenses if t['date'].weekday() >= 5]
    weekday = [t for t in expenses if t['date'].weekday() < 5]
    return {
        'weekend_total': sum(t['amount'] for t in weekend),
        'weekday_total': sum(t['amount'] for t in weekday),
        'weekend_count': len(weekend)
    }


def detect_behavioral_patterns(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Detect rapid-spending and weekend-spending patterns.

    Args:
        transactions: Normalized transactions

    Returns:
        Suggestions; empty with fewer than 5 expenses
    """
    patterns = []
    expenses = expenses_of(transactions)

    if len(expenses) < BEHAVIORAL_MIN_EXPENSES:
        return patterns

    rapid_count = count_rapid_spending(expenses)
    if rapid_count > len(expenses) * RAPID_SPENDING_RATIO:
        patterns.append({
            'type': 'behavioral_rapid_spending',
            'count': rapid_count,
            'message': f"{rapid_count} instances of rapid spending detected",
            'severity': 'medium',
            'action': 'Implement a cooling-off period for purchases',
            'context': 'Multiple purchases in short timeframes may indicate impulse spending'
        })

    totals = weekend_weekday_totals(expenses)
    weekend_total = totals['weekend_total']
    weekday_total = totals['weekday_total']
    if totals['weekend_count'] > 0 and weekend_total > weekday_total * WEEKEND_SPENDING_RATIO:
        if weekday_total > 0:
            ratio = weekend_total / weekday_total
            message = f"Weekend spending is {ratio:.1f}x higher than weekdays"
        else:
            ratio = None
            message = "All of your spending happened on weekends"
        patterns.append({
            'type': 'behavioral_weekend_spending',
            'weekend_ratio': round(ratio, 1) if ratio is not None else None,
            'amount': weekend_total,
            'message': message,
            'severity': 'low',
            'action': 'Plan weekend activities with budget in mind',
            'context': 'Higher weekend spending is common but should be monitored'
        })

    if patterns:
        logger.debug(f"Behavioral patterns found: {[p['type'] for p in patterns]}")
    return patterns


def unusual_categories(category_groups: Dict[str, Dict[str, Any]]) -> List[str]:
    """
    Categories whose last three transactions average 50% above the category mean.

    Args:
        category_groups: Output of TransactionAggregator.aggregate_by_category
    """
    flagged = []
    for category, data in category_groups.items():
        if data['count'] < 3:
            continue
        average = data['total'] / data['count']
        latest = sorted(data['items'], key=lambda t: t['date'])[-3:]
        latest_average = sum(t['amount'] for t in latest) / len(latest)
        if latest_average > average * 1.5:
            flagged.append(category)
    return flagged


def category_risk_level(category_groups: Dict[str, Dict[str, Any]], category: str) -> str:
    """
    Recent-versus-average risk for one category.

    Needs at least 5 transactions: last five averaging over 1.8x the mean is
    high, over 1.3x is medium.
    """
    data = category_groups.get(category)
    if not data or data['count'] < 5:
        return 'low'

    average = data['total'] / data['count']
    recent = sorted(data['items'], key=lambda t: t['date'])[-5:]
    recent_average = sum(t['amount'] for t in recent) / len(recent)

    if recent_average > average * 1.8:
        return 'high'
    if recent_average > average * 1.3:
        return 'medium'
    return 'low'
