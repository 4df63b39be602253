"""
Behavioral spending patterns

- Rapid successive purchases
- Weekend versus weekday spending
- Categories trending above their own average
"""
from behavioral.patterns import (
    detect_behavioral_patterns,
    count_rapid_spending,
    unusual_categories,
    category_risk_level
)

__all__ = [
    "detect_behavioral_patterns",
    "count_rapid_spending",
    "unusual_categories",
    "category_risk_level"
]
