"""
Smart suggestions: severity-ranked, actionable spending advice
"""
from suggestions.engine import SuggestionEngine, Severity, parse_category_breakdown

__all__ = [
    "SuggestionEngine",
    "Severity",
    "parse_category_breakdown"
]
