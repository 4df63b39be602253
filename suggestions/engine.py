"""
Smart suggestion engine
Runs independent detectors over the same transactions and merges their
output into one severity-ranked list.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from config import (
    LARGE_EXPENSE_MAX_ALERTS,
    LARGE_EXPENSE_THRESHOLD,
    RECURRING_CATEGORIES,
    RECURRING_SPEND_THRESHOLD,
    SUGGESTION_LIMIT
)
from analytics.aggregator import TransactionAggregator
from analytics.enhanced import EnhancedAnalyticsAdapter
from analytics.outliers import is_unusual
from behavioral.patterns import detect_behavioral_patterns
from utils.logger import get_logger
from utils.transactions import coerce_number, expenses_of

logger = get_logger(__name__)


class Severity(Enum):
    """Suggestion severity, highest first"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


SEVERITY_ORDER = {
    Severity.HIGH.value: 4,
    Severity.MEDIUM.value: 3,
    Severity.LOW.value: 2,
    Severity.INFO.value: 1
}


def parse_category_breakdown(value: Any) -> Optional[Dict[str, float]]:
    """
    Accept {category: amount} or [{'category', 'amount'}].

    Returns None when the value is missing, empty or malformed.
    """
    if not value:
        return None

    totals = {}
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = [
            (entry.get('category'), entry.get('amount'))
            for entry in value if isinstance(entry, dict)
        ]
    else:
        logger.warning(f"Ignoring category breakdown of type {type(value).__name__}")
        return None

    for category, amount in items:
        number = coerce_number(amount)
        if not category or number is None:
            logger.warning(f"Ignoring malformed category breakdown entry: {category!r}={amount!r}")
            return None
        totals[str(category)] = abs(number)
    return totals or None


class SuggestionEngine:
    """
    Suggestion generator.

    Detectors:
    - High spending versus the per-category average
    - Budget threshold alerts
    - Savings rate opportunity
    - Recurring expense review
    - Large and statistically unusual expenses
    - Enhanced analytics (volatility, income diversity, timing, forecast)
    - Behavioral timing patterns
    """

    def __init__(self, limit: int = SUGGESTION_LIMIT):
        self.limit = limit
        self.aggregator = TransactionAggregator()

    def suggest(
        self,
        transactions: List[Dict[str, Any]],
        budgets: List[Dict[str, Any]],
        category_breakdown: Any = None,
        timeframe: str = 'monthly',
        enhanced: Optional[EnhancedAnalyticsAdapter] = None
    ) -> List[Dict[str, Any]]:
        """
        Generate ranked suggestions.

        Args:
            transactions: Normalized transactions
            budgets: Normalized budgets
            category_breakdown: Optional caller-computed expense totals per category
            timeframe: 'monthly' or 'yearly', used in messages
            enhanced: Validated enhanced analytics

        Returns:
            At most `limit` suggestions, highest severity first
        """
        if not transactions:
            return []

        enhanced = enhanced or EnhancedAnalyticsAdapter(None)
        expense_groups = self.aggregator.aggregate_by_category(expenses_of(transactions))
        category_totals = parse_category_breakdown(category_breakdown)
        if category_totals is None:
            category_totals = {
                entry['category']: entry['amount']
                for entry in self.aggregator.category_breakdown(transactions)
            }

        suggestions = []
        suggestions.extend(self._category_suggestions(category_totals, expense_groups, budgets))
        suggestions.extend(self._savings_suggestions(transactions, enhanced))
        suggestions.extend(self._recurring_suggestions(expense_groups, timeframe))
        suggestions.extend(self._large_expense_suggestions(transactions))
        if enhanced.is_present:
            suggestions.extend(self._enhanced_suggestions(enhanced))
        suggestions.extend(detect_behavioral_patterns(transactions))

        suggestions.sort(key=lambda s: SEVERITY_ORDER.get(s['severity'], 0), reverse=True)
        logger.info(f"{len(suggestions)} suggestions generated, returning top {self.limit}")
        return suggestions[:self.limit]

    # === Detectors ===

    def _category_suggestions(
        self,
        category_totals: Dict[str, float],
        expense_groups: Dict[str, Dict[str, Any]],
        budgets: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        suggestions = []
        if not category_totals:
            return suggestions

        average = sum(category_totals.values()) / len(category_totals)
        budget_by_category = {}
        for budget in budgets:
            budget_by_category.setdefault(budget['category'], budget)

        for category, spent in category_totals.items():
            if average > 0 and spent > average * 1.5:
                percentage_above = round((spent - average) / average * 100, 1)
                suggestions.append({
                    'type': 'high_spending',
                    'category': category,
                    'amount': spent,
                    'average': average,
                    'percentage': percentage_above,
                    'message': f"You're spending {percentage_above}% more on {category.lower()} than average",
                    'severity': Severity.HIGH.value if percentage_above > 100 else Severity.MEDIUM.value,
                    'context': self._spending_context(expense_groups.get(category))
                })

            budget = budget_by_category.get(category)
            if budget and spent > budget['limit'] * 0.8:
                percentage_used = spent / budget['limit'] * 100
                if percentage_used >= 100:
                    severity = Severity.HIGH.value
                elif percentage_used >= 90:
                    severity = Severity.MEDIUM.value
                else:
                    severity = Severity.LOW.value
                suggestions.append({
                    'type': 'budget_alert',
                    'category': category,
                    'amount': spent,
                    'percentage': round(percentage_used, 1),
                    'message': f"You've used {percentage_used:.1f}% of your {category} budget",
                    'severity': severity,
                    'action': 'Immediate budget review needed' if percentage_used >= 100 else 'Consider adjusting budget'
                })

        return suggestions

    def _spending_context(self, group: Optional[Dict[str, Any]]) -> str:
        if not group or not group['count']:
            return 'No transaction details available'
        return f"{group['count']} transactions, averaging ${group['total'] / group['count']:.2f} each"

    def _savings_suggestions(
        self,
        transactions: List[Dict[str, Any]],
        enhanced: EnhancedAnalyticsAdapter
    ) -> List[Dict[str, Any]]:
        totals = self.aggregator.aggregate_by_type(transactions)
        income = totals['income_total']
        expenses = totals['expense_total']
        if income <= 0:
            return []

        savings_rate = (income - expenses) / income * 100
        if savings_rate >= 15:
            return []

        diversity = enhanced.diversity_score() or 0
        return [{
            'type': 'savings_opportunity',
            'percentage': round(savings_rate, 1),
            'message': f"Your savings rate is {savings_rate:.1f}%. Target 20% for better financial health",
            'severity': Severity.HIGH.value if savings_rate < 5 else Severity.MEDIUM.value,
            'context': (
                'Consider diversifying income to increase savings capacity' if diversity < 50
                else 'Review discretionary spending'
            )
        }]

    def _recurring_suggestions(
        self,
        expense_groups: Dict[str, Dict[str, Any]],
        timeframe: str
    ) -> List[Dict[str, Any]]:
        suggestions = []
        period = 'yearly' if timeframe == 'yearly' else 'monthly'

        for category in RECURRING_CATEGORIES:
            group = expense_groups.get(category)
            if not group or group['total'] <= RECURRING_SPEND_THRESHOLD:
                continue
            spent = group['total']
            suggestions.append({
                'type': 'recurring_optimization',
                'category': category,
                'amount': spent,
                'avg_transaction': spent / group['count'],
                'message': f"Review {category.lower()} expenses: ${spent:.2f} {period}",
                'severity': Severity.MEDIUM.value if spent > 200 else Severity.LOW.value,
                'action': f"Consider bundling or negotiating {category.lower()} services"
            })
        return suggestions

    def _large_expense_suggestions(self, transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        suggestions = []
        large = [
            t for t in transactions
            if t['type'] == 'expense' and t['amount'] > LARGE_EXPENSE_THRESHOLD
        ][:LARGE_EXPENSE_MAX_ALERTS]

        for tx in large:
            unusual = is_unusual(tx, transactions)
            suggestions.append({
                'type': 'large_expense',
                'amount': tx['amount'],
                'category': tx['category'],
                'date': tx['date'].isoformat(),
                'unusual': unusual,
                'message': (
                    f"Large {'unusual ' if unusual else ''}expense: "
                    f"${tx['amount']:.2f} on {tx['category'].lower()}"
                ),
                'severity': Severity.MEDIUM.value if unusual else Severity.INFO.value,
                'context': (
                    'This spending pattern differs from your usual habits' if unusual
                    else 'Consider if this aligns with your financial goals'
                )
            })
        return suggestions

    def _enhanced_suggestions(self, enhanced: EnhancedAnalyticsAdapter) -> List[Dict[str, Any]]:
        suggestions = []

        volatility = enhanced.volatility()
        if volatility is not None and volatility > 100:
            suggestions.append({
                'type': 'cash_flow_volatility',
                'volatility': volatility,
                'message': f"High cash flow volatility detected ({volatility:.0f})",
                'severity': Severity.MEDIUM.value,
                'action': 'Consider building a larger emergency fund',
                'context': 'Volatile cash flow can impact financial stability'
            })

        diversity = enhanced.diversity_score()
        if diversity is not None and diversity < 50:
            suggestions.append({
                'type': 'income_diversity',
                'percentage': diversity,
                'message': f"Low income diversity ({diversity:.0f}%)",
                'severity': Severity.MEDIUM.value,
                'action': 'Explore additional income streams',
                'context': 'Multiple income sources provide better financial security'
            })

        peak = enhanced.peak_time_slot()
        if peak and peak['average'] > 100:
            suggestions.append({
                'type': 'time_pattern',
                'time_slot': peak['time_slot'],
                'amount': peak['average'],
                'message': (
                    f"Highest spending occurs in the {peak['time_slot'].lower()} "
                    f"(avg ${peak['average']:.2f})"
                ),
                'severity': Severity.INFO.value,
                'action': 'Review spending habits during this time',
                'context': 'Awareness of spending patterns can help with budgeting'
            })

        risk_factors = enhanced.risk_factors()
        if risk_factors:
            suggestions.append({
                'type': 'forecast_alert',
                'risk_count': len(risk_factors),
                'message': f"{len(risk_factors)} forecast risk factors identified",
                'severity': (
                    Severity.MEDIUM.value if enhanced.forecast_confidence() == 'low'
                    else Severity.LOW.value
                ),
                'action': 'Review spending forecast and adjust plans accordingly',
                'context': 'Proactive planning can mitigate forecasted risks'
            })

        return suggestions
