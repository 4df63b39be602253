"""
Analytics modules of the finance engine

- TransactionAggregator: grouping by category, type, date and month
- EnhancedAnalyticsAdapter: validation of the optional enhanced bundle
- CashFlowForecaster: daily cash flow simulation and risk classification
- HealthScorer: composite financial health score
- AnalyticsCache: clear-on-input-change result cache
"""
from analytics.aggregator import (
    TransactionAggregator,
    aggregate_by_category,
    aggregate_by_type,
    aggregate_by_date
)
from analytics.enhanced import EnhancedAnalyticsAdapter
from analytics.cash_flow import CashFlowForecaster, overall_risk_level, enhanced_risk_level
from analytics.health_score import HealthScorer, grade_for
from analytics.outliers import category_zscore, is_unusual
from analytics.cache import AnalyticsCache

__all__ = [
    "TransactionAggregator",
    "aggregate_by_category",
    "aggregate_by_type",
    "aggregate_by_date",
    "EnhancedAnalyticsAdapter",
    "CashFlowForecaster",
    "overall_risk_level",
    "enhanced_risk_level",
    "HealthScorer",
    "grade_for",
    "category_zscore",
    "is_unusual",
    "AnalyticsCache"
]
