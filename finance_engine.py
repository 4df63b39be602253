"""
Finance analytics engine
Public entry points: cash flow risk forecast, financial health score and
smart suggestions. Inputs are plain in-memory collections; outputs are plain
dictionaries. No entry point raises on bad data.
"""
from datetime import date
from typing import Any, Dict, List, Optional

import numpy as np

from analytics.cache import AnalyticsCache
from analytics.cash_flow import CashFlowForecaster
from analytics.enhanced import EnhancedAnalyticsAdapter
from analytics.health_score import HealthScorer
from suggestions.engine import SuggestionEngine
from utils.logger import get_logger
from utils.transactions import normalize_budgets, normalize_goals, normalize_transactions

logger = get_logger(__name__)


class FinanceAnalyticsEngine:
    """
    Facade over the forecaster, scorer and suggestion engine.

    Args:
        cache: Optional result cache; without one every call recomputes
        seed: Seed for the forecast's random dampening. Forecasts are only
            cached when a seed is set.
    """

    def __init__(self, cache: Optional[AnalyticsCache] = None, seed: Optional[int] = None):
        self.cache = cache
        self.seed = seed
        self.forecaster = CashFlowForecaster()
        self.scorer = HealthScorer()
        self.suggestion_engine = SuggestionEngine()

    def _cached(self, name: str, inputs: Dict[str, Any], compute):
        if self.cache is None:
            return compute()
        return self.cache.get_or_compute(name, inputs, compute)

    def risk_forecast(
        self,
        transactions: Any,
        timeframe: str = 'monthly',
        enhanced_analytics: Any = None,
        rng: Optional[np.random.Generator] = None,
        start_date: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Cash flow risk forecast.

        Args:
            transactions: Raw transactions
            timeframe: 'monthly' (30 days) or 'yearly' (90 days)
            enhanced_analytics: Optional enhanced analytics bundle
            rng: Explicit generator; overrides the engine seed and disables caching
            start_date: Forecast anchor (defaults to the latest transaction date)
        """
        def compute():
            generator = rng if rng is not None else np.random.default_rng(self.seed)
            return self.forecaster.forecast(
                normalize_transactions(transactions),
                timeframe=timeframe,
                enhanced=EnhancedAnalyticsAdapter(enhanced_analytics),
                rng=generator,
                start_date=start_date
            )

        if rng is not None or self.seed is None:
            return compute()

        return self._cached('risk_forecast', {
            'transactions': transactions,
            'timeframe': timeframe,
            'enhanced_analytics': enhanced_analytics,
            'seed': self.seed,
            'start_date': start_date
        }, compute)

    def health_score(
        self,
        transactions: Any,
        budgets: Any = None,
        goals: Any = None,
        timeframe: str = 'monthly',
        enhanced_analytics: Any = None,
        precomputed_score: Any = None
    ) -> Dict[str, Any]:
        """Financial health score with breakdown and recommendations"""
        def compute():
            return self.scorer.score(
                normalize_transactions(transactions),
                normalize_budgets(budgets),
                normalize_goals(goals),
                timeframe=timeframe,
                enhanced=EnhancedAnalyticsAdapter(enhanced_analytics),
                precomputed_score=precomputed_score
            )

        return self._cached('health_score', {
            'transactions': transactions,
            'budgets': budgets,
            'goals': goals,
            'timeframe': timeframe,
            'enhanced_analytics': enhanced_analytics,
            'precomputed_score': precomputed_score
        }, compute)

    def suggestions(
        self,
        transactions: Any,
        budgets: Any = None,
        category_breakdown: Any = None,
        timeframe: str = 'monthly',
        enhanced_analytics: Any = None
    ) -> List[Dict[str, Any]]:
        """Severity-ranked spending suggestions"""
        def compute():
            return self.suggestion_engine.suggest(
                normalize_transactions(transactions),
                normalize_budgets(budgets),
                category_breakdown=category_breakdown,
                timeframe=timeframe,
                enhanced=EnhancedAnalyticsAdapter(enhanced_analytics)
            )

        return self._cached('suggestions', {
            'transactions': transactions,
            'budgets': budgets,
            'category_breakdown': category_breakdown,
            'timeframe': timeframe,
            'enhanced_analytics': enhanced_analytics
        }, compute)


# === Convenience functions ===

def compute_risk_forecast(
    transactions: Any,
    timeframe: str = 'monthly',
    enhanced_analytics: Any = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    start_date: Optional[date] = None
) -> Dict[str, Any]:
    """Cash flow risk forecast (stateless)"""
    return FinanceAnalyticsEngine(seed=seed).risk_forecast(
        transactions,
        timeframe=timeframe,
        enhanced_analytics=enhanced_analytics,
        rng=rng,
        start_date=start_date
    )


def compute_health_score(
    transactions: Any,
    budgets: Any = None,
    goals: Any = None,
    timeframe: str = 'monthly',
    enhanced_analytics: Any = None,
    precomputed_score: Any = None
) -> Dict[str, Any]:
    """Financial health score (stateless)"""
    return FinanceAnalyticsEngine().health_score(
        transactions,
        budgets=budgets,
        goals=goals,
        timeframe=timeframe,
        enhanced_analytics=enhanced_analytics,
        precomputed_score=precomputed_score
    )


def compute_suggestions(
    transactions: Any,
    budgets: Any = None,
    category_breakdown: Any = None,
    timeframe: str = 'monthly',
    enhanced_analytics: Any = None
) -> List[Dict[str, Any]]:
    """Smart suggestions (stateless)"""
    return FinanceAnalyticsEngine().suggestions(
        transactions,
        budgets=budgets,
        category_breakdown=category_breakdown,
        timeframe=timeframe,
        enhanced_analytics=enhanced_analytics
    )
