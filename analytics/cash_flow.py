"""
Cash flow risk forecast
Simulates a forward daily balance and classifies risk days, or adopts an
externally supplied cash flow analysis when one is available.

The simulation is a heuristic, not a prediction: income and expenses are
historical daily averages shaped by weekend spending, a biweekly payday and
random noise from an injectable generator.
"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from config import (
    BASELINE_BALANCE,
    DAILY_FLOOR_RATIO,
    DAMPENING_RANGE,
    FORECAST_HORIZONS,
    LOW_BALANCE_THRESHOLD,
    MIN_HISTORY_DAYS,
    PAYDAY_INCOME_MULTIPLIER,
    PAYDAY_INTERVAL_DAYS,
    WEEKEND_EXPENSE_MULTIPLIER
)
from analytics.aggregator import TransactionAggregator
from analytics.enhanced import EnhancedAnalyticsAdapter
from utils.logger import get_logger, log_alert

logger = get_logger(__name__)

DEFAULT_SPIKE_BASELINE = 50.0
SPIKE_MULTIPLIER = 1.5


def forecast_horizon(timeframe: str) -> int:
    """Number of simulated days for a timeframe (monthly=30, yearly=90)"""
    if timeframe not in FORECAST_HORIZONS:
        logger.warning(f"Unknown timeframe '{timeframe}', using monthly horizon")
        return FORECAST_HORIZONS['monthly']
    return FORECAST_HORIZONS[timeframe]


def classify_day(balance: float, expense: float, avg_daily_expense: float) -> Optional[Tuple[str, str]]:
    """
    Classify one simulated day.

    Returns:
        (severity, risk_type) or None when the day carries no risk
    """
    if balance < 0:
        if balance < -1000:
            return 'high', 'negative_balance'
        if balance < -500:
            return 'medium', 'negative_balance'
        return 'low', 'negative_balance'
    if balance < LOW_BALANCE_THRESHOLD:
        return 'warning', 'low_balance'
    if expense > avg_daily_expense * 3:
        return 'info', 'high_spending'
    return None


def overall_risk_level(risk_days: List[Dict[str, Any]]) -> str:
    """Weighted risk level: 3 per high day, 2 per medium day, 1 per warning day"""
    high = sum(1 for d in risk_days if d['severity'] == 'high')
    medium = sum(1 for d in risk_days if d['severity'] == 'medium')
    warning = sum(1 for d in risk_days if d['severity'] == 'warning')

    score = high * 3 + medium * 2 + warning
    if score >= 10 or high >= 3:
        return 'high'
    if score >= 5 or medium >= 5:
        return 'medium'
    if score >= 2:
        return 'warning'
    return 'low'


def enhanced_risk_level(enhanced: EnhancedAnalyticsAdapter) -> str:
    """Risk level from enhanced volatility, negative periods and forecast risk factors"""
    score = 0

    volatility = enhanced.volatility()
    if volatility is not None:
        if volatility > 100:
            score += 2
        if volatility > 200:
            score += 1

    negative_periods = enhanced.negative_periods()
    if negative_periods > 5:
        score += 2
    if negative_periods > 10:
        score += 1

    score += len(enhanced.risk_factors())

    if score >= 5:
        return 'high'
    if score >= 3:
        return 'medium'
    if score >= 1:
        return 'warning'
    return 'low'


def balance_history_from_periods(periods: List[Dict[str, Any]], baseline: float = BASELINE_BALANCE) -> List[float]:
    """Synthetic balance history: cumulative net from a presentational baseline"""
    history = [baseline]
    for period in periods:
        history.append(history[-1] + period['net'])
    return history


class CashFlowForecaster:
    """Forward-looking cash flow simulation with risk day classification"""

    def __init__(self, baseline_balance: float = BASELINE_BALANCE):
        self.baseline_balance = baseline_balance
        self.aggregator = TransactionAggregator()

    def daily_averages(self, transactions: List[Dict[str, Any]]) -> Tuple[float, float]:
        """
        Average daily income and expense.

        Totals are divided by max(30, days spanned by the data).
        """
        if not transactions:
            return 0.0, 0.0

        totals = self.aggregator.aggregate_by_type(transactions)
        dates = [t['date'] for t in transactions]
        days_spanned = (max(dates).date() - min(dates).date()).days
        divisor = max(MIN_HISTORY_DAYS, days_spanned)

        return totals['income_total'] / divisor, totals['expense_total'] / divisor

    def forecast(
        self,
        transactions: List[Dict[str, Any]],
        timeframe: str = 'monthly',
        enhanced: Optional[EnhancedAnalyticsAdapter] = None,
        rng: Optional[np.random.Generator] = None,
        start_date: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Build the risk forecast.

        Args:
            transactions: Normalized transactions
            timeframe: 'monthly' (30 days) or 'yearly' (90 days)
            enhanced: Validated enhanced analytics
            rng: Random generator for the daily dampening factor
            start_date: Day before the first simulated day (defaults to the
                latest transaction date)

        Returns:
            RiskForecast dictionary
        """
        enhanced = enhanced or EnhancedAnalyticsAdapter(None)
        horizon = forecast_horizon(timeframe)

        if enhanced.has_cash_flow:
            result = self._from_enhanced(transactions, enhanced)
        elif not transactions:
            result = self._empty(horizon)
        else:
            result = self._simulate(transactions, horizon, rng or np.random.default_rng(), start_date)

        if result['risk_level'] == 'high':
            log_alert(
                logger,
                alert_type='cash_flow',
                message='High cash flow risk forecast',
                details={'source': result['source'], 'risk_days': len(result['risk_days'])}
            )
        return result

    def _empty(self, horizon: int) -> Dict[str, Any]:
        return {
            'source': 'empty',
            'risk_days': [],
            'daily_flow': [],
            'risk_level': 'low',
            'balance_history': [self.baseline_balance],
            'forecast_period': horizon,
            'avg_daily_income': 0.0,
            'avg_daily_expense': 0.0,
            'forecast_insights': [],
            'projected_spikes': [],
            'periods': [],
            'trends': {},
            'granularity': None
        }

    def _simulate(
        self,
        transactions: List[Dict[str, Any]],
        horizon: int,
        rng: np.random.Generator,
        start_date: Optional[date]
    ) -> Dict[str, Any]:
        avg_income, avg_expense = self.daily_averages(transactions)
        if start_date is None:
            start_date = max(t['date'] for t in transactions).date()
        elif isinstance(start_date, datetime):
            start_date = start_date.date()

        low, high = DAMPENING_RANGE
        balance = self.baseline_balance
        balance_history = [balance]
        daily_flow = []
        risk_days = []

        for day in range(1, horizon + 1):
            day_date = start_date + timedelta(days=day)
            income = avg_income
            expense = avg_expense

            # Saturday/Sunday
            if day_date.weekday() >= 5:
                expense *= WEEKEND_EXPENSE_MULTIPLIER

            # Biweekly payday
            if day % PAYDAY_INTERVAL_DAYS == 0:
                income *= PAYDAY_INCOME_MULTIPLIER

            income *= rng.uniform(low, high)
            expense *= rng.uniform(low, high)

            income = max(income, avg_income * DAILY_FLOOR_RATIO)
            expense = max(expense, avg_expense * DAILY_FLOOR_RATIO)

            balance += income - expense
            balance_history.append(balance)

            classification = classify_day(balance, expense, avg_expense)
            if classification:
                severity, risk_type = classification
                risk_days.append({
                    'day': day,
                    'date': day_date.isoformat(),
                    'balance': balance,
                    'severity': severity,
                    'type': risk_type,
                    'income': income,
                    'expense': expense
                })

            daily_flow.append({
                'day': day,
                'date': day_date.isoformat(),
                'income': income,
                'expense': expense,
                'balance': balance
            })

        risk_level = overall_risk_level(risk_days)
        logger.info(
            f"Simulated {horizon} days: {len(risk_days)} risk days, level={risk_level}"
        )

        return {
            'source': 'simulation',
            'risk_days': risk_days,
            'daily_flow': daily_flow,
            'risk_level': risk_level,
            'balance_history': balance_history,
            'forecast_period': horizon,
            'avg_daily_income': avg_income,
            'avg_daily_expense': avg_expense,
            'forecast_insights': [],
            'projected_spikes': [],
            'periods': [],
            'trends': {},
            'granularity': None
        }

    def _from_enhanced(
        self,
        transactions: List[Dict[str, Any]],
        enhanced: EnhancedAnalyticsAdapter
    ) -> Dict[str, Any]:
        cash_flow = enhanced.cash_flow
        avg_income, avg_expense = self.daily_averages(transactions)
        projections = enhanced.spending_forecast['daily_projections'] if enhanced.spending_forecast else []

        spike_threshold = (avg_expense or DEFAULT_SPIKE_BASELINE) * SPIKE_MULTIPLIER
        projected_spikes = [
            {
                'day': index,
                'date': p['date'],
                'projected_amount': p['projected_amount'],
                'confidence': p['confidence']
            }
            for index, p in enumerate(projections, start=1)
            if p['projected_amount'] is not None and p['projected_amount'] > spike_threshold
        ]

        risk_level = enhanced_risk_level(enhanced)
        logger.info(
            f"Using enhanced cash flow analysis ({len(cash_flow['periods'])} periods), level={risk_level}"
        )

        return {
            'source': 'enhanced',
            'risk_days': [],
            'daily_flow': [],
            'risk_level': risk_level,
            'balance_history': balance_history_from_periods(cash_flow['periods'], self.baseline_balance),
            'forecast_period': len(projections) or FORECAST_HORIZONS['monthly'],
            'avg_daily_income': avg_income,
            'avg_daily_expense': avg_expense,
            'forecast_insights': list(enhanced.risk_factors()),
            'projected_spikes': projected_spikes,
            'periods': [dict(p) for p in cash_flow['periods']],
            'trends': dict(cash_flow['trends']),
            'granularity': cash_flow['granularity']
        }
