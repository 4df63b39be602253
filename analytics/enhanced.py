"""
Validation of the optional enhanced analytics bundle

Every component asks the adapter for a section and falls back to locally
computed values when the section is absent (None) or malformed (rejected,
logged, None). The caller's bundle is only read, never mutated.
"""
from typing import Any, Dict, List, Optional

from utils.logger import get_logger, log_fallback
from utils.transactions import coerce_number, pick

logger = get_logger(__name__)

FORECAST_CONFIDENCE_LEVELS = ('low', 'medium', 'high')


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class EnhancedAnalyticsAdapter:
    """
    Validated, snake_case view over an enhanced analytics bundle.

    Fallback predicates:
    - cash_flow: ``cashFlowAnalysis`` is a dict whose ``periods`` is a list
    - spending_forecast: ``spendingForecast`` is a dict
    - income_breakdown: ``incomeBreakdown`` is a dict
    - contextual_insights: ``contextualInsights`` is a dict with a ``timeBased`` dict
    """

    def __init__(self, bundle: Any = None):
        self.is_present = isinstance(bundle, dict)
        if bundle is not None and not self.is_present:
            log_fallback(logger, 'bundle', f"expected a mapping, got {type(bundle).__name__}")

        source = bundle if self.is_present else {}
        self.cash_flow = self._parse_cash_flow(pick(source, 'cashFlowAnalysis', 'cash_flow_analysis'))
        self.spending_forecast = self._parse_forecast(pick(source, 'spendingForecast', 'spending_forecast'))
        self.income_breakdown = self._parse_income(pick(source, 'incomeBreakdown', 'income_breakdown'))
        self.contextual_insights = self._parse_contextual(pick(source, 'contextualInsights', 'contextual_insights'))

    # === Section parsers ===

    def _parse_cash_flow(self, section: Any) -> Optional[Dict[str, Any]]:
        if section is None:
            return None
        if not isinstance(section, dict):
            log_fallback(logger, 'cashFlowAnalysis', 'not a mapping')
            return None

        raw_periods = section.get('periods')
        if not isinstance(raw_periods, list):
            log_fallback(logger, 'cashFlowAnalysis', 'missing periods list')
            return None

        periods = []
        for raw in raw_periods:
            if not isinstance(raw, dict):
                logger.debug(f"Dropping malformed cash flow period: {raw!r}")
                continue
            income = coerce_number(raw.get('income'))
            expenses = coerce_number(raw.get('expenses'))
            net = coerce_number(raw.get('net'))
            if income is None and expenses is None and net is None:
                logger.debug(f"Dropping cash flow period without figures: {raw!r}")
                continue
            income = income or 0.0
            expenses = expenses or 0.0
            periods.append({
                'period': pick(raw, 'date', 'period'),
                'income': income,
                'expenses': expenses,
                'net': net if net is not None else income - expenses
            })

        trends = section.get('trends') if isinstance(section.get('trends'), dict) else {}
        granularity = section.get('granularity')

        return {
            'periods': periods,
            'trends': {
                'income_growth': coerce_number(pick(trends, 'incomeGrowth', 'income_growth')),
                'expense_growth': coerce_number(pick(trends, 'expenseGrowth', 'expense_growth')),
                'volatility': coerce_number(trends.get('volatility')),
                'net_growth': coerce_number(pick(trends, 'netGrowth', 'net_growth'))
            },
            'granularity': granularity if isinstance(granularity, str) else None
        }

    def _parse_forecast(self, section: Any) -> Optional[Dict[str, Any]]:
        if section is None:
            return None
        if not isinstance(section, dict):
            log_fallback(logger, 'spendingForecast', 'not a mapping')
            return None

        projections = []
        raw_projections = pick(section, 'dailyProjections', 'daily_projections', default=[])
        if isinstance(raw_projections, list):
            for raw in raw_projections:
                if not isinstance(raw, dict):
                    continue
                projections.append({
                    'date': raw.get('date'),
                    'projected_amount': coerce_number(pick(raw, 'projectedAmount', 'projected_amount')),
                    'confidence': raw.get('confidence')
                })

        raw_factors = pick(section, 'riskFactors', 'risk_factors', default=[])
        risk_factors = [f for f in raw_factors if isinstance(f, str)] if isinstance(raw_factors, list) else []

        confidence = section.get('confidence')
        if confidence not in FORECAST_CONFIDENCE_LEVELS:
            confidence = None

        return {
            'daily_projections': projections,
            'risk_factors': risk_factors,
            'confidence': confidence
        }

    def _parse_income(self, section: Any) -> Optional[Dict[str, Any]]:
        if section is None:
            return None
        if not isinstance(section, dict):
            log_fallback(logger, 'incomeBreakdown', 'not a mapping')
            return None

        diversity = coerce_number(pick(section, 'diversityScore', 'diversity_score'))
        streams = section.get('streams') if isinstance(section.get('streams'), dict) else {}

        return {
            'streams': streams,
            'total_income': coerce_number(pick(section, 'totalIncome', 'total_income')),
            'stream_count': coerce_number(pick(section, 'streamCount', 'stream_count')),
            'primary_stream': pick(section, 'primaryStream', 'primary_stream'),
            'diversity_score': clamp(diversity, 0.0, 100.0) if diversity is not None else None
        }

    def _parse_contextual(self, section: Any) -> Optional[Dict[str, Any]]:
        if section is None:
            return None
        time_based = pick(section, 'timeBased', 'time_based') if isinstance(section, dict) else None
        if not isinstance(time_based, dict):
            log_fallback(logger, 'contextualInsights', 'missing timeBased mapping')
            return None

        slots = {}
        for slot, data in time_based.items():
            average = coerce_number(data.get('average')) if isinstance(data, dict) else None
            if average is not None:
                slots[str(slot)] = average
        return {'time_based': slots}

    # === Derived values ===

    @property
    def has_cash_flow(self) -> bool:
        return self.cash_flow is not None

    def volatility(self) -> Optional[float]:
        return self.cash_flow['trends']['volatility'] if self.cash_flow else None

    def negative_periods(self) -> int:
        if not self.cash_flow:
            return 0
        return sum(1 for p in self.cash_flow['periods'] if p['net'] < 0)

    def risk_factors(self) -> List[str]:
        return self.spending_forecast['risk_factors'] if self.spending_forecast else []

    def forecast_confidence(self) -> Optional[str]:
        return self.spending_forecast['confidence'] if self.spending_forecast else None

    def diversity_score(self) -> Optional[float]:
        return self.income_breakdown['diversity_score'] if self.income_breakdown else None

    def peak_time_slot(self) -> Optional[Dict[str, Any]]:
        """Time slot with the highest average spend (first one wins on ties)"""
        if not self.contextual_insights or not self.contextual_insights['time_based']:
            return None
        slot, average = max(
            self.contextual_insights['time_based'].items(),
            key=lambda item: item[1]
        )
        return {'time_slot': slot, 'average': average}
