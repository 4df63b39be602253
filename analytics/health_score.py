"""
Composite financial health score (0-100)

Five weighted factors (spending vs income 30, budget adherence 25,
emergency fund 20, goal progress 15, spending diversity 10) plus two bonuses
that only apply with enhanced analytics (cash flow stability +5/-5, forecast
reliability +3).
"""
import math
from typing import Any, Dict, List, Optional

from config import RECOMMENDATION_LIMIT
from analytics.aggregator import TransactionAggregator
from analytics.enhanced import EnhancedAnalyticsAdapter, clamp
from utils.logger import get_logger, log_alert
from utils.transactions import coerce_number

logger = get_logger(__name__)

PRIORITY_ORDER = {'high': 3, 'medium': 2, 'low': 1, 'info': 0}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_for(score: float) -> str:
    """Letter grade for a numeric score"""
    if score >= 90:
        return 'A'
    if score >= 80:
        return 'B'
    if score >= 70:
        return 'C'
    if score >= 60:
        return 'D'
    return 'F'


def spending_score(savings_rate: float) -> int:
    """Points for the savings rate (ratio, 0.2 = 20%)"""
    if savings_rate >= 0.2:
        return 30
    if savings_rate >= 0.1:
        return 25
    if savings_rate >= 0:
        return 20
    if savings_rate >= -0.1:
        return 10
    return 0


def emergency_score(months_covered: float) -> int:
    """Points for months of expenses covered"""
    if months_covered >= 6:
        return 20
    if months_covered >= 3:
        return 15
    if months_covered >= 1:
        return 10
    if months_covered > 0:
        return 5
    return 0


def stability_score(volatility: float, net_growth: float) -> int:
    """Cash flow stability bonus/malus"""
    if volatility < 50 and net_growth > 0:
        return 5
    if volatility < 100 and net_growth >= 0:
        return 2
    if volatility > 200:
        return -5
    return 0


def forecast_bonus(confidence: Optional[str]) -> int:
    return {'high': 3, 'medium': 1}.get(confidence, 0)


class HealthScorer:
    """
    Deterministic weighted rubric for financial health.

    Income and expenses come from the enhanced cash flow periods when that
    section is valid, otherwise from the transactions.
    """

    def __init__(self, recommendation_limit: int = RECOMMENDATION_LIMIT):
        self.recommendation_limit = recommendation_limit
        self.aggregator = TransactionAggregator()

    def score(
        self,
        transactions: List[Dict[str, Any]],
        budgets: List[Dict[str, Any]],
        goals: List[Dict[str, Any]],
        timeframe: str = 'monthly',
        enhanced: Optional[EnhancedAnalyticsAdapter] = None,
        precomputed_score: Any = None
    ) -> Dict[str, Any]:
        """
        Compute the health score.

        Args:
            transactions: Normalized transactions
            budgets: Normalized budgets
            goals: Normalized goals
            timeframe: 'monthly' or 'yearly' (scales monthly expenses)
            enhanced: Validated enhanced analytics
            precomputed_score: Score computed elsewhere; bypasses the rubric

        Returns:
            HealthScore dictionary
        """
        enhanced = enhanced or EnhancedAnalyticsAdapter(None)

        if precomputed_score is not None:
            value = coerce_number(precomputed_score)
            if value is not None:
                return self._precomputed(value, enhanced)
            logger.warning(f"Ignoring non-numeric precomputed score: {precomputed_score!r}")

        use_enhanced = enhanced.has_cash_flow
        if not transactions and not use_enhanced:
            return {
                'source': 'empty',
                'score': 0,
                'grade': 'N/A',
                'breakdown': [],
                'recommendations': [],
                'enhanced_insights': [],
                'has_enhanced_data': False,
                'savings_rate': 0.0
            }

        breakdown = []
        recommendations = []
        enhanced_insights = []

        # 1. Spending vs income
        if use_enhanced:
            periods = enhanced.cash_flow['periods']
            income = sum(p['income'] for p in periods)
            expenses = sum(p['expenses'] for p in periods)
            trends = enhanced.cash_flow['trends']
            trend = (trends['income_growth'] or 0.0) - (trends['expense_growth'] or 0.0)

            negative_periods = enhanced.negative_periods()
            if negative_periods > len(periods) * 0.3:
                enhanced_insights.append({
                    'type': 'cash_flow_consistency',
                    'message': f"{negative_periods} periods with negative cash flow",
                    'impact': 'medium'
                })
        else:
            totals = self.aggregator.aggregate_by_type(transactions)
            income = totals['income_total']
            expenses = totals['expense_total']
            trend = self.aggregator.monthly_net_trend(transactions)

        savings_rate = (income - expenses) / income if income > 0 else 0.0
        points = spending_score(savings_rate)
        breakdown.append({
            'category': 'Spending vs Income',
            'score': points,
            'max_score': 30,
            'description': (
                f"{savings_rate * 100:.1f}% savings rate" if savings_rate >= 0
                else f"{abs(savings_rate * 100):.1f}% deficit"
            ),
            'trend': trend
        })
        total = points

        if savings_rate < 0:
            recommendations.append({
                'factor': 'spending_vs_income',
                'message': "You're spending more than you earn. Focus on reducing expenses.",
                'priority': 'high'
            })
        elif savings_rate < 0.1:
            recommendations.append({
                'factor': 'spending_vs_income',
                'message': "Try to increase your savings rate to at least 10%",
                'priority': 'medium'
            })

        # 2. Budget adherence
        budget_points = 25
        if budgets:
            spent = self.aggregator.expense_category_totals(transactions)
            within = sum(1 for b in budgets if spent.get(b['category'], 0.0) <= b['limit'])
            budget_points = round_half_up(within / len(budgets) * 25)
        breakdown.append({
            'category': 'Budget Adherence',
            'score': budget_points,
            'max_score': 25,
            'description': (
                f"{round(budget_points / 25 * 100)}% of budgets followed" if budgets
                else 'No budgets set'
            )
        })
        total += budget_points

        if not budgets:
            recommendations.append({
                'factor': 'budget_adherence',
                'message': "Set up budgets to better track your spending habits",
                'priority': 'medium'
            })

        # 3. Emergency fund
        monthly_expenses = expenses if timeframe != 'yearly' else expenses / 12
        months_covered = max(0.0, income - expenses) / monthly_expenses if monthly_expenses > 0 else 0.0
        fund_points = emergency_score(months_covered)
        breakdown.append({
            'category': 'Emergency Fund',
            'score': fund_points,
            'max_score': 20,
            'description': f"{months_covered:.1f} months of expenses covered"
        })
        total += fund_points

        if months_covered < 3:
            recommendations.append({
                'factor': 'emergency_fund',
                'message': f"Build your emergency fund to cover {6 - math.ceil(months_covered)} more months of expenses",
                'priority': 'high'
            })

        # 4. Goal progress
        goal_points = 15
        active_goals = [g for g in goals if g['is_active'] and not g['is_completed']]
        if active_goals:
            progress = [
                clamp(g['current_amount'] / g['target_amount'], 0.0, 1.0) if g['target_amount'] > 0 else 0.0
                for g in active_goals
            ]
            goal_points = round_half_up(sum(progress) / len(progress) * 15)
        breakdown.append({
            'category': 'Goal Progress',
            'score': goal_points,
            'max_score': 15,
            'description': (
                f"{round(goal_points / 15 * 100)}% average progress" if goals
                else 'No goals set'
            )
        })
        total += goal_points

        if not goals:
            recommendations.append({
                'factor': 'goal_progress',
                'message': "Set financial goals to stay motivated and track progress",
                'priority': 'medium'
            })

        # 5. Spending diversity
        category_count = len(self.aggregator.expense_category_totals(transactions))
        diversity_points = min(10, category_count * 2)
        breakdown.append({
            'category': 'Spending Diversity',
            'score': diversity_points,
            'max_score': 10,
            'description': f"{category_count} spending categories"
        })
        total += diversity_points

        if category_count < 3:
            recommendations.append({
                'factor': 'spending_diversity',
                'message': "Consider diversifying your spending across more categories",
                'priority': 'low'
            })

        # 6. Cash flow stability (enhanced only)
        if use_enhanced:
            volatility = enhanced.cash_flow['trends']['volatility'] or 0.0
            net_growth = enhanced.cash_flow['trends']['net_growth'] or 0.0
            bonus = stability_score(volatility, net_growth)
            total += bonus
            if bonus != 0:
                breakdown.append({
                    'category': 'Cash Flow Stability',
                    'score': bonus,
                    'max_score': 5,
                    'description': 'Stable cash flow' if volatility < 100 else 'High volatility detected',
                    'is_bonus': True
                })

        # 7. Forecast reliability (enhanced only)
        if enhanced.spending_forecast is not None:
            bonus = forecast_bonus(enhanced.forecast_confidence())
            total += bonus
            if bonus > 0:
                breakdown.append({
                    'category': 'Forecast Reliability',
                    'score': bonus,
                    'max_score': 3,
                    'description': f"{enhanced.forecast_confidence()} confidence forecast",
                    'is_bonus': True
                })

        final_score = int(clamp(round_half_up(total), 0, 100))

        if use_enhanced:
            diversity = enhanced.diversity_score()
            if diversity is not None and diversity < 50:
                enhanced_insights.append({
                    'type': 'income_diversity',
                    'message': f"Low income diversity ({diversity:.0f}%)",
                    'impact': 'medium'
                })
            risk_factors = enhanced.risk_factors()
            if risk_factors:
                enhanced_insights.append({
                    'type': 'forecast_risk',
                    'message': f"{len(risk_factors)} forecast risk factors",
                    'impact': 'medium'
                })

        if final_score >= 80:
            recommendations.append({
                'factor': 'overall',
                'message': "Great job! You're maintaining excellent financial health",
                'priority': 'info'
            })

        recommendations.sort(key=lambda r: PRIORITY_ORDER[r['priority']], reverse=True)

        grade = grade_for(final_score)
        if grade == 'F':
            log_alert(logger, alert_type='health', message='Failing financial health score',
                      details={'score': final_score})

        return {
            'source': 'enhanced' if use_enhanced else 'transactions',
            'score': final_score,
            'grade': grade,
            'breakdown': breakdown,
            'recommendations': recommendations[:self.recommendation_limit],
            'enhanced_insights': enhanced_insights,
            'has_enhanced_data': use_enhanced,
            'savings_rate': round(savings_rate * 100, 2)
        }

    def _precomputed(self, value: float, enhanced: EnhancedAnalyticsAdapter) -> Dict[str, Any]:
        score = clamp(value, 0.0, 100.0)
        # Whole scores come back as int, like the rubric path
        if float(score).is_integer():
            score = int(score)
        return {
            'source': 'precomputed',
            'score': score,
            'grade': grade_for(score),
            'breakdown': [],
            'recommendations': [],
            'enhanced_insights': [],
            'has_enhanced_data': enhanced.is_present,
            'savings_rate': None
        }
