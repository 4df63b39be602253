"""
Shared fixtures for the finance analytics engine tests
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class FixedRng:
    """Generator stand-in whose dampening factor is always the same"""

    def __init__(self, value: float = 1.0):
        self.value = value

    def uniform(self, low, high):
        return self.value


@pytest.fixture
def fixed_rng():
    return FixedRng()


@pytest.fixture
def sample_transactions():
    """One month of mixed income and expenses (January 2024)"""
    return [
        {'id': 1, 'date': '2024-01-01', 'amount': 3000, 'type': 'income', 'category': 'Salary'},
        {'id': 2, 'date': '2024-01-02', 'amount': -1200, 'type': 'expense', 'category': 'Rent'},
        {'id': 3, 'date': '2024-01-05', 'amount': -80, 'type': 'expense', 'category': 'Groceries'},
        {'id': 4, 'date': '2024-01-12', 'amount': -95, 'type': 'expense', 'category': 'Groceries'},
        {'id': 5, 'date': '2024-01-13', 'amount': -60, 'type': 'expense', 'category': 'Entertainment'},
        {'id': 6, 'date': '2024-01-15', 'amount': 500, 'type': 'income', 'category': 'Freelance'},
        {'id': 7, 'date': '2024-01-20', 'amount': -15, 'type': 'expense', 'category': 'Subscription'},
        {'id': 8, 'date': '2024-01-27', 'amount': -110, 'type': 'expense', 'category': 'Groceries'},
    ]


@pytest.fixture
def enhanced_bundle():
    """Enhanced analytics bundle as delivered by the analytics service"""
    return {
        'cashFlowAnalysis': {
            'periods': [
                {'date': '2024-01', 'income': 1000, 'expenses': 400, 'net': 600},
                {'date': '2024-02', 'income': 1000, 'expenses': 300, 'net': 700},
                {'date': '2024-03', 'income': 1000, 'expenses': 300, 'net': 700},
            ],
            'trends': {'incomeGrowth': 2.0, 'expenseGrowth': -1.0, 'volatility': 30, 'netGrowth': 5},
            'granularity': 'monthly'
        },
        'spendingForecast': {
            'dailyProjections': [
                {'date': '2024-04-01', 'projectedAmount': 40, 'confidence': 'high'},
                {'date': '2024-04-02', 'projectedAmount': 120, 'confidence': 'medium'},
            ],
            'riskFactors': [],
            'confidence': 'high'
        },
        'incomeBreakdown': {
            'streams': {'Salary': {'total': 3000, 'percentage': 100}},
            'totalIncome': 3000,
            'streamCount': 1,
            'primaryStream': 'Salary',
            'diversityScore': 80
        },
        'contextualInsights': {
            'timeBased': {'Morning': {'average': 20}, 'Evening': {'average': 45}}
        }
    }
