"""
Tests for behavioral spending patterns
"""
import pytest

from analytics.aggregator import aggregate_by_category
from behavioral.patterns import (
    category_risk_level,
    count_rapid_spending,
    detect_behavioral_patterns,
    unusual_categories,
    weekend_weekday_totals
)
from utils.transactions import normalize_transactions


def expenses(*records):
    return normalize_transactions([
        {'date': when, 'amount': -amount, 'type': 'expense', 'category': category}
        for when, amount, category in records
    ])


class TestRapidSpending:
    """Consecutive purchases inside the window"""

    def test_count_rapid_spending(self):
        txs = expenses(
            ('2024-01-15T10:00:00', 10, 'Food'),
            ('2024-01-15T11:00:00', 10, 'Food'),
            ('2024-01-15T20:00:00', 10, 'Food'),
            ('2024-01-15T21:30:00', 10, 'Food'),
        )
        assert count_rapid_spending(txs) == 2

    def test_unsorted_input(self):
        txs = expenses(
            ('2024-01-15T12:00:00', 10, 'Food'),
            ('2024-01-15T10:00:00', 10, 'Food'),
        )
        assert count_rapid_spending(txs) == 1

    def test_rapid_pattern_detected(self):
        txs = expenses(*[
            (f'2024-01-15T10:{minute:02d}:00', 20, 'Shopping')
            for minute in range(0, 50, 10)
        ])
        patterns = detect_behavioral_patterns(txs)

        assert patterns[0]['type'] == 'behavioral_rapid_spending'
        assert patterns[0]['count'] == 4
        assert patterns[0]['severity'] == 'medium'


class TestWeekendSpending:
    """Weekend versus weekday totals"""

    def test_weekend_ratio(self):
        # 2024-01-13/14 are Saturday/Sunday
        txs = expenses(
            ('2024-01-13', 200, 'Leisure'),
            ('2024-01-14', 100, 'Leisure'),
            ('2024-01-15', 20, 'Food'),
            ('2024-01-16', 20, 'Food'),
            ('2024-01-17', 20, 'Food'),
        )
        totals = weekend_weekday_totals(txs)
        assert totals == {'weekend_total': 300, 'weekday_total': 60, 'weekend_count': 2}

        patterns = detect_behavioral_patterns(txs)
        assert len(patterns) == 1
        assert patterns[0]['type'] == 'behavioral_weekend_spending'
        assert patterns[0]['weekend_ratio'] == 5.0
        assert patterns[0]['severity'] == 'low'

    def test_weekend_only_spending(self):
        txs = expenses(*[
            (f'2024-01-{day:02d}', 30, 'Leisure')
            for day in (6, 7, 13, 14, 20)
        ])
        patterns = detect_behavioral_patterns(txs)

        assert patterns[0]['weekend_ratio'] is None
        assert patterns[0]['message'] == 'All of your spending happened on weekends'

    def test_too_few_expenses(self):
        txs = expenses(
            ('2024-01-13', 200, 'Leisure'),
            ('2024-01-14', 100, 'Leisure'),
        )
        assert detect_behavioral_patterns(txs) == []

    def test_income_is_ignored(self):
        txs = normalize_transactions([
            {'date': '2024-01-13', 'amount': 5000, 'type': 'income'}
            for _ in range(6)
        ])
        assert detect_behavioral_patterns(txs) == []


class TestCategoryTrends:
    """Recent transactions against the category average"""

    def test_unusual_categories(self):
        groups = aggregate_by_category(expenses(*[
            (f'2024-01-{day:02d}', amount, 'Food')
            for day, amount in enumerate([10, 10, 10, 40, 40, 40], start=1)
        ]))
        assert unusual_categories(groups) == ['Food']

    def test_stable_category_not_flagged(self, sample_transactions):
        groups = aggregate_by_category(normalize_transactions(sample_transactions))
        assert unusual_categories(groups) == []

    def test_category_risk_level(self):
        medium = aggregate_by_category(expenses(*[
            (f'2024-01-{day:02d}', amount, 'Food')
            for day, amount in enumerate([10] * 5 + [50] * 5, start=1)
        ]))
        high = aggregate_by_category(expenses(*[
            (f'2024-01-{day:02d}', amount, 'Food')
            for day, amount in enumerate([10] * 10 + [100] * 5, start=1)
        ]))

        assert category_risk_level(medium, 'Food') == 'medium'
        assert category_risk_level(high, 'Food') == 'high'
        assert category_risk_level(high, 'Travel') == 'low'


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
