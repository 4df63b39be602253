"""
Tests for z-score outlier detection
"""
import pytest

from analytics.outliers import category_zscore, is_unusual, zscores
from utils.transactions import normalize_transactions


def shopping(amounts):
    return normalize_transactions([
        {'date': f'2024-01-{day:02d}', 'amount': -amount, 'type': 'expense', 'category': 'Shopping'}
        for day, amount in enumerate(amounts, start=1)
    ])


class TestZscores:
    """Population z-scores"""

    def test_values(self):
        assert list(zscores([10, 10, 10, 10, 100])) == pytest.approx([-0.5, -0.5, -0.5, -0.5, 2.0])

    def test_constant_series(self):
        assert list(zscores([5, 5, 5])) == [0, 0, 0]

    def test_empty(self):
        assert zscores([]).size == 0


class TestIsUnusual:
    """Threshold behaviour against same-category history"""

    def test_value_two_deviations_away_is_flagged(self):
        history = shopping([10, 10, 10, 10, 100])
        assert [is_unusual(t, history) for t in history] == [False, False, False, False, True]

    def test_small_spread_not_flagged(self):
        history = shopping([10, 11, 9, 10, 10])
        assert [is_unusual(t, history) for t in history] == [False] * 5

    def test_custom_threshold(self):
        history = shopping([10, 10, 10, 10, 100])
        assert is_unusual(history[-1], history, threshold=2.5) is False

    def test_identical_amounts_never_unusual(self):
        history = shopping([40, 40, 40])
        assert category_zscore(history[0], history) == 0.0
        assert is_unusual(history[0], history) is False

    def test_insufficient_history(self):
        history = shopping([50, 1000])
        assert category_zscore(history[-1], history) is None
        assert is_unusual(history[-1], history) is False


class TestCategoryZscore:
    """Z-score against same-category history"""

    def test_unusual_purchase(self):
        history = shopping([50, 50, 50, 50, 1000])

        assert category_zscore(history[-1], history) == pytest.approx(2.0)
        assert is_unusual(history[-1], history) is True
        assert is_unusual(history[0], history) is False

    def test_other_categories_ignored(self):
        history = shopping([50, 50, 1000])
        history += normalize_transactions([
            {'date': '2024-01-10', 'amount': -5, 'type': 'expense', 'category': 'Food'}
            for _ in range(10)
        ])
        assert category_zscore(history[2], history) == pytest.approx(
            category_zscore(history[2], history[:3])
        )

    def test_transaction_outside_history_joins_series(self):
        history = shopping([10, 10, 10, 10])
        candidate = shopping([100])[0]

        assert category_zscore(candidate, history) == pytest.approx(2.0)
        assert is_unusual(candidate, history) is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
