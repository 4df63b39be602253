"""
Tests for the transaction aggregator
"""
import pytest

from analytics.aggregator import TransactionAggregator
from utils.transactions import normalize_transactions


class TestTransactionAggregator:
    """Grouping by category, type, date and month"""

    @pytest.fixture
    def transactions(self, sample_transactions):
        return normalize_transactions(sample_transactions)

    def setup_method(self):
        self.aggregator = TransactionAggregator()

    def test_empty_input(self):
        """Empty input yields empty maps, never an error"""
        assert self.aggregator.aggregate_by_category([]) == {}
        assert self.aggregator.aggregate_by_type([]) == {'income_total': 0.0, 'expense_total': 0.0}
        assert self.aggregator.aggregate_by_date([]) == {}
        assert self.aggregator.aggregate_by_month([]) == []
        assert self.aggregator.category_breakdown([]) == []

    def test_aggregate_by_category(self, transactions):
        result = self.aggregator.aggregate_by_category(transactions)

        assert result['Groceries']['total'] == pytest.approx(285)
        assert result['Groceries']['count'] == 3
        assert [t['id'] for t in result['Groceries']['items']] == [3, 4, 8]
        assert result['Salary']['total'] == 3000

    def test_categories_are_case_sensitive(self):
        transactions = normalize_transactions([
            {'date': '2024-01-01', 'amount': -10, 'category': 'Food'},
            {'date': '2024-01-02', 'amount': -20, 'category': 'food'},
        ])
        result = self.aggregator.aggregate_by_category(transactions)
        assert set(result) == {'Food', 'food'}

    def test_aggregate_by_type(self, transactions):
        result = self.aggregator.aggregate_by_type(transactions)

        assert result['income_total'] == pytest.approx(3500)
        assert result['expense_total'] == pytest.approx(1560)

    def test_aggregate_by_date_uses_signed_net(self):
        transactions = normalize_transactions([
            {'date': '2024-01-01T09:00:00', 'amount': 100, 'type': 'income'},
            {'date': '2024-01-01T18:00:00', 'amount': -30, 'type': 'expense'},
            {'date': '2024-01-02', 'amount': -5, 'type': 'expense'},
        ])
        result = self.aggregator.aggregate_by_date(transactions)

        assert list(result) == ['2024-01-01', '2024-01-02']
        assert result['2024-01-01']['net'] == pytest.approx(70)
        assert len(result['2024-01-01']['items']) == 2
        assert result['2024-01-02']['net'] == pytest.approx(-5)

    def test_aggregate_by_month(self):
        transactions = normalize_transactions([
            {'date': '2024-02-01', 'amount': 1000, 'type': 'income'},
            {'date': '2024-01-10', 'amount': -400, 'type': 'expense'},
            {'date': '2024-02-15', 'amount': -300, 'type': 'expense'},
        ])
        result = self.aggregator.aggregate_by_month(transactions)

        assert [m['month'] for m in result] == ['2024-01', '2024-02']
        assert result[0] == {'month': '2024-01', 'income': 0.0, 'expenses': 400.0, 'net': -400.0}
        assert result[1]['net'] == pytest.approx(700)

    def test_category_breakdown_sorted_with_percentages(self, transactions):
        breakdown = self.aggregator.category_breakdown(transactions)

        assert breakdown[0]['category'] == 'Rent'
        assert sum(b['percentage'] for b in breakdown) == pytest.approx(100)
        assert all(b['category'] not in ('Salary', 'Freelance') for b in breakdown)

    def test_monthly_net_trend(self):
        transactions = normalize_transactions([
            {'date': '2024-01-05', 'amount': 100, 'type': 'income'},
            {'date': '2024-02-05', 'amount': 200, 'type': 'income'},
            {'date': '2024-03-05', 'amount': 300, 'type': 'income'},
        ])
        assert self.aggregator.monthly_net_trend(transactions) == pytest.approx(100)

    def test_monthly_net_trend_needs_three_months(self, transactions):
        assert self.aggregator.monthly_net_trend(transactions) == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
