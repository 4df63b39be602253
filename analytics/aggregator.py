"""
Aggregation of normalized transactions by category, type, date and month
"""
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from scipy import stats

from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionAggregator:
    """
    Groups and sums normalized transactions.

    Spending aggregates use the absolute amount; net aggregates use the
    signed amount. Categories match exactly (case-sensitive).
    """

    COLUMNS = ['id', 'date', 'amount', 'signed_amount', 'type', 'category', 'description']

    def _to_frame(self, transactions: List[Dict[str, Any]]) -> pd.DataFrame:
        if not transactions:
            return pd.DataFrame(columns=self.COLUMNS)
        df = pd.DataFrame(transactions, columns=self.COLUMNS)
        df['date'] = pd.to_datetime(df['date'])
        return df

    def aggregate_by_category(self, transactions: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        """
        Groups all transactions by category.

        Returns:
            {category: {'total', 'count', 'items'}} in first-seen order
        """
        df = self._to_frame(transactions)
        result = {}
        for category, group in df.groupby('category', sort=False):
            result[category] = {
                'total': float(group['amount'].sum()),
                'count': int(len(group)),
                'items': [transactions[i] for i in group.index]
            }
        return result

    def aggregate_by_type(self, transactions: List[Dict[str, Any]]) -> Dict[str, float]:
        """Sums income and expense magnitudes"""
        df = self._to_frame(transactions)
        totals = df.groupby('type')['amount'].sum()
        return {
            'income_total': float(totals.get('income', 0.0)),
            'expense_total': float(totals.get('expense', 0.0))
        }

    def aggregate_by_date(self, transactions: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        """
        Groups transactions by calendar day.

        Returns:
            {'YYYY-MM-DD': {'items', 'net'}} sorted by day
        """
        df = self._to_frame(transactions)
        if df.empty:
            return {}

        df['day'] = df['date'].dt.strftime('%Y-%m-%d')
        result = {}
        for day, group in df.groupby('day', sort=True):
            result[day] = {
                'items': [transactions[i] for i in group.index],
                'net': float(group['signed_amount'].sum())
            }
        return result

    def aggregate_by_month(self, transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Monthly income, expenses and net, oldest month first"""
        df = self._to_frame(transactions)
        if df.empty:
            return []

        df['month'] = df['date'].dt.to_period('M').astype(str)
        monthly = df.pivot_table(
            index='month', columns='type', values='amount', aggfunc='sum', fill_value=0.0
        ).sort_index()

        trends = []
        for month, row in monthly.iterrows():
            income = float(row.get('income', 0.0))
            expenses = float(row.get('expense', 0.0))
            trends.append({
                'month': month,
                'income': income,
                'expenses': expenses,
                'net': income - expenses
            })
        return trends

    def expense_category_totals(self, transactions: List[Dict[str, Any]]) -> Dict[str, float]:
        """Expense spend per category, in first-seen order"""
        df = self._to_frame(transactions)
        expenses = df[df['type'] == 'expense']
        totals = expenses.groupby('category', sort=False)['amount'].sum()
        return {category: float(total) for category, total in totals.items()}

    def category_breakdown(self, transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Expense categories with their share of total spending, largest first"""
        totals = self.expense_category_totals(transactions)
        grand_total = sum(totals.values())

        breakdown = [
            {
                'category': category,
                'amount': amount,
                'percentage': (amount / grand_total * 100) if grand_total > 0 else 0.0
            }
            for category, amount in totals.items()
        ]
        breakdown.sort(key=lambda x: x['amount'], reverse=True)
        return breakdown

    def monthly_net_trend(self, transactions: List[Dict[str, Any]]) -> float:
        """
        Least-squares slope of monthly net cash flow.

        Returns 0.0 with fewer than three months of data.
        """
        monthly = self.aggregate_by_month(transactions)
        if len(monthly) < 3:
            return 0.0

        nets = np.array([m['net'] for m in monthly])
        slope = stats.linregress(np.arange(len(nets)), nets).slope
        return round(float(slope), 2)


# === Convenience functions ===

_aggregator = TransactionAggregator()


def aggregate_by_category(transactions: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return _aggregator.aggregate_by_category(transactions)


def aggregate_by_type(transactions: List[Dict[str, Any]]) -> Dict[str, float]:
    return _aggregator.aggregate_by_type(transactions)


def aggregate_by_date(transactions: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return _aggregator.aggregate_by_date(transactions)
