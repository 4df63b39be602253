"""
Ingestion of caller-supplied transactions, budgets and goals

Income/expense convention: the ``type`` field wins when it is ``income`` or
``expense``; otherwise the sign of ``amount`` decides (positive = income).
Normalized transactions always carry ``amount`` as a non-negative magnitude
and ``signed_amount`` with the sign of the cash movement.
"""
import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pandas as pd

from config import DEFAULT_CATEGORY, TRANSACTION_TYPES
from utils.logger import get_logger, log_skipped_record

logger = get_logger(__name__)


def pick(mapping: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in mapping (camelCase/snake_case aliases)"""
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    return default


def coerce_number(value: Any) -> Optional[float]:
    """
    Convert a value to a finite float.

    Args:
        value: int, float, Decimal or numeric string

    Returns:
        The float, or None when the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date/datetime/string into a naive datetime (None if unparsable)"""
    if value is None or isinstance(value, bool):
        return None
    try:
        ts = pd.to_datetime(value, errors='coerce')
    except (TypeError, ValueError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)
    return ts.to_pydatetime()


def normalize_transaction(record: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize one raw transaction record.

    Args:
        record: Dict with id, date, amount, type, category, description

    Returns:
        Normalized transaction or None when the record is invalid
    """
    if not isinstance(record, dict):
        log_skipped_record(logger, "not_a_mapping", record)
        return None

    amount = coerce_number(record.get('amount'))
    if amount is None:
        log_skipped_record(logger, "non_numeric_amount", record)
        return None

    when = parse_date(record.get('date'))
    if when is None:
        log_skipped_record(logger, "unparsable_date", record)
        return None

    tx_type = str(record.get('type') or '').strip().lower()
    if tx_type not in TRANSACTION_TYPES:
        tx_type = 'income' if amount > 0 else 'expense'

    magnitude = abs(amount)
    category = record.get('category')
    if not isinstance(category, str) or not category.strip():
        category = DEFAULT_CATEGORY

    return {
        'id': record.get('id'),
        'date': when,
        'amount': magnitude,
        'signed_amount': magnitude if tx_type == 'income' else -magnitude,
        'type': tx_type,
        'category': category,
        'description': record.get('description')
    }


def normalize_transactions(transactions: Any) -> List[Dict[str, Any]]:
    """
    Normalize a collection of raw transactions, skipping invalid records.

    A value that is not a list/tuple is treated as an empty collection.
    """
    if transactions is None:
        return []
    if not isinstance(transactions, (list, tuple)):
        logger.warning(f"Transactions must be a list, got {type(transactions).__name__}; treating as empty")
        return []

    normalized = []
    for record in transactions:
        tx = normalize_transaction(record)
        if tx is not None:
            normalized.append(tx)

    skipped = len(transactions) - len(normalized)
    if skipped:
        logger.info(f"{skipped} of {len(transactions)} transactions skipped at ingestion")
    return normalized


def expenses_of(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [t for t in transactions if t['type'] == 'expense']


def incomes_of(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [t for t in transactions if t['type'] == 'income']


def normalize_budgets(budgets: Any) -> List[Dict[str, Any]]:
    """Keep budgets with a category and a positive numeric limit"""
    if not isinstance(budgets, (list, tuple)):
        return []

    valid = []
    for budget in budgets:
        if not isinstance(budget, dict):
            continue
        limit = coerce_number(budget.get('limit'))
        category = budget.get('category')
        if limit is None or limit <= 0 or not category:
            logger.debug(f"Ignoring invalid budget: {budget!r}")
            continue
        valid.append({'category': category, 'limit': limit})
    return valid


def normalize_goals(goals: Any) -> List[Dict[str, Any]]:
    """Normalize goals, accepting camelCase and snake_case keys"""
    if not isinstance(goals, (list, tuple)):
        return []

    valid = []
    for goal in goals:
        if not isinstance(goal, dict):
            continue
        valid.append({
            'target_amount': coerce_number(pick(goal, 'targetAmount', 'target_amount')) or 0.0,
            'current_amount': coerce_number(pick(goal, 'currentAmount', 'current_amount')) or 0.0,
            'is_active': bool(pick(goal, 'isActive', 'is_active', default=False)),
            'is_completed': bool(pick(goal, 'isCompleted', 'is_completed', default=False))
        })
    return valid
