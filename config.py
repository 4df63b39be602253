"""
Global settings for the finance analytics engine
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# === Directories ===
# File logging is enabled only when LOGS_DIR is set
LOGS_DIR = Path(os.environ["LOGS_DIR"]) if os.getenv("LOGS_DIR") else None

# === Logging ===
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = LOGS_DIR / "analytics.log" if LOGS_DIR else None

# === Transactions ===
DEFAULT_CATEGORY = "Uncategorized"
TRANSACTION_TYPES = ["income", "expense"]

# === Cash flow forecast ===
BASELINE_BALANCE = float(os.getenv("BASELINE_BALANCE", "1000"))  # presentational only
FORECAST_HORIZONS = {
    "monthly": 30,
    "yearly": 90
}
MIN_HISTORY_DAYS = 30
WEEKEND_EXPENSE_MULTIPLIER = 1.3
PAYDAY_INTERVAL_DAYS = 14
PAYDAY_INCOME_MULTIPLIER = 3.0
DAMPENING_RANGE = (0.75, 1.25)
DAILY_FLOOR_RATIO = 0.5
LOW_BALANCE_THRESHOLD = 200.0

# === Health score ===
RECOMMENDATION_LIMIT = int(os.getenv("RECOMMENDATION_LIMIT", "3"))

# === Suggestions ===
SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "8"))
LARGE_EXPENSE_THRESHOLD = float(os.getenv("LARGE_EXPENSE_THRESHOLD", "300"))
LARGE_EXPENSE_MAX_ALERTS = 5
RECURRING_SPEND_THRESHOLD = float(os.getenv("RECURRING_SPEND_THRESHOLD", "50"))
RECURRING_CATEGORIES = [
    "Subscription",
    "Membership",
    "Utilities",
    "Entertainment"
]
ZSCORE_THRESHOLD = 2.0
ZSCORE_MIN_POINTS = 3

# === Behavioral patterns ===
RAPID_SPENDING_HOURS = float(os.getenv("RAPID_SPENDING_HOURS", "4"))
RAPID_SPENDING_RATIO = 0.2
WEEKEND_SPENDING_RATIO = 1.5
BEHAVIORAL_MIN_EXPENSES = 5
