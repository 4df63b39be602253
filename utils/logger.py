"""
Structured logging for the finance analytics engine
"""
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from config import LOG_LEVEL, LOG_FILE


class ColoredFormatter(logging.Formatter):
    """Formatter with colors for console output"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Create and return a configured logger

    Args:
        name: Logger name (usually __name__)
        log_file: Optional log file (defaults to LOG_FILE; console only when neither is set)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    # Avoid duplicated handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Console handler (colored)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_format = ColoredFormatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler (only with a configured or explicit log file)
    file_path = log_file or LOG_FILE
    if file_path is None:
        return logger

    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger


def log_skipped_record(logger: logging.Logger, reason: str, record: Any) -> None:
    """
    Log a transaction record rejected at ingestion

    Args:
        logger: Logger to use
        reason: Why the record was skipped
        record: The raw record
    """
    record_id = record.get('id', 'N/A') if isinstance(record, dict) else 'N/A'
    logger.warning(f"SKIPPED | reason={reason} | id={record_id} | record={record!r}")


def log_fallback(logger: logging.Logger, section: str, reason: str) -> None:
    """
    Log an enhanced analytics section that was rejected in favour of local data

    Args:
        logger: Logger to use
        section: Bundle section (cashFlowAnalysis, spendingForecast, ...)
        reason: What was wrong with it
    """
    logger.warning(f"FALLBACK | section={section} | reason={reason}")


def log_alert(logger: logging.Logger, alert_type: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a system alert

    Args:
        logger: Logger to use
        alert_type: Alert kind (cash_flow, health, suggestion)
        message: Alert message
        details: Extra key/value pairs
    """
    extra = " | ".join(f"{k}={v}" for k, v in (details or {}).items())
    logger.warning(
        f"ALERT | type={alert_type} | message={message}" + (f" | {extra}" if extra else "")
    )
