"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from dpa_portal.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_statement(
    request_id: str,
    category: str,
    period: str,
    transaction_count: int,
    total_credit: Decimal,
    total_debit: Decimal,
    duration_ms: float,
) -> None:
    """Log structured statement outcome"""
    logging.info(
        "Statement built",
        extra={
            "request_id": request_id,
            "step": "statement_complete",
            "category": category,
            "period": period,
            "transaction_count": transaction_count,
            "total_credit": str(total_credit),
            "total_debit": str(total_debit),
            "duration_ms": duration_ms,
        },
    )


def log_payment(
    request_id: str,
    loan_id: str,
    amount: Decimal,
    recorded: bool,
    reason: str | None = None,
) -> None:
    """Log a partial loan payment attempt and its outcome"""
    logging.info(
        "Loan payment recorded" if recorded else "Loan payment rejected",
        extra={
            "request_id": request_id,
            "step": "loan_payment",
            "loan_id": loan_id,
            "amount": str(amount),
            "outcome": "recorded" if recorded else "rejected",
            "reason": reason,
        },
    )
