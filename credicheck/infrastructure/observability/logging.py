"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable
from pythonjsonlogger import jsonlogger

from credicheck.config import settings


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


def log_purchase(
    request_id: str,
    requester_id: str,
    consumer_id: str,
    bureaus: Iterable[str],
    outcome: str,
    amount: int,
    duration_ms: float,
) -> None:
    """Log structured purchase outcome for analysis"""
    logging.info(
        "Purchase completed",
        extra={
            "request_id": request_id,
            "requester_id": requester_id,
            "consumer_id": consumer_id,
            "bureaus": list(bureaus),
            "step": "purchase_complete",
            "purchase_outcome": outcome,
            "amount": amount,
            "duration_ms": duration_ms,
        },
    )


def log_wallet_event(request_id: str, partner_id: str, purpose: str, amount: int, balance: int) -> None:
    """Log wallet balance movements"""
    logging.info(
        "Wallet updated",
        extra={
            "request_id": request_id,
            "partner_id": partner_id,
            "step": "wallet_update",
            "purpose": purpose,
            "amount": amount,
            "balance": balance,
        },
    )
