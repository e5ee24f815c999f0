"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from credit_settlement.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_settlement_quote(
    request_id: str,
    purchase_id: str,
    days_elapsed: int,
    tier_type: str,
    final_payable: str,
    duration_ms: float,
) -> None:
    """Log structured quote outcome for analysis"""
    logging.info(
        "Settlement quoted",
        extra={
            "request_id": request_id,
            "purchase_id": purchase_id,
            "step": "quote_complete",
            "days_elapsed": days_elapsed,
            "tier_type": tier_type,
            "final_payable": final_payable,
            "duration_ms": duration_ms,
        },
    )


def log_settlement_refusal(request_id: str, purchase_id: str, kind: str, message: str) -> None:
    """Log a refused quote or payment request"""
    logging.warning(
        "Settlement refused",
        extra={
            "request_id": request_id,
            "purchase_id": purchase_id,
            "step": "refused",
            "error_kind": kind,
            "reason": message,
        },
    )
