"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from splitledger.config import settings
from splitledger.domain.models import DuesReport


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


def log_dues_report(request_id: str, report: DuesReport, duration_ms: float) -> None:
    """Log structured dues outcome for analysis"""
    logging.info(
        "Dues computed",
        extra={
            "request_id": request_id,
            "participant": report.participant,
            "step": "dues_complete",
            "group_count": len(report.groups),
            "errored_groups": report.errored_groups,
            "rejected_splits": len(report.rejected_splits),
            "global_transaction_count": len(report.global_transactions),
            "global_error": report.global_error,
            "duration_ms": duration_ms,
        },
    )


def log_group_settlement(request_id: str, group_id: str, transaction_count: int, duration_ms: float) -> None:
    """Log structured group settlement outcome"""
    logging.info(
        "Group settlement computed",
        extra={
            "request_id": request_id,
            "group_id": group_id,
            "step": "settlement_complete",
            "transaction_count": transaction_count,
            "duration_ms": duration_ms,
        },
    )
