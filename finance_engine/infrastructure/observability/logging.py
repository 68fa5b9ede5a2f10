"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from finance_engine.config import settings


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
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_simulation(
    request_id: str,
    operation: str,
    strategy: str,
    status: str,
    total_months: int,
    duration_ms: float,
) -> None:
    """Log a completed payoff simulation or comparison"""
    level = logging.WARNING if status == "exhausted" else logging.INFO
    logging.log(
        level,
        "Payoff simulation completed",
        extra={
            "request_id": request_id,
            "step": operation,
            "strategy": strategy,
            "payoff_status": status,
            "total_months": total_months,
            "duration_ms": duration_ms,
        },
    )


def log_rebalance_plan(
    request_id: str,
    status: str,
    trade_count: int,
    max_drift: float,
    duration_ms: float,
) -> None:
    """Log the outcome of a rebalance plan"""
    logging.info(
        "Rebalance plan completed",
        extra={
            "request_id": request_id,
            "step": "rebalance_plan",
            "plan_status": status,
            "trade_count": trade_count,
            "max_drift": max_drift,
            "duration_ms": duration_ms,
        },
    )
