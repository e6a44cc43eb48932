"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from propcalc.config import settings


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


def log_calculation(request_id: str, calculation: str, duration_ms: float, **fields: Any) -> None:
    """Log a completed calculator call with its key outputs"""
    logging.info(
        "Calculation completed",
        extra={
            "request_id": request_id,
            "step": "calculation_complete",
            "calculation": calculation,
            "duration_ms": duration_ms,
            **fields,
        },
    )


def log_job(request_id: str, job: str, processed: int, created: int, skipped: int, duration_ms: float) -> None:
    """Log the outcome of a scheduled job run"""
    logging.info(
        "Job completed",
        extra={
            "request_id": request_id,
            "step": "job_complete",
            "job": job,
            "processed": processed,
            "records_created": created,
            "skipped": skipped,
            "duration_ms": duration_ms,
        },
    )
