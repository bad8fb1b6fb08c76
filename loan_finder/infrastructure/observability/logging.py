"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from loan_finder.config import settings

logger = logging.getLogger("loan_finder")


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers
    root.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_parse_attempt(
    provider: str,
    succeeded: bool,
    duration_ms: float,
    confidence: float,
    error_type: Optional[str] = None,
) -> None:
    """Log one provider parse attempt"""
    extra = {
        "step": "parse_attempt",
        "provider": provider,
        "outcome": "success" if succeeded else "failure",
        "confidence": confidence,
        "duration_ms": duration_ms,
    }
    if succeeded:
        logger.info("Query parsed", extra=extra)
    else:
        logger.warning("Query parse failed", extra={**extra, "error_type": error_type})


def log_fallback(from_provider: str, to_provider: str, reason: Optional[str]) -> None:
    """Log a switch to the fallback provider"""
    logger.warning(
        "Trying fallback provider",
        extra={
            "step": "fallback",
            "from_provider": from_provider,
            "to_provider": to_provider,
            "reason": reason,
        },
    )


def log_diagnostics(provider: str, api_key_status: str, connection_status: str) -> None:
    """Log a provider self-check result"""
    logger.info(
        "Provider diagnostics completed",
        extra={
            "step": "diagnostics",
            "provider": provider,
            "api_key_status": api_key_status,
            "connection_status": connection_status,
        },
    )


def log_search(
    request_id: Optional[str],
    query: str,
    success: bool,
    total_found: int,
    duration_ms: float,
    error_kind: Optional[str] = None,
) -> None:
    """Log structured search outcome for analysis"""
    logger.info(
        "Loan search completed",
        extra={
            "request_id": request_id,
            "step": "search_complete",
            "query": query[:100],
            "outcome": "success" if success else "failure",
            "total_found": total_found,
            "error_kind": error_kind,
            "duration_ms": duration_ms,
        },
    )
