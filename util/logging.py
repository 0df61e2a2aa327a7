"""
Structured logging for faqsearch store, search and embedding operations.
"""

import logging
import os
from typing import Any, Dict, List

# Label text is user content; only a prefix goes into logs
MAX_LOGGED_TEXT = 50


class StructuredLogger:
    """Structured logger for store, ranker, embedding and ingest operations."""

    def __init__(self, name: str = "faqsearch"):
        self.logger = logging.getLogger(name)
        level_name = os.getenv("LOG_LEVEL", "INFO").upper()
        self.logger.setLevel(getattr(logging, level_name, logging.INFO))

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None,
                      level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            level = max(level, logging.WARNING)
        self.logger.log(level, message)

    def log_store_operation(self, operation: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log an embedding store operation. Single-record appends are logged at DEBUG."""
        log_details = sanitize_payload(details or {}, sensitive_fields=[])
        level = logging.DEBUG if operation == "append" else logging.INFO
        self.log_operation(f"store.{operation}", status, log_details, level=level)

    def log_search(self, dimension: int, limit: int, hit_count: int, start_time: float, end_time: float):
        """Log a ranker search."""
        duration_ms = round((end_time - start_time) * 1000, 2)
        self.log_operation("ranker.search", "success", {
            "dimension": dimension,
            "limit": limit,
            "hits": hit_count,
            "duration_ms": duration_ms
        }, level=logging.DEBUG)

    def log_embedding_request(self, provider: str, method: str, start_time: float, end_time: float,
                              status: str = "success", details: Dict[str, Any] = None):
        """Log a call to an embedding provider."""
        log_details = {"method": method, "duration_ms": round((end_time - start_time) * 1000, 2)}
        if details:
            log_details.update(details)

        self.log_operation(f"embedding.{provider}", status, log_details, level=logging.DEBUG)

    def log_ingest_progress(self, source: str, embedded: int, total: int):
        """Log FAQ ingestion progress."""
        self.log_operation("ingest.progress", "running", {
            "source": source,
            "embedded": embedded,
            "total": total
        })

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def sanitize_payload(payload: Any, sensitive_fields: List[str] = None) -> Any:
    """Truncate long strings and redact sensitive fields before logging."""
    if sensitive_fields is None:
        sensitive_fields = ['api_key', 'secret', 'password']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if k in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        return payload[:MAX_LOGGED_TEXT] + "..." if len(payload) > MAX_LOGGED_TEXT else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, sensitive_fields) for item in payload]
    else:
        return payload


# Global logger instance
logger = StructuredLogger()
