"""
Structured logging helpers.
"""

import logging

from util.logging import StructuredLogger, sanitize_payload, logger


def test_log_operation_format(caplog):
    structured = StructuredLogger("faqsearch.test")
    with caplog.at_level(logging.INFO, logger="faqsearch.test"):
        structured.log_operation("store.append_many", "success", {"count": 3})

    assert "Operation: store.append_many, Status: success, Details: {'count': 3}" in caplog.text


def test_failed_operations_are_warnings(caplog):
    structured = StructuredLogger("faqsearch.test.failed")
    with caplog.at_level(logging.DEBUG, logger="faqsearch.test.failed"):
        structured.log_store_operation("append", {"label": "x", "error": "locked"}, status="failed")

    assert caplog.records[-1].levelno == logging.WARNING


def test_long_labels_are_truncated():
    label = "Q: " + "x" * 200
    assert sanitize_payload({"label": label})["label"] == label[:50] + "..."


def test_secrets_are_redacted():
    assert sanitize_payload({"api_key": "abc", "model": "m"}) == {"api_key": "[REDACTED]", "model": "m"}


def test_global_logger_has_single_handler():
    assert len(logger.logger.handlers) == 1
