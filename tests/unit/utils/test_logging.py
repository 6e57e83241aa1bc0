"""Tests for logging helpers."""

from __future__ import annotations

import logging

from _pytest.logging import LogCaptureFixture

from message_sender.utils.logging import (
    CorrelationIDFilter,
    SecretRedactingFilter,
    clear_correlation_id,
    correlation_id_context,
    get_correlation_id,
    log_with_context,
    set_correlation_id,
)
from message_sender.utils.sanitization import REDACTED


def _record(msg: str, args: tuple[object, ...] = (), **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:
    def test_context_sets_and_restores_id(self) -> None:
        set_correlation_id("outer")

        with correlation_id_context("inner") as cid:
            assert cid == "inner"
            assert get_correlation_id() == "inner"

        assert get_correlation_id() == "outer"
        clear_correlation_id()

    def test_context_generates_id_when_missing(self) -> None:
        clear_correlation_id()

        with correlation_id_context() as cid:
            assert len(cid) == 32

        assert get_correlation_id() is None

    def test_filter_adds_placeholder_without_id(self) -> None:
        clear_correlation_id()
        record = _record("hello")

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id == "N/A"  # pyright: ignore[reportAttributeAccessIssue]


class TestSecretRedactingFilter:
    def test_redacts_message_args_and_extra(self) -> None:
        record = _record(
            "POST to %s",
            ("https://x.io/a?token=abc",),
            access_token="abc",
            provider_name="webhook_x",
        )

        _ = SecretRedactingFilter().filter(record)

        assert record.getMessage() == f"POST to https://x.io/a?token={REDACTED}"
        assert record.access_token == REDACTED  # pyright: ignore[reportAttributeAccessIssue]
        assert record.provider_name == "webhook_x"  # pyright: ignore[reportAttributeAccessIssue]


def test_log_with_context_attaches_fields(caplog: LogCaptureFixture) -> None:
    logger = logging.getLogger("message_sender.tests")
    caplog.set_level(logging.INFO, logger="message_sender.tests")

    with correlation_id_context("cid-1"):
        log_with_context(logger, logging.INFO, "Delivered", extra={"attempt": 2})

    record = caplog.records[-1]
    assert record.attempt == 2  # pyright: ignore[reportAttributeAccessIssue]
    assert record.correlation_id == "cid-1"  # pyright: ignore[reportAttributeAccessIssue]
