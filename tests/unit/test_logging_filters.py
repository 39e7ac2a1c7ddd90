import logging
import sys

import pytest

from fileproxy.core.logging import RequestIdFilter, SecretRedactionFilter, configure_logging
from fileproxy.core.observability import log_event
from fileproxy.core.request_context import (
    MAX_REQUEST_ID_LENGTH,
    get_request_id,
    normalize_request_id,
    request_id_scope,
)


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


def test_redaction_filter_scrubs_formatted_message():
    record = _record("calling https://api.telegram.org/bot%s/getMe", "111:abc")

    assert SecretRedactionFilter(secrets=["111:abc"]).filter(record) is True
    assert record.getMessage() == "calling https://api.telegram.org/bot[REDACTED]/getMe"


def test_redaction_filter_scrubs_exception_text():
    try:
        raise RuntimeError("token 111:abc rejected")
    except RuntimeError:
        record = logging.LogRecord(
            "test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    SecretRedactionFilter(secrets=["111:abc"]).filter(record)

    assert "111:abc" not in record.exc_text
    assert "[REDACTED]" in record.exc_text


def test_request_id_filter_uses_context():
    record = _record("hello")
    RequestIdFilter().filter(record)
    assert record.request_id == "-"

    with request_id_scope("req-9"):
        record = _record("hello")
        RequestIdFilter().filter(record)
    assert record.request_id == "req-9"


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_configure_logging_quiets_url_logging_libraries():
    configure_logging("DEBUG", secrets=["111:abc"])

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_log_event_emits_sorted_json_fields(caplog):
    logger = logging.getLogger("fileproxy.tests")
    with request_id_scope("req-1"):
        with caplog.at_level(logging.INFO, logger="fileproxy.tests"):
            log_event(logger, event="file_proxy.redirect", file_id="abc", attempt=1)

    assert caplog.records[-1].getMessage() == (
        'event=file_proxy.redirect fields={"attempt":1,"file_id":"abc","request_id":"req-1"}'
    )


def test_request_id_scope_restores_outer_value():
    with request_id_scope("outer"):
        with request_id_scope("inner"):
            assert get_request_id() == "inner"
        assert get_request_id() == "outer"
    assert get_request_id() is None


@pytest.mark.parametrize("incoming", [None, "", "   "])
def test_normalize_request_id_mints_id_when_absent(incoming):
    request_id = normalize_request_id(incoming)

    assert len(request_id) == 32
    assert request_id != normalize_request_id(incoming)


def test_normalize_request_id_keeps_and_truncates_caller_value():
    assert normalize_request_id("  abc-123 ") == "abc-123"
    assert normalize_request_id("x" * 300) == "x" * MAX_REQUEST_ID_LENGTH
