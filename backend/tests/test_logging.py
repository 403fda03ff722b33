"""
Tests for credential masking and the JSON log formatter
"""
import json
import logging

import pytest

from app.core.logging_config import (CredentialMaskingFilter, LoggingConfig,
                                     RequestJSONFormatter)


@pytest.mark.parametrize("raw, hidden", [
    ('{"password": "Sup3rSecret!"}', "Sup3rSecret!"),
    ("refresh_token=abc.def.ghi", "abc.def.ghi"),
    ("otp_code: 4821", "4821"),
    ("Authorization: Bearer abcdef123", "abcdef123"),
    ("token eyJhbGciOi.eyJpZCI6.c2lnbmF0dXJl leaked", "eyJhbGciOi.eyJpZCI6.c2lnbmF0dXJl"),
])
def test_masks_credentials(raw, hidden):
    assert hidden not in CredentialMaskingFilter.mask(raw)


def test_filter_masks_arguments():
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "login %s", ("password=hunter22",), None)
    CredentialMaskingFilter(enabled=True).filter(record)
    assert "hunter22" not in record.getMessage()


def test_disabled_filter_leaves_record():
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "password=hunter22", None, None)
    CredentialMaskingFilter(enabled=False).filter(record)
    assert record.getMessage() == "password=hunter22"


def test_json_formatter_merges_context_and_extra():
    LoggingConfig.set_context(request_id="req-1", user_id="u-1")
    try:
        record = logging.LogRecord("app.services", logging.WARNING, __file__, 10, "Like rejected", None, None)
        record.project_id = "p-9"
        entry = json.loads(RequestJSONFormatter().format(record))
    finally:
        LoggingConfig.clear_context()

    assert entry["message"] == "Like rejected"
    assert entry["level"] == "WARNING"
    assert entry["request_id"] == "req-1"
    assert entry["user_id"] == "u-1"
    assert entry["project_id"] == "p-9"
