"""Tests for utils.helpers and the JSON log formatter."""

import json
import logging
from datetime import date

import pytest

from callsheet.middleware.logging_config import JSONFormatter
from callsheet.utils.helpers import clean_text, parse_date


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-03-15", date(2024, 3, 15)),
        ("2024-03-15T09:00:00Z", date(2024, 3, 15)),
        ("15.03.2024", date(2024, 3, 15)),
        (date(2024, 3, 15), date(2024, 3, 15)),
        ("", None),
        (None, None),
        ("15/03/2024", None),
    ],
)
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


def test_clean_text():
    assert clean_text("  감독  ") == "감독"
    assert clean_text("   ") is None
    assert clean_text(None) is None
    assert clean_text(3) == "3"


def test_json_formatter_keeps_hangul_and_extra_fields():
    record = logging.LogRecord(
        name="callsheet.test", level=logging.INFO, pathname=__file__, lineno=1,
        msg="Rendered %s", args=("일촬표",), exc_info=None,
    )
    record.call_sheet_id = 7
    record.document = "pdf"

    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "Rendered 일촬표"
    assert entry["call_sheet_id"] == 7
    assert entry["document"] == "pdf"
    assert "project_id" not in entry
