"""Tests for configuration and date helpers."""

from datetime import date

import pytest

from nutrition_ledger.config import parse_storage_backend
from nutrition_ledger.dates import date_key, now_millis, today_key


def test_parse_storage_backend() -> None:
    assert parse_storage_backend("file") == "file"
    assert parse_storage_backend(" JSON ") == "file"
    assert parse_storage_backend("") == "file"
    assert parse_storage_backend("Supabase") == "supabase"


def test_parse_storage_backend_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        parse_storage_backend("sqlite")


def test_date_key_is_zero_padded() -> None:
    assert date_key(date(2026, 1, 5)) == "2026-01-05"


def test_today_key_in_timezone() -> None:
    key = today_key("UTC")

    assert len(key) == 10
    assert date.fromisoformat(key)


def test_now_millis_is_epoch_milliseconds() -> None:
    assert now_millis() > 1_700_000_000_000
