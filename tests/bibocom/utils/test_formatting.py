"""Tests for display helpers."""

from datetime import datetime

import pytest

from bibocom.utils.formatting import (
    PLACEHOLDER_AVATAR,
    format_chat_date,
    format_price,
    format_time,
    photo_url,
)


@pytest.mark.parametrize(
    "amount, expected",
    [(10000, "10 000 FCFA"), (0, "0 FCFA"), (None, "0 FCFA"), (1234567, "1 234 567 FCFA"), (99.5, "99.50 FCFA")],
)
def test_format_price(amount, expected):
    assert format_price(amount) == expected


def test_format_chat_date():
    now = datetime(2024, 3, 10, 18, 0)
    assert format_chat_date(datetime(2024, 3, 10, 9, 5), now) == "09:05"
    assert format_chat_date(datetime(2024, 3, 9, 23, 0), now) == "Yesterday"
    assert format_chat_date(datetime(2024, 3, 5, 8, 0), now) == "5 Mar"
    assert format_chat_date(None) == ""


def test_format_time():
    assert format_time(datetime(2024, 3, 10, 7, 3)) == "07:03"


def test_photo_url(monkeypatch):
    monkeypatch.setenv("API_URL", "http://api.test/api")
    assert photo_url(None) == PLACEHOLDER_AVATAR
    assert photo_url("https://cdn/x.png") == "https://cdn/x.png"
    assert photo_url("/uploads/x.png") == "http://api.test/uploads/x.png"
