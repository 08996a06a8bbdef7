import pytest

from services.amounts import format_currency, parse_amount


@pytest.mark.parametrize("raw, expected", [
    ("1 234,56 €", 1234.56),
    ("1 000", 1000.0),
    ("2500.5", 2500.5),
    ("12abc", 12.0),
    (12, 12.0),
    ("", 0.0),
    (None, 0.0),
    ("abc", 0.0),
    ("€", 0.0),
    ("1e999", 0.0),
    ("-1e999 €", 0.0),
])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


def test_format_currency():
    assert format_currency("1 234,56 €") == "1 234,56 €"
    assert format_currency("1 234,5") == "1 234,5 €"
    assert format_currency(1500000) == "1 500 000 €"
    assert format_currency(-2500.004) == "-2 500 €"
    assert format_currency("abc") == "0 €"
    assert format_currency(None) == "0 €"


def test_format_currency_ignores_overflowing_amounts():
    assert format_currency("1e999") == "0 €"
