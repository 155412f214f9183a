"""
Tests for the decimal-string <-> pennies codec.
"""

import pytest

from anomaly_engine.ingestion.amounts import amount_to_pennies, pennies_to_amount


@pytest.mark.parametrize("amount, pennies", [
    ("1601.83", 160183),
    ("0.07", 7),
    ("3.49", 349),
    ("16.20", 1620),
    ("0.00", 0),
])
def test_round_trip(amount, pennies):
    assert amount_to_pennies(amount) == pennies
    assert pennies_to_amount(pennies) == amount


@pytest.mark.parametrize("pennies, expected", [
    (3, "0.03"),
    (30, "0.30"),
    (349, "3.49"),
    (2910, "29.10"),
    (2146, "21.46"),
])
def test_pennies_are_zero_padded(pennies, expected):
    assert pennies_to_amount(pennies) == expected


def test_leading_zeros_are_normalized():
    assert pennies_to_amount(amount_to_pennies("007.50")) == "7.50"


def test_surrounding_whitespace_ignored():
    assert amount_to_pennies(" 12.34 ") == 1234


def test_negative_pennies():
    assert pennies_to_amount(-5) == "-0.05"
