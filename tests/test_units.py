from __future__ import annotations

from decimal import Decimal

import pytest

from bitcoind_sdk import to_bitcoin, to_fixed, to_mbtc, to_satoshi, to_ubtc


@pytest.mark.parametrize(
    ("satoshi", "bitcoin"),
    [
        (1000, "0.00001000"),
        (2500, "0.00002500"),
        (-1000, "-0.00001000"),
        (1, "0.00000001"),
        (100000000, "1.00000000"),
        (150000000, "1.50000000"),
        (2100000000000000, "21000000.00000000"),
    ],
)
def test_satoshi_bitcoin_conversion(satoshi: int, bitcoin: str) -> None:
    assert to_bitcoin(satoshi) == bitcoin
    assert to_satoshi(bitcoin) == str(satoshi)


@pytest.mark.parametrize(
    ("ubtc", "bitcoin"),
    [
        (10, "0.00001000"),
        (25, "0.00002500"),
        (-10, "-0.00001000"),
        (1000000, "1.00000000"),
        (1500000, "1.50000000"),
    ],
)
def test_to_ubtc(ubtc: int, bitcoin: str) -> None:
    assert Decimal(to_ubtc(bitcoin)) == ubtc


@pytest.mark.parametrize(
    ("mbtc", "bitcoin"),
    [
        ("0.01", "0.00001000"),
        ("0.025", "0.00002500"),
        ("-0.01", "-0.00001000"),
        ("1000", "1.00000000"),
        ("1500", "1.50000000"),
    ],
)
def test_to_mbtc(mbtc: str, bitcoin: str) -> None:
    assert Decimal(to_mbtc(bitcoin)) == Decimal(mbtc)


@pytest.mark.parametrize(
    ("number", "precision", "expected"),
    [
        (1.2345678910, 0, "1"),
        (1.2345678910, 2, "1.23"),
        (1.2345678910, 4, "1.2345"),
        (1.2345678910, 8, "1.23456789"),
        ("0.999", 2, "0.99"),
    ],
)
def test_to_fixed_truncates(number: object, precision: int, expected: str) -> None:
    assert to_fixed(number, precision) == expected


def test_to_satoshi_accepts_float() -> None:
    assert to_satoshi(0.1) == "10000000"
