from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

SATOSHI_PER_BITCOIN = Decimal(10) ** 8

Amount = int | float | str | Decimal


def to_fixed(number: Amount, precision: int = 8) -> str:
    """Cut ``number`` to ``precision`` decimal places without rounding."""
    quantum = Decimal(1).scaleb(-precision)
    return format(_decimal(number).quantize(quantum, rounding=ROUND_DOWN), "f")


def to_bitcoin(satoshi: int | str) -> str:
    return to_fixed(Decimal(int(satoshi)) / SATOSHI_PER_BITCOIN, 8)


def to_satoshi(bitcoin: Amount) -> str:
    return to_fixed(Decimal(to_fixed(bitcoin, 8)) * SATOSHI_PER_BITCOIN, 0)


def to_ubtc(bitcoin: Amount) -> str:
    return to_fixed(Decimal(to_fixed(bitcoin, 8)) * Decimal(10) ** 6, 4)


def to_mbtc(bitcoin: Amount) -> str:
    return to_fixed(Decimal(to_fixed(bitcoin, 8)) * Decimal(10) ** 3, 4)


def _decimal(number: Amount) -> Decimal:
    if isinstance(number, float):
        return Decimal(repr(number))
    return Decimal(number)
