from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable

from .currency import CurrencyCode, PegTable, PeggedCurrency


def build_peg_table(pegs: Iterable[PeggedCurrency]) -> PegTable:
    table: dict[CurrencyCode, PeggedCurrency] = {}
    for peg in pegs:
        if peg.currency in table:
            raise ValueError(f"Duplicate peg definition for {peg.currency}")
        table[peg.currency] = peg
    return MappingProxyType(table)


# Hard pegs only; managed floats and currency bands are left to the rate tables.
DEFAULT_PEGS: PegTable = build_peg_table(
    [
        PeggedCurrency(currency=CurrencyCode.AED, pegged_to=CurrencyCode.USD, rate=Decimal("0.27229")),
        PeggedCurrency(currency=CurrencyCode.SAR, pegged_to=CurrencyCode.USD, rate=Decimal("0.26667")),
        PeggedCurrency(currency=CurrencyCode.QAR, pegged_to=CurrencyCode.USD, rate=Decimal("0.27473")),
        PeggedCurrency(currency=CurrencyCode.OMR, pegged_to=CurrencyCode.USD, rate=Decimal("2.60078")),
        PeggedCurrency(currency=CurrencyCode.BHD, pegged_to=CurrencyCode.USD, rate=Decimal("2.65957")),
        PeggedCurrency(currency=CurrencyCode.JOD, pegged_to=CurrencyCode.USD, rate=Decimal("1.41044")),
        PeggedCurrency(currency=CurrencyCode.BGN, pegged_to=CurrencyCode.EUR, rate=Decimal("0.51129")),
        PeggedCurrency(currency=CurrencyCode.XOF, pegged_to=CurrencyCode.EUR, rate=Decimal("0.00152449")),
        PeggedCurrency(currency=CurrencyCode.XAF, pegged_to=CurrencyCode.EUR, rate=Decimal("0.00152449")),
    ]
)


__all__ = ["DEFAULT_PEGS", "build_peg_table"]
