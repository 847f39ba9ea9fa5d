from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TypeAlias

from .currency import CurrencyCode


@dataclass(frozen=True)
class FxRate:
    """Resolved conversion rate and the currency that was looked up to get it."""

    rate: Decimal
    lookup_currency: CurrencyCode


@dataclass(frozen=True)
class NotSupportedCurrency:
    currency: CurrencyCode

    @property
    def message(self) -> str:
        return f"Not supported currency: {self.currency}"


@dataclass(frozen=True)
class NoFxRateFound:
    currency: CurrencyCode
    date: date
    min_date: date

    @property
    def message(self) -> str:
        return f"No fx rate found for {self.currency} between {self.min_date.isoformat()} and {self.date.isoformat()}"


@dataclass(frozen=True)
class CircularPeg:
    chain: tuple[CurrencyCode, ...]

    @property
    def message(self) -> str:
        return "Circular currency peg: " + " -> ".join(self.chain)


FxRateError: TypeAlias = NotSupportedCurrency | NoFxRateFound | CircularPeg
FxRateResult: TypeAlias = FxRate | FxRateError


class QuoteInvariantError(AssertionError):
    """Neither side of the pair is the provider currency when classifying a quote."""


__all__ = [
    "CircularPeg",
    "FxRate",
    "FxRateError",
    "FxRateResult",
    "NoFxRateFound",
    "NotSupportedCurrency",
    "QuoteInvariantError",
]
