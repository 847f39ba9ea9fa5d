from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from domain.currency import CurrencyCode
from domain.providers import ExchangeRateSource, RateFrequency


@dataclass(frozen=True)
class ExchangeRate:
    """Published rate of ``currency`` against the base currency of ``source``."""

    date: date
    currency: CurrencyCode
    rate: Decimal
    source: ExchangeRateSource
    frequency: RateFrequency = RateFrequency.DAILY


__all__ = ["ExchangeRate"]
