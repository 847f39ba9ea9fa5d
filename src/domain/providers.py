from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .currency import CurrencyCode, QuoteType


class ExchangeRateSource(StrEnum):
    ECB = "ECB"
    MXCB = "MXCB"


class RateFrequency(StrEnum):
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


@dataclass(frozen=True)
class ExchangeRateProvider:
    """Publisher of a rate table: its base currency and quoting convention.

    Every rate the provider publishes is expressed against ``currency``, so the
    base currency never appears as a row of its own rate table.
    """

    currency: CurrencyCode
    quote_type: QuoteType
    source: ExchangeRateSource
    bank_id: str
    frequencies: frozenset[RateFrequency] = frozenset({RateFrequency.DAILY})

    def publishes(self, frequency: RateFrequency) -> bool:
        return frequency in self.frequencies


EUROPEAN_CENTRAL_BANK = ExchangeRateProvider(
    currency=CurrencyCode.EUR,
    quote_type=QuoteType.INDIRECT,
    source=ExchangeRateSource.ECB,
    bank_id="EUECB",
    frequencies=frozenset({RateFrequency.DAILY, RateFrequency.MONTHLY}),
)

BANCO_DE_MEXICO = ExchangeRateProvider(
    currency=CurrencyCode.MXN,
    quote_type=QuoteType.DIRECT,
    source=ExchangeRateSource.MXCB,
    bank_id="MXCB",
)

_PROVIDERS: dict[ExchangeRateSource, ExchangeRateProvider] = {
    provider.source: provider for provider in (EUROPEAN_CENTRAL_BANK, BANCO_DE_MEXICO)
}


def get_provider(source: ExchangeRateSource | str) -> ExchangeRateProvider:
    try:
        key = ExchangeRateSource(source.upper()) if isinstance(source, str) else source
        return _PROVIDERS[key]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unknown exchange rate source: {source!r}") from exc


__all__ = [
    "BANCO_DE_MEXICO",
    "EUROPEAN_CENTRAL_BANK",
    "ExchangeRateProvider",
    "ExchangeRateSource",
    "RateFrequency",
    "get_provider",
]
