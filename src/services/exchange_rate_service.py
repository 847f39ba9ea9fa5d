from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from config import config
from domain.currency import CurrencyCode, PegTable, RateTable, parse_currency
from domain.fx_calculator import get_fx_rate
from domain.fx_rates import FxRate, FxRateError, FxRateResult
from domain.pegs import DEFAULT_PEGS
from domain.providers import ExchangeRateProvider, RateFrequency, get_provider

from .rate_tables import build_rate_table, month_starts, read_rate_records

logger = logging.getLogger(__name__)


class ExchangeRateUnavailableError(RuntimeError):
    def __init__(self, error: FxRateError) -> None:
        super().__init__(error.message)
        self.error = error


class ExchangeRateService:
    def __init__(
        self,
        provider: ExchangeRateProvider,
        rates: RateTable,
        pegs: PegTable = DEFAULT_PEGS,
        *,
        lookback_days: int | None = None,
        frequency: RateFrequency = RateFrequency.DAILY,
    ) -> None:
        if not provider.publishes(frequency):
            msg = f"{provider.source} does not publish {frequency.lower()} rates"
            raise ValueError(msg)
        if lookback_days is None:
            lookback_days = config().fx_lookback_days
        if lookback_days < 0:
            msg = "lookback_days must be >= 0"
            raise ValueError(msg)

        self.provider = provider
        self.rates = rates
        self.pegs = pegs
        self.lookback_days = lookback_days
        self.frequency = frequency

    def min_fx_date(self, on: date) -> date:
        # Monthly rates are published once, on the first day of the month.
        if self.frequency is RateFrequency.MONTHLY:
            return on.replace(day=1)
        if self.lookback_days >= (on - date.min).days:
            return date.min
        return on - timedelta(days=self.lookback_days)

    def resolve(self, from_currency: CurrencyCode | str, to_currency: CurrencyCode | str, on: date) -> FxRateResult:
        return self._resolve(parse_currency(from_currency), parse_currency(to_currency), on, self.min_fx_date(on))

    def rate(self, from_currency: CurrencyCode | str, to_currency: CurrencyCode | str, on: date) -> Decimal:
        result = self.resolve(from_currency, to_currency, on)
        if not isinstance(result, FxRate):
            raise ExchangeRateUnavailableError(result)
        return result.rate

    def convert(
        self,
        amount: Decimal,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        on: date,
    ) -> Decimal:
        return amount * self.rate(from_currency, to_currency, on)

    def monthly_fx_rates(
        self,
        from_currency: CurrencyCode | str,
        to_currency: CurrencyCode | str,
        start: date,
        end: date,
    ) -> dict[date, FxRateResult]:
        """Resolve the pair once per month from ``start`` through ``end``, keyed by first day of month."""
        if self.frequency is not RateFrequency.MONTHLY:
            msg = "monthly_fx_rates requires a service built over monthly rates"
            raise ValueError(msg)

        base = parse_currency(from_currency)
        quote = parse_currency(to_currency)
        return {month: self._resolve(base, quote, month, month) for month in month_starts(start, end)}

    def _resolve(self, base: CurrencyCode, quote: CurrencyCode, on: date, min_date: date) -> FxRateResult:
        result = get_fx_rate(self.rates, self.pegs, on, min_date, self.provider, base, quote)
        if isinstance(result, FxRate):
            logger.debug(
                "%s %s->%s on %s = %s (via %s)",
                self.provider.source,
                base,
                quote,
                on,
                result.rate,
                result.lookup_currency,
            )
        else:
            logger.warning("%s %s->%s on %s failed: %s", self.provider.source, base, quote, on, result.message)
        return result


def build_default_service(rates_file: Path | None = None) -> ExchangeRateService:
    settings = config()
    provider = get_provider(settings.fx_provider)
    path = rates_file or settings.fx_rates_file
    if path is None:
        msg = "No rates file given and FX_RATES_FILE is not set"
        raise ValueError(msg)

    rates = build_rate_table(read_rate_records(path), provider, frequency=RateFrequency.DAILY)
    return ExchangeRateService(provider=provider, rates=rates, lookback_days=settings.fx_lookback_days)


__all__ = ["ExchangeRateService", "ExchangeRateUnavailableError", "build_default_service"]
