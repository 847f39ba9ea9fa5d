"""Exchange rate resolution over in-memory rate and peg tables.

Handles quote type inversion, pegged currency resolution and date fallback.
No state, no I/O, no side effects.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from .currency import CurrencyCode, PegTable, QuoteType, RateTable
from .fx_rates import CircularPeg, FxRate, FxRateResult, NoFxRateFound, NotSupportedCurrency, QuoteInvariantError
from .providers import ExchangeRateProvider

_ONE_DAY = timedelta(days=1)


def get_fx_rate(
    rates: RateTable,
    pegs: PegTable,
    date: date,
    min_date: date,
    provider: ExchangeRateProvider,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    *,
    _visited: tuple[CurrencyCode, ...] = (),
) -> FxRateResult:
    """Return how many units of ``to_currency`` one unit of ``from_currency`` buys on ``date``.

    Rates missing on ``date`` fall back to the closest earlier day down to
    ``min_date`` inclusive. Currencies without a rate series are resolved
    through ``pegs``.
    """
    # Same-currency pairs show up in recursive lookups of currencies pegged to the provider currency.
    if from_currency == to_currency:
        return FxRate(rate=Decimal(1), lookup_currency=from_currency)

    # The provider currency is never a row of the rate table: look up the other side.
    to_is_provider = to_currency == provider.currency
    lookup_currency = from_currency if to_is_provider else to_currency
    anchor_currency = to_currency if to_is_provider else from_currency

    rates_by_date = rates.get(lookup_currency)
    if rates_by_date is None:
        peg = pegs.get(lookup_currency)
        if peg is None:
            return NotSupportedCurrency(currency=lookup_currency)
        if lookup_currency in _visited:
            return CircularPeg(chain=(*_visited, lookup_currency))

        pegged_result = get_fx_rate(
            rates,
            pegs,
            date,
            min_date,
            provider,
            anchor_currency,
            peg.pegged_to,
            _visited=(*_visited, lookup_currency),
        )
        if not isinstance(pegged_result, FxRate):
            return pegged_result

        rate = peg.rate / pegged_result.rate if to_is_provider else pegged_result.rate / peg.rate
        return FxRate(rate=rate, lookup_currency=lookup_currency)

    day = date
    while day >= min_date:
        fx_rate = rates_by_date.get(day)
        if fx_rate is not None:
            return FxRate(
                rate=_apply_quote_type(fx_rate, provider, from_currency, to_currency),
                lookup_currency=lookup_currency,
            )
        if day == min_date:
            break
        day -= _ONE_DAY

    return NoFxRateFound(currency=lookup_currency, date=date, min_date=min_date)


def _apply_quote_type(
    fx_rate: Decimal,
    provider: ExchangeRateProvider,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
) -> Decimal:
    # QuoteType  Provider  From  To   Rate
    # DIRECT     EUR       USD   EUR  fx_rate
    # DIRECT     EUR       EUR   USD  1/fx_rate
    # INDIRECT   EUR       USD   EUR  1/fx_rate
    # INDIRECT   EUR       EUR   USD  fx_rate
    if provider.currency not in (from_currency, to_currency):
        raise QuoteInvariantError(
            f"Neither {from_currency} nor {to_currency} is the provider currency {provider.currency}"
        )

    if provider.quote_type is QuoteType.DIRECT:
        return fx_rate if to_currency == provider.currency else Decimal(1) / fx_rate
    if provider.quote_type is QuoteType.INDIRECT:
        return fx_rate if from_currency == provider.currency else Decimal(1) / fx_rate
    raise QuoteInvariantError(f"Unsupported quote type: {provider.quote_type}")


__all__ = ["get_fx_rate"]
