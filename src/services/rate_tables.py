from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

from domain.currency import CurrencyCode, RateTable, parse_currency
from domain.providers import ExchangeRateProvider, ExchangeRateSource, RateFrequency

from .rate_types import ExchangeRate

logger = logging.getLogger(__name__)


class RateTableError(Exception):
    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


def build_rate_table(
    records: Iterable[ExchangeRate],
    provider: ExchangeRateProvider,
    *,
    frequency: RateFrequency | None = None,
) -> RateTable:
    """Group published rates by currency and date.

    Records of another frequency are skipped when ``frequency`` is given.
    """
    table: dict[CurrencyCode, dict[date, Decimal]] = {}
    for record in records:
        if frequency is not None and record.frequency != frequency:
            continue
        if record.source != provider.source:
            raise RateTableError(f"Rate for {record.currency} comes from {record.source}, expected {provider.source}")
        if record.currency == provider.currency:
            raise RateTableError(f"{provider.source} does not publish rates for its own currency {record.currency}")
        if not record.rate.is_finite() or record.rate <= 0:
            raise RateTableError(f"Rate for {record.currency} on {record.date.isoformat()} must be > 0")

        rates_by_date = table.setdefault(record.currency, {})
        existing = rates_by_date.get(record.date)
        if existing is not None and existing != record.rate:
            raise RateTableError(
                f"Conflicting rates for {record.currency} on {record.date.isoformat()}: {existing} != {record.rate}"
            )
        rates_by_date[record.date] = record.rate

    logger.debug("Built %s rate table with %d currencies", provider.source, len(table))
    return MappingProxyType({currency: MappingProxyType(rates) for currency, rates in table.items()})


def read_rate_records(path: Path) -> list[ExchangeRate]:
    records: list[ExchangeRate] = []
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            records.append(_parse_record(line, line_number=line_number))

    logger.info("Read %d exchange rates from %s", len(records), path)
    return records


def _parse_record(line: str, *, line_number: int) -> ExchangeRate:
    try:
        raw = json.loads(line, parse_float=Decimal)
    except ValueError as exc:
        raise RateTableError("invalid JSON", line_number=line_number) from exc
    if not isinstance(raw, dict):
        raise RateTableError("expected a JSON object", line_number=line_number)

    try:
        record = ExchangeRate(
            date=date.fromisoformat(raw["date"]),
            currency=parse_currency(raw["currency"]),
            rate=Decimal(str(raw["rate"])),
            source=ExchangeRateSource(str(raw["source"]).upper()),
            frequency=RateFrequency(str(raw.get("frequency", RateFrequency.DAILY)).upper()),
        )
    except KeyError as exc:
        raise RateTableError(f"missing field {exc.args[0]!r}", line_number=line_number) from exc
    except (AttributeError, TypeError, ValueError, InvalidOperation) as exc:
        raise RateTableError(str(exc) or "invalid exchange rate record", line_number=line_number) from exc

    if not record.rate.is_finite():
        raise RateTableError(f"rate must be a finite number, got {record.rate}", line_number=line_number)
    return record


def month_starts(start: date, end: date) -> Iterator[date]:
    """Iterate the first day of every month from ``start`` through ``end``."""
    if end < start:
        raise ValueError("end must be later than or equal to start")
    return _iter_month_starts(start, end)


def _iter_month_starts(start: date, end: date) -> Iterator[date]:
    current = start.replace(day=1)
    last = end.replace(day=1)
    while current <= last:
        yield current
        current = date(current.year + 1, 1, 1) if current.month == 12 else current.replace(month=current.month + 1)


__all__ = ["RateTableError", "build_rate_table", "month_starts", "read_rate_records"]
