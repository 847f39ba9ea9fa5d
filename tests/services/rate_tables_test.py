from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from domain.currency import CurrencyCode
from domain.providers import BANCO_DE_MEXICO, EUROPEAN_CENTRAL_BANK, ExchangeRateSource, RateFrequency
from services.rate_tables import RateTableError, build_rate_table, month_starts, read_rate_records
from services.rate_types import ExchangeRate


def _ecb_rate(
    day: date, currency: CurrencyCode, rate: str, frequency: RateFrequency = RateFrequency.DAILY
) -> ExchangeRate:
    return ExchangeRate(
        date=day, currency=currency, rate=Decimal(rate), source=ExchangeRateSource.ECB, frequency=frequency
    )


def test_read_rate_records_parses_jsonl(tmp_path: Path) -> None:
    path = tmp_path / "rates.jsonl"
    path.write_text(
        '{"date": "2024-01-15", "currency": "usd", "rate": "1.0856", "source": "ECB"}\n'
        "\n"
        '{"date": "2024-01-01", "currency": "GBP", "rate": 0.8675, "source": "ecb", "frequency": "monthly"}\n',
        encoding="utf-8",
    )

    records = read_rate_records(path)

    assert records == [
        ExchangeRate(
            date=date(2024, 1, 15),
            currency=CurrencyCode.USD,
            rate=Decimal("1.0856"),
            source=ExchangeRateSource.ECB,
            frequency=RateFrequency.DAILY,
        ),
        ExchangeRate(
            date=date(2024, 1, 1),
            currency=CurrencyCode.GBP,
            rate=Decimal("0.8675"),
            source=ExchangeRateSource.ECB,
            frequency=RateFrequency.MONTHLY,
        ),
    ]


def test_read_rate_records_reports_line_of_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "rates.jsonl"
    path.write_text('{"date": "2024-01-15", "currency": "USD", "rate": "1.08", "source": "ECB"}\n{not json\n')

    with pytest.raises(RateTableError) as exc_info:
        read_rate_records(path)

    assert exc_info.value.line_number == 2


def test_read_rate_records_reports_missing_field(tmp_path: Path) -> None:
    path = tmp_path / "rates.jsonl"
    path.write_text('{"date": "2024-01-15", "currency": "USD", "source": "ECB"}\n')

    with pytest.raises(RateTableError, match="line 1: missing field 'rate'"):
        read_rate_records(path)


@pytest.mark.parametrize(
    "line",
    [
        '{"date": "2024-01-15", "currency": "XXX", "rate": "1.08", "source": "ECB"}',
        '{"date": "15/01/2024", "currency": "USD", "rate": "1.08", "source": "ECB"}',
        '{"date": "2024-01-15", "currency": "USD", "rate": "abc", "source": "ECB"}',
        '{"date": "2024-01-15", "currency": "USD", "rate": "1.08", "source": "FED"}',
        '["2024-01-15", "USD", "1.08", "ECB"]',
    ],
)
def test_read_rate_records_rejects_malformed_records(tmp_path: Path, line: str) -> None:
    path = tmp_path / "rates.jsonl"
    path.write_text(line + "\n")

    with pytest.raises(RateTableError):
        read_rate_records(path)


def test_build_rate_table_groups_by_currency_and_date() -> None:
    records = [
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "1.0856"),
        _ecb_rate(date(2024, 1, 12), CurrencyCode.USD, "1.0950"),
        _ecb_rate(date(2024, 1, 15), CurrencyCode.GBP, "0.8600"),
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "1.0856"),
    ]

    table = build_rate_table(records, EUROPEAN_CENTRAL_BANK)

    assert dict(table[CurrencyCode.USD]) == {
        date(2024, 1, 15): Decimal("1.0856"),
        date(2024, 1, 12): Decimal("1.0950"),
    }
    assert dict(table[CurrencyCode.GBP]) == {date(2024, 1, 15): Decimal("0.8600")}
    with pytest.raises(TypeError):
        table[CurrencyCode.CHF] = {}  # type: ignore[index]


def test_build_rate_table_filters_by_frequency() -> None:
    records = [
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "1.0856"),
        _ecb_rate(date(2024, 1, 1), CurrencyCode.USD, "1.0900", frequency=RateFrequency.MONTHLY),
    ]

    table = build_rate_table(records, EUROPEAN_CENTRAL_BANK, frequency=RateFrequency.MONTHLY)

    assert dict(table[CurrencyCode.USD]) == {date(2024, 1, 1): Decimal("1.0900")}


def test_build_rate_table_rejects_conflicting_duplicates() -> None:
    records = [
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "1.0856"),
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "1.0857"),
    ]

    with pytest.raises(RateTableError, match="Conflicting rates"):
        build_rate_table(records, EUROPEAN_CENTRAL_BANK)


@pytest.mark.parametrize(
    "record",
    [
        _ecb_rate(date(2024, 1, 15), CurrencyCode.EUR, "1"),
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "0"),
        _ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "-1.08"),
    ],
)
def test_build_rate_table_rejects_invalid_records(record: ExchangeRate) -> None:
    with pytest.raises(RateTableError):
        build_rate_table([record], EUROPEAN_CENTRAL_BANK)


def test_build_rate_table_rejects_records_of_other_source() -> None:
    with pytest.raises(RateTableError, match="expected MXCB"):
        build_rate_table([_ecb_rate(date(2024, 1, 15), CurrencyCode.USD, "17.5")], BANCO_DE_MEXICO)


def test_month_starts_spans_year_boundary() -> None:
    assert list(month_starts(date(2023, 11, 15), date(2024, 2, 1))) == [
        date(2023, 11, 1),
        date(2023, 12, 1),
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]


def test_month_starts_within_single_month() -> None:
    assert list(month_starts(date(2024, 3, 5), date(2024, 3, 30))) == [date(2024, 3, 1)]


def test_month_starts_rejects_reversed_range() -> None:
    with pytest.raises(ValueError):
        list(month_starts(date(2024, 3, 1), date(2024, 2, 1)))


@pytest.mark.parametrize("rate", ['"NaN"', '"Infinity"', '"-Infinity"', '"sNaN"'])
def test_read_rate_records_rejects_non_finite_rates(tmp_path: Path, rate: str) -> None:
    path = tmp_path / "rates.jsonl"
    path.write_text(f'{{"date": "2024-01-15", "currency": "USD", "rate": {rate}, "source": "ECB"}}\n')

    with pytest.raises(RateTableError) as exc_info:
        read_rate_records(path)

    assert exc_info.value.line_number == 1


@pytest.mark.parametrize("rate", ["NaN", "Infinity"])
def test_build_rate_table_rejects_non_finite_rates(rate: str) -> None:
    with pytest.raises(RateTableError, match="must be > 0"):
        build_rate_table([_ecb_rate(date(2024, 1, 15), CurrencyCode.USD, rate)], EUROPEAN_CENTRAL_BANK)


def test_month_starts_validates_range_when_called() -> None:
    with pytest.raises(ValueError):
        month_starts(date(2024, 2, 1), date(2024, 1, 1))
