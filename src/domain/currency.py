from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Mapping, TypeAlias

from pydantic import BaseModel, ConfigDict, model_validator


class CurrencyCode(StrEnum):
    AED = "AED"
    AUD = "AUD"
    BGN = "BGN"
    BHD = "BHD"
    BRL = "BRL"
    CAD = "CAD"
    CHF = "CHF"
    CNY = "CNY"
    CZK = "CZK"
    DKK = "DKK"
    EUR = "EUR"
    GBP = "GBP"
    HKD = "HKD"
    HUF = "HUF"
    INR = "INR"
    JOD = "JOD"
    JPY = "JPY"
    MXN = "MXN"
    NOK = "NOK"
    OMR = "OMR"
    PLN = "PLN"
    QAR = "QAR"
    RON = "RON"
    SAR = "SAR"
    SEK = "SEK"
    USD = "USD"
    XAF = "XAF"
    XOF = "XOF"
    ZAR = "ZAR"


class QuoteType(StrEnum):
    """How a provider publishes rates relative to its own currency.

    With EUR as the provider currency:
    - DIRECT:   1 USD = 0.92819 EUR
    - INDIRECT: 1 EUR = 1.08238 USD
    """

    DIRECT = "DIRECT"
    INDIRECT = "INDIRECT"


class PeggedCurrency(BaseModel):
    """One unit of ``currency`` equals ``rate`` units of ``pegged_to``."""

    model_config = ConfigDict(frozen=True)

    currency: CurrencyCode
    pegged_to: CurrencyCode
    rate: Decimal

    @model_validator(mode="after")
    def _validate_peg(self) -> PeggedCurrency:
        if self.rate <= 0:
            raise ValueError("PeggedCurrency.rate must be > 0")
        if self.currency == self.pegged_to:
            raise ValueError(f"{self.currency} cannot be pegged to itself")
        return self


RateTable: TypeAlias = Mapping[CurrencyCode, Mapping[date, Decimal]]
PegTable: TypeAlias = Mapping[CurrencyCode, PeggedCurrency]


def parse_currency(value: CurrencyCode | str) -> CurrencyCode:
    if isinstance(value, CurrencyCode):
        return value
    try:
        return CurrencyCode(value.strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unknown currency code: {value!r}") from exc


__all__ = [
    "CurrencyCode",
    "PegTable",
    "PeggedCurrency",
    "QuoteType",
    "RateTable",
    "parse_currency",
]
