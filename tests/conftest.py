from typing import Generator

import pytest

from config import config
from domain.currency import CurrencyCode
from domain.providers import EUROPEAN_CENTRAL_BANK
from services.exchange_rate_service import ExchangeRateService
from tests.helpers.fx_tables import DATE, build_rates


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Generator[None, None, None]:
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def ecb_service() -> ExchangeRateService:
    return ExchangeRateService(
        provider=EUROPEAN_CENTRAL_BANK,
        rates=build_rates(CurrencyCode.USD, DATE, "1.10"),
        lookback_days=5,
    )
