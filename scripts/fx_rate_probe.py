# flake8: noqa E402
# Run via uv to load project deps, e.g.:
# uv run scripts/fx_rate_probe.py --rates data/ecb_rates.jsonl --from EUR --to AED --date 2024-01-15
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

# Ensure the src directory is importable when the script is invoked via uv/python directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import config
from domain.fx_rates import FxRate
from domain.providers import RateFrequency, get_provider
from services.exchange_rate_service import ExchangeRateService
from services.rate_tables import build_rate_table, read_rate_records


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve an fx rate from a local JSONL file of published rates.")
    parser.add_argument("--rates", default=None, help="JSONL rates file (default: FX_RATES_FILE).")
    parser.add_argument("--provider", default=None, help="Rate provider, e.g. ECB or MXCB (default: FX_PROVIDER).")
    parser.add_argument("--from", dest="from_currency", default="EUR", help="Currency to convert from (default: EUR).")
    parser.add_argument("--to", dest="to_currency", default="USD", help="Currency to convert to (default: USD).")
    parser.add_argument(
        "--date",
        default=None,
        help="Rate date (YYYY-MM-DD). Defaults to current UTC date.",
    )
    parser.add_argument(
        "--frequency",
        choices=[frequency.value for frequency in RateFrequency],
        default=RateFrequency.DAILY.value,
        help="Which published series to use (default: DAILY).",
    )
    parser.add_argument("--lookback-days", type=int, default=None, help="Days to fall back for daily rates.")
    return parser.parse_args()


def parse_date(raw: str | None) -> date:
    if not raw:
        return datetime.now(timezone.utc).date()
    return date.fromisoformat(raw)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    args = parse_args()
    settings = config()

    rates_path = Path(args.rates) if args.rates else settings.fx_rates_file
    if rates_path is None:
        print("No rates file given; pass --rates or set FX_RATES_FILE", file=sys.stderr)
        return 2

    provider = get_provider(args.provider or settings.fx_provider)
    frequency = RateFrequency(args.frequency)
    rates = build_rate_table(read_rate_records(rates_path), provider, frequency=frequency)
    service = ExchangeRateService(
        provider=provider,
        rates=rates,
        lookback_days=args.lookback_days,
        frequency=frequency,
    )

    target_date = parse_date(args.date)
    result = service.resolve(args.from_currency, args.to_currency, target_date)

    payload: dict[str, Any] = {
        "requested_pair": f"{args.from_currency.upper()}-{args.to_currency.upper()}",
        "requested_date": target_date.isoformat(),
        "min_fx_date": service.min_fx_date(target_date).isoformat(),
        "provider": provider.bank_id,
    }
    if isinstance(result, FxRate):
        payload["rate"] = str(result.rate)
        payload["lookup_currency"] = result.lookup_currency.value
    else:
        payload["error"] = result.message
    print(json.dumps(payload, indent=2))
    return 0 if isinstance(result, FxRate) else 1


if __name__ == "__main__":
    sys.exit(main())
