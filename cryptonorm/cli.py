"""
cryptonorm command line.

Usage:
    cryptonorm pair XBTUSDTM -e kucoin                       # BTC/USDT
    cryptonorm kind BTC_USDT -e mexc --spot                  # spot
    cryptonorm contract-value BTC/USDT -e okex -k linear_swap
    cryptonorm quantities BTC/USD -e bitget -k inverse_swap --price 30000 --size 12
    cryptonorm refresh-baseline -e kucoin -o data/
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .api import (
    compute_quantities,
    get_contract_value,
    get_market_kind,
    normalize_pair,
    set_default_registry,
)
from .core.config import SystemConfig
from .core.exceptions import CryptoNormError
from .core.types import MarketKind
from .exchanges import add_alias, supported_exchanges
from .registry import ContractSpecRegistry
from .utils.helpers import round_quantity
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(description="Crypto market data normalization")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config file (default: none)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use packaged baselines only, never query exchanges",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    exchanges = supported_exchanges()

    pair = sub.add_parser("pair", help="Canonical pair of an exchange symbol")
    pair.add_argument("symbol")
    pair.add_argument("-e", "--exchange", required=True, choices=exchanges)

    kind = sub.add_parser("kind", help="Market kind of an exchange symbol")
    kind.add_argument("symbol")
    kind.add_argument("-e", "--exchange", required=True, choices=exchanges)
    kind.add_argument("--spot", action="store_true", help="Symbol comes from a spot channel")

    value = sub.add_parser("contract-value", help="Contract multiplier of an instrument")
    value.add_argument("pair")
    value.add_argument("-e", "--exchange", required=True, choices=exchanges)
    value.add_argument("-k", "--kind", required=True, help="Market kind, e.g. linear_swap")

    quantities = sub.add_parser("quantities", help="Canonical quantities of a raw size")
    quantities.add_argument("pair")
    quantities.add_argument("-e", "--exchange", required=True, choices=exchanges)
    quantities.add_argument("-k", "--kind", required=True, help="Market kind, e.g. linear_swap")
    quantities.add_argument("--price", type=float, required=True)
    quantities.add_argument("--size", type=float, required=True)

    refresh = sub.add_parser("refresh-baseline", help="Fetch live contract values and write a baseline")
    refresh.add_argument("-e", "--exchange", required=True, choices=exchanges)
    refresh.add_argument(
        "-o", "--output-dir",
        type=str,
        default=None,
        help="Output directory (default: configured baseline directory)",
    )

    return parser.parse_args(argv)


def _run(args, config: SystemConfig) -> int:
    if args.command == "pair":
        pair = normalize_pair(args.symbol, args.exchange)
        if pair is None:
            print(f"Unrecognized {args.exchange} symbol: {args.symbol}", file=sys.stderr)
            return 1
        print(pair)
        return 0

    if args.command == "kind":
        kind = get_market_kind(args.symbol, args.exchange, is_spot=True if args.spot else None)
        print(kind.value)
        return 0 if kind != MarketKind.UNKNOWN else 1

    if args.command == "contract-value":
        value = get_contract_value(args.exchange, MarketKind.parse(args.kind), args.pair)
        if value is None:
            print(f"No contract value for {args.exchange} {args.kind} {args.pair}", file=sys.stderr)
            return 1
        print(value)
        return 0

    if args.command == "quantities":
        quantity = compute_quantities(
            args.exchange, MarketKind.parse(args.kind), args.pair, args.price, args.size
        )
        result = {
            "quantity_base": quantity.quantity_base,
            "quantity_quote": quantity.quantity_quote,
            "quantity_contract": quantity.quantity_contract,
        }
        if config.output_precision is not None:
            result = {
                k: round_quantity(v, config.output_precision) if v is not None else None
                for k, v in result.items()
            }
        print(json.dumps(result))
        return 0

    if args.command == "refresh-baseline":
        registry = ContractSpecRegistry.from_config(config.registry)
        if not registry.live_refresh:
            print("Live refresh is disabled, refusing to overwrite the baseline", file=sys.stderr)
            return 1
        table = registry.rewarm(args.exchange)
        path = registry.write_baseline(args.exchange, args.output_dir)
        print(f"Wrote {len(table)} contract values to {path}")
        return 0

    return 2


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    config = SystemConfig.load(Path(args.config) if args.config else None)
    if args.offline:
        config.registry.live_refresh = False

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 2

    setup_logging(config.logging)

    for exchange, aliases in config.currency_aliases.items():
        for raw, canonical in aliases.items():
            add_alias(exchange, raw, canonical)

    registry = ContractSpecRegistry.from_config(config.registry)
    set_default_registry(registry)

    try:
        if args.command in ("contract-value", "quantities"):
            registry.warm_up(args.exchange)
        return _run(args, config)
    except (CryptoNormError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
