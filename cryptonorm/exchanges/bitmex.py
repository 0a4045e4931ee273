"""
BitMEX symbol grammar and contract values.

    XBTUSD       inverse swap
    ETHUSDT      linear swap
    ETHUSD       quanto swap
    XBTM21       inverse future
    XBTUSDTZ21   linear future
    ETHUSDM21    quanto future
    ETHM21       linear future quoted in BTC
    XBT_USDT     spot

Dated symbols end with a month code and a two digit year.
"""
from typing import Optional

import httpx

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import MONTH_CODES, ends_with_digits, http_get_json, positive_float


def _is_dated(symbol: str) -> bool:
    return len(symbol) > 3 and ends_with_digits(symbol) and symbol[-3] in MONTH_CODES


class BitmexAdapter(ExchangeAdapter):
    """BitMEX perpetuals, futures and spot."""

    name = "bitmex"
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP, MarketKind.LINEAR_FUTURE})
    contract_values_url = "https://www.bitmex.com/api/v1/instrument/active"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        if "_" in symbol:
            parts = symbol.split("_")
            if len(parts) != 2:
                return None
            pair = self.make_pair(*parts)
            return (pair, MarketKind.SPOT) if pair else None

        if _is_dated(symbol):
            root = symbol[:-3]
            if root == "XBT":
                base, quote, kind = "XBT", "USD", MarketKind.INVERSE_FUTURE
            elif root.endswith("USDT"):
                base, quote, kind = root[:-4], "USDT", MarketKind.LINEAR_FUTURE
            elif root.endswith("USD"):
                base, quote, kind = root[:-3], "USD", MarketKind.QUANTO_FUTURE
            else:
                base, quote, kind = root, "XBT", MarketKind.LINEAR_FUTURE
        elif symbol == "XBTUSD":
            base, quote, kind = "XBT", "USD", MarketKind.INVERSE_SWAP
        elif symbol.endswith("USDT"):
            base, quote, kind = symbol[:-4], "USDT", MarketKind.LINEAR_SWAP
        elif symbol.endswith("USD"):
            base, quote, kind = symbol[:-3], "USD", MarketKind.QUANTO_SWAP
        else:
            return None

        pair = self.make_pair(base, quote)
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind.is_inverse:
            return 1.0
        return None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        instruments = http_get_json(client, self.contract_values_url)
        if not isinstance(instruments, list):
            raise TypeError(f"bitmex instruments: expected a list, got {type(instruments).__name__}")

        values: dict[str, float] = {}
        for instrument in instruments:
            if instrument["isInverse"] or instrument["isQuanto"]:
                continue
            multiplier = instrument.get("underlyingToPositionMultiplier")
            if not multiplier:
                continue
            parsed = self.parse_symbol(instrument["symbol"])
            if parsed is None or parsed[1] not in self.registry_kinds:
                continue
            values[str(parsed[0])] = positive_float(1.0 / float(multiplier))
        return values
