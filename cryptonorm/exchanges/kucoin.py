"""
KuCoin symbol grammar and contract values.

Symbols:
    BTC-USDT     spot
    XBTUSDTM     linear swap (USDT margined)
    XBTUSDCM     linear swap (USDC margined)
    XBTUSDM      inverse swap
    XBTMH22      inverse future
"""
from typing import Optional

import httpx

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import ends_with_digits, http_get_json, positive_float


class KucoinAdapter(ExchangeAdapter):
    """KuCoin spot and futures."""

    name = "kucoin"
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP})
    contract_values_url = "https://api-futures.kucoin.com/api/v1/contracts/active"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        if len(symbol) < 3:
            return None

        if symbol.endswith("USDTM") or symbol.endswith("USDCM"):
            base, quote = symbol[:-5], symbol[-5:-1]
            kind = MarketKind.LINEAR_SWAP
        elif symbol.endswith("USDM"):
            base, quote = symbol[:-4], "USD"
            kind = MarketKind.INVERSE_SWAP
        elif ends_with_digits(symbol):
            base, quote = symbol[:-4], "USD"
            kind = MarketKind.INVERSE_FUTURE
        elif "-" in symbol:
            parts = symbol.split("-")
            if len(parts) != 2:
                return None
            base, quote = parts
            kind = MarketKind.SPOT
        else:
            return None

        pair = self.make_pair(base, quote)
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind.is_inverse:
            return 1.0
        return None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        payload = http_get_json(client, self.contract_values_url)
        if not isinstance(payload, dict):
            raise TypeError(f"kucoin contracts: expected an object, got {type(payload).__name__}")
        if str(payload.get("code")) != "200000":
            raise ValueError(f"kucoin contracts error: {payload.get('code')}")

        values: dict[str, float] = {}
        for market in payload["data"]:
            if market["isInverse"]:
                continue
            parsed = self.parse_symbol(market["symbol"])
            if parsed is None:
                continue
            values[str(parsed[0])] = positive_float(market["multiplier"])
        return values
