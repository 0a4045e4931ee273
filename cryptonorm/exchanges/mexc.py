"""
MEXC symbol grammar and contract values.

Spot and swap markets share the ``BASE_QUOTE`` grammar, so the market kind
can only be told apart with a hint from the caller:

    BTC_USDT   spot (is_spot=True) or linear swap
    BTC_USD    inverse swap
"""
from typing import Optional

import httpx

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import http_get_json, positive_float


class MexcAdapter(ExchangeAdapter):
    """MEXC spot and perpetual swaps."""

    name = "mexc"
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP})
    contract_values_url = "https://contract.mexc.com/api/v1/contract/detail"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        parts = raw_symbol.split("_")
        if len(parts) != 2:
            return None
        pair = self.make_pair(*parts)
        if pair is None:
            return None

        if is_spot:
            kind = MarketKind.SPOT
        elif pair.quote == "USD":
            kind = MarketKind.INVERSE_SWAP
        else:
            kind = MarketKind.LINEAR_SWAP
        return pair, kind

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind == MarketKind.INVERSE_SWAP:
            return 100.0 if pair.base == "BTC" else 10.0
        return None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        payload = http_get_json(client, self.contract_values_url)
        if not isinstance(payload, dict):
            raise TypeError(f"mexc contract detail: expected an object, got {type(payload).__name__}")
        if not payload.get("success"):
            raise ValueError(f"mexc contract detail error: {payload.get('code')}")

        values: dict[str, float] = {}
        for market in payload["data"]:
            # Linear markets settle in the quote coin
            if market["settleCoin"] != market["quoteCoin"]:
                continue
            parsed = self.parse_symbol(market["symbol"])
            if parsed is None:
                continue
            values[str(parsed[0])] = positive_float(market["contractSize"])
        return values
