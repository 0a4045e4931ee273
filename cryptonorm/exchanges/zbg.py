"""
ZBG symbol grammar and contract values.

    btc_usdt    spot
    BTC_USD-R   inverse swap
    BTC_USDT    linear swap
    BTC_ZUSD    linear swap
"""
from typing import Optional

import httpx

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import http_get_json, positive_float


class ZbgAdapter(ExchangeAdapter):
    """ZBG spot and swaps."""

    name = "zbg"
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP, MarketKind.INVERSE_SWAP})
    contract_values_url = "https://www.zbg.com/exchange/api/v1/future/common/contracts"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        if symbol.endswith("-R"):
            symbol = symbol[:-2]
            kind = MarketKind.INVERSE_SWAP
        elif symbol == symbol.lower():
            kind = MarketKind.SPOT
        else:
            kind = MarketKind.LINEAR_SWAP

        parts = symbol.split("_")
        if len(parts) != 2:
            return None
        pair = self.make_pair(*parts)
        return (pair, kind) if pair else None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        payload = http_get_json(client, self.contract_values_url)
        if not isinstance(payload, dict):
            raise TypeError(f"zbg contracts: expected an object, got {type(payload).__name__}")
        code = payload["resMsg"]["code"]
        if str(code) != "1":
            raise ValueError(f"zbg contracts error: {payload['resMsg'].get('message')}")

        values: dict[str, float] = {}
        for market in payload["datas"]:
            parsed = self.parse_symbol(market["symbol"])
            if parsed is None:
                continue
            # contractUnit is a decimal string
            values[str(parsed[0])] = positive_float(market["contractUnit"])
        return values
