"""
OKEx symbol grammar and contract values.

    BTC-USDT                   spot
    BTC-USD-SWAP               inverse swap, 1 contract = 100 USD (10 USD for altcoins)
    BTC-USDT-SWAP              linear swap, per-pair contract value
    BTC-USD-210625             inverse future
    BTC-USDT-210625            linear future
    BTC-USD-210625-60000-C     european option
"""
from typing import Optional

import httpx

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import ends_with_digits, http_get_json, positive_float

_LINEAR_QUOTES = ("USDT", "USDC")


class OkexAdapter(ExchangeAdapter):
    """OKEx spot, futures, swaps and options."""

    name = "okex"
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP, MarketKind.LINEAR_FUTURE})
    contract_values_url = "https://www.okx.com/api/v5/public/instruments?instType=SWAP"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        parts = raw_symbol.upper().split("-")
        if len(parts) < 2:
            return None
        pair = self.make_pair(parts[0], parts[1])
        if pair is None:
            return None
        linear = pair.quote in _LINEAR_QUOTES

        if len(parts) == 2:
            kind = MarketKind.SPOT
        elif len(parts) == 3 and parts[2] == "SWAP":
            kind = MarketKind.LINEAR_SWAP if linear else MarketKind.INVERSE_SWAP
        elif len(parts) == 3 and ends_with_digits(parts[2], 6):
            kind = MarketKind.LINEAR_FUTURE if linear else MarketKind.INVERSE_FUTURE
        elif len(parts) == 5 and parts[4] in ("C", "P"):
            kind = MarketKind.EUROPEAN_OPTION
        else:
            return None
        return pair, kind

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind.is_inverse:
            return 100.0 if pair.base == "BTC" else 10.0
        if market_kind == MarketKind.EUROPEAN_OPTION:
            # 1 contract = 0.1 underlying
            return 0.1
        return None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        payload = http_get_json(client, self.contract_values_url)
        if not isinstance(payload, dict):
            raise TypeError(f"okex instruments: expected an object, got {type(payload).__name__}")
        if str(payload.get("code")) != "0":
            raise ValueError(f"okex instruments error: {payload.get('msg')}")

        values: dict[str, float] = {}
        for instrument in payload["data"]:
            if instrument.get("ctType") != "linear":
                continue
            parsed = self.parse_symbol(instrument["instId"])
            if parsed is None:
                continue
            values[str(parsed[0])] = positive_float(instrument["ctVal"])
        return values
