"""
ZB symbol grammar.

    btc_usdt   spot (websocket)
    btcusdt    spot (REST)
    BTC_USDT   linear swap, size in BTC

Spot symbols are lowercase, swap symbols uppercase.
"""
from typing import Optional

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import split_by_quotes

_SPOT_QUOTES = ("usdt", "usdc", "qc", "btc")


class ZbAdapter(ExchangeAdapter):
    """ZB spot and USDT swaps."""

    name = "zb"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        kind = MarketKind.SPOT if symbol == symbol.lower() else MarketKind.LINEAR_SWAP

        if "_" in symbol:
            parts = symbol.split("_")
            if len(parts) != 2:
                return None
            pair = self.make_pair(*parts)
        else:
            parts = split_by_quotes(symbol, _SPOT_QUOTES)
            pair = self.make_pair(*parts) if parts else None
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind == MarketKind.LINEAR_SWAP:
            return 1.0
        return None
