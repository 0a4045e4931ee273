"""
Bybit symbol grammar.

    BTCUSDT     linear swap, size in BTC
    BTCUSD      inverse swap, 1 contract = 1 USD
    BTCUSDH22   inverse future, 1 contract = 1 USD
"""
from typing import Optional

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import ends_with_digits


class BybitAdapter(ExchangeAdapter):
    """Bybit derivatives."""

    name = "bybit"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        if symbol.endswith("USDT"):
            pair = self.make_pair(symbol[:-4], "USDT")
            kind = MarketKind.LINEAR_SWAP
        elif symbol.endswith("USD"):
            pair = self.make_pair(symbol[:-3], "USD")
            kind = MarketKind.INVERSE_SWAP
        elif ends_with_digits(symbol) and len(symbol) > 6:
            # <base>USD<month code><yy>
            pair = self.make_pair(symbol[:-6], "USD")
            kind = MarketKind.INVERSE_FUTURE
        else:
            return None
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind in (
            MarketKind.LINEAR_SWAP,
            MarketKind.INVERSE_SWAP,
            MarketKind.INVERSE_FUTURE,
        ):
            return 1.0
        return None
