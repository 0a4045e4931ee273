"""
Bitget symbol grammar and contract values.

Current API (suffix grammar):
    BTCUSDT_SPBL           spot
    BTCUSDT_UMCBL          linear swap (USDT margined)
    BTCPERP_CMCBL          linear swap (USDC margined)
    BTCUSD_DMCBL           inverse swap
    BTCUSD_DMCBL_221230    inverse future

Legacy v1 API (before 2022-04-29):
    btc_usdt      spot
    cmt_btcusdt   linear swap
    btcusd        inverse swap
"""
from typing import Optional

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import split_by_quotes

_PRODUCT_SUFFIXES = ("_SPBL", "_UMCBL", "_CMCBL", "_DMCBL")
_QUOTES = ("USDT", "USD", "ETH", "BTC")


class BitgetAdapter(ExchangeAdapter):
    """Bitget spot and mix (futures) markets."""

    name = "bitget"
    # Legacy v1 linear swaps are quoted in contracts of a per-pair size
    registry_kinds = frozenset({MarketKind.LINEAR_SWAP})

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        if any(suffix in symbol for suffix in _PRODUCT_SUFFIXES):
            return self._parse_v3(symbol)
        return self._parse_v1(symbol)

    def _parse_v3(self, symbol: str) -> Optional[tuple[CanonicalPair, MarketKind]]:
        if symbol.endswith("_SPBL"):
            kind = MarketKind.SPOT
        elif symbol.endswith("_UMCBL") or symbol.endswith("_CMCBL"):
            kind = MarketKind.LINEAR_SWAP
        elif symbol.endswith("_DMCBL"):
            kind = MarketKind.INVERSE_SWAP
        elif "_UMCBL_" in symbol or "_CMCBL_" in symbol:
            kind = MarketKind.LINEAR_FUTURE
        elif "_DMCBL_" in symbol:
            kind = MarketKind.INVERSE_FUTURE
        else:
            return None

        if symbol.endswith("PERP_CMCBL"):
            pair = self.make_pair(symbol[: -len("PERP_CMCBL")], "USDC")
        else:
            head = symbol.split("_", 1)[0]
            parts = split_by_quotes(head, _QUOTES)
            pair = self.make_pair(*parts) if parts else None
        return (pair, kind) if pair else None

    def _parse_v1(self, symbol: str) -> Optional[tuple[CanonicalPair, MarketKind]]:
        if symbol.startswith("cmt_"):
            if not symbol.endswith("usdt"):
                return None
            pair = self.make_pair(symbol[4:-4], "usdt")
            kind = MarketKind.LINEAR_SWAP
        elif "_" in symbol:
            parts = symbol.split("_")
            if len(parts) != 2:
                return None
            pair = self.make_pair(*parts)
            kind = MarketKind.SPOT
        elif symbol.endswith("usd"):
            pair = self.make_pair(symbol[:-3], "usd")
            kind = MarketKind.INVERSE_SWAP
        else:
            return None
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind.is_inverse or market_kind == MarketKind.LINEAR_FUTURE:
            return 1.0
        return None
