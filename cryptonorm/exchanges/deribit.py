"""
Deribit symbol grammar.

    BTC-PERPETUAL             inverse swap
    BTC-25JUN21               inverse future
    BTC-25JUN21-50000-C       european option (call)
    BTC-25JUN21-50000-P       european option (put)

Options are quoted as BASE/BASE; strike and expiry are not part of the pair.
"""
from typing import Optional

from ..core.interfaces import ExchangeAdapter
from ..core.types import CanonicalPair, MarketKind
from .utils import ends_with_digits


class DeribitAdapter(ExchangeAdapter):
    """Deribit futures and options."""

    name = "deribit"

    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        symbol = raw_symbol
        base = symbol.split("-", 1)[0]
        if "-" not in symbol or not base:
            return None

        if symbol.endswith("-PERPETUAL"):
            pair = self.make_pair(base, "USD")
            kind = MarketKind.INVERSE_SWAP
        elif len(symbol) > 7 and ends_with_digits(symbol):
            pair = self.make_pair(base, "USD")
            kind = MarketKind.INVERSE_FUTURE
        elif symbol.endswith("-P") or symbol.endswith("-C"):
            pair = self.make_pair(base, base)
            kind = MarketKind.EUROPEAN_OPTION
        else:
            return None
        return (pair, kind) if pair else None

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        if market_kind.is_inverse:
            return 10.0 if pair.base == "BTC" else 1.0
        if market_kind == MarketKind.EUROPEAN_OPTION:
            return 1.0
        return None
