"""
Abstract base classes defining component interfaces.
All concrete implementations must adhere to these contracts.
"""
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from .types import CanonicalPair, MarketKind


class ExchangeAdapter(ABC):
    """
    Abstract base class for per-exchange reference data.

    An adapter is responsible for:
    1. Parsing the exchange's symbol grammar into a pair and market kind
    2. Declaring which market kinds need per-pair contract values
    3. Fetching those contract values from the public listing endpoint
    4. Providing constant multipliers for every other kind
    """

    name: str = ""
    # Kinds whose multiplier lives in the ContractSpecRegistry
    registry_kinds: frozenset[MarketKind] = frozenset()
    # Public instrument listing endpoint, None if the exchange has none
    contract_values_url: Optional[str] = None

    @abstractmethod
    def parse_symbol(
        self,
        raw_symbol: str,
        is_spot: Optional[bool] = None,
    ) -> Optional[tuple[CanonicalPair, MarketKind]]:
        """
        Parse a raw symbol into (pair, market kind).

        Returns None if no grammar rule matches. Must never raise on
        arbitrary input and must not touch the network.
        """
        pass

    def quantity_policy(self, market_kind: MarketKind, pair: CanonicalPair) -> Optional[float]:
        """
        Constant contract multiplier for kinds outside ``registry_kinds``.

        Returns None when the exchange has no contract concept for the kind.
        """
        return None

    def fetch_contract_values(self, client: httpx.Client) -> dict[str, float]:
        """
        Fetch per-pair multipliers from the listing endpoint.

        Raises httpx.HTTPError on network failure and ValueError/KeyError/
        TypeError on unexpected payloads. The registry handles both.
        """
        return {}

    def currency(self, raw_ticker: str) -> str:
        """Canonical ticker for this exchange."""
        from ..exchanges.currency import canonicalize
        return canonicalize(self.name, raw_ticker)

    def make_pair(self, base: str, quote: str) -> Optional[CanonicalPair]:
        """Build a pair from raw segments, None if a segment is empty or not ASCII."""
        if not base or not quote or not (base + quote).isascii():
            return None
        return CanonicalPair(self.currency(base), self.currency(quote))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
