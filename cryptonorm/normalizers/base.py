"""
Abstract base class for exchange message normalizers.
"""
import json
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from ..core.exceptions import CryptoNormError, MessageParseError
from ..core.types import (
    CandlestickMsg,
    CanonicalQuantity,
    FundingRateMsg,
    MarketKind,
    Order,
    OrderBookMsg,
    TradeMsg,
)
from ..exchanges import get_adapter
from ..quantity import QuantityCalculator


class BaseNormalizer(ABC):
    """
    Converts raw websocket payloads of one exchange into canonical messages.

    Each parse method takes the raw JSON text and the market kind of the
    channel it came from, and returns every message contained in it.

    Raises:
        MessageParseError: malformed payload or unparseable symbol
        InvalidQuantityInput: a level or trade carries invalid numbers
        UnknownContractValueError: no multiplier for the instrument
    """

    exchange: str = ""

    def __init__(self, calculator: QuantityCalculator):
        self.calculator = calculator
        self.adapter = get_adapter(self.exchange)

    @abstractmethod
    def parse_trade(self, msg: str, market_kind: MarketKind) -> list[TradeMsg]:
        pass

    @abstractmethod
    def parse_l2(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[OrderBookMsg]:
        pass

    def parse_funding_rate(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[FundingRateMsg]:
        raise NotImplementedError(f"{self.exchange} funding rate messages are not supported")

    def parse_candlestick(self, msg: str, market_kind: MarketKind) -> list[CandlestickMsg]:
        raise NotImplementedError(f"{self.exchange} candlestick messages are not supported")

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _load(self, msg: str):
        try:
            return json.loads(msg)
        except json.JSONDecodeError as e:
            raise MessageParseError(f"Invalid JSON from {self.exchange}: {e}") from e

    @contextmanager
    def _fields(self, msg: str) -> Iterator[None]:
        """Report missing or mistyped fields as MessageParseError."""
        try:
            yield
        except CryptoNormError:
            raise
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise MessageParseError(
                f"Unexpected {self.exchange} payload ({type(e).__name__}: {e}): {msg[:200]}"
            ) from e

    def _pair(self, symbol: str, is_spot: Optional[bool] = None) -> str:
        parsed = self.adapter.parse_symbol(symbol, is_spot)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize {self.exchange} symbol {symbol!r}")
        return str(parsed[0])

    def _quantities(
        self,
        market_kind: MarketKind,
        pair: str,
        price: float,
        size: float,
    ) -> CanonicalQuantity:
        return self.calculator.compute_quantities(self.exchange, market_kind, pair, price, size)

    def _order(self, market_kind: MarketKind, pair: str, price: float, size: float) -> Order:
        quantity = self._quantities(market_kind, pair, price, size)
        return Order(
            price=price,
            quantity_base=quantity.quantity_base,
            quantity_quote=quantity.quantity_quote,
            quantity_contract=quantity.quantity_contract,
        )

    @staticmethod
    def _dumps(raw) -> str:
        return json.dumps(raw, separators=(",", ":"))
