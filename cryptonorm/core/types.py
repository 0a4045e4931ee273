"""
Core type definitions for cryptonorm.
All components communicate using these standardized types.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional
import math

from ..utils.helpers import round_quantity


class MarketKind(Enum):
    """Market kind of a traded instrument."""
    SPOT = "spot"
    LINEAR_SWAP = "linear_swap"
    INVERSE_SWAP = "inverse_swap"
    LINEAR_FUTURE = "linear_future"
    INVERSE_FUTURE = "inverse_future"
    QUANTO_SWAP = "quanto_swap"
    QUANTO_FUTURE = "quanto_future"
    EUROPEAN_OPTION = "european_option"
    UNKNOWN = "unknown"

    @property
    def is_linear(self) -> bool:
        return self in (MarketKind.LINEAR_SWAP, MarketKind.LINEAR_FUTURE)

    @property
    def is_inverse(self) -> bool:
        return self in (MarketKind.INVERSE_SWAP, MarketKind.INVERSE_FUTURE)

    @property
    def is_quanto(self) -> bool:
        return self in (MarketKind.QUANTO_SWAP, MarketKind.QUANTO_FUTURE)

    @property
    def is_derivative(self) -> bool:
        """Anything quoted in contracts."""
        return self not in (MarketKind.SPOT, MarketKind.UNKNOWN)

    @classmethod
    def parse(cls, value: str) -> "MarketKind":
        """Accept both ``linear_swap`` and ``LinearSwap`` spellings."""
        text = value.strip()
        try:
            return cls(text.lower())
        except ValueError:
            pass
        snake = "".join(
            f"_{c.lower()}" if c.isupper() and i else c.lower()
            for i, c in enumerate(text)
        )
        return cls(snake)


class MessageType(Enum):
    """Kind of a canonical market-data message."""
    TRADE = "trade"
    L2_EVENT = "l2_event"
    L2_SNAPSHOT = "l2_snapshot"
    L2_TOPK = "l2_topk"
    BBO = "bbo"
    TICKER = "ticker"
    CANDLESTICK = "candlestick"
    FUNDING_RATE = "funding_rate"
    OTHER = "other"


class TradeSide(Enum):
    """Taker side of a trade."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True, slots=True)
class CanonicalPair:
    """
    Exchange-independent instrument identity.

    Rendered as ``BASE/QUOTE``; tickers are uppercase ASCII.
    """
    base: str
    quote: str

    def __post_init__(self):
        if not self.base or not self.quote:
            raise ValueError(f"base and quote must be non-empty, got {self.base!r}/{self.quote!r}")
        if not (self.base + self.quote).isascii():
            raise ValueError(f"tickers must be ASCII, got {self.base}/{self.quote}")
        if self.base != self.base.upper() or self.quote != self.quote.upper():
            raise ValueError(f"tickers must be uppercase, got {self.base}/{self.quote}")

    def __str__(self) -> str:
        return f"{self.base}/{self.quote}"

    @classmethod
    def parse(cls, text: str) -> "CanonicalPair":
        """Parse a rendered ``BASE/QUOTE`` string."""
        base, sep, quote = text.partition("/")
        if not sep or "/" in quote:
            raise ValueError(f"not a BASE/QUOTE pair: {text!r}")
        return cls(base.upper(), quote.upper())


@dataclass(frozen=True, slots=True)
class ContractSpec:
    """
    One contract equals ``multiplier`` units of base asset (linear)
    or of quote asset (inverse).
    """
    exchange: str
    pair: CanonicalPair
    multiplier: float

    def __post_init__(self):
        if not math.isfinite(self.multiplier) or self.multiplier <= 0:
            raise ValueError(f"multiplier must be > 0, got {self.multiplier}")


@dataclass(frozen=True, slots=True)
class CanonicalQuantity:
    """Size of a trade or book level in canonical units."""
    quantity_base: float
    quantity_quote: float
    quantity_contract: Optional[float] = None   # None for spot


# ============================================================================
# Canonical messages
# ============================================================================

def _round_fields(data: dict, names: tuple[str, ...], precision: Optional[int]) -> dict:
    if precision is None:
        return data
    for name in names:
        if data.get(name) is not None:
            data[name] = round_quantity(data[name], precision)
    return data


def _plain(data: dict) -> dict:
    """Replace enums by their values for serialization."""
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
    return data


_QUANTITY_FIELDS = ("quantity_base", "quantity_quote", "quantity_contract")


@dataclass(frozen=True, slots=True)
class TradeMsg:
    """Canonical trade."""
    exchange: str
    market_kind: MarketKind
    symbol: str                     # Exchange-specific symbol
    pair: str                       # Canonical BASE/QUOTE
    msg_type: MessageType
    timestamp: int                  # Exchange timestamp (ms)
    price: float
    quantity_base: float
    quantity_quote: float
    quantity_contract: Optional[float]
    side: TradeSide
    trade_id: str
    json: str = ""                  # Raw payload

    def to_dict(self, precision: Optional[int] = None) -> dict:
        data = _plain(asdict(self))
        return _round_fields(data, _QUANTITY_FIELDS, precision)


@dataclass(frozen=True, slots=True)
class Order:
    """One price level of an order book."""
    price: float
    quantity_base: float
    quantity_quote: float
    quantity_contract: Optional[float] = None

    def to_dict(self, precision: Optional[int] = None) -> dict:
        return _round_fields(asdict(self), _QUANTITY_FIELDS, precision)


@dataclass(frozen=True, slots=True)
class OrderBookMsg:
    """Canonical order book update or snapshot."""
    exchange: str
    market_kind: MarketKind
    symbol: str
    pair: str
    msg_type: MessageType
    timestamp: int
    asks: list[Order] = field(default_factory=list)
    bids: list[Order] = field(default_factory=list)
    snapshot: bool = False
    seq_id: Optional[int] = None
    prev_seq_id: Optional[int] = None
    json: str = ""

    def to_dict(self, precision: Optional[int] = None) -> dict:
        data = _plain(asdict(self))
        data["asks"] = [o.to_dict(precision) for o in self.asks]
        data["bids"] = [o.to_dict(precision) for o in self.bids]
        return data


@dataclass(frozen=True, slots=True)
class FundingRateMsg:
    """Canonical funding rate of a perpetual swap."""
    exchange: str
    market_kind: MarketKind
    symbol: str
    pair: str
    msg_type: MessageType
    timestamp: int
    funding_rate: float
    funding_time: int
    estimated_rate: Optional[float] = None
    json: str = ""

    def to_dict(self, precision: Optional[int] = None) -> dict:
        return _plain(asdict(self))


@dataclass(frozen=True, slots=True)
class CandlestickMsg:
    """Canonical OHLCV bar. ``volume`` is in base units."""
    exchange: str
    market_kind: MarketKind
    symbol: str
    pair: str
    msg_type: MessageType
    timestamp: int
    period: str
    begin_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    quote_volume: Optional[float] = None
    json: str = ""

    def to_dict(self, precision: Optional[int] = None) -> dict:
        data = _plain(asdict(self))
        return _round_fields(data, ("volume", "quote_volume"), precision)
