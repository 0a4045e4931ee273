"""
Core module - contains types, interfaces, exceptions and configuration.
"""
from .types import (
    MarketKind,
    MessageType,
    TradeSide,
    CanonicalPair,
    ContractSpec,
    CanonicalQuantity,
    TradeMsg,
    Order,
    OrderBookMsg,
    FundingRateMsg,
    CandlestickMsg,
)
from .interfaces import (
    ExchangeAdapter,
)
from .exceptions import (
    CryptoNormError,
    UnsupportedExchangeError,
    InvalidQuantityInput,
    UnknownContractValueError,
    MessageParseError,
)
from .config import (
    SystemConfig,
    RegistryConfig,
    LoggingConfig,
)

__all__ = [
    # Types
    "MarketKind",
    "MessageType",
    "TradeSide",
    "CanonicalPair",
    "ContractSpec",
    "CanonicalQuantity",
    "TradeMsg",
    "Order",
    "OrderBookMsg",
    "FundingRateMsg",
    "CandlestickMsg",
    # Interfaces
    "ExchangeAdapter",
    # Exceptions
    "CryptoNormError",
    "UnsupportedExchangeError",
    "InvalidQuantityInput",
    "UnknownContractValueError",
    "MessageParseError",
    # Config
    "SystemConfig",
    "RegistryConfig",
    "LoggingConfig",
]
