"""
cryptonorm: normalization of crypto exchange market data.

Turns exchange-specific symbols, tickers and sizes into one canonical form
so that data from different venues can be compared directly.

Architecture:
    raw symbol → ExchangeAdapter → (CanonicalPair, MarketKind)
    raw size → QuantityCalculator ← ContractSpecRegistry (baseline + live)
    raw message → Normalizer → TradeMsg / OrderBookMsg / ...

Key Components:
    - core: Type definitions, interfaces, exceptions, configuration
    - exchanges: Symbol grammars, currency aliases, contract value sources
    - registry: Per-exchange contract multipliers
    - quantity: Contract size to base/quote conversion
    - normalizers: Websocket payload parsing
    - utils: Logging, time and number helpers

Usage:
    from cryptonorm import normalize_pair, get_market_kind, compute_quantities

    normalize_pair("XBTUSDTM", "kucoin")                   # "BTC/USDT"
    get_market_kind("BTCUSD_DMCBL_221230", "bitget")       # MarketKind.INVERSE_FUTURE
"""

__version__ = "0.1.0"

from .core import (
    # Types
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
    # Interfaces
    ExchangeAdapter,
    # Exceptions
    CryptoNormError,
    UnsupportedExchangeError,
    InvalidQuantityInput,
    UnknownContractValueError,
    MessageParseError,
    # Config
    SystemConfig,
)
from .exchanges import get_adapter, supported_exchanges
from .registry import ContractSpecRegistry
from .quantity import QuantityCalculator, compute, compute_base_denominated
from .api import (
    normalize_pair,
    get_market_kind,
    normalize_currency,
    get_contract_value,
    compute_quantities,
    default_registry,
    set_default_registry,
)
from .normalizers import get_normalizer

from .utils import (
    setup_logging,
    get_logger,
)

__all__ = [
    # Version
    "__version__",
    # Core Types
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
    # Exchanges
    "get_adapter",
    "supported_exchanges",
    # Registry and quantities
    "ContractSpecRegistry",
    "QuantityCalculator",
    "compute",
    "compute_base_denominated",
    # Facade
    "normalize_pair",
    "get_market_kind",
    "normalize_currency",
    "get_contract_value",
    "compute_quantities",
    "default_registry",
    "set_default_registry",
    # Normalizers
    "get_normalizer",
    # Utils
    "setup_logging",
    "get_logger",
]
