"""
Module-level convenience functions.

They run on a process-wide default registry created on first use. Services
that need control over networking (tests, offline tools) build their own
ContractSpecRegistry and install it with ``set_default_registry`` or use a
QuantityCalculator directly.
"""
import threading
from typing import Optional

from .core.types import CanonicalPair, CanonicalQuantity, MarketKind
from .exchanges import canonicalize, get_adapter
from .quantity import QuantityCalculator
from .registry import ContractSpecRegistry

_default_registry: Optional[ContractSpecRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> ContractSpecRegistry:
    """Process-wide registry used by the functions below."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = ContractSpecRegistry()
    return _default_registry


def set_default_registry(registry: Optional[ContractSpecRegistry]) -> None:
    """Replace the process-wide registry; None resets it to a fresh default."""
    global _default_registry
    with _default_lock:
        _default_registry = registry


def _parse(raw_symbol: str, exchange: str, is_spot: Optional[bool] = None):
    adapter = get_adapter(exchange)
    if "/" in raw_symbol:
        # Already canonical: re-canonicalize the tickers only
        try:
            pair = CanonicalPair.parse(raw_symbol)
        except ValueError:
            return None
        canonical = adapter.make_pair(pair.base, pair.quote)
        return (canonical, None) if canonical else None
    return adapter.parse_symbol(raw_symbol, is_spot)


def normalize_pair(raw_symbol: str, exchange: str) -> Optional[str]:
    """
    Canonical ``BASE/QUOTE`` pair of an exchange symbol.

    Returns None if the symbol matches none of the exchange's rules.
    Accepts already canonical pairs, so normalization is idempotent.

    Raises:
        UnsupportedExchangeError: unknown exchange id
    """
    parsed = _parse(raw_symbol, exchange)
    return str(parsed[0]) if parsed else None


def get_market_kind(raw_symbol: str, exchange: str, is_spot: Optional[bool] = None) -> MarketKind:
    """
    Market kind of an exchange symbol, MarketKind.UNKNOWN if unparseable.

    ``is_spot`` disambiguates exchanges whose spot and swap symbols share
    one grammar (mexc).
    """
    parsed = _parse(raw_symbol, exchange, is_spot)
    if parsed is None or parsed[1] is None:
        return MarketKind.UNKNOWN
    return parsed[1]


def normalize_currency(raw_ticker: str, exchange: str) -> str:
    """Canonical ticker of an exchange currency code."""
    get_adapter(exchange)
    return canonicalize(exchange, raw_ticker)


def get_contract_value(exchange: str, market_kind: MarketKind, pair: str) -> Optional[float]:
    """Multiplier of one contract, None for spot or unknown instruments."""
    return QuantityCalculator(default_registry()).contract_value(exchange, market_kind, pair)


def compute_quantities(
    exchange: str,
    market_kind: MarketKind,
    pair: str,
    price: float,
    raw_size: float,
    *,
    base_notional: Optional[float] = None,
    quote_notional: Optional[float] = None,
) -> CanonicalQuantity:
    """
    Canonical quantities of a trade or book level.

    Quanto kinds take the exchange supplied notionals instead of a multiplier.

    Raises:
        UnknownContractValueError: no multiplier is known for the instrument
        InvalidQuantityInput: invalid price or size
    """
    return QuantityCalculator(default_registry()).compute_quantities(
        exchange, market_kind, pair, price, raw_size,
        base_notional=base_notional, quote_notional=quote_notional,
    )
