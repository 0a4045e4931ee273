"""Per-exchange symbol grammars, currency aliases and contract value sources."""
from ..core.exceptions import UnsupportedExchangeError
from ..core.interfaces import ExchangeAdapter
from .bitget import BitgetAdapter
from .bitmex import BitmexAdapter
from .bybit import BybitAdapter
from .currency import CURRENCY_ALIASES, add_alias, canonicalize
from .deribit import DeribitAdapter
from .kucoin import KucoinAdapter
from .mexc import MexcAdapter
from .okex import OkexAdapter
from .zb import ZbAdapter
from .zbg import ZbgAdapter

# exchange id -> adapter, closed set
ADAPTERS: dict[str, ExchangeAdapter] = {
    adapter.name: adapter
    for adapter in (
        BitgetAdapter(),
        BitmexAdapter(),
        BybitAdapter(),
        DeribitAdapter(),
        KucoinAdapter(),
        MexcAdapter(),
        OkexAdapter(),
        ZbAdapter(),
        ZbgAdapter(),
    )
}


def get_adapter(exchange: str) -> ExchangeAdapter:
    """
    Look up the adapter for an exchange id.

    Raises UnsupportedExchangeError for ids outside the supported set.
    """
    try:
        return ADAPTERS[exchange.lower()]
    except KeyError:
        raise UnsupportedExchangeError(exchange) from None


def supported_exchanges() -> list[str]:
    """Sorted list of supported exchange ids."""
    return sorted(ADAPTERS)


__all__ = [
    "ADAPTERS",
    "CURRENCY_ALIASES",
    "BitgetAdapter",
    "BitmexAdapter",
    "BybitAdapter",
    "DeribitAdapter",
    "KucoinAdapter",
    "MexcAdapter",
    "OkexAdapter",
    "ZbAdapter",
    "ZbgAdapter",
    "add_alias",
    "canonicalize",
    "get_adapter",
    "supported_exchanges",
]
