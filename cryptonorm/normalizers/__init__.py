"""
Exchange message normalizers.

Each normalizer turns raw websocket payloads of one exchange into canonical
TradeMsg, OrderBookMsg, FundingRateMsg and CandlestickMsg objects.
"""
from ..core.exceptions import UnsupportedExchangeError
from ..quantity import QuantityCalculator
from .base import BaseNormalizer
from .bitget import BitgetNormalizer
from .bitmex import BitmexNormalizer
from .mexc import MexcNormalizer
from .okex import OkexNormalizer

NORMALIZERS: dict[str, type[BaseNormalizer]] = {
    cls.exchange: cls
    for cls in (BitgetNormalizer, BitmexNormalizer, MexcNormalizer, OkexNormalizer)
}


def get_normalizer(exchange: str, calculator: QuantityCalculator) -> BaseNormalizer:
    """
    Create the normalizer of an exchange.

    Raises UnsupportedExchangeError if no normalizer exists for it.
    """
    try:
        cls = NORMALIZERS[exchange.lower()]
    except KeyError:
        raise UnsupportedExchangeError(exchange) from None
    return cls(calculator)


__all__ = [
    "NORMALIZERS",
    "BaseNormalizer",
    "BitgetNormalizer",
    "BitmexNormalizer",
    "MexcNormalizer",
    "OkexNormalizer",
    "get_normalizer",
]
