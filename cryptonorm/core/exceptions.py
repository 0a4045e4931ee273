"""
Exception hierarchy for cryptonorm.

Data-quality problems coming from an exchange (unknown symbols, missing
contract values) are reported as ``None`` by the lookup functions; the
exceptions below are raised where a caller must stop processing a single
message.
"""


class CryptoNormError(Exception):
    """Base class for all cryptonorm errors."""


class UnsupportedExchangeError(CryptoNormError, KeyError):
    """No adapter is registered under this exchange id."""

    def __init__(self, exchange: str):
        super().__init__(exchange)
        self.exchange = exchange

    def __str__(self) -> str:
        return f"Unsupported exchange: {self.exchange}"


class InvalidQuantityInput(CryptoNormError, ValueError):
    """Price, size or multiplier violates the quantity formula's contract."""


class UnknownContractValueError(CryptoNormError, LookupError):
    """No contract multiplier is known for an instrument."""

    def __init__(self, exchange: str, market_kind, pair: str):
        super().__init__(f"No contract value for {exchange} {market_kind.value} {pair}")
        self.exchange = exchange
        self.market_kind = market_kind
        self.pair = pair


class MessageParseError(CryptoNormError, ValueError):
    """A raw exchange message could not be normalized."""
