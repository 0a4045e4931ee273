"""
Tests for symbol grammars and the pair/kind facade.
"""
import pytest

from cryptonorm import (
    CanonicalPair,
    MarketKind,
    UnsupportedExchangeError,
    get_adapter,
    get_market_kind,
    normalize_pair,
    supported_exchanges,
)


SYMBOLS = [
    # kucoin
    ("kucoin", "BTC-USDT", "BTC/USDT", MarketKind.SPOT),
    ("kucoin", "XBTUSDTM", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("kucoin", "XBTUSDCM", "BTC/USDC", MarketKind.LINEAR_SWAP),
    ("kucoin", "XBTUSDM", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("kucoin", "ETHUSDM", "ETH/USD", MarketKind.INVERSE_SWAP),
    ("kucoin", "XBTMH22", "BTC/USD", MarketKind.INVERSE_FUTURE),
    ("kucoin", "ETH2-ETH", "KSETH/ETH", MarketKind.SPOT),
    ("kucoin", "WAX-USDT", "WAXP/USDT", MarketKind.SPOT),
    # bitget
    ("bitget", "BTCUSDT_SPBL", "BTC/USDT", MarketKind.SPOT),
    ("bitget", "ETHBTC_SPBL", "ETH/BTC", MarketKind.SPOT),
    ("bitget", "BTCUSDT_UMCBL", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("bitget", "BTCPERP_CMCBL", "BTC/USDC", MarketKind.LINEAR_SWAP),
    ("bitget", "BTCUSD_DMCBL", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("bitget", "BTCUSD_DMCBL_221230", "BTC/USD", MarketKind.INVERSE_FUTURE),
    ("bitget", "BTCUSDT_UMCBL_221230", "BTC/USDT", MarketKind.LINEAR_FUTURE),
    ("bitget", "cmt_btcusdt", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("bitget", "btc_usdt", "BTC/USDT", MarketKind.SPOT),
    ("bitget", "btcusd", "BTC/USD", MarketKind.INVERSE_SWAP),
    # bybit
    ("bybit", "BTCUSDT", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("bybit", "BTCUSD", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("bybit", "BTCUSDH22", "BTC/USD", MarketKind.INVERSE_FUTURE),
    # deribit
    ("deribit", "BTC-PERPETUAL", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("deribit", "ETH-25JUN21", "ETH/USD", MarketKind.INVERSE_FUTURE),
    ("deribit", "BTC-25JUN21-50000-C", "BTC/BTC", MarketKind.EUROPEAN_OPTION),
    ("deribit", "BTC-25JUN21-30000-P", "BTC/BTC", MarketKind.EUROPEAN_OPTION),
    # zb
    ("zb", "btc_usdt", "BTC/USDT", MarketKind.SPOT),
    ("zb", "BTC_USDT", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("zb", "btcusdt", "BTC/USDT", MarketKind.SPOT),
    ("zb", "ethbtc", "ETH/BTC", MarketKind.SPOT),
    # zbg
    ("zbg", "btc_usdt", "BTC/USDT", MarketKind.SPOT),
    ("zbg", "BTC_USD-R", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("zbg", "BTC_USDT", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("zbg", "BTC_ZUSD", "BTC/ZUSD", MarketKind.LINEAR_SWAP),
    # mexc, no spot hint
    ("mexc", "BTC_USDT", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("mexc", "BTC_USD", "BTC/USD", MarketKind.INVERSE_SWAP),
    # okex
    ("okex", "BTC-USDT", "BTC/USDT", MarketKind.SPOT),
    ("okex", "BTC-USD-SWAP", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("okex", "BTC-USDT-SWAP", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("okex", "BTC-USD-210625", "BTC/USD", MarketKind.INVERSE_FUTURE),
    ("okex", "BTC-USDT-210625", "BTC/USDT", MarketKind.LINEAR_FUTURE),
    ("okex", "BTC-USD-210625-60000-C", "BTC/USD", MarketKind.EUROPEAN_OPTION),
    ("okex", "eth-usdt", "ETH/USDT", MarketKind.SPOT),
    # bitmex
    ("bitmex", "XBTUSD", "BTC/USD", MarketKind.INVERSE_SWAP),
    ("bitmex", "ETHUSDT", "ETH/USDT", MarketKind.LINEAR_SWAP),
    ("bitmex", "XBTUSDT", "BTC/USDT", MarketKind.LINEAR_SWAP),
    ("bitmex", "ETHUSD", "ETH/USD", MarketKind.QUANTO_SWAP),
    ("bitmex", "XBTM21", "BTC/USD", MarketKind.INVERSE_FUTURE),
    ("bitmex", "XBTUSDTZ21", "BTC/USDT", MarketKind.LINEAR_FUTURE),
    ("bitmex", "ETHUSDM21", "ETH/USD", MarketKind.QUANTO_FUTURE),
    ("bitmex", "ETHM21", "ETH/BTC", MarketKind.LINEAR_FUTURE),
    ("bitmex", "XBT_USDT", "BTC/USDT", MarketKind.SPOT),
]

UNPARSEABLE = [
    ("kucoin", "BTCUSDT"),
    ("kucoin", ""),
    ("bitget", "foo"),
    ("bitget", "cmt_btceth"),
    ("bybit", "BTCEUR"),
    ("deribit", "BTCPERP"),
    ("zb", "btceur"),
    ("zbg", "BTCUSDT"),
    ("mexc", "BTCUSDT"),
    ("mexc", "BTC_USDT_X"),
    ("okex", "BTC"),
    ("okex", "BTC-USD-FOO"),
    ("bitmex", ".BXBT"),
    ("bitmex", "A_B_C"),
]


class TestPairGrammars:
    """Tests for per-exchange symbol parsing."""

    @pytest.mark.parametrize("exchange,symbol,pair,kind", SYMBOLS)
    def test_parse(self, exchange, symbol, pair, kind):
        """Symbol maps to the expected pair and market kind."""
        assert normalize_pair(symbol, exchange) == pair
        assert get_market_kind(symbol, exchange) == kind

    @pytest.mark.parametrize("exchange,symbol", UNPARSEABLE)
    def test_unparseable(self, exchange, symbol):
        """Unmatched symbols give None and UNKNOWN, never an exception."""
        assert normalize_pair(symbol, exchange) is None
        assert get_market_kind(symbol, exchange) == MarketKind.UNKNOWN

    def test_adapter_returns_typed_pair(self):
        """Adapters return a CanonicalPair, not a string."""
        pair, kind = get_adapter("kucoin").parse_symbol("XBTUSDTM")
        assert pair == CanonicalPair("BTC", "USDT")
        assert kind == MarketKind.LINEAR_SWAP

    @pytest.mark.parametrize("exchange", supported_exchanges())
    def test_garbage_never_raises(self, exchange):
        """Arbitrary input is handled by every grammar."""
        adapter = get_adapter(exchange)
        for symbol in ("", "-", "_", "/", "12", "-R", "__", "ÄÖÜ", "x" * 100):
            result = adapter.parse_symbol(symbol)
            assert result is None or isinstance(result[0], CanonicalPair)

    @pytest.mark.parametrize("exchange,symbol", [
        ("kucoin", "ÄÖÜ-USDT"),
        ("kucoin", "ÄÖÜUSDTM"),
        ("bybit", "ÄÖÜUSDT"),
        ("okex", "ÄÖÜ-USDT-SWAP"),
        ("mexc", "BTC_ÜSDT"),
        ("zbg", "ÄÖÜ_USDT"),
        ("bitmex", "ÄÖÜUSDT"),
        ("deribit", "ÄÖÜ-PERPETUAL"),
    ])
    def test_non_ascii_tickers_rejected(self, exchange, symbol):
        """Tickers are uppercase ASCII."""
        assert get_adapter(exchange).parse_symbol(symbol) is None
        assert normalize_pair(symbol, exchange) is None

    def test_non_ascii_canonical_input(self):
        assert normalize_pair("äöü/usdt", "kucoin") is None
        assert normalize_pair("ÄÖÜ/USDT", "okex") is None


class TestFixedPoints:
    """Literal scenarios from real exchange symbols."""

    def test_bitget_dated_inverse_future(self):
        """Suffix grammar with a delivery date."""
        assert normalize_pair("BTCUSD_DMCBL_221230", "bitget") == "BTC/USD"
        assert get_market_kind("BTCUSD_DMCBL_221230", "bitget") == MarketKind.INVERSE_FUTURE

    def test_kucoin_alias_applied(self):
        """XBT is renamed to BTC."""
        assert normalize_pair("XBTUSDTM", "kucoin") == "BTC/USDT"
        assert get_market_kind("XBTUSDTM", "kucoin") == MarketKind.LINEAR_SWAP


class TestMexcSpotHint:
    """Tests for the mexc spot/swap disambiguation."""

    def test_spot_hint(self):
        assert get_market_kind("BTC_USDT", "mexc", is_spot=True) == MarketKind.SPOT

    def test_spot_hint_wins_over_usd_quote(self):
        assert get_market_kind("BTC_USD", "mexc", is_spot=True) == MarketKind.SPOT

    def test_explicit_swap(self):
        assert get_market_kind("BTC_USDT", "mexc", is_spot=False) == MarketKind.LINEAR_SWAP


class TestIdempotence:
    """Normalizing a canonical pair again changes nothing."""

    @pytest.mark.parametrize("exchange,symbol,pair,kind", SYMBOLS)
    def test_normalize_twice(self, exchange, symbol, pair, kind):
        once = normalize_pair(symbol, exchange)
        assert normalize_pair(once, exchange) == once

    def test_canonical_input_is_recanonicalized(self):
        """Aliases still apply to already split input."""
        assert normalize_pair("xbt/usdt", "kucoin") == "BTC/USDT"

    def test_canonical_input_has_no_kind(self):
        assert get_market_kind("BTC/USDT", "kucoin") == MarketKind.UNKNOWN

    def test_malformed_canonical_input(self):
        assert normalize_pair("BTC/USDT/X", "kucoin") is None
        assert normalize_pair("/USDT", "kucoin") is None


class TestUnsupportedExchange:
    """Unknown exchange ids are programming errors."""

    def test_normalize_pair_raises(self):
        with pytest.raises(UnsupportedExchangeError):
            normalize_pair("BTCUSDT", "binance")

    def test_is_key_error(self):
        with pytest.raises(KeyError):
            get_market_kind("BTCUSDT", "binance")

    def test_message_names_exchange(self):
        with pytest.raises(UnsupportedExchangeError, match="binance"):
            get_adapter("binance")

    def test_exchange_id_is_case_insensitive(self):
        assert normalize_pair("XBTUSDTM", "KuCoin") == "BTC/USDT"

    def test_supported_exchanges(self):
        assert supported_exchanges() == [
            "bitget", "bitmex", "bybit", "deribit", "kucoin", "mexc", "okex", "zb", "zbg",
        ]
