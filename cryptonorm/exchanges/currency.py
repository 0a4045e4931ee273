"""
Currency alias table.

Some exchanges list assets under legacy or idiosyncratic tickers. The
exceptions below map them to the ticker used everywhere else; any ticker
without an exception passes through uppercased.
"""

# exchange -> {raw ticker -> canonical ticker}
CURRENCY_ALIASES: dict[str, dict[str, str]] = {
    "kucoin": {
        "XBT": "BTC",
        "BCHSV": "BSV",
        "ETH2": "KSETH",
        "R": "REV",
        "WAX": "WAXP",
        "LOKI": "OXEN",
        "GALAX": "GALA",
    },
    "bitmex": {
        "XBT": "BTC",
    },
}


def canonicalize(exchange: str, raw_ticker: str) -> str:
    """
    Convert an exchange ticker to the canonical ticker.

    Total over any input: unknown exchanges and unknown tickers are
    uppercased and returned.
    """
    aliases = CURRENCY_ALIASES.get(exchange.lower())
    if aliases:
        key = raw_ticker.upper()
        if key in aliases:
            return aliases[key]
    return raw_ticker.upper()


def add_alias(exchange: str, raw_ticker: str, canonical_ticker: str) -> None:
    """Add an alias at runtime."""
    CURRENCY_ALIASES.setdefault(exchange.lower(), {})[raw_ticker.upper()] = canonical_ticker.upper()
