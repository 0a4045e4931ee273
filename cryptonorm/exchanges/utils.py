"""Shared helpers for symbol grammars and listing endpoints."""
from typing import Any, Iterable, Optional

import httpx

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)

# Futures month codes used in dated symbols like XBTM21
MONTH_CODES = frozenset("FGHJKMNQUVXZ")


def ends_with_digits(symbol: str, count: int = 2) -> bool:
    """True if the last ``count`` characters are ASCII digits."""
    if len(symbol) < count:
        return False
    tail = symbol[-count:]
    return tail.isascii() and tail.isdigit()


def split_by_quotes(symbol: str, quotes: Iterable[str]) -> Optional[tuple[str, str]]:
    """
    Split a concatenated symbol like ``btcusdt`` into (base, quote).

    Longer quotes are tried first so ``USDT`` wins over ``USD``.
    """
    for quote in sorted(quotes, key=len, reverse=True):
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return symbol[: -len(quote)], quote
    return None


def make_client(timeout: float = 10.0, user_agent: str = DEFAULT_USER_AGENT) -> httpx.Client:
    """HTTP client for public listing endpoints."""
    return httpx.Client(
        timeout=timeout,
        headers={
            "Content-Type": "application/json",
            "User-Agent": user_agent,
            "Accept-Encoding": "gzip",
        },
        follow_redirects=True,
    )


def http_get_json(client: httpx.Client, url: str) -> Any:
    """GET a JSON document, raising on non-success status."""
    response = client.get(url)
    response.raise_for_status()
    return response.json()


def positive_float(value: Any) -> float:
    """Parse a multiplier field, rejecting zero, negative and non-numeric values."""
    number = float(value)
    if not number > 0 or number == float("inf"):
        raise ValueError(f"invalid contract value: {value!r}")
    return number
