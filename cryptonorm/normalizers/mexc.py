"""
MEXC websocket payloads.

Swap channels: ``push.deal``, ``push.depth``, ``push.depth.full`` and
``push.kline``; sizes are in contracts. Spot channels share the ``push.deal``
and ``push.depth`` names with base-denominated sizes, so the caller's market
kind decides which layout applies.
"""
from typing import Optional

from ..core.exceptions import MessageParseError
from ..core.types import (
    CandlestickMsg,
    MarketKind,
    MessageType,
    OrderBookMsg,
    TradeMsg,
    TradeSide,
)
from ..utils.helpers import now_ms, parse_float
from .base import BaseNormalizer

_INTERVAL_UNITS_SEC = {
    "Min": 60,
    "Hour": 60 * 60,
    "Day": 24 * 60 * 60,
    "Week": 7 * 24 * 60 * 60,
    "Month": 30 * 24 * 60 * 60,
}


def interval_to_ms(interval: str) -> int:
    """``Min15`` -> 900000; unknown intervals give 0."""
    for prefix, seconds in _INTERVAL_UNITS_SEC.items():
        count = interval[len(prefix):]
        if interval.startswith(prefix) and count.isdigit():
            return int(count) * seconds * 1000
    return 0


def _side(raw: int) -> TradeSide:
    # 1 buy, 2 sell
    return TradeSide.SELL if int(raw) == 2 else TradeSide.BUY


class MexcNormalizer(BaseNormalizer):
    """MEXC spot and swap messages."""

    exchange = "mexc"

    def _resolve(self, symbol: str, market_kind: MarketKind) -> tuple[str, MarketKind]:
        parsed = self.adapter.parse_symbol(symbol, is_spot=market_kind == MarketKind.SPOT)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize mexc symbol {symbol!r}")
        return str(parsed[0]), parsed[1]

    def parse_trade(self, msg: str, market_kind: MarketKind) -> list[TradeMsg]:
        data = self._load(msg)
        with self._fields(msg):
            symbol = data["symbol"]
            pair, market_kind = self._resolve(symbol, market_kind)

            if market_kind == MarketKind.SPOT:
                raws = [(d["p"], d["q"], d["T"], d["t"]) for d in data["data"]["deals"]]
            else:
                d = data["data"]
                raws = [(d["p"], d["v"], d["T"], d["t"])]

            trades = []
            for price, size, side, timestamp in raws:
                price = parse_float(price, "price")
                quantity = self._quantities(market_kind, pair, price, parse_float(size, "size"))
                trades.append(TradeMsg(
                    exchange=self.exchange,
                    market_kind=market_kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.TRADE,
                    timestamp=int(timestamp),
                    price=price,
                    quantity_base=quantity.quantity_base,
                    quantity_quote=quantity.quantity_quote,
                    quantity_contract=quantity.quantity_contract,
                    side=_side(side),
                    trade_id=str(timestamp),
                    json=msg,
                ))
            return trades

    def parse_l2(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[OrderBookMsg]:
        data = self._load(msg)
        with self._fields(msg):
            symbol = data["symbol"]
            pair, market_kind = self._resolve(symbol, market_kind)
            channel = data["channel"]
            if channel == "push.depth.full":
                msg_type = MessageType.L2_TOPK
            elif channel == "push.depth":
                msg_type = MessageType.L2_EVENT
            else:
                raise MessageParseError(f"Unsupported mexc order book channel {channel}")

            book = data["data"]
            spot = market_kind == MarketKind.SPOT

            def level(raw):
                # spot: {"p", "q", "a"} in base, swap: [price, contracts, order count]
                price, size = (raw["p"], raw["q"]) if spot else (raw[0], raw[1])
                return self._order(market_kind, pair, parse_float(price, "price"), parse_float(size, "size"))

            version = book.get("version")
            timestamp = data.get("ts")
            if timestamp is None:
                timestamp = received_at if received_at is not None else now_ms()

            return [OrderBookMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=msg_type,
                timestamp=int(timestamp),
                asks=[level(x) for x in book.get("asks", [])],
                bids=[level(x) for x in book.get("bids", [])],
                snapshot=msg_type == MessageType.L2_TOPK,
                seq_id=int(version) if version is not None else None,
                json=msg,
            )]

    def parse_candlestick(self, msg: str, market_kind: MarketKind) -> list[CandlestickMsg]:
        data = self._load(msg)
        with self._fields(msg):
            symbol = data["symbol"]
            pair, market_kind = self._resolve(symbol, market_kind)
            bar = data["data"]

            # q: volume in contracts, a: turnover in quote
            volume = parse_float(bar["q"], "volume")
            if market_kind.is_linear:
                multiplier = self.calculator.contract_value(self.exchange, market_kind, pair)
                if multiplier is None:
                    raise MessageParseError(f"No contract value for mexc {pair}")
                volume *= multiplier
            elif not market_kind.is_inverse:
                raise MessageParseError(f"Unsupported mexc candlestick market kind {market_kind.value}")

            timestamp = int(bar["t"]) * 1000
            interval = bar["interval"]
            return [CandlestickMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.CANDLESTICK,
                timestamp=timestamp,
                period=interval,
                begin_time=timestamp - interval_to_ms(interval),
                open=parse_float(bar["o"], "open"),
                high=parse_float(bar["h"], "high"),
                low=parse_float(bar["l"], "low"),
                close=parse_float(bar["c"], "close"),
                volume=volume,
                quote_volume=parse_float(bar["a"], "quote_volume"),
                json=msg,
            )]
