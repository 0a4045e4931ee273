"""
OKEx v3 websocket payloads.

``{"table": "<spot|futures|swap|option>/<channel>", "action", "data": [...]}``
with ``trade``, ``depth_l2_tbt`` and ``funding_rate`` channels. Sizes are in
contracts for derivatives.
"""
from typing import Optional

from ..core.exceptions import MessageParseError
from ..core.types import (
    FundingRateMsg,
    MarketKind,
    MessageType,
    OrderBookMsg,
    TradeMsg,
    TradeSide,
)
from ..utils.helpers import iso_to_ms, now_ms, parse_float, parse_optional_float
from .base import BaseNormalizer


class OkexNormalizer(BaseNormalizer):
    """OKEx v3 trade, order book and funding rate messages."""

    exchange = "okex"

    def _resolve(self, symbol: str) -> tuple[str, MarketKind]:
        parsed = self.adapter.parse_symbol(symbol)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize okex symbol {symbol!r}")
        return str(parsed[0]), parsed[1]

    def parse_trade(self, msg: str, market_kind: MarketKind) -> list[TradeMsg]:
        data = self._load(msg)
        with self._fields(msg):
            rows = data["data"]
            trades = []
            for raw in rows:
                symbol = raw["instrument_id"]
                pair, kind = self._resolve(symbol)
                price = parse_float(raw["price"], "price")
                # qty for futures, size for everything else
                size = raw.get("qty", raw.get("size"))
                if size is None:
                    raise MessageParseError(f"okex trade without qty or size: {msg[:200]}")
                quantity = self._quantities(kind, pair, price, parse_float(size, "size"))
                side = raw.get("side") or raw.get("trade_side")

                trades.append(TradeMsg(
                    exchange=self.exchange,
                    market_kind=kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.TRADE,
                    timestamp=iso_to_ms(raw["timestamp"]),
                    price=price,
                    quantity_base=quantity.quantity_base,
                    quantity_quote=quantity.quantity_quote,
                    quantity_contract=quantity.quantity_contract,
                    side=TradeSide.SELL if side == "sell" else TradeSide.BUY,
                    trade_id=str(raw["trade_id"]),
                    json=msg if len(rows) == 1 else self._dumps(raw),
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
            snapshot = data.get("action") == "partial"
            orderbooks = []
            for raw in data["data"]:
                symbol = raw["instrument_id"]
                pair, kind = self._resolve(symbol)

                # [price, size, liquidated orders, order count]
                def level(x):
                    return self._order(kind, pair, parse_float(x[0], "price"), parse_float(x[1], "size"))

                orderbooks.append(OrderBookMsg(
                    exchange=self.exchange,
                    market_kind=kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.L2_EVENT,
                    timestamp=iso_to_ms(raw["timestamp"]),
                    asks=[level(x) for x in raw["asks"]],
                    bids=[level(x) for x in raw["bids"]],
                    snapshot=snapshot,
                    json=msg if len(data["data"]) == 1 else self._dumps(raw),
                ))
            return orderbooks

    def parse_funding_rate(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[FundingRateMsg]:
        data = self._load(msg)
        timestamp = received_at if received_at is not None else now_ms()
        with self._fields(msg):
            rows = data["data"]
            rates = []
            for raw in rows:
                symbol = raw["instrument_id"]
                pair, kind = self._resolve(symbol)
                rates.append(FundingRateMsg(
                    exchange=self.exchange,
                    market_kind=kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.FUNDING_RATE,
                    timestamp=timestamp,
                    funding_rate=parse_float(raw["funding_rate"], "funding_rate"),
                    funding_time=iso_to_ms(raw["funding_time"]),
                    estimated_rate=parse_optional_float(raw.get("estimated_rate"), "estimated_rate"),
                    json=msg if len(rows) == 1 else self._dumps(raw),
                ))
            return rates
