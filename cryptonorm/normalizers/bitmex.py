"""
BitMEX websocket payloads.

Trades carry ``homeNotional`` (base) and ``foreignNotional`` (quote), which
are used as-is for every market kind. Order book levels are in contracts and
go through the quantity calculator.

``orderBookL2`` updates and deletes identify a level by id only, so the
normalizer remembers the price of every level it has seen.
"""
import threading
from typing import Optional

from ..core.exceptions import MessageParseError
from ..core.types import (
    FundingRateMsg,
    MarketKind,
    MessageType,
    Order,
    OrderBookMsg,
    TradeMsg,
    TradeSide,
)
from ..quantity import QuantityCalculator
from ..utils.helpers import iso_to_ms, now_ms, parse_float
from ..utils.logging import get_logger
from .base import BaseNormalizer

logger = get_logger(__name__)


class BitmexNormalizer(BaseNormalizer):
    """BitMEX trade, order book and funding messages."""

    exchange = "bitmex"

    def __init__(self, calculator: QuantityCalculator):
        super().__init__(calculator)
        # (symbol, level id) -> price
        self._level_prices: dict[tuple[str, int], float] = {}
        self._lock = threading.Lock()

    def _resolve(self, symbol: str) -> tuple[str, MarketKind]:
        parsed = self.adapter.parse_symbol(symbol)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize bitmex symbol {symbol!r}")
        return str(parsed[0]), parsed[1]

    def parse_trade(self, msg: str, market_kind: MarketKind) -> list[TradeMsg]:
        data = self._load(msg)
        with self._fields(msg):
            rows = data["data"]
            trades = []
            for raw in rows:
                symbol = raw["symbol"]
                pair, kind = self._resolve(symbol)
                trades.append(TradeMsg(
                    exchange=self.exchange,
                    market_kind=kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.TRADE,
                    timestamp=iso_to_ms(raw["timestamp"]),
                    price=parse_float(raw["price"], "price"),
                    quantity_base=parse_float(raw["homeNotional"], "homeNotional"),
                    quantity_quote=parse_float(raw["foreignNotional"], "foreignNotional"),
                    quantity_contract=parse_float(raw["size"], "size"),
                    side=TradeSide.SELL if raw.get("side") == "Sell" else TradeSide.BUY,
                    trade_id=raw["trdMatchID"],
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
            table = data["table"]
            if table.startswith("orderBookL2"):
                return self._parse_l2_levels(data, msg, received_at)
            if table == "orderBook10":
                return self._parse_top10(data, msg)
        raise MessageParseError(f"Unsupported bitmex order book table {data.get('table')}")

    def _level(self, kind: MarketKind, pair: str, price: float, size: float) -> Order:
        if kind.is_quanto:
            raise MessageParseError("bitmex quanto order book levels carry no notionals")
        return self._order(kind, pair, price, size)

    def _parse_l2_levels(self, data: dict, msg: str, received_at: Optional[int]) -> list[OrderBookMsg]:
        action = data["action"]
        rows = data["data"]
        if not rows:
            return []

        symbol = rows[0]["symbol"]
        pair, kind = self._resolve(symbol)
        asks: list[Order] = []
        bids: list[Order] = []
        timestamps = []

        with self._lock:
            if action == "partial":
                for key in [k for k in self._level_prices if k[0] == symbol]:
                    del self._level_prices[key]

            for raw in rows:
                key = (raw["symbol"], int(raw["id"]))
                if "price" in raw:
                    price = parse_float(raw["price"], "price")
                    self._level_prices[key] = price
                elif key in self._level_prices:
                    price = self._level_prices[key]
                else:
                    logger.debug(f"Dropping bitmex level {key} with unknown price")
                    continue

                if action == "delete":
                    size = 0.0
                    self._level_prices.pop(key, None)
                else:
                    size = parse_float(raw["size"], "size")

                order = self._level(kind, pair, price, size)
                (asks if raw["side"] == "Sell" else bids).append(order)
                if "timestamp" in raw:
                    timestamps.append(iso_to_ms(raw["timestamp"]))

        if timestamps:
            timestamp = max(timestamps)
        else:
            timestamp = received_at if received_at is not None else now_ms()

        asks.sort(key=lambda o: o.price)
        bids.sort(key=lambda o: o.price, reverse=True)
        return [OrderBookMsg(
            exchange=self.exchange,
            market_kind=kind,
            symbol=symbol,
            pair=pair,
            msg_type=MessageType.L2_EVENT,
            timestamp=timestamp,
            asks=asks,
            bids=bids,
            snapshot=action == "partial",
            json=msg,
        )]

    def _parse_top10(self, data: dict, msg: str) -> list[OrderBookMsg]:
        orderbooks = []
        for raw in data["data"]:
            symbol = raw["symbol"]
            pair, kind = self._resolve(symbol)
            orderbooks.append(OrderBookMsg(
                exchange=self.exchange,
                market_kind=kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.L2_TOPK,
                timestamp=iso_to_ms(raw["timestamp"]),
                asks=[self._level(kind, pair, parse_float(p, "price"), parse_float(s, "size"))
                      for p, s in raw["asks"]],
                bids=[self._level(kind, pair, parse_float(p, "price"), parse_float(s, "size"))
                      for p, s in raw["bids"]],
                snapshot=True,
                json=msg,
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
                symbol = raw["symbol"]
                pair, kind = self._resolve(symbol)
                rates.append(FundingRateMsg(
                    exchange=self.exchange,
                    market_kind=kind,
                    symbol=symbol,
                    pair=pair,
                    msg_type=MessageType.FUNDING_RATE,
                    timestamp=timestamp,
                    funding_rate=parse_float(raw["fundingRate"], "fundingRate"),
                    funding_time=iso_to_ms(raw["timestamp"]),
                    json=msg if len(rows) == 1 else self._dumps(raw),
                ))
            return rates
