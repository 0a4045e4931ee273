"""
Bitget websocket and REST payloads.

Two generations of the API are handled:

* mix (current): ``{"action", "arg": {"instType", "channel", "instId"}, "data"}``.
  Sizes are in base units for every market kind.
* legacy swap (before 2022-04-29): ``{"table": "swap/<channel>", "data"}``.
  Sizes are in contracts.
"""
from typing import Optional

from ..core.exceptions import MessageParseError
from ..core.types import (
    CandlestickMsg,
    FundingRateMsg,
    MarketKind,
    MessageType,
    Order,
    OrderBookMsg,
    TradeMsg,
    TradeSide,
)
from ..quantity import compute_base_denominated
from ..utils.helpers import now_ms, parse_float
from .base import BaseNormalizer

_PERIOD_UNITS_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
}


def period_to_ms(period: str) -> int:
    """``1m`` -> 60000; unknown units give 0."""
    unit = _PERIOD_UNITS_MS.get(period[-1:].lower())
    count = period[:-1]
    if unit is None or not count.isdigit():
        return 0
    return int(count) * unit


def _side(raw: str) -> TradeSide:
    return TradeSide.SELL if raw.lower() == "sell" else TradeSide.BUY


class BitgetNormalizer(BaseNormalizer):
    """Bitget spot, mix and legacy swap messages."""

    exchange = "bitget"

    # ------------------------------------------------------------------
    # Mix API
    # ------------------------------------------------------------------

    def _mix_symbol(self, arg: dict) -> tuple[str, MarketKind]:
        inst_type, inst_id = arg["instType"], arg["instId"]
        if inst_type == "sp":
            symbol = f"{inst_id}_SPBL"
        elif inst_type == "mc":
            if inst_id.endswith("USDT"):
                symbol = f"{inst_id}_UMCBL"
            elif inst_id.endswith("USD"):
                symbol = f"{inst_id}_DMCBL"
            else:
                raise MessageParseError(f"Unknown bitget instId {inst_id}")
        else:
            raise MessageParseError(f"Unknown bitget instType {inst_type}")

        parsed = self.adapter.parse_symbol(symbol)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize bitget symbol {symbol!r}")
        return symbol, parsed[1]

    def _mix_order(self, market_kind: MarketKind, raw: list) -> Order:
        price = parse_float(raw[0], "price")
        quantity = compute_base_denominated(market_kind, price, parse_float(raw[1], "size"))
        return Order(
            price=price,
            quantity_base=quantity.quantity_base,
            quantity_quote=quantity.quantity_quote,
            quantity_contract=quantity.quantity_contract,
        )

    def _mix_trades(self, data: dict, msg: str) -> list[TradeMsg]:
        symbol, market_kind = self._mix_symbol(data["arg"])
        pair = self._pair(symbol)
        trades = []
        for raw in data["data"]:
            timestamp = int(raw[0])
            price = parse_float(raw[1], "price")
            quantity = compute_base_denominated(market_kind, price, parse_float(raw[2], "size"))
            trades.append(TradeMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.TRADE,
                timestamp=timestamp,
                price=price,
                quantity_base=quantity.quantity_base,
                quantity_quote=quantity.quantity_quote,
                quantity_contract=quantity.quantity_contract,
                side=_side(raw[3]),
                # Bitget sends no trade id
                trade_id=str(timestamp),
                json=msg if len(data["data"]) == 1 else self._dumps(raw),
            ))
        return trades

    def _mix_l2(self, data: dict, msg: str) -> list[OrderBookMsg]:
        symbol, market_kind = self._mix_symbol(data["arg"])
        pair = self._pair(symbol)
        channel = data["arg"]["channel"]
        topk = channel in ("books5", "books15")

        return [
            OrderBookMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.L2_TOPK if topk else MessageType.L2_EVENT,
                timestamp=int(raw["ts"]),
                asks=[self._mix_order(market_kind, x) for x in raw["asks"]],
                bids=[self._mix_order(market_kind, x) for x in raw["bids"]],
                snapshot=topk or data.get("action") == "snapshot",
                json=msg,
            )
            for raw in data["data"]
        ]

    def _mix_candlesticks(self, data: dict, msg: str) -> list[CandlestickMsg]:
        symbol, market_kind = self._mix_symbol(data["arg"])
        pair = self._pair(symbol)
        period = data["arg"]["channel"][len("candle"):]
        duration = period_to_ms(period)

        candles = []
        for raw in data["data"]:
            timestamp = int(raw[0])
            candles.append(CandlestickMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.CANDLESTICK,
                timestamp=timestamp,
                period=period,
                begin_time=timestamp - duration,
                open=parse_float(raw[1], "open"),
                high=parse_float(raw[2], "high"),
                low=parse_float(raw[3], "low"),
                close=parse_float(raw[4], "close"),
                volume=parse_float(raw[5], "volume"),
                json=self._dumps(raw),
            ))
        return candles

    # ------------------------------------------------------------------
    # Legacy swap API
    # ------------------------------------------------------------------

    def _legacy_kind(self, symbol: str) -> MarketKind:
        parsed = self.adapter.parse_symbol(symbol)
        if parsed is None:
            raise MessageParseError(f"Failed to normalize bitget symbol {symbol!r}")
        return parsed[1]

    def _legacy_trades(self, data: dict, msg: str) -> list[TradeMsg]:
        trades = []
        for raw in data["data"]:
            symbol = raw["instrument_id"]
            market_kind = self._legacy_kind(symbol)
            pair = self._pair(symbol)
            price = parse_float(raw["price"], "price")
            quantity = self._quantities(market_kind, pair, price, parse_float(raw["size"], "size"))
            trades.append(TradeMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.TRADE,
                timestamp=int(raw["timestamp"]),
                price=price,
                quantity_base=quantity.quantity_base,
                quantity_quote=quantity.quantity_quote,
                quantity_contract=quantity.quantity_contract,
                side=_side(raw["side"]),
                trade_id=str(raw["timestamp"]),
                json=msg if len(data["data"]) == 1 else self._dumps(raw),
            ))
        return trades

    def _legacy_l2(self, data: dict, msg: str) -> list[OrderBookMsg]:
        table = data["table"]
        # swap/depth5 is a top-k snapshot, swap/depth a stream of updates
        topk = table[-1:].isdigit()
        action = data.get("action")
        snapshot = action == "partial" if action else topk

        orderbooks = []
        for raw in data["data"]:
            symbol = raw["instrument_id"]
            market_kind = self._legacy_kind(symbol)
            pair = self._pair(symbol)
            orderbooks.append(OrderBookMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.L2_TOPK if topk else MessageType.L2_EVENT,
                timestamp=int(raw["timestamp"]),
                asks=[self._level(market_kind, pair, x) for x in raw["asks"]],
                bids=[self._level(market_kind, pair, x) for x in raw["bids"]],
                snapshot=snapshot,
                json=msg,
            ))
        return orderbooks

    def _legacy_funding_rates(self, data: dict, msg: str, received_at: Optional[int]) -> list[FundingRateMsg]:
        timestamp = received_at if received_at is not None else now_ms()
        rates = []
        for raw in data["data"]:
            symbol = raw["instrument_id"]
            rates.append(FundingRateMsg(
                exchange=self.exchange,
                market_kind=self._legacy_kind(symbol),
                symbol=symbol,
                pair=self._pair(symbol),
                msg_type=MessageType.FUNDING_RATE,
                timestamp=timestamp,
                funding_rate=parse_float(raw["funding_rate"], "funding_rate"),
                funding_time=int(raw["funding_time"]),
                json=msg if len(data["data"]) == 1 else self._dumps(raw),
            ))
        return rates

    def _legacy_candlestick(self, data: dict, msg: str) -> list[CandlestickMsg]:
        period = data["table"][len("swap/candle"):]
        raw = data["data"]
        symbol = raw["instrument_id"]
        market_kind = self._legacy_kind(symbol)
        pair = self._pair(symbol)
        candle = raw["candle"]
        timestamp = int(candle[0])

        if market_kind.is_inverse:
            # Volume in contracts of 1 USD, turnover in base
            volume = parse_float(candle[6], "volume")
            quote_volume = parse_float(candle[5], "quote_volume")
        else:
            multiplier = self.calculator.contract_value(self.exchange, market_kind, pair)
            if multiplier is None:
                raise MessageParseError(f"No contract value for bitget {pair}")
            volume = parse_float(candle[5], "volume") * multiplier
            quote_volume = parse_float(candle[6], "quote_volume")

        return [CandlestickMsg(
            exchange=self.exchange,
            market_kind=market_kind,
            symbol=symbol,
            pair=pair,
            msg_type=MessageType.CANDLESTICK,
            timestamp=timestamp,
            period=period,
            begin_time=timestamp - period_to_ms(period),
            open=parse_float(candle[1], "open"),
            high=parse_float(candle[2], "high"),
            low=parse_float(candle[3], "low"),
            close=parse_float(candle[4], "close"),
            volume=volume,
            quote_volume=quote_volume,
            json=msg,
        )]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_trade(self, msg: str, market_kind: MarketKind) -> list[TradeMsg]:
        data = self._load(msg)
        with self._fields(msg):
            if "table" in data:
                return self._legacy_trades(data, msg)
            if "arg" in data:
                return self._mix_trades(data, msg)
        raise MessageParseError(f"Unsupported bitget trade message: {msg[:200]}")

    def parse_l2(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[OrderBookMsg]:
        data = self._load(msg)
        with self._fields(msg):
            if "table" in data:
                return self._legacy_l2(data, msg)
            if "arg" in data:
                return self._mix_l2(data, msg)
        raise MessageParseError(f"Unsupported bitget order book message: {msg[:200]}")

    def parse_funding_rate(
        self,
        msg: str,
        market_kind: MarketKind,
        received_at: Optional[int] = None,
    ) -> list[FundingRateMsg]:
        data = self._load(msg)
        if "table" not in data:
            raise NotImplementedError("bitget mix funding rate messages are not supported")
        with self._fields(msg):
            return self._legacy_funding_rates(data, msg, received_at)

    def parse_candlestick(self, msg: str, market_kind: MarketKind) -> list[CandlestickMsg]:
        data = self._load(msg)
        with self._fields(msg):
            if "table" in data:
                return self._legacy_candlestick(data, msg)
            if "arg" in data:
                return self._mix_candlesticks(data, msg)
        raise MessageParseError(f"Unsupported bitget candlestick message: {msg[:200]}")

    def parse_l2_snapshot(self, msg: str, market_kind: MarketKind, symbol: str) -> list[OrderBookMsg]:
        """
        Order book from the REST depth endpoint.

        The response does not name the instrument, so the caller passes the
        symbol it requested (``BTCUSDT_UMCBL``). Sizes are in contracts.
        """
        data = self._load(msg)
        with self._fields(msg):
            if data["code"] != "00000":
                raise MessageParseError(f"Failed bitget REST response: {data.get('msg')}")
            book = data["data"]
            pair = self._pair(symbol)
            return [OrderBookMsg(
                exchange=self.exchange,
                market_kind=market_kind,
                symbol=symbol,
                pair=pair,
                msg_type=MessageType.L2_SNAPSHOT,
                timestamp=int(book["timestamp"]),
                asks=[self._level(market_kind, pair, x) for x in book["asks"]],
                bids=[self._level(market_kind, pair, x) for x in book["bids"]],
                snapshot=True,
                json=msg,
            )]

    def _level(self, market_kind: MarketKind, pair: str, raw: list) -> Order:
        return self._order(
            market_kind, pair, parse_float(raw[0], "price"), parse_float(raw[1], "size")
        )
