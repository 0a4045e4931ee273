"""
Conversion of raw exchange sizes into canonical quantities.

Exchanges report sizes in spot units, in contracts of a fixed base amount
(linear), in contracts of a fixed quote amount (inverse) or through exchange
supplied notionals (quanto). Everything is converted to base and quote
amounts, keeping the contract count for derivatives.

    kind        contract    base                        quote
    spot        None        size                        price * size
    linear      size        size * multiplier           price * base
    inverse     size        size * multiplier / price   size * multiplier
    quanto      size        exchange base notional      exchange quote notional

No rounding happens here; callers round at serialization time.
"""
import math
from typing import Optional, Union

from .core.exceptions import InvalidQuantityInput, UnknownContractValueError
from .core.types import CanonicalPair, CanonicalQuantity, MarketKind
from .exchanges import get_adapter


def _check_number(name: str, value: float) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidQuantityInput(f"{name} is missing")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidQuantityInput(f"{name} is not numeric: {value!r}") from None
    if not math.isfinite(number):
        raise InvalidQuantityInput(f"{name} is not finite: {value!r}")
    return number


def _check_price_and_size(price: float, raw_size: float) -> tuple[float, float]:
    price = _check_number("price", price)
    raw_size = _check_number("size", raw_size)
    if price <= 0:
        raise InvalidQuantityInput(f"price must be > 0, got {price}")
    if raw_size < 0:
        raise InvalidQuantityInput(f"size must be >= 0, got {raw_size}")
    return price, raw_size


def compute(
    market_kind: MarketKind,
    price: float,
    raw_size: float,
    multiplier: Optional[float] = None,
    *,
    base_notional: Optional[float] = None,
    quote_notional: Optional[float] = None,
) -> CanonicalQuantity:
    """
    Convert a raw size into canonical quantities.

    Args:
        market_kind: Kind of the instrument
        price: Trade or level price, > 0
        raw_size: Size as reported by the exchange, >= 0
        multiplier: Contract multiplier, required for linear, inverse and option kinds
        base_notional: Exchange supplied base amount, required for quanto kinds
        quote_notional: Exchange supplied quote amount, required for quanto kinds

    Raises:
        InvalidQuantityInput: on invalid numbers, a missing multiplier or notional,
            or an unknown market kind
    """
    price, raw_size = _check_price_and_size(price, raw_size)

    if market_kind == MarketKind.SPOT:
        return CanonicalQuantity(raw_size, price * raw_size, None)

    if market_kind.is_quanto:
        if base_notional is None or quote_notional is None:
            raise InvalidQuantityInput(
                f"{market_kind.value} needs exchange supplied base and quote notionals"
            )
        return CanonicalQuantity(
            abs(_check_number("base_notional", base_notional)),
            abs(_check_number("quote_notional", quote_notional)),
            raw_size,
        )

    if not (market_kind.is_linear or market_kind.is_inverse
            or market_kind == MarketKind.EUROPEAN_OPTION):
        raise InvalidQuantityInput(f"cannot compute quantities for {market_kind.value}")

    if multiplier is None:
        raise InvalidQuantityInput(f"{market_kind.value} needs a contract multiplier")
    multiplier = _check_number("multiplier", multiplier)
    if multiplier <= 0:
        raise InvalidQuantityInput(f"multiplier must be > 0, got {multiplier}")

    if market_kind.is_inverse:
        quantity_quote = raw_size * multiplier
        return CanonicalQuantity(quantity_quote / price, quantity_quote, raw_size)

    quantity_base = raw_size * multiplier
    return CanonicalQuantity(quantity_base, price * quantity_base, raw_size)


def compute_base_denominated(
    market_kind: MarketKind,
    price: float,
    raw_size: float,
) -> CanonicalQuantity:
    """
    Quantities for feeds that report sizes in base units for every kind.

    The contract count equals the size for derivatives.
    """
    if market_kind == MarketKind.UNKNOWN:
        raise InvalidQuantityInput("cannot compute quantities for unknown")
    price, raw_size = _check_price_and_size(price, raw_size)
    contract = None if market_kind == MarketKind.SPOT else raw_size
    return CanonicalQuantity(raw_size, price * raw_size, contract)


class QuantityCalculator:
    """
    Quantity computation bound to a contract value registry.

    Resolves the multiplier of an instrument from the registry or from the
    exchange's constant policy, then applies ``compute``.
    """

    def __init__(self, registry):
        self.registry = registry

    def contract_value(
        self,
        exchange: str,
        market_kind: MarketKind,
        pair: Union[CanonicalPair, str],
    ) -> Optional[float]:
        """Multiplier of one contract, None for spot or if unknown."""
        adapter = get_adapter(exchange)
        if market_kind in adapter.registry_kinds:
            return self.registry.get(adapter.name, pair, market_kind)
        if market_kind in (MarketKind.SPOT, MarketKind.UNKNOWN):
            return None
        if isinstance(pair, str):
            try:
                pair = CanonicalPair.parse(pair)
            except ValueError:
                # Same answer as a registry miss
                return None
        return adapter.quantity_policy(market_kind, pair)

    def compute_quantities(
        self,
        exchange: str,
        market_kind: MarketKind,
        pair: Union[CanonicalPair, str],
        price: float,
        raw_size: float,
        *,
        base_notional: Optional[float] = None,
        quote_notional: Optional[float] = None,
    ) -> CanonicalQuantity:
        """
        Canonical quantities of a trade or book level.

        Raises:
            UnknownContractValueError: no multiplier is known for a contract kind
            InvalidQuantityInput: invalid price, size or kind
        """
        if market_kind == MarketKind.SPOT or market_kind.is_quanto:
            return compute(
                market_kind, price, raw_size,
                base_notional=base_notional, quote_notional=quote_notional,
            )

        multiplier = self.contract_value(exchange, market_kind, pair)
        if multiplier is None:
            if market_kind == MarketKind.UNKNOWN:
                raise InvalidQuantityInput("cannot compute quantities for unknown")
            raise UnknownContractValueError(exchange, market_kind, str(pair))
        return compute(market_kind, price, raw_size, multiplier)
