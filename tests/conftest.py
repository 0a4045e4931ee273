"""
Shared fixtures.

Registries here are built from fixed tables so that no test touches the
network.
"""
import pytest

from cryptonorm.api import set_default_registry
from cryptonorm.quantity import QuantityCalculator
from cryptonorm.registry import ContractSpecRegistry

CONTRACT_VALUES = {
    "bitget": {"BTC/USDT": 0.001, "BCH/USDT": 0.01},
    "bitmex": {"BTC/USDT": 0.000001, "ETH/BTC": 0.00001},
    "kucoin": {"BTC/USDT": 0.001, "ETH/USDT": 0.01},
    "mexc": {"BTC/USDT": 0.0001},
    "okex": {"BTC/USDT": 0.01},
    "zbg": {"BTC/USDT": 0.01, "BTC/USD": 1.0},
}


@pytest.fixture
def registry():
    return ContractSpecRegistry.from_tables(CONTRACT_VALUES)


@pytest.fixture
def calculator(registry):
    return QuantityCalculator(registry)


@pytest.fixture
def default_registry(registry):
    """Install the fixed registry behind the module-level functions."""
    set_default_registry(registry)
    yield registry
    set_default_registry(None)
