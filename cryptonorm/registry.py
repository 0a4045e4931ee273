"""
Contract value registry.

Holds, per exchange, the multiplier of every contract whose size depends on
the pair (linear swaps and futures on most venues). Each table starts from
a baseline shipped in ``data/contract_values/<exchange>.json`` and is
refreshed once per process from the exchange's public listing endpoint.

Warm-up is lazy and happens at most once per exchange: concurrent callers
wait on a per-exchange lock, the first one loads and publishes the table,
the others reuse it. Tables are published as read-only snapshots, so
readers never take a lock and never see a half-built table.
"""
import json
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

import httpx

from .core.config import RegistryConfig
from .core.interfaces import ExchangeAdapter
from .core.types import CanonicalPair, ContractSpec, MarketKind
from .exchanges import get_adapter
from .exchanges.utils import DEFAULT_USER_AGENT, make_client, positive_float
from .utils.logging import get_logger, log_fields

logger = get_logger(__name__)

BASELINE_DIR = Path(__file__).parent / "data" / "contract_values"
BASELINE_VERSION = 1

# Failures of the live refresh that fall back to the baseline
FETCH_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError)

_EMPTY: Mapping[str, float] = MappingProxyType({})


class ContractSpecRegistry:
    """
    Per-exchange contract multipliers.

    Usage:
        registry = ContractSpecRegistry()
        registry.get("kucoin", "BTC/USDT", MarketKind.LINEAR_SWAP)   # 0.001
    """

    def __init__(
        self,
        live_refresh: bool = True,
        http_timeout_sec: float = 10.0,
        baseline_dir: Optional[Union[str, Path]] = None,
        user_agent: Optional[str] = None,
        client_factory: Optional[Callable[[], httpx.Client]] = None,
    ):
        self.live_refresh = live_refresh
        self.http_timeout_sec = http_timeout_sec
        self.baseline_dir = Path(baseline_dir) if baseline_dir else BASELINE_DIR
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._client_factory = client_factory or self._default_client

        self._tables: dict[str, Mapping[str, float]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._use_baseline = True

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "ContractSpecRegistry":
        return cls(
            live_refresh=config.live_refresh,
            http_timeout_sec=config.http_timeout_sec,
            baseline_dir=config.baseline_dir,
            user_agent=config.user_agent,
        )

    @classmethod
    def from_tables(cls, tables: dict[str, dict[str, float]]) -> "ContractSpecRegistry":
        """
        Registry pre-populated with fixed tables.

        Never loads baselines and never touches the network; exchanges not
        in ``tables`` have an empty table.
        """
        registry = cls(live_refresh=False)
        registry._use_baseline = False
        for exchange, values in tables.items():
            name = get_adapter(exchange).name
            registry._tables[name] = MappingProxyType(
                {str(pair): positive_float(value) for pair, value in values.items()}
            )
        return registry

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(
        self,
        exchange: str,
        pair: Union[CanonicalPair, str],
        market_kind: MarketKind,
    ) -> Optional[float]:
        """
        Multiplier of one contract, or None if unknown.

        Kinds the exchange does not keep per pair always return None; their
        multiplier is a constant of the exchange adapter. The first lookup
        for an exchange warms it up.
        """
        adapter = get_adapter(exchange)
        if market_kind not in adapter.registry_kinds:
            return None
        return self.warm_up(adapter.name).get(str(pair))

    def get_spec(
        self,
        exchange: str,
        pair: Union[CanonicalPair, str],
        market_kind: MarketKind,
    ) -> Optional[ContractSpec]:
        """Like get(), as a ContractSpec record."""
        multiplier = self.get(exchange, pair, market_kind)
        if multiplier is None:
            return None
        if isinstance(pair, str):
            pair = CanonicalPair.parse(pair)
        return ContractSpec(get_adapter(exchange).name, pair, multiplier)

    def snapshot(self, exchange: str) -> Mapping[str, float]:
        """Published table of an exchange, warming it up if needed."""
        return self.warm_up(exchange)

    def is_warm(self, exchange: str) -> bool:
        return get_adapter(exchange).name in self._tables

    # ------------------------------------------------------------------
    # Warm-up
    # ------------------------------------------------------------------

    def warm_up(self, exchange: str) -> Mapping[str, float]:
        """
        Load the table of an exchange once.

        Idempotent and safe to call from many threads: at most one caller
        performs the load, every caller gets the same published table.
        """
        adapter = get_adapter(exchange)
        table = self._tables.get(adapter.name)
        if table is not None:
            return table

        with self._lock_for(adapter.name):
            table = self._tables.get(adapter.name)
            if table is None:
                table = self._load(adapter)
                self._tables[adapter.name] = table
        return table

    def rewarm(self, exchange: str) -> Mapping[str, float]:
        """Reload an exchange's table and replace the published one."""
        adapter = get_adapter(exchange)
        with self._lock_for(adapter.name):
            table = self._load(adapter)
            self._tables[adapter.name] = table
        return table

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    def _load(self, adapter: ExchangeAdapter) -> Mapping[str, float]:
        if not adapter.registry_kinds or not self._use_baseline:
            return _EMPTY

        values = self.load_baseline(adapter.name)
        logger.info(
            f"Loaded {len(values)} baseline contract values for {adapter.name}",
            extra=log_fields(exchange=adapter.name, source="baseline", count=len(values)),
        )

        if self.live_refresh and adapter.contract_values_url:
            try:
                live = self._fetch_live(adapter)
            except FETCH_ERRORS as e:
                logger.warning(
                    f"Live contract values unavailable for {adapter.name}, using baseline: "
                    f"{type(e).__name__}: {e}",
                    extra=log_fields(
                        exchange=adapter.name, source="baseline", count=len(values),
                        error=type(e).__name__,
                    ),
                )
            else:
                values.update(live)
                logger.info(
                    f"Fetched {len(live)} live contract values for {adapter.name}",
                    extra=log_fields(exchange=adapter.name, source="live", count=len(live)),
                )

        return MappingProxyType(values)

    def _fetch_live(self, adapter: ExchangeAdapter) -> dict[str, float]:
        with self._client_factory() as client:
            return adapter.fetch_contract_values(client)

    def _default_client(self) -> httpx.Client:
        return make_client(timeout=self.http_timeout_sec, user_agent=self.user_agent)

    # ------------------------------------------------------------------
    # Baselines
    # ------------------------------------------------------------------

    def baseline_path(self, exchange: str) -> Path:
        return self.baseline_dir / f"{exchange}.json"

    def load_baseline(self, exchange: str) -> dict[str, float]:
        """
        Read the baseline table of an exchange.

        A missing file is an empty baseline; a malformed one raises
        ValueError.
        """
        path = self.baseline_path(exchange)
        if not path.exists():
            logger.debug(f"No baseline contract values at {path}")
            return {}

        with open(path) as f:
            data = json.load(f)

        if data.get("exchange") != exchange:
            raise ValueError(f"Baseline {path} is for {data.get('exchange')!r}, expected {exchange!r}")
        return {str(pair): positive_float(value) for pair, value in data["contract_values"].items()}

    def write_baseline(self, exchange: str, directory: Optional[Union[str, Path]] = None) -> Path:
        """Write the current table of an exchange as a baseline file."""
        name = get_adapter(exchange).name
        table = self.snapshot(name)
        target_dir = Path(directory) if directory else self.baseline_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}.json"

        payload = {
            "exchange": name,
            "version": BASELINE_VERSION,
            "contract_values": dict(sorted(table.items())),
        }
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")

        logger.info(f"Wrote {len(table)} contract values for {name} to {path}")
        return path
