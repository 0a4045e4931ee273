"""
Configuration management for cryptonorm.

Loads config from YAML files and environment variables.
Environment variables take precedence over file config.
"""
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import os
import yaml


@dataclass
class RegistryConfig:
    """Contract value registry configuration."""
    live_refresh: bool = True               # From env: CRYPTONORM_LIVE_REFRESH
    http_timeout_sec: float = 10.0          # From env: CRYPTONORM_HTTP_TIMEOUT_SEC
    baseline_dir: Optional[str] = None      # From env: CRYPTONORM_BASELINE_DIR, None = packaged data
    user_agent: Optional[str] = None        # None = built-in browser user agent


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"                     # From env: CRYPTONORM_LOG_LEVEL
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[str] = None
    max_file_size_mb: int = 100
    backup_count: int = 5
    json_format: bool = False


@dataclass
class SystemConfig:
    """Top-level configuration."""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # exchange -> {raw ticker -> canonical ticker}, added to the built-in table
    currency_aliases: dict[str, dict[str, str]] = field(default_factory=dict)
    output_precision: Optional[int] = None   # Rounding of serialized quantities

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "SystemConfig":
        """
        Load configuration from file and environment variables.
        Environment variables override file config.
        """
        config = cls()

        if config_path and config_path.exists():
            with open(config_path) as f:
                file_config = yaml.safe_load(f)
                config = cls._merge_dict(config, file_config)

        live_refresh = os.getenv("CRYPTONORM_LIVE_REFRESH", "").lower()
        if live_refresh in ("false", "0", "no"):
            config.registry.live_refresh = False
        elif live_refresh in ("true", "1", "yes"):
            config.registry.live_refresh = True

        timeout = os.getenv("CRYPTONORM_HTTP_TIMEOUT_SEC")
        if timeout:
            config.registry.http_timeout_sec = float(timeout)
        config.registry.baseline_dir = os.getenv("CRYPTONORM_BASELINE_DIR", config.registry.baseline_dir)
        config.logging.level = os.getenv("CRYPTONORM_LOG_LEVEL", config.logging.level)

        return config

    @classmethod
    def _merge_dict(cls, config: "SystemConfig", data: dict) -> "SystemConfig":
        """Merge dictionary into config object."""
        if not data:
            return config

        if "registry" in data:
            for k, v in data["registry"].items():
                if hasattr(config.registry, k):
                    setattr(config.registry, k, v)

        if "logging" in data:
            for k, v in data["logging"].items():
                if hasattr(config.logging, k):
                    setattr(config.logging, k, v)

        if "currency_aliases" in data:
            config.currency_aliases = {
                exchange: {str(raw): str(canonical) for raw, canonical in aliases.items()}
                for exchange, aliases in data["currency_aliases"].items()
            }

        if "output_precision" in data:
            config.output_precision = data["output_precision"]

        return config

    def validate(self) -> list[str]:
        """
        Validate configuration. Returns list of error messages.
        Empty list means config is valid.
        """
        errors = []

        if self.registry.http_timeout_sec <= 0:
            errors.append("http_timeout_sec must be positive")
        if self.registry.baseline_dir and not Path(self.registry.baseline_dir).is_dir():
            errors.append(f"baseline_dir does not exist: {self.registry.baseline_dir}")

        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.logging.level}")
        if self.logging.max_file_size_mb <= 0:
            errors.append("max_file_size_mb must be positive")

        if self.output_precision is not None and self.output_precision < 0:
            errors.append("output_precision must be non-negative")

        errors.extend(self._validate_aliases())

        return errors

    def _validate_aliases(self) -> list[str]:
        # Checked against the built-in table the aliases are added to
        from ..exchanges.currency import CURRENCY_ALIASES

        errors = []
        for exchange, aliases in self.currency_aliases.items():
            merged = dict(CURRENCY_ALIASES.get(exchange.lower(), {}))
            for raw, canonical in aliases.items():
                if not raw or not canonical:
                    errors.append(f"Empty currency alias for {exchange}: {raw!r} -> {canonical!r}")
                elif not canonical.isascii():
                    errors.append(f"Currency alias for {exchange} is not ASCII: {raw} -> {canonical}")
                else:
                    merged[raw.upper()] = canonical.upper()

            # A target that is itself renamed would make canonicalization non-idempotent
            for raw, canonical in sorted(merged.items()):
                target = merged.get(canonical, canonical)
                if target != canonical:
                    errors.append(
                        f"Currency alias chain for {exchange}: {raw} -> {canonical} -> {target}"
                    )

        return errors
