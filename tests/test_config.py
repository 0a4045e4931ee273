"""
Tests for configuration loading.
"""
from pathlib import Path

import pytest

from cryptonorm.core.config import SystemConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CRYPTONORM_LIVE_REFRESH",
        "CRYPTONORM_HTTP_TIMEOUT_SEC",
        "CRYPTONORM_BASELINE_DIR",
        "CRYPTONORM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSystemConfig:
    """Tests for SystemConfig.load()."""

    def test_defaults(self):
        config = SystemConfig.load()
        assert config.registry.live_refresh is True
        assert config.registry.http_timeout_sec == 10.0
        assert config.registry.baseline_dir is None
        assert config.logging.level == "INFO"
        assert config.currency_aliases == {}
        assert config.output_precision is None
        assert config.validate() == []

    def test_missing_file_gives_defaults(self, tmp_path):
        config = SystemConfig.load(tmp_path / "missing.yaml")
        assert config.registry.live_refresh is True

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "registry:\n"
            "  live_refresh: false\n"
            "  http_timeout_sec: 3.5\n"
            "  unknown_key: 1\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  json_format: true\n"
            "currency_aliases:\n"
            "  okex:\n"
            "    XBT: BTC\n"
            "output_precision: 8\n"
        )
        config = SystemConfig.load(path)

        assert config.registry.live_refresh is False
        assert config.registry.http_timeout_sec == 3.5
        assert not hasattr(config.registry, "unknown_key")
        assert config.logging.level == "DEBUG"
        assert config.logging.json_format is True
        assert config.currency_aliases == {"okex": {"XBT": "BTC"}}
        assert config.output_precision == 8

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert SystemConfig.load(path).registry.live_refresh is True

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("registry:\n  live_refresh: true\n  http_timeout_sec: 3.5\n")
        monkeypatch.setenv("CRYPTONORM_LIVE_REFRESH", "false")
        monkeypatch.setenv("CRYPTONORM_HTTP_TIMEOUT_SEC", "1.5")
        monkeypatch.setenv("CRYPTONORM_BASELINE_DIR", str(tmp_path))
        monkeypatch.setenv("CRYPTONORM_LOG_LEVEL", "WARNING")

        config = SystemConfig.load(path)

        assert config.registry.live_refresh is False
        assert config.registry.http_timeout_sec == 1.5
        assert config.registry.baseline_dir == str(tmp_path)
        assert config.logging.level == "WARNING"

    @pytest.mark.parametrize("value,expected", [
        ("0", False), ("no", False), ("FALSE", False),
        ("1", True), ("yes", True), ("True", True),
    ])
    def test_live_refresh_env_values(self, monkeypatch, value, expected):
        monkeypatch.setenv("CRYPTONORM_LIVE_REFRESH", value)
        assert SystemConfig.load().registry.live_refresh is expected

    def test_unrecognized_live_refresh_env_ignored(self, monkeypatch):
        monkeypatch.setenv("CRYPTONORM_LIVE_REFRESH", "maybe")
        assert SystemConfig.load().registry.live_refresh is True


class TestValidate:
    """Tests for SystemConfig.validate()."""

    def test_invalid_values(self, tmp_path):
        config = SystemConfig()
        config.registry.http_timeout_sec = 0
        config.registry.baseline_dir = str(tmp_path / "nope")
        config.logging.level = "LOUD"
        config.logging.max_file_size_mb = 0
        config.output_precision = -1
        config.currency_aliases = {"kucoin": {"XBT": ""}}

        errors = config.validate()

        assert len(errors) == 6
        assert any("http_timeout_sec" in e for e in errors)
        assert any("baseline_dir" in e for e in errors)
        assert any("LOUD" in e for e in errors)
        assert any("output_precision" in e for e in errors)
        assert any("kucoin" in e for e in errors)

    def test_alias_chain_with_builtin(self):
        """BTC -> XBT next to the built-in XBT -> BTC."""
        config = SystemConfig()
        config.currency_aliases = {"kucoin": {"BTC": "XBT"}}
        errors = config.validate()
        assert errors
        assert all("chain" in e and "kucoin" in e for e in errors)

    def test_alias_chain_within_config(self):
        config = SystemConfig()
        config.currency_aliases = {"okex": {"foo": "bar", "BAR": "baz"}}
        assert config.validate() == ["Currency alias chain for okex: FOO -> BAR -> BAZ"]

    def test_alias_renaming_builtin_target(self):
        config = SystemConfig()
        config.currency_aliases = {"bitmex": {"BTC": "BITCOIN"}}
        assert config.validate() == ["Currency alias chain for bitmex: XBT -> BTC -> BITCOIN"]

    def test_non_ascii_alias(self):
        config = SystemConfig()
        config.currency_aliases = {"kucoin": {"ETH": "ÉTH"}}
        errors = config.validate()
        assert len(errors) == 1
        assert "ASCII" in errors[0]

    def test_valid_aliases(self):
        config = SystemConfig()
        config.currency_aliases = {
            "kucoin": {"XBT": "BTC", "GALAX": "gala"},
            "okex": {"xbt": "btc", "USDT": "USDT"},
        }
        assert config.validate() == []

    def test_existing_baseline_dir(self, tmp_path):
        config = SystemConfig()
        config.registry.baseline_dir = str(Path(tmp_path))
        assert config.validate() == []
