"""
Tests for the command line.
"""
import json

import httpx
import pytest

from cryptonorm import cli
from cryptonorm.api import set_default_registry
from cryptonorm.exchanges import CURRENCY_ALIASES


@pytest.fixture(autouse=True)
def isolated(monkeypatch):
    for name in (
        "CRYPTONORM_LIVE_REFRESH",
        "CRYPTONORM_HTTP_TIMEOUT_SEC",
        "CRYPTONORM_BASELINE_DIR",
        "CRYPTONORM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    saved = {k: dict(v) for k, v in CURRENCY_ALIASES.items()}
    yield
    CURRENCY_ALIASES.clear()
    CURRENCY_ALIASES.update(saved)
    set_default_registry(None)


class TestCommands:
    """Tests for the query commands."""

    def test_pair(self, capsys):
        assert cli.main(["pair", "XBTUSDTM", "-e", "kucoin"]) == 0
        assert capsys.readouterr().out.strip() == "BTC/USDT"

    def test_pair_unparseable(self, capsys):
        assert cli.main(["pair", "???", "-e", "kucoin"]) == 1
        assert "Unrecognized" in capsys.readouterr().err

    def test_kind(self, capsys):
        assert cli.main(["kind", "BTCUSD_DMCBL_221230", "-e", "bitget"]) == 0
        assert capsys.readouterr().out.strip() == "inverse_future"

    def test_kind_spot_hint(self, capsys):
        assert cli.main(["kind", "BTC_USDT", "-e", "mexc", "--spot"]) == 0
        assert capsys.readouterr().out.strip() == "spot"

    def test_contract_value_offline(self, capsys):
        assert cli.main(["--offline", "contract-value", "BTC/USDT", "-e", "okex", "-k", "LinearSwap"]) == 0
        assert float(capsys.readouterr().out) == 0.01

    def test_contract_value_policy(self, capsys):
        assert cli.main(["--offline", "contract-value", "BTC/USD", "-e", "okex", "-k", "inverse_swap"]) == 0
        assert float(capsys.readouterr().out) == 100.0

    def test_contract_value_unknown(self, capsys):
        assert cli.main(["--offline", "contract-value", "NOPE/USDT", "-e", "okex", "-k", "linear_swap"]) == 1

    def test_quantities(self, capsys, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("output_precision: 6\n")
        args = ["--config", str(config), "--offline", "quantities", "BTC/USD",
                "-e", "bitget", "-k", "inverse_swap", "--price", "58722.0", "--size", "158"]
        assert cli.main(args) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["quantity_quote"] == 158.0
        assert result["quantity_base"] == round(158 / 58722.0, 6)
        assert result["quantity_contract"] == 158.0

    def test_quantities_missing_contract_value(self):
        args = ["--offline", "quantities", "NOPE/USDT", "-e", "okex", "-k", "linear_swap",
                "--price", "1", "--size", "1"]
        assert cli.main(args) == 1

    def test_unsupported_exchange(self):
        with pytest.raises(SystemExit):
            cli.main(["pair", "BTCUSDT", "-e", "binance"])

    def test_config_aliases_applied(self, capsys, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("currency_aliases:\n  okex:\n    XBT: BTC\n")
        assert cli.main(["--config", str(config), "pair", "XBT-USDT", "-e", "okex"]) == 0
        assert capsys.readouterr().out.strip() == "BTC/USDT"

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("logging:\n  level: LOUD\n")
        assert cli.main(["--config", str(config), "pair", "BTC-USDT", "-e", "okex"]) == 2

    def test_alias_chain_rejected(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("currency_aliases:\n  kucoin:\n    BTC: XBT\n")
        assert cli.main(["--config", str(config), "pair", "XBTUSDTM", "-e", "kucoin"]) == 2
        assert "chain" in capsys.readouterr().err
        # Nothing was added to the table
        assert "BTC" not in CURRENCY_ALIASES["kucoin"]


class TestRefreshBaseline:
    """Tests for baseline regeneration."""

    def test_refresh_writes_file(self, monkeypatch, tmp_path, capsys):
        payload = {
            "code": "200000",
            "data": [{"symbol": "XBTUSDTM", "isInverse": False, "multiplier": 0.001}],
        }
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
        monkeypatch.setattr(
            "cryptonorm.registry.make_client",
            lambda **kwargs: httpx.Client(transport=transport),
        )

        assert cli.main(["refresh-baseline", "-e", "kucoin", "-o", str(tmp_path)]) == 0

        data = json.loads((tmp_path / "kucoin.json").read_text())
        assert data["exchange"] == "kucoin"
        assert data["contract_values"]["BTC/USDT"] == 0.001
        assert "Wrote" in capsys.readouterr().out

    def test_refresh_refused_offline(self, tmp_path):
        assert cli.main(["--offline", "refresh-baseline", "-e", "kucoin", "-o", str(tmp_path)]) == 1
        assert not (tmp_path / "kucoin.json").exists()
