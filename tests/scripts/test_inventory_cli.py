"""
Tests for the inventory command-line interface.
"""

import json

import pytest
import yaml

from scripts.inventory_cli import build_parser, main


@pytest.fixture
def cli(tmp_path, capsys):
    """Run the CLI against a throwaway SQLite file; return (exit code, stdout, stderr)."""
    config_path = tmp_path / "store.yaml"
    config_path.write_text(yaml.safe_dump({
        "config_id": "cli-test",
        "version": 1,
        "inventory": {"shelf_life_days": 3},
        "pricing": {"currency": "USD", "unit_price": "0.35", "unit_cost": "0.20"},
        "database": {"url": "sqlite://"},
    }))
    database_url = f"sqlite:///{tmp_path / 'cli.db'}"

    def _run(*argv: str) -> tuple[int, str, str]:
        code = main(["--config", str(config_path), "--database-url", database_url, *argv])
        out, err = capsys.readouterr()
        return code, out, err

    code, _, _ = _run("init-db")
    assert code == 0
    return _run


class TestCommands:

    def test_purchase_prints_store(self, cli):
        code, out, _ = cli("purchase", "10", "2024-01-01")

        assert code == 0
        assert json.loads(out) == {"store": [{"day": "2024-01-01", "quantity": 10}]}

    def test_sell_prints_remaining_store(self, cli):
        cli("purchase", "10", "2024-01-01")

        code, out, _ = cli("sell", "4", "2024-01-02")

        assert code == 0
        assert json.loads(out)["store"] == [{"day": "2024-01-01", "quantity": 6}]

    def test_analytics(self, cli):
        cli("purchase", "10", "2024-01-01")
        cli("sell", "8", "2024-01-02")

        code, out, _ = cli("analytics", "2024-01-01", "2024-01-31")

        assert code == 0
        assert json.loads(out) == {
            "purchased": 10,
            "sold": 8,
            "profit": "$0.80",
            "inInventory": 0,
            "expired": 2,
        }

    def test_show(self, cli):
        cli("purchase", "10", "2024-01-01")

        code, out, _ = cli("show")

        payload = json.loads(out)
        assert code == 0
        assert payload["store"] == [{"day": "2024-01-01", "quantity": 10}]
        assert payload["ledger"][0]["inInventory"] == 10

    def test_init_db_is_idempotent(self, cli):
        cli("purchase", "10", "2024-01-01")

        code, _, _ = cli("init-db")
        _, out, _ = cli("show")

        assert code == 0
        assert len(json.loads(out)["store"]) == 1


class TestErrors:

    def test_oversell_exit_code(self, cli):
        cli("purchase", "10", "2024-01-01")

        code, out, err = cli("sell", "15", "2024-01-02")

        assert code == 1
        assert out == ""
        assert "INSUFFICIENT_STOCK" in err

    def test_out_of_order_exit_code(self, cli):
        cli("purchase", "10", "2024-01-01")

        code, _, err = cli("purchase", "5", "2023-12-31")

        assert code == 1
        assert "DATE_BEFORE_LATEST_DAY" in err

    @pytest.mark.parametrize("argv,message", [
        (("purchase", "ten", "2024-01-01"), "not an integer"),
        (("purchase", "-1", "2024-01-01"), "should be positive"),
        (("sell", "1", "2024/01/01"), "valid format"),
        (("sell", "1", "2024-02-30"), "numerically valid"),
        (("analytics", "2024-02-01", "2024-01-01"), "VALIDATION_ERROR"),
    ])
    def test_validation_errors(self, cli, argv, message):
        code, _, err = cli(*argv)

        assert code == 1
        assert message in err

    def test_quantity_beyond_column_range(self, cli):
        code, _, err = cli("purchase", str(2**63), "2024-01-01")

        assert code == 1
        assert "exceeds the maximum" in err

    @pytest.mark.parametrize("content,message", [
        ({"inventory": {"shelf_life_days": 0}, "pricing": {"unit_price": "1", "unit_cost": "1"}},
         "shelf_life_days"),
        ({"inventory": {"shelf_life_days": 3}, "pricing": {"unit_price": 0.35, "unit_cost": "1"}},
         "unit_price"),
        (["not", "a", "mapping"], "must be a mapping"),
    ])
    def test_invalid_config_exits_1(self, tmp_path, capsys, content, message):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text(yaml.safe_dump(content))

        code = main(["--config", str(config_path), "show"])

        _, err = capsys.readouterr()
        assert code == 1
        assert "ERROR [CONFIG_ERROR]" in err
        assert message in err

    def test_missing_config_file_exits_1(self, tmp_path, capsys):
        code = main(["--config", str(tmp_path / "absent.yaml"), "show"])

        _, err = capsys.readouterr()
        assert code == 1
        assert "ERROR [CONFIG_ERROR]" in err

    def test_usage_error_exits_2(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["purchase", "10"])

        assert exc_info.value.code == 2

    def test_parser_requires_a_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
