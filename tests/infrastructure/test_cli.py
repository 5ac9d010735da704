"""End-to-end tests for the click command-line interface."""

import logging

import pytest
from click.testing import CliRunner

from ims.infrastructure.cli.main import cli
from ims.infrastructure.logging_config import LOG_FORMAT


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    monkeypatch.delenv("IMS_USER", raising=False)
    root = logging.getLogger()
    level = root.level
    yield
    # drop the stderr handler installed by the root command
    for handler in root.handlers[:]:
        if handler.formatter is not None and handler.formatter._fmt == LOG_FORMAT:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args, user="clerk"):
        base = ["--data-dir", str(tmp_path), "--log-level", "ERROR"]
        if user:
            base += ["--user", user]
        return runner.invoke(cli, base + list(args))

    return _run


@pytest.fixture
def widget(run):
    result = run(
        "product", "add", "--name", "Widget", "--price", "15.00", "--cost", "10.00",
        "--stock", "10", "--min-stock", "2", "--sku", "W-1",
    )
    assert result.exit_code == 0, result.output
    return "1"


def _stock_of(run, name="Widget"):
    result = run("inventory", "show")
    for line in result.output.splitlines():
        if line.startswith(name):
            return int(line.split()[1])
    raise AssertionError(f"{name} not listed:\n{result.output}")


def _order_id(output):
    # "Order #1 ORD-... created"
    return output.split()[1].lstrip("#")


class TestProductCommands:

    def test_add_and_list(self, run, widget):
        result = run("product", "list")
        assert result.exit_code == 0
        assert "Widget" in result.output
        assert "W-1" in result.output

    def test_duplicate_sku(self, run, widget):
        result = run("product", "add", "--name", "Other", "--price", "1", "--cost", "1", "--sku", "W-1")
        assert result.exit_code == 1
        assert "[DUPLICATE_KEY]" in result.output

    def test_deactivate_hides_from_list(self, run, widget):
        assert run("product", "update", "--id", "1", "--inactive").exit_code == 0
        assert "Widget" not in run("product", "list").output
        assert "Widget" in run("product", "list", "--all").output

    def test_list_filters(self, run, widget):
        run("product", "add", "--name", "Gadget", "--price", "40.00", "--cost", "20.00",
            "--brand", "Acme", "--sku", "G-1")
        by_brand = run("product", "list", "--brand", "acme")
        assert by_brand.exit_code == 0, by_brand.output
        assert "Gadget" in by_brand.output
        assert "Widget" not in by_brand.output

        by_search = run("product", "list", "--search", "w-1", "--max-price", "20")
        assert "Widget" in by_search.output
        assert "Gadget" not in by_search.output

    def test_list_inverted_price_range(self, run, widget):
        result = run("product", "list", "--min-price", "50", "--max-price", "10")
        assert result.exit_code == 1
        assert "[VALIDATION_FAILED]" in result.output

    def test_show_by_sku(self, run, widget):
        result = run("product", "show", "--sku", "w-1")
        assert result.exit_code == 0, result.output
        assert "Product #1 Widget" in result.output
        assert "Stock:     10" in result.output

    def test_show_unknown_sku(self, run, widget):
        result = run("product", "show", "--sku", "nope")
        assert result.exit_code == 1
        assert "[NOT_FOUND]" in result.output

    def test_delete_blocked_until_order_cancelled(self, run, widget):
        created = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                      "--items", "1:1@15.00")
        blocked = run("product", "delete", "--id", "1")
        assert blocked.exit_code == 1
        assert "[VALIDATION_FAILED]" in blocked.output

        run("order", "cancel", "--id", _order_id(created.output))
        result = run("product", "delete", "--id", "1")
        assert result.exit_code == 0, result.output
        assert "No products found." in run("product", "list", "--all").output


class TestInventoryCommands:

    def test_adjust(self, run, widget):
        result = run("inventory", "adjust", "--product", "1", "--operation", "add", "--quantity", "5")
        assert result.exit_code == 0, result.output
        assert _stock_of(run) == 15

    def test_filter_low(self, run, widget):
        run("inventory", "adjust", "--product", "1", "--operation", "SET", "--quantity", "1")
        result = run("inventory", "show", "--filter", "low")
        assert "Widget" in result.output
        assert "LOW" in result.output


class TestOrderCommands:

    def test_create_consumes_stock(self, run, widget):
        result = run(
            "order", "create", "--customer", "Alice", "--email", "alice@example.com",
            "--payment-method", "cash", "--items", "1:3@9.99",
        )
        assert result.exit_code == 0, result.output
        assert "ORD-" in result.output
        assert "$29.97" in result.output
        assert _stock_of(run) == 7

    def test_insufficient_stock(self, run, widget):
        result = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                     "--items", "1:11@15.00")
        assert result.exit_code == 1
        assert "[INSUFFICIENT_STOCK]" in result.output
        assert _stock_of(run) == 10

    def test_requires_user(self, run, widget):
        result = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                     "--items", "1:1@15.00", user=None)
        assert result.exit_code == 1
        assert "[UNAUTHENTICATED]" in result.output

    def test_bad_item_syntax(self, run, widget):
        result = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                     "--items", "Widget x3")
        assert result.exit_code == 2
        assert "Invalid item format" in result.output

    def test_item_without_quantity(self, run, widget):
        result = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                     "--items", "abc@1:2")
        assert result.exit_code == 2
        assert "Invalid item format 'abc@1:2'" in result.output

    def test_lifecycle(self, run, widget):
        created = run("order", "create", "--customer", "Alice", "--payment-method", "CASH",
                      "--items", "1:2@15.00:5.00")
        order_id = _order_id(created.output)

        assert run("order", "status", "--id", order_id, "--status", "confirmed").exit_code == 0
        result = run("order", "status", "--id", order_id, "--status", "delivered")
        assert result.exit_code == 1
        assert "[INVALID_STATE_TRANSITION]" in result.output

        result = run("order", "cancel", "--id", order_id, "--reason", "Changed mind")
        assert result.exit_code == 0, result.output
        assert _stock_of(run) == 10

        shown = run("order", "show", "--id", order_id)
        assert "CANCELLED" in shown.output
        assert "Cancellation reason: Changed mind" in shown.output

        again = run("order", "cancel", "--id", order_id)
        assert "[ALREADY_CANCELLED]" in again.output

    def test_list_and_search(self, run, widget):
        run("order", "create", "--customer", "Alice", "--payment-method", "CASH", "--items", "1:1@15.00")
        run("order", "create", "--customer", "Bob", "--payment-method", "CASH", "--items", "1:1@15.00")
        result = run("order", "list", "--search", "bob")
        assert result.exit_code == 0
        assert "Bob" in result.output
        assert "Alice" not in result.output

    def test_show_unknown(self, run):
        result = run("order", "show", "--id", "99")
        assert result.exit_code == 1
        assert "[NOT_FOUND]" in result.output


class TestGlobalOptions:

    def test_unknown_log_level(self, tmp_path):
        result = CliRunner().invoke(cli, ["--data-dir", str(tmp_path), "--log-level", "LOUD", "product", "list"])
        assert result.exit_code == 2
