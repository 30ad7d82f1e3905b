"""CLI tests through click's CliRunner against a temporary database."""

from datetime import date

import pytest
from click.testing import CliRunner

from clinic.infrastructure.cli import main


@pytest.fixture
def run(tmp_path, monkeypatch):
    # keep the test session's logging setup untouched
    monkeypatch.setattr(main, "configure_logging", lambda level: None)
    runner = CliRunner()
    db = str(tmp_path / "cli.db")

    def invoke(*args: str, input: str | None = None):
        return runner.invoke(main.cli, ["--db", db, *args], input=input)

    return invoke


@pytest.fixture
def seeded(run):
    run("patient", "add", "--name", "Nguyễn Văn A")
    run("product", "add", "--name", "Gọng titan", "--price", "300000", "--code", "G001", "--quantity", "5")
    run(
        "voucher", "add", "--code", "sale10", "--type", "percent", "--value", "10",
        "--start", "2000-01-01", "--end", "2999-12-31", "--max-discount", "100000",
    )
    return run


class TestDb:

    def test_init(self, run, tmp_path):
        result = run("db", "init")
        assert result.exit_code == 0
        assert (tmp_path / "cli.db").exists()


class TestInvoiceCommands:

    def test_create_show_and_delete(self, seeded):
        result = seeded("invoice", "create", "--patient", "1", "--items", "1:2")
        assert result.exit_code == 0, result.output
        assert "737,000đ" in result.output

        assert "Gọng titan" in seeded("invoice", "show", "--id", "1").output
        assert "  3" in seeded("product", "list").output

        deleted = seeded("invoice", "delete", "--id", "1", "--yes")
        assert deleted.exit_code == 0
        assert "stock restored" in deleted.output
        assert "No invoices found." in seeded("invoice", "list").output

    def test_create_with_voucher(self, seeded):
        result = seeded("invoice", "create", "--patient", "1", "--items", "1", "--voucher", "SALE10")
        assert result.exit_code == 0, result.output
        assert "377,000đ" in result.output

    def test_domain_error_becomes_click_error(self, seeded):
        result = seeded("invoice", "create", "--patient", "1", "--items", "1:9")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_bad_items_format(self, seeded):
        result = seeded("invoice", "create", "--patient", "1", "--items", "one:two")
        assert result.exit_code == 2
        assert "ProductId:Quantity" in result.output

    def test_quote_does_not_touch_stock(self, seeded):
        result = seeded("invoice", "quote", "--items", "1:9")
        assert result.exit_code == 0
        assert "3,047,000đ" in result.output

    def test_status(self, seeded):
        seeded("invoice", "create", "--patient", "1", "--items", "1:1")
        assert "is now PAID" in seeded("invoice", "status", "--id", "1", "--to", "PAID").output
        result = seeded("invoice", "status", "--id", "1", "--to", "UNPAID")
        assert result.exit_code == 1

    def test_sign(self, seeded, tmp_path):
        seeded("invoice", "create", "--patient", "1", "--items", "1:1")
        signature = tmp_path / "sig.txt"
        signature.write_text("data:image/png;base64,AA\n", encoding="utf-8")
        result = seeded("invoice", "sign", "--id", "1", "--file", str(signature))
        assert result.exit_code == 0
        assert "(signed)" in seeded("invoice", "show", "--id", "1").output


class TestVoucherCommands:

    def test_validate(self, seeded):
        result = seeded("voucher", "validate", "--code", "sale10", "--amount", "2000000")
        assert result.exit_code == 0
        assert "100,000đ" in result.output

    def test_validate_unknown(self, seeded):
        result = seeded("voucher", "validate", "--code", "NOPE", "--amount", "1")
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_update_and_list(self, seeded):
        assert seeded("voucher", "update", "--id", "1", "--inactive").exit_code == 0
        listing = seeded("voucher", "list").output
        assert "SALE10" in listing
        assert "no" in listing

    def test_update_without_changes(self, seeded):
        assert seeded("voucher", "update", "--id", "1").exit_code == 2

    def test_delete(self, seeded):
        seeded("voucher", "delete", "--id", "1")
        assert "No vouchers found." in seeded("voucher", "list").output


class TestProductAndReportCommands:

    def test_alerts(self, seeded):
        seeded("product", "update", "--id", "1", "--quantity", "1")
        assert "Low stock: 1" in seeded("product", "alerts").output

    def test_recommend(self, seeded):
        seeded(
            "product", "add", "--name", "Tròng cận", "--price", "400000", "--code", "L1",
            "--category", "lenses", "--sph-range", "-8.00 đến 0",
        )
        result = seeded("product", "recommend", "--od-sph", "-2.5", "--os-sph", "-3", "--category", "lenses")
        assert "L1" in result.output

    def test_delete_product_after_sale(self, seeded):
        seeded("invoice", "create", "--patient", "1", "--items", "1:1")
        result = seeded("product", "delete", "--id", "1", "--yes")
        assert result.exit_code == 0, result.output
        assert "Product #1 deleted." in result.output
        assert "No products found." in seeded("product", "list").output
        assert "Gọng titan" in seeded("invoice", "show", "--id", "1").output
        assert seeded("invoice", "delete", "--id", "1", "--yes").exit_code == 0

    def test_delete_missing_product(self, seeded):
        result = seeded("product", "delete", "--id", "9", "--yes")
        assert result.exit_code == 1
        assert "Product #9 not found" in result.output

    def test_revenue_year_out_of_range(self, seeded):
        result = seeded("report", "revenue", "--year", "10000")
        assert result.exit_code == 1
        assert "Year must be between" in result.output

    def test_reports(self, seeded):
        seeded("invoice", "create", "--patient", "1", "--items", "1:1")
        seeded("invoice", "status", "--id", "1", "--to", "PAID")
        revenue = seeded("report", "revenue", "--year", str(date.today().year))
        assert "407,000đ" in revenue.output
        categories = seeded("report", "categories").output
        assert "glasses" in categories

    def test_patient_list(self, seeded):
        assert "Nguyễn Văn A" in seeded("patient", "list").output
