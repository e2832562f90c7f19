# ruff: noqa: E501
import io
import json
import textwrap
from datetime import date
from decimal import Decimal

import pytest

from process_transactions import main, read_export


def _csv(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


MONARCH_EXPORT = _csv(
    """
    Date,Merchant,Category,Account,Original Statement,Notes,Amount,Tags
    2024-01-15,Shell,Gas,Checking,SHELL OIL 5744,,-120.00,
    2024-01-20,Payroll,Paycheck,Checking,ACME CORP,,"2,500.00",
    2024-02-01,Verizon,Utilities,Amex Gold,,,(80.00),

    not-a-date,Netflix,Entertainment,Amex Gold,,,-15.49,
    2024-02-03,Broken Row,Misc,Amex Gold,,,abc,
    """
)


def test_read_export_monarch_columns():
    rows = read_export(io.StringIO(MONARCH_EXPORT))

    assert len(rows) == 4
    assert rows[0].date == date(2024, 1, 15)
    assert rows[0].merchant == "Shell"
    assert rows[0].category == "Gas"
    assert rows[0].account == "Checking"
    assert rows[0].amount == Decimal("-120.00")
    assert rows[1].amount == Decimal("2500.00")
    assert rows[2].amount == Decimal("-80.00")
    assert rows[3].date is None
    assert rows[3].merchant == "Netflix"


def test_read_export_debit_credit_columns():
    export = _csv(
        """
        Posted Date,Description,Debit,Credit
        01/05/2024,COFFEE SHOP,4.50,
        01/06/2024,PAYROLL,,"1,000.00"
        """
    )

    rows = read_export(io.StringIO(export))

    assert [r.amount for r in rows] == [Decimal("-4.50"), Decimal("1000.00")]
    assert rows[0].date == date(2024, 1, 5)
    assert rows[0].merchant == "COFFEE SHOP"
    assert rows[0].category == ""


def test_read_export_header_only_is_empty():
    assert read_export(io.StringIO("Date,Merchant,Category,Amount,Account\n")) == []


def test_read_export_requires_amount_column():
    with pytest.raises(ValueError, match="amount"):
        read_export(io.StringIO("Date,Merchant\n2024-01-01,Shell\n"))


def test_read_export_requires_date_column():
    with pytest.raises(ValueError, match="date"):
        read_export(io.StringIO("Merchant,Amount\nShell,-1\n"))


def test_cli_prints_dashboard_json(tmp_path, capsys):
    path = tmp_path / "export.csv"
    path.write_text(MONARCH_EXPORT, encoding="utf-8")

    assert main([str(path), "--balance", "0"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["payoff"] == {"months": 0, "total_interest": 0.0}
    assert data["monthly"] == [
        {"month": "2024-01", "income": 2500.0, "spend": 120.0},
        {"month": "2024-02", "income": 0.0, "spend": 80.0},
    ]
    assert data["recurring_cost"]["count"] == 0
    assert {"bucket": "Connectivity & Utilities", "total_spend": 80.0} in data["categories"]
    assert len(data["day_pattern"]) == 31


def test_cli_uses_rules_file(tmp_path, capsys):
    export = tmp_path / "export.csv"
    export.write_text(MONARCH_EXPORT, encoding="utf-8")
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"Streaming": ["netflix"]}), encoding="utf-8")

    assert main([str(export), "--rules", str(rules)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["categories"] == [
        {"bucket": "Streaming", "total_spend": 15.49},
        {"bucket": "Other", "total_spend": 200.0},
    ]
    assert data["payoff"] == {"months": 13, "total_interest": 824.31}


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.csv")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_unreadable_path(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "Error: Could not read" in capsys.readouterr().err


def test_cli_bad_export(tmp_path, capsys):
    path = tmp_path / "export.csv"
    path.write_text("Merchant,Notes\nShell,hello\n", encoding="utf-8")

    assert main([str(path)]) == 1
    assert "Error:" in capsys.readouterr().err
