"""Tests for report commands."""

import csv

from ledgerkit.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_report_balance(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "balance", "4000")

    assert result.exit_code == 0
    assert "Balance: 1,500.00" in result.output
    assert "Debits less credits: -1,500.00" in result.output


def test_report_balance_as_of(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "balance", "1010", "--as-of", "2024-01-10")

    assert result.exit_code == 0
    assert "Balance: 10,000.00" in result.output


def test_trial_balance(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "trial-balance", "--as-of", "2024-01-31")

    assert result.exit_code == 0
    assert "Trial Balance as of 2024-01-31" in result.output
    assert "11,500.00" in result.output
    assert "Bank" not in result.output
    assert "Warning" not in result.output


def test_trial_balance_show_zero(cli_runner, temp_db, funded_ledger):
    result = _invoke(
        cli_runner, temp_db, "report", "trial-balance", "--as-of", "2024-01-31", "--show-zero"
    )

    assert "Bank" in result.output


def test_trial_balance_csv(cli_runner, temp_db, funded_ledger, tmp_path):
    out = tmp_path / "trial.csv"

    result = _invoke(
        cli_runner, temp_db, "report", "trial-balance", "--as-of", "2024-01-31", "--csv", str(out)
    )

    assert result.exit_code == 0
    assert "Exported report" in result.output
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Code", "Account", "Type", "Debit", "Credit"]
    assert rows[-1][-2:] == ["11500.00", "11500.00"]


def test_balance_sheet(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "balance-sheet", "--as-of", "2024-01-31")

    assert result.exit_code == 0
    assert "Balance Sheet as of 2024-01-31" in result.output
    assert "Current Earnings" in result.output
    assert "Total Assets" in result.output
    assert result.output.count("10,700.00") >= 2


def test_profit_loss(cli_runner, temp_db, funded_ledger):
    result = _invoke(
        cli_runner,
        temp_db,
        "report", "profit-loss",
        "--start-date", "2024-01-01",
        "--end-date", "2024-01-31",
    )

    assert result.exit_code == 0
    assert "Profit and Loss 2024-01-01 to 2024-01-31" in result.output
    assert "Compared with 2023-12-01 to 2023-12-31" in result.output
    assert "Net Income" in result.output
    assert "700.00" in result.output
    assert "n/a" in result.output


def test_profit_loss_conflicting_periods(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "report", "profit-loss", "--this-month", "--last-year")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_profit_loss_period_with_dates(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "report", "profit-loss", "--this-month", "--start-date", "2024-01-01"
    )

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_profit_loss_inverted_range(cli_runner, temp_db):
    result = _invoke(
        cli_runner,
        temp_db,
        "report", "profit-loss",
        "--start-date", "2024-02-01",
        "--end-date", "2024-01-01",
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_general_ledger(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "general-ledger", "--account", "1010")

    assert result.exit_code == 0
    assert "1010 Cash (ASSET)" in result.output
    assert "Owner investment" in result.output
    assert "Closing balance" in result.output
    assert "9,200.00" in result.output


def test_general_ledger_csv(cli_runner, temp_db, funded_ledger, tmp_path):
    out = tmp_path / "ledger.csv"

    result = _invoke(
        cli_runner, temp_db, "report", "general-ledger", "--account", "1010", "--csv", str(out)
    )

    assert result.exit_code == 0
    assert "Exported report" in result.output
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Code"
    assert rows[1][5] == "Opening balance"
    assert [row[5] for row in rows[2:-1]] == ["Owner investment", "January rent"]
    assert rows[-1][-1] == "9200.00"


def test_general_ledger_empty(cli_runner, temp_db, chart):
    result = _invoke(cli_runner, temp_db, "report", "general-ledger", "--type", "revenue")

    assert result.exit_code == 0
    assert "No ledger activity found" in result.output


def test_check_consistent(cli_runner, temp_db, funded_ledger):
    result = _invoke(cli_runner, temp_db, "report", "check")

    assert result.exit_code == 0
    assert "Ledger is consistent" in result.output


def test_check_reports_drift(cli_runner, temp_db, funded_ledger):
    from decimal import Decimal

    with temp_db._unit_of_work() as session:
        temp_db._adjust_balance(session, funded_ledger["rent"].id, Decimal("1"))

    result = _invoke(cli_runner, temp_db, "report", "check")

    assert result.exit_code == 1
    assert "Balance drift on account 5000" in result.output
