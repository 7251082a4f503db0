"""CSV export of financial reports."""

import csv
from decimal import Decimal
from typing import Optional, TextIO

from ledgerkit.domain.entities import BalanceSheet, GeneralLedger, ProfitAndLoss, TrialBalance


def _money(value: Optional[Decimal]) -> str:
    return "" if value is None else f"{value:.2f}"


def write_trial_balance_csv(report: TrialBalance, stream: TextIO) -> None:
    """Write a trial balance as CSV rows followed by a totals row."""
    writer = csv.writer(stream)
    writer.writerow(["Code", "Account", "Type", "Debit", "Credit"])
    for line in report.accounts:
        writer.writerow(
            [line.code, line.name, line.type.value, _money(line.debit), _money(line.credit)]
        )
    writer.writerow(["", "Total", "", _money(report.total_debit), _money(report.total_credit)])


def write_balance_sheet_csv(report: BalanceSheet, stream: TextIO) -> None:
    """Write a balance sheet with one row per account plus group and section totals."""
    writer = csv.writer(stream)
    writer.writerow(["Section", "Group", "Code", "Account", "Balance"])
    for section in (report.assets, report.liabilities, report.equity):
        for group in section.groups:
            for line in group.accounts:
                writer.writerow([section.name, group.name, line.code, line.name, _money(line.balance)])
            writer.writerow([section.name, group.name, "", f"Total {group.name}", _money(group.total)])
        writer.writerow([section.name, "", "", f"Total {section.name}", _money(section.total)])
    writer.writerow(["", "", "", "Total Assets", _money(report.total_assets)])
    writer.writerow(
        ["", "", "", "Total Liabilities and Equity", _money(report.total_liabilities_and_equity)]
    )


def write_profit_and_loss_csv(report: ProfitAndLoss, stream: TextIO) -> None:
    """Write a profit and loss statement with current and previous period columns.

    An empty ``Change %`` cell means the previous period was zero.
    """
    writer = csv.writer(stream)
    writer.writerow(["Section", "Group", "Code", "Account", "Current", "Previous", "Change", "Change %"])
    for section in (report.revenue, report.expenses):
        for group in section.groups:
            for line in group.accounts:
                writer.writerow(
                    [
                        section.name,
                        group.name,
                        line.code,
                        line.name,
                        _money(line.current),
                        _money(line.previous),
                        _money(line.change),
                        _money(line.change_percentage),
                    ]
                )
        writer.writerow(
            [
                section.name,
                "",
                "",
                f"Total {section.name}",
                _money(section.current_total),
                _money(section.previous_total),
                _money(section.change),
                _money(section.change_percentage),
            ]
        )
    net = report.net_income
    writer.writerow(
        [
            "",
            "",
            "",
            "Net Income",
            _money(net.current),
            _money(net.previous),
            _money(net.change),
            _money(net.change_percentage),
        ]
    )


def write_general_ledger_csv(report: GeneralLedger, stream: TextIO) -> None:
    """Write a general ledger, one row per journal line.

    Each account's lines are framed by an opening and a closing balance row.
    """
    writer = csv.writer(stream)
    writer.writerow(
        ["Code", "Account", "Date", "Transaction", "Type", "Description", "Reference", "Debit", "Credit", "Balance"]
    )
    for account in report.accounts:
        writer.writerow(
            [account.code, account.name, "", "", "", "Opening balance", "", "", "", _money(account.opening_balance)]
        )
        for line in account.lines:
            writer.writerow(
                [
                    account.code,
                    account.name,
                    line.date.isoformat(),
                    line.transaction_id,
                    line.type.value,
                    line.description or "",
                    line.reference or "",
                    _money(line.debit),
                    _money(line.credit),
                    _money(line.balance),
                ]
            )
        writer.writerow(
            [account.code, account.name, "", "", "", "Closing balance", "", "", "", _money(account.closing_balance)]
        )
