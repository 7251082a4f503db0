"""Financial report commands."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.date_filters import (
    parse_date_or_exit,
    period_flags_from,
    period_options,
    resolve_cli_date_range,
)
from ledgerkit.cli.error_handling import CLI_ERRORS, handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.export import (
    write_balance_sheet_csv,
    write_general_ledger_csv,
    write_profit_and_loss_csv,
    write_trial_balance_csv,
)
from ledgerkit.domain.reports import BalanceService
from ledgerkit.utils.date_parser import get_date_range

ACCOUNT_TYPES = [t.value for t in AccountType]


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _percent(value: Optional[Decimal]) -> str:
    return "n/a" if value is None else f"{value:,.2f}%"


def _write_csv(path: str, writer, report) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer(report, f)
    click.echo(f"Exported report to {path}")


def _echo_warnings(warnings) -> None:
    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.group()
def report_group():
    """Balances and financial statements."""
    pass


@report_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--start-date", help="Only count entries on or after this date")
@click.option("--as-of", help="Only count entries on or before this date")
@click.pass_context
def account_balance(ctx, account: str, start_date: str | None, as_of: str | None) -> None:
    """Show an account's balance replayed from the journal.

    ACCOUNT can be an account code or ID.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        acc = account_service.get_account(account_id)
        raw = BalanceService(db).account_balance(account_id, as_of=end, start_date=start)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"{acc.code} {acc.name} ({acc.type.value})")
    click.echo(f"  Balance: {_money(acc.type.natural_balance(raw))}")
    click.echo(f"  Debits less credits: {_money(raw)}")


@report_group.command("trial-balance")
@click.option("--as-of", help="Report date (defaults to today)")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), help="Only include this account type")
@click.option("--show-zero", is_flag=True, help="Include accounts with a zero balance")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write the report to a CSV file")
@click.pass_context
def trial_balance(
    ctx, as_of: str | None, account_type: str | None, show_zero: bool, csv_path: str | None
) -> None:
    """Show the trial balance."""
    db = ctx.obj["db"]
    report_date = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        report = BalanceService(db).trial_balance(
            as_of=report_date,
            account_type=AccountType(account_type.upper()) if account_type else None,
            include_zero=show_zero,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if csv_path:
        _write_csv(csv_path, write_trial_balance_csv, report)
        return

    click.echo(f"\nTrial Balance as of {report.as_of}")
    click.echo("-" * 80)
    click.echo(f"{'Code':8} {'Account':36} {'Debit':>16} {'Credit':>16}")
    click.echo("-" * 80)
    for line in report.accounts:
        debit = _money(line.debit) if line.debit else ""
        credit = _money(line.credit) if line.credit else ""
        click.echo(f"{line.code:8} {line.name:36} {debit:>16} {credit:>16}")
    click.echo("-" * 80)
    click.echo(f"{'':8} {'Total':36} {_money(report.total_debit):>16} {_money(report.total_credit):>16}")
    _echo_warnings(report.warnings)


@report_group.command("balance-sheet")
@click.option("--as-of", help="Report date (defaults to today)")
@click.option("--show-zero", is_flag=True, help="Include accounts with a zero balance")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write the report to a CSV file")
@click.pass_context
def balance_sheet(ctx, as_of: str | None, show_zero: bool, csv_path: str | None) -> None:
    """Show the balance sheet."""
    db = ctx.obj["db"]
    report_date = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        report = BalanceService(db).balance_sheet(as_of=report_date, include_zero=show_zero)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if csv_path:
        _write_csv(csv_path, write_balance_sheet_csv, report)
        return

    click.echo(f"\nBalance Sheet as of {report.as_of}")
    for section in (report.assets, report.liabilities, report.equity):
        click.echo("")
        click.echo(section.name)
        click.echo("-" * 70)
        for group in section.groups:
            click.echo(f"  {group.name}")
            for line in group.accounts:
                click.echo(f"    {line.code:8} {line.name:36} {_money(line.balance):>18}")
            click.echo(f"  {'Total ' + group.name:48} {_money(group.total):>18}")
        click.echo(f"{'Total ' + section.name:50} {_money(section.total):>18}")

    click.echo("=" * 70)
    click.echo(f"{'Total Assets':50} {_money(report.total_assets):>18}")
    click.echo(f"{'Total Liabilities and Equity':50} {_money(report.total_liabilities_and_equity):>18}")
    _echo_warnings(report.warnings)


@report_group.command("profit-loss")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--previous-start-date", help="Comparison period start (defaults to the preceding period)")
@click.option("--previous-end-date", help="Comparison period end")
@click.option("--show-zero", is_flag=True, help="Include accounts with no activity in either period")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write the report to a CSV file")
@click.pass_context
def profit_and_loss(
    ctx,
    start_date: str | None,
    end_date: str | None,
    previous_start_date: str | None,
    previous_end_date: str | None,
    show_zero: bool,
    csv_path: str | None,
    **period_kwargs,
) -> None:
    """Show the profit and loss statement with a comparison period.

    Defaults to the current month. Without explicit comparison dates the
    previous period of the same length is used.
    """
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
        default_range=get_date_range("this-month"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required.", err=True)
        ctx.exit(1)

    previous_start = parse_date_or_exit(ctx, previous_start_date, "previous start date")
    previous_end = parse_date_or_exit(ctx, previous_end_date, "previous end date")

    try:
        report = BalanceService(db).profit_and_loss(
            start_date=start,
            end_date=end,
            previous_start_date=previous_start,
            previous_end_date=previous_end,
            include_zero=show_zero,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if csv_path:
        _write_csv(csv_path, write_profit_and_loss_csv, report)
        return

    click.echo(f"\nProfit and Loss {report.start_date} to {report.end_date}")
    click.echo(f"Compared with {report.previous_start_date} to {report.previous_end_date}")
    header = f"{'':46} {'Current':>14} {'Previous':>14} {'Change':>14} {'Change %':>10}"
    for section in (report.revenue, report.expenses):
        click.echo("")
        click.echo(section.name)
        click.echo(header)
        click.echo("-" * len(header))
        for group in section.groups:
            click.echo(f"  {group.name}")
            for line in group.accounts:
                label = f"{line.code} {line.name}"
                click.echo(
                    f"    {label:42} {_money(line.current):>14} {_money(line.previous):>14} "
                    f"{_money(line.change):>14} {_percent(line.change_percentage):>10}"
                )
        click.echo(
            f"{'Total ' + section.name:46} {_money(section.current_total):>14} "
            f"{_money(section.previous_total):>14} {_money(section.change):>14} "
            f"{_percent(section.change_percentage):>10}"
        )

    net = report.net_income
    click.echo("=" * len(header))
    click.echo(
        f"{'Net Income':46} {_money(net.current):>14} {_money(net.previous):>14} "
        f"{_money(net.change):>14} {_percent(net.change_percentage):>10}"
    )


@report_group.command("general-ledger")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), help="Only include this account type")
@click.option("--account", help="Only include this account (code or ID)")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Write the report to a CSV file")
@click.pass_context
def general_ledger(
    ctx,
    start_date: str | None,
    end_date: str | None,
    account_type: str | None,
    account: str | None,
    csv_path: str | None,
    **period_kwargs,
) -> None:
    """Show journal entries per account with running balances."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
    )
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        ledger = BalanceService(db).general_ledger(
            start_date=start,
            end_date=end,
            account_type=AccountType(account_type.upper()) if account_type else None,
            account_id=account_id,
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if csv_path:
        _write_csv(csv_path, write_general_ledger_csv, ledger)
        return

    if not ledger.accounts:
        click.echo("No ledger activity found.")
        return

    for acc in ledger.accounts:
        click.echo(f"\n{acc.code} {acc.name} ({acc.type.value})")
        click.echo("-" * 100)
        click.echo(f"{'':10} {'Opening balance':52} {'':>11} {'':>11} {_money(acc.opening_balance):>12}")
        for line in acc.lines:
            description = (line.description or "")[:45]
            debit = _money(line.debit) if line.debit else ""
            credit = _money(line.credit) if line.credit else ""
            click.echo(
                f"{line.date} {line.transaction_id:5d} {description:46} "
                f"{debit:>11} {credit:>11} {_money(line.balance):>12}"
            )
        click.echo(f"{'':10} {'Closing balance':52} {'':>11} {'':>11} {_money(acc.closing_balance):>12}")


@report_group.command("check")
@click.pass_context
def check_ledger(ctx) -> None:
    """Verify cached balances against the journal and re-check every transaction.

    Exits with status 1 when any problem is found.
    """
    db = ctx.obj["db"]

    try:
        result = BalanceService(db).verify_ledger()
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if result.ok:
        click.echo("Ledger is consistent.")
        return

    for drift in result.drifts:
        click.echo(
            f"Balance drift on account {drift.code}: cached {_money(drift.cached)}, "
            f"journal {_money(drift.replayed)}"
        )
    for imbalance in result.imbalances:
        click.echo(
            f"Transaction {imbalance.transaction_id} is unbalanced: debits "
            f"{_money(imbalance.total_debits)}, credits {_money(imbalance.total_credits)}"
        )
    ctx.exit(1)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
