"""Transaction journal commands."""

from datetime import date

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.date_filters import parse_date_or_exit
from ledgerkit.cli.error_handling import CLI_ERRORS, handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import EntryInput, TransactionFilter, TransactionType, ZERO
from ledgerkit.domain.journal import JournalService
from ledgerkit.utils.amount_parser import parse_amount

TRANSACTION_TYPES = [t.value for t in TransactionType]


def _parse_entry(ctx, account_service: AccountService, option: str, side: str) -> EntryInput:
    """Turn an ACCOUNT=AMOUNT option value into an EntryInput."""
    account, sep, amount = option.rpartition("=")
    if not sep or not account.strip():
        click.echo(f"Error: Invalid --{side} '{option}'. Expected ACCOUNT=AMOUNT.", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    if side == "debit":
        return EntryInput(account_id=account_id, debit=value)
    return EntryInput(account_id=account_id, credit=value)


@click.group()
def transaction_group():
    """Post and inspect journal transactions."""
    pass


@transaction_group.command("post")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today'); defaults to today")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(TRANSACTION_TYPES, case_sensitive=False),
    default=TransactionType.JOURNAL_ENTRY.value,
    show_default=True,
    help="Transaction type",
)
@click.option("--description", required=True, help="Transaction description")
@click.option("--reference", help="External reference")
@click.option("--debit", "debits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Debit entry (repeatable)")
@click.option("--credit", "credits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Credit entry (repeatable)")
@click.option("--created-by", help="Name of the person posting")
@click.pass_context
def post_transaction(
    ctx,
    txn_date: str | None,
    txn_type: str,
    description: str,
    reference: str | None,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    created_by: str | None,
) -> None:
    """Post a balanced transaction.

    ACCOUNT can be an account code or ID.

    Examples:
        ledgerkit transaction post --description "Owner investment" --debit 1000=5000 --credit 3000=5000
        ledgerkit transaction post --date 2024-01-15 --description "Split sale" \\
            --debit 1000=60 --debit 1200=40 --credit 4000=100
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    journal = JournalService(db)

    posted_on = parse_date_or_exit(ctx, txn_date, "date") or date.today()
    entries = [_parse_entry(ctx, account_service, option, "debit") for option in debits]
    entries += [_parse_entry(ctx, account_service, option, "credit") for option in credits]

    try:
        txn = journal.post_transaction(
            date=posted_on,
            type=txn_type,
            description=description,
            entries=entries,
            reference=reference,
            created_by=created_by,
        )
        click.echo(f"Posted transaction {txn.id} for {txn.amount:,.2f} on {txn.date}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES, case_sensitive=False), help="Transaction type")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--account", help="Only transactions touching this account (code or ID)")
@click.option("--search", help="Match against description or reference")
@click.pass_context
def list_transactions(
    ctx,
    txn_type: str | None,
    start_date: str | None,
    end_date: str | None,
    account: str | None,
    search: str | None,
) -> None:
    """List transactions, newest first."""
    db = ctx.obj["db"]
    journal = JournalService(db)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        transactions = journal.list_transactions(
            TransactionFilter(
                type=txn_type,
                start_date=start,
                end_date=end,
                account_id=account_id,
                search=search,
            )
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':>5} | {'Date':10} | {'Type':16} | {'Amount':>14} | Description")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:5d} | {txn.date} | {txn.type.value:16s} | {txn.amount:>14,.2f} | {txn.description}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show a transaction and its journal entries."""
    db = ctx.obj["db"]
    journal = JournalService(db)

    try:
        txn = journal.get_transaction(transaction_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Description: {txn.description}")
    if txn.reference:
        click.echo(f"  Reference: {txn.reference}")
    if txn.created_by:
        click.echo(f"  Created by: {txn.created_by}")
    click.echo("")
    click.echo(f"  {'Account':40} {'Debit':>14} {'Credit':>14}")
    for entry in txn.entries:
        label = f"{entry.account_code} {entry.account_name}"
        debit = f"{entry.debit:,.2f}" if entry.debit != ZERO else ""
        credit = f"{entry.credit:,.2f}" if entry.credit != ZERO else ""
        click.echo(f"  {label:40} {debit:>14} {credit:>14}")
    click.echo(f"  {'Total':40} {txn.total_debits:>14,.2f} {txn.total_credits:>14,.2f}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on account balances."""
    db = ctx.obj["db"]
    journal = JournalService(db)

    try:
        txn = journal.get_transaction(transaction_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {txn.id} '{txn.description}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        journal.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
