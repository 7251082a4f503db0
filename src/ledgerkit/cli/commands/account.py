"""Account management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.error_handling import CLI_ERRORS, handle_domain_error
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import AccountFilter, AccountType

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    required=True,
    help="Account type",
)
@click.option("--description", help="Account description")
@click.option("--parent", help="Parent account code or ID")
@click.pass_context
def create_account(
    ctx, code: str, name: str, account_type: str, description: str | None, parent: str | None
):
    """Create a new account.

    Examples:
        ledgerkit account create 1000 "Cash" --type asset
        ledgerkit account create 1010 "Petty Cash" --type asset --parent 1000
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        account = service.create_account(
            code=code,
            name=name,
            type=account_type,
            description=description,
            parent_id=parent_id,
        )
        click.echo(f"Created account {account.code} '{account.name}' (ID: {account.id})")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only list accounts of this type",
)
@click.option("--search", help="Match against code or name")
@click.option("--parent", help="Only list direct sub-accounts of this account (code or ID)")
@click.pass_context
def list_accounts(ctx, account_type: str | None, search: str | None, parent: str | None):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)

    try:
        accounts = service.list_accounts(
            AccountFilter(type=account_type, search=search, parent_id=parent_id)
        )
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:8s} | {acc.name:30s} | {acc.type.value:9s} | "
            f"{acc.natural_balance:>14,.2f}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str) -> None:
    """Show an account with its sub-accounts and recent transactions.

    ACCOUNT can be an account code or ID.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        detail = service.get_account_detail(account_id)
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)
        return

    acc = detail.account
    click.echo(f"\nAccount {acc.code}: {acc.name}")
    click.echo("-" * 60)
    click.echo(f"  ID: {acc.id}")
    click.echo(f"  Type: {acc.type.value}")
    if acc.description:
        click.echo(f"  Description: {acc.description}")
    if detail.parent is not None:
        click.echo(f"  Parent: {detail.parent.code} {detail.parent.name}")
    click.echo(f"  Balance: {acc.natural_balance:,.2f}")

    if detail.sub_accounts:
        click.echo("\nSub-accounts:")
        for sub in detail.sub_accounts:
            click.echo(f"  {sub.code:8s} {sub.name:30s} {sub.natural_balance:>14,.2f}")

    if detail.recent_transactions:
        click.echo("\nRecent transactions:")
        for txn in detail.recent_transactions:
            click.echo(f"  {txn.id:5d} | {txn.date} | {txn.type.value:16s} | {txn.description}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--description", help="New description")
@click.pass_context
def update_account(ctx, account: str, name: str | None, description: str | None) -> None:
    """Update an account's name or description.

    ACCOUNT can be an account code or ID. Code and type cannot be changed.
    """
    if name is None and description is None:
        click.echo("Error: Nothing to update. Use --name or --description.", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.update_account(account_id, name=name, description=description)
        click.echo(f"Updated account {updated.code} '{updated.name}'")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account code or ID.

    The account can only be deleted if it has no sub-accounts and no journal
    entries reference it.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account {acc.code} '{acc.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account {acc.code} '{acc.name}'")
    except CLI_ERRORS as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
