"""Initialize a default chart of accounts."""

import click
from ledgerkit.cli.error_handling import CLI_ERRORS
from ledgerkit.domain.account import AccountService
from ledgerkit.domain.entities import AccountType


# Small-business chart: (code, name, type, parent code)
INITIAL_ACCOUNTS = [
    # Root accounts
    ("1000", "Assets", AccountType.ASSET, None),
    ("2000", "Liabilities", AccountType.LIABILITY, None),
    ("3000", "Equity", AccountType.EQUITY, None),
    ("4000", "Revenue", AccountType.REVENUE, None),
    ("5000", "Expenses", AccountType.EXPENSE, None),
    # Assets
    ("1100", "Cash", AccountType.ASSET, "1000"),
    ("1200", "Bank Accounts", AccountType.ASSET, "1000"),
    ("1300", "Accounts Receivable", AccountType.ASSET, "1000"),
    ("1400", "Inventory", AccountType.ASSET, "1000"),
    ("1500", "Prepaid Expenses", AccountType.ASSET, "1000"),
    ("1600", "Equipment", AccountType.ASSET, "1000"),
    # Liabilities
    ("2100", "Accounts Payable", AccountType.LIABILITY, "2000"),
    ("2200", "Accrued Expenses", AccountType.LIABILITY, "2000"),
    ("2300", "Taxes Payable", AccountType.LIABILITY, "2000"),
    ("2400", "Loans Payable", AccountType.LIABILITY, "2000"),
    # Equity
    ("3100", "Owner's Capital", AccountType.EQUITY, "3000"),
    ("3200", "Retained Earnings", AccountType.EQUITY, "3000"),
    ("3300", "Owner's Drawings", AccountType.EQUITY, "3000"),
    # Revenue
    ("4100", "Sales Revenue", AccountType.REVENUE, "4000"),
    ("4200", "Service Revenue", AccountType.REVENUE, "4000"),
    ("4900", "Other Income", AccountType.REVENUE, "4000"),
    # Expenses
    ("5100", "Cost of Goods Sold", AccountType.EXPENSE, "5000"),
    ("5200", "Salaries & Wages", AccountType.EXPENSE, "5000"),
    ("5300", "Rent", AccountType.EXPENSE, "5000"),
    ("5400", "Utilities", AccountType.EXPENSE, "5000"),
    ("5500", "Office Supplies", AccountType.EXPENSE, "5000"),
    ("5900", "Other Expenses", AccountType.EXPENSE, "5000"),
]


def seed_accounts(service: AccountService) -> tuple[int, list[str]]:
    """Create every account in INITIAL_ACCOUNTS whose code is not taken yet.

    Parents are listed before their children, so each parent code resolves
    by the time its children are created.

    Returns:
        Tuple of (number created, error messages)
    """
    created = 0
    errors = []
    for code, name, account_type, parent_code in INITIAL_ACCOUNTS:
        if service.db.get_account_by_code(code) is not None:
            continue
        try:
            parent_id = service.get_account_by_code(parent_code).id if parent_code else None
            service.create_account(code=code, name=name, type=account_type, parent_id=parent_id)
            created += 1
        except CLI_ERRORS as e:
            errors.append(f"Could not create account {code} '{name}': {e}")
    return created, errors


@click.command("init-accounts")
@click.option("--force", is_flag=True, help="Add missing default accounts even if accounts exist")
@click.pass_context
def init_accounts(ctx, force: bool):
    """Initialize database with a default chart of accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    existing = service.list_accounts()
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing defaults.")
        return

    click.echo("Creating default chart of accounts...")
    created, errors = seed_accounts(service)
    for message in errors:
        click.echo(f"Warning: {message}", err=True)

    if not errors:
        click.echo(f"Successfully created {created} accounts.")
    else:
        click.echo(f"Created {created} accounts with {len(errors)} errors.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
