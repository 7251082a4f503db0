"""Main CLI entry point."""

import logging

import click
from ledgerkit.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    init_accounts,
    report,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity (overrides LEDGERKIT_LOG_LEVEL environment variable)",
    envvar="LEDGERKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Ledgerkit - Double-entry bookkeeping ledger.

    Maintain a chart of accounts, post balanced journal transactions and
    produce trial balance, balance sheet and profit and loss reports.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path is not None:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database()
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
init_accounts.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
