"""CLI error handling helpers."""

import click

from ledgerkit.domain.errors import CommitHookError, DomainError, StorageError

# Errors rendered as a one-line message instead of a traceback.
CLI_ERRORS = (DomainError, StorageError, CommitHookError)


def handle_domain_error(
    ctx: click.Context, error: DomainError | StorageError | CommitHookError | ValueError
) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
