"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerkit.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(func):
    """Add one --<period> flag per reporting period in PERIODS."""
    for period in reversed(PERIODS):
        func = click.option(
            f"--{period}",
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(func)
    return func


def period_flags_from(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags added by period_options out of a command's kwargs."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIODS}


def parse_date_or_exit(ctx, value: str | None, label: str) -> date | None:
    """Parse an optional CLI date, or exit with a CLI error."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]
    flag_names = ", ".join(f"--{period}" for period in PERIODS)

    if len(selected) > 1:
        click.echo(
            f"Error: Only one period option ({flag_names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end
