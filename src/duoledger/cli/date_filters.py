"""CLI helpers for date range resolution."""

from datetime import date

import click

from duoledger.utils.date_parser import get_date_range, parse_date


def _parse_or_exit(ctx: click.Context, label: str, value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} date: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve the --start-date/--end-date options or a single period flag.

    Period flags are keyed by period name ("this-month", "last-year", ...)
    and exclude each other and the explicit dates.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --last-month, --last-year) can be given.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: A period option cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = _parse_or_exit(ctx, "start", start_date)
    end = _parse_or_exit(ctx, "end", end_date)
    if start is None and end is None and default_range is not None:
        return default_range
    return start, end
