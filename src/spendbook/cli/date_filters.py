"""CLI helpers for month and date range resolution."""

from datetime import datetime, time, UTC

import click

from spendbook.domain.report import ReportService
from spendbook.utils.date_parser import parse_date, parse_month


def resolve_month(ctx: click.Context, service: ReportService, month: str | None) -> tuple[int, int]:
    """Resolve a ``YYYY-MM`` option, defaulting to the current expense month."""
    if month is None:
        return service.current_month()
    try:
        return parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def resolve_date_range(
    ctx: click.Context, start_date: str | None, end_date: str | None
) -> tuple[datetime | None, datetime | None]:
    """Parse inclusive start/end date options into UTC datetimes.

    The end date covers the whole day.
    """
    start = None
    if start_date:
        try:
            start = datetime.combine(parse_date(start_date), time.min, tzinfo=UTC)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = datetime.combine(parse_date(end_date), time.max, tzinfo=UTC)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)
    return start, end
