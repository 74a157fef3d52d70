"""Expansion of recurring templates into concrete transactions.

Occurrences are anchored to the template's start date: occurrence ``k`` is
``start + k * interval``. Month and year steps clamp to the last day of a
shorter month without drifting, so a monthly template starting on January 31
produces January 31, February 29 (or 28) and March 31.
"""

from datetime import datetime, timedelta, UTC
from typing import Optional

from dateutil.relativedelta import relativedelta

from spendbook.domain.entities import Interval, RecurringTemplate, Transaction
from spendbook.domain.validation import MAX_GENERATED_OCCURRENCES
from spendbook.utils.date_parser import as_utc


def occurrence_date(start: datetime, interval: str, index: int) -> Optional[datetime]:
    """Return the date of occurrence ``index`` (0-based) of a schedule.

    Args:
        start: Date of the first occurrence
        interval: One of the ``Interval`` values
        index: Occurrence number, 0 being ``start`` itself

    Returns:
        The occurrence date, or None if the interval is not recognized
    """
    if interval == Interval.DAILY.value:
        return start + timedelta(days=index)
    if interval == Interval.WEEKLY.value:
        return start + timedelta(days=7 * index)
    if interval == Interval.MONTHLY.value:
        return start + relativedelta(months=index)
    if interval == Interval.YEARLY.value:
        return start + relativedelta(years=index)
    return None


def expand_template(
    template: RecurringTemplate,
    from_today: bool = False,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """Materialize the transactions described by a recurring template.

    When ``from_today`` is set, occurrences dated before ``now`` are skipped
    (and counted against the occurrence limit) without being materialized.
    Generation stops early if the interval is not recognized. Generated
    transactions have an empty ID for the store to assign.

    Args:
        template: Template to expand
        from_today: Skip occurrences that already elapsed
        now: Reference time for ``from_today``; defaults to the current time

    Returns:
        Transactions in chronological order
    """
    expenses: list[Transaction] = []
    if template.start_date is None:
        return expenses

    start = as_utc(template.start_date)
    interval = template.interval
    unbounded = template.occurrences == 0
    remaining = template.occurrences
    index = 0
    cursor: Optional[datetime] = start

    if from_today:
        today = as_utc(now) if now is not None else datetime.now(UTC)
        while cursor < today and (unbounded or remaining > 0):
            cursor = occurrence_date(start, interval, index + 1)
            if cursor is None:
                return expenses
            index += 1
            if not unbounded:
                remaining -= 1

    limit = MAX_GENERATED_OCCURRENCES if unbounded else remaining
    for _ in range(limit):
        expenses.append(
            Transaction(
                id="",
                recurring_id=template.id,
                description=template.description,
                category=template.category,
                amount=template.amount,
                currency=template.currency,
                date=cursor,
                from_party=template.from_party,
                to_party=template.to_party,
                method=template.method,
                note=template.note,
            )
        )
        index += 1
        cursor = occurrence_date(start, interval, index)
        if cursor is None:
            break
    return expenses
