# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Date helpers for SMB Dashboard.

The backend exchanges calendar dates as ISO strings ("YYYY-MM-DD"), but
some backends return full timestamps ("2024-06-14T00:00:00.000Z") for the
same fields. Everything in the package works on `datetime.date` values,
so this module normalizes both forms and hosts the overdue rule shared by
the dashboard, receivables, payables and reports.
"""

from datetime import date, datetime
from typing import Optional, Union

import pandas as pd

DateLike = Union[date, datetime, str, None]


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def parse_iso_date(value: DateLike) -> Optional[date]:
    """
    Convert an ISO date or timestamp into a `date`.

    Parameters
    ----------
    value:
        A `date`, a `datetime`, an ISO string or None. Empty strings and
        pandas missing markers (NaN, NaT) are treated like None. For
        timestamps the time-of-day is dropped.

    Returns
    -------
    datetime.date or None

    Raises
    ------
    ValueError
        If the string is not a valid ISO date.
    """
    if value is None:
        return None
    if value is pd.NaT or (not isinstance(value, (str, date)) and pd.isna(value)):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None

    try:
        return date.fromisoformat(raw[:10])
    except ValueError as exc:
        raise ValueError(
            f"Invalid date: {value!r}, expected YYYY-MM-DD format."
        ) from exc


def is_overdue(
    due_date: DateLike,
    status: Optional[str],
    today: Optional[date] = None,
) -> bool:
    """
    Return True when a pending item is past its due date.

    Only items whose status is exactly "pending" can be overdue. Paid items
    and items without a due date never are. The comparison is done on
    calendar dates: an item due today is not overdue yet.
    """
    due = parse_iso_date(due_date)
    if due is None or status != "pending":
        return False

    reference = today if today is not None else _today()
    return due < reference
