# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Receivables and payables views.

A receivable is an income transaction that has not been marked as paid; a
payable is the expense-side mirror. Both views share `open_items()`:

1) keep transactions of the requested type whose status is not "paid",
2) attach the computed ``is_overdue`` flag (recomputed on every call),
3) sort ascending by due date, items without a due date first,
4) apply the status filter:
     - "all":      every open item,
     - "pending":  pending items that are not overdue,
     - "overdue":  overdue items only,
5) compute the total of the filtered items and of their overdue subset.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from .dates import is_overdue
from .io import TRANSACTION_COLUMNS, transactions_frame
from .models import Transaction

STATUS_FILTERS: tuple[str, ...] = ("all", "pending", "overdue")

OPEN_ITEM_COLUMNS: list[str] = TRANSACTION_COLUMNS + ["is_overdue"]


@dataclass(frozen=True)
class OpenItemsView:
    """
    Result of a receivables/payables computation.

    Attributes
    ----------
    items:
        Filtered open items, with an ``is_overdue`` boolean column.
    total:
        Sum of ``amount`` over `items`.
    total_overdue:
        Sum of ``amount`` over the overdue rows of `items`.
    """

    items: pd.DataFrame
    total: float
    total_overdue: float


def open_items(
    transactions: Iterable[Transaction],
    transaction_type: str,
    status_filter: str = "all",
    today: Optional[date] = None,
) -> OpenItemsView:
    """
    Build the open-items view for one transaction type.

    Raises
    ------
    ValueError
        If `status_filter` is not one of "all", "pending", "overdue".
    """
    if status_filter not in STATUS_FILTERS:
        raise ValueError(
            f"Invalid status filter: {status_filter!r}. "
            f"Expected one of {', '.join(STATUS_FILTERS)}."
        )

    df = transactions_frame(transactions)
    df = df[(df["type"] == transaction_type) & (df["status"] != "paid")].copy()

    df["is_overdue"] = pd.Series(
        [is_overdue(d, s, today) for d, s in zip(df["due_date"], df["status"])],
        index=df.index,
        dtype=bool,
    )

    # Missing due dates become NaT and sort first.
    df["_due"] = pd.to_datetime(df["due_date"])
    df = df.sort_values("_due", na_position="first", kind="stable")
    df = df.drop(columns=["_due"])

    if status_filter == "overdue":
        df = df[df["is_overdue"]]
    elif status_filter == "pending":
        df = df[(df["status"] == "pending") & ~df["is_overdue"]]

    items = df[OPEN_ITEM_COLUMNS].reset_index(drop=True)
    total = float(items["amount"].sum())
    total_overdue = float(items.loc[items["is_overdue"], "amount"].sum())

    return OpenItemsView(items=items, total=total, total_overdue=total_overdue)


def receivables(
    transactions: Iterable[Transaction],
    status_filter: str = "all",
    today: Optional[date] = None,
) -> OpenItemsView:
    """Open income items (accounts receivable)."""
    return open_items(transactions, "income", status_filter, today)


def payables(
    transactions: Iterable[Transaction],
    status_filter: str = "all",
    today: Optional[date] = None,
) -> OpenItemsView:
    """Open expense items (accounts payable)."""
    return open_items(transactions, "expense", status_filter, today)
