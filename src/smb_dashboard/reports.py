# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Transaction reports for SMB Dashboard.

A report is a filtered, date-descending list of transactions, split into
pages, plus a monthly income vs expense chart computed over the filtered
set (not over all transactions).

Filters
-------
`ReportFilters` combines:

- transaction type ("all", "income" or "expense"),
- category ("all" or an exact category name),
- inclusive start / end dates,
- a case-insensitive search term matched as a substring of the
  description or of the product name.

Product names are taken from the transaction when the backend provides
them, otherwise resolved from the product list passed by the caller.

Paging
------
`paginate()` slices a frame into fixed-size pages. `ReportBrowser` keeps
the current filters and page for interactive layers and goes back to the
first page whenever the filters change.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

import pandas as pd

from .dates import is_overdue
from .io import is_present, transactions_frame
from .models import TRANSACTION_TYPES, Product, Transaction
from .periods import Period, filter_by_period, monthly_totals

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class ReportFilters:
    """
    Filters used to build a transaction report.

    The filters can be combined. Date bounds are inclusive; a range whose
    end is before its start simply matches nothing.
    """

    transaction_type: str = "all"
    category: str = "all"
    start: Optional[date] = None
    end: Optional[date] = None
    search: str = ""

    def __post_init__(self) -> None:
        if self.transaction_type != "all" and self.transaction_type not in TRANSACTION_TYPES:
            raise ValueError(
                f"Invalid transaction type filter: {self.transaction_type!r}."
            )


@dataclass(frozen=True)
class Page:
    """One page of a report."""

    items: pd.DataFrame
    page: int
    page_size: int
    total_items: int
    total_pages: int


@dataclass(frozen=True)
class ReportView:
    """A page of filtered transactions and the chart of the filtered set."""

    page: Page
    chart: pd.DataFrame
    total_income: float
    total_expenses: float


def resolve_product_names(
    frame: pd.DataFrame,
    products: Iterable[Product],
) -> pd.Series:
    """
    Return the product name of each row of a transactions frame.

    The transaction's own ``product_name`` wins; otherwise the name is
    looked up by ``product_id`` in `products`. Rows without a product, or
    referencing an unknown product, get None.
    """
    names = {p.id: p.name for p in products}
    resolved = []
    for own, product_id in zip(frame["product_name"], frame["product_id"]):
        if is_present(own):
            resolved.append(own)
        elif is_present(product_id):
            resolved.append(names.get(product_id))
        else:
            resolved.append(None)
    return pd.Series(resolved, index=frame.index, dtype=object)


def filter_transactions(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    filters: Optional[ReportFilters] = None,
    today: Optional[date] = None,
) -> pd.DataFrame:
    """
    Apply report filters and sort by date, most recent first.

    The returned frame has the normalized transaction columns (see
    `io.transactions_frame`) with ``product_name`` resolved and an extra
    ``is_overdue`` boolean column.
    """
    filters = filters or ReportFilters()

    df = transactions_frame(transactions)
    df["product_name"] = resolve_product_names(df, products)
    df["is_overdue"] = pd.Series(
        [is_overdue(d, s, today) for d, s in zip(df["due_date"], df["status"])],
        index=df.index,
        dtype=bool,
    )

    if filters.transaction_type != "all":
        df = df[df["type"] == filters.transaction_type]
    if filters.category != "all":
        df = df[df["category"] == filters.category]

    df = filter_by_period(df, Period(start=filters.start, end=filters.end))

    if filters.search:
        term = filters.search.lower()
        matches = [
            term in str(desc).lower() or (is_present(name) and term in str(name).lower())
            for desc, name in zip(df["description"], df["product_name"])
        ]
        df = df[pd.Series(matches, index=df.index, dtype=bool)]

    df = df.sort_values("date", ascending=False, kind="stable")
    return df.reset_index(drop=True)


def paginate(
    frame: pd.DataFrame,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """
    Return page `page` (1-based) of `frame`.

    Pages past the end are empty; `total_pages` is 0 for an empty frame.

    Raises
    ------
    ValueError
        If `page` < 1 or `page_size` < 1.
    """
    if page < 1:
        raise ValueError("Page numbers start at 1.")
    if page_size < 1:
        raise ValueError("Page size must be a positive integer.")

    total_items = len(frame)
    start = (page - 1) * page_size
    items = frame.iloc[start : start + page_size].reset_index(drop=True)

    return Page(
        items=items,
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=math.ceil(total_items / page_size),
    )


def build_report(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    filters: Optional[ReportFilters] = None,
    *,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    month_labels: str = "en",
    today: Optional[date] = None,
) -> ReportView:
    """Filter, paginate and chart transactions in one call."""
    filtered = filter_transactions(transactions, products, filters, today)
    return ReportView(
        page=paginate(filtered, page, page_size),
        chart=monthly_totals(filtered, month_labels),
        total_income=float(filtered.loc[filtered["type"] == "income", "amount"].sum()),
        total_expenses=float(
            filtered.loc[filtered["type"] == "expense", "amount"].sum()
        ),
    )


class ReportBrowser:
    """
    Interactive report state: current filters and current page.

    Any call to `update_filters()` sends the browser back to page 1, so a
    narrower filter never leaves the user on a page that no longer exists.
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        filters: Optional[ReportFilters] = None,
        month_labels: str = "en",
    ) -> None:
        if page_size < 1:
            raise ValueError("Page size must be a positive integer.")
        self.page_size = page_size
        self.month_labels = month_labels
        self._filters = filters or ReportFilters()
        self._page = 1

    @property
    def filters(self) -> ReportFilters:
        return self._filters

    @property
    def page(self) -> int:
        return self._page

    def update_filters(self, **changes) -> ReportFilters:
        """Change one or more filter fields and reset to the first page."""
        self._filters = replace(self._filters, **changes)
        self._page = 1
        return self._filters

    def go_to(self, page: int) -> None:
        if page < 1:
            raise ValueError("Page numbers start at 1.")
        self._page = page

    def view(
        self,
        transactions: Iterable[Transaction],
        products: Iterable[Product],
        today: Optional[date] = None,
    ) -> ReportView:
        return build_report(
            transactions,
            products,
            self._filters,
            page=self._page,
            page_size=self.page_size,
            month_labels=self.month_labels,
            today=today,
        )
