# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for SMB Dashboard.

This module buckets transactions by calendar month for the income vs
expense charts, and filters transaction frames on inclusive date ranges.

Each monthly bucket carries its ``year`` and ``month`` as integers next to
its human-readable ``label``. Ordering is always done on (year, month);
labels are for display only and are never parsed back for sorting.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

MONTH_ABBREVIATIONS: dict[str, tuple[str, ...]] = {
    "en": (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ),
    "es": (
        "ene", "feb", "mar", "abr", "may", "jun",
        "jul", "ago", "sep", "oct", "nov", "dic",
    ),
}

MONTHLY_COLUMNS: list[str] = ["year", "month", "label", "income", "expense"]


@dataclass
class Period:
    """Represents an inclusive date range; open bounds are None."""

    start: Optional[date] = None
    end: Optional[date] = None


def month_label(year: int, month: int, labels: str = "en") -> str:
    """Return the display label of a month, e.g. "Mar 2024" or "mar 2024"."""
    try:
        names = MONTH_ABBREVIATIONS[labels]
    except KeyError as exc:
        raise ValueError(
            f"Unknown month label set: {labels!r}. "
            f"Expected one of {', '.join(MONTH_ABBREVIATIONS)}."
        ) from exc
    return f"{names[month - 1]} {year}"


def month_index(name: str) -> Optional[int]:
    """
    Return the 1-based month number of an abbreviation, or None.

    Accepts English and Spanish abbreviations, case-insensitively, with or
    without a trailing dot ("Ene.", "jan", "AGO").
    """
    key = name.strip().lower().rstrip(".")
    for names in MONTH_ABBREVIATIONS.values():
        for idx, candidate in enumerate(names, start=1):
            if candidate.lower() == key:
                return idx
    return None


def filter_by_period(frame: pd.DataFrame, period: Period) -> pd.DataFrame:
    """
    Keep the rows whose ``date`` falls within the period (inclusive bounds).

    The ``date`` column is expected to be datetime64[ns], as produced by
    `io.transactions_frame`.
    """
    mask = pd.Series(True, index=frame.index)
    if period.start is not None:
        mask &= frame["date"] >= pd.Timestamp(period.start)
    if period.end is not None:
        mask &= frame["date"] <= pd.Timestamp(period.end)
    return frame.loc[mask].copy()


def monthly_totals(frame: pd.DataFrame, labels: str = "en") -> pd.DataFrame:
    """
    Aggregate income and expense amounts per calendar month.

    Parameters
    ----------
    frame:
        Transactions DataFrame with at least ``date`` (datetime64),
        ``type`` and ``amount`` columns.
    labels:
        Month label set ("en" or "es").

    Returns
    -------
    pandas.DataFrame
        One row per month present in the input, ordered chronologically,
        with columns: year, month, label, income, expense.
    """
    if frame.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    d = frame[["date", "type", "amount"]].copy()
    d["year"] = d["date"].dt.year.astype(int)
    d["month"] = d["date"].dt.month.astype(int)
    d["income"] = d["amount"].where(d["type"] == "income", 0.0)
    d["expense"] = d["amount"].where(d["type"] != "income", 0.0)

    out = d.groupby(["year", "month"], as_index=False)[["income", "expense"]].sum()
    out = out.sort_values(["year", "month"], kind="stable").reset_index(drop=True)
    out["label"] = [
        month_label(int(y), int(m), labels) for y, m in zip(out["year"], out["month"])
    ]
    return out[MONTHLY_COLUMNS]
