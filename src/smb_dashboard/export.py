# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Export helpers for SMB Dashboard.

These helpers turn derived views into fully materialized tables of
strings, ready to be handed to a document generator (PDF, spreadsheet) or
written to CSV:

- `transaction_rows()` for reports and receivables/payables lists,
- `inventory_rows()` for the inventory valuation.

Product names that a transaction does not carry are resolved from the
product list passed by the caller. Numbers are written without currency
formatting; dates as ISO strings, or "N/A" when missing.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any, Union

import pandas as pd

from .dates import is_overdue
from .io import is_present
from .models import Product

NOT_AVAILABLE = "N/A"

TRANSACTION_EXPORT_COLUMNS: list[tuple[str, str]] = [
    ("Date", "date"),
    ("Type", "type"),
    ("Description", "description"),
    ("Category", "category"),
    ("Product", "product_name"),
    ("Quantity", "quantity"),
    ("Status", "status"),
    ("Due date", "due_date"),
    ("Payment date", "payment_date"),
    ("Amount", "amount"),
]

INVENTORY_EXPORT_COLUMNS: list[tuple[str, str]] = [
    ("Name", "name"),
    ("SKU", "sku"),
    ("Stock", "stock"),
    ("Purchase price", "purchase_price"),
    ("Selling price", "selling_price"),
    ("Value at purchase", "value_at_purchase"),
    ("Value at sale", "value_at_sale"),
]

_STATUS_LABELS = {"pending": "Pending", "paid": "Paid", "overdue": "Overdue"}
_TYPE_LABELS = {"income": "Income", "expense": "Expense"}
_DATE_FIELDS = {"date", "due_date", "payment_date"}


def _format_date(value: Any) -> str:
    if not is_present(value):
        return NOT_AVAILABLE
    if isinstance(value, pd.Timestamp):
        return value.date().isoformat()
    return value.isoformat()


def _format_value(value: Any) -> str:
    if not is_present(value) and value != 0:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def status_label(row: pd.Series) -> str:
    """Status as displayed: overdue wins over the stored status."""
    if "is_overdue" in row.index:
        overdue = bool(row["is_overdue"])
    else:
        overdue = is_overdue(row.get("due_date"), row.get("status"))
    if overdue:
        return _STATUS_LABELS["overdue"]
    status = row.get("status")
    if not is_present(status):
        return ""
    return _STATUS_LABELS.get(status, str(status))


def transaction_rows(frame: pd.DataFrame, products: Iterable[Product]) -> pd.DataFrame:
    """
    Materialize a transactions frame (report or open items) for export.

    Parameters
    ----------
    frame:
        A frame with the normalized transaction columns, optionally with
        ``is_overdue``.
    products:
        Product list used to resolve missing product names.

    Returns
    -------
    pandas.DataFrame
        One string column per entry of TRANSACTION_EXPORT_COLUMNS, using
        the human-readable headers.
    """
    names = {p.id: p.name for p in products}
    rows = []

    for _, row in frame.iterrows():
        out: dict[str, str] = {}
        for header, field in TRANSACTION_EXPORT_COLUMNS:
            value = row.get(field)
            if field in _DATE_FIELDS:
                out[header] = _format_date(value)
            elif field == "type":
                out[header] = _TYPE_LABELS.get(value, str(value))
            elif field == "status":
                out[header] = status_label(row)
            elif field == "product_name":
                if is_present(value):
                    out[header] = str(value)
                elif is_present(row.get("product_id")):
                    out[header] = names.get(row["product_id"], NOT_AVAILABLE)
                else:
                    out[header] = NOT_AVAILABLE
            else:
                out[header] = _format_value(value)
        rows.append(out)

    return pd.DataFrame(rows, columns=[h for h, _ in TRANSACTION_EXPORT_COLUMNS])


def inventory_rows(valuation: pd.DataFrame) -> pd.DataFrame:
    """Materialize an inventory valuation frame for export."""
    rows = [
        {header: _format_value(row[field]) for header, field in INVENTORY_EXPORT_COLUMNS}
        for _, row in valuation.iterrows()
    ]
    return pd.DataFrame(rows, columns=[h for h, _ in INVENTORY_EXPORT_COLUMNS])


def write_csv(rows: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write exported rows to a CSV file, creating parent directories."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    rows.to_csv(out_path, index=False)
    return out_path
