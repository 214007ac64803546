# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Tabular normalization for SMB Dashboard.

The store holds products and transactions as dataclasses. The derived
views work on pandas DataFrames, and this module is the single place where
one becomes the other, so every view sees the same columns and dtypes.

Output schemas
--------------
`transactions_frame()` returns one row per transaction with the columns:

    - ``id``            (str)
    - ``type``          (str, "income" | "expense")
    - ``date``          (datetime64[ns])
    - ``description``   (str)
    - ``amount``        (float)
    - ``category``      (str)
    - ``product_id``    (str or None)
    - ``product_name``  (str or None)
    - ``quantity``      (int or None)
    - ``due_date``      (datetime.date or None)
    - ``status``        (str or None)
    - ``payment_date``  (datetime.date or None)

`products_frame()` returns one row per product with the columns:

    - ``id``, ``name``, ``sku``       (str)
    - ``purchase_price``              (float)
    - ``selling_price``               (float)
    - ``stock``                       (int)
    - ``image_url``                   (str or None)

Optional columns are kept as Python objects (None stays None) so that a
missing value is never mistaken for zero. Empty inputs produce empty
frames with the same columns and dtypes.
"""

from collections.abc import Iterable
from typing import Any

import pandas as pd

from .models import Product, Transaction

TRANSACTION_COLUMNS: list[str] = [
    "id",
    "type",
    "date",
    "description",
    "amount",
    "category",
    "product_id",
    "product_name",
    "quantity",
    "due_date",
    "status",
    "payment_date",
]

PRODUCT_COLUMNS: list[str] = [
    "id",
    "name",
    "sku",
    "purchase_price",
    "selling_price",
    "stock",
    "image_url",
]


def is_present(value: Any) -> bool:
    """
    Return True for a usable optional value.

    None, NaN, empty strings and zero quantities all count as "not
    applicable" for the aggregates that need the value.
    """
    if value is None:
        return False
    try:
        if pd.isna(value):
            return False
    except (TypeError, ValueError):
        pass
    return bool(value)


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Return the normalized transactions DataFrame (see module docstring)."""
    records = [
        {
            "id": t.id,
            "type": t.type,
            "date": t.date,
            "description": t.description,
            "amount": t.amount,
            "category": t.category,
            "product_id": t.product_id,
            "product_name": t.product_name,
            "quantity": t.quantity,
            "due_date": t.due_date,
            "status": t.status,
            "payment_date": t.payment_date,
        }
        for t in transactions
    ]

    df = pd.DataFrame(records, columns=TRANSACTION_COLUMNS, dtype=object)
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    return df


def products_frame(products: Iterable[Product]) -> pd.DataFrame:
    """Return the normalized products DataFrame (see module docstring)."""
    records = [
        {
            "id": p.id,
            "name": p.name,
            "sku": p.sku,
            "purchase_price": p.purchase_price,
            "selling_price": p.selling_price,
            "stock": p.stock,
            "image_url": p.image_url,
        }
        for p in products
    ]

    df = pd.DataFrame(records, columns=PRODUCT_COLUMNS, dtype=object)
    df["purchase_price"] = df["purchase_price"].astype(float)
    df["selling_price"] = df["selling_price"].astype(float)
    df["stock"] = df["stock"].astype(int)
    return df
