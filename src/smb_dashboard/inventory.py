# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""Inventory valuation: per-product stock value and portfolio totals."""

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from .io import products_frame
from .models import Product

VALUATION_COLUMNS: list[str] = [
    "id",
    "name",
    "sku",
    "stock",
    "purchase_price",
    "selling_price",
    "value_at_purchase",
    "value_at_sale",
]


@dataclass(frozen=True)
class InventoryTotals:
    """Portfolio-level inventory figures."""

    product_count: int
    stock_units: int
    value_at_purchase: float
    value_at_sale: float


def inventory_valuation(products: Iterable[Product]) -> pd.DataFrame:
    """Return one row per product with its stock valued at both price bases."""
    df = products_frame(products)
    df["value_at_purchase"] = df["stock"] * df["purchase_price"]
    df["value_at_sale"] = df["stock"] * df["selling_price"]
    return df[VALUATION_COLUMNS]


def inventory_totals(products: Iterable[Product]) -> InventoryTotals:
    valuation = inventory_valuation(products)
    return InventoryTotals(
        product_count=len(valuation),
        stock_units=int(valuation["stock"].sum()),
        value_at_purchase=float(valuation["value_at_purchase"].sum()),
        value_at_sale=float(valuation["value_at_sale"].sum()),
    )
