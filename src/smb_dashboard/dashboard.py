# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Dashboard aggregates for SMB Dashboard.

The dashboard combines:

- headline totals: total income, total expenses, net profit;
- per-product performance:
    * revenue and units sold, from income transactions carrying both a
      product id and a quantity,
    * units purchased and purchase cost, from expense transactions in the
      inventory-purchase category carrying both a product id and a
      quantity;
- rankings (top 3 by default):
    * by revenue,
    * by units sold,
    * by units purchased (products with at least one purchase only),
    * slow-moving products: lowest units sold among products still in
      stock;
- the monthly income vs expense chart over all transactions.

All functions are pure: calling them twice on the same inputs yields the
same outputs, and the inputs are never modified.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from .io import is_present, products_frame, transactions_frame
from .models import INVENTORY_PURCHASE_CATEGORY, Product, Transaction
from .periods import monthly_totals

TOP_N = 3

PERFORMANCE_COLUMNS: list[str] = [
    "id",
    "name",
    "sku",
    "stock",
    "image_url",
    "revenue",
    "units_sold",
    "units_purchased",
    "purchase_cost",
]


@dataclass(frozen=True)
class Totals:
    """Headline figures of the dashboard."""

    total_income: float
    total_expenses: float
    net_profit: float


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard screen displays."""

    totals: Totals
    top_by_revenue: pd.DataFrame
    top_by_units_sold: pd.DataFrame
    top_by_units_purchased: pd.DataFrame
    slow_moving: pd.DataFrame
    monthly: pd.DataFrame


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Return total income, total expenses and their difference."""
    tx = transactions_frame(transactions)
    income = float(tx.loc[tx["type"] == "income", "amount"].sum())
    expenses = float(tx.loc[tx["type"] == "expense", "amount"].sum())
    return Totals(
        total_income=income,
        total_expenses=expenses,
        net_profit=income - expenses,
    )


def _product_lines(tx: pd.DataFrame, mask: pd.Series) -> pd.DataFrame:
    """Rows of `mask` that carry both a product id and a quantity."""
    linked = tx["product_id"].map(is_present).astype(bool) & tx["quantity"].map(
        is_present
    ).astype(bool)
    lines = tx.loc[mask & linked, ["product_id", "quantity", "amount"]].copy()
    lines["quantity"] = lines["quantity"].astype(int)
    return lines


def product_performance(
    products: Iterable[Product],
    transactions: Iterable[Transaction],
    purchase_category: str = INVENTORY_PURCHASE_CATEGORY,
) -> pd.DataFrame:
    """
    Return one row per product with its sales and purchase figures.

    Products without any matching transaction get zeros. Transactions
    referencing unknown product ids are ignored.
    """
    perf = products_frame(products)[["id", "name", "sku", "stock", "image_url"]].copy()
    tx = transactions_frame(transactions)

    sales = _product_lines(tx, tx["type"] == "income")
    purchases = _product_lines(
        tx, (tx["type"] == "expense") & (tx["category"] == purchase_category)
    )

    sales_by_product = sales.groupby("product_id")[["quantity", "amount"]].sum()
    purchases_by_product = purchases.groupby("product_id")[["quantity", "amount"]].sum()

    perf["revenue"] = perf["id"].map(sales_by_product["amount"]).fillna(0.0).astype(float)
    perf["units_sold"] = perf["id"].map(sales_by_product["quantity"]).fillna(0).astype(int)
    perf["units_purchased"] = (
        perf["id"].map(purchases_by_product["quantity"]).fillna(0).astype(int)
    )
    perf["purchase_cost"] = (
        perf["id"].map(purchases_by_product["amount"]).fillna(0.0).astype(float)
    )

    return perf[PERFORMANCE_COLUMNS]


def top_products(performance: pd.DataFrame, column: str, n: int = TOP_N) -> pd.DataFrame:
    """
    Return the `n` products with the highest value in `column`.

    Ties keep the original product order.
    """
    ranked = performance.sort_values(column, ascending=False, kind="stable")
    return ranked.head(n).reset_index(drop=True)


def top_purchased_products(performance: pd.DataFrame, n: int = TOP_N) -> pd.DataFrame:
    """Top `n` products by units purchased, ignoring products never purchased."""
    purchased = performance[performance["units_purchased"] > 0]
    return top_products(purchased, "units_purchased", n)


def slow_moving_products(performance: pd.DataFrame, n: int = TOP_N) -> pd.DataFrame:
    """Return the `n` in-stock products with the fewest units sold."""
    in_stock = performance[performance["stock"] > 0]
    ranked = in_stock.sort_values("units_sold", ascending=True, kind="stable")
    return ranked.head(n).reset_index(drop=True)


def build_dashboard(
    products: Iterable[Product],
    transactions: Iterable[Transaction],
    *,
    purchase_category: str = INVENTORY_PURCHASE_CATEGORY,
    month_labels: str = "en",
    top_n: int = TOP_N,
) -> DashboardView:
    """Compute every dashboard figure from a store snapshot."""
    products = list(products)
    transactions = list(transactions)

    performance = product_performance(products, transactions, purchase_category)

    return DashboardView(
        totals=compute_totals(transactions),
        top_by_revenue=top_products(performance, "revenue", top_n),
        top_by_units_sold=top_products(performance, "units_sold", top_n),
        top_by_units_purchased=top_purchased_products(performance, top_n),
        slow_moving=slow_moving_products(performance, top_n),
        monthly=monthly_totals(transactions_frame(transactions), month_labels),
    )
