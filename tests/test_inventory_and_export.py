from datetime import date

import pandas as pd
import pytest

from smb_dashboard.export import (
    NOT_AVAILABLE,
    inventory_rows,
    status_label,
    transaction_rows,
    write_csv,
)
from smb_dashboard.inventory import inventory_totals, inventory_valuation
from smb_dashboard.models import Product, Transaction
from smb_dashboard.receivables import receivables

PRODUCTS = [
    Product(id="p1", name="Chair", sku="CH", purchase_price=10.0, selling_price=25.0, stock=4),
    Product(id="p2", name="Desk", sku="DE", purchase_price=50.0, selling_price=90.0, stock=0),
]


def test_inventory_valuation_and_totals() -> None:
    valuation = inventory_valuation(PRODUCTS).set_index("id")

    assert valuation.loc["p1", "value_at_purchase"] == pytest.approx(40.0)
    assert valuation.loc["p1", "value_at_sale"] == pytest.approx(100.0)
    assert valuation.loc["p2", "value_at_sale"] == 0.0

    totals = inventory_totals(PRODUCTS)
    assert totals.product_count == 2
    assert totals.stock_units == 4
    assert totals.value_at_purchase == pytest.approx(40.0)
    assert totals.value_at_sale == pytest.approx(100.0)


def test_transaction_rows_resolve_names_from_given_products() -> None:
    txs = [
        Transaction(
            id="t1", type="income", date=date(2024, 5, 2), description="Sale",
            amount=50.0, category="Venta de Producto", product_id="p1", quantity=2,
            due_date=date(2024, 5, 10), status="pending",
        ),
        Transaction(
            id="t2", type="income", date=date(2024, 5, 3), description="Consulting",
            amount=120.0, category="Servicios", due_date=date(2024, 7, 1),
            status="pending",
        ),
    ]
    view = receivables(txs, today=date(2024, 6, 15))

    rows = transaction_rows(view.items, PRODUCTS)

    first = rows.iloc[0]
    assert first["Product"] == "Chair"
    assert first["Status"] == "Overdue"
    assert first["Due date"] == "2024-05-10"
    assert first["Payment date"] == NOT_AVAILABLE
    assert first["Amount"] == "50.00"
    assert first["Type"] == "Income"

    second = rows.iloc[1]
    assert second["Product"] == NOT_AVAILABLE
    assert second["Status"] == "Pending"


def test_status_label_without_precomputed_flag() -> None:
    row = pd.Series({"due_date": None, "status": "paid"})
    assert status_label(row) == "Paid"


def test_inventory_rows_and_csv(tmp_path) -> None:
    rows = inventory_rows(inventory_valuation(PRODUCTS))
    assert list(rows["Name"]) == ["Chair", "Desk"]
    assert rows.loc[0, "Value at sale"] == "100.00"

    out = write_csv(rows, tmp_path / "exports" / "inventory.csv")

    assert out.exists()
    loaded = pd.read_csv(out)
    assert list(loaded.columns)[:3] == ["Name", "SKU", "Stock"]
    assert len(loaded) == 2


@pytest.mark.parametrize("missing", [None, float("nan"), pd.NaT])
def test_status_label_with_missing_due_date(missing) -> None:
    """A pending item without a usable due date is simply pending."""
    row = pd.Series({"due_date": missing, "status": "pending"}, dtype=object)
    assert status_label(row) == "Pending"
