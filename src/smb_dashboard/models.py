# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain model for SMB Dashboard.

This module defines the typed dataclasses exchanged with the backend of
record and used by the store and the derived views:

- `Product`           (inventory item, owned by the backend),
- `Transaction`       (income or expense, optionally linked to a product),
- `ProductDraft`      (payload for creating a product),
- `TransactionDraft`  (payload for creating a transaction).

Wire format
-----------
The backend speaks JSON with camelCase keys (``purchasePrice``,
``productId``, ``dueDate``...). Records are read with `from_api()`; drafts
are written with `to_api()`. Both map between that representation and the
snake_case attributes used in Python. Dates are ISO strings on the wire
and `datetime.date` objects in Python.

Missing optional fields are mapped to None. Records missing a mandatory
field raise ValueError.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Literal, Optional

from .dates import parse_iso_date

TransactionType = Literal["income", "expense"]
TransactionStatus = Literal["pending", "paid", "overdue"]
ViewName = Literal[
    "dashboard",
    "dataEntry",
    "reports",
    "accountsReceivable",
    "accountsPayable",
    "inventoryList",
]

TRANSACTION_TYPES: tuple[str, ...] = ("income", "expense")
TRANSACTION_STATUSES: tuple[str, ...] = ("pending", "paid", "overdue")
VIEW_NAMES: tuple[str, ...] = (
    "dashboard",
    "dataEntry",
    "reports",
    "accountsReceivable",
    "accountsPayable",
    "inventoryList",
)

# Category vocabulary used by the backend and the data-entry forms.
INCOME_CATEGORIES: tuple[str, ...] = (
    "Venta de Producto",
    "Servicios",
    "Factura Emitida",
    "Otros Ingresos",
)
EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Compra de Inventario",
    "Alquiler",
    "Salarios",
    "Marketing",
    "Suministros",
    "Factura de Proveedor",
    "Otros Gastos",
)
INVENTORY_PURCHASE_CATEGORY = "Compra de Inventario"


def _require(data: Mapping[str, Any], key: str, record: str) -> Any:
    """Return data[key] or raise a ValueError naming the missing field."""
    if key not in data or data[key] is None:
        raise ValueError(f"{record} record is missing field {key!r}.")
    return data[key]


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _without_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


# ---------------------------------------------------------------------------
# Backend records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Product:
    """
    Inventory item as returned by the backend.

    The store only holds a cached copy: stock levels may change on the
    backend as a side effect of product-linked transactions, which is why
    the product list is re-fetched after such transactions.
    """

    id: str
    name: str
    sku: str
    purchase_price: float
    selling_price: float
    stock: int
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Product":
        """Build a Product from a backend JSON object."""
        try:
            return cls(
                id=str(_require(data, "id", "Product")),
                name=str(data.get("name") or ""),
                sku=str(data.get("sku") or ""),
                purchase_price=float(data.get("purchasePrice") or 0.0),
                selling_price=float(data.get("sellingPrice") or 0.0),
                stock=int(data.get("stock") or 0),
                image_url=_optional_str(data.get("imageUrl")),
                created_at=_optional_str(data.get("createdAt")),
                updated_at=_optional_str(data.get("updatedAt")),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid product record: {exc}") from exc


@dataclass(frozen=True)
class Transaction:
    """
    Income or expense recorded on the backend.

    Attributes
    ----------
    amount:
        Always positive; the direction is given by `type`.
    product_id, quantity:
        Optional link to a product (sales and inventory purchases).
    product_name:
        Display cache that some backends join in; may be missing even when
        `product_id` is set.
    due_date, status, payment_date:
        Used for receivables (income) and payables (expense). "overdue" is
        never trusted from storage: it is recomputed on every read with
        `dates.is_overdue`.
    """

    id: str
    type: TransactionType
    date: date
    description: str
    amount: float
    category: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    due_date: Optional[date] = None
    status: Optional[TransactionStatus] = None
    payment_date: Optional[date] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def references_product(self) -> bool:
        """True when the transaction moves stock of a given product."""
        return bool(self.product_id) and bool(self.quantity)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Transaction":
        """Build a Transaction from a backend JSON object."""
        try:
            tx_type = str(_require(data, "type", "Transaction"))
            if tx_type not in TRANSACTION_TYPES:
                raise ValueError(f"unknown transaction type {tx_type!r}")

            tx_date = parse_iso_date(_require(data, "date", "Transaction"))
            if tx_date is None:
                raise ValueError("transaction date cannot be empty")

            status = _optional_str(data.get("status"))
            if status is not None and status not in TRANSACTION_STATUSES:
                raise ValueError(f"unknown transaction status {status!r}")

            return cls(
                id=str(_require(data, "id", "Transaction")),
                type=tx_type,
                date=tx_date,
                description=str(data.get("description") or ""),
                amount=float(_require(data, "amount", "Transaction")),
                category=str(data.get("category") or ""),
                product_id=_optional_str(data.get("productId")),
                product_name=_optional_str(data.get("productName")),
                quantity=_optional_int(data.get("quantity")),
                due_date=parse_iso_date(data.get("dueDate")),
                status=status,
                payment_date=parse_iso_date(data.get("paymentDate")),
                created_at=_optional_str(data.get("createdAt")),
                updated_at=_optional_str(data.get("updatedAt")),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid transaction record: {exc}") from exc


# ---------------------------------------------------------------------------
# Creation payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductDraft:
    """Data required to create a new product (the backend assigns the id)."""

    name: str
    sku: str
    purchase_price: float
    selling_price: float
    stock: int = 0
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Product name cannot be empty.")
        if self.purchase_price < 0 or self.selling_price < 0:
            raise ValueError("Product prices cannot be negative.")
        if self.stock < 0:
            raise ValueError("Product stock cannot be negative.")

    def to_api(self) -> dict[str, Any]:
        return _without_none(
            {
                "name": self.name,
                "sku": self.sku,
                "purchasePrice": self.purchase_price,
                "sellingPrice": self.selling_price,
                "stock": self.stock,
                "imageUrl": self.image_url,
            }
        )


@dataclass(frozen=True)
class TransactionDraft:
    """
    Data required to create a new transaction.

    Status, payment date and product name are owned by the backend and are
    therefore not part of the payload.
    """

    type: TransactionType
    date: date
    description: str
    amount: float
    category: str
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    due_date: Optional[date] = None

    def __post_init__(self) -> None:
        if self.type not in TRANSACTION_TYPES:
            raise ValueError(
                f"Invalid transaction type: {self.type!r}. "
                f"Expected one of {', '.join(TRANSACTION_TYPES)}."
            )
        if self.amount <= 0:
            raise ValueError("Transaction amount must be positive.")
        if self.quantity is not None and self.quantity < 0:
            raise ValueError("Transaction quantity cannot be negative.")

    @property
    def references_product(self) -> bool:
        """True when the backend may adjust stock for this transaction."""
        return bool(self.product_id) and bool(self.quantity)

    def to_api(self) -> dict[str, Any]:
        return _without_none(
            {
                "type": self.type,
                "date": _iso(self.date),
                "description": self.description,
                "amount": self.amount,
                "category": self.category,
                "productId": self.product_id,
                "quantity": self.quantity,
                "dueDate": _iso(self.due_date),
            }
        )
