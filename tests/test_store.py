import asyncio
from collections import Counter
from datetime import date
from typing import Optional

from smb_dashboard.api import ApiError, ErrorKind
from smb_dashboard.models import Product, ProductDraft, Transaction, TransactionDraft
from smb_dashboard.store import AppStore


def make_product(pid: str, stock: int = 5) -> Product:
    return Product(
        id=pid, name=f"Product {pid}", sku=pid.upper(), purchase_price=10.0,
        selling_price=25.0, stock=stock,
    )


def make_transaction(tid: str, status: Optional[str] = "pending") -> Transaction:
    return Transaction(
        id=tid,
        type="income",
        date=date(2024, 6, 1),
        description=f"Invoice {tid}",
        amount=100.0,
        category="Factura Emitida",
        due_date=date(2024, 6, 30),
        status=status,
    )


class FakeClient:
    """In-memory backend recording how many times each endpoint is called."""

    def __init__(self) -> None:
        self.products = [make_product("p1")]
        self.transactions = [make_transaction("t1")]
        self.calls: Counter = Counter()
        self.fail: dict[str, ApiError] = {}

    def _maybe_fail(self, name: str) -> None:
        self.calls[name] += 1
        if name in self.fail:
            raise self.fail[name]

    def list_products(self):
        self._maybe_fail("list_products")
        return list(self.products)

    def list_transactions(self):
        self._maybe_fail("list_transactions")
        return list(self.transactions)

    def create_product(self, draft: ProductDraft) -> Product:
        self._maybe_fail("create_product")
        created = make_product(f"p{len(self.products) + 1}", stock=draft.stock)
        self.products.append(created)
        return created

    def create_transaction(self, draft: TransactionDraft) -> Transaction:
        self._maybe_fail("create_transaction")
        created = make_transaction(f"t{len(self.transactions) + 1}")
        self.transactions.append(created)
        if draft.references_product:
            p = self.products[0]
            self.products[0] = make_product(p.id, stock=p.stock - draft.quantity)
        return created

    def mark_transaction_as_paid(self, transaction_id, payment_date) -> None:
        self._maybe_fail("mark_transaction_as_paid")
        self.transactions = [
            make_transaction(t.id, "paid") if t.id == transaction_id else t
            for t in self.transactions
        ]


def server_error() -> ApiError:
    return ApiError("HTTP error! status: 500", ErrorKind.HTTP_UNPARSEABLE, 500)


def loaded_store(client: FakeClient, **kwargs) -> AppStore:
    store = AppStore(client, **kwargs)
    asyncio.run(store.load_initial_data())
    return store


def sale_draft(**changes) -> TransactionDraft:
    fields = dict(
        type="income",
        date=date(2024, 6, 10),
        description="Sale",
        amount=50.0,
        category="Venta de Producto",
    )
    fields.update(changes)
    return TransactionDraft(**fields)


def test_load_initial_data_fetches_products_then_transactions() -> None:
    client = FakeClient()
    store = loaded_store(client)

    assert [p.id for p in store.state.products] == ["p1"]
    assert [t.id for t in store.state.transactions] == ["t1"]
    assert store.state.is_loading is False
    assert store.state.error is None
    assert client.calls == Counter(list_products=1, list_transactions=1)


def test_fetch_failure_sets_error_and_keeps_lists() -> None:
    client = FakeClient()
    client.fail["list_products"] = server_error()
    store = AppStore(client)

    result = asyncio.run(store.fetch_products())

    assert not result
    assert result.error.status == 500
    assert store.state.error == "HTTP error! status: 500"
    assert store.state.is_loading is False
    assert store.state.products == ()


def test_failed_add_product_leaves_products_unchanged() -> None:
    """A 500 on create sets the error, stops loading and touches nothing else."""
    client = FakeClient()
    handled = []
    store = loaded_store(client, error_handler=handled.append)
    before = store.state.products

    client.fail["create_product"] = server_error()
    result = asyncio.run(
        store.add_product(
            ProductDraft(name="Desk", sku="DE", purchase_price=50, selling_price=90)
        )
    )

    assert not result
    assert result.value is None
    assert store.state.products == before
    assert store.state.error == "HTTP error! status: 500"
    assert store.state.is_loading is False
    assert [e.message for e in handled] == ["HTTP error! status: 500"]
    # No re-fetch after a failed mutation.
    assert client.calls["list_products"] == 1


def test_add_product_refetches_products_only() -> None:
    client = FakeClient()
    store = loaded_store(client)

    result = asyncio.run(
        store.add_product(
            ProductDraft(name="Desk", sku="DE", purchase_price=50, selling_price=90, stock=2)
        )
    )

    assert result.ok
    assert result.value.id == "p2"
    assert [p.id for p in store.state.products] == ["p1", "p2"]
    assert client.calls["list_products"] == 2
    assert client.calls["list_transactions"] == 1
    assert store.state.is_loading is False


def test_product_linked_transaction_refetches_both_lists() -> None:
    client = FakeClient()
    store = loaded_store(client)

    result = asyncio.run(store.add_transaction(sale_draft(product_id="p1", quantity=2)))

    assert result.ok
    assert client.calls["list_transactions"] == 2
    assert client.calls["list_products"] == 2
    # Stock adjusted on the backend is visible after the re-fetch.
    assert store.state.products[0].stock == 3


def test_plain_transaction_refetches_transactions_only() -> None:
    client = FakeClient()
    store = loaded_store(client)

    asyncio.run(store.add_transaction(sale_draft()))

    assert client.calls["list_transactions"] == 2
    assert client.calls["list_products"] == 1
    assert len(store.state.transactions) == 2


def test_mark_transaction_as_paid() -> None:
    client = FakeClient()
    store = loaded_store(client)

    result = asyncio.run(store.mark_transaction_as_paid("t1", date(2024, 6, 20)))

    assert result.value is True
    assert store.state.transactions[0].status == "paid"
    assert client.calls["list_transactions"] == 2


def test_mark_transaction_as_paid_failure_returns_false() -> None:
    client = FakeClient()
    store = loaded_store(client)
    client.fail["mark_transaction_as_paid"] = ApiError(
        "Transaction not found", ErrorKind.HTTP, 404
    )

    result = asyncio.run(store.mark_transaction_as_paid("missing", "2024-06-20"))

    assert result.value is False
    assert result.error.status == 404
    assert store.state.error == "Transaction not found"
    assert store.state.transactions[0].status == "pending"


def test_next_operation_clears_previous_error() -> None:
    client = FakeClient()
    store = loaded_store(client)
    client.fail["create_product"] = server_error()
    asyncio.run(
        store.add_product(
            ProductDraft(name="Desk", sku="DE", purchase_price=50, selling_price=90)
        )
    )
    assert store.state.error is not None

    asyncio.run(store.fetch_transactions())

    assert store.state.error is None


def test_subscribe_and_unsubscribe() -> None:
    client = FakeClient()
    store = AppStore(client)
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.set_view("reports")
    assert seen[-1].active_view == "reports"

    count = len(seen)
    unsubscribe()
    store.set_view("dashboard")
    assert len(seen) == count
    assert store.state.active_view == "dashboard"


def test_bootstrap_keeps_products_failure_visible() -> None:
    """A failed product fetch is not hidden by the transactions fetch that follows."""
    client = FakeClient()
    client.fail["list_products"] = server_error()
    store = AppStore(client)

    result = asyncio.run(store.load_initial_data())

    assert not result
    assert result.error.status == 500
    assert store.state.error == "HTTP error! status: 500"
    assert store.state.products == ()
    # Transactions were still fetched.
    assert [t.id for t in store.state.transactions] == ["t1"]
    assert store.state.is_loading is False


def test_load_initial_data_success_result() -> None:
    result = asyncio.run(AppStore(FakeClient()).load_initial_data())
    assert result.ok
    assert result.value is True


def test_refetch_failure_after_successful_post_is_reported() -> None:
    """The transactions re-fetch fails, the products re-fetch succeeds afterwards."""
    client = FakeClient()
    handled = []
    store = loaded_store(client, error_handler=handled.append)
    client.fail["list_transactions"] = server_error()

    result = asyncio.run(store.add_transaction(sale_draft(product_id="p1", quantity=2)))

    assert not result
    assert result.value.id == "t2"
    assert result.error.status == 500
    assert store.state.error == "HTTP error! status: 500"
    assert store.state.is_loading is False
    assert [e.status for e in handled] == [500]
    # Products were refreshed, transactions kept their last known value.
    assert store.state.products[0].stock == 3
    assert [t.id for t in store.state.transactions] == ["t1"]
