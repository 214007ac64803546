from datetime import date

import pytest

from smb_dashboard.models import Product, Transaction
from smb_dashboard.state import (
    Action,
    AppState,
    app_reducer,
    set_error,
    set_loading,
    set_products,
    set_transactions,
    set_view,
)


def make_product(pid: str = "p1") -> Product:
    return Product(
        id=pid, name="Chair", sku="CH", purchase_price=10.0, selling_price=20.0, stock=3
    )


def make_transaction(tid: str = "t1") -> Transaction:
    return Transaction(
        id=tid,
        type="income",
        date=date(2024, 1, 5),
        description="Sale",
        amount=20.0,
        category="Venta de Producto",
    )


def test_initial_state_is_loading_and_empty() -> None:
    state = AppState()
    assert state.is_loading is True
    assert state.error is None
    assert state.products == ()
    assert state.transactions == ()
    assert state.active_view == "dashboard"


def test_set_loading_true_clears_error() -> None:
    state = AppState(is_loading=False, error="boom")

    new = app_reducer(state, set_loading(True))

    assert new.is_loading is True
    assert new.error is None
    # The reducer never mutates its input.
    assert state.error == "boom"


def test_set_loading_false_keeps_error() -> None:
    """Ending a loading cycle must not hide the error it produced."""
    state = AppState(is_loading=True, error="boom")

    new = app_reducer(state, set_loading(False))

    assert new.is_loading is False
    assert new.error == "boom"


def test_set_error_stops_loading() -> None:
    new = app_reducer(AppState(is_loading=True), set_error("HTTP error! status: 500"))
    assert new.is_loading is False
    assert new.error == "HTTP error! status: 500"


def test_set_collections_replace_wholesale_and_stop_loading() -> None:
    state = AppState(products=(make_product("old"),))

    state = app_reducer(state, set_products([make_product("a"), make_product("b")]))
    assert [p.id for p in state.products] == ["a", "b"]
    assert state.is_loading is False

    state = app_reducer(AppState(), set_transactions([make_transaction()]))
    assert [t.id for t in state.transactions] == ["t1"]
    assert state.is_loading is False


def test_set_view_validates_name() -> None:
    state = app_reducer(AppState(), set_view("reports"))
    assert state.active_view == "reports"

    with pytest.raises(ValueError, match="Unknown view"):
        app_reducer(state, set_view("settings"))


def test_unknown_action_returns_same_state() -> None:
    state = AppState()
    assert app_reducer(state, Action("RESET")) is state
