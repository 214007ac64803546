# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Application state and reducer.

`AppState` is the immutable snapshot held by the store. Every change goes
through `app_reducer(state, action)`, a pure function returning a new
snapshot. The action vocabulary is deliberately small:

- SET_LOADING(bool)      -> toggles `is_loading`; starting a load clears
                            the previous error.
- SET_ERROR(message)     -> records an error and stops loading.
- SET_PRODUCTS(list)     -> replaces the product list, stops loading.
- SET_TRANSACTIONS(list) -> replaces the transaction list, stops loading.
- SET_VIEW(name)         -> selects the active dashboard section.

Collections are only ever replaced wholesale with what the backend
returned; there are no incremental (optimistic) updates.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from .models import VIEW_NAMES, Product, Transaction, ViewName

SET_LOADING = "SET_LOADING"
SET_ERROR = "SET_ERROR"
SET_PRODUCTS = "SET_PRODUCTS"
SET_TRANSACTIONS = "SET_TRANSACTIONS"
SET_VIEW = "SET_VIEW"


@dataclass(frozen=True)
class AppState:
    """
    Client-side snapshot of the backend of record.

    Invariants
    ----------
    - `is_loading` is True only while a fetch or mutation is outstanding.
    - `error` is set only after a failed network operation and is cleared
      whenever a new loading cycle begins.
    """

    products: tuple[Product, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    active_view: ViewName = "dashboard"
    is_loading: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class Action:
    """A state transition request: an action type and its payload."""

    type: str
    payload: Any = None


def set_loading(flag: bool) -> Action:
    return Action(SET_LOADING, bool(flag))


def set_error(message: str) -> Action:
    return Action(SET_ERROR, message)


def set_products(products) -> Action:
    return Action(SET_PRODUCTS, tuple(products))


def set_transactions(transactions) -> Action:
    return Action(SET_TRANSACTIONS, tuple(transactions))


def set_view(name: str) -> Action:
    return Action(SET_VIEW, name)


def app_reducer(state: AppState, action: Action) -> AppState:
    """
    Return the state resulting from applying `action` to `state`.

    Unknown action types return `state` itself (same object), which lets
    callers detect no-op dispatches by identity.

    Raises
    ------
    ValueError
        If SET_VIEW names a view that does not exist.
    """
    if action.type == SET_LOADING:
        if action.payload:
            return replace(state, is_loading=True, error=None)
        return replace(state, is_loading=False)

    if action.type == SET_ERROR:
        return replace(state, is_loading=False, error=action.payload)

    if action.type == SET_PRODUCTS:
        return replace(state, products=tuple(action.payload), is_loading=False)

    if action.type == SET_TRANSACTIONS:
        return replace(
            state, transactions=tuple(action.payload), is_loading=False
        )

    if action.type == SET_VIEW:
        if action.payload not in VIEW_NAMES:
            raise ValueError(
                f"Unknown view: {action.payload!r}. "
                f"Expected one of {', '.join(VIEW_NAMES)}."
            )
        return replace(state, active_view=action.payload)

    return state
