# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Application store for SMB Dashboard.

The store is the single source of truth for products and transactions on
the client side. It owns an `AppState` snapshot, applies actions through
`state.app_reducer`, notifies subscribers after each change, and exposes
the async operations used by presentation layers (CLI, future Web UI).

Synchronisation model
---------------------
Every operation follows the same shape:

    SET_LOADING(True) -> call backend -> on success re-fetch the affected
    collections -> on failure SET_ERROR(message) -> SET_LOADING(False)

No local write is trusted: after a successful mutation the affected lists
are replaced wholesale with what the backend returns. A failed mutation
never touches the snapshot beyond `error` / `is_loading`.

Errors are returned to the caller as a `Result` and, for mutations, also
passed to the optional `error_handler`, so each presentation layer decides
how to surface them.

Concurrency
-----------
The store is meant to be driven from a single asyncio event loop. Backend
calls are blocking and run in a worker thread (`asyncio.to_thread`).
There is no lock or queue: two mutations started concurrently both set
`is_loading` and their re-fetches may interleave, so the final snapshot
reflects whichever round trip resolved last. Callers that need a
deterministic snapshot must await one mutation before starting the next.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Generic, Optional, TypeVar, Union

from .api import ApiError
from .models import Product, ProductDraft, Transaction, TransactionDraft
from .state import (
    Action,
    AppState,
    app_reducer,
    set_error,
    set_loading,
    set_products,
    set_transactions,
    set_view,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[AppState], None]
ErrorHandler = Callable[[ApiError], None]


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a store operation.

    `value` holds the operation's payload on success (created product,
    created transaction, fetched list, True for mark-as-paid). On failure
    `error` holds the `ApiError` and `value` is None (False for
    mark-as-paid). When the backend accepted a mutation but the re-fetch
    that follows it failed, `value` holds the payload and `error` the
    re-fetch failure. A Result is truthy iff there is no error.
    """

    value: Optional[T] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


def _first_error(results: list[Result]) -> Optional[ApiError]:
    return next((r.error for r in results if r.error is not None), None)


class AppStore:
    """
    Reducer-based store synchronised with the backend of record.

    Parameters
    ----------
    client:
        Object exposing the `ApiClient` methods (`list_products`,
        `create_product`, `list_transactions`, `create_transaction`,
        `mark_transaction_as_paid`). Injected so tests and alternative
        transports can provide their own.
    error_handler:
        Optional callable invoked synchronously with the `ApiError` when a
        mutation fails.
    initial_state:
        Starting snapshot; defaults to an empty, loading `AppState`.
    """

    def __init__(
        self,
        client,
        *,
        error_handler: Optional[ErrorHandler] = None,
        initial_state: Optional[AppState] = None,
    ) -> None:
        self._client = client
        self._error_handler = error_handler
        self._state = initial_state if initial_state is not None else AppState()
        self._listeners: list[Listener] = []

    # -----------------------------------------------------------------------
    # State access & subscriptions
    # -----------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        """Apply `action`, notify subscribers if the state changed, return it."""
        new_state = app_reducer(self._state, action)
        if new_state is self._state:
            return new_state

        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_view(self, name: str) -> AppState:
        return self.dispatch(set_view(name))

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _call(self, func, *args):
        return await asyncio.to_thread(func, *args)

    def _mutation_failed(self, exc: ApiError, what: str) -> None:
        logger.error("Failed to %s: %s", what, exc.message)
        self.dispatch(set_error(exc.message or f"Failed to {what}."))
        if self._error_handler is not None:
            self._error_handler(exc)

    def _synced(self, value: T, refetched: list[Result], what: str) -> Result[T]:
        """
        Result of a mutation the backend accepted.

        A later re-fetch may have reset `error` when starting, so the first
        re-fetch failure is reported again and returned next to `value`.
        """
        error = _first_error(refetched)
        if error is None:
            return Result(value=value)
        self._mutation_failed(error, what)
        return Result(value=value, error=error)

    # -----------------------------------------------------------------------
    # Fetch operations
    # -----------------------------------------------------------------------

    async def fetch_products(self) -> Result[tuple[Product, ...]]:
        """Replace the product list with the backend's."""
        self.dispatch(set_loading(True))
        try:
            products = await self._call(self._client.list_products)
        except ApiError as exc:
            logger.error("Failed to fetch products: %s", exc.message)
            self.dispatch(set_error(exc.message or "Failed to load products."))
            return Result(error=exc)

        self.dispatch(set_products(products))
        return Result(value=self._state.products)

    async def fetch_transactions(self) -> Result[tuple[Transaction, ...]]:
        """Replace the transaction list with the backend's."""
        self.dispatch(set_loading(True))
        try:
            transactions = await self._call(self._client.list_transactions)
        except ApiError as exc:
            logger.error("Failed to fetch transactions: %s", exc.message)
            self.dispatch(
                set_error(exc.message or "Failed to load transactions.")
            )
            return Result(error=exc)

        self.dispatch(set_transactions(transactions))
        return Result(value=self._state.transactions)

    async def load_initial_data(self) -> Result[bool]:
        """
        Bootstrap: fetch products, then transactions (strictly in order).

        Both fetches always run. If either fails, the first error is kept
        in `state.error` and returned.
        """
        self.dispatch(set_loading(True))
        results = [await self.fetch_products(), await self.fetch_transactions()]

        error = _first_error(results)
        if error is not None:
            self.dispatch(set_error(error.message or "Failed to load data."))
            return Result(value=False, error=error)
        return Result(value=True)

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    async def add_product(self, draft: ProductDraft) -> Result[Product]:
        """
        Create a product, then re-fetch the product list.

        The created product returned by the backend is handed back to the
        caller but not inserted locally: the snapshot only changes through
        the re-fetch.
        """
        self.dispatch(set_loading(True))
        try:
            created = await self._call(self._client.create_product, draft)
            logger.debug("Product %s created, re-fetching products", created.id)
            refetched = [await self.fetch_products()]
            return self._synced(created, refetched, "refresh products")
        except ApiError as exc:
            self._mutation_failed(exc, "add product")
            return Result(error=exc)
        finally:
            self.dispatch(set_loading(False))

    async def add_transaction(self, draft: TransactionDraft) -> Result[Transaction]:
        """
        Create a transaction, then re-fetch transactions.

        When the draft references a product and a quantity, the backend
        may have adjusted that product's stock, so products are re-fetched
        as well.
        """
        self.dispatch(set_loading(True))
        try:
            created = await self._call(self._client.create_transaction, draft)
            logger.debug(
                "Transaction %s created, re-fetching transactions", created.id
            )
            refetched = [await self.fetch_transactions()]
            if draft.references_product:
                logger.debug("Stock may have changed, re-fetching products")
                refetched.append(await self.fetch_products())
            return self._synced(created, refetched, "refresh data")
        except ApiError as exc:
            self._mutation_failed(exc, "add transaction")
            return Result(error=exc)
        finally:
            self.dispatch(set_loading(False))

    async def mark_transaction_as_paid(
        self,
        transaction_id: str,
        payment_date: Union[date, str],
    ) -> Result[bool]:
        """Mark a transaction as paid, then re-fetch transactions."""
        self.dispatch(set_loading(True))
        try:
            await self._call(
                self._client.mark_transaction_as_paid, transaction_id, payment_date
            )
            refetched = [await self.fetch_transactions()]
            return self._synced(True, refetched, "refresh transactions")
        except ApiError as exc:
            self._mutation_failed(exc, "mark transaction as paid")
            return Result(value=False, error=exc)
        finally:
            self.dispatch(set_loading(False))
