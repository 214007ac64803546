# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB Dashboard.

This module wires together the main building blocks of SMB Dashboard:

- configuration (backend URL, report page size, display options),
- the application store and its HTTP client,
- derived views (dashboard, inventory, receivables, payables, reports),
- tabular exports.

The CLI is intentionally thin: it does not implement any financial logic
itself. It plays the role of the UI layer on top of the store.


High-level pipeline
-------------------

1) Load the TOML configuration (smb_dashboard_config.toml by default,
   defaults if absent) and apply CLI overrides (--base-url, --log-level).

2) Validate the payload of a mutation command (products add,
   transactions add, transactions mark-paid) before any network call.

3) Bootstrap the store: fetch products, then transactions.

4) Run the mutation, if any. The store re-fetches what the backend may
   have changed.

5) Select the view matching the command (SET_VIEW) and render it from the
   refreshed snapshot, as console tables and optionally as a CSV export.

The process exits with status 1 when the store ends in an error state.


Commands
--------

    dashboard
    inventory     [--export CSV]
    receivables   [--status all|pending|overdue] [--export CSV]
    payables      [--status all|pending|overdue] [--export CSV]
    reports       [--type] [--category] [--from-date] [--to-date]
                  [--search] [--page] [--export CSV]
    products add  --name --sku --purchase-price --selling-price
                  [--stock] [--image-url]
    transactions add --type --date --description --amount --category
                  [--product-id] [--quantity] [--due-date]
    transactions mark-paid ID [--payment-date]
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from datetime import date
from typing import Optional

import pandas as pd

from . import __version__
from .api import ApiClient, ApiError
from .config import LOG_LEVELS, AppConfig, load_app_config
from .dashboard import build_dashboard
from .export import inventory_rows, transaction_rows, write_csv
from .inventory import inventory_totals, inventory_valuation
from .logging_config import configure_logging
from .models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    ProductDraft,
    TransactionDraft,
)
from .receivables import STATUS_FILTERS, open_items
from .reports import ReportBrowser, filter_transactions
from .state import AppState
from .store import AppStore

COMMAND_VIEWS = {
    "dashboard": "dashboard",
    "inventory": "inventoryList",
    "receivables": "accountsReceivable",
    "payables": "accountsPayable",
    "reports": "reports",
    "products": "dataEntry",
    "transactions": "dataEntry",
}

RANKING_COLUMNS = ["name", "sku", "stock", "revenue", "units_sold", "units_purchased"]
OPEN_ITEM_DISPLAY_COLUMNS = [
    "id",
    "due_date",
    "description",
    "category",
    "amount",
    "status",
    "is_overdue",
]
REPORT_DISPLAY_COLUMNS = [
    "id",
    "date",
    "type",
    "description",
    "category",
    "product_name",
    "quantity",
    "amount",
]


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m smb_dashboard.cli",
        description=(
            "SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs. "
            "Synchronises products and transactions with the backend and "
            "renders dashboards, receivables, payables, reports and inventory."
        ),
    )

    # Generic options
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of smb_dashboard and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'smb_dashboard_config.toml' in the current directory is used "
            "when present."
        ),
    )
    ap.add_argument(
        "--base-url",
        dest="base_url",
        help="Override the backend API base URL defined in the configuration.",
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override the logging level defined in the configuration.",
    )

    sub = ap.add_subparsers(dest="command")

    sub.add_parser("dashboard", help="Show totals, rankings and the monthly chart.")

    inventory_p = sub.add_parser("inventory", help="Show inventory valuation.")
    inventory_p.add_argument("--export", dest="export_path", metavar="CSV_PATH")

    for name, label in (("receivables", "income"), ("payables", "expense")):
        open_p = sub.add_parser(name, help=f"List open {label} items.")
        open_p.add_argument(
            "--status",
            choices=STATUS_FILTERS,
            default="all",
            help="Filter open items: all, pending (not overdue) or overdue.",
        )
        open_p.add_argument("--export", dest="export_path", metavar="CSV_PATH")

    reports_p = sub.add_parser("reports", help="Filtered transaction report.")
    reports_p.add_argument(
        "--type",
        dest="transaction_type",
        choices=["all", "income", "expense"],
        default="all",
    )
    reports_p.add_argument(
        "--category",
        default="all",
        help="'all' or one of the income / expense categories.",
    )
    reports_p.add_argument("--from-date", dest="from_date", help="YYYY-MM-DD")
    reports_p.add_argument("--to-date", dest="to_date", help="YYYY-MM-DD")
    reports_p.add_argument(
        "--search",
        default="",
        help="Case-insensitive search in description and product name.",
    )
    reports_p.add_argument("--page", type=int, default=1)
    reports_p.add_argument(
        "--export",
        dest="export_path",
        metavar="CSV_PATH",
        help="Write every filtered transaction (all pages) to a CSV file.",
    )

    products_p = sub.add_parser("products", help="Product operations.")
    products_sub = products_p.add_subparsers(dest="products_command", required=True)
    add_product_p = products_sub.add_parser("add", help="Create a product.")
    add_product_p.add_argument("--name", required=True)
    add_product_p.add_argument("--sku", required=True)
    add_product_p.add_argument("--purchase-price", dest="purchase_price", type=float, required=True)
    add_product_p.add_argument("--selling-price", dest="selling_price", type=float, required=True)
    add_product_p.add_argument("--stock", type=int, default=0)
    add_product_p.add_argument("--image-url", dest="image_url")

    tx_p = sub.add_parser("transactions", help="Transaction operations.")
    tx_sub = tx_p.add_subparsers(dest="transactions_command", required=True)
    add_tx_p = tx_sub.add_parser("add", help="Record an income or an expense.")
    add_tx_p.add_argument("--type", dest="transaction_type", choices=["income", "expense"], required=True)
    add_tx_p.add_argument("--date", dest="tx_date", help="YYYY-MM-DD (default: today)")
    add_tx_p.add_argument("--description", required=True)
    add_tx_p.add_argument("--amount", type=float, required=True)
    add_tx_p.add_argument(
        "--category",
        required=True,
        help="Category matching --type (e.g. 'Venta de Producto', 'Alquiler').",
    )
    add_tx_p.add_argument("--product-id", dest="product_id")
    add_tx_p.add_argument("--quantity", type=int)
    add_tx_p.add_argument("--due-date", dest="due_date", help="YYYY-MM-DD")

    paid_p = tx_sub.add_parser("mark-paid", help="Mark a pending transaction as paid.")
    paid_p.add_argument("transaction_id")
    paid_p.add_argument(
        "--payment-date",
        dest="payment_date",
        help="YYYY-MM-DD (default: today)",
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _categories_for(transaction_type: str, config: AppConfig) -> tuple[str, ...]:
    """Categories accepted for a transaction type ("all" means both)."""
    expense = EXPENSE_CATEGORIES
    if config.purchase_category not in expense:
        expense = expense + (config.purchase_category,)
    if transaction_type == "income":
        return INCOME_CATEGORIES
    if transaction_type == "expense":
        return expense
    return INCOME_CATEGORIES + expense


def _build_report_browser(
    args: argparse.Namespace,
    config: AppConfig,
    parser: argparse.ArgumentParser,
) -> ReportBrowser:
    """Validate the `reports` options and return a browser positioned on --page."""
    if args.category != "all" and args.category not in _categories_for("all", config):
        parser.error(f"Unknown category: {args.category!r}.")

    browser = ReportBrowser(page_size=config.page_size, month_labels=config.month_labels)
    try:
        browser.update_filters(
            transaction_type=args.transaction_type,
            category=args.category,
            start=_parse_optional_date(args.from_date),
            end=_parse_optional_date(args.to_date),
            search=args.search,
        )
        browser.go_to(args.page)
    except ValueError as exc:
        parser.error(f"Invalid report filters: {exc}")
    return browser


def _print_error(exc: ApiError) -> None:
    print(f"Error: {exc.message}", file=sys.stderr)


def _print_table(title: str, df: pd.DataFrame, columns: list[str]) -> None:
    print()
    print(title)
    if df.empty:
        print("  (no data)")
        return
    display = df[[c for c in columns if c in df.columns]].copy()
    if "date" in display.columns:
        display["date"] = display["date"].astype(str)
    print(display.to_string(index=False))


def _maybe_export(rows: pd.DataFrame, path: Optional[str]) -> None:
    if path:
        out = write_csv(rows, path)
        print(f"\nExported {len(rows)} rows to {out}")


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _build_mutation(
    args: argparse.Namespace,
    config: AppConfig,
    parser: argparse.ArgumentParser,
):
    """
    Validate the mutation requested on the command line, if any.

    Returns a coroutine function taking the store, or None for read-only
    commands. Invalid payloads are reported through `parser.error`.
    The coroutine returns True only if the backend accepted the change and
    the re-fetch that follows it succeeded.
    """
    if args.command == "products" and args.products_command == "add":
        try:
            draft = ProductDraft(
                name=args.name,
                sku=args.sku,
                purchase_price=args.purchase_price,
                selling_price=args.selling_price,
                stock=args.stock,
                image_url=args.image_url,
            )
        except ValueError as exc:
            parser.error(str(exc))

        async def add_product(store: AppStore) -> bool:
            result = await store.add_product(draft)
            if result.value is not None:
                print(f"Created product {result.value.id}: {result.value.name}")
            return result.ok

        return add_product

    if args.command == "transactions" and args.transactions_command == "add":
        allowed = _categories_for(args.transaction_type, config)
        if args.category not in allowed:
            parser.error(
                f"Unknown {args.transaction_type} category: {args.category!r}. "
                f"Expected one of: {', '.join(allowed)}."
            )
        try:
            draft = TransactionDraft(
                type=args.transaction_type,
                date=_parse_optional_date(args.tx_date) or date.today(),
                description=args.description,
                amount=args.amount,
                category=args.category,
                product_id=args.product_id,
                quantity=args.quantity,
                due_date=_parse_optional_date(args.due_date),
            )
        except ValueError as exc:
            parser.error(str(exc))

        async def add_transaction(store: AppStore) -> bool:
            result = await store.add_transaction(draft)
            if result.value is not None:
                print(f"Created transaction {result.value.id}: {result.value.description}")
            return result.ok

        return add_transaction

    if args.command == "transactions" and args.transactions_command == "mark-paid":
        payment_date = _parse_optional_date(args.payment_date) or date.today()

        async def mark_paid(store: AppStore) -> bool:
            result = await store.mark_transaction_as_paid(
                args.transaction_id, payment_date
            )
            if result.value:
                print(f"Transaction {args.transaction_id} marked as paid on {payment_date}.")
            return result.ok

        return mark_paid

    return None


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


def _render_dashboard(state: AppState, args: argparse.Namespace, config: AppConfig) -> None:
    view = build_dashboard(
        state.products,
        state.transactions,
        purchase_category=config.purchase_category,
        month_labels=config.month_labels,
    )
    totals = view.totals
    print(f"Total income:   {totals.total_income:.2f}")
    print(f"Total expenses: {totals.total_expenses:.2f}")
    print(f"Net profit:     {totals.net_profit:.2f}")

    _print_table("Monthly summary (income vs expenses)", view.monthly, ["label", "income", "expense"])
    _print_table("Top sales (by revenue)", view.top_by_revenue, RANKING_COLUMNS)
    _print_table("Top sales (by units)", view.top_by_units_sold, RANKING_COLUMNS)
    _print_table("Top purchased (inventory)", view.top_by_units_purchased, RANKING_COLUMNS)
    _print_table("Slow-moving products", view.slow_moving, RANKING_COLUMNS)


def _render_inventory(state: AppState, args: argparse.Namespace, config: AppConfig) -> None:
    valuation = inventory_valuation(state.products)
    totals = inventory_totals(state.products)

    print(f"Distinct products:           {totals.product_count}")
    print(f"Total stock units:           {totals.stock_units}")
    print(f"Inventory value (purchase):  {totals.value_at_purchase:.2f}")
    print(f"Inventory value (sale):      {totals.value_at_sale:.2f}")

    _print_table("Inventory", valuation, list(valuation.columns))
    _maybe_export(inventory_rows(valuation), getattr(args, "export_path", None))


def _render_open_items(
    state: AppState,
    args: argparse.Namespace,
    config: AppConfig,
    transaction_type: str,
) -> None:
    status_filter = getattr(args, "status", "all")
    view = open_items(state.transactions, transaction_type, status_filter)
    label = "receivable" if transaction_type == "income" else "payable"

    print(f"Total {label} (filtered): {view.total:.2f}")
    print(f"Total overdue (filtered): {view.total_overdue:.2f}")
    _print_table(
        f"Open {label} items ({len(view.items)})",
        view.items,
        OPEN_ITEM_DISPLAY_COLUMNS,
    )
    _maybe_export(
        transaction_rows(view.items, state.products),
        getattr(args, "export_path", None),
    )


def _render_reports(state: AppState, args: argparse.Namespace, config: AppConfig) -> None:
    browser: ReportBrowser = args.report_browser
    report = browser.view(state.transactions, state.products)
    page = report.page

    print(f"Filtered income:   {report.total_income:.2f}")
    print(f"Filtered expenses: {report.total_expenses:.2f}")
    _print_table("Monthly chart (filtered)", report.chart, ["label", "income", "expense"])
    _print_table(
        f"Transactions - page {page.page}/{max(page.total_pages, 1)} "
        f"({page.total_items} total)",
        page.items,
        REPORT_DISPLAY_COLUMNS,
    )

    export_path = getattr(args, "export_path", None)
    if export_path:
        filtered = filter_transactions(state.transactions, state.products, browser.filters)
        _maybe_export(transaction_rows(filtered, state.products), export_path)


def _render_data_entry(state: AppState, args: argparse.Namespace, config: AppConfig) -> None:
    print(
        f"Products: {len(state.products)} | "
        f"Transactions: {len(state.transactions)}"
    )


VIEW_RENDERERS = {
    "dashboard": _render_dashboard,
    "inventoryList": _render_inventory,
    "accountsReceivable": lambda s, a, c: _render_open_items(s, a, c, "income"),
    "accountsPayable": lambda s, a, c: _render_open_items(s, a, c, "expense"),
    "reports": _render_reports,
    "dataEntry": _render_data_entry,
}


async def _run(args: argparse.Namespace, config: AppConfig, store: AppStore, mutation) -> int:
    loaded = await store.load_initial_data()
    if not loaded:
        print(f"Error: {loaded.error.message}", file=sys.stderr)
        return 1

    if mutation is not None and not await mutation(store):
        return 1

    store.set_view(COMMAND_VIEWS[args.command])
    VIEW_RENDERERS[store.state.active_view](store.state, args, config)

    if store.state.error:
        print(f"Error: {store.state.error}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the SMB Dashboard CLI.

    This function parses command-line arguments, loads the configuration,
    validates any mutation payload, bootstraps the store from the backend,
    runs the mutation, and renders the view selected by the command.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"smb_dashboard version {__version__}")
        return

    if args.command is None:
        parser.print_help()
        return

    try:
        config = load_app_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    if args.base_url:
        config = replace(config, api=replace(config.api, base_url=args.base_url))
    if args.log_level:
        config = replace(config, log_level=args.log_level)

    configure_logging(config.log_level)

    # Everything that can be rejected locally is checked before any request.
    mutation = _build_mutation(args, config, parser)
    if args.command == "reports":
        args.report_browser = _build_report_browser(args, config, parser)

    client = ApiClient(config.api.base_url, config.api.timeout)
    store = AppStore(client, error_handler=_print_error)

    status = asyncio.run(_run(args, config, store, mutation))
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
