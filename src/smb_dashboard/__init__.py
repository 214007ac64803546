# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB Dashboard
-------------

A Python client for the day-to-day financial dashboard of Small and
Medium-sized Businesses (SMBs). It talks to a remote backend of record
(HTTP + JSON) holding products and income/expense transactions, keeps a
local snapshot of that data in a reducer-based store, and derives the
figures an owner looks at every day.

Main capabilities:
- an application store synchronised with the backend by re-fetching after
  every mutation (products, transactions, mark-as-paid),
- overdue classification of receivables and payables,
- dashboard aggregates (income, expenses, net profit, top products,
  slow-moving products, monthly income vs expense chart),
- filterable, paginated transaction reports with a monthly chart over the
  filtered set,
- inventory valuation at purchase and selling price,
- tabular exports (CSV) ready for any document generator.

SMB Dashboard separates synchronisation (store), computation (derived
views), configuration (TOML), and presentation (CLI), making it suitable
for scripting, automation and quick diagnostics.


Version: 0.2.0

Usage:
    python -m smb_dashboard.cli --help
"""

__all__ = [
    "api",
    "dashboard",
    "inventory",
    "models",
    "receivables",
    "reports",
    "state",
    "store",
]

__version__ = "0.2.0"
