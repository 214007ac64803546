# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB Dashboard.

This module is responsible for:
- loading the application configuration from a TOML file,
- applying defaults for every missing section or value,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .api import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .models import INVENTORY_PURCHASE_CATEGORY
from .periods import MONTH_ABBREVIATIONS
from .reports import DEFAULT_PAGE_SIZE

DEFAULT_CONFIG_FILE = "smb_dashboard_config.toml"

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ApiConfig:
    """Where and how to reach the backend of record."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB Dashboard.

    This aggregates:
    - the backend API settings,
    - the report page size,
    - the expense category that counts as an inventory purchase,
    - the month label set used by charts,
    - the logging level.
    """

    api: ApiConfig
    page_size: int
    purchase_category: str
    month_labels: str
    log_level: str


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_api(raw: Mapping[str, Any]) -> ApiConfig:
    api_section = _section(raw, "api")

    base_url = str(api_section.get("base_url") or DEFAULT_BASE_URL)
    if not base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid value for 'api.base_url': {base_url!r}. "
            "Expected an http:// or https:// URL."
        )

    try:
        timeout = float(api_section.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'api.timeout' in the configuration. "
            "Expected a number of seconds."
        ) from exc
    if timeout <= 0:
        raise ValueError("'api.timeout' must be a positive number of seconds.")

    return ApiConfig(base_url=base_url, timeout=timeout)


def default_app_config() -> AppConfig:
    """Configuration used when no TOML file is available."""
    return AppConfig(
        api=ApiConfig(),
        page_size=DEFAULT_PAGE_SIZE,
        purchase_category=INVENTORY_PURCHASE_CATEGORY,
        month_labels="en",
        log_level="INFO",
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB Dashboard configuration from a TOML file.

    Expected top-level sections in the TOML file (all optional)
    -----------------------------------------------------------
    [api]
        base_url (default "http://localhost:5001/api") and timeout in
        seconds (default 30).

    [reports]
        page_size: number of transactions per report page (default 10).

    [inventory]
        purchase_category: expense category counted as an inventory
        purchase (default "Compra de Inventario").

    [display]
        month_labels: "en" or "es", used for chart month labels.

    [logging]
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO).

    Notes
    -----
    - When `config_path` is None, 'smb_dashboard_config.toml' in the current
      directory is used if it exists; otherwise defaults apply.
    - An explicitly given path must exist.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.

    Raises
    ------
    FileNotFoundError
        If an explicit `config_path` does not exist.
    ValueError
        If a value is invalid.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            return default_app_config()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)

    # 1) Backend API
    api = _parse_api(raw)

    # 2) Reports
    reports_section = _section(raw, "reports")
    try:
        page_size = int(reports_section.get("page_size", DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'reports.page_size' in the configuration. "
            "Expected an integer."
        ) from exc
    if page_size < 1:
        raise ValueError("'reports.page_size' must be a positive integer.")

    # 3) Inventory
    inventory_section = _section(raw, "inventory")
    purchase_category = str(
        inventory_section.get("purchase_category") or INVENTORY_PURCHASE_CATEGORY
    )

    # 4) Display options
    display_section = _section(raw, "display")
    month_labels = str(display_section.get("month_labels", "en")).lower()
    if month_labels not in MONTH_ABBREVIATIONS:
        raise ValueError(
            f"Invalid value for 'display.month_labels': {month_labels!r}. "
            f"Expected one of {', '.join(MONTH_ABBREVIATIONS)}."
        )

    # 5) Logging
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid value for 'logging.level': {log_level!r}. "
            f"Expected one of {', '.join(LOG_LEVELS)}."
        )

    return AppConfig(
        api=api,
        page_size=page_size,
        purchase_category=purchase_category,
        month_labels=month_labels,
        log_level=log_level,
    )
