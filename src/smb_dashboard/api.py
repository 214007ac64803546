# SMB Dashboard - Financial Dashboard & Inventory tracking for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
HTTP client for the backend of record.

The backend exposes a small JSON API:

    GET   /products                           -> list of products
    POST  /products                           -> created product
    GET   /transactions                       -> list of transactions
    POST  /transactions                       -> created transaction
    PATCH /transactions/{id}/mark-as-paid     -> acknowledgement

`ApiClient` wraps these endpoints with blocking calls built on
`urllib.request`. Every failure is raised as an `ApiError` whose `kind`
tells the three failure families apart:

- ErrorKind.NETWORK          : the request never got an HTTP answer
                               (DNS, refused connection, timeout...).
- ErrorKind.HTTP             : non-2xx answer carrying a JSON `message`.
- ErrorKind.HTTP_UNPARSEABLE : non-2xx answer without a usable body (the
                               message is synthesized from the status
                               code), or a 2xx answer whose body is not
                               the expected JSON.

The client performs no retries; each failure is terminal for the attempt.
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from enum import Enum
from typing import Any, Optional

from .models import Product, ProductDraft, Transaction, TransactionDraft

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5001/api"
DEFAULT_TIMEOUT = 30.0


class ErrorKind(str, Enum):
    """Failure families reported by the API client."""

    NETWORK = "network"
    HTTP = "http"
    HTTP_UNPARSEABLE = "http_unparseable"


class ApiError(Exception):
    """
    Error raised for any failed exchange with the backend.

    Attributes
    ----------
    message:
        Human-readable message, suitable for display.
    kind:
        The `ErrorKind` of the failure.
    status:
        HTTP status code when an HTTP answer was received, otherwise None.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status = status


def _error_from_http(exc: urllib.error.HTTPError) -> ApiError:
    """Build an ApiError from a non-2xx answer, preferring its JSON message."""
    fallback = f"HTTP error! status: {exc.code}"
    try:
        raw = exc.read()
        data = json.loads(raw.decode("utf-8")) if raw else None
    except (OSError, ValueError):
        data = None

    if isinstance(data, dict) and data.get("message"):
        return ApiError(str(data["message"]), ErrorKind.HTTP, exc.code)
    return ApiError(fallback, ErrorKind.HTTP_UNPARSEABLE, exc.code)


class ApiClient:
    """
    Blocking client for the backend of record.

    Parameters
    ----------
    base_url:
        Root of the API, e.g. "http://localhost:5001/api".
    timeout:
        Socket timeout in seconds for every request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # -----------------------------------------------------------------------
    # Low-level transport
    # -----------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        url = self.base_url + path
        data = None
        headers = {"Accept": "application/json"}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urllib.request.Request(url, data=data, method=method, headers=headers)
        logger.debug("%s %s", method, url)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise _error_from_http(exc) from exc
        except urllib.error.URLError as exc:
            raise ApiError(
                f"Network error while calling {method} {path}: {exc.reason}",
                ErrorKind.NETWORK,
            ) from exc
        except OSError as exc:
            # Timeouts and connection resets raised outside URLError.
            raise ApiError(
                f"Network error while calling {method} {path}: {exc}",
                ErrorKind.NETWORK,
            ) from exc

        if not body.strip():
            return None

        try:
            return json.loads(body)
        except ValueError as exc:
            raise ApiError(
                f"Invalid JSON returned by {method} {path}.",
                ErrorKind.HTTP_UNPARSEABLE,
            ) from exc

    def _parse_list(self, data: Any, parser, path: str) -> list:
        if not isinstance(data, list):
            raise ApiError(
                f"Expected a JSON list from GET {path}.",
                ErrorKind.HTTP_UNPARSEABLE,
            )
        try:
            return [parser(item) for item in data]
        except ValueError as exc:
            raise ApiError(str(exc), ErrorKind.HTTP_UNPARSEABLE) from exc

    def _parse_one(self, data: Any, parser, path: str):
        if not isinstance(data, dict):
            raise ApiError(
                f"Expected a JSON object from POST {path}.",
                ErrorKind.HTTP_UNPARSEABLE,
            )
        try:
            return parser(data)
        except ValueError as exc:
            raise ApiError(str(exc), ErrorKind.HTTP_UNPARSEABLE) from exc

    # -----------------------------------------------------------------------
    # Endpoints
    # -----------------------------------------------------------------------

    def list_products(self) -> list[Product]:
        data = self._request("GET", "/products")
        return self._parse_list(data, Product.from_api, "/products")

    def create_product(self, draft: ProductDraft) -> Product:
        data = self._request("POST", "/products", draft.to_api())
        return self._parse_one(data, Product.from_api, "/products")

    def list_transactions(self) -> list[Transaction]:
        data = self._request("GET", "/transactions")
        return self._parse_list(data, Transaction.from_api, "/transactions")

    def create_transaction(self, draft: TransactionDraft) -> Transaction:
        data = self._request("POST", "/transactions", draft.to_api())
        return self._parse_one(data, Transaction.from_api, "/transactions")

    def mark_transaction_as_paid(self, transaction_id: str, payment_date) -> None:
        """
        Mark a pending transaction as paid on `payment_date`.

        `payment_date` may be a `date` or an ISO string.
        """
        if hasattr(payment_date, "isoformat"):
            payment_date = payment_date.isoformat()
        path = "/transactions/{}/mark-as-paid".format(
            urllib.parse.quote(str(transaction_id), safe="")
        )
        self._request("PATCH", path, {"paymentDate": payment_date})
