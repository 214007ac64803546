import io
import json
import urllib.error
import urllib.request
from datetime import date

import pytest

from smb_dashboard.api import ApiClient, ApiError, ErrorKind
from smb_dashboard.models import ProductDraft


class FakeResponse:
    """Minimal stand-in for the object returned by urlopen()."""

    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def install_urlopen(monkeypatch, handler) -> list:
    """Patch urlopen with `handler(request)`; return the list of sent requests."""
    sent = []

    def fake_urlopen(req, timeout=None):
        sent.append(req)
        return handler(req)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return sent


def http_error(code: int, body: bytes) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "http://test/api/products", code, "error", {}, io.BytesIO(body)
    )


def test_list_products_parses_json(monkeypatch) -> None:
    payload = [
        {"id": "p1", "name": "Chair", "sku": "CH", "purchasePrice": 10, "sellingPrice": 20, "stock": 3}
    ]
    sent = install_urlopen(
        monkeypatch, lambda req: FakeResponse(json.dumps(payload).encode())
    )

    products = ApiClient("http://test/api/").list_products()

    assert [p.id for p in products] == ["p1"]
    assert sent[0].full_url == "http://test/api/products"
    assert sent[0].get_method() == "GET"


def test_create_product_posts_camel_case_body(monkeypatch) -> None:
    created = {"id": "p9", "name": "Lamp", "sku": "LA", "purchasePrice": 5, "sellingPrice": 9, "stock": 0}
    sent = install_urlopen(
        monkeypatch, lambda req: FakeResponse(json.dumps(created).encode())
    )

    product = ApiClient("http://test/api").create_product(
        ProductDraft(name="Lamp", sku="LA", purchase_price=5, selling_price=9)
    )

    assert product.id == "p9"
    assert sent[0].get_method() == "POST"
    assert json.loads(sent[0].data) == {
        "name": "Lamp",
        "sku": "LA",
        "purchasePrice": 5,
        "sellingPrice": 9,
        "stock": 0,
    }


def test_mark_as_paid_sends_patch_with_payment_date(monkeypatch) -> None:
    sent = install_urlopen(monkeypatch, lambda req: FakeResponse(b""))

    result = ApiClient("http://test/api").mark_transaction_as_paid(
        "t 1", date(2024, 6, 15)
    )

    assert result is None
    assert sent[0].get_method() == "PATCH"
    assert sent[0].full_url == "http://test/api/transactions/t%201/mark-as-paid"
    assert json.loads(sent[0].data) == {"paymentDate": "2024-06-15"}


def test_http_error_without_body_uses_status_message(monkeypatch) -> None:
    """A 500 with an empty body yields the generic status message."""

    def handler(req):
        raise http_error(500, b"")

    install_urlopen(monkeypatch, handler)

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").list_products()

    err = excinfo.value
    assert err.message == "HTTP error! status: 500"
    assert err.kind is ErrorKind.HTTP_UNPARSEABLE
    assert err.status == 500


def test_http_error_with_json_message(monkeypatch) -> None:
    def handler(req):
        raise http_error(400, b'{"message": "SKU already exists"}')

    install_urlopen(monkeypatch, handler)

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").create_product(
            ProductDraft(name="Lamp", sku="LA", purchase_price=5, selling_price=9)
        )

    assert excinfo.value.message == "SKU already exists"
    assert excinfo.value.kind is ErrorKind.HTTP
    assert excinfo.value.status == 400


def test_network_failure_is_reported_as_network_error(monkeypatch) -> None:
    def handler(req):
        raise urllib.error.URLError("Connection refused")

    install_urlopen(monkeypatch, handler)

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").list_transactions()

    assert excinfo.value.kind is ErrorKind.NETWORK
    assert excinfo.value.status is None
    assert "Connection refused" in excinfo.value.message


def test_malformed_records_are_unparseable(monkeypatch) -> None:
    install_urlopen(
        monkeypatch,
        lambda req: FakeResponse(b'[{"id": "t1", "type": "income", "date": "nope", "amount": 1}]'),
    )

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").list_transactions()

    assert excinfo.value.kind is ErrorKind.HTTP_UNPARSEABLE


def test_invalid_json_body_is_unparseable(monkeypatch) -> None:
    install_urlopen(monkeypatch, lambda req: FakeResponse(b"<html>oops</html>"))

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").list_products()

    assert excinfo.value.kind is ErrorKind.HTTP_UNPARSEABLE


def test_undecodable_error_body_falls_back_to_status_message(monkeypatch) -> None:
    def handler(req):
        raise http_error(502, b"\xff\xfe not utf-8")

    install_urlopen(monkeypatch, handler)

    with pytest.raises(ApiError) as excinfo:
        ApiClient("http://test/api").list_products()

    assert excinfo.value.message == "HTTP error! status: 502"
    assert excinfo.value.kind is ErrorKind.HTTP_UNPARSEABLE
