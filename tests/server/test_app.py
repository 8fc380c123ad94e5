"""
Tests for the DPS facilitator HTTP host
"""

import pytest
from fastapi.testclient import TestClient

from dps_facilitator.facilitator import DpsFacilitator
from dps_facilitator.fastapi import create_app
from dps_facilitator.fastapi.app import to_iso

SELLER_REQUIREMENTS = {
    "scheme": "exact",
    "network": "base-sepolia",
    "maxAmountRequired": "5000",
    "resource": "https://seller.example/api",
    "description": "Seller payment",
    "mimeType": "application/json",
    "payTo": "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
    "maxTimeoutSeconds": 120,
    "asset": "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
}


@pytest.fixture
def facilitator(make_config, clock):
    return DpsFacilitator(make_config(), clock)


@pytest.fixture
def client(facilitator):
    return TestClient(create_app(facilitator))


def _create_invoice(client, amount="10000", **extra_body):
    response = client.post(
        "/dps/invoices",
        json={"paymentRequirements": SELLER_REQUIREMENTS, "negotiatedAmount": amount, **extra_body},
    )
    assert response.status_code == 200
    return response.json()


def test_root(client):
    body = client.get("/").json()
    assert body["service"] == "DPS Facilitator"
    assert body["feeBasisPoints"] == 200


def test_create_invoice(client, clock):
    body = _create_invoice(client)

    assert body["amount"] == "200"
    assert body["paid"] is False
    assert body["createdAt"] == clock.now()
    assert body["expiresAt"] == clock.now() + 600_000
    assert body["paymentRequirements"]["payTo"] == "0xcccccccccccccccccccccccccccccccccccccccc"
    assert body["paymentRequirements"]["maxAmountRequired"] == "200"
    assert body["paymentRequirements"]["extra"] == {"dpsInvoiceId": body["id"]}


def test_create_invoice_numeric_amount(client):
    body = _create_invoice(client, amount=10000)
    assert body["amount"] == "200"


def test_create_invoice_invalid_amount(client):
    response = client.post(
        "/dps/invoices",
        json={"paymentRequirements": SELLER_REQUIREMENTS, "negotiatedAmount": "-5"},
    )
    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_amount"


def test_apply_invoice_round_trip(client):
    invoice = _create_invoice(client)

    response = client.post("/dps/invoices/apply", json={"paymentRequirements": invoice["paymentRequirements"]})

    assert response.status_code == 200
    assert response.json() == invoice["paymentRequirements"]


def test_apply_invoice_errors(client, clock):
    response = client.post("/dps/invoices/apply", json={"paymentRequirements": SELLER_REQUIREMENTS})
    assert response.status_code == 400
    assert response.json()["reason"] == "missing_invoice_id"

    unknown = {**SELLER_REQUIREMENTS, "extra": {"dpsInvoiceId": "0xunknown"}}
    response = client.post("/dps/invoices/apply", json={"paymentRequirements": unknown})
    assert response.status_code == 404
    assert response.json()["reason"] == "not_found"

    invoice = _create_invoice(client)
    clock.advance_ms(600_000)
    response = client.post("/dps/invoices/apply", json={"paymentRequirements": invoice["paymentRequirements"]})
    assert response.status_code == 409
    assert response.json()["reason"] == "expired"


def test_mark_paid_and_get(client):
    invoice = _create_invoice(client)

    response = client.post(f"/dps/invoices/{invoice['id']}/paid")
    assert response.json() == {"id": invoice["id"], "paid": True}

    assert client.get(f"/dps/invoices/{invoice['id']}").json()["paid"] is True


def test_unknown_invoice(client):
    assert client.get("/dps/invoices/0xmissing").status_code == 404
    assert client.post("/dps/invoices/0xmissing/paid").status_code == 404


def test_create_quote(client, clock):
    response = client.post(
        "/dps/quote",
        json={"paymentRequirements": SELLER_REQUIREMENTS, "negotiatedAmount": "2500", "ttlSeconds": 120},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["negotiatedAmount"] == "2500"
    assert body["expiresAt"] == "2024-01-01T00:02:00.000Z"
    assert body["dpsInvoiceExpiresAt"] == "2024-01-01T00:10:00.000Z"
    assert body["paymentRequirements"]["maxAmountRequired"] == "2500"
    assert body["paymentRequirements"]["extra"]["dynamicQuoteId"] == body["quoteId"]
    assert body["dpsPaymentRequirements"]["extra"]["dpsInvoiceId"] == body["dpsInvoiceId"]


def test_normalize_quote_requires_paid_invoice(client):
    quote = client.post(
        "/dps/quote",
        json={"paymentRequirements": SELLER_REQUIREMENTS, "negotiatedAmount": "2500"},
    ).json()

    response = client.post("/normalize", json={"paymentRequirements": quote["paymentRequirements"]})
    assert response.status_code == 409
    assert response.json()["reason"] == "invoice_unpaid"

    client.post(f"/dps/invoices/{quote['dpsInvoiceId']}/paid")

    response = client.post("/normalize", json={"paymentRequirements": quote["paymentRequirements"]})
    assert response.status_code == 200
    assert response.json() == quote["paymentRequirements"]


def test_normalize_untagged(client):
    response = client.post("/normalize", json={"paymentRequirements": SELLER_REQUIREMENTS})
    assert response.json() == SELLER_REQUIREMENTS


def test_invalid_ttl_quote(client):
    response = client.post(
        "/dps/quote",
        json={"paymentRequirements": SELLER_REQUIREMENTS, "negotiatedAmount": "1", "ttlSeconds": 99999},
    )
    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_ttl"


def test_to_iso():
    assert to_iso(0) == "1970-01-01T00:00:00.000Z"
    assert to_iso(1_704_067_200_123) == "2024-01-01T00:00:00.123Z"
