"""
Tests for payment endpoints: gateway order creation and callback verification.
"""

import pytest
from httpx import AsyncClient
from razorpay.errors import ServerError

from weddinghub.main import app
from weddinghub.services.payment_gateway import RazorpayGateway, get_payment_gateway

from conftest import GATEWAY_KEY_ID, booking_payload, headers_for, sign


def _flip_last_char(signature: str) -> str:
    return signature[:-1] + ("1" if signature[-1] == "0" else "0")


@pytest.mark.asyncio
async def test_create_order(client: AsyncClient, booking, customer_headers, gateway_stub):
    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000, "currency": "INR"},
        headers=customer_headers,
    )
    assert response.status_code == 200
    assert response.json() == {
        "order_id": "order_TEST0001",
        "amount": 500000,
        "currency": "INR",
        "key": GATEWAY_KEY_ID,
    }

    assert gateway_stub.orders == [
        {
            "amount": 500000,
            "currency": "INR",
            "receipt": f"booking_{booking['id']}",
        }
    ]
    assert gateway_stub.options == [{"timeout": 10.0}]


@pytest.mark.asyncio
async def test_create_order_leaves_booking_untouched(client: AsyncClient, booking, customer_headers):
    await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000},
        headers=customer_headers,
    )
    current = await client.get(f"/api/v1/bookings/{booking['id']}", headers=customer_headers)
    assert current.json()["status"] == "Pending"
    assert current.json()["payment_status"] == "Pending"
    assert current.json()["payment"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -100])
async def test_create_order_rejects_non_positive_amount(client: AsyncClient, booking, customer_headers, gateway_stub, amount):
    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": amount},
        headers=customer_headers,
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "validation_error"
    assert gateway_stub.orders == []


@pytest.mark.asyncio
async def test_create_order_rejects_other_currencies(client: AsyncClient, booking, customer_headers, gateway_stub):
    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000, "currency": "USD"},
        headers=customer_headers,
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "unsupported_currency"
    assert gateway_stub.orders == []


@pytest.mark.asyncio
async def test_create_order_unknown_booking(client: AsyncClient, customer, customer_headers):
    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": 9999, "amount": 500000},
        headers=customer_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_order_for_someone_elses_booking(client: AsyncClient, booking, other_customer, admin):
    denied = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000},
        headers=headers_for(other_customer),
    )
    assert denied.status_code == 403

    allowed = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000},
        headers=headers_for(admin),
    )
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_create_order_gateway_error(client: AsyncClient, booking, customer_headers, gateway_stub):
    gateway_stub.fail_with = ServerError("gateway error")
    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000},
        headers=customer_headers,
    )
    assert response.status_code == 500
    assert response.json() == {"kind": "gateway_unavailable", "detail": "Failed to create payment order"}
    # Not retried
    assert len(gateway_stub.orders) == 1


@pytest.mark.asyncio
async def test_create_order_gateway_unconfigured(client: AsyncClient, booking, customer_headers):
    app.dependency_overrides[get_payment_gateway] = lambda: RazorpayGateway(key_id="", key_secret="")

    response = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000},
        headers=customer_headers,
    )
    assert response.status_code == 500
    assert response.json()["kind"] == "gateway_unavailable"


@pytest.mark.asyncio
async def test_verify_payment(client: AsyncClient, clock, booking, customer_headers):
    clock.advance(minutes=5)
    response = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": booking["id"],
            "order_id": "order_ABC",
            "payment_id": "pay_XYZ",
            "signature": sign("order_ABC", "pay_XYZ"),
        },
        headers=customer_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Payment verified and booking confirmed"
    assert body["booking"]["status"] == "Confirmed"
    assert body["booking"]["payment_status"] == "Paid"
    assert body["booking"]["payment"] == {
        "order_id": "order_ABC",
        "payment_id": "pay_XYZ",
        "signature": sign("order_ABC", "pay_XYZ"),
    }
    assert body["booking"]["updated_at"].startswith("2026-05-01T12:05:00")


@pytest.mark.asyncio
async def test_verify_payment_accepts_checkout_field_names(client: AsyncClient, booking, customer_headers):
    """The checkout widget's razorpay_* keys are accepted as-is."""
    response = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": booking["id"],
            "razorpay_order_id": "order_ABC",
            "razorpay_payment_id": "pay_XYZ",
            "razorpay_signature": sign("order_ABC", "pay_XYZ"),
        },
        headers=customer_headers,
    )
    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "Confirmed"


@pytest.mark.asyncio
async def test_verify_payment_tampered_signature(client: AsyncClient, booking, customer_headers):
    path = f"/api/v1/bookings/{booking['id']}"
    before = (await client.get(path, headers=customer_headers)).json()

    tampered = [
        sign("order_ABC", "pay_OTHER"),
        _flip_last_char(sign("order_ABC", "pay_XYZ")),
        "not-a-signature",
    ]
    for signature in tampered:
        response = await client.post(
            "/api/v1/payments/verify",
            json={
                "booking_id": booking["id"],
                "order_id": "order_ABC",
                "payment_id": "pay_XYZ",
                "signature": signature,
            },
            headers=customer_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"kind": "invalid_signature", "detail": "Invalid payment signature"}

    after = (await client.get(path, headers=customer_headers)).json()
    assert after == before


@pytest.mark.asyncio
async def test_verify_payment_unknown_booking(client: AsyncClient, customer, customer_headers):
    response = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": 9999,
            "order_id": "order_ABC",
            "payment_id": "pay_XYZ",
            "signature": sign("order_ABC", "pay_XYZ"),
        },
        headers=customer_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_verify_payment_missing_fields(client: AsyncClient, booking, customer_headers):
    response = await client.post(
        "/api/v1/payments/verify",
        json={"booking_id": booking["id"], "order_id": "order_ABC"},
        headers=customer_headers,
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"payment_id", "signature"} <= fields


@pytest.mark.asyncio
async def test_verify_payment_confirms_from_any_status(client: AsyncClient, booking, customer_headers):
    """A verified callback confirms even a cancelled booking."""
    await client.put(f"/api/v1/bookings/{booking['id']}", json={"status": "Cancelled"}, headers=customer_headers)

    response = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": booking["id"],
            "order_id": "order_ABC",
            "payment_id": "pay_XYZ",
            "signature": sign("order_ABC", "pay_XYZ"),
        },
        headers=customer_headers,
    )
    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "Confirmed"


@pytest.mark.asyncio
async def test_checkout_flow(client: AsyncClient, customer_headers, test_event, vendor):
    """Book, create an order, verify it, then replay with a wrong signature."""
    created = await client.post(
        "/api/v1/bookings/",
        json=booking_payload(test_event, vendor, amount=5000),
        headers=customer_headers,
    )
    booking = created.json()
    assert (booking["status"], booking["payment_status"]) == ("Pending", "Pending")

    order = await client.post(
        "/api/v1/payments/create-order",
        json={"booking_id": booking["id"], "amount": 500000, "currency": "INR"},
        headers=customer_headers,
    )
    order_id = order.json()["order_id"]
    assert order_id

    verified = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": booking["id"],
            "order_id": order_id,
            "payment_id": "pay_001",
            "signature": sign(order_id, "pay_001"),
        },
        headers=customer_headers,
    )
    confirmed = verified.json()["booking"]
    assert (confirmed["status"], confirmed["payment_status"]) == ("Confirmed", "Paid")

    replay = await client.post(
        "/api/v1/payments/verify",
        json={
            "booking_id": booking["id"],
            "order_id": order_id,
            "payment_id": "pay_002",
            "signature": sign(order_id, "pay_001"),
        },
        headers=customer_headers,
    )
    assert replay.status_code == 400
    assert replay.json()["kind"] == "invalid_signature"

    current = await client.get(f"/api/v1/bookings/{booking['id']}", headers=customer_headers)
    assert current.json() == confirmed
