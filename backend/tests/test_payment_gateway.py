"""
Unit tests for the Razorpay gateway adapter.
"""

import hashlib
import hmac

import pytest
import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError

from weddinghub.core.exceptions import GatewayUnavailable
from weddinghub.services.payment_gateway import RazorpayGateway


class OrderApi:
    """Replaces ``client.order``; answers with ``reply`` or raises it."""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, data=None, **kwargs):
        self.calls.append((data, kwargs))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def gateway_with(order_api, key_id="rzp_test_key", key_secret="secret", timeout=10.0) -> RazorpayGateway:
    client = razorpay.Client(auth=(key_id, key_secret))
    client.order = order_api
    return RazorpayGateway(key_id=key_id, key_secret=key_secret, timeout=timeout, client=client)


def signature(secret: str, order_id: str, payment_id: str) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def test_verify_signature():
    gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="secret")
    good = signature("secret", "order_1", "pay_1")

    assert gateway.verify_signature("order_1", "pay_1", good)
    assert not gateway.verify_signature("order_1", "pay_2", good)
    assert not gateway.verify_signature("order_2", "pay_1", good)
    assert not gateway.verify_signature("order_1", "pay_1", signature("other", "order_1", "pay_1"))
    assert not gateway.verify_signature("order_1", "pay_1", "")


def test_verify_signature_non_ascii():
    gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="secret")
    assert not gateway.verify_signature("order_1", "pay_1", "sïgnature")


def test_verify_signature_without_secret():
    gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="")
    with pytest.raises(GatewayUnavailable):
        gateway.verify_signature("order_1", "pay_1", "anything")


def test_configured():
    assert RazorpayGateway(key_id="k", key_secret="s").configured
    assert not RazorpayGateway(key_id="k", key_secret="").configured
    assert not RazorpayGateway(key_id="", key_secret="s").configured


@pytest.mark.asyncio
async def test_create_order():
    order_api = OrderApi({"id": "order_42", "amount": 250000, "currency": "INR"})

    order = await gateway_with(order_api, timeout=4.0).create_order(250000, "INR", receipt="booking_3")

    assert order.order_id == "order_42"
    assert order.amount == 250000
    assert order.currency == "INR"
    assert order_api.calls == [
        ({"amount": 250000, "currency": "INR", "receipt": "booking_3"}, {"timeout": 4.0}),
    ]


@pytest.mark.asyncio
async def test_create_order_without_credentials_makes_no_call():
    order_api = OrderApi({})

    with pytest.raises(GatewayUnavailable):
        await gateway_with(order_api, key_secret="").create_order(100, "INR", receipt="booking_1")
    assert order_api.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        BadRequestError("Authentication failed"),
        GatewayError("upstream"),
        ServerError("internal"),
    ],
)
async def test_create_order_rejected(error):
    with pytest.raises(GatewayUnavailable):
        await gateway_with(OrderApi(error)).create_order(100, "INR", receipt="booking_1")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
        ValueError("Expecting value: line 1 column 1"),
    ],
)
async def test_create_order_network_error(error):
    order_api = OrderApi(error)

    with pytest.raises(GatewayUnavailable):
        await gateway_with(order_api).create_order(100, "INR", receipt="booking_1")
    # Not retried
    assert len(order_api.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"amount": 100, "currency": "INR"},
        {"id": "order_1", "amount": "lots", "currency": "INR"},
        ["not", "an", "object"],
        None,
    ],
)
async def test_create_order_malformed_response(payload):
    with pytest.raises(GatewayUnavailable):
        await gateway_with(OrderApi(payload)).create_order(100, "INR", receipt="booking_1")
