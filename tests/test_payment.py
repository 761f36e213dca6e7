import base64
import json

import httpx
import pytest

from foodfantasy.api.payment_routes import get_payment_client
from foodfantasy.main import app
from foodfantasy.services.payment import (
    PAY_ENDPOINT,
    PhonePeClient,
    encode_payload,
    generate_checksum,
    to_paise,
)

PAY_URL = "https://gateway.test/pg/v1/pay"
STATUS_URL = "https://gateway.test/pg/v1/status"


def make_client(handler):
    return PhonePeClient(
        merchant_id="MERCHANT",
        salt_key="salt-key",
        salt_index="1",
        pay_url=PAY_URL,
        status_url=STATUS_URL,
        redirect_url="https://shop.test/payment-success",
        transport=httpx.MockTransport(handler),
    )


def use_gateway(handler):
    app.dependency_overrides[get_payment_client] = lambda: make_client(handler)


def test_checksum_matches_known_digest():
    assert encode_payload({"a": 1}) == "eyJhIjoxfQ=="
    assert generate_checksum("eyJhIjoxfQ==", PAY_ENDPOINT, "salt-key", "1") == (
        "5446775bd0c10186f4773b1eb573dfea07b166d242743a1d4596b0065d01654c###1"
    )


def test_status_checksum_hashes_empty_payload():
    assert generate_checksum("", "/pg/v1/status/MERCHANT/TXN-1", "salt-key", "1") == (
        "bbc3400a9b9da52e879bb422db04eb012a9d9b494d498fa3a2c6fb4874c2bee7###1"
    )


@pytest.mark.parametrize("amount,paise", [(1, 100), (249.5, 24950), (19.99, 1999)])
def test_amount_is_sent_in_paise(amount, paise):
    assert to_paise(amount) == paise


def test_initiate_posts_signed_payload(client):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["verify"] = request.headers["X-VERIFY"]
        seen["request"] = json.loads(request.content)["request"]
        return httpx.Response(
            200,
            json={"success": True, "data": {"instrumentResponse": {"redirectInfo": {"url": "https://pay.test/page/1"}}}},
        )

    use_gateway(handler)
    res = client.post("/api/payment/initiate", json={"amount": 360, "orderId": "ORDER-42"})

    assert res.status_code == 200, res.text
    assert res.json()["data"] == {"redirectUrl": "https://pay.test/page/1", "merchantTransactionId": "ORDER-42"}

    assert seen["url"] == PAY_URL
    payload = json.loads(base64.b64decode(seen["request"]))
    assert payload == {
        "merchantId": "MERCHANT",
        "merchantTransactionId": "ORDER-42",
        "amount": 36000,
        "redirectUrl": "https://shop.test/payment-success?orderId=ORDER-42",
        "redirectMode": "REDIRECT",
        "paymentInstrument": {"type": "PAY_PAGE"},
    }
    assert seen["verify"] == generate_checksum(seen["request"], PAY_ENDPOINT, "salt-key", "1")


def test_initiate_generates_transaction_id(client):
    def handler(request):
        return httpx.Response(
            200, json={"data": {"instrumentResponse": {"redirectInfo": {"url": "https://pay.test/x"}}}}
        )

    use_gateway(handler)
    res = client.post("/api/payment/initiate", json={"amount": 10})

    assert res.status_code == 200
    assert len(res.json()["data"]["merchantTransactionId"]) == 36


@pytest.mark.parametrize("amount", [0, -5, 0.004])
def test_initiate_rejects_amounts_below_one_paisa(client, amount):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    use_gateway(handler)
    res = client.post("/api/payment/initiate", json={"amount": amount})

    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "amount"
    assert calls == []


def test_gateway_failure_is_payment_gateway_error(client):
    use_gateway(lambda request: httpx.Response(502, json={"message": "bad gateway"}))

    res = client.post("/api/payment/initiate", json={"amount": 50})

    assert res.status_code == 500
    assert res.json()["code"] == "PAYMENT_GATEWAY_ERROR"


def test_unexpected_gateway_body_is_payment_gateway_error(client):
    use_gateway(lambda request: httpx.Response(200, json={"success": False, "message": "KEY_NOT_CONFIGURED"}))

    res = client.post("/api/payment/initiate", json={"amount": 50})

    assert res.status_code == 500
    assert res.json()["message"] == "KEY_NOT_CONFIGURED"


def test_status_passes_gateway_body_through(client):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["headers"] = dict(request.headers)
        return httpx.Response(200, json={"success": True, "code": "PAYMENT_SUCCESS", "data": {"state": "COMPLETED"}})

    use_gateway(handler)
    res = client.get("/api/payment/status/TXN-1")

    assert res.status_code == 200
    assert res.json() == {"success": True, "code": "PAYMENT_SUCCESS", "data": {"state": "COMPLETED"}}
    assert seen["url"] == f"{STATUS_URL}/MERCHANT/TXN-1"
    assert seen["headers"]["x-merchant-id"] == "MERCHANT"
    assert seen["headers"]["x-verify"] == (
        "bbc3400a9b9da52e879bb422db04eb012a9d9b494d498fa3a2c6fb4874c2bee7###1"
    )


def test_unconfigured_gateway_is_503(client):
    res = client.post("/api/payment/initiate", json={"amount": 50})

    assert res.status_code == 503
    assert res.json()["code"] == "PAYMENT_NOT_CONFIGURED"
