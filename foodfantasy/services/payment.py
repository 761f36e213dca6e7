"""
PhonePe payment-gateway client.

The gateway authenticates each call with an X-VERIFY header:

    sha256_hex(<base64 payload> + <endpoint path> + <salt key>) + "###" + <salt index>

Status checks hash an empty payload with the status path.
"""
import base64
import hashlib
import json
import logging
import uuid
from typing import Any, Optional

import httpx

from foodfantasy.config import Settings
from foodfantasy.core.errors import PaymentGatewayError, PaymentNotConfiguredError

log = logging.getLogger(__name__)

PAY_ENDPOINT = "/pg/v1/pay"
STATUS_ENDPOINT = "/pg/v1/status"


def generate_checksum(payload: str, endpoint: str, salt_key: str, salt_index: str) -> str:
    digest = hashlib.sha256(f"{payload}{endpoint}{salt_key}".encode("utf-8")).hexdigest()
    return f"{digest}###{salt_index}"


def encode_payload(payload: dict) -> str:
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def to_paise(amount: float) -> int:
    return int(round(amount * 100))


class PhonePeClient:
    def __init__(
        self,
        merchant_id: str,
        salt_key: str,
        salt_index: str,
        pay_url: str,
        status_url: str,
        redirect_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.merchant_id = merchant_id
        self.salt_key = salt_key
        self.salt_index = salt_index
        self.pay_url = pay_url
        self.status_url = status_url.rstrip("/")
        self.redirect_url = redirect_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PhonePeClient":
        if not settings.payment_enabled:
            raise PaymentNotConfiguredError()
        return cls(
            merchant_id=settings.phonepe_merchant_id,
            salt_key=settings.phonepe_salt_key,
            salt_index=settings.phonepe_salt_index,
            pay_url=settings.phonepe_base_url,
            status_url=settings.phonepe_status_url,
            redirect_url=settings.phonepe_redirect_url,
            timeout=settings.phonepe_timeout_seconds,
            transport=transport,
        )

    def checksum(self, payload: str, endpoint: str) -> str:
        return generate_checksum(payload, endpoint, self.salt_key, self.salt_index)

    def build_pay_payload(self, amount: float, transaction_id: str) -> dict[str, Any]:
        return {
            "merchantId": self.merchant_id,
            "merchantTransactionId": transaction_id,
            "amount": to_paise(amount),
            "redirectUrl": f"{self.redirect_url}?orderId={transaction_id}",
            "redirectMode": "REDIRECT",
            "paymentInstrument": {"type": "PAY_PAGE"},
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def initiate(self, amount: float, order_id: Optional[str] = None) -> dict[str, str]:
        """Registers the payment and returns the gateway page the customer is redirected to."""
        transaction_id = order_id or str(uuid.uuid4())
        encoded = encode_payload(self.build_pay_payload(amount, transaction_id))
        headers = {
            "Content-Type": "application/json",
            "X-VERIFY": self.checksum(encoded, PAY_ENDPOINT),
        }

        try:
            async with self._client() as client:
                response = await client.post(self.pay_url, json={"request": encoded}, headers=headers)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("phonepe initiate failed: txn=%s error=%s", transaction_id, e)
            raise PaymentGatewayError(str(e)) from e

        try:
            redirect_url = body["data"]["instrumentResponse"]["redirectInfo"]["url"]
        except (KeyError, TypeError) as e:
            log.error("phonepe initiate returned no redirect: txn=%s body=%s", transaction_id, body)
            raise PaymentGatewayError(body.get("message") if isinstance(body, dict) else None) from e

        log.info("phonepe initiate: txn=%s amount=%s", transaction_id, amount)
        return {"redirect_url": redirect_url, "merchant_transaction_id": transaction_id}

    async def check_status(self, transaction_id: str) -> dict[str, Any]:
        """Returns the gateway's status document unchanged."""
        endpoint = f"{STATUS_ENDPOINT}/{self.merchant_id}/{transaction_id}"
        headers = {
            "Content-Type": "application/json",
            "X-VERIFY": self.checksum("", endpoint),
            "X-MERCHANT-ID": self.merchant_id,
        }

        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.status_url}/{self.merchant_id}/{transaction_id}", headers=headers
                )
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("phonepe status failed: txn=%s error=%s", transaction_id, e)
            raise PaymentGatewayError(str(e)) from e
