"""Checkout client flow.

Sequences Create-Order, the gateway's hosted payment UI and
Verify-Payment from the storefront's side. Nothing here is trusted by the
server: the only server-issued value used to configure the hosted UI is
the key id returned by Create-Order, and the only success callback
accepted is one for the gateway order this flow opened.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import requests

logger = logging.getLogger(__name__)

CHECKOUT_SCRIPT_URL = "https://checkout.razorpay.com/v1/checkout.js"

GATEWAY_ERROR_MESSAGE = "Payment gateway error, please retry"
VERIFICATION_ERROR_MESSAGE = "Payment could not be verified"

GATEWAY_CALLBACK_FIELDS = ("razorpay_order_id", "razorpay_payment_id", "razorpay_signature")


class ScriptState(str, Enum):
    NOT_LOADED = "not-loaded"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_ERROR = "load-error"


class AttemptStatus(str, Enum):
    """Outcome of a single hosted-UI session."""
    OPEN = "open"
    VERIFIED = "verified"
    DISMISSED = "dismissed"
    FAILED = "failed"


class CheckoutError(Exception):
    """Carries a message that is safe to show the shopper."""

    def __init__(self, user_message, status_code=None):
        self.user_message = user_message
        self.status_code = status_code
        super().__init__(user_message)


class ScriptNotLoaded(CheckoutError):
    def __init__(self):
        super().__init__(GATEWAY_ERROR_MESSAGE)


def _fetch_script(url: str) -> bool:
    response = requests.get(url, timeout=10)
    return response.ok


class GatewayScript:
    """Load state of the gateway's checkout script."""

    def __init__(self, fetch: Callable[[str], bool] = None, url: str = CHECKOUT_SCRIPT_URL):
        self.url = url
        self.state = ScriptState.NOT_LOADED
        self._fetch = fetch or _fetch_script

    @property
    def is_loaded(self) -> bool:
        return self.state == ScriptState.LOADED

    def load(self) -> ScriptState:
        # a failed load can be retried; a completed one is kept
        if self.state in (ScriptState.LOADED, ScriptState.LOADING):
            return self.state

        self.state = ScriptState.LOADING
        try:
            loaded = self._fetch(self.url)
        except requests.RequestException as exc:
            logger.error("Failed to load gateway script: %s", exc)
            loaded = False

        self.state = ScriptState.LOADED if loaded else ScriptState.LOAD_ERROR
        return self.state


@dataclass
class HostedCheckoutOptions:
    key: str
    amount: int
    currency: str
    order_id: str
    name: Optional[str] = None
    prefill: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        options = {
            "key": self.key,
            "amount": self.amount,
            "currency": self.currency,
            "order_id": self.order_id,
            "prefill": self.prefill,
        }
        if self.name:
            options["name"] = self.name
        return options


@dataclass
class CheckoutAttempt:
    gateway_order_id: str
    amount: int
    currency: str
    key_id: str
    order_id: Optional[str] = None
    status: AttemptStatus = AttemptStatus.OPEN
    payment_id: Optional[str] = None


class CheckoutFlow:
    """Drive one shopper's checkout against the payment service.

    `http` is anything with a requests-style ``post(url, json=, headers=)``.
    """

    def __init__(self, token: str, script: GatewayScript = None, http=None,
                 base_url: str = "", store_name: str = None):
        self.token = token
        self.script = script or GatewayScript()
        self.http = http or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.store_name = store_name
        self.attempt: Optional[CheckoutAttempt] = None

    def _post(self, path, payload):
        return self.http.post(
            f"{self.base_url}{path}",
            json=payload,
            headers={"Authorization": f"Bearer {self.token}"},
        )

    def begin(self, amount, order_id=None, currency=None, receipt=None, notes=None,
              prefill=None) -> HostedCheckoutOptions:
        """Create a gateway order and return the options for the hosted UI."""
        if self.script.load() != ScriptState.LOADED:
            raise ScriptNotLoaded()

        payload = {"amount": amount}
        if currency:
            payload["currency"] = currency
        if receipt:
            payload["receipt"] = receipt
        if notes:
            payload["notes"] = notes

        response = self._post("/create-order", payload)
        if response.status_code != 200:
            logger.error("Create-order failed (%s): %s", response.status_code, response.text)
            raise CheckoutError(GATEWAY_ERROR_MESSAGE, status_code=response.status_code)

        data = response.json()
        self.attempt = CheckoutAttempt(
            gateway_order_id=data["orderId"],
            amount=data["amount"],
            currency=data["currency"],
            key_id=data["keyId"],
            order_id=order_id,
        )
        return HostedCheckoutOptions(
            key=self.attempt.key_id,
            amount=self.attempt.amount,
            currency=self.attempt.currency,
            order_id=self.attempt.gateway_order_id,
            name=self.store_name,
            prefill=prefill or {},
        )

    def _open_attempt(self) -> CheckoutAttempt:
        if self.attempt is None or self.attempt.status != AttemptStatus.OPEN:
            raise CheckoutError("No payment in progress")
        return self.attempt

    def complete(self, callback: dict) -> dict:
        """Forward the hosted UI's success callback to Verify-Payment."""
        attempt = self._open_attempt()

        if callback.get("razorpay_order_id") != attempt.gateway_order_id:
            logger.error("Success callback for unknown gateway order %s",
                         callback.get("razorpay_order_id"))
            attempt.status = AttemptStatus.FAILED
            raise CheckoutError(VERIFICATION_ERROR_MESSAGE)

        payload = {name: callback.get(name) for name in GATEWAY_CALLBACK_FIELDS}
        if attempt.order_id:
            payload["order_id"] = attempt.order_id

        response = self._post("/verify-payment", payload)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code != 200 or not body.get("verified"):
            logger.error("Payment verification failed (%s): %s",
                         response.status_code, body.get("error"))
            attempt.status = AttemptStatus.FAILED
            raise CheckoutError(VERIFICATION_ERROR_MESSAGE, status_code=response.status_code)

        attempt.status = AttemptStatus.VERIFIED
        attempt.payment_id = body["paymentId"]
        return body

    def dismiss(self):
        """The shopper closed the hosted UI; the order stays pending."""
        attempt = self._open_attempt()
        attempt.status = AttemptStatus.DISMISSED
        logger.info("Checkout for gateway order %s dismissed", attempt.gateway_order_id)
