import logging

import requests

from storefront_payments import config
from storefront_payments.errors import GatewayError

logger = logging.getLogger(__name__)


def to_minor_units(amount) -> int:
    """Convert a base-unit amount (e.g. rupees) to integer minor units (paise)."""
    return int(round(amount * 100))


def create_order(amount_minor: int, currency: str, receipt: str, notes: dict) -> dict:
    """Mint a provider-side order. Returns the gateway's order document."""
    key_id = config.gateway_key_id()
    key_secret = config.gateway_key_secret()

    payload = {
        "amount": amount_minor,
        "currency": currency,
        "receipt": receipt,
        "notes": notes,
    }
    logger.info("Sending order to gateway: amount=%s currency=%s receipt=%s",
                amount_minor, currency, receipt)

    try:
        response = requests.post(
            f"{config.gateway_url()}/orders",
            json=payload,
            auth=(key_id, key_secret),
            timeout=config.gateway_timeout(),
        )
    except requests.Timeout:
        logger.error("Gateway timed out creating order %s", receipt)
        raise GatewayError("Payment gateway timed out", status_code=504)
    except requests.RequestException as exc:
        logger.error("Gateway unreachable: %s", exc)
        raise GatewayError("Payment gateway unavailable", status_code=502)

    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.ok:
        description = (data.get("error") or {}).get("description") or "Failed to create order"
        logger.error("Gateway error %s: %s", response.status_code, description)
        raise GatewayError(description, status_code=response.status_code)

    logger.info("Gateway order created: %s", data.get("id"))
    return data
