"""Gateway payment signatures.

The gateway signs a completed payment as the lowercase hex HMAC-SHA256 of
``"<order_id>|<payment_id>"`` keyed with the merchant's key secret. Only
the server holds that secret, so only the server can vouch for a payment.
"""
import hashlib
import hmac


def signing_message(provider_order_id: str, provider_payment_id: str) -> str:
    return f"{provider_order_id}|{provider_payment_id}"


def compute_signature(provider_order_id: str, provider_payment_id: str, secret: str) -> str:
    message = signing_message(provider_order_id, provider_payment_id)
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(
    provider_order_id: str,
    provider_payment_id: str,
    provider_signature: str,
    secret: str,
) -> bool:
    expected = compute_signature(provider_order_id, provider_payment_id, secret)
    # compare bytes: compare_digest rejects non-ASCII str
    return hmac.compare_digest(
        expected.encode("utf-8"),
        provider_signature.encode("utf-8"),
    )
