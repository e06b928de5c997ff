import logging
import math
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront_payments import config
from storefront_payments.auth import verify_token
from storefront_payments.database import SessionLocal
from storefront_payments.errors import (
    Forbidden,
    InvalidArgument,
    OrderNotFound,
    PaymentError,
    PaymentVerificationFailed,
    PersistenceWarning,
)
from storefront_payments.orders import confirm_order_intent, create_order_intent, get_order_intent
from storefront_payments.razorpay_service import create_order, to_minor_units
from storefront_payments.schemas import CreateOrderRequest, OrderIntentRequest, VerifyPaymentRequest
from storefront_payments.signature import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()

VERIFY_PAYMENT_PATH = "/verify-payment"


@router.post("/create-order")
def create_order_api(request: CreateOrderRequest, user_id: str = Depends(verify_token)):
    amount = request.amount
    if amount is None or not math.isfinite(amount) or amount <= 0:
        logger.error("Invalid amount: %s", amount)
        raise InvalidArgument("Invalid amount")

    currency = request.currency or config.home_currency()
    receipt = request.receipt or f"order_{int(time.time() * 1000)}"
    # the caller's identity always wins over client-supplied notes
    notes = {**(request.notes or {}), "user_id": user_id}

    logger.info("Creating gateway order for user %s: amount=%s currency=%s receipt=%s",
                user_id, amount, currency, receipt)

    order = create_order(to_minor_units(amount), currency, receipt, notes)

    return {
        "orderId": order["id"],
        "amount": order["amount"],
        "currency": order["currency"],
        "keyId": config.gateway_key_id(),
        "userId": user_id,
    }


def _verification_failure(exc: PaymentError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"verified": False, "error": exc.message},
    )


def _record_confirmation(order_id: str, payment_id: str, user_id: str):
    db = SessionLocal()
    try:
        confirm_order_intent(db, order_id, payment_id, user_id=user_id)
    except Forbidden:
        raise
    except Exception as exc:
        db.rollback()
        raise PersistenceWarning(
            f"Order {order_id} not updated for payment {payment_id}: {exc}"
        ) from exc
    finally:
        db.close()


@router.post(VERIFY_PAYMENT_PATH)
def verify_payment_api(request: VerifyPaymentRequest, user_id: str = Depends(verify_token)):
    gateway_order_id = request.razorpay_order_id
    payment_id = request.razorpay_payment_id

    logger.info("Verifying payment: order=%s payment=%s user=%s",
                gateway_order_id, payment_id, user_id)

    try:
        if not (gateway_order_id and payment_id and request.razorpay_signature):
            raise InvalidArgument("Missing payment details")

        secret = config.gateway_key_secret()

        if not verify_signature(gateway_order_id, payment_id, request.razorpay_signature, secret):
            raise PaymentVerificationFailed()
    except PaymentError as exc:
        logger.error("Payment verification rejected for order %s: %s", gateway_order_id, exc.message)
        return _verification_failure(exc)
    except Exception:
        logger.exception("Error verifying payment %s", payment_id)
        return _verification_failure(PaymentError())

    logger.info("Signature verified for payment %s", payment_id)

    if request.order_id:
        try:
            _record_confirmation(request.order_id, payment_id, user_id)
        except Forbidden as exc:
            logger.error("User %s tried to confirm order %s they do not own", user_id, request.order_id)
            return _verification_failure(exc)
        except PersistenceWarning as warning:
            logger.warning("Payment %s verified but bookkeeping failed: %s", payment_id, warning)

    return {"verified": True, "paymentId": payment_id}


@router.post("/orders")
def create_order_intent_api(request: OrderIntentRequest, user_id: str = Depends(verify_token)):
    db = SessionLocal()
    try:
        order = create_order_intent(db, user_id, request, request.currency or config.home_currency())
        return order.to_dict()
    finally:
        db.close()


@router.get("/orders/{order_id}")
def get_order_intent_api(order_id: str, user_id: str = Depends(verify_token)):
    db = SessionLocal()
    try:
        order = get_order_intent(db, order_id)
        if order.user_id != user_id:
            raise OrderNotFound()
        return order.to_dict()
    finally:
        db.close()
